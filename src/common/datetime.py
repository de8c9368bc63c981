"""Datetime helpers."""

from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta

_UNITS = ("years", "months", "days", "hours", "minutes")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_age(then: datetime, now: datetime | None = None) -> str:
    """Describe the time elapsed since ``then``, e.g. "6 months, 2 days".

    At most the two largest non-zero units are shown.
    """
    now = ensure_utc(now) if now is not None else utc_now()
    delta = relativedelta(now, ensure_utc(then))

    parts = []
    for unit in _UNITS:
        value = getattr(delta, unit)
        if value:
            label = unit if value != 1 else unit[:-1]
            parts.append(f"{value} {label}")
        if len(parts) == 2:
            break

    return ", ".join(parts) if parts else "less than a minute"
