"""Retention sweep over the archive tree."""

import logging
from datetime import datetime, timedelta

from archive_products.content_store import ContentStore
from archive_products.errors import PurgeError, StorageError
from common.datetime import ensure_utc, format_age, utc_now

logger = logging.getLogger(__name__)

RETENTION = timedelta(days=180)


def purge(
    store: ContentStore,
    *parts: str,
    retention: timedelta = RETENTION,
    now: datetime | None = None,
) -> int:
    """Delete every file under ``parts`` last modified more than ``retention`` ago.

    Returns:
        Number of files deleted.
    """
    now = ensure_utc(now) if now is not None else utc_now()

    try:
        children = store.list(*parts)
    except StorageError as e:
        logger.error("Failed to list %s: %s", "/".join(parts), e)
        return 0

    deleted = 0
    for child in children:
        if child.is_dir:
            deleted += purge(store, *parts, child.name, retention=retention, now=now)
            continue

        if child.modified_at is None:
            continue

        modified_at = ensure_utc(child.modified_at)
        if now - modified_at <= retention:
            continue

        logger.info("Deleting %s (%s old)...", child.name, format_age(modified_at, now))
        try:
            store.delete(*parts, child.name)
            deleted += 1
        except PurgeError as e:
            logger.error("%s", e)

    return deleted
