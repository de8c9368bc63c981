"""Feed change detection."""

import logging
from typing import Optional

from archive_products.models import FeedSnapshot

logger = logging.getLogger(__name__)


def entries_by_title(snapshot: FeedSnapshot) -> dict[str, str]:
    """Map titles to descriptions. The last entry wins when titles repeat."""
    pairs: dict[str, str] = {}
    for entry in snapshot.entries:
        if entry.title in pairs and pairs[entry.title] != entry.description:
            logger.warning("Duplicate feed title with differing description: %s", entry.title)
        pairs[entry.title] = entry.description
    return pairs


def has_updates(previous: Optional[FeedSnapshot], current: FeedSnapshot) -> bool:
    """Return True if ``current`` has any title that is new or whose description changed.

    No previous snapshot means everything is new.
    """
    if previous is None:
        return True

    old_pairs = entries_by_title(previous)
    for title, description in entries_by_title(current).items():
        if title not in old_pairs or old_pairs[title] != description:
            logger.info("Feed item changed: %s", title)
            return True

    return False
