"""Fetch the feed, archive its products when it changed, purge old files."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from archive_products.config import ArchiveConfig
from archive_products.content_store import ContentStore
from archive_products.detect_changes import has_updates
from archive_products.errors import FeedFetchError, StorageError
from archive_products.extract_products.categories import PRODUCT_CATEGORIES
from archive_products.extract_products.extract_products import extract_products
from archive_products.fetch_feed.fetch_feed import feed_text, fetch_feed, parse_feed
from archive_products.models import FeedSnapshot, RunSummary
from archive_products.store_products.archive import archive
from archive_products.store_products.purge import purge
from common.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d-%H%M"


def load_previous_snapshot(store: ContentStore, snapshot_name: str) -> Optional[FeedSnapshot]:
    """Load the last persisted feed. Unreadable snapshots count as absent."""
    try:
        if not store.exists(snapshot_name):
            logger.info("No previous feed snapshot found")
            return None
        return parse_feed(store.read(snapshot_name))
    except (StorageError, FeedFetchError) as e:
        logger.warning("Ignoring unreadable feed snapshot %s: %s", snapshot_name, e)
        return None


def archive_products(
    config: ArchiveConfig,
    store: ContentStore,
    now: datetime | None = None,
) -> RunSummary:
    """Run one archival sweep.

    Raises:
        FeedFetchError: If the feed cannot be fetched or parsed.
    """
    now = ensure_utc(now) if now is not None else utc_now()
    timestamp = now.strftime(TIMESTAMP_FORMAT)

    data = fetch_feed(config.feed_url, config.transport)
    current = parse_feed(data)
    logger.info("Feed has %d items", len(current.entries))

    previous = load_previous_snapshot(store, config.snapshot_name)
    if not has_updates(previous, current):
        logger.info("No updates found")
        return RunSummary(updated=False, timestamp=timestamp)

    try:
        store.write(data, config.snapshot_name)
    except StorageError as e:
        logger.error("Failed to save feed snapshot: %s", e)

    logger.info("Writing for %s", timestamp)
    summary = RunSummary(updated=True, timestamp=timestamp)
    text = feed_text(data)

    for name in config.categories:
        category = PRODUCT_CATEGORIES.get(name)
        if category is None:
            logger.warning("Skipping unknown category: %s", name)
            continue
        references = extract_products(category, text)
        summary.categories.append(
            archive(
                store,
                category.name,
                references,
                timestamp,
                config.transport,
                config.archive_dir,
                max_workers=config.max_workers,
            )
        )

    summary.purged = purge(
        store,
        config.archive_dir,
        retention=timedelta(days=config.retention_days),
        now=now,
    )
    logger.info("Purged %d files older than %d days", summary.purged, config.retention_days)

    logger.info("Archiving success.")
    return summary
