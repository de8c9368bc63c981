"""Feed fetching and parsing."""

import logging
import time

import feedparser
import requests

from archive_products.config import TransportConfig
from archive_products.errors import FeedFetchError
from archive_products.fetch_feed.transport import fetch_bytes
from archive_products.models import FeedEntry, FeedSnapshot

logger = logging.getLogger(__name__)


def cache_busted_url(feed_url: str, now_ms: int | None = None) -> str:
    """Append the current epoch milliseconds so caches serve a fresh copy."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    separator = "&" if "?" in feed_url else "?"
    return f"{feed_url}{separator}{now_ms}"


def fetch_feed(feed_url: str, transport: TransportConfig) -> bytes:
    """Download the raw feed document.

    Raises:
        FeedFetchError: If the request fails.
    """
    url = cache_busted_url(feed_url)
    logger.info("Fetching feed %s", url)
    try:
        return fetch_bytes(url, transport)
    except requests.RequestException as e:
        raise FeedFetchError(f"Failed to fetch feed {feed_url}: {e}") from e


def parse_feed(data: bytes) -> FeedSnapshot:
    """Parse a raw feed document into its (title, description) entries.

    Raises:
        FeedFetchError: If the document is not a readable feed.
    """
    feed = feedparser.parse(data)

    if feed.bozo and not feed.entries:
        raise FeedFetchError(f"Feed could not be parsed: {feed.get('bozo_exception')}")

    if feed.bozo:
        logger.warning("Feed has parsing issues: %s", feed.get("bozo_exception"))

    entries = []
    for entry in feed.entries:
        title = entry.get("title", "")
        description = entry.get("description") or entry.get("summary", "")
        entries.append(FeedEntry(title=title, description=description))

    return FeedSnapshot(entries=entries)


def feed_text(data: bytes) -> str:
    """Decode a raw feed for pattern matching."""
    return data.decode("utf-8", errors="replace")
