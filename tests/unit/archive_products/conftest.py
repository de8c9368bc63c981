"""Shared fixtures for archive_products tests."""

import pytest

from archive_products.config import TransportConfig
from archive_products.content_store import LocalContentStore


def make_feed(items: list[tuple[str, str]]) -> bytes:
    """Build a minimal JTWC-style RSS document."""
    body = "".join(
        f"<item><title>{title}</title><description><![CDATA[{description}]]></description></item>"
        for title, description in items
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>JTWC</title>'
        "<link>https://www.metoc.navy.mil/jtwc/jtwc.html</link>"
        "<description>Joint Typhoon Warning Center</description>"
        f"{body}</channel></rss>"
    ).encode("utf-8")


STORM_DESCRIPTION = (
    '<p><a href="https://example.mil/a/storm01web.txt">TC Warning Text</a></p>'
    '<p><a href="https://example.mil/b/storm01.gif">TC Warning Graphic</a></p>'
)


@pytest.fixture
def sample_feed() -> bytes:
    return make_feed([("Tropical Storm 01W (One) Warning #01", STORM_DESCRIPTION)])


@pytest.fixture
def store(tmp_path) -> LocalContentStore:
    return LocalContentStore(tmp_path)


@pytest.fixture
def transport() -> TransportConfig:
    return TransportConfig(timeout=5, headers={"User-Agent": "test"})


@pytest.fixture
def feed_factory():
    return make_feed
