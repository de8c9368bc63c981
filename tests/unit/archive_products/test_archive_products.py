"""Tests for archive_products.archive_products orchestration."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
import requests

from archive_products.archive_products import archive_products, load_previous_snapshot
from archive_products.config import ArchiveConfig
from archive_products.errors import FeedFetchError, StorageError

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
TEXT_URL = "https://example.mil/a/storm01web.txt"
GIF_URL = "https://example.mil/b/storm01.gif"


def responder(feed: bytes, products: dict):
    def _fetch(url, transport):
        if "jtwc.rss" in url:
            return feed
        result = products[url]
        if isinstance(result, Exception):
            raise result
        return result
    return _fetch


@pytest.fixture
def config() -> ArchiveConfig:
    return ArchiveConfig(
        feed_url="https://www.metoc.navy.mil/jtwc/rss/jtwc.rss",
        categories=["text", "gif", "prog", "jmv"],
    )


def archived_files(store) -> list[str]:
    files = []
    for category in store.list("jtwc_products"):
        for child in store.list("jtwc_products", category.name):
            files.append(f"{category.name}/{child.name}")
    return sorted(files)


@patch("archive_products.store_products.archive.fetch_bytes")
@patch("archive_products.fetch_feed.fetch_feed.fetch_bytes")
class TestArchiveProducts:
    def test_end_to_end_first_run(self, mock_feed, mock_product, config, store, sample_feed) -> None:
        mock_feed.side_effect = responder(sample_feed, {})
        mock_product.side_effect = responder(sample_feed, {TEXT_URL: b"WARNING TEXT", GIF_URL: b"GIF89a"})

        summary = archive_products(config, store, now=NOW)

        assert summary.updated is True
        assert summary.timestamp == "2024-03-01-1200"
        assert archived_files(store) == [
            "gif/2024-03-01-1200-storm01.gif",
            "gif/latest-storm01.gif",
            "text/2024-03-01-1200-storm01web.txt",
            "text/latest-storm01web.txt",
        ]
        assert store.read("jtwc_products", "text", "2024-03-01-1200-storm01web.txt") == b"WARNING TEXT"
        assert store.read("jtwc_products", "text", "latest-storm01web.txt") == b"WARNING TEXT"
        assert store.read("jtwc_products", "gif", "2024-03-01-1200-storm01.gif") == b"GIF89a"
        assert store.read("jtwc_products", "gif", "latest-storm01.gif") == b"GIF89a"

    def test_persists_raw_feed_snapshot(self, mock_feed, mock_product, config, store, sample_feed) -> None:
        mock_feed.side_effect = responder(sample_feed, {})
        mock_product.side_effect = responder(sample_feed, {TEXT_URL: b"t", GIF_URL: b"g"})

        archive_products(config, store, now=NOW)

        assert store.read("jtwc.rss") == sample_feed

    def test_unchanged_feed_is_a_no_op(self, mock_feed, mock_product, config, store, sample_feed) -> None:
        mock_feed.side_effect = responder(sample_feed, {})
        mock_product.side_effect = responder(sample_feed, {TEXT_URL: b"t", GIF_URL: b"g"})
        archive_products(config, store, now=NOW)
        before = archived_files(store)
        mock_product.reset_mock()

        summary = archive_products(config, store, now=NOW.replace(hour=13))

        assert summary.updated is False
        assert summary.categories == []
        assert archived_files(store) == before
        mock_product.assert_not_called()

    def test_changed_feed_only_rewrites_changed_products(
        self, mock_feed, mock_product, config, store, sample_feed, feed_factory
    ) -> None:
        mock_feed.side_effect = responder(sample_feed, {})
        mock_product.side_effect = responder(sample_feed, {TEXT_URL: b"warning 1", GIF_URL: b"g"})
        archive_products(config, store, now=NOW)

        updated_feed = feed_factory([
            ("Tropical Storm 01W (One) Warning #02",
             f'<a href="{TEXT_URL}">Text</a> <a href="{GIF_URL}">Graphic</a>'),
        ])
        mock_feed.side_effect = responder(updated_feed, {})
        mock_product.side_effect = responder(updated_feed, {TEXT_URL: b"warning 2", GIF_URL: b"g"})

        summary = archive_products(config, store, now=NOW.replace(hour=18))

        assert "text/2024-03-01-1800-storm01web.txt" in archived_files(store)
        assert "gif/2024-03-01-1800-storm01.gif" not in archived_files(store)
        assert store.read("jtwc_products", "text", "latest-storm01web.txt") == b"warning 2"
        text_summary = next(c for c in summary.categories if c.category == "text")
        gif_summary = next(c for c in summary.categories if c.category == "gif")
        assert text_summary.archived == 1
        assert gif_summary.unchanged == 1

    def test_product_failure_does_not_stop_run(self, mock_feed, mock_product, config, store, sample_feed) -> None:
        mock_feed.side_effect = responder(sample_feed, {})
        mock_product.side_effect = responder(
            sample_feed, {TEXT_URL: requests.HTTPError("500"), GIF_URL: b"GIF89a"}
        )

        with patch("archive_products.archive_products.purge", return_value=0) as mock_purge:
            summary = archive_products(config, store, now=NOW)

        mock_purge.assert_called_once()
        assert archived_files(store) == ["gif/2024-03-01-1200-storm01.gif", "gif/latest-storm01.gif"]
        assert sum(c.failed for c in summary.categories) == 1

    def test_feed_failure_is_fatal(self, mock_feed, mock_product, config, store) -> None:
        mock_feed.side_effect = requests.ConnectionError("down")

        with pytest.raises(FeedFetchError):
            archive_products(config, store, now=NOW)

        assert not store.exists("jtwc.rss")
        mock_product.assert_not_called()

    def test_unknown_category_is_skipped(self, mock_feed, mock_product, config, store, sample_feed) -> None:
        config.categories = ["text", "radar"]
        mock_feed.side_effect = responder(sample_feed, {})
        mock_product.side_effect = responder(sample_feed, {TEXT_URL: b"t"})

        summary = archive_products(config, store, now=NOW)

        assert [c.category for c in summary.categories] == ["text"]

    def test_purges_old_files_after_archiving(self, mock_feed, mock_product, config, store, sample_feed) -> None:
        mock_feed.side_effect = responder(sample_feed, {})
        mock_product.side_effect = responder(sample_feed, {TEXT_URL: b"t", GIF_URL: b"g"})

        with patch("archive_products.archive_products.purge", return_value=3) as mock_purge:
            summary = archive_products(config, store, now=NOW)

        assert summary.purged == 3
        args, kwargs = mock_purge.call_args
        assert args == (store, "jtwc_products")
        assert kwargs["retention"].days == 180
        assert kwargs["now"] == NOW


class TestLoadPreviousSnapshot:
    def test_missing_snapshot(self, store) -> None:
        assert load_previous_snapshot(store, "jtwc.rss") is None

    def test_corrupt_snapshot_counts_as_absent(self, store) -> None:
        store.write(b"not a feed", "jtwc.rss")
        assert load_previous_snapshot(store, "jtwc.rss") is None

    def test_failed_existence_check_counts_as_absent(self, store) -> None:
        with patch.object(store, "exists", side_effect=StorageError("403 Forbidden")):
            assert load_previous_snapshot(store, "jtwc.rss") is None

    def test_parses_stored_snapshot(self, store, sample_feed) -> None:
        store.write(sample_feed, "jtwc.rss")
        snapshot = load_previous_snapshot(store, "jtwc.rss")
        assert snapshot.entries[0].title == "Tropical Storm 01W (One) Warning #01"
