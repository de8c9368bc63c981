"""CLI for archiving JTWC products."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from archive_products.archive_products import archive_products
from archive_products.config import load_config
from archive_products.content_store import get_content_store
from archive_products.errors import FeedFetchError
from archive_products.helpers import parse_archive_products_args, parse_categories
from common.cli_helpers import setup_logging

logger = logging.getLogger(__name__)


def run(argv: list[str] | None = None) -> int:
    """Run one archival sweep and return the process exit code."""
    args = parse_archive_products_args(argv)

    try:
        config = load_config(args.config)
        config.categories = parse_categories(args.categories or config.categories)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    if args.workdir:
        config.storage.local_path = args.workdir
    if args.max_workers:
        config.max_workers = args.max_workers

    try:
        store = get_content_store(config.storage)
        archive_products(config, store)
    except FeedFetchError as e:
        logger.error("Failed to archive: %s", e)
        return 1
    except Exception:
        logger.exception("Failed to archive.")
        return 1

    return 0


def main() -> None:
    load_dotenv()
    setup_logging()
    sys.exit(run())


if __name__ == "__main__":
    main()
