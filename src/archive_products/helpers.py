"""Helper functions for archive_products CLI."""

from __future__ import annotations

import argparse
import logging

from archive_products.extract_products.categories import PRODUCT_CATEGORIES
from common.cli_helpers import parse_csv_list, positive_int

logger = logging.getLogger(__name__)


def parse_categories(value: str | list[str] | None) -> list[str]:
    '''Parse a category selection into a list of known category names.'''

    if isinstance(value, str):
        value = parse_csv_list(value)

    # Nothing selected, or "all", means every category
    if not value or any(v.lower() == "all" for v in value):
        return list(PRODUCT_CATEGORIES.keys())

    valid_categories = set(PRODUCT_CATEGORIES.keys())
    for category in value:
        if category not in valid_categories:
            logger.warning("Invalid category: %s", category)

    categories = [c for c in value if c in valid_categories]

    if not categories:
        raise ValueError(
            f"No valid categories provided. Valid categories: {', '.join(sorted(valid_categories))}"
        )

    return categories


def parse_archive_products_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for archive_products.'''

    parser = argparse.ArgumentParser(
        description="Archive JTWC products referenced by the JTWC RSS feed"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config name (test/prod) or path to YAML file. Defaults to $CONFIG_ENV or 'prod'.",
    )
    parser.add_argument(
        "--categories",
        default=None,
        help="Comma-separated list of product categories (default: from config).",
    )
    parser.add_argument(
        "--workdir",
        default=None,
        help="Directory holding the feed snapshot and product archive (local storage only).",
    )
    parser.add_argument(
        "--max-workers",
        type=positive_int,
        default=None,
        help="Concurrent product downloads per category (default: from config).",
    )
    return parser.parse_args(argv)
