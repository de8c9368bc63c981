"""Product reference extraction from raw feed text."""

import re
from typing import Iterator

from archive_products.models import ProductCategory, ProductReference

_UNSAFE_LEADING_CHAR = re.compile(r"^[^A-Za-z0-9.\-]")


def sanitize_filename(name: str) -> str:
    """Replace a leading character that is not alphanumeric, ``-`` or ``.`` with ``_``."""
    return _UNSAFE_LEADING_CHAR.sub("_", name)


def extract_products(category: ProductCategory, text: str) -> Iterator[ProductReference]:
    """Yield a reference for every match of the category pattern, in document order.

    Repeated URLs are yielded once per occurrence.
    """
    for match in category.pattern.finditer(text):
        yield ProductReference(
            category=category.name,
            source_url=match.group(0),
            filename=sanitize_filename(match.group(1)),
        )
