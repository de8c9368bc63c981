"""Built-in product categories.

Each pattern matches an absolute product URL and captures its filename.
"""

import re

from archive_products.models import ProductCategory

# Shortest run of URL characters up to a path separator; never crosses into
# another URL, whitespace, quotes or tags.
_URL_PREFIX = r"https?://(?:(?!https?://)[^\s\"'<>])*?/"
_FILENAME = r"[^/\s\"'<>]+?"


def suffix_pattern(suffix: str) -> re.Pattern:
    """Compile a case-insensitive pattern for URLs ending in ``suffix``."""
    return re.compile(_URL_PREFIX + f"({_FILENAME}{re.escape(suffix)})", re.IGNORECASE)


PRODUCT_CATEGORIES = {
    # Tropical cyclone warning text
    "text": ProductCategory("text", suffix_pattern("web.txt")),
    # Warning graphics
    "gif": ProductCategory("gif", suffix_pattern(".gif")),
    # Prognostic reasoning
    "prog": ProductCategory("prog", suffix_pattern("prog.txt")),
    # JMV 3.0 track data
    "jmv": ProductCategory("jmv", suffix_pattern(".tcw")),
}
