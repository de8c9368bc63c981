"""Exceptions raised by the product archiver."""


class ArchiverError(Exception):
    """Base class for archiver failures."""


class FeedFetchError(ArchiverError):
    """The feed could not be retrieved or parsed. Fatal for the run."""


class ProductFetchError(ArchiverError):
    """A single product download failed."""

    def __init__(self, url: str, category: str, reason: str):
        self.url = url
        self.category = category
        self.reason = reason
        super().__init__(f"Failed to download {category} product {url}: {reason}")


class StorageError(ArchiverError):
    """A content store operation failed."""


class PurgeError(StorageError):
    """A file could not be deleted during the retention sweep."""
