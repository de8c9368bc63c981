"""Data models for the archive_products pipeline."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass
class FeedEntry:
    """A single feed item reduced to the fields used for change detection."""
    title: str
    description: str


@dataclass
class FeedSnapshot:
    """Entries of one feed document, in document order."""
    entries: list[FeedEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ProductCategory:
    """A product type: its storage directory name and the URL pattern that finds it.

    ``pattern`` must capture the product's filename in group 1.
    """
    name: str
    pattern: re.Pattern


@dataclass(frozen=True)
class ProductReference:
    category: str
    source_url: str
    filename: str


@dataclass
class StoredObject:
    """A child of a content store directory."""
    name: str
    is_dir: bool
    modified_at: Optional[datetime]


class ArchiveOutcome(Enum):
    ARCHIVED = "archived"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class CategorySummary:
    category: str
    archived: int = 0
    unchanged: int = 0
    failed: int = 0

    def record(self, outcome: ArchiveOutcome) -> None:
        if outcome is ArchiveOutcome.ARCHIVED:
            self.archived += 1
        elif outcome is ArchiveOutcome.UNCHANGED:
            self.unchanged += 1
        else:
            self.failed += 1


@dataclass
class RunSummary:
    updated: bool
    timestamp: str
    categories: list[CategorySummary] = field(default_factory=list)
    purged: int = 0
