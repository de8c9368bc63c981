"""Product archival: fetch, compare against the latest copy, write."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Iterable

import requests

from archive_products.config import TransportConfig
from archive_products.content_store import ContentStore
from archive_products.errors import ProductFetchError, StorageError
from archive_products.fetch_feed.transport import fetch_bytes
from archive_products.models import ArchiveOutcome, CategorySummary, ProductReference

logger = logging.getLogger(__name__)

LATEST_PREFIX = "latest"


@dataclass
class ArchiveTask:
    """All references in one category that share a filename.

    A task owns its ``latest-`` file; its references are processed in order.
    """
    filename: str
    references: list[ProductReference] = field(default_factory=list)


def build_tasks(references: Iterable[ProductReference]) -> list[ArchiveTask]:
    """Group references by filename, keeping first-appearance order."""
    tasks: dict[str, ArchiveTask] = {}
    for reference in references:
        task = tasks.setdefault(reference.filename, ArchiveTask(filename=reference.filename))
        task.references.append(reference)
    return list(tasks.values())


def latest_name(filename: str) -> str:
    return f"{LATEST_PREFIX}-{filename}"


def snapshot_name(timestamp: str, filename: str) -> str:
    return f"{timestamp}-{filename}"


def fetch_product(reference: ProductReference, transport: TransportConfig) -> bytes:
    """Download a product.

    Raises:
        ProductFetchError: If the request fails.
    """
    try:
        return fetch_bytes(reference.source_url, transport)
    except requests.RequestException as e:
        raise ProductFetchError(reference.source_url, reference.category, str(e)) from e


def _matches_latest(store: ContentStore, latest_parts: tuple[str, ...], data: bytes) -> bool:
    try:
        if not store.exists(*latest_parts):
            return False
        return store.read(*latest_parts) == data
    except StorageError as e:
        logger.warning("Could not read latest copy, treating product as new: %s", e)
        return False


def archive_reference(
    store: ContentStore,
    reference: ProductReference,
    timestamp: str,
    transport: TransportConfig,
    archive_dir: str,
) -> ArchiveOutcome:
    """Archive one product and report what happened."""
    logger.info("Archiving %s to %s", reference.source_url, reference.filename)

    try:
        data = fetch_product(reference, transport)
    except ProductFetchError as e:
        logger.error("Failed to download product: %s", e)
        return ArchiveOutcome.FAILED

    category_parts = (archive_dir, reference.category)
    latest_parts = (*category_parts, latest_name(reference.filename))

    if _matches_latest(store, latest_parts, data):
        logger.info("Content is identical. Skipping...")
        return ArchiveOutcome.UNCHANGED

    try:
        store.write(data, *category_parts, snapshot_name(timestamp, reference.filename))
        store.write(data, *latest_parts)
    except StorageError as e:
        logger.error("Failed to store %s: %s", reference.source_url, e)
        return ArchiveOutcome.FAILED

    return ArchiveOutcome.ARCHIVED


def _run_task(
    store: ContentStore,
    task: ArchiveTask,
    timestamp: str,
    transport: TransportConfig,
    archive_dir: str,
) -> list[ArchiveOutcome]:
    return [
        archive_reference(store, reference, timestamp, transport, archive_dir)
        for reference in task.references
    ]


def archive(
    store: ContentStore,
    category: str,
    references: Iterable[ProductReference],
    timestamp: str,
    transport: TransportConfig,
    archive_dir: str,
    max_workers: int = 1,
) -> CategorySummary:
    """Archive every reference of one category.

    With ``max_workers > 1`` tasks run on a thread pool; references sharing a
    filename always stay in the same task.
    """
    summary = CategorySummary(category=category)
    tasks = build_tasks(references)
    logger.info("Archiving %d %s products", sum(len(t.references) for t in tasks), category)

    if max_workers <= 1 or len(tasks) <= 1:
        for task in tasks:
            for outcome in _run_task(store, task, timestamp, transport, archive_dir):
                summary.record(outcome)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(_run_task, store, task, timestamp, transport, archive_dir): task
                for task in tasks
            }
            for future in as_completed(futures):
                task = futures[future]
                try:
                    outcomes = future.result()
                except Exception as e:
                    logger.error("Archive task for %s failed: %s", task.filename, e)
                    outcomes = [ArchiveOutcome.FAILED] * len(task.references)
                for outcome in outcomes:
                    summary.record(outcome)

    logger.info(
        "Finished %s: %d archived, %d unchanged, %d failed",
        category,
        summary.archived,
        summary.unchanged,
        summary.failed,
    )
    return summary
