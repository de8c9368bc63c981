"""Byte stores addressed by logical path segments.

``store.write(data, "jtwc_products", "text", "latest-wp0120web.txt")`` maps to
a file under the local root or to an object key under the S3 prefix. Stores
hold no archival logic; every backend failure surfaces as ``StorageError``
(``PurgeError`` for deletions).
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from botocore.exceptions import BotoCoreError, ClientError

from archive_products.config import StorageConfig
from archive_products.errors import PurgeError, StorageError
from archive_products.models import StoredObject
from common.aws import build_s3_key, get_s3_client

logger = logging.getLogger(__name__)


class ContentStore:
    """Interface shared by the storage backends."""

    def read(self, *parts: str) -> bytes:
        raise NotImplementedError

    def write(self, data: bytes, *parts: str) -> None:
        raise NotImplementedError

    def exists(self, *parts: str) -> bool:
        raise NotImplementedError

    def delete(self, *parts: str) -> None:
        raise NotImplementedError

    def list(self, *parts: str) -> list[StoredObject]:
        """List direct children of a directory. Missing directories are empty."""
        raise NotImplementedError


class LocalContentStore(ContentStore):
    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path(self, *parts: str) -> Path:
        return self.root.joinpath(*parts)

    def read(self, *parts: str) -> bytes:
        path = self.path(*parts)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def write(self, data: bytes, *parts: str) -> None:
        path = self.path(*parts)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    def exists(self, *parts: str) -> bool:
        return self.path(*parts).is_file()

    def delete(self, *parts: str) -> None:
        path = self.path(*parts)
        try:
            path.unlink()
        except OSError as e:
            raise PurgeError(f"Failed to delete {path}: {e}") from e

    def list(self, *parts: str) -> list[StoredObject]:
        path = self.path(*parts)
        if not path.is_dir():
            return []

        children = []
        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    stat = entry.stat()
                    children.append(
                        StoredObject(
                            name=entry.name,
                            is_dir=entry.is_dir(),
                            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                        )
                    )
        except OSError as e:
            raise StorageError(f"Failed to list {path}: {e}") from e

        return children


class S3ContentStore(ContentStore):
    """Objects in one bucket; ``/``-separated key prefixes act as directories."""

    def __init__(self, bucket: str, prefix: str = "", client=None):
        self.bucket = bucket
        self.prefix = prefix
        self.client = client if client is not None else get_s3_client()

    def key(self, *parts: str) -> str:
        return build_s3_key(self.prefix, *parts)

    def read(self, *parts: str) -> bytes:
        key = self.key(*parts)
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            return response["Body"].read()
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to read s3://{self.bucket}/{key}: {e}") from e

    def write(self, data: bytes, *parts: str) -> None:
        key = self.key(*parts)
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to write s3://{self.bucket}/{key}: {e}") from e

    def exists(self, *parts: str) -> bool:
        key = self.key(*parts)
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise StorageError(f"Failed to stat s3://{self.bucket}/{key}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to stat s3://{self.bucket}/{key}: {e}") from e
        return True

    def delete(self, *parts: str) -> None:
        key = self.key(*parts)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise PurgeError(f"Failed to delete s3://{self.bucket}/{key}: {e}") from e

    def list(self, *parts: str) -> list[StoredObject]:
        prefix = self.key(*parts)
        if prefix:
            prefix += "/"

        children = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix, Delimiter="/"):
                for common_prefix in page.get("CommonPrefixes", []):
                    name = common_prefix["Prefix"][len(prefix):].rstrip("/")
                    children.append(StoredObject(name=name, is_dir=True, modified_at=None))
                for obj in page.get("Contents", []):
                    name = obj["Key"][len(prefix):]
                    if not name:
                        continue
                    children.append(
                        StoredObject(name=name, is_dir=False, modified_at=obj["LastModified"])
                    )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to list s3://{self.bucket}/{prefix}: {e}") from e

        return children


def get_content_store(config: StorageConfig) -> ContentStore:
    """Build the store for the configured backend.

    The S3 bucket comes from the ``S3_BUCKET_NAME`` environment variable.
    """
    if config.backend == "s3":
        bucket = os.environ["S3_BUCKET_NAME"]
        logger.info("Using S3 content store s3://%s/%s", bucket, config.s3_prefix)
        return S3ContentStore(bucket, config.s3_prefix)

    logger.info("Using local content store at %s", Path(config.local_path).resolve())
    return LocalContentStore(config.local_path)
