import os

import boto3
from dotenv import load_dotenv

load_dotenv()


def get_s3_client():
    """Create S3 client.

    Honours ``S3_ENDPOINT`` for S3-compatible object stores.
    """
    return boto3.client("s3", endpoint_url=os.environ.get("S3_ENDPOINT"))


def build_s3_key(prefix: str, *parts: str) -> str:
    """Join a key prefix and path segments into an S3 key."""
    segments = [prefix.strip("/")] if prefix and prefix.strip("/") else []
    segments.extend(part.strip("/") for part in parts if part)
    return "/".join(segments)
