"""
S3 client for event image hosting.
Works against AWS or any S3-compatible endpoint (MinIO for local development).
"""

from functools import lru_cache
from typing import Optional

import boto3

from app.core.config import get_settings


@lru_cache()
def get_s3_client():
    """
    Create the S3 client once per process.
    boto3 clients are thread-safe, so uploads running in worker threads share it.
    """
    settings = get_settings()
    options = {
        "aws_access_key_id": settings.AWS_ACCESS_KEY_ID,
        "aws_secret_access_key": settings.AWS_SECRET_ACCESS_KEY,
        "region_name": settings.AWS_S3_REGION,
    }
    # Only set for MinIO or other S3-compatible stores
    if settings.AWS_S3_ENDPOINT_URL:
        options["endpoint_url"] = settings.AWS_S3_ENDPOINT_URL
    return boto3.client("s3", **options)


def public_object_url(
    key: str, bucket: str, region: str, public_base_url: Optional[str] = None
) -> str:
    """HTTPS URL under which an uploaded object is served."""
    if public_base_url:
        return f"{public_base_url.rstrip('/')}/{key}"
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"
