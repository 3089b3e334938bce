"""
Event image uploads to the object store.

The uploader validates the file, stores it under a random key and returns
the public HTTPS URL that is saved as the event's `image`. boto3 is
synchronous, so `put_object` runs in a worker thread.
"""

import asyncio
import time
import uuid
from functools import lru_cache
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from app.core.config import get_settings
from app.core.exceptions import ConfigurationError, ImageUploadError, ValidationError
from app.core.logging import get_logger
from app.core.metrics import image_upload_latency, record_image_upload
from app.infrastructure.s3_client import get_s3_client, public_object_url

logger = get_logger(__name__)

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


class ImageUploader:
    def __init__(
        self,
        client,
        bucket: Optional[str],
        region: str,
        public_base_url: Optional[str] = None,
        folder: str = "DevEvent",
        max_bytes: int = 5 * 1024 * 1024,
    ):
        self.client = client
        self.bucket = bucket
        self.region = region
        self.public_base_url = public_base_url
        self.folder = folder.strip("/")
        self.max_bytes = max_bytes

    async def _read_validated(self, file: UploadFile) -> tuple[bytes, str]:
        content_type = (file.content_type or "").split(";")[0].strip().lower()
        if content_type not in IMAGE_EXTENSIONS:
            record_image_upload("rejected")
            raise ValidationError(
                "Image must be JPEG, PNG, WebP, or GIF",
                details={"content_type": content_type or None},
            )

        data = await file.read(self.max_bytes + 1)
        if not data:
            record_image_upload("rejected")
            raise ValidationError("Image file is empty")
        if len(data) > self.max_bytes:
            record_image_upload("rejected")
            raise ValidationError(
                f"Image size must be less than {self.max_bytes // (1024 * 1024)}MB"
            )
        return data, content_type

    async def upload(self, file: UploadFile) -> str:
        """Store an uploaded image and return its secure URL."""
        if not self.bucket:
            raise ConfigurationError("AWS_S3_BUCKET_NAME is not configured")

        data, content_type = await self._read_validated(file)
        key = f"{self.folder}/{uuid.uuid4().hex}{IMAGE_EXTENSIONS[content_type]}"

        start = time.perf_counter()
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            record_image_upload("error")
            logger.error("image_upload_failed", key=key, error=str(e))
            raise ImageUploadError("Image upload failed") from e
        finally:
            image_upload_latency.observe(time.perf_counter() - start)

        record_image_upload("success")
        logger.info("image_uploaded", key=key, size_bytes=len(data))
        return public_object_url(key, self.bucket, self.region, self.public_base_url)


@lru_cache()
def get_image_uploader() -> ImageUploader:
    """FastAPI dependency; overridden in tests."""
    settings = get_settings()
    return ImageUploader(
        client=get_s3_client(),
        bucket=settings.AWS_S3_BUCKET_NAME,
        region=settings.AWS_S3_REGION,
        public_base_url=settings.AWS_S3_PUBLIC_BASE_URL,
        folder=settings.IMAGE_UPLOAD_FOLDER,
        max_bytes=settings.MAX_IMAGE_BYTES,
    )
