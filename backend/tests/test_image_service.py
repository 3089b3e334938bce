"""
Tests for S3 image uploads, using botocore's Stubber in place of the network.
"""

import io

import boto3
import pytest
from botocore.stub import ANY, Stubber
from starlette.datastructures import Headers, UploadFile

from app.core.exceptions import ConfigurationError, ImageUploadError, ValidationError
from app.infrastructure.s3_client import public_object_url
from app.services.image_service import ImageUploader

BUCKET = "devevent-images"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _upload_file(data: bytes, content_type: str, filename: str = "cover.png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="eu-west-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def uploader(s3_client) -> ImageUploader:
    return ImageUploader(s3_client, bucket=BUCKET, region="eu-west-1", max_bytes=1024)


@pytest.mark.asyncio
async def test_upload_returns_public_url(uploader, s3_client):
    with Stubber(s3_client) as stubber:
        stubber.add_response(
            "put_object",
            {},
            {"Bucket": BUCKET, "Key": ANY, "Body": PNG_BYTES, "ContentType": "image/png"},
        )
        url = await uploader.upload(_upload_file(PNG_BYTES, "image/png"))
        stubber.assert_no_pending_responses()

    assert url.startswith(f"https://{BUCKET}.s3.eu-west-1.amazonaws.com/DevEvent/")
    assert url.endswith(".png")


@pytest.mark.asyncio
async def test_upload_service_error(uploader, s3_client):
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(ImageUploadError):
            await uploader.upload(_upload_file(PNG_BYTES, "image/png"))


@pytest.mark.asyncio
async def test_upload_rejects_non_image(uploader, s3_client):
    with Stubber(s3_client) as stubber:
        with pytest.raises(ValidationError) as exc_info:
            await uploader.upload(_upload_file(b"%PDF-1.7", "application/pdf", "doc.pdf"))
        stubber.assert_no_pending_responses()
    assert exc_info.value.message == "Image must be JPEG, PNG, WebP, or GIF"


@pytest.mark.asyncio
async def test_upload_rejects_empty_file(uploader):
    with pytest.raises(ValidationError) as exc_info:
        await uploader.upload(_upload_file(b"", "image/png"))
    assert exc_info.value.message == "Image file is empty"


@pytest.mark.asyncio
async def test_upload_rejects_oversized_file(uploader):
    with pytest.raises(ValidationError):
        await uploader.upload(_upload_file(b"\x00" * 1025, "image/png"))


@pytest.mark.asyncio
async def test_upload_without_bucket(s3_client):
    uploader = ImageUploader(s3_client, bucket=None, region="eu-west-1")
    with pytest.raises(ConfigurationError):
        await uploader.upload(_upload_file(PNG_BYTES, "image/png"))


def test_public_object_url_with_custom_base():
    url = public_object_url("DevEvent/abc.png", BUCKET, "eu-west-1", "https://cdn.example.com/")
    assert url == "https://cdn.example.com/DevEvent/abc.png"
