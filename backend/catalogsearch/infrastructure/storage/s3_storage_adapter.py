"""Product image storage on S3 or an S3-compatible service (MinIO).

Images are written once under a timestamped key and never replaced; the
resulting public URL is what the product row stores as image_url.
"""

import logging
import re
import time
from io import BytesIO
from typing import BinaryIO, Optional
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ...domain.storage import ObjectStoragePort, StoredImage

logger = logging.getLogger(__name__)

# Keys are never reused, so cached copies cannot go stale
CACHE_CONTROL = "max-age=3600"

_MISSING_CODES = ("404", "NoSuchKey", "NotFound")

_WHITESPACE = re.compile(r"\s+")


class StorageError(Exception):
    """Object storage call failed"""


def generate_image_key(filename: str, timestamp_ms: Optional[int] = None) -> str:
    """Object key for an upload: ``{timestamp_ms}-{filename}``.

    Each whitespace run in the filename becomes a single '-'.

        >>> generate_image_key("blue mug.png", timestamp_ms=1700000000000)
        '1700000000000-blue-mug.png'
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{timestamp_ms}-{_WHITESPACE.sub('-', filename)}"


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "Unknown")


class S3StorageAdapter(ObjectStoragePort):
    """ObjectStoragePort over a boto3 S3 client.

    Public URLs resolve in this order: public_base_url (CDN or custom
    domain), then the endpoint in path style (MinIO), then the AWS
    virtual-hosted bucket URL.
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
        public_base_url: Optional[str] = None,
    ):
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
        except BotoCoreError as e:
            raise StorageError(f"Failed to initialize S3 client: {e}") from e

        self.endpoint_url = endpoint_url
        self.bucket_name = bucket_name
        self.region = region
        self.public_base_url = public_base_url

        logger.info(f"Image storage: bucket={bucket_name}, endpoint={endpoint_url or 'AWS S3'}")

    async def upload_image(self, file: BinaryIO, filename: str, content_type: str) -> StoredImage:
        content = file.read()
        if not content:
            raise ValueError("Cannot store empty file")

        storage_key = generate_image_key(filename)
        # Two uploads of the same filename in the same millisecond collide; the second fails
        if await self.file_exists(storage_key):
            raise StorageError(f"Object already exists: {storage_key}")

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=storage_key,
                Body=BytesIO(content),
                ContentType=content_type,
                CacheControl=CACHE_CONTROL,
            )
        except ClientError as e:
            logger.error(f"Image upload failed: key={storage_key}, code={_error_code(e)}", exc_info=True)
            raise StorageError(f"Failed to upload image: {_error_code(e)}") from e
        except BotoCoreError as e:
            logger.error(f"Image upload failed: key={storage_key}", exc_info=True)
            raise StorageError(f"Failed to upload image: {e}") from e

        logger.info(f"Stored image {storage_key} ({len(content)} bytes, {content_type})")
        return StoredImage(
            storage_key=storage_key,
            public_url=self.public_url(storage_key),
            size_bytes=len(content),
            content_type=content_type,
        )

    def public_url(self, storage_key: str) -> str:
        key = quote(storage_key)
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    async def file_exists(self, storage_key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=storage_key)
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return False
            raise StorageError(f"Failed to check object {storage_key}: {_error_code(e)}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to check object {storage_key}: {e}") from e
        return True

    def check_bucket(self) -> None:
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
        except ClientError as e:
            raise StorageError(f"Bucket {self.bucket_name} unavailable: {_error_code(e)}") from e
        except BotoCoreError as e:
            raise StorageError(f"Bucket {self.bucket_name} unavailable: {e}") from e
