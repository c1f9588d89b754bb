"""Object store for uploaded images (S3-compatible: AWS, R2, MinIO)."""

import asyncio
import uuid
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from tumbi.core.config import settings
from tumbi.core.logging import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """The object store rejected or failed a request."""


class ObjectStore:
    """
    Writes image payloads to a bucket and hands back their public URLs.

    boto3 is synchronous, so uploads run in a worker thread to keep the
    event loop free.
    """

    def __init__(
        self,
        bucket: Optional[str] = None,
        public_url: Optional[str] = None
    ):
        self.bucket = bucket or settings.S3_BUCKET_NAME
        self.public_url = (public_url or settings.S3_PUBLIC_URL).rstrip("/")
        self._client = None

    @property
    def client(self):
        """Lazily create the S3 client on first use."""
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.S3_ENDPOINT_URL,
                aws_access_key_id=settings.S3_ACCESS_KEY_ID or None,
                aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY or None,
                region_name=settings.S3_REGION,
                config=Config(
                    signature_version="s3v4",
                    retries={"max_attempts": 3, "mode": "standard"}
                ),
            )
        return self._client

    @staticmethod
    def make_key(owner_id: int, filename: Optional[str]) -> str:
        suffix = Path(filename).suffix.lower() if filename else ""
        return f"listings/{owner_id}/{uuid.uuid4().hex}{suffix or '.jpg'}"

    def url_for(self, key: str) -> str:
        return f"{self.public_url}/{key}"

    async def put_image(
        self,
        data: bytes,
        *,
        owner_id: int,
        filename: Optional[str],
        content_type: str
    ) -> str:
        """Store one image and return its public URL."""
        key = self.make_key(owner_id, filename)
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Upload of {key} to bucket {self.bucket} failed: {e}")
            raise StorageError(str(e)) from e

        logger.info(f"Stored {key} ({len(data)} bytes)")
        return self.url_for(key)


object_store = ObjectStore()


def get_object_store() -> ObjectStore:
    """FastAPI dependency; tests override it with an in-memory fake."""
    return object_store
