"""
MinIO Object Store Adapter.

Implements ObjectStorePort with the minio client. Uploaded charts are
stored under charts/{uuid}.{ext} and addressed by a public bucket URL.

Key behaviors:
- Configured only when endpoint, access key and secret key are set
- Client is created lazily; the bucket is created on first upload
- Upload errors propagate so the delivery chain can fall back
"""

from __future__ import annotations

import logging
import uuid
from io import BytesIO

from minio import Minio
from minio.error import S3Error

from chart_mcp.rules.models import MinioSettings

logger = logging.getLogger(__name__)

OBJECT_PREFIX = "charts"


class ObjectStoreError(Exception):
    """Raised when the object store cannot accept an upload."""


class MinioObjectStore:
    """MinIO implementation of ObjectStorePort."""

    def __init__(self, settings: MinioSettings, client: Minio | None = None) -> None:
        self.settings = settings
        self._client = client
        self._bucket_checked = False

    def is_configured(self) -> bool:
        s = self.settings
        return bool(s.endpoint and s.access_key and s.secret_key)

    @property
    def client(self) -> Minio:
        if self._client is None:
            if not self.is_configured():
                raise ObjectStoreError("MinIO is not configured")
            self._client = Minio(
                endpoint=self.settings.endpoint,
                access_key=self.settings.access_key,
                secret_key=self.settings.secret_key,
                secure=self.settings.secure,
            )
        return self._client

    def _ensure_bucket(self) -> None:
        if self._bucket_checked:
            return
        bucket = self.settings.bucket
        if not self.client.bucket_exists(bucket_name=bucket):
            self.client.make_bucket(bucket_name=bucket)
            logger.info("Created MinIO bucket: %s", bucket)
        self._bucket_checked = True

    def object_url(self, object_name: str) -> str:
        """Public URL for an object in the configured bucket."""
        if self.settings.public_url:
            base = self.settings.public_url.rstrip("/")
        else:
            scheme = "https" if self.settings.secure else "http"
            base = f"{scheme}://{self.settings.endpoint}"
        return f"{base}/{self.settings.bucket}/{object_name}"

    def store(self, data: bytes, extension: str, mime_type: str) -> str:
        """
        Upload bytes and return their URL.

        Raises:
            ObjectStoreError: If not configured or the upload fails.
        """
        if not self.is_configured():
            raise ObjectStoreError("MinIO is not configured")

        object_name = f"{OBJECT_PREFIX}/{uuid.uuid4()}.{extension}"
        try:
            self._ensure_bucket()
            self.client.put_object(
                bucket_name=self.settings.bucket,
                object_name=object_name,
                data=BytesIO(data),
                length=len(data),
                content_type=mime_type,
            )
        except S3Error as e:
            raise ObjectStoreError(f"MinIO upload failed: {e}") from e

        logger.debug("Chart uploaded to MinIO: %s", object_name)
        return self.object_url(object_name)


class NullObjectStore:
    """Object store used when none is configured."""

    def is_configured(self) -> bool:
        return False

    def store(self, data: bytes, extension: str, mime_type: str) -> str:
        raise ObjectStoreError("No object store configured")


def create_object_store(settings: MinioSettings | None) -> MinioObjectStore | NullObjectStore:
    """Factory: MinIO when configured, otherwise the null store."""
    if settings is None:
        return NullObjectStore()
    store = MinioObjectStore(settings)
    return store if store.is_configured() else NullObjectStore()
