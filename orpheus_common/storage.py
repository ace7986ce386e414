"""
Object storage bridge - writes uploaded assets to S3 or an S3-compatible
service (Cloudflare R2, MinIO) and hands back a public URL.
"""

import asyncio
import functools
from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from orpheus_common.config import StorageSettings
from orpheus_common.errors import InternalError, StorageNotConfiguredError
from orpheus_common.logging import get_logger
from orpheus_common.utils import normalize_key

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str


class ObjectStorage:
    """
    Stores bytes under a key and returns where they can be fetched.

    The boto3 client is created on first use and reused for the lifetime of
    this object. boto3 is blocking, so calls run in the default executor.
    """

    def __init__(self, settings: StorageSettings):
        self.settings = settings
        self._client: Optional[Any] = None

    @property
    def is_configured(self) -> bool:
        return self.settings.is_configured

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client

        if not self.is_configured:
            raise StorageNotConfiguredError(
                "S3 storage not configured. Set ORPHEUS_S3_ACCESS_KEY_ID, "
                "ORPHEUS_S3_SECRET_ACCESS_KEY and ORPHEUS_S3_BUCKET."
            )

        options: dict[str, Any] = {
            "region_name": self.settings.region,
            "aws_access_key_id": self.settings.access_key_id,
            "aws_secret_access_key": self.settings.secret_access_key.get_secret_value(),
        }
        if self.settings.endpoint:
            options["endpoint_url"] = self.settings.endpoint
            options["config"] = BotoConfig(s3={"addressing_style": "path"})

        self._client = boto3.client("s3", **options)
        logger.info(
            "s3_client_created",
            bucket=self.settings.bucket,
            region=self.settings.region,
            endpoint=self.settings.endpoint,
        )
        return self._client

    def public_url(self, key: str) -> str:
        """Public URL of an object, without checking that it exists."""
        normalized = normalize_key(key)
        if self.settings.public_url_base:
            return f"{self.settings.public_url_base.rstrip('/')}/{normalized}"
        if self.settings.endpoint:
            return f"{self.settings.endpoint.rstrip('/')}/{self.settings.bucket}/{normalized}"
        return f"https://{self.settings.bucket}.s3.{self.settings.region}.amazonaws.com/{normalized}"

    async def _run(self, func, **kwargs) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, **kwargs))

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> StoredObject:
        """
        Upload bytes to the bucket as a publicly readable object.

        Args:
            key: Object key; leading slashes are stripped
            data: File content
            content_type: MIME type stored with the object

        Returns:
            The normalized key and its public URL
        """
        client = self._get_client()
        normalized = normalize_key(key)
        try:
            await self._run(
                client.put_object,
                Bucket=self.settings.bucket,
                Key=normalized,
                Body=data,
                ContentType=content_type,
                ACL="public-read",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("object_store_failed", key=normalized, error=str(exc))
            raise InternalError(f"Upload failed: {exc}") from exc

        logger.info("object_stored", key=normalized, size=len(data), content_type=content_type)
        return StoredObject(key=normalized, url=self.public_url(normalized))

    async def delete(self, key: str) -> None:
        """Delete an object; deleting a missing key is not an error."""
        client = self._get_client()
        normalized = normalize_key(key)
        try:
            await self._run(client.delete_object, Bucket=self.settings.bucket, Key=normalized)
        except (BotoCoreError, ClientError) as exc:
            logger.error("object_delete_failed", key=normalized, error=str(exc))
            raise InternalError(f"Delete failed: {exc}") from exc
        logger.info("object_deleted", key=normalized)

    async def presigned_get(self, key: str, expires_in: int = 3600) -> StoredObject:
        """Signed download URL for private buckets."""
        client = self._get_client()
        normalized = normalize_key(key)
        url = await self._run(
            client.generate_presigned_url,
            ClientMethod="get_object",
            Params={"Bucket": self.settings.bucket, "Key": normalized},
            ExpiresIn=expires_in,
        )
        return StoredObject(key=normalized, url=url)
