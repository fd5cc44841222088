"""
Blob storage on S3 for car photos/videos, shipping-form PDFs and identity
document photos. Upload-by-key returning a public URL, and cleanup of replaced
or orphaned blobs around the commit of the row that points at them.
"""

import asyncio
import hashlib
import io
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Dict, Any, Tuple
import boto3
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import ClientError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import config
from app.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class S3Service:
    """
    S3 storage service.

    Keys are grouped by prefix:
    - car-media/<car_id>/<file>       photos and video of inventory cars
    - shipping/shipping_form_<name>_<ms>_<suffix>.pdf   generated shipping forms
    - documents/<form>/<file>         passport, ID card and vehicle photos
    Every upload writes a new key; nothing is overwritten in place.
    """

    _client: Optional[BaseClient] = None
    _bucket_name: str = config.s3_bucket_name

    @classmethod
    def _get_client(cls) -> BaseClient:
        """Lazy-load the S3 client and reuse it for every call."""
        if cls._client is None:
            boto_config = Config(
                region_name=config.aws_region,
                retries={
                    "max_attempts": 2,
                    "mode": "standard",
                },
                max_pool_connections=5,
                connect_timeout=5,
                read_timeout=10,
            )

            cls._client = boto3.client(
                "s3",
                aws_access_key_id=config.aws_access_key_id or None,
                aws_secret_access_key=config.aws_secret_access_key or None,
                config=boto_config,
            )

        return cls._client

    @classmethod
    def upload_file(
        cls,
        file_content: bytes,
        file_key: str,
        content_type: str = "application/pdf",
        metadata: Optional[Dict[str, str]] = None,
    ) -> Tuple[str, str]:
        """
        Upload a file in a single PUT request.

        Returns:
            Tuple[str, str]: (public file_url, md5 checksum)
        Raises:
            ExternalServiceError: On failure
        """
        client = cls._get_client()
        checksum: str = hashlib.md5(file_content).hexdigest()

        upload_params: Dict[str, Any] = {
            "Bucket": cls._bucket_name,
            "Key": file_key,
            "Body": io.BytesIO(file_content),
            "ContentType": content_type,
        }

        if metadata:
            upload_params["Metadata"] = {
                k: str(v)[:100] for k, v in list(metadata.items())[:3]
            }

        try:
            client.put_object(**upload_params)
        except ClientError as e:
            error_code: str = e.response.get("Error", {}).get("Code", "Unknown")
            raise ExternalServiceError("Storage", f"upload failed [{error_code}]") from e

        return cls.get_file_url(file_key), checksum

    @classmethod
    def delete_file(cls, file_key: str) -> None:
        """
        Delete a file by key.

        Raises:
            ExternalServiceError: On failure
        """
        client = cls._get_client()

        try:
            client.delete_object(Bucket=cls._bucket_name, Key=file_key)
        except ClientError as e:
            raise ExternalServiceError("Storage", f"delete failed: {e}") from e

    @classmethod
    def get_file_url(cls, file_key: str) -> str:
        """Public URL of a key in the bucket."""
        return f"https://{cls._bucket_name}.s3.{config.aws_region}.amazonaws.com/{file_key}"

    @classmethod
    def key_from_url(cls, file_url: str) -> Optional[str]:
        """
        Recover the key of a URL produced by get_file_url.
        Returns None for URLs that point somewhere else.
        """
        prefix = cls.get_file_url("")
        if not file_url or not file_url.startswith(prefix):
            return None
        return file_url[len(prefix):] or None


# Thread pool for blob deletes issued from async services
_executor = ThreadPoolExecutor(max_workers=2)


async def discard_blob(file_url: Optional[str]) -> None:
    """
    Best-effort removal of a blob no committed row points at.
    Failures are logged, never raised.
    """
    file_key = S3Service.key_from_url(file_url)
    if not file_key:
        return

    loop = asyncio.get_event_loop()
    try:
        await loop.run_in_executor(_executor, S3Service.delete_file, file_key)
    except ExternalServiceError as e:
        logger.warning(f"Could not delete blob {file_key}: {e.detail}")


async def save_with_blobs(db: AsyncSession, *file_urls: Optional[str], commit: bool = True) -> None:
    """
    Write rows that point at freshly uploaded blobs.

    Flushes and, unless `commit` is False (inside a savepoint), commits. If the
    write fails the new blobs are removed again and the error is re-raised.
    Replaced blobs must only be discarded after this returns.
    """
    try:
        await db.flush()
        if commit:
            await db.commit()
    except Exception:
        for file_url in file_urls:
            await discard_blob(file_url)
        raise
