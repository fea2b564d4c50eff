import asyncio
import logging
from datetime import timedelta
from typing import Optional

from google.api_core.exceptions import NotFound, PreconditionFailed
from google.cloud import storage  # sync client

from geophoto.core.config import configs

from .base import ObjectExistsError, StorageService

logger = logging.getLogger(__name__)


class GCSStorageService(StorageService):
    def __init__(self, bucket_name: Optional[str] = None, client: Optional[storage.Client] = None):
        self.client = client or storage.Client()
        self.bucket_name = bucket_name or configs.bucket_name
        self.bucket = self.client.bucket(self.bucket_name)

        logger.info(f"GCSStorageService initialized for bucket '{self.bucket_name}'")

    async def save_file(self, content: bytes, path: str, content_type: Optional[str] = None) -> str:
        blob = self.bucket.blob(path)
        blob.cache_control = "private, max-age=3600"

        def upload_sync():
            try:
                # generation 0 means "only if no live object exists"
                blob.upload_from_string(content, content_type=content_type, if_generation_match=0)
            except PreconditionFailed as e:
                raise ObjectExistsError(f"Object already exists: {path}") from e
            logger.info(f"[GCS] Uploaded to {path}")
            return path

        return await asyncio.to_thread(upload_sync)

    async def delete_file(self, path: str) -> bool:
        blob = self.bucket.blob(path)

        def delete_sync():
            try:
                blob.delete()
            except NotFound:
                logger.warning(f"[GCS] Object not found for deletion: {path}")
                return False
            logger.info(f"[GCS] Deleted {path}")
            return True

        return await asyncio.to_thread(delete_sync)

    async def generate_signed_url(self, path: str, ttl_seconds: int) -> str:
        blob = self.bucket.blob(path)

        def sign_sync():
            return blob.generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=ttl_seconds),
                method="GET",
            )

        return await asyncio.to_thread(sign_sync)
