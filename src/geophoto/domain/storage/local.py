import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import aiofiles
from jose import JWTError, jwt

from geophoto.core.config import configs

from .base import ObjectExistsError, StorageService

logger = logging.getLogger(__name__)

MEDIA_TOKEN_SCOPE = "media"


class LocalStorageService(StorageService):
    """Implementation of StorageService for local filesystem."""

    def __init__(self, media_root: Optional[str] = None, media_url: Optional[str] = None):
        self.media_root = Path(media_root or configs.MEDIA_ROOT).resolve()
        self.media_url = (media_url or configs.MEDIA_URL).rstrip("/")
        self.media_root.mkdir(parents=True, exist_ok=True)
        logger.debug(f"LocalStorageService initialized with base path {self.media_root}")

    def resolve_path(self, path: str) -> Path:
        full_path = (self.media_root / path).resolve()
        if self.media_root not in full_path.parents:
            raise ValueError(f"Path escapes media root: {path}")
        return full_path

    async def save_file(self, content: bytes, path: str, content_type: Optional[str] = None) -> str:
        full_path = self.resolve_path(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug(f"Saving file to local storage: {full_path}")
        try:
            # 'x' refuses to overwrite an existing object
            async with aiofiles.open(full_path, "xb") as out_file:
                await out_file.write(content)
        except FileExistsError as e:
            raise ObjectExistsError(f"Object already exists: {path}") from e

        logger.info(f"Successfully saved file: {full_path}")
        return path

    async def delete_file(self, path: str) -> bool:
        full_path = self.resolve_path(path)
        logger.debug(f"Deleting file from local storage: {full_path}")
        if full_path.exists():
            os.remove(full_path)
            logger.info(f"Successfully deleted file: {full_path}")
            return True
        logger.warning(f"File not found for deletion: {full_path}")
        return False

    async def generate_signed_url(self, path: str, ttl_seconds: int) -> str:
        if not self.resolve_path(path).exists():
            raise FileNotFoundError(f"Object not found: {path}")
        expire = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
        token = jwt.encode(
            {"sub": path, "scope": MEDIA_TOKEN_SCOPE, "exp": expire},
            configs.SECRET_KEY,
            algorithm=configs.ALGORITHM,
        )
        url = f"{self.media_url}/{quote(path)}?token={token}"
        logger.debug(f"Generated signed URL for local path: {path}")
        return url

    def verify_token(self, path: str, token: str) -> bool:
        """Check a media token issued by generate_signed_url for this exact path."""
        try:
            payload = jwt.decode(token, configs.SECRET_KEY, algorithms=[configs.ALGORITHM])
        except JWTError as e:
            logger.warning(f"Rejected media token for {path}: {e}")
            return False
        return payload.get("scope") == MEDIA_TOKEN_SCOPE and payload.get("sub") == path
