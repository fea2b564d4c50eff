import asyncio
import logging
from typing import List, Sequence

from geophoto.common.result import Result
from geophoto.core.errors import StorageError
from geophoto.domain.storage.base import StorageService

logger = logging.getLogger(__name__)


class SignedUrlResolver:
    """Turns stored object paths into time-limited retrieval URLs."""

    def __init__(self, storage: StorageService):
        self.storage = storage

    async def resolve(self, storage_path: str, ttl_seconds: int) -> Result[str]:
        try:
            url = await self.storage.generate_signed_url(storage_path, ttl_seconds)
        except Exception as e:
            logger.warning(f"Signed URL resolution failed for '{storage_path}': {e}")
            return Result.fail(StorageError(f"Failed to sign URL for {storage_path}: {e}"))

        if not url:
            logger.warning(f"Storage returned an empty signed URL for '{storage_path}'")
            return Result.fail(StorageError(f"Empty signed URL for {storage_path}"))
        return Result.ok(url)

    async def resolve_many(self, storage_paths: Sequence[str], ttl_seconds: int) -> List[Result[str]]:
        """Resolve all paths concurrently; results line up with the input order."""
        return list(await asyncio.gather(*(self.resolve(path, ttl_seconds) for path in storage_paths)))
