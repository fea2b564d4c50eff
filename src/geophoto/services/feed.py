import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from geophoto.common.result import Result
from geophoto.common.session import AuthSession
from geophoto.core.config import configs
from geophoto.domain.signed_url import SignedUrlResolver
from geophoto.models.photo import Photo
from geophoto.repository.comment import CommentRepository
from geophoto.repository.photo import PhotoRepository
from geophoto.schemas.photo import PhotoResponse

logger = logging.getLogger(__name__)

CommentCounter = Callable[[str], Awaitable[Result[int]]]


class FallbackPolicy(str, Enum):
    """What to do with a row whose signed URL could not be issued."""

    OMIT = "omit"
    EMPTY_URL = "empty_url"


class SessionScopedCommentCounter:
    """Counts comments on a fresh session per call so counts can run concurrently."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def __call__(self, photo_id: str) -> Result[int]:
        async with self.session_factory() as session:
            return await CommentRepository(session).count_by_photo(photo_id)


class PhotoFeedAssembler:
    def __init__(
        self,
        photos: PhotoRepository,
        resolver: SignedUrlResolver,
        comment_counter: Optional[CommentCounter] = None,
        policy: FallbackPolicy = FallbackPolicy.OMIT,
    ):
        self.photos = photos
        self.resolver = resolver
        self.comment_counter = comment_counter
        self.policy = FallbackPolicy(policy)

    async def for_owner(self, session: AuthSession, ttl_seconds: Optional[int] = None) -> Result[List[PhotoResponse]]:
        ttl_seconds = ttl_seconds or configs.SIGNED_URL_TTL_USER_SECONDS
        rows = await self.photos.list_by_owner(session.user_id)
        if not rows.is_ok:
            return Result.fail(rows.error)
        logger.info(f"Assembling feed of {len(rows.data)} photos for user {session.user_id}")
        return Result.ok(await self.assemble(rows.data, ttl_seconds))

    async def public(
        self, limit: Optional[int] = None, ttl_seconds: Optional[int] = None
    ) -> Result[List[PhotoResponse]]:
        limit = limit or configs.PUBLIC_FEED_LIMIT
        ttl_seconds = ttl_seconds or configs.SIGNED_URL_TTL_PUBLIC_SECONDS
        rows = await self.photos.list_all(limit=limit)
        if not rows.is_ok:
            return Result.fail(rows.error)
        logger.info(f"Assembling public feed of {len(rows.data)} photos")
        return Result.ok(await self.assemble(rows.data, ttl_seconds))

    async def assemble(self, rows: List[Photo], ttl_seconds: int) -> List[PhotoResponse]:
        """
        Resolve URLs (and comment counts) for every row concurrently.

        Each branch settles on its own; gather keeps results aligned with ``rows``,
        so the repository's newest-first order survives.
        """
        urls_task = self.resolver.resolve_many([photo.path for photo in rows], ttl_seconds)
        if self.comment_counter is not None:
            counts_task = asyncio.gather(*(self._count(photo.id) for photo in rows))
            urls, counts = await asyncio.gather(urls_task, counts_task)
        else:
            urls = await urls_task
            counts = [None] * len(rows)

        feed = []
        for photo, url, count in zip(rows, urls, counts):
            if not url.is_ok:
                if self.policy is FallbackPolicy.OMIT:
                    logger.warning(f"Omitting photo {photo.id} from feed: {url.error.message}", extra={"photo_id": photo.id})
                    continue
                logger.warning(f"Photo {photo.id} has no image URL: {url.error.message}", extra={"photo_id": photo.id})
            feed.append(PhotoResponse.from_record(photo, image_url=url.data or "", comment_count=count))
        return feed

    async def _count(self, photo_id: str) -> Optional[int]:
        try:
            counted = await self.comment_counter(photo_id)
        except Exception as e:
            logger.warning(f"Comment count failed for photo {photo_id}: {e}")
            return None
        if not counted.is_ok:
            logger.warning(f"Comment count failed for photo {photo_id}: {counted.error.message}")
            return None
        return counted.data
