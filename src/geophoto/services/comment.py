import logging
from typing import List, Optional

from geophoto.common.result import Result
from geophoto.common.session import AuthSession
from geophoto.common.uow import UnitOfWork
from geophoto.core.errors import AppError
from geophoto.models.comment import Comment
from geophoto.repository.comment import CommentRepository

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_comments(self, photo_id: str) -> Result[List[Comment]]:
        return await self.uow.comments.list_by_photo(photo_id)

    async def add_comment(self, session: AuthSession, photo_id: str, content: str) -> Result[Comment]:
        photo = await self.uow.photos.get_by_id(photo_id)
        if not photo.is_ok:
            return Result.fail(photo.error)
        return await self.uow.comments.insert(photo_id, session.user_id, content)

    async def delete_comment(self, session: AuthSession, comment_id: str) -> Result[int]:
        return await self.uow.comments.delete(comment_id, session.user_id)

    async def count_comments(self, photo_id: str) -> Result[int]:
        return await self.uow.comments.count_by_photo(photo_id)


class CommentThread:
    """
    Client-side cache of the comments shown for one photo.

    Mutations are applied locally after the repository accepts them; any failed
    mutation drops the cache and refetches so the view cannot drift from storage.
    """

    def __init__(self, repository: CommentRepository, photo_id: str, session: AuthSession):
        self.repository = repository
        self.photo_id = photo_id
        self.session = session
        self.comments: List[Comment] = []
        self.error: Optional[AppError] = None
        self.stale = True

    async def load(self) -> Result[List[Comment]]:
        result = await self.repository.list_by_photo(self.photo_id)
        if result.is_ok:
            self.comments = list(result.data)
            self.error = None
            self.stale = False
        else:
            self.comments = []
            self.error = result.error
        return result

    async def invalidate(self) -> None:
        self.stale = True
        refetched = await self.load()
        if not refetched.is_ok:
            logger.warning(f"Refetch of comments for photo {self.photo_id} failed: {refetched.error.message}")

    async def add(self, content: str) -> Result[Comment]:
        result = await self.repository.insert(self.photo_id, self.session.user_id, content)
        if result.is_ok:
            self.comments.insert(0, result.data)
            self.error = None
        else:
            await self.invalidate()
            self.error = result.error
        return result

    async def delete(self, comment_id: str) -> Result[int]:
        result = await self.repository.delete(comment_id, self.session.user_id)
        if not result.is_ok:
            await self.invalidate()
            self.error = result.error
        elif result.data:
            self.comments = [c for c in self.comments if c.id != comment_id]
        return result
