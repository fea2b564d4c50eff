import logging
from typing import List

from sqlalchemy import delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from geophoto.common.result import Result
from geophoto.core.errors import DbError, ValidationError
from geophoto.models.comment import Comment

logger = logging.getLogger(__name__)


class CommentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_by_photo(self, photo_id: str) -> Result[List[Comment]]:
        try:
            result = await self.db.execute(
                select(Comment).where(Comment.photo_id == photo_id).order_by(Comment.created_at.desc())
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list comments for photo {photo_id}: {e}", exc_info=True)
            return Result.fail(DbError(str(e)))
        return Result.ok(list(result.scalars().all()))

    async def insert(self, photo_id: str, author_id, content: str) -> Result[Comment]:
        content = (content or "").strip()
        if not content:
            return Result.fail(ValidationError("Comment content must not be empty"))

        comment = Comment(photo_id=photo_id, user_id=author_id, content=content)
        try:
            self.db.add(comment)
            await self.db.commit()
            await self.db.refresh(comment)
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert comment on photo {photo_id}: {e}", exc_info=True)
            await self.db.rollback()
            return Result.fail(DbError(str(e)))

        logger.info(f"Inserted comment {comment.id} on photo {photo_id}")
        return Result.ok(comment)

    async def delete(self, comment_id: str, author_id) -> Result[int]:
        """
        Delete a comment owned by ``author_id``.

        A comment owned by someone else (or already gone) matches no row; that is
        reported as success with zero rows affected.
        """
        try:
            result = await self.db.execute(
                delete(Comment).where(Comment.id == comment_id, Comment.user_id == author_id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete comment {comment_id}: {e}", exc_info=True)
            await self.db.rollback()
            return Result.fail(DbError(str(e)))

        affected = result.rowcount or 0
        if affected == 0:
            logger.info(f"Delete of comment {comment_id} by {author_id} matched no rows")
        return Result.ok(affected)

    async def count_by_photo(self, photo_id: str) -> Result[int]:
        try:
            result = await self.db.execute(
                select(func.count()).select_from(Comment).where(Comment.photo_id == photo_id)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to count comments for photo {photo_id}: {e}", exc_info=True)
            return Result.fail(DbError(str(e)))
        return Result.ok(result.scalar() or 0)
