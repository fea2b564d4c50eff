from sqlalchemy.ext.asyncio import AsyncSession

from geophoto.domain.storage.base import StorageService
from geophoto.repository.comment import CommentRepository
from geophoto.repository.photo import PhotoRepository
from geophoto.repository.user import UserRepository


class UnitOfWork:
    """
    Unit of Work pattern to manage repositories and database transactions.
    """
    def __init__(self, db: AsyncSession, storage: StorageService):
        self.db = db
        self.storage = storage
        self.users = UserRepository(db)
        self.photos = PhotoRepository(db, storage)
        self.comments = CommentRepository(db)

    async def commit(self):
        await self.db.commit()

    async def rollback(self):
        await self.db.rollback()

    async def flush(self):
        await self.db.flush()

    async def refresh(self, instance):
        await self.db.refresh(instance)
