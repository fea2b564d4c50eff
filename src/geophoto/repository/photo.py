import logging
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from geophoto.common.result import Result
from geophoto.core.errors import DbError, NotFoundError, StorageError, ValidationError
from geophoto.domain.geo import parse_degree, validate_coordinates
from geophoto.domain.storage.base import StorageService
from geophoto.models.photo import Photo

logger = logging.getLogger(__name__)


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PhotoRepository:
    def __init__(self, db: AsyncSession, storage: StorageService):
        self.db = db
        self.storage = storage

    async def list_by_owner(self, owner_id, limit: Optional[int] = None) -> Result[List[Photo]]:
        query = select(Photo).where(Photo.user_id == owner_id).order_by(Photo.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list photos for owner {owner_id}: {e}", exc_info=True)
            return Result.fail(DbError(str(e)))
        return Result.ok(list(result.scalars().all()))

    async def list_all(self, limit: Optional[int] = None) -> Result[List[Photo]]:
        query = select(Photo).order_by(Photo.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list photos: {e}", exc_info=True)
            return Result.fail(DbError(str(e)))
        return Result.ok(list(result.scalars().all()))

    async def get_by_id(self, photo_id: str) -> Result[Photo]:
        try:
            result = await self.db.execute(select(Photo).where(Photo.id == photo_id))
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch photo {photo_id}: {e}", exc_info=True)
            return Result.fail(DbError(str(e)))

        photo = result.scalars().first()
        if photo is None:
            return Result.fail(NotFoundError(f"Photo {photo_id} not found"))
        return Result.ok(photo)

    async def insert(
        self,
        owner_id,
        storage_path: str,
        lat,
        lon,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Result[Photo]:
        if not validate_coordinates(lat, lon):
            logger.warning(f"Rejected photo insert with invalid coordinates: lat={lat}, lon={lon}")
            return Result.fail(ValidationError("Latitude must be within [-90, 90] and longitude within [-180, 180]"))

        photo = Photo(
            user_id=owner_id,
            path=storage_path,
            lat=parse_degree(lat),
            lon=parse_degree(lon),
            title=_clean_text(title),
            description=_clean_text(description),
            exif=None,
        )
        try:
            self.db.add(photo)
            await self.db.commit()
            await self.db.refresh(photo)
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert photo row for '{storage_path}': {e}", exc_info=True)
            await self.db.rollback()
            return Result.fail(DbError(str(e)))

        logger.info(f"Inserted photo {photo.id} at '{storage_path}'")
        return Result.ok(photo)

    async def delete(self, photo_id: str, storage_path: str) -> Result[None]:
        # Object first: a failed object delete must leave the row in place.
        try:
            removed = await self.storage.delete_file(storage_path)
        except Exception as e:
            logger.error(f"Failed to delete object '{storage_path}' for photo {photo_id}: {e}", exc_info=True)
            return Result.fail(StorageError(str(e)))
        if not removed:
            logger.warning(f"Object '{storage_path}' was already absent; deleting row for photo {photo_id}")

        try:
            # comments go with the row through ON DELETE CASCADE
            await self.db.execute(delete(Photo).where(Photo.id == photo_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete photo row {photo_id}: {e}", exc_info=True)
            await self.db.rollback()
            return Result.fail(DbError(str(e)))

        logger.info(f"Deleted photo {photo_id}")
        return Result.ok(None)
