import logging

from geophoto.common.result import Result
from geophoto.common.session import AuthSession
from geophoto.common.uow import UnitOfWork
from geophoto.core.config import configs
from geophoto.core.errors import NotFoundError
from geophoto.domain.exif import extract_gps
from geophoto.domain.geo import GpsSource
from geophoto.domain.signed_url import SignedUrlResolver
from geophoto.schemas.photo import GpsResponse, PhotoResponse

logger = logging.getLogger(__name__)


class PhotoService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.resolver = SignedUrlResolver(uow.storage)

    async def get_photo(self, photo_id: str) -> Result[PhotoResponse]:
        """Fetch one photo with a fresh display URL and its comment count."""
        fetched = await self.uow.photos.get_by_id(photo_id)
        if not fetched.is_ok:
            return Result.fail(fetched.error)
        photo = fetched.data

        url = await self.resolver.resolve(photo.path, configs.SIGNED_URL_TTL_USER_SECONDS)
        if not url.is_ok:
            logger.warning(f"No display URL for photo {photo_id}: {url.error.message}")
        counted = await self.uow.comments.count_by_photo(photo_id)
        return Result.ok(
            PhotoResponse.from_record(photo, image_url=url.data or "", comment_count=counted.data)
        )

    async def delete_photo(self, session: AuthSession, photo_id: str) -> Result[None]:
        """Delete an owned photo, its object and (by cascade) its comments."""
        logger.info(f"Deleting photo {photo_id} for user {session.user_id}")
        fetched = await self.uow.photos.get_by_id(photo_id)
        if not fetched.is_ok:
            return Result.fail(fetched.error)

        photo = fetched.data
        if photo.user_id != session.user_id:
            logger.warning(f"User {session.user_id} tried to delete photo {photo_id} owned by {photo.user_id}")
            return Result.fail(NotFoundError(f"Photo {photo_id} not found"))

        return await self.uow.photos.delete(photo.id, photo.path)

    @staticmethod
    def preview_gps(content: bytes) -> GpsResponse:
        coordinate = extract_gps(content)
        if coordinate is None:
            logger.info("No GPS data found in uploaded image; manual entry required")
            return GpsResponse(found=False)
        return GpsResponse(
            found=True,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            source=GpsSource.EXIF.value,
        )
