import logging
import time
import uuid
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Optional

from geophoto.common.result import Result
from geophoto.common.session import AuthSession
from geophoto.common.uow import UnitOfWork
from geophoto.core.config import configs
from geophoto.core.errors import AppError, DbError, StorageError, ValidationError
from geophoto.domain.exif import extract_gps
from geophoto.domain.geo import Gps, GpsSource, is_blank, validate_coordinates
from geophoto.domain.signed_url import SignedUrlResolver
from geophoto.domain.storage.base import ObjectExistsError
from geophoto.schemas.photo import PhotoResponse

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "jpg"


class UploadState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    WRITING_OBJECT = "writing_object"
    WRITING_RECORD = "writing_record"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"


def generate_storage_path(owner_id, filename: Optional[str]) -> str:
    """``{owner}/{epoch_ms}-{uuid4}.{ext}``; the original extension is kept."""
    extension = PurePosixPath(filename or "").suffix.lstrip(".").lower() or DEFAULT_EXTENSION
    return f"{owner_id}/{int(time.time() * 1000)}-{uuid.uuid4()}.{extension}"


def resolve_gps(lat: Any, lon: Any, image_bytes: bytes) -> Gps:
    """Manual entry wins; only when both fields are empty is EXIF consulted."""
    if not (is_blank(lat) and is_blank(lon)):
        # raw input is kept so the validator sees exactly what the user typed
        return Gps(latitude=lat, longitude=lon, source=GpsSource.MANUAL)

    coordinate = extract_gps(image_bytes)
    if coordinate is None:
        return Gps()
    return Gps.from_coordinate(coordinate, GpsSource.EXIF)


class UploadOrchestrator:
    """
    Single upload attempt: validate, write the object, write the record.

    Steps run strictly in order. A failed record write triggers one best-effort
    delete of the just-written object; the reported error stays the insert
    failure. Retrying after a failure produces a new path and a new record.
    """

    def __init__(self, uow: UnitOfWork, resolver: Optional[SignedUrlResolver] = None):
        self.uow = uow
        self.storage = uow.storage
        self.resolver = resolver or SignedUrlResolver(uow.storage)
        self.state = UploadState.IDLE

    def _transition(self, state: UploadState) -> None:
        logger.debug(f"Upload state {self.state.value} -> {state.value}")
        self.state = state

    def _check_payload(self, content: bytes, content_type: Optional[str]) -> Optional[ValidationError]:
        if not content:
            return ValidationError("Uploaded file is empty")
        content_type = (content_type or "").lower()
        if not content_type.startswith("image/"):
            return ValidationError("Please select an image file")
        if content_type not in configs.upload_allowed_types:
            return ValidationError(f"Unsupported image type: {content_type}")
        if len(content) > configs.UPLOAD_WARNING_SIZE_BYTES:
            logger.warning(f"Large upload detected ({len(content)} bytes); accepting")
        return None

    async def upload(
        self,
        session: AuthSession,
        content: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        lat: Any = None,
        lon: Any = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Result[PhotoResponse]:
        self._transition(UploadState.VALIDATING)

        error = self._check_payload(content, content_type)
        if error is not None:
            self._transition(UploadState.IDLE)
            return Result.fail(error)

        gps = resolve_gps(lat, lon, content)
        if gps.latitude is None and gps.longitude is None:
            self._transition(UploadState.IDLE)
            return Result.fail(ValidationError("No GPS data found. Please enter manually."))
        if not validate_coordinates(gps.latitude, gps.longitude):
            self._transition(UploadState.IDLE)
            return Result.fail(
                ValidationError("Latitude must be within [-90, 90] and longitude within [-180, 180]")
            )
        coordinate = gps.to_coordinate()

        path = generate_storage_path(session.user_id, filename)
        self._transition(UploadState.WRITING_OBJECT)
        try:
            await self.storage.save_file(content, path, content_type=content_type)
        except ObjectExistsError as e:
            self._transition(UploadState.FAILED)
            logger.error(f"Upload refused, object already exists at '{path}'")
            return Result.fail(StorageError(str(e)))
        except Exception as e:
            self._transition(UploadState.FAILED)
            logger.error(f"Object write failed for '{path}': {e}", exc_info=True)
            return Result.fail(StorageError(str(e)))

        self._transition(UploadState.WRITING_RECORD)
        try:
            inserted = await self.uow.photos.insert(
                session.user_id,
                path,
                coordinate.latitude,
                coordinate.longitude,
                title=title,
                description=description,
            )
        except Exception as e:
            logger.error(f"Record write raised for '{path}': {e}", exc_info=True, extra={"storage_path": path})
            inserted = Result.fail(DbError(str(e)))
        if not inserted.is_ok:
            await self._rollback_object(path, inserted.error)
            self._transition(UploadState.ROLLED_BACK)
            return Result.fail(inserted.error)

        photo = inserted.data
        self._transition(UploadState.COMMITTED)
        logger.info(
            f"Photo {photo.id} uploaded by {session.user_id} (gps source: {gps.source.value})",
            extra={"photo_id": photo.id, "user_id": session.user_id, "gps_source": gps.source.value},
        )

        url = await self.resolver.resolve(photo.path, configs.SIGNED_URL_TTL_USER_SECONDS)
        if not url.is_ok:
            logger.warning(f"Photo {photo.id} committed but display URL unavailable: {url.error.message}")
        return Result.ok(PhotoResponse.from_record(photo, image_url=url.data or "", comment_count=0))

    async def _rollback_object(self, path: str, cause: AppError) -> None:
        logger.warning(
            f"Record write failed ({cause.message}); removing object '{path}'",
            extra={"storage_path": path, "upload_state": self.state.value},
        )
        try:
            await self.storage.delete_file(path)
        except Exception as e:
            # the insert failure is what the caller sees
            logger.error(f"Rollback of object '{path}' failed: {e}", exc_info=True)
