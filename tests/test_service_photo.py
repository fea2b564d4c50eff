import io
import uuid
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from geophoto.common.result import Result
from geophoto.core.errors import NotFoundError, StorageError
from geophoto.services.photo import PhotoService


@pytest.mark.asyncio
async def test_get_photo_attaches_url_and_count(mock_uow, mock_storage, make_photo):
    mock_uow.photos.get_by_id = AsyncMock(return_value=Result.ok(make_photo("p1")))
    mock_uow.comments.count_by_photo = AsyncMock(return_value=Result.ok(3))
    mock_storage.generate_signed_url.return_value = "https://signed/p1"

    result = await PhotoService(mock_uow).get_photo("p1")

    assert result.data.image_url == "https://signed/p1"
    assert result.data.comment_count == 3


@pytest.mark.asyncio
async def test_get_photo_missing(mock_uow):
    mock_uow.photos.get_by_id = AsyncMock(return_value=Result.fail(NotFoundError("Photo p9 not found")))

    result = await PhotoService(mock_uow).get_photo("p9")

    assert isinstance(result.error, NotFoundError)


@pytest.mark.asyncio
async def test_delete_own_photo(mock_uow, auth_session, make_photo):
    photo = make_photo("p1")
    mock_uow.photos.get_by_id = AsyncMock(return_value=Result.ok(photo))
    mock_uow.photos.delete = AsyncMock(return_value=Result.ok(None))

    result = await PhotoService(mock_uow).delete_photo(auth_session, "p1")

    assert result.is_ok
    mock_uow.photos.delete.assert_awaited_once_with("p1", photo.path)


@pytest.mark.asyncio
async def test_delete_foreign_photo_is_not_found(mock_uow, auth_session, make_photo):
    mock_uow.photos.get_by_id = AsyncMock(return_value=Result.ok(make_photo("p1", owner=uuid.uuid4())))
    mock_uow.photos.delete = AsyncMock()

    result = await PhotoService(mock_uow).delete_photo(auth_session, "p1")

    assert isinstance(result.error, NotFoundError)
    mock_uow.photos.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_propagates_storage_failure(mock_uow, auth_session, make_photo):
    mock_uow.photos.get_by_id = AsyncMock(return_value=Result.ok(make_photo("p1")))
    mock_uow.photos.delete = AsyncMock(return_value=Result.fail(StorageError("bucket down")))

    result = await PhotoService(mock_uow).delete_photo(auth_session, "p1")

    assert isinstance(result.error, StorageError)


def test_preview_gps_without_exif():
    buf = io.BytesIO()
    Image.new("RGB", (4, 4)).save(buf, "PNG")

    preview = PhotoService.preview_gps(buf.getvalue())

    assert preview.found is False
    assert preview.latitude is None
