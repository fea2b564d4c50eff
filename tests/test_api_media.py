from urllib.parse import urlparse

import pytest
import pytest_asyncio
from fastapi import status
from httpx import ASGITransport, AsyncClient

from geophoto.api.deps import get_storage
from geophoto.domain.storage.local import LocalStorageService
from geophoto.main import app


@pytest.fixture
def local_storage(tmp_path):
    return LocalStorageService(media_root=str(tmp_path), media_url="/api/media")


@pytest_asyncio.fixture
async def media_client(local_storage):
    app.dependency_overrides[get_storage] = lambda: local_storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}


@pytest.mark.asyncio
async def test_signed_url_serves_object(media_client, local_storage):
    await local_storage.save_file(b"jpeg-bytes", "u1/photo.jpg")
    url = await local_storage.generate_signed_url("u1/photo.jpg", 60)
    parsed = urlparse(url)

    response = await media_client.get(f"{parsed.path}?{parsed.query}")

    assert response.status_code == status.HTTP_200_OK
    assert response.content == b"jpeg-bytes"


@pytest.mark.asyncio
async def test_token_for_other_path_is_rejected(media_client, local_storage):
    await local_storage.save_file(b"a", "u1/a.jpg")
    await local_storage.save_file(b"b", "u2/b.jpg")
    token = urlparse(await local_storage.generate_signed_url("u1/a.jpg", 60)).query

    response = await media_client.get(f"/api/media/u2/b.jpg?{token}")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_expired_token_is_rejected(media_client, local_storage):
    await local_storage.save_file(b"a", "u1/a.jpg")
    url = urlparse(await local_storage.generate_signed_url("u1/a.jpg", -5))

    response = await media_client.get(f"{url.path}?{url.query}")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_missing_token(media_client):
    response = await media_client.get("/api/media/u1/a.jpg")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
