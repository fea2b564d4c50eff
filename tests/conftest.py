import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from geophoto.api.deps import get_current_session, get_optional_session, get_storage, get_uow
from geophoto.api.endpoints.photo import get_comment_counter
from geophoto.common.session import AuthSession
from geophoto.db.database import get_db
from geophoto.domain.storage.base import StorageService
from geophoto.main import app
from geophoto.models.photo import Photo


@pytest.fixture
def user_id():
    return uuid.UUID("123e4567-e89b-12d3-a456-426614174000")


@pytest.fixture
def auth_session(user_id):
    return AuthSession(user_id=user_id, email="test@example.com")


@pytest.fixture
def mock_storage():
    return AsyncMock(spec=StorageService)


@pytest.fixture
def mock_uow(mock_storage):
    uow = MagicMock()
    uow.storage = mock_storage
    uow.users = MagicMock()
    uow.photos = MagicMock()
    uow.comments = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.refresh = AsyncMock()

    uow.users.get_by_username = AsyncMock(return_value=None)
    uow.users.get_by_email = AsyncMock(return_value=None)
    return uow


@pytest.fixture
def make_photo(user_id):
    def _make(photo_id="pho_1", path=None, lat=48.8566, lon=2.3522, minutes=0, owner=None):
        return Photo(
            id=photo_id,
            user_id=owner or user_id,
            path=path or f"{owner or user_id}/{photo_id}.jpg",
            lat=lat,
            lon=lon,
            title=f"Photo {photo_id}",
            description=None,
            created_at=datetime(2024, 1, 1, 12, minutes, tzinfo=timezone.utc),
        )

    return _make


def _override(app_, mock_uow, mock_storage, session):
    async def override_get_db():
        yield AsyncMock()

    async def override_get_uow():
        return mock_uow

    async def override_optional_session():
        return session

    app_.dependency_overrides[get_db] = override_get_db
    app_.dependency_overrides[get_uow] = override_get_uow
    app_.dependency_overrides[get_storage] = lambda: mock_storage
    app_.dependency_overrides[get_optional_session] = override_optional_session
    app_.dependency_overrides[get_comment_counter] = lambda: None


@pytest_asyncio.fixture
async def client(mock_uow, mock_storage, auth_session) -> AsyncGenerator[AsyncClient, None]:
    _override(app, mock_uow, mock_storage, auth_session)
    app.dependency_overrides[get_current_session] = lambda: auth_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def token_client(mock_uow, mock_storage) -> AsyncGenerator[AsyncClient, None]:
    """Real bearer-token resolution; only persistence and storage are mocked."""
    _override(app, mock_uow, mock_storage, None)
    del app.dependency_overrides[get_optional_session]

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def anon_client(mock_uow, mock_storage) -> AsyncGenerator[AsyncClient, None]:
    _override(app, mock_uow, mock_storage, None)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}
