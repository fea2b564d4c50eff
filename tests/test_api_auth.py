import uuid
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status

from geophoto.core.errors import NotAuthenticatedError
from geophoto.models.user import User


@pytest.mark.asyncio
async def test_register(anon_client):
    user = User(user_id=uuid.uuid4(), username="newuser", email="new@example.com", created_at=datetime.now())

    with patch("geophoto.api.endpoints.auth.AuthService") as MockService:
        MockService.return_value.register = AsyncMock(return_value=user)

        response = await anon_client.post(
            "/api/auth/register",
            json={"username": "newuser", "email": "new@example.com", "password": "password"},
        )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["username"] == "newuser"
    assert "password_hash" not in response.json()


@pytest.mark.asyncio
async def test_register_validates_payload(anon_client):
    response = await anon_client.post(
        "/api/auth/register", json={"username": "ab", "email": "not-an-email", "password": "123"}
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_login(anon_client):
    with patch("geophoto.api.endpoints.auth.AuthService") as MockService:
        MockService.return_value.login = AsyncMock(return_value="jwt-token")

        response = await anon_client.post("/api/auth/login", data={"username": "user", "password": "password"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"access_token": "jwt-token", "token_type": "bearer"}


@pytest.mark.asyncio
async def test_login_failure(anon_client):
    with patch("geophoto.api.endpoints.auth.AuthService") as MockService:
        MockService.return_value.login = AsyncMock(side_effect=NotAuthenticatedError("Incorrect username or password"))

        response = await anon_client.post("/api/auth/login", data={"username": "user", "password": "nope"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Incorrect username or password"


@pytest.mark.asyncio
async def test_me(client, mock_uow, user_id):
    mock_uow.users.get_by_id = AsyncMock(
        return_value=User(user_id=user_id, username="testuser", email="test@example.com", created_at=datetime.now())
    )

    response = await client.get("/api/auth/me")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user_id"] == str(user_id)


@pytest.mark.asyncio
async def test_me_requires_auth(anon_client):
    response = await anon_client.get("/api/auth/me")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
