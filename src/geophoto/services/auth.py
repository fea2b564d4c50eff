import logging
import uuid
from datetime import timedelta

from fastapi.security import OAuth2PasswordRequestForm

from geophoto.common.session import AuthSession
from geophoto.common.uow import UnitOfWork
from geophoto.core.config import configs
from geophoto.core.errors import NotAuthenticatedError, ValidationError
from geophoto.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from geophoto.models.user import User
from geophoto.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def register(self, user_data: UserCreate) -> User:
        """Register a new user."""
        logger.info(f"Registration attempt for username: {user_data.username}")
        if await self.uow.users.get_by_username(user_data.username):
            logger.warning(f"Registration failed: Username '{user_data.username}' already registered.")
            raise ValidationError("Username already registered")

        if await self.uow.users.get_by_email(user_data.email):
            logger.warning(f"Registration failed: Email '{user_data.email}' already registered.")
            raise ValidationError("Email already registered")

        new_user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
        )

        await self.uow.users.create(new_user)
        await self.uow.commit()
        await self.uow.refresh(new_user)

        logger.info(f"User '{new_user.username}' registered successfully with ID: {new_user.user_id}")
        return new_user

    async def login(self, form_data: OAuth2PasswordRequestForm) -> str:
        """Login and get access token."""
        logger.info(f"Login attempt for username: {form_data.username}")
        user = await self.uow.users.get_by_username(form_data.username)

        if not user or not verify_password(form_data.password, user.password_hash):
            logger.warning(f"Login failed for username: {form_data.username}. Incorrect username or password.")
            raise NotAuthenticatedError("Incorrect username or password")

        access_token = create_access_token(
            data={"sub": str(user.user_id)},
            expires_delta=timedelta(minutes=configs.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        logger.info(f"Login successful for user: {user.username}")
        return access_token

    async def get_current_user(self, token: str) -> AuthSession:
        """Resolve a bearer token into the caller's session."""
        payload = decode_access_token(token)
        if payload is None:
            logger.warning("Could not validate credentials: Token decoding failed.")
            raise NotAuthenticatedError("Could not validate credentials")

        user_id = payload.get("sub")
        if user_id is None:
            logger.warning("Could not validate credentials: User ID not in token payload.")
            raise NotAuthenticatedError("Could not validate credentials")

        try:
            user_uuid = uuid.UUID(str(user_id))
        except ValueError:
            logger.warning(f"Could not validate credentials: malformed subject {user_id!r}.")
            raise NotAuthenticatedError("Could not validate credentials")

        user = await self.uow.users.get_by_id(user_uuid)
        if user is None:
            logger.warning(f"User {user_id} not found in database.")
            raise NotAuthenticatedError("Could not validate credentials")

        logger.debug(f"Authenticated user: {user.username}")
        return AuthSession.from_user(user)
