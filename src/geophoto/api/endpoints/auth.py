import logging

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from geophoto.api.deps import get_current_session, get_uow
from geophoto.common.session import AuthSession
from geophoto.common.uow import UnitOfWork
from geophoto.core.errors import NotAuthenticatedError
from geophoto.schemas.user import Token, UserCreate, UserResponse
from geophoto.services.auth import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, uow: UnitOfWork = Depends(get_uow)):
    """Register a new user."""
    service = AuthService(uow)
    return await service.register(user_data)


@router.post("/login", response_model=Token)
async def login(form_data: OAuth2PasswordRequestForm = Depends(), uow: UnitOfWork = Depends(get_uow)):
    """Login and get access token."""
    service = AuthService(uow)
    access_token = await service.login(form_data)
    return Token(access_token=access_token)


@router.get("/me", response_model=UserResponse)
async def get_me(session: AuthSession = Depends(get_current_session), uow: UnitOfWork = Depends(get_uow)):
    """Get current user information."""
    user = await uow.users.get_by_id(session.user_id)
    if user is None:
        raise NotAuthenticatedError()
    logger.info(f"Fetching profile for user: {user.username}")
    return user
