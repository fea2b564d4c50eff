import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from geophoto.common.session import AuthSession
from geophoto.common.uow import UnitOfWork
from geophoto.core.errors import NotAuthenticatedError
from geophoto.db.database import get_db
from geophoto.domain.storage.base import StorageService
from geophoto.domain.storage.factory import get_storage_client
from geophoto.services.auth import AuthService

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_storage() -> StorageService:
    return get_storage_client()


async def get_uow(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
) -> UnitOfWork:
    return UnitOfWork(db, storage)


async def get_optional_session(
    token: Optional[str] = Depends(oauth2_scheme),
    uow: UnitOfWork = Depends(get_uow),
) -> Optional[AuthSession]:
    """Anonymous callers and callers with a stale or malformed token both get None."""
    if not token:
        return None
    try:
        return await AuthService(uow).get_current_user(token)
    except NotAuthenticatedError:
        logger.info("Ignoring invalid bearer token on optional-auth route")
        return None


async def get_current_session(
    token: Optional[str] = Depends(oauth2_scheme),
    uow: UnitOfWork = Depends(get_uow),
) -> AuthSession:
    if not token:
        raise NotAuthenticatedError()
    return await AuthService(uow).get_current_user(token)
