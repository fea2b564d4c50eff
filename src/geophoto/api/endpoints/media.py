import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from geophoto.api.deps import get_storage
from geophoto.core.errors import NotAuthenticatedError, NotFoundError
from geophoto.domain.storage.base import StorageService
from geophoto.domain.storage.local import LocalStorageService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/media/{path:path}")
async def download_media(
    path: str,
    token: str = Query(...),
    storage: StorageService = Depends(get_storage),
):
    """Serve a locally stored object to the bearer of a signed URL."""
    if not isinstance(storage, LocalStorageService):
        raise NotFoundError("Media is not served by this backend")

    if not storage.verify_token(path, token):
        raise NotAuthenticatedError("Invalid or expired media token")

    try:
        full_path = storage.resolve_path(path)
    except ValueError:
        raise NotFoundError(f"Object {path} not found")
    if not full_path.is_file():
        raise NotFoundError(f"Object {path} not found")
    return FileResponse(full_path)
