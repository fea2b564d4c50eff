from fastapi import APIRouter

from geophoto.api.endpoints import auth, comment, media, photo

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(photo.router, tags=["Photos"])
api_router.include_router(comment.router, tags=["Comments"])
api_router.include_router(media.router, tags=["Media"])
