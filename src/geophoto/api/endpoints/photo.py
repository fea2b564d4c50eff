import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from geophoto.api.deps import get_current_session, get_optional_session, get_uow
from geophoto.common.session import AuthSession
from geophoto.common.uow import UnitOfWork
from geophoto.core.config import configs
from geophoto.db.database import AsyncSessionLocal
from geophoto.domain.signed_url import SignedUrlResolver
from geophoto.schemas.photo import GpsResponse, PhotoResponse
from geophoto.services.feed import FallbackPolicy, PhotoFeedAssembler, SessionScopedCommentCounter
from geophoto.services.photo import PhotoService
from geophoto.services.upload import UploadOrchestrator

router = APIRouter()
logger = logging.getLogger(__name__)


def get_comment_counter() -> Optional[SessionScopedCommentCounter]:
    if not configs.FEED_INCLUDE_COMMENT_COUNTS:
        return None
    return SessionScopedCommentCounter(AsyncSessionLocal)


def build_feed(uow: UnitOfWork, comment_counter) -> PhotoFeedAssembler:
    return PhotoFeedAssembler(
        uow.photos,
        SignedUrlResolver(uow.storage),
        comment_counter=comment_counter,
        policy=FallbackPolicy(configs.FEED_FALLBACK_POLICY),
    )


@router.get("/feed", response_model=List[PhotoResponse])
async def public_feed(
    limit: Optional[int] = Query(None, ge=1, le=configs.PUBLIC_FEED_LIMIT),
    session: Optional[AuthSession] = Depends(get_optional_session),
    uow: UnitOfWork = Depends(get_uow),
    comment_counter=Depends(get_comment_counter),
):
    feed = build_feed(uow, comment_counter)
    result = await feed.public(limit=limit)
    return result.unwrap()


@router.get("/photos", response_model=List[PhotoResponse])
async def list_my_photos(
    session: AuthSession = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_uow),
    comment_counter=Depends(get_comment_counter),
):
    feed = build_feed(uow, comment_counter)
    result = await feed.for_owner(session)
    return result.unwrap()


@router.post("/photos", response_model=PhotoResponse, status_code=status.HTTP_201_CREATED)
async def upload_photo(
    file: UploadFile = File(...),
    lat: Optional[str] = Form(None),
    lon: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    session: AuthSession = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_uow),
):
    content = await file.read()
    logger.info(f"Upload request from {session.user_id}: '{file.filename}' ({len(content)} bytes)")
    orchestrator = UploadOrchestrator(uow)
    result = await orchestrator.upload(
        session,
        content,
        filename=file.filename,
        content_type=file.content_type,
        lat=lat,
        lon=lon,
        title=title,
        description=description,
    )
    return result.unwrap()


@router.post("/photos/gps", response_model=GpsResponse)
async def extract_photo_gps(
    file: UploadFile = File(...),
    session: AuthSession = Depends(get_current_session),
):
    content = await file.read()
    return PhotoService.preview_gps(content)


@router.get("/photos/{photo_id}", response_model=PhotoResponse)
async def get_photo(
    photo_id: str,
    session: AuthSession = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_uow),
):
    service = PhotoService(uow)
    result = await service.get_photo(photo_id)
    return result.unwrap()


@router.delete("/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_photo(
    photo_id: str,
    session: AuthSession = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_uow),
):
    service = PhotoService(uow)
    result = await service.delete_photo(session, photo_id)
    result.unwrap()
