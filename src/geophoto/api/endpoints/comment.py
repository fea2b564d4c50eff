import logging
from typing import List

from fastapi import APIRouter, Depends, status

from geophoto.api.deps import get_current_session, get_uow
from geophoto.common.session import AuthSession
from geophoto.common.uow import UnitOfWork
from geophoto.schemas.comment import (
    CommentCountResponse,
    CommentCreate,
    CommentDeleteResponse,
    CommentResponse,
)
from geophoto.services.comment import CommentService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/photos/{photo_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    photo_id: str,
    session: AuthSession = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_uow),
):
    service = CommentService(uow)
    result = await service.list_comments(photo_id)
    return [CommentResponse.model_validate(comment) for comment in result.unwrap()]


@router.get("/photos/{photo_id}/comments/count", response_model=CommentCountResponse)
async def count_comments(
    photo_id: str,
    session: AuthSession = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_uow),
):
    service = CommentService(uow)
    result = await service.count_comments(photo_id)
    return CommentCountResponse(photo_id=photo_id, count=result.unwrap())


@router.post("/photos/{photo_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    photo_id: str,
    payload: CommentCreate,
    session: AuthSession = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_uow),
):
    service = CommentService(uow)
    result = await service.add_comment(session, photo_id, payload.content)
    return CommentResponse.model_validate(result.unwrap())


@router.delete("/comments/{comment_id}", response_model=CommentDeleteResponse)
async def delete_comment(
    comment_id: str,
    session: AuthSession = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_uow),
):
    service = CommentService(uow)
    result = await service.delete_comment(session, comment_id)
    return CommentDeleteResponse(deleted=result.unwrap())
