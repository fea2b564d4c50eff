from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    content: str = Field(..., max_length=2000)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    photo_id: str = Field(serialization_alias="photoId")
    author_id: UUID = Field(validation_alias="user_id", serialization_alias="authorId")
    content: str
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")


class CommentCountResponse(BaseModel):
    photo_id: str = Field(serialization_alias="photoId")
    count: int


class CommentDeleteResponse(BaseModel):
    deleted: int
