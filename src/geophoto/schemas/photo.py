from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PhotoResponse(BaseModel):
    """A photo as consumed by the map view."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    lat: float
    lon: float
    image_url: str = Field("", serialization_alias="imageUrl")
    owner_id: Optional[UUID] = Field(None, serialization_alias="ownerId")
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    comment_count: Optional[int] = Field(None, serialization_alias="commentCount")

    @classmethod
    def from_record(cls, photo, image_url: str = "", comment_count: Optional[int] = None) -> "PhotoResponse":
        return cls(
            id=photo.id,
            title=photo.title,
            description=photo.description,
            lat=photo.lat,
            lon=photo.lon,
            image_url=image_url,
            owner_id=photo.user_id,
            created_at=photo.created_at,
            comment_count=comment_count,
        )


class GpsResponse(BaseModel):
    found: bool
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source: Optional[str] = None
