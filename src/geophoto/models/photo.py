from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from geophoto.db.database import Base
from geophoto.models.utils import generate_short_id


class Photo(Base):
    __tablename__ = "photos"
    __table_args__ = (
        CheckConstraint("lat >= -90 AND lat <= 90", name="ck_photos_lat_range"),
        CheckConstraint("lon >= -180 AND lon <= 180", name="ck_photos_lon_range"),
    )

    id = Column(String, primary_key=True, default=lambda: generate_short_id("pho"))
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.user_id"), nullable=False, index=True)
    path = Column(String, nullable=False, unique=True)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    title = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    # Reserved for raw EXIF metadata; always null for now.
    exif = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    owner = relationship("User", back_populates="photos")
    comments = relationship(
        "Comment",
        back_populates="photo",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Photo(id={self.id}, path={self.path}, lat={self.lat}, lon={self.lon})>"
