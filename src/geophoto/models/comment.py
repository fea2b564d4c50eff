from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from geophoto.db.database import Base
from geophoto.models.utils import generate_short_id


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String, primary_key=True, default=lambda: generate_short_id("cmt"))
    photo_id = Column(String, ForeignKey("photos.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.user_id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    photo = relationship("Photo", back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, photo_id={self.photo_id}, user_id={self.user_id})>"
