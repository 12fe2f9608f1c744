"""Gallery photo model."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import func
import uuid

from database import Base
from models.media_record import MediaRecordMixin, utcnow


class GalleryPhoto(MediaRecordMixin, Base):
    """Uploaded gallery photo with optional album and favorite flag."""

    __tablename__ = "gallery_photos"

    media_kind = "gallery"
    # Gallery only accepts still images.
    is_video = False

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    caption = Column(String(160), nullable=True)
    original_file_name = Column(String(256), nullable=True)
    file_path = Column(String(512), nullable=False)
    thumbnail_path = Column(String(512), nullable=True)
    album = Column(String(80), nullable=True, index=True)
    is_favorite = Column(Boolean, nullable=False, default=False)
    favorited_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
