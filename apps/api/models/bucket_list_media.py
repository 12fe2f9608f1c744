"""Bucket list media model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from database import Base
from models.media_record import MediaRecordMixin, utcnow


class BucketListMedia(MediaRecordMixin, Base):
    """Photo or video attached to a completed bucket list entry."""

    __tablename__ = "bucket_list_media"

    media_kind = "bucket"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    entry_id = Column(String, ForeignKey("bucket_list_entries.id", ondelete="CASCADE"), nullable=False, index=True)
    file_path = Column(String(512), nullable=False)
    thumbnail_path = Column(String(512), nullable=True)
    original_file_name = Column(String(256), nullable=True)
    content_type = Column(String(128), nullable=True)
    is_video = Column(Boolean, nullable=False, default=False)
    is_in_gallery = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    entry = relationship("BucketListEntry", back_populates="media")
