"""Bucket list entry model."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from database import Base
from models.media_record import utcnow


class BucketListEntry(Base):
    """Something to experience together, optionally completed with media."""

    __tablename__ = "bucket_list_entries"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(160), nullable=False)
    description = Column(String(2000), nullable=True)
    requires_photo = Column(Boolean, nullable=False, default=False)
    completed = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    media = relationship(
        "BucketListMedia",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="BucketListMedia.created_at",
    )
