"""Gallery album model."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func
import uuid

from database import Base
from models.media_record import utcnow


class GalleryAlbum(Base):
    """Explicitly created album; photos reference it by name."""

    __tablename__ = "gallery_albums"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(80), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
