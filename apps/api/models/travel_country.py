"""Travel destination model."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import func
import uuid

from database import Base
from models.media_record import utcnow


class TravelCountry(Base):
    """Country on the travel map, planned or visited."""

    __tablename__ = "travel_countries"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    country_code = Column(String(3), nullable=False, unique=True)
    country_name = Column(String(120), nullable=False)
    is_visited = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    visited_at = Column(DateTime(timezone=True), nullable=True)
