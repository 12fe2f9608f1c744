"""Watchlist movie model."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import func
import uuid

from database import Base
from models.media_record import utcnow


class WatchlistMovie(Base):
    """Movie or series to watch, sourced from OMDb."""

    __tablename__ = "watchlist_movies"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    imdb_id = Column(String(24), nullable=False, unique=True)
    title = Column(String(240), nullable=False)
    year = Column(String(12), nullable=True)
    poster_url = Column(String(500), nullable=True)
    type = Column(String(40), nullable=True)
    plot = Column(String(2000), nullable=True)
    watched = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    watched_at = Column(DateTime(timezone=True), nullable=True)
