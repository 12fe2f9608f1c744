"""Routers package."""

from . import (
    health,
    gallery,
    bucketlist,
    travel,
    watchlist,
    content,
    hero,
    music,
)
