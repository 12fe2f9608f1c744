"""Spotify-backed music endpoints."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query

from services.love_config import get_love_config
from services.spotify import get_playlist, get_track_metadata

router = APIRouter()


@router.get("/metadata")
async def track_metadata(url: Optional[str] = Query(default=None)):
    metadata = await get_track_metadata(url)
    if metadata is None:
        raise HTTPException(status_code=404, detail="Track metadata not available.")
    return metadata


@router.get("/playlist")
async def playlist():
    result = await get_playlist()
    if result is None:
        raise HTTPException(status_code=404, detail="Playlist not available.")
    return result


@router.get("/songs")
async def songs() -> Dict[str, Any]:
    """Configured song list with cover art where Spotify knows the track."""
    section = get_love_config().songs
    items: List[Dict[str, Any]] = []
    for song in section.items:
        metadata = await get_track_metadata(song.url) or {}
        items.append(
            {
                "url": song.url,
                "artist": song.artist,
                "title": metadata.get("title"),
                "thumbnail_url": metadata.get("thumbnail_url"),
            }
        )
    return {
        "eyebrow": section.eyebrow,
        "heading": section.heading,
        "subheading": section.subheading,
        "items": items,
    }
