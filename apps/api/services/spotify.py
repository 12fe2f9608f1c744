"""Spotify track metadata (oEmbed) and playlist lookup."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from config import settings

logger = logging.getLogger(__name__)

OEMBED_URL = "https://open.spotify.com/oembed"
TOKEN_URL = "https://accounts.spotify.com/api/token"
PLAYLIST_TRACKS_URL = "https://api.spotify.com/v1/playlists/{playlist_id}/tracks"

METADATA_TTL_SECONDS = 6 * 60 * 60
PLAYLIST_TTL_SECONDS = 30 * 60

_metadata_cache: Dict[str, Tuple[float, Dict[str, Optional[str]]]] = {}
_playlist_cache: Dict[str, Tuple[float, Dict[str, Any]]] = {}


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)


def _cached(cache: Dict[str, Tuple[float, Any]], key: str) -> Optional[Any]:
    entry = cache.get(key)
    if not entry:
        return None
    expires_at, value = entry
    if expires_at <= time.monotonic():
        cache.pop(key, None)
        return None
    return value


def clear_caches() -> None:
    _metadata_cache.clear()
    _playlist_cache.clear()


async def get_track_metadata(track_url: Optional[str]) -> Optional[Dict[str, Optional[str]]]:
    """Return ``{"thumbnail_url", "title"}`` for a Spotify URL, or None on failure."""
    url = (track_url or "").strip()
    if not url:
        return None

    cached = _cached(_metadata_cache, url)
    if cached is not None:
        return cached

    try:
        async with _http_client() as client:
            resp = await client.get(OEMBED_URL, params={"url": url})
            resp.raise_for_status()
            payload = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.info("Spotify oEmbed lookup failed for %s: %s", url, exc)
        return None

    metadata = {
        "thumbnail_url": payload.get("thumbnail_url"),
        "title": payload.get("title"),
    }
    _metadata_cache[url] = (time.monotonic() + METADATA_TTL_SECONDS, metadata)
    return metadata


def _serialize_track(track: Dict[str, Any]) -> Dict[str, Any]:
    album = track.get("album") or {}
    images = album.get("images") or []
    return {
        "id": track.get("id"),
        "name": track.get("name"),
        "artists": [artist.get("name") for artist in track.get("artists") or [] if artist.get("name")],
        "album": album.get("name"),
        "image_url": images[0].get("url") if images else None,
        "url": (track.get("external_urls") or {}).get("spotify"),
        "preview_url": track.get("preview_url"),
        "duration_ms": track.get("duration_ms"),
    }


async def get_playlist() -> Optional[Dict[str, Any]]:
    """Tracks of the configured playlist; None when unconfigured or on failure."""
    client_id = settings.LOVE_SPOTIFY_CLIENT_ID.strip()
    client_secret = settings.LOVE_SPOTIFY_CLIENT_SECRET.strip()
    playlist_id = settings.LOVE_SPOTIFY_PLAYLIST_ID.strip()
    if not client_id or not client_secret or not playlist_id:
        return None

    cache_key = f"spotify:playlist:{playlist_id}"
    cached = _cached(_playlist_cache, cache_key)
    if cached is not None:
        return cached

    try:
        async with _http_client() as client:
            token_resp = await client.post(
                TOKEN_URL,
                data={"grant_type": "client_credentials"},
                auth=(client_id, client_secret),
            )
            token_resp.raise_for_status()
            access_token = token_resp.json()["access_token"]

            items_resp = await client.get(
                PLAYLIST_TRACKS_URL.format(playlist_id=playlist_id),
                headers={"Authorization": f"Bearer {access_token}"},
            )
            items_resp.raise_for_status()
            items = items_resp.json().get("items") or []
    except (httpx.HTTPError, ValueError, KeyError) as exc:
        logger.warning("Failed to load Spotify playlist %s: %s", playlist_id, exc)
        return None

    tracks: List[Dict[str, Any]] = [
        _serialize_track(item["track"])
        for item in items
        if isinstance(item, dict) and isinstance(item.get("track"), dict) and item["track"].get("type", "track") == "track"
    ]
    if not tracks:
        return None

    result = {
        "playlist_id": playlist_id,
        "playlist_url": f"https://open.spotify.com/playlist/{playlist_id}",
        "tracks": tracks,
    }
    _playlist_cache[cache_key] = (time.monotonic() + PLAYLIST_TTL_SECONDS, result)
    return result
