"""Movie watchlist backed by the OMDb API."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import require_omdb_api_key, settings
from models.watchlist_movie import WatchlistMovie

logger = logging.getLogger(__name__)

OMDB_URL = "https://www.omdbapi.com/"
SUPPORTED_TYPES = {"movie", "series"}


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)


def _api_key() -> str:
    try:
        return require_omdb_api_key()
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip() or str(value).strip().upper() == "N/A":
        return None
    return str(value).strip()


def normalize_type(value: Optional[str]) -> Optional[str]:
    cleaned = _clean(value)
    if cleaned is None:
        return None
    lowered = cleaned.lower()
    return lowered if lowered in SUPPORTED_TYPES else cleaned


def _is_success(payload: Dict[str, Any]) -> bool:
    return str(payload.get("Response", "")).lower() == "true"


async def _omdb_get(params: Dict[str, str]) -> Dict[str, Any]:
    async with _http_client() as client:
        try:
            resp = await client.get(OMDB_URL, params={"apikey": _api_key(), **params})
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("OMDb request failed: %s", exc)
            raise HTTPException(status_code=502, detail="OMDb request failed.") from exc


async def list_movies(db: AsyncSession) -> Sequence[WatchlistMovie]:
    result = await db.execute(
        select(WatchlistMovie).order_by(WatchlistMovie.watched, WatchlistMovie.created_at.desc())
    )
    return result.scalars().all()


async def search(term: Optional[str]) -> List[Dict[str, Optional[str]]]:
    query = (term or "").strip()
    if len(query) < 2:
        raise HTTPException(status_code=400, detail="Enter at least two characters.")

    payload = await _omdb_get({"s": query})
    if not _is_success(payload):
        raise HTTPException(status_code=404, detail=payload.get("Error") or "No results found.")

    results = [
        {
            "imdb_id": item.get("imdbID"),
            "title": item.get("Title"),
            "year": _clean(item.get("Year")),
            "poster_url": _clean(item.get("Poster")),
            "type": normalize_type(item.get("Type")),
        }
        for item in payload.get("Search") or []
        if str(item.get("Type", "")).lower() in SUPPORTED_TYPES
    ]
    if not results:
        raise HTTPException(status_code=404, detail="No movies found.")
    return results


async def add_movie(db: AsyncSession, imdb_id: Optional[str]) -> WatchlistMovie:
    normalized = (imdb_id or "").strip()
    if not normalized:
        raise HTTPException(status_code=400, detail="IMDb id is required.")
    _api_key()

    existing = await db.execute(select(WatchlistMovie.id).where(WatchlistMovie.imdb_id == normalized))
    if existing.first() is not None:
        raise HTTPException(status_code=400, detail="This movie is already on the watchlist.")

    payload = await _omdb_get({"i": normalized})
    title = _clean(payload.get("Title"))
    if not _is_success(payload) or not title:
        raise HTTPException(status_code=404, detail=payload.get("Error") or "Movie not found.")

    movie = WatchlistMovie(
        id=str(uuid.uuid4()),
        imdb_id=(payload.get("imdbID") or normalized)[:24],
        title=title[:240],
        year=_clean(payload.get("Year")),
        poster_url=_clean(payload.get("Poster")),
        type=normalize_type(payload.get("Type")),
        plot=(_clean(payload.get("Plot")) or "")[:2000] or None,
        watched=False,
    )
    db.add(movie)
    await db.commit()
    return movie


async def _get_movie(db: AsyncSession, movie_id: str) -> WatchlistMovie:
    result = await db.execute(select(WatchlistMovie).where(WatchlistMovie.id == movie_id))
    movie = result.scalar_one_or_none()
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    return movie


async def set_watched(db: AsyncSession, movie_id: str, watched: bool) -> WatchlistMovie:
    movie = await _get_movie(db, movie_id)
    movie.watched = watched
    movie.watched_at = datetime.now(timezone.utc) if watched else None
    await db.commit()
    return movie


async def delete_movie(db: AsyncSession, movie_id: str) -> None:
    movie = await _get_movie(db, movie_id)
    await db.delete(movie)
    await db.commit()
