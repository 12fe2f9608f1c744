"""Movie watchlist router backed by OMDb lookups."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.watchlist_movie import WatchlistMovie
from services import watchlist as watchlist_service

router = APIRouter()


class WatchlistMovieResponse(BaseModel):
    id: str
    imdb_id: str
    title: str
    year: Optional[str] = None
    poster_url: Optional[str] = None
    type: Optional[str] = None
    plot: Optional[str] = None
    watched: bool = False
    created_at: Optional[datetime] = None
    watched_at: Optional[datetime] = None


class MovieSearchResult(BaseModel):
    imdb_id: Optional[str] = None
    title: Optional[str] = None
    year: Optional[str] = None
    poster_url: Optional[str] = None
    type: Optional[str] = None


class AddMovieRequest(BaseModel):
    imdb_id: Optional[str] = None


def _serialize_movie(movie: WatchlistMovie) -> WatchlistMovieResponse:
    return WatchlistMovieResponse(
        id=movie.id,
        imdb_id=movie.imdb_id,
        title=movie.title,
        year=movie.year,
        poster_url=movie.poster_url,
        type=movie.type,
        plot=movie.plot,
        watched=bool(movie.watched),
        created_at=movie.created_at,
        watched_at=movie.watched_at,
    )


@router.get("/", response_model=List[WatchlistMovieResponse])
async def list_movies(db: AsyncSession = Depends(get_db)):
    return [_serialize_movie(movie) for movie in await watchlist_service.list_movies(db)]


@router.get("/search", response_model=List[MovieSearchResult])
async def search_movies(term: Optional[str] = Query(default=None)):
    results = await watchlist_service.search(term)
    return [MovieSearchResult(**item) for item in results]


@router.post("/", response_model=WatchlistMovieResponse)
async def add_movie(request: AddMovieRequest, db: AsyncSession = Depends(get_db)):
    movie = await watchlist_service.add_movie(db, request.imdb_id)
    return _serialize_movie(movie)


@router.post("/{movie_id}/watched", response_model=WatchlistMovieResponse)
async def set_watched(
    movie_id: str,
    watched: bool = Query(default=True),
    db: AsyncSession = Depends(get_db),
):
    movie = await watchlist_service.set_watched(db, movie_id, watched)
    return _serialize_movie(movie)


@router.delete("/{movie_id}")
async def delete_movie(movie_id: str, db: AsyncSession = Depends(get_db)):
    await watchlist_service.delete_movie(db, movie_id)
    return {"deleted": True, "id": movie_id}
