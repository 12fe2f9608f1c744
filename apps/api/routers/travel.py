"""Travel map router: planned and visited countries."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.travel_country import TravelCountry
from services import travel as travel_service
from services.country_catalog import country_catalog

router = APIRouter()
logger = logging.getLogger(__name__)


class TravelCountryResponse(BaseModel):
    id: str
    country_code: str
    country_name: str
    is_visited: bool = False
    created_at: Optional[datetime] = None
    visited_at: Optional[datetime] = None


class CountryOptionResponse(BaseModel):
    code: str
    name: str
    flag_png: Optional[str] = None
    flag_svg: Optional[str] = None


class AddCountryRequest(BaseModel):
    code: str


def _serialize_country(entry: TravelCountry) -> TravelCountryResponse:
    return TravelCountryResponse(
        id=entry.id,
        country_code=entry.country_code,
        country_name=entry.country_name,
        is_visited=bool(entry.is_visited),
        created_at=entry.created_at,
        visited_at=entry.visited_at,
    )


@router.get("/", response_model=List[TravelCountryResponse])
async def list_countries(db: AsyncSession = Depends(get_db)):
    return [_serialize_country(entry) for entry in await travel_service.list_countries(db)]


@router.get("/countries", response_model=List[CountryOptionResponse])
async def list_country_options():
    """All selectable countries from the cached catalog."""
    try:
        options = await country_catalog.get_all()
    except httpx.HTTPError as exc:
        logger.warning("Country catalog unavailable: %s", exc)
        raise HTTPException(status_code=502, detail="Country catalog is unavailable.") from exc
    return [CountryOptionResponse(**option.__dict__) for option in options]


@router.post("/", response_model=TravelCountryResponse)
async def add_country(request: AddCountryRequest, db: AsyncSession = Depends(get_db)):
    entry = await travel_service.add_planned(db, request.code)
    return _serialize_country(entry)


@router.post("/{country_id}/visited", response_model=TravelCountryResponse)
async def set_visited(
    country_id: str,
    visited: bool = Query(default=True),
    db: AsyncSession = Depends(get_db),
):
    entry = await travel_service.set_visited(db, country_id, visited)
    return _serialize_country(entry)


@router.delete("/{country_id}")
async def remove_country(country_id: str, db: AsyncSession = Depends(get_db)):
    await travel_service.remove_country(db, country_id)
    return {"deleted": True, "id": country_id}
