"""Travel map destinations."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence

import httpx
from fastapi import HTTPException
from sqlalchemy import case, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.travel_country import TravelCountry
from services.country_catalog import CountryCatalog, country_catalog


async def list_countries(db: AsyncSession) -> Sequence[TravelCountry]:
    result = await db.execute(
        select(TravelCountry).order_by(
            case((TravelCountry.is_visited.is_(True), 0), else_=1),
            func.coalesce(TravelCountry.visited_at, TravelCountry.created_at).desc(),
            TravelCountry.country_name,
        )
    )
    return result.scalars().all()


async def _get_country(db: AsyncSession, country_id: str) -> TravelCountry:
    result = await db.execute(select(TravelCountry).where(TravelCountry.id == country_id))
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Country not found")
    return entry


async def add_planned(
    db: AsyncSession,
    code: Optional[str],
    catalog: CountryCatalog = country_catalog,
) -> TravelCountry:
    try:
        country = await catalog.find_by_code(code)
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=502, detail="Country catalog is unavailable.") from exc
    if country is None:
        raise HTTPException(status_code=404, detail="Country could not be found.")

    result = await db.execute(select(TravelCountry).where(TravelCountry.country_code == country.code))
    existing = result.scalar_one_or_none()
    if existing:
        existing.country_name = country.name
        await db.commit()
        return existing

    entry = TravelCountry(
        id=str(uuid.uuid4()),
        country_code=country.code,
        country_name=country.name,
        is_visited=False,
    )
    db.add(entry)
    await db.commit()
    return entry


async def set_visited(db: AsyncSession, country_id: str, visited: bool) -> TravelCountry:
    entry = await _get_country(db, country_id)
    entry.is_visited = visited
    entry.visited_at = datetime.now(timezone.utc) if visited else None
    await db.commit()
    return entry


async def remove_country(db: AsyncSession, country_id: str) -> None:
    entry = await _get_country(db, country_id)
    await db.delete(entry)
    await db.commit()
