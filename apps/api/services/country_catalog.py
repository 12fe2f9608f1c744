"""Country catalog backed by the REST Countries API with disk and memory caches."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, List, Optional

import httpx

from config import settings
from services.media_paths import data_dir

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = "countries-cache.json"


@dataclass(frozen=True)
class CountryOption:
    code: str
    name: str
    flag_png: Optional[str] = None
    flag_svg: Optional[str] = None


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)


def parse_countries(payload: Any) -> List[CountryOption]:
    """Turn the REST Countries payload into sorted options."""
    options: List[CountryOption] = []
    for item in payload or []:
        if not isinstance(item, dict):
            continue
        code = str(item.get("cca3") or "").strip()
        name = ((item.get("name") or {}).get("common") or "").strip()
        if not code or not name:
            continue
        flags = item.get("flags") or {}
        options.append(
            CountryOption(
                code=code.upper(),
                name=name,
                flag_png=flags.get("png"),
                flag_svg=flags.get("svg"),
            )
        )
    return sorted(options, key=lambda option: option.name.casefold())


class CountryCatalog:
    def __init__(self, cache_path: Optional[Path] = None) -> None:
        self._cache_path = cache_path
        self._cache: Optional[List[CountryOption]] = None
        self._lock = asyncio.Lock()

    @property
    def cache_path(self) -> Path:
        return self._cache_path or data_dir() / CACHE_FILE_NAME

    def _load_from_disk(self) -> Optional[List[CountryOption]]:
        path = self.cache_path
        if not path.exists():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            cached = [CountryOption(**item) for item in raw]
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Ignoring unreadable country cache %s: %s", path, exc)
            return None
        return cached or None

    def _save_to_disk(self, countries: List[CountryOption]) -> None:
        path = self.cache_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps([asdict(item) for item in countries]), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write country cache %s: %s", path, exc)

    async def _fetch(self) -> List[CountryOption]:
        async with _http_client() as client:
            resp = await client.get(settings.COUNTRY_CATALOG_URL)
            resp.raise_for_status()
            return parse_countries(resp.json())

    async def get_all(self) -> List[CountryOption]:
        if self._cache is not None:
            return self._cache
        async with self._lock:
            if self._cache is not None:
                return self._cache
            loaded = await asyncio.to_thread(self._load_from_disk)
            if loaded is None:
                loaded = await self._fetch()
                await asyncio.to_thread(self._save_to_disk, loaded)
            self._cache = loaded
            return loaded

    async def find_by_code(self, code: Optional[str]) -> Optional[CountryOption]:
        normalized = (code or "").strip().upper()
        if not normalized:
            return None
        for option in await self.get_all():
            if option.code == normalized:
                return option
        return None


country_catalog = CountryCatalog()
