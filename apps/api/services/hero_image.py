"""Replaceable hero image shown on the landing page."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from fastapi import UploadFile

from services.love_config import get_love_config
from services.media_paths import data_dir, resolve_asset_path, try_delete_asset, web_root
from services.uploads import MAX_PHOTO_UPLOAD_BYTES, ensure_image_extension, save_upload

logger = logging.getLogger(__name__)

METADATA_FILE_NAME = "hero-image.json"
HERO_UPLOAD_PREFIX = "uploads/hero"


def _metadata_path() -> Path:
    return data_dir() / METADATA_FILE_NAME


def _read_metadata() -> Optional[Dict[str, Optional[str]]]:
    path = _metadata_path()
    if not path.exists():
        return None
    try:
        raw = path.read_text(encoding="utf-8")
        if not raw.strip():
            return None
        payload = json.loads(raw)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to read hero image metadata: %s", exc)
        return None
    if not isinstance(payload, dict):
        return None
    return {"src": payload.get("src") or "", "caption": payload.get("caption")}


def _write_metadata(src: str, caption: Optional[str]) -> None:
    _metadata_path().write_text(
        json.dumps({"src": src, "caption": caption}, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def _normalize_caption(caption: Optional[str]) -> Optional[str]:
    return caption.strip() if caption and caption.strip() else None


def get_hero_image() -> Dict[str, Optional[str]]:
    fallback = get_love_config().hero.featured_photo
    meta = _read_metadata()
    if meta is None:
        return {"src": fallback.src, "caption": fallback.caption}

    absolute = resolve_asset_path(meta["src"])
    if absolute is None or not absolute.is_file():
        return {"src": fallback.src, "caption": meta["caption"] or fallback.caption}
    return {"src": (meta["src"] or "").replace("\\", "/"), "caption": meta["caption"]}


def _delete_previous_upload() -> None:
    meta = _read_metadata()
    if meta is None:
        return
    relative = (meta["src"] or "").replace("\\", "/").lstrip("/")
    if relative.lower().startswith(HERO_UPLOAD_PREFIX):
        try_delete_asset(relative)


async def upload_hero_image(file: UploadFile, caption: Optional[str] = None) -> Dict[str, Optional[str]]:
    suffix = ensure_image_extension(file)
    file_name = f"hero-{datetime.now(timezone.utc):%Y%m%d%H%M%S}{suffix}"
    destination = web_root().joinpath(*HERO_UPLOAD_PREFIX.split("/")) / file_name
    await save_upload(file, destination, MAX_PHOTO_UPLOAD_BYTES)

    relative = f"{HERO_UPLOAD_PREFIX}/{file_name}"
    previous = _read_metadata()
    if previous is None or (previous["src"] or "").replace("\\", "/").lstrip("/") != relative:
        _delete_previous_upload()

    info = {"src": relative, "caption": _normalize_caption(caption)}
    _write_metadata(info["src"], info["caption"])
    return info


def update_caption(caption: Optional[str]) -> Dict[str, Optional[str]]:
    meta = _read_metadata()
    normalized = _normalize_caption(caption)
    src = meta["src"] if meta and meta["src"] else get_love_config().hero.featured_photo.src
    _write_metadata(src, normalized)
    return {"src": src.replace("\\", "/"), "caption": normalized}
