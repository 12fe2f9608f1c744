"""Helpers for paths under the public asset root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)

THUMBS_DIR_NAME = "thumbs"


def web_root() -> Path:
    return Path(settings.WEB_ROOT).resolve()


def data_dir() -> Path:
    path = Path(settings.DATA_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_asset_path(relative_path: Optional[str]) -> Optional[Path]:
    """Map a stored root-relative path to its absolute location."""
    if not relative_path or not relative_path.strip():
        return None
    sanitized = relative_path.replace("\\", "/").lstrip("/")
    return web_root().joinpath(*[part for part in sanitized.split("/") if part])


def to_relative_path(absolute_path: Path | str) -> str:
    """Express an absolute path relative to the asset root with forward slashes."""
    relative = os.path.relpath(Path(absolute_path).resolve(), web_root())
    return relative.replace(os.sep, "/").replace("\\", "/")


def normalize_seed_path(path: str) -> str:
    return path.replace("\\", "/").lstrip("/")


def thumbs_dir_for(source_path: Path) -> Path:
    """Thumbnails live in a ``thumbs/`` directory next to the original."""
    return source_path.parent / THUMBS_DIR_NAME


def try_delete_asset(relative_path: Optional[str]) -> None:
    path = resolve_asset_path(relative_path)
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not delete asset %s: %s", path, exc)
