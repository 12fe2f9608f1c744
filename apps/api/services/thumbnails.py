"""Thumbnail rendering for uploaded images.

Thumbnails are WebP files named ``{base_name}-thumb.webp``. Rendering never
raises: a missing or undecodable source yields ``None`` and the caller decides
how to fall back.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_MAX_EDGE = 512
DEFAULT_QUALITY = 75
THUMBNAIL_SUFFIX = "-thumb"
THUMBNAIL_EXTENSION = ".webp"


def thumbnail_size(width: int, height: int, max_edge: int) -> Tuple[int, int]:
    """Scale (width, height) so the longer edge is at most ``max_edge``."""
    longest = max(width, height)
    if longest <= max_edge:
        return width, height
    ratio = max_edge / float(longest)
    return max(1, round(width * ratio)), max(1, round(height * ratio))


def thumbnail_path_for(destination_dir: Union[str, Path], base_name: str) -> Path:
    return Path(destination_dir) / f"{base_name}{THUMBNAIL_SUFFIX}{THUMBNAIL_EXTENSION}"


def generate_thumbnail(
    source_path: Union[str, Path],
    destination_dir: Union[str, Path],
    base_name: str,
    max_edge: int = DEFAULT_MAX_EDGE,
    quality: int = DEFAULT_QUALITY,
) -> Optional[Path]:
    """Render a thumbnail of ``source_path`` into ``destination_dir``.

    Returns the absolute output path, or None when the source is missing or
    cannot be decoded/encoded. Repeated calls overwrite the same destination.
    """
    if max_edge <= 0:
        raise ValueError("max_edge must be positive")

    source = Path(source_path)
    if not source.is_file():
        logger.warning("Thumbnail source not found: %s", source)
        return None

    target = thumbnail_path_for(destination_dir, base_name)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with Image.open(source) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode not in ("RGB", "RGBA"):
                has_alpha = "A" in img.getbands() or "transparency" in img.info
                img = img.convert("RGBA" if has_alpha else "RGB")

            size = thumbnail_size(img.width, img.height, max_edge)
            if size != (img.width, img.height):
                img = img.resize(size, Image.Resampling.LANCZOS)

            img.save(target, "WEBP", quality=quality)
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as exc:
        logger.warning("Thumbnail generation failed for %s: %s", source, exc)
        return None

    return target.resolve()


async def generate_thumbnail_async(
    source_path: Union[str, Path],
    destination_dir: Union[str, Path],
    base_name: str,
    max_edge: int = DEFAULT_MAX_EDGE,
    quality: int = DEFAULT_QUALITY,
) -> Optional[Path]:
    return await asyncio.to_thread(
        generate_thumbnail,
        source_path,
        destination_dir,
        base_name,
        max_edge,
        quality,
    )
