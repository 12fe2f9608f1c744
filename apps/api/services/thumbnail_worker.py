"""Background worker that drains the thumbnail queue."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Optional, Type

from sqlalchemy.future import select

from config import settings
from database import async_session_maker
from models.bucket_list_media import BucketListMedia
from models.gallery_photo import GalleryPhoto
from services.media_paths import thumbs_dir_for, to_relative_path
from services.thumbnail_queue import BUCKET_KIND, GALLERY_KIND, ThumbnailQueue, ThumbnailWorkItem
from services.thumbnails import generate_thumbnail_async

logger = logging.getLogger(__name__)

MEDIA_MODELS: Dict[str, Type] = {
    GALLERY_KIND: GalleryPhoto,
    BUCKET_KIND: BucketListMedia,
}


async def _save_thumbnail_path(kind: str, record_id: str, thumbnail_path: str) -> Optional[str]:
    """Store ``thumbnail_path`` unless one is already set; return the record's current path."""
    model = MEDIA_MODELS[kind]
    async with async_session_maker() as db:
        result = await db.execute(select(model).where(model.id == record_id))
        record = result.scalar_one_or_none()
        if not record:
            logger.info("%s record %s vanished before its thumbnail was stored", kind, record_id)
            return None
        if record.thumbnail_path:
            return record.thumbnail_path
        record.thumbnail_path = thumbnail_path
        await db.commit()
        return thumbnail_path


def _discard_thumbnail(output: Path) -> None:
    try:
        output.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove unused thumbnail %s: %s", output, exc)


async def process_thumbnail_item(item: ThumbnailWorkItem) -> Optional[str]:
    """Render and persist the thumbnail for one work item.

    Returns the stored relative thumbnail path, or None when the item was
    skipped (source gone, render failed, record gone, another thumbnail set).
    A rendered file that no record points at is removed again.
    """
    source = Path(item.absolute_path)
    if not source.is_file():
        logger.info("Skipping %s thumbnail for %s: source %s is gone", item.kind, item.record_id, source)
        return None

    base_name = Path(item.file_name).stem or item.record_id
    output = await generate_thumbnail_async(
        source,
        thumbs_dir_for(source),
        base_name,
        settings.THUMBNAIL_MAX_EDGE,
        settings.THUMBNAIL_QUALITY,
    )
    if output is None:
        return None

    relative = to_relative_path(output)
    existing = await _save_thumbnail_path(item.kind, item.record_id, relative)
    if existing == relative:
        return relative
    _discard_thumbnail(output)
    return None


async def run_thumbnail_worker(queue: ThumbnailQueue) -> None:
    """Process queued items one at a time until cancelled."""
    logger.info("Thumbnail worker started")
    try:
        async for item in queue.dequeue():
            try:
                await process_thumbnail_item(item)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Thumbnail job for %s %s failed", item.kind, item.record_id)
    finally:
        logger.info("Thumbnail worker stopped")
