"""Bucket list entries and their media."""

from __future__ import annotations

import asyncio
import logging
import shutil
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from fastapi import HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from models.bucket_list_entry import BucketListEntry
from models.bucket_list_media import BucketListMedia
from models.gallery_photo import GalleryPhoto
from services.gallery import enqueue_gallery_thumbnail, gallery_directory, gallery_relative_path
from services.media_paths import resolve_asset_path, try_delete_asset, web_root
from services.thumbnail_queue import BUCKET_KIND, ThumbnailQueue, ThumbnailWorkItem, thumbnail_queue
from services.uploads import discard_files, save_media_batch

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 160
MAX_DESCRIPTION_LENGTH = 2000


def bucket_directory(entry_id: str) -> Path:
    return web_root() / "uploads" / "bucket" / entry_id


def bucket_relative_path(entry_id: str, file_name: str) -> str:
    return f"uploads/bucket/{entry_id}/{file_name}"


async def list_entries(db: AsyncSession) -> Sequence[BucketListEntry]:
    result = await db.execute(
        select(BucketListEntry)
        .options(selectinload(BucketListEntry.media))
        .order_by(BucketListEntry.completed, BucketListEntry.created_at)
    )
    return result.scalars().all()


async def get_entry(db: AsyncSession, entry_id: str) -> BucketListEntry:
    result = await db.execute(
        select(BucketListEntry)
        .options(selectinload(BucketListEntry.media))
        .where(BucketListEntry.id == entry_id)
        .execution_options(populate_existing=True)
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Bucket list entry not found")
    return entry


async def create_entry(
    db: AsyncSession,
    title: str,
    requires_photo: bool = False,
    description: Optional[str] = None,
) -> BucketListEntry:
    normalized = (title or "").strip()
    if not normalized:
        raise HTTPException(status_code=400, detail="Title must not be empty.")
    if len(normalized) > MAX_TITLE_LENGTH:
        raise HTTPException(status_code=400, detail=f"Titles are limited to {MAX_TITLE_LENGTH} characters.")
    cleaned_description = (description or "").strip() or None
    if cleaned_description and len(cleaned_description) > MAX_DESCRIPTION_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Descriptions are limited to {MAX_DESCRIPTION_LENGTH} characters.",
        )

    entry = BucketListEntry(
        id=str(uuid.uuid4()),
        title=normalized,
        description=cleaned_description,
        requires_photo=bool(requires_photo),
        completed=False,
    )
    db.add(entry)
    await db.commit()
    return await get_entry(db, entry.id)


def _enqueue_bucket_thumbnails(media: Iterable[BucketListMedia], queue: ThumbnailQueue) -> None:
    for item in media:
        if item.is_video:
            continue
        source = resolve_asset_path(item.file_path)
        if source is None:
            continue
        queue.enqueue(
            ThumbnailWorkItem(
                kind=BUCKET_KIND,
                record_id=item.id,
                absolute_path=str(source),
                file_name=source.name,
            )
        )


async def _attach_media(
    db: AsyncSession,
    entry: BucketListEntry,
    files: List[UploadFile],
) -> List[BucketListMedia]:
    media_ids = [str(uuid.uuid4()) for _ in files]
    stored = await save_media_batch(files, bucket_directory(entry.id), media_ids)

    created: List[BucketListMedia] = []
    for media_id, upload in zip(media_ids, stored):
        media = BucketListMedia(
            id=media_id,
            entry_id=entry.id,
            file_path=bucket_relative_path(entry.id, upload.stored_name),
            thumbnail_path=None,
            original_file_name=upload.original_filename,
            content_type=upload.content_type[:128] if upload.content_type else None,
            is_video=upload.is_video,
            is_in_gallery=False,
        )
        entry.media.append(media)
        created.append(media)
    return created


async def _commit_or_discard(db: AsyncSession, created: List[BucketListMedia]) -> None:
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        discard_files(
            path for path in (resolve_asset_path(item.file_path) for item in created) if path is not None
        )
        raise


async def complete_entry(
    db: AsyncSession,
    entry_id: str,
    files: Optional[List[UploadFile]] = None,
    queue: ThumbnailQueue = thumbnail_queue,
) -> BucketListEntry:
    entry = await get_entry(db, entry_id)
    if entry.completed:
        raise HTTPException(status_code=400, detail="This entry is already completed.")

    files = list(files or [])
    if entry.requires_photo and not files:
        raise HTTPException(
            status_code=400,
            detail="Upload at least one photo or video to complete this entry.",
        )

    created = await _attach_media(db, entry, files) if files else []
    entry.completed = True
    entry.completed_at = datetime.now(timezone.utc)
    await _commit_or_discard(db, created)

    _enqueue_bucket_thumbnails(created, queue)
    return await get_entry(db, entry_id)


async def add_media(
    db: AsyncSession,
    entry_id: str,
    files: List[UploadFile],
    queue: ThumbnailQueue = thumbnail_queue,
) -> BucketListEntry:
    entry = await get_entry(db, entry_id)
    if not entry.completed:
        raise HTTPException(status_code=400, detail="Complete the entry before adding more media.")
    if not files:
        raise HTTPException(status_code=400, detail="Select at least one file.")

    created = await _attach_media(db, entry, files)
    await _commit_or_discard(db, created)

    _enqueue_bucket_thumbnails(created, queue)
    return await get_entry(db, entry_id)


async def _get_media(db: AsyncSession, entry_id: str, media_id: str) -> BucketListMedia:
    result = await db.execute(
        select(BucketListMedia)
        .options(selectinload(BucketListMedia.entry))
        .where(BucketListMedia.entry_id == entry_id, BucketListMedia.id == media_id)
    )
    media = result.scalar_one_or_none()
    if not media:
        raise HTTPException(status_code=404, detail="Media not found")
    return media


def _delete_media_files(media: BucketListMedia) -> None:
    try_delete_asset(media.file_path)
    if media.thumbnail_path and media.thumbnail_path != media.file_path:
        try_delete_asset(media.thumbnail_path)


async def remove_media(db: AsyncSession, entry_id: str, media_id: str) -> BucketListEntry:
    media = await _get_media(db, entry_id, media_id)
    await db.delete(media)
    await db.commit()
    _delete_media_files(media)
    return await get_entry(db, entry_id)


async def add_media_to_gallery(
    db: AsyncSession,
    entry_id: str,
    media_id: str,
    queue: ThumbnailQueue = thumbnail_queue,
) -> GalleryPhoto:
    """Copy a bucket list image into the gallery as a new photo."""
    media = await _get_media(db, entry_id, media_id)
    if media.is_video:
        raise HTTPException(status_code=400, detail="Videos cannot be added to the gallery.")
    if media.is_in_gallery:
        raise HTTPException(status_code=400, detail="This media is already in the gallery.")

    source = resolve_asset_path(media.file_path)
    if source is None or not source.is_file():
        raise HTTPException(status_code=400, detail="The original file could not be found.")

    photo_id = str(uuid.uuid4())
    stored_name = f"{photo_id}{source.suffix.lower()}"
    destination = gallery_directory() / stored_name
    destination.parent.mkdir(parents=True, exist_ok=True)
    await asyncio.to_thread(shutil.copyfile, source, destination)

    photo = GalleryPhoto(
        id=photo_id,
        caption=(media.entry.title if media.entry else None),
        file_path=gallery_relative_path(stored_name),
        thumbnail_path=None,
        original_file_name=media.original_file_name,
    )
    db.add(photo)
    media.is_in_gallery = True
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        destination.unlink(missing_ok=True)
        raise

    enqueue_gallery_thumbnail(photo, queue)
    return photo


async def delete_entry(db: AsyncSession, entry_id: str) -> None:
    entry = await get_entry(db, entry_id)
    media = list(entry.media)
    await db.delete(entry)
    await db.commit()
    for item in media:
        _delete_media_files(item)
