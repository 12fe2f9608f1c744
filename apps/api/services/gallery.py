"""Album-aware photo gallery."""

from __future__ import annotations

import io
import logging
import uuid
import zipfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from fastapi import HTTPException, UploadFile
from sqlalchemy import case, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import favorite_limit
from models.gallery_album import GalleryAlbum
from models.gallery_photo import GalleryPhoto
from services.media_paths import resolve_asset_path, try_delete_asset, web_root
from services.thumbnail_queue import GALLERY_KIND, ThumbnailQueue, ThumbnailWorkItem, thumbnail_queue
from services.uploads import MAX_PHOTO_UPLOAD_BYTES, ensure_image_extension, original_name, save_upload

logger = logging.getLogger(__name__)

GALLERY_UPLOAD_DIR = ("uploads", "gallery")
MAX_CAPTION_LENGTH = 160
MAX_ALBUM_LENGTH = 80
FAVORITES_ALBUM_NAME = "Favoriten"
UNASSIGNED_ALBUM_NAME = "Ohne Album"


@dataclass
class AlbumSummary:
    id: Optional[str]
    name: str
    photo_count: int
    cover_url: Optional[str] = None
    cover_thumbnail_url: Optional[str] = None
    is_favorite: bool = False
    is_unassigned: bool = False


def gallery_directory() -> Path:
    return web_root().joinpath(*GALLERY_UPLOAD_DIR)


def gallery_relative_path(file_name: str) -> str:
    return "/".join((*GALLERY_UPLOAD_DIR, file_name))


def normalize_album(album: Optional[str]) -> Optional[str]:
    if album is None or not album.strip():
        return None
    return album.strip()


def normalize_caption(caption: Optional[str]) -> Optional[str]:
    if caption is None or not caption.strip():
        return None
    return caption.strip()


def is_reserved_album_name(name: str) -> bool:
    lowered = name.casefold()
    return lowered in (FAVORITES_ALBUM_NAME.casefold(), UNASSIGNED_ALBUM_NAME.casefold())


def validate_caption(caption: Optional[str]) -> Optional[str]:
    normalized = normalize_caption(caption)
    if normalized and len(normalized) > MAX_CAPTION_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Captions are limited to {MAX_CAPTION_LENGTH} characters.",
        )
    return normalized


def validate_album(album: Optional[str]) -> Optional[str]:
    normalized = normalize_album(album)
    if normalized is None:
        return None
    if len(normalized) > MAX_ALBUM_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Album names are limited to {MAX_ALBUM_LENGTH} characters.",
        )
    if is_reserved_album_name(normalized):
        raise HTTPException(status_code=400, detail="This album name is reserved.")
    return normalized


async def _album_exists(db: AsyncSession, name: str) -> bool:
    result = await db.execute(
        select(GalleryAlbum.id).where(func.lower(GalleryAlbum.name) == name.lower())
    )
    return result.first() is not None


async def ensure_album_exists(db: AsyncSession, name: str) -> None:
    if not await _album_exists(db, name):
        db.add(GalleryAlbum(id=str(uuid.uuid4()), name=name))
        await db.flush()


async def get_photo(db: AsyncSession, photo_id: str) -> GalleryPhoto:
    result = await db.execute(select(GalleryPhoto).where(GalleryPhoto.id == photo_id))
    photo = result.scalar_one_or_none()
    if not photo:
        raise HTTPException(status_code=404, detail="Photo not found")
    return photo


async def list_photos(db: AsyncSession) -> Sequence[GalleryPhoto]:
    without_album = case(
        (or_(GalleryPhoto.album.is_(None), func.trim(GalleryPhoto.album) == ""), 1),
        else_=0,
    )
    result = await db.execute(
        select(GalleryPhoto).order_by(
            GalleryPhoto.is_favorite.desc(),
            without_album,
            GalleryPhoto.album,
            func.coalesce(GalleryPhoto.favorited_at, GalleryPhoto.created_at).desc(),
            GalleryPhoto.created_at.desc(),
        )
    )
    return result.scalars().all()


async def list_favorites(db: AsyncSession, limit: Optional[int] = None) -> Sequence[GalleryPhoto]:
    take = limit if limit and limit > 0 else favorite_limit()
    result = await db.execute(
        select(GalleryPhoto)
        .where(GalleryPhoto.is_favorite.is_(True))
        .order_by(
            func.coalesce(GalleryPhoto.favorited_at, GalleryPhoto.created_at).desc(),
            GalleryPhoto.created_at.desc(),
        )
        .limit(take)
    )
    return result.scalars().all()


def _sort_time(value: Optional[datetime]) -> datetime:
    if value is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _newest(photos: List[GalleryPhoto], favorites: bool = False) -> Optional[GalleryPhoto]:
    if not photos:
        return None
    if favorites:
        return max(photos, key=lambda p: _sort_time(p.favorited_at or p.created_at))
    return max(photos, key=lambda p: _sort_time(p.created_at))


def _summary(
    album_id: Optional[str],
    name: str,
    photos: List[GalleryPhoto],
    *,
    is_favorite: bool = False,
    is_unassigned: bool = False,
) -> AlbumSummary:
    cover = _newest(photos, favorites=is_favorite)
    return AlbumSummary(
        id=album_id,
        name=name,
        photo_count=len(photos),
        cover_url=cover.url if cover else None,
        cover_thumbnail_url=cover.thumbnail_url if cover else None,
        is_favorite=is_favorite,
        is_unassigned=is_unassigned,
    )


async def list_albums(db: AsyncSession) -> List[AlbumSummary]:
    """Album overview including the favorites and unassigned pseudo-albums."""
    albums = (await db.execute(select(GalleryAlbum).order_by(GalleryAlbum.created_at))).scalars().all()
    photos = (await db.execute(select(GalleryPhoto))).scalars().all()

    by_album: Dict[str, List[GalleryPhoto]] = {}
    unassigned: List[GalleryPhoto] = []
    for photo in photos:
        album = normalize_album(photo.album)
        if album is None:
            unassigned.append(photo)
        else:
            by_album.setdefault(album.casefold(), []).append(photo)

    summaries: List[AlbumSummary] = []
    known: Set[str] = set()
    for album in albums:
        key = album.name.casefold()
        known.add(key)
        summaries.append(_summary(album.id, album.name, by_album.get(key, [])))

    for key, album_photos in by_album.items():
        if key in known:
            continue
        summaries.append(_summary(None, normalize_album(album_photos[0].album) or key, album_photos))

    if unassigned:
        summaries.append(_summary(None, UNASSIGNED_ALBUM_NAME, unassigned, is_unassigned=True))

    favorites = [photo for photo in photos if photo.is_favorite]
    if favorites:
        summaries.append(_summary(None, FAVORITES_ALBUM_NAME, favorites, is_favorite=True))

    def _rank(item: AlbumSummary) -> Tuple[int, str]:
        group = 0 if item.is_favorite else 2 if item.is_unassigned else 1
        return group, item.name.casefold()

    return sorted(summaries, key=_rank)


async def create_album(db: AsyncSession, name: str) -> GalleryAlbum:
    normalized = normalize_album(name)
    if normalized is None:
        raise HTTPException(status_code=400, detail="Album name is required.")
    normalized = validate_album(normalized)

    photo_uses_name = await db.execute(
        select(GalleryPhoto.id).where(func.lower(GalleryPhoto.album) == normalized.lower()).limit(1)
    )
    if await _album_exists(db, normalized) or photo_uses_name.first() is not None:
        raise HTTPException(status_code=400, detail="An album with this name already exists.")

    album = GalleryAlbum(id=str(uuid.uuid4()), name=normalized)
    db.add(album)
    await db.commit()
    return album


def enqueue_gallery_thumbnail(photo: GalleryPhoto, queue: ThumbnailQueue = thumbnail_queue) -> None:
    source = resolve_asset_path(photo.file_path)
    if source is None:
        return
    queue.enqueue(
        ThumbnailWorkItem(
            kind=GALLERY_KIND,
            record_id=photo.id,
            absolute_path=str(source),
            file_name=source.name,
        )
    )


async def upload_photo(
    db: AsyncSession,
    file: UploadFile,
    caption: Optional[str] = None,
    album: Optional[str] = None,
    queue: ThumbnailQueue = thumbnail_queue,
) -> GalleryPhoto:
    """Store an uploaded photo and queue its thumbnail.

    The record is committed with ``thumbnail_path`` unset before the work item
    is queued.
    """
    normalized_caption = validate_caption(caption)
    normalized_album = validate_album(album)
    suffix = ensure_image_extension(file)

    photo_id = str(uuid.uuid4())
    stored_name = f"{photo_id}{suffix}"
    destination = gallery_directory() / stored_name
    await save_upload(file, destination, MAX_PHOTO_UPLOAD_BYTES)

    photo = GalleryPhoto(
        id=photo_id,
        caption=normalized_caption,
        album=normalized_album,
        file_path=gallery_relative_path(stored_name),
        thumbnail_path=None,
        original_file_name=original_name(file),
    )
    try:
        if normalized_album is not None:
            await ensure_album_exists(db, normalized_album)
        db.add(photo)
        await db.commit()
    except Exception:
        await db.rollback()
        destination.unlink(missing_ok=True)
        raise

    enqueue_gallery_thumbnail(photo, queue)
    return photo


async def set_favorite(db: AsyncSession, photo_id: str, is_favorite: bool) -> GalleryPhoto:
    photo = await get_photo(db, photo_id)
    if bool(photo.is_favorite) == is_favorite:
        return photo

    if is_favorite:
        limit = favorite_limit()
        count_result = await db.execute(
            select(func.count(GalleryPhoto.id)).where(GalleryPhoto.is_favorite.is_(True))
        )
        if int(count_result.scalar() or 0) >= limit:
            raise HTTPException(status_code=400, detail=f"You can mark at most {limit} favorites.")
        photo.is_favorite = True
        photo.favorited_at = datetime.now(timezone.utc)
    else:
        photo.is_favorite = False
        photo.favorited_at = None

    await db.commit()
    return photo


async def update_photo(
    db: AsyncSession,
    photo_id: str,
    caption: Optional[str],
    album: Optional[str],
) -> GalleryPhoto:
    normalized_caption = validate_caption(caption)
    normalized_album = validate_album(album)
    photo = await get_photo(db, photo_id)

    photo.caption = normalized_caption
    photo.album = normalized_album
    if normalized_album is not None:
        await ensure_album_exists(db, normalized_album)
    await db.commit()
    return photo


async def delete_photo(db: AsyncSession, photo_id: str) -> None:
    photo = await get_photo(db, photo_id)
    file_path = photo.file_path
    thumbnail_path = photo.thumbnail_path

    await db.delete(photo)
    await db.commit()

    try_delete_asset(file_path)
    if thumbnail_path and thumbnail_path != file_path:
        try_delete_asset(thumbnail_path)


def _export_entry_name(photo: GalleryPhoto, used_names: Set[str]) -> str:
    original = Path((photo.original_file_name or "").replace("\\", "/")).name if photo.original_file_name else ""
    if original:
        base_name = original
    else:
        created = photo.created_at or datetime.now(timezone.utc)
        base_name = f"Foto-{created:%Y%m%d-%H%M%S}{Path(photo.file_path).suffix}"

    name = base_name
    index = 1
    while name.casefold() in used_names:
        stem, suffix = Path(base_name).stem, Path(base_name).suffix
        name = f"{stem}_{index}{suffix}"
        index += 1
    used_names.add(name.casefold())
    return name


async def export_photos(db: AsyncSession, ids: Sequence[str]) -> Tuple[bytes, str]:
    """Zip the requested photos in request order.

    Returns the archive bytes and the download file name.
    """
    requested = list(dict.fromkeys(photo_id for photo_id in ids if photo_id))
    if not requested:
        raise HTTPException(status_code=400, detail="Select at least one photo.")

    result = await db.execute(select(GalleryPhoto).where(GalleryPhoto.id.in_(requested)))
    lookup = {photo.id: photo for photo in result.scalars().all()}
    if not lookup:
        raise HTTPException(status_code=404, detail="No matching photos found.")

    buffer = io.BytesIO()
    written = 0
    used_names: Set[str] = set()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_STORED) as archive:
        for photo_id in requested:
            photo = lookup.get(photo_id)
            if photo is None:
                continue
            source = resolve_asset_path(photo.file_path)
            if source is None or not source.is_file():
                logger.warning("Skipping export of photo %s: file %s missing", photo.id, source)
                continue
            archive.write(source, arcname=_export_entry_name(photo, used_names))
            written += 1

    if written == 0:
        raise HTTPException(status_code=400, detail="No files could be exported.")

    download_name = f"gallery-export-{datetime.now(timezone.utc):%Y%m%d-%H%M%S}.zip"
    return buffer.getvalue(), download_name
