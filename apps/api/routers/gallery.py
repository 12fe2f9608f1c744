"""Photo gallery router."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.gallery_photo import GalleryPhoto
from routers.master_password import require_master_password
from routers.rate_limit import rate_limit
from services import gallery as gallery_service
from services.thumbnail_backfill import run_thumbnail_backfill

router = APIRouter()


class GalleryPhotoResponse(BaseModel):
    id: str
    caption: Optional[str] = None
    album: Optional[str] = None
    url: str
    thumbnail_url: Optional[str] = None
    original_file_name: Optional[str] = None
    is_favorite: bool = False
    created_at: Optional[datetime] = None
    favorited_at: Optional[datetime] = None


class GalleryAlbumResponse(BaseModel):
    id: Optional[str] = None
    name: str
    photo_count: int = 0
    cover_url: Optional[str] = None
    cover_thumbnail_url: Optional[str] = None
    is_favorite: bool = False
    is_unassigned: bool = False


class CreateAlbumRequest(BaseModel):
    name: str


class SetFavoriteRequest(BaseModel):
    is_favorite: bool


class UpdatePhotoRequest(BaseModel):
    caption: Optional[str] = None
    album: Optional[str] = None


def serialize_photo(photo: GalleryPhoto) -> GalleryPhotoResponse:
    return GalleryPhotoResponse(
        id=photo.id,
        caption=photo.caption,
        album=photo.album,
        url=photo.url,
        thumbnail_url=photo.thumbnail_url,
        original_file_name=photo.original_file_name,
        is_favorite=bool(photo.is_favorite),
        created_at=photo.created_at,
        favorited_at=photo.favorited_at,
    )


@router.get("/", response_model=List[GalleryPhotoResponse])
async def list_photos(db: AsyncSession = Depends(get_db)):
    return [serialize_photo(photo) for photo in await gallery_service.list_photos(db)]


@router.get("/favorites", response_model=List[GalleryPhotoResponse])
async def list_favorites(
    limit: Optional[int] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    return [serialize_photo(photo) for photo in await gallery_service.list_favorites(db, limit)]


@router.get("/albums", response_model=List[GalleryAlbumResponse])
async def list_albums(db: AsyncSession = Depends(get_db)):
    albums = await gallery_service.list_albums(db)
    return [GalleryAlbumResponse(**album.__dict__) for album in albums]


@router.post("/albums", response_model=GalleryAlbumResponse)
async def create_album(request: CreateAlbumRequest, db: AsyncSession = Depends(get_db)):
    album = await gallery_service.create_album(db, request.name)
    return GalleryAlbumResponse(id=album.id, name=album.name, photo_count=0)


@router.get("/export")
async def export_photos(
    ids: List[str] = Query(default=[]),
    db: AsyncSession = Depends(get_db),
):
    """Download the selected photos as a zip archive."""
    content, download_name = await gallery_service.export_photos(db, ids)
    return Response(
        content=content,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{download_name}"'},
    )


@router.post("/", response_model=GalleryPhotoResponse)
async def upload_photo(
    file: UploadFile = File(...),
    caption: Optional[str] = Form(default=None),
    album: Optional[str] = Form(default=None),
    _rate_limit: None = Depends(rate_limit("gallery_upload", limit=60, window_seconds=600)),
    db: AsyncSession = Depends(get_db),
):
    """Upload a photo; its thumbnail is rendered in the background."""
    photo = await gallery_service.upload_photo(db, file, caption=caption, album=album)
    return serialize_photo(photo)


@router.post("/thumbnails/backfill")
async def backfill_thumbnails(_auth: None = Depends(require_master_password)):
    """Re-run thumbnail reconciliation for records still missing one."""
    summary = await run_thumbnail_backfill()
    return summary.as_dict()


@router.post("/{photo_id}/favorite", response_model=GalleryPhotoResponse)
async def set_favorite(
    photo_id: str,
    request: SetFavoriteRequest,
    db: AsyncSession = Depends(get_db),
):
    photo = await gallery_service.set_favorite(db, photo_id, request.is_favorite)
    return serialize_photo(photo)


@router.put("/{photo_id}", response_model=GalleryPhotoResponse)
async def update_photo(
    photo_id: str,
    request: UpdatePhotoRequest,
    _auth: None = Depends(require_master_password),
    db: AsyncSession = Depends(get_db),
):
    photo = await gallery_service.update_photo(db, photo_id, request.caption, request.album)
    return serialize_photo(photo)


@router.delete("/{photo_id}")
async def delete_photo(
    photo_id: str,
    _auth: None = Depends(require_master_password),
    db: AsyncSession = Depends(get_db),
):
    await gallery_service.delete_photo(db, photo_id)
    return {"deleted": True, "id": photo_id}
