"""Bucket list router."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Header, HTTPException, Request, UploadFile
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile as StarletteUploadFile

from database import get_db
from models.bucket_list_entry import BucketListEntry
from models.bucket_list_media import BucketListMedia
from routers.gallery import GalleryPhotoResponse, serialize_photo
from routers.master_password import (
    MASTER_PASSWORD_HEADER,
    is_master_password_valid,
    require_master_password,
)
from routers.rate_limit import rate_limit
from services import bucket_list as bucket_service

router = APIRouter()


class BucketListMediaResponse(BaseModel):
    id: str
    url: str
    thumbnail_url: Optional[str] = None
    original_file_name: Optional[str] = None
    content_type: Optional[str] = None
    is_video: bool = False
    is_in_gallery: bool = False
    created_at: Optional[datetime] = None


class BucketListEntryResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    requires_photo: bool = False
    completed: bool = False
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    media: List[BucketListMediaResponse] = Field(default_factory=list)


class CreateEntryRequest(BaseModel):
    title: str
    requires_photo: bool = False
    description: Optional[str] = None


def _serialize_media(media: BucketListMedia) -> BucketListMediaResponse:
    return BucketListMediaResponse(
        id=media.id,
        url=media.url,
        thumbnail_url=media.thumbnail_url,
        original_file_name=media.original_file_name,
        content_type=media.content_type,
        is_video=bool(media.is_video),
        is_in_gallery=bool(media.is_in_gallery),
        created_at=media.created_at,
    )


def _serialize_entry(entry: BucketListEntry) -> BucketListEntryResponse:
    return BucketListEntryResponse(
        id=entry.id,
        title=entry.title,
        description=entry.description,
        requires_photo=bool(entry.requires_photo),
        completed=bool(entry.completed),
        created_at=entry.created_at,
        completed_at=entry.completed_at,
        media=[_serialize_media(item) for item in entry.media],
    )


async def _uploaded_files(request: Request) -> List[UploadFile]:
    """Collect files sent as "media", falling back to the single "photo" field."""
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" not in content_type:
        return []
    form = await request.form()
    files = [item for item in form.getlist("media") if isinstance(item, StarletteUploadFile)]
    if not files:
        files = [item for item in form.getlist("photo") if isinstance(item, StarletteUploadFile)]
    return [item for item in files if item.filename]


@router.get("/", response_model=List[BucketListEntryResponse])
async def list_entries(db: AsyncSession = Depends(get_db)):
    return [_serialize_entry(entry) for entry in await bucket_service.list_entries(db)]


@router.post("/", response_model=BucketListEntryResponse)
async def create_entry(request: CreateEntryRequest, db: AsyncSession = Depends(get_db)):
    entry = await bucket_service.create_entry(
        db,
        request.title,
        requires_photo=request.requires_photo,
        description=request.description,
    )
    return _serialize_entry(entry)


@router.post("/verify-password")
async def verify_password(
    x_master_pass: Optional[str] = Header(default=None, alias=MASTER_PASSWORD_HEADER),
    _rate_limit: None = Depends(rate_limit("bucket_verify_password", limit=10, window_seconds=300)),
):
    if not is_master_password_valid(x_master_pass):
        raise HTTPException(status_code=401, detail="Master password is invalid.")
    return {"valid": True}


@router.post("/{entry_id}/complete", response_model=BucketListEntryResponse)
async def complete_entry(
    entry_id: str,
    request: Request,
    _rate_limit: None = Depends(rate_limit("bucket_upload", limit=60, window_seconds=600)),
    db: AsyncSession = Depends(get_db),
):
    """Mark an entry as done, optionally attaching photos or videos."""
    files = await _uploaded_files(request)
    entry = await bucket_service.complete_entry(db, entry_id, files)
    return _serialize_entry(entry)


@router.post("/{entry_id}/media", response_model=BucketListEntryResponse)
async def add_media(
    entry_id: str,
    media: List[UploadFile] = File(...),
    _auth: None = Depends(require_master_password),
    _rate_limit: None = Depends(rate_limit("bucket_upload", limit=60, window_seconds=600)),
    db: AsyncSession = Depends(get_db),
):
    entry = await bucket_service.add_media(db, entry_id, media)
    return _serialize_entry(entry)


@router.delete("/{entry_id}/media/{media_id}", response_model=BucketListEntryResponse)
async def remove_media(
    entry_id: str,
    media_id: str,
    _auth: None = Depends(require_master_password),
    db: AsyncSession = Depends(get_db),
):
    entry = await bucket_service.remove_media(db, entry_id, media_id)
    return _serialize_entry(entry)


@router.post("/{entry_id}/media/{media_id}/gallery", response_model=GalleryPhotoResponse)
async def add_media_to_gallery(
    entry_id: str,
    media_id: str,
    db: AsyncSession = Depends(get_db),
):
    photo = await bucket_service.add_media_to_gallery(db, entry_id, media_id)
    return serialize_photo(photo)


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: str,
    _auth: None = Depends(require_master_password),
    db: AsyncSession = Depends(get_db),
):
    await bucket_service.delete_entry(db, entry_id)
    return {"deleted": True, "id": entry_id}
