"""Validation and storage of uploaded media files."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from fastapi import HTTPException, UploadFile

logger = logging.getLogger(__name__)

MAX_PHOTO_UPLOAD_BYTES = 15 * 1024 * 1024  # 15 MB
MAX_BUCKET_MEDIA_BYTES = 50 * 1024 * 1024  # 50 MB
ALLOWED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}
ALLOWED_VIDEO_EXTENSIONS = {".mp4", ".mov", ".m4v", ".webm", ".avi"}
CHUNK_SIZE = 1024 * 1024


@dataclass
class StoredUpload:
    absolute_path: Path
    stored_name: str
    original_filename: str
    content_type: Optional[str]
    size_bytes: int
    is_video: bool = False


def original_name(file: UploadFile, fallback: str = "upload") -> str:
    base = os.path.basename((file.filename or "").replace("\\", "/")).strip()
    return (base or fallback)[:256]


def upload_extension(file: UploadFile) -> str:
    return Path(original_name(file)).suffix.lower()


def ensure_image_extension(file: UploadFile) -> str:
    suffix = upload_extension(file)
    if suffix not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only PNG, JPG or WEBP images are supported.")
    return suffix


def ensure_media_extension(file: UploadFile) -> str:
    suffix = upload_extension(file)
    if suffix not in ALLOWED_IMAGE_EXTENSIONS and suffix not in ALLOWED_VIDEO_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail="Only PNG, JPG, WEBP images or MP4, MOV, M4V, WEBM, AVI videos are supported.",
        )
    return suffix


async def save_upload(file: UploadFile, destination: Path, max_bytes: int) -> int:
    """Stream ``file`` to ``destination`` enforcing size limits.

    Raises 413 when the file exceeds ``max_bytes`` and 400 when it is empty;
    in both cases the partial file is removed.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    total_size = 0
    try:
        with destination.open("wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > max_bytes:
                    out.close()
                    destination.unlink(missing_ok=True)
                    raise HTTPException(
                        status_code=413,
                        detail=f"File too large. Max upload size is {max_bytes // (1024 * 1024)}MB.",
                    )
                out.write(chunk)
    finally:
        await file.close()

    if total_size == 0:
        destination.unlink(missing_ok=True)
        raise HTTPException(status_code=400, detail="Please choose a non-empty file.")
    return total_size


def discard_files(paths: Iterable[Path]) -> None:
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove upload %s: %s", path, exc)


async def save_media_batch(
    files: List[UploadFile],
    directory: Path,
    record_ids: List[str],
    max_bytes: int = MAX_BUCKET_MEDIA_BYTES,
) -> List[StoredUpload]:
    """Validate and store several media files as ``{record_id}{ext}``.

    Extensions are checked for every file before anything is written. When a
    later file fails the size check, files already written are removed.
    """
    suffixes = [ensure_media_extension(file) for file in files]
    stored: List[StoredUpload] = []
    try:
        for file, suffix, record_id in zip(files, suffixes, record_ids):
            stored_name = f"{record_id}{suffix}"
            destination = directory / stored_name
            size = await save_upload(file, destination, max_bytes)
            stored.append(
                StoredUpload(
                    absolute_path=destination,
                    stored_name=stored_name,
                    original_filename=original_name(file),
                    content_type=(file.content_type or None),
                    size_bytes=size,
                    is_video=suffix in ALLOWED_VIDEO_EXTENSIONS,
                )
            )
    except HTTPException:
        discard_files(item.absolute_path for item in stored)
        raise
    return stored
