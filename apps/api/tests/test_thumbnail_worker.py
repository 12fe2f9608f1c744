import asyncio
from pathlib import Path

import pytest
from PIL import Image

from conftest import write_image
from models.bucket_list_entry import BucketListEntry
from models.bucket_list_media import BucketListMedia
from models.gallery_photo import GalleryPhoto
from services.thumbnail_queue import BUCKET_KIND, GALLERY_KIND, ThumbnailQueue, ThumbnailWorkItem
from services.thumbnail_worker import process_thumbnail_item, run_thumbnail_worker


async def _add_gallery_photo(session_maker, web_root: Path, photo_id: str) -> ThumbnailWorkItem:
    source = write_image(web_root / "uploads" / "gallery" / f"{photo_id}.jpg")
    async with session_maker() as db:
        db.add(GalleryPhoto(id=photo_id, file_path=f"uploads/gallery/{photo_id}.jpg"))
        await db.commit()
    return ThumbnailWorkItem(GALLERY_KIND, photo_id, str(source), source.name)


async def _thumbnail_path(session_maker, model, record_id: str):
    async with session_maker() as db:
        record = await db.get(model, record_id)
        return record.thumbnail_path


@pytest.mark.asyncio
async def test_process_item_stores_relative_thumbnail_path(session_maker, web_root):
    item = await _add_gallery_photo(session_maker, web_root, "p1")

    stored = await process_thumbnail_item(item)

    assert stored == "uploads/gallery/thumbs/p1-thumb.webp"
    assert await _thumbnail_path(session_maker, GalleryPhoto, "p1") == stored
    with Image.open(web_root / stored) as img:
        assert img.size == (512, 256)


@pytest.mark.asyncio
async def test_process_item_skips_deleted_source(session_maker, web_root):
    item = await _add_gallery_photo(session_maker, web_root, "p2")
    Path(item.absolute_path).unlink()

    assert await process_thumbnail_item(item) is None
    assert await _thumbnail_path(session_maker, GalleryPhoto, "p2") is None


@pytest.mark.asyncio
async def test_process_item_does_not_overwrite_existing_thumbnail(session_maker, web_root):
    item = await _add_gallery_photo(session_maker, web_root, "p3")
    async with session_maker() as db:
        photo = await db.get(GalleryPhoto, "p3")
        photo.thumbnail_path = photo.file_path
        await db.commit()

    assert await process_thumbnail_item(item) is None
    assert await _thumbnail_path(session_maker, GalleryPhoto, "p3") == "uploads/gallery/p3.jpg"
    assert not (web_root / "uploads" / "gallery" / "thumbs" / "p3-thumb.webp").exists()


@pytest.mark.asyncio
async def test_process_item_removes_thumbnail_when_record_is_gone(session_maker, web_root):
    source = write_image(web_root / "uploads" / "gallery" / "orphan.jpg")
    item = ThumbnailWorkItem(GALLERY_KIND, "orphan", str(source), source.name)

    assert await process_thumbnail_item(item) is None
    assert not (web_root / "uploads" / "gallery" / "thumbs" / "orphan-thumb.webp").exists()
    assert source.exists()


@pytest.mark.asyncio
async def test_process_item_handles_bucket_media(session_maker, web_root):
    source = write_image(web_root / "uploads" / "bucket" / "e1" / "m1.png", size=(800, 1600), fmt="PNG")
    async with session_maker() as db:
        entry = BucketListEntry(id="e1", title="Sunrise hike", completed=True)
        entry.media.append(BucketListMedia(id="m1", file_path="uploads/bucket/e1/m1.png"))
        db.add(entry)
        await db.commit()

    stored = await process_thumbnail_item(ThumbnailWorkItem(BUCKET_KIND, "m1", str(source), source.name))

    assert stored == "uploads/bucket/e1/thumbs/m1-thumb.webp"
    assert await _thumbnail_path(session_maker, BucketListMedia, "m1") == stored


@pytest.mark.asyncio
async def test_worker_keeps_going_after_failed_items(session_maker, web_root):
    first = await _add_gallery_photo(session_maker, web_root, "ok-1")
    missing = await _add_gallery_photo(session_maker, web_root, "gone")
    second = await _add_gallery_photo(session_maker, web_root, "ok-2")
    Path(missing.absolute_path).unlink()

    queue = ThumbnailQueue()
    for item in (first, missing, second):
        queue.enqueue(item)

    task = asyncio.create_task(run_thumbnail_worker(queue))
    for _ in range(200):
        if queue.pending() == 0 and await _thumbnail_path(session_maker, GalleryPhoto, "ok-2"):
            break
        await asyncio.sleep(0.02)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert await _thumbnail_path(session_maker, GalleryPhoto, "ok-1") == "uploads/gallery/thumbs/ok-1-thumb.webp"
    assert await _thumbnail_path(session_maker, GalleryPhoto, "gone") is None
    assert await _thumbnail_path(session_maker, GalleryPhoto, "ok-2") == "uploads/gallery/thumbs/ok-2-thumb.webp"
