import json
from unittest.mock import patch

import pytest
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from conftest import write_image
from main import app, lifespan
from models.bucket_list_entry import BucketListEntry
from models.gallery_photo import GalleryPhoto
from services.love_config import load_love_config
from services.seed import seed_from_config
from services.thumbnail_backfill import run_thumbnail_backfill
from services.thumbnail_queue import ThumbnailQueue


def _config_with_seeds():
    return load_love_config(
        {
            "LOVE_GALLERY_ITEMS": json.dumps([{"src": "/images/first.jpg", "caption": "Erstes Foto"}]),
            "LOVE_BUCKET_ITEMS": json.dumps(
                [
                    {
                        "title": "Rom",
                        "completed": True,
                        "media": [{"type": "image", "src": "images/rom.jpg"}, {"type": "video", "src": "images/rom.mp4"}],
                    }
                ]
            ),
        }
    )


@pytest.mark.asyncio
async def test_seed_only_fills_empty_tables(session_maker, web_root):
    config = _config_with_seeds()

    first = await seed_from_config(config)
    second = await seed_from_config(config)

    assert first == {"bucket_entries": 1, "gallery_photos": 1}
    assert second == {"bucket_entries": 0, "gallery_photos": 0}

    async with session_maker() as db:
        photos = (await db.execute(select(GalleryPhoto))).scalars().all()
        entries = (
            await db.execute(select(BucketListEntry).options(selectinload(BucketListEntry.media)))
        ).scalars().all()

    assert [(p.file_path, p.thumbnail_path) for p in photos] == [("images/first.jpg", "images/first.jpg")]
    assert entries[0].completed is True
    assert sorted((m.file_path, m.is_video) for m in entries[0].media) == [
        ("images/rom.jpg", False),
        ("images/rom.mp4", True),
    ]
    assert all(m.thumbnail_path == m.file_path for m in entries[0].media)


@pytest.mark.asyncio
async def test_seeded_records_are_left_alone_by_backfill(session_maker, web_root):
    write_image(web_root / "images" / "first.jpg")
    await seed_from_config(_config_with_seeds())

    summary = await run_thumbnail_backfill()

    assert summary.updated == 0


@pytest.mark.asyncio
async def test_lifespan_runs_backfill_and_stops_worker(session_maker, web_root):

    write_image(web_root / "uploads" / "gallery" / "pending.jpg")
    async with session_maker() as db:
        db.add(GalleryPhoto(id="pending", file_path="uploads/gallery/pending.jpg"))
        await db.commit()

    queue = ThumbnailQueue()
    with patch("main.settings.AUTO_CREATE_DB_SCHEMA", False), patch(
        "main.settings.SEED_FROM_CONFIG", False
    ), patch("main.thumbnail_queue", queue):
        async with lifespan(app):
            assert queue.pending() == 0

    async with session_maker() as db:
        photo = await db.get(GalleryPhoto, "pending")
    assert photo.thumbnail_path == "uploads/gallery/thumbs/pending-thumb.webp"
