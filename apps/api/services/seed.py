"""Initial data seeded from the landing page configuration."""

from __future__ import annotations

import uuid
from typing import Dict

from sqlalchemy import func
from sqlalchemy.future import select

from database import async_session_maker
from models.bucket_list_entry import BucketListEntry
from models.bucket_list_media import BucketListMedia
from models.gallery_photo import GalleryPhoto
from services.love_config import LoveConfig
from services.media_paths import normalize_seed_path


async def seed_from_config(config: LoveConfig) -> Dict[str, int]:
    """Insert configured bucket entries and gallery photos into empty tables.

    Seeded media point at static assets, so their thumbnail is the file itself.
    """
    seeded = {"bucket_entries": 0, "gallery_photos": 0}
    async with async_session_maker() as db:
        bucket_count = (await db.execute(select(func.count(BucketListEntry.id)))).scalar() or 0
        if not bucket_count:
            for item in config.bucket_list.items:
                entry = BucketListEntry(
                    id=str(uuid.uuid4()),
                    title=item.title[:160],
                    description=item.description or item.meta,
                    requires_photo=False,
                    completed=item.completed,
                )
                for media in item.media:
                    path = normalize_seed_path(media.src)
                    entry.media.append(
                        BucketListMedia(
                            id=str(uuid.uuid4()),
                            file_path=path,
                            thumbnail_path=path,
                            original_file_name=media.caption,
                            is_video=(media.type or "").lower() == "video",
                            is_in_gallery=False,
                        )
                    )
                db.add(entry)
                seeded["bucket_entries"] += 1

        gallery_count = (await db.execute(select(func.count(GalleryPhoto.id)))).scalar() or 0
        if not gallery_count:
            for item in config.gallery:
                path = normalize_seed_path(item.src)
                db.add(
                    GalleryPhoto(
                        id=str(uuid.uuid4()),
                        caption=item.caption,
                        file_path=path,
                        thumbnail_path=path,
                    )
                )
                seeded["gallery_photos"] += 1

        if seeded["bucket_entries"] or seeded["gallery_photos"]:
            await db.commit()
    return seeded
