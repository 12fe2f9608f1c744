"""Startup reconciliation of media records that still lack a thumbnail."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict

from sqlalchemy.future import select

from config import settings
from database import async_session_maker
from services.media_paths import resolve_asset_path, thumbs_dir_for, to_relative_path
from services.thumbnail_queue import BUCKET_KIND, GALLERY_KIND
from services.thumbnail_worker import MEDIA_MODELS
from services.thumbnails import generate_thumbnail_async

logger = logging.getLogger(__name__)


@dataclass
class KindSummary:
    generated: int = 0
    fallback: int = 0
    missing_source: int = 0


@dataclass
class BackfillSummary:
    kinds: Dict[str, KindSummary] = field(default_factory=dict)
    failed: bool = False

    @property
    def updated(self) -> int:
        return sum(item.generated + item.fallback for item in self.kinds.values())

    def as_dict(self) -> Dict[str, object]:
        return {
            "updated": self.updated,
            "failed": self.failed,
            "kinds": {
                kind: {
                    "generated": item.generated,
                    "fallback": item.fallback,
                    "missing_source": item.missing_source,
                }
                for kind, item in self.kinds.items()
            },
        }


async def _backfill_kind(kind: str) -> KindSummary:
    model = MEDIA_MODELS[kind]
    summary = KindSummary()
    async with async_session_maker() as db:
        query = select(model).where(
            model.thumbnail_path.is_(None),
            model.file_path.is_not(None),
            model.file_path != "",
        )
        if kind == BUCKET_KIND:
            query = query.where(model.is_video.is_(False))
        result = await db.execute(query)
        records = result.scalars().all()

        for record in records:
            if not (record.file_path or "").strip():
                continue
            source = resolve_asset_path(record.file_path)
            if source is None or not source.is_file():
                summary.missing_source += 1
                continue

            output = await generate_thumbnail_async(
                source,
                thumbs_dir_for(source),
                source.stem,
                settings.THUMBNAIL_MAX_EDGE,
                settings.THUMBNAIL_QUALITY,
            )
            if output is not None:
                record.thumbnail_path = to_relative_path(output)
                summary.generated += 1
            else:
                record.thumbnail_path = record.file_path
                summary.fallback += 1

        if summary.generated or summary.fallback:
            await db.commit()
    return summary


async def run_thumbnail_backfill() -> BackfillSummary:
    """Generate thumbnails for gallery photos and bucket media missing one.

    Never raises; a failed run is logged and reported through ``failed``.
    """
    summary = BackfillSummary()
    try:
        for kind in (GALLERY_KIND, BUCKET_KIND):
            summary.kinds[kind] = await _backfill_kind(kind)
    except Exception:
        summary.failed = True
        logger.warning("Thumbnail backfill failed", exc_info=True)
    else:
        logger.info("Thumbnail backfill finished: %s", summary.as_dict())
    return summary
