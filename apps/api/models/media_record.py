"""Shared accessors for persisted media records."""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def public_url(path: Optional[str]) -> Optional[str]:
    """Turn an asset-root relative path into a site-absolute URL."""
    if not path or not path.strip():
        return None
    normalized = path.replace("\\", "/")
    return normalized if normalized.startswith("/") else f"/{normalized}"


class MediaRecordMixin:
    """Uniform view over gallery photos and bucket-list media.

    Both kinds carry ``file_path`` (required) and ``thumbnail_path`` (null until
    the thumbnail worker or the backfill pass sets it), relative to the public
    asset root.
    """

    media_kind = ""

    @property
    def url(self) -> str:
        return public_url(self.file_path) or ""

    @property
    def thumbnail_url(self) -> Optional[str]:
        return public_url(self.thumbnail_path)
