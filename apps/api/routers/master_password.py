"""Shared master password check for destructive bucket list and admin actions."""

import hmac
from typing import Optional

from fastapi import Header, HTTPException

from config import settings

MASTER_PASSWORD_HEADER = "X-Master-Pass"


def is_master_password_valid(provided: Optional[str]) -> bool:
    """Blank configured password allows everything; otherwise exact match."""
    expected = settings.BUCKETLIST_MASTER_PASSWORD or ""
    if not expected.strip():
        return True
    if provided is None or not provided.strip():
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def require_master_password(
    x_master_pass: Optional[str] = Header(default=None, alias=MASTER_PASSWORD_HEADER),
) -> None:
    if not is_master_password_valid(x_master_pass):
        raise HTTPException(status_code=401, detail="Master password is invalid.")
