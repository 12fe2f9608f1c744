"""
Health check endpoints.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config import settings
from services.thumbnail_queue import thumbnail_queue

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns overall system health status.
    """
    health_status = {
        "status": "healthy",
        "api": "up",
        "database": "unknown",
        "web_root": "present" if Path(settings.WEB_ROOT).is_dir() else "missing",
        "thumbnail_queue_pending": thumbnail_queue.pending(),
        "omdb_api_key": "configured" if settings.OMDB_API_KEY else "missing",
    }

    try:
        from database import engine

        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        health_status["database"] = "up"
    except Exception as e:
        health_status["database"] = f"down: {str(e)}"
        health_status["status"] = "degraded"

    return health_status


@router.get("/health/ready")
async def readiness_check():
    """Readiness probe: the asset root must exist for uploads and thumbnails."""
    missing = []
    if not Path(settings.WEB_ROOT).is_dir():
        missing.append("WEB_ROOT")

    if missing:
        return JSONResponse(
            status_code=503,
            content={"ready": False, "missing": missing},
        )
    return {"ready": True}


@router.get("/health/live")
async def liveness_check():
    """Liveness probe."""
    return {"alive": True}
