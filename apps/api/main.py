"""
LoveLetter - FastAPI Backend
Main application entry point with lifespan, API routing and static assets.
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config import settings
from database import engine, Base
import models  # noqa: F401
from routers import (
    health,
    gallery,
    bucketlist,
    travel,
    watchlist,
    content,
    hero,
    music,
)
from services.love_config import get_love_config
from services.seed import seed_from_config
from services.thumbnail_backfill import run_thumbnail_backfill
from services.thumbnail_queue import thumbnail_queue
from services.thumbnail_worker import run_thumbnail_worker


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    print("🚀 Starting LoveLetter API...")
    Path(settings.DATA_DIR).mkdir(parents=True, exist_ok=True)
    Path(settings.WEB_ROOT).mkdir(parents=True, exist_ok=True)
    if settings.AUTO_CREATE_DB_SCHEMA:
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            print("🗄️ Database schema verified.")
        except Exception as e:
            print(f"⚠️ Database bootstrap skipped: {e}")
    if settings.SEED_FROM_CONFIG:
        try:
            seeded = await seed_from_config(get_love_config())
            if seeded["bucket_entries"] or seeded["gallery_photos"]:
                print(
                    f"🌱 Seeded {seeded['bucket_entries']} bucket entries and "
                    f"{seeded['gallery_photos']} gallery photos."
                )
        except Exception as exc:
            print(f"⚠️ Seeding skipped: {exc}")
    if settings.THUMBNAIL_BACKFILL_ON_STARTUP:
        summary = await run_thumbnail_backfill()
        if summary.failed:
            print("⚠️ Thumbnail backfill did not finish; it will be retried on next startup.")
        elif summary.updated:
            print(f"🖼️ Thumbnail backfill updated {summary.updated} records.")
    worker_task = None
    if settings.THUMBNAIL_WORKER_ENABLED:
        worker_task = asyncio.create_task(run_thumbnail_worker(thumbnail_queue))
        print("🧵 Thumbnail worker started.")
    yield
    # Shutdown
    if worker_task is not None:
        worker_task.cancel()
        try:
            await worker_task
        except asyncio.CancelledError:
            pass
    print("👋 Shutting down API...")


app = FastAPI(
    title="LoveLetter API",
    description="Shared gallery, bucket list, travel map and watchlist for two",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(gallery.router, prefix="/api/gallery", tags=["Gallery"])
app.include_router(bucketlist.router, prefix="/api/bucketlist", tags=["Bucket List"])
app.include_router(travel.router, prefix="/api/travel", tags=["Travel"])
app.include_router(watchlist.router, prefix="/api/watchlist", tags=["Watchlist"])
app.include_router(content.router, prefix="/api/content", tags=["Content"])
app.include_router(hero.router, prefix="/api/hero", tags=["Hero"])
app.include_router(music.router, prefix="/api/music", tags=["Music"])


@app.get("/api")
async def root():
    """Root endpoint."""
    return {
        "name": "LoveLetter API",
        "version": "0.1.0",
        "status": "running"
    }


# Static assets last so API routes win.
app.mount("/", StaticFiles(directory=settings.WEB_ROOT, html=True, check_dir=False), name="static")
