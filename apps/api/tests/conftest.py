import io
from pathlib import Path
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from database import Base, get_db
from main import app
from routers import rate_limit
from services import spotify
from services.country_catalog import country_catalog
from services.love_config import get_love_config
from services.thumbnail_queue import thumbnail_queue


def make_image_bytes(size=(2000, 1000), fmt="JPEG", color=(200, 40, 80)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, fmt)
    return buffer.getvalue()


def write_image(path: Path, size=(2000, 1000), fmt="JPEG") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(make_image_bytes(size, fmt))
    return path


@pytest.fixture(autouse=True)
def reset_local_rate_limit_counters():
    """Keep in-memory rate-limit state isolated between tests."""
    previous = getattr(app.state, "disable_rate_limits", False)
    app.state.disable_rate_limits = True
    rate_limit._local_counters.clear()
    yield
    rate_limit._local_counters.clear()
    app.state.disable_rate_limits = previous


@pytest.fixture(autouse=True)
def reset_process_caches():
    get_love_config.cache_clear()
    spotify.clear_caches()
    country_catalog._cache = None
    thumbnail_queue.drain()
    yield
    thumbnail_queue.drain()
    country_catalog._cache = None
    spotify.clear_caches()
    get_love_config.cache_clear()


@pytest.fixture
def web_root(tmp_path):
    root = tmp_path / "wwwroot"
    root.mkdir()
    with patch("config.settings.WEB_ROOT", str(root)), patch(
        "config.settings.DATA_DIR", str(tmp_path / "App_Data")
    ):
        yield root.resolve()


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    db_path = tmp_path / "loveletter.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    with patch("services.thumbnail_worker.async_session_maker", maker), patch(
        "services.thumbnail_backfill.async_session_maker", maker
    ), patch("services.seed.async_session_maker", maker):
        yield maker

    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_maker, web_root):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.pop(get_db, None)
