import json

import pytest

from conftest import make_image_bytes

MASTER_HEADER = {"X-Master-Pass": "LoveLetterMaster"}


@pytest.mark.asyncio
async def test_defaults_to_featured_photo(client):
    resp = await client.get("/api/hero/")
    assert resp.json() == {"src": "images/roses.jpg", "caption": "Beispielbild"}


@pytest.mark.asyncio
async def test_upload_requires_password_and_replaces_previous(client, web_root, tmp_path):
    files = {"file": ("hero.jpg", make_image_bytes((300, 200)), "image/jpeg")}
    assert (await client.post("/api/hero/", files=files)).status_code == 401

    old = web_root / "uploads" / "hero" / "hero-old.jpg"
    old.parent.mkdir(parents=True)
    old.write_bytes(make_image_bytes((10, 10)))
    metadata = tmp_path / "App_Data" / "hero-image.json"
    metadata.parent.mkdir(parents=True, exist_ok=True)
    metadata.write_text(json.dumps({"src": "uploads/hero/hero-old.jpg", "caption": None}))

    resp = await client.post("/api/hero/", files=files, data={"caption": " Strand "}, headers=MASTER_HEADER)
    assert resp.status_code == 200
    body = resp.json()
    assert body["src"].startswith("uploads/hero/hero-")
    assert body["caption"] == "Strand"
    assert (web_root / body["src"]).exists()
    assert not old.exists()
    assert (await client.get("/api/hero/")).json() == body


@pytest.mark.asyncio
async def test_static_hero_is_never_deleted(client, web_root, tmp_path):
    static = web_root / "images" / "custom.jpg"
    static.parent.mkdir(parents=True)
    static.write_bytes(make_image_bytes((10, 10)))
    metadata = tmp_path / "App_Data" / "hero-image.json"
    metadata.parent.mkdir(parents=True, exist_ok=True)
    metadata.write_text(json.dumps({"src": "images/custom.jpg", "caption": "Alt"}))

    files = {"file": ("new.png", make_image_bytes((20, 20), fmt="PNG"), "image/png")}
    resp = await client.post("/api/hero/", files=files, headers=MASTER_HEADER)
    assert resp.status_code == 200
    assert static.exists()


@pytest.mark.asyncio
async def test_missing_file_falls_back_but_keeps_caption(client, tmp_path):
    metadata = tmp_path / "App_Data" / "hero-image.json"
    metadata.parent.mkdir(parents=True, exist_ok=True)
    metadata.write_text(json.dumps({"src": "uploads/hero/gone.jpg", "caption": "Erinnerung"}))

    resp = await client.get("/api/hero/")
    assert resp.json() == {"src": "images/roses.jpg", "caption": "Erinnerung"}


@pytest.mark.asyncio
async def test_update_caption(client):
    assert (await client.put("/api/hero/caption", json={"caption": "Neu"})).status_code == 401

    resp = await client.put("/api/hero/caption", json={"caption": "  Neu  "}, headers=MASTER_HEADER)
    assert resp.status_code == 200
    assert resp.json() == {"src": "images/roses.jpg", "caption": "Neu"}
