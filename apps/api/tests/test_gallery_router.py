import io
import zipfile
from unittest.mock import patch

import pytest
from PIL import Image

from conftest import make_image_bytes
from services.thumbnail_queue import GALLERY_KIND, thumbnail_queue
from services.thumbnail_worker import process_thumbnail_item

MASTER_HEADER = {"X-Master-Pass": "LoveLetterMaster"}


async def _upload(client, name="sunset.jpg", caption=None, album=None, size=(2000, 1000)):
    data = {}
    if caption is not None:
        data["caption"] = caption
    if album is not None:
        data["album"] = album
    return await client.post(
        "/api/gallery/",
        files={"file": (name, make_image_bytes(size), "image/jpeg")},
        data=data,
    )


async def _run_queued_thumbnails():
    for item in thumbnail_queue.drain():
        await process_thumbnail_item(item)


@pytest.mark.asyncio
async def test_upload_returns_before_thumbnail_then_worker_fills_it(client, web_root):
    resp = await _upload(client, caption="Sunset")
    assert resp.status_code == 200
    body = resp.json()
    photo_id = body["id"]
    assert body["thumbnail_url"] is None
    assert body["url"] == f"/uploads/gallery/{photo_id}.jpg"
    assert body["original_file_name"] == "sunset.jpg"

    assert thumbnail_queue.pending() == 1
    queued = thumbnail_queue.drain()
    assert queued[0].kind == GALLERY_KIND
    assert queued[0].record_id == photo_id
    await process_thumbnail_item(queued[0])

    thumb_file = web_root / "uploads" / "gallery" / "thumbs" / f"{photo_id}-thumb.webp"
    with Image.open(thumb_file) as img:
        assert img.size == (512, 256)

    listed = (await client.get("/api/gallery/")).json()
    assert listed[0]["thumbnail_url"] == f"/uploads/gallery/thumbs/{photo_id}-thumb.webp"


@pytest.mark.asyncio
async def test_upload_rejects_unsupported_and_empty_files(client, web_root):
    bad_ext = await client.post("/api/gallery/", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert bad_ext.status_code == 400

    empty = await client.post("/api/gallery/", files={"file": ("empty.jpg", b"", "image/jpeg")})
    assert empty.status_code == 400
    assert thumbnail_queue.pending() == 0
    assert not any((web_root / "uploads" / "gallery").glob("*.jpg"))


@pytest.mark.asyncio
async def test_upload_rejects_oversized_file(client, web_root):
    with patch("services.gallery.MAX_PHOTO_UPLOAD_BYTES", 10):
        resp = await _upload(client)
    assert resp.status_code == 413
    assert thumbnail_queue.pending() == 0


@pytest.mark.asyncio
async def test_albums_include_pseudo_albums_in_order(client):
    created = await client.post("/api/gallery/albums", json={"name": "Urlaub"})
    assert created.status_code == 200
    duplicate = await client.post("/api/gallery/albums", json={"name": "urlaub"})
    assert duplicate.status_code == 400
    reserved = await client.post("/api/gallery/albums", json={"name": "Favoriten"})
    assert reserved.status_code == 400

    in_album = (await _upload(client, album="Urlaub", size=(64, 64))).json()
    loose = (await _upload(client, size=(64, 64))).json()
    await client.post(f"/api/gallery/{loose['id']}/favorite", json={"is_favorite": True})

    albums = (await client.get("/api/gallery/albums")).json()
    assert [album["name"] for album in albums] == ["Favoriten", "Urlaub", "Ohne Album"]
    assert albums[1]["photo_count"] == 1
    assert albums[1]["cover_url"] == in_album["url"]
    assert albums[2]["is_unassigned"] is True


@pytest.mark.asyncio
async def test_favorite_limit_is_enforced(client):
    first = (await _upload(client, size=(32, 32))).json()
    second = (await _upload(client, size=(32, 32))).json()

    with patch("config.settings.LOVE_GALLERY_FAVORITE_LIMIT", 1):
        ok = await client.post(f"/api/gallery/{first['id']}/favorite", json={"is_favorite": True})
        blocked = await client.post(f"/api/gallery/{second['id']}/favorite", json={"is_favorite": True})

    assert ok.status_code == 200
    assert ok.json()["is_favorite"] is True
    assert blocked.status_code == 400

    favorites = (await client.get("/api/gallery/favorites")).json()
    assert [photo["id"] for photo in favorites] == [first["id"]]


@pytest.mark.asyncio
async def test_update_photo_caption_and_album(client):
    photo = (await _upload(client, size=(32, 32))).json()

    denied = await client.put(f"/api/gallery/{photo['id']}", json={"caption": "Heimlich"})
    assert denied.status_code == 401

    resp = await client.put(
        f"/api/gallery/{photo['id']}",
        json={"caption": "  Am See ", "album": "Sommer"},
        headers=MASTER_HEADER,
    )
    assert resp.status_code == 200
    assert resp.json()["caption"] == "Am See"
    assert resp.json()["album"] == "Sommer"

    too_long = await client.put(
        f"/api/gallery/{photo['id']}", json={"caption": "x" * 161}, headers=MASTER_HEADER
    )
    assert too_long.status_code == 400

    missing = await client.put("/api/gallery/nope", json={"caption": "hi"}, headers=MASTER_HEADER)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_export_zips_selected_photos(client):
    first = (await _upload(client, name="a.jpg", size=(32, 32))).json()
    second = (await _upload(client, name="a.jpg", size=(32, 32))).json()

    resp = await client.get("/api/gallery/export", params=[("ids", first["id"]), ("ids", second["id"])])
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/zip"
    assert "attachment" in resp.headers["content-disposition"]
    with zipfile.ZipFile(io.BytesIO(resp.content)) as archive:
        assert archive.namelist() == ["a.jpg", "a_1.jpg"]

    assert (await client.get("/api/gallery/export")).status_code == 400
    assert (await client.get("/api/gallery/export", params={"ids": "unknown"})).status_code == 404


@pytest.mark.asyncio
async def test_delete_removes_record_and_files(client, web_root):
    photo = (await _upload(client, size=(800, 600))).json()
    await _run_queued_thumbnails()
    original = web_root / "uploads" / "gallery" / f"{photo['id']}.jpg"
    thumb = web_root / "uploads" / "gallery" / "thumbs" / f"{photo['id']}-thumb.webp"
    assert original.exists() and thumb.exists()

    denied = await client.delete(f"/api/gallery/{photo['id']}")
    assert denied.status_code == 401
    assert original.exists()

    resp = await client.delete(f"/api/gallery/{photo['id']}", headers=MASTER_HEADER)
    assert resp.status_code == 200
    assert not original.exists()
    assert not thumb.exists()
    assert (await client.get("/api/gallery/")).json() == []


@pytest.mark.asyncio
async def test_backfill_endpoint_requires_master_password(client, web_root):
    await _upload(client, size=(900, 300))
    thumbnail_queue.drain()

    denied = await client.post("/api/gallery/thumbnails/backfill")
    assert denied.status_code == 401

    resp = await client.post("/api/gallery/thumbnails/backfill", headers=MASTER_HEADER)
    assert resp.status_code == 200
    assert resp.json()["kinds"]["gallery"]["generated"] == 1
    listed = (await client.get("/api/gallery/")).json()
    assert listed[0]["thumbnail_url"].endswith("-thumb.webp")
