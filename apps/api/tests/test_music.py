from unittest.mock import patch

import httpx
import pytest

from services import spotify


def _spotify_client(calls):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if request.url.path == "/oembed":
            url = request.url.params.get("url")
            if url.endswith("missing"):
                return httpx.Response(404)
            return httpx.Response(200, json={"title": "Demo Song", "thumbnail_url": "https://i.scdn.co/cover.jpg"})
        if request.url.path == "/api/token":
            assert request.headers["authorization"].startswith("Basic ")
            return httpx.Response(200, json={"access_token": "token-123"})
        if request.url.path.startswith("/v1/playlists/"):
            assert request.headers["authorization"] == "Bearer token-123"
            return httpx.Response(
                200,
                json={
                    "items": [
                        {
                            "track": {
                                "id": "t1",
                                "name": "First",
                                "type": "track",
                                "artists": [{"name": "Band"}],
                                "album": {"name": "Record", "images": [{"url": "https://img/1.jpg"}]},
                                "external_urls": {"spotify": "https://open.spotify.com/track/t1"},
                                "duration_ms": 1000,
                            }
                        },
                        {"track": {"id": "e1", "type": "episode", "name": "Podcast"}},
                        {"track": None},
                    ]
                },
            )
        return httpx.Response(500)

    return lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_track_metadata_is_cached(client):
    calls = []
    with patch("services.spotify._http_client", _spotify_client(calls)):
        first = await client.get("/api/music/metadata", params={"url": "https://open.spotify.com/track/abc"})
        second = await client.get("/api/music/metadata", params={"url": "https://open.spotify.com/track/abc"})
        missing = await client.get("/api/music/metadata", params={"url": "https://open.spotify.com/track/missing"})

    assert first.json() == {"thumbnail_url": "https://i.scdn.co/cover.jpg", "title": "Demo Song"}
    assert second.json() == first.json()
    assert calls.count("/oembed") == 2
    assert missing.status_code == 404
    assert (await client.get("/api/music/metadata")).status_code == 404


@pytest.mark.asyncio
async def test_playlist_requires_configuration(client):
    with patch("config.settings.LOVE_SPOTIFY_CLIENT_ID", ""):
        assert (await client.get("/api/music/playlist")).status_code == 404


@pytest.mark.asyncio
async def test_playlist_returns_tracks_only(client):
    calls = []
    with patch("config.settings.LOVE_SPOTIFY_CLIENT_ID", "id"), patch(
        "config.settings.LOVE_SPOTIFY_CLIENT_SECRET", "secret"
    ), patch("config.settings.LOVE_SPOTIFY_PLAYLIST_ID", "pl1"), patch(
        "services.spotify._http_client", _spotify_client(calls)
    ):
        resp = await client.get("/api/music/playlist")
        await client.get("/api/music/playlist")

    assert resp.status_code == 200
    body = resp.json()
    assert body["playlist_url"] == "https://open.spotify.com/playlist/pl1"
    assert [track["id"] for track in body["tracks"]] == ["t1"]
    assert body["tracks"][0]["artists"] == ["Band"]
    assert calls.count("/api/token") == 1


@pytest.mark.asyncio
async def test_songs_combine_config_and_metadata(client):
    with patch("services.spotify._http_client", _spotify_client([])):
        resp = await client.get("/api/music/songs")

    items = resp.json()["items"]
    assert len(items) == 2
    assert items[0]["title"] == "Demo Song"
    assert items[0]["artist"] == "Sample Artist"


def test_clear_caches():
    spotify._metadata_cache["x"] = (0.0, {})
    spotify.clear_caches()
    assert spotify._metadata_cache == {}
