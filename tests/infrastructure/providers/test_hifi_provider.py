"""
🧪 test_hifi_provider.py — Hifi REST-проксі через httpx.MockTransport

Перевіряє:
- Розбір `items` пошуку (URL, обкладинка, тривалість, заглушка виконавця)
- Стрім через `OriginalTrackUrl`
- Мапінг HTTP-статусів у доменні помилки
"""

import httpx
import pytest

from conftest import make_entry
from trackbot.domain.music.entities import PLACEHOLDER_ARTIST, ProviderTag
from trackbot.errors.custom_errors import ProviderUnauthenticated, ProviderUnavailable, TrackNotFound
from trackbot.infrastructure.providers import HifiProvider

BASE = "https://hifi.test"


def _provider(handler) -> HifiProvider:
    return HifiProvider(BASE, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_search_parses_items():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/search/"
        assert request.url.params["s"] == "daft punk"
        return httpx.Response(200, json={
            "items": [
                {
                    "id": 42,
                    "title": "One More Time",
                    "duration": 320,
                    "artists": [{"name": "Daft Punk"}],
                    "album": {"cover": "aa-bb-cc"},
                },
                {"id": 43, "title": "Untitled", "artists": []},
                {"title": "no id"},
            ],
        })

    provider = _provider(handler)
    entries = await provider.search("daft punk")
    await provider.aclose()

    assert len(entries) == 2
    first, second = entries
    assert first.source_url == "https://tidal.com/browse/track/42"
    assert first.reference.provider is ProviderTag.HIFI
    assert first.reference.cover_url == "https://resources.tidal.com/images/aa/bb/cc/640x640.jpg"
    assert first.metadata.artist == "Daft Punk"
    assert first.metadata.duration_ms == 320_000
    assert second.metadata.artist == PLACEHOLDER_ARTIST
    assert second.reference.cover_url is None


@pytest.mark.asyncio
async def test_stream_follows_original_track_url():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/track/":
            assert request.url.params["id"] == "7"
            return httpx.Response(200, json=[{"trackId": 7}, {"OriginalTrackUrl": "https://cdn.test/7.flac"}])
        assert str(request.url) == "https://cdn.test/7.flac"
        return httpx.Response(200, content=b"fLaC-bytes", headers={"content-type": "application/octet-stream"})

    provider = _provider(handler)
    async with provider.stream(make_entry(provider_id="7")) as resolved:
        body = b"".join([chunk async for chunk in resolved.chunks])
    await provider.aclose()

    assert body == b"fLaC-bytes"
    assert resolved.content_type == "audio/flac"


@pytest.mark.asyncio
async def test_stream_without_original_url_is_not_found():
    provider = _provider(lambda request: httpx.Response(200, json={"trackId": 7}))
    with pytest.raises(TrackNotFound):
        async with provider.stream(make_entry(provider_id="7")):
            pass


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error_cls"),
    [(401, ProviderUnauthenticated), (404, TrackNotFound), (500, ProviderUnavailable)],
)
async def test_http_status_mapping(status, error_cls):
    provider = _provider(lambda request: httpx.Response(status))
    with pytest.raises(error_cls) as exc_info:
        await provider.search("x")
    assert exc_info.value.status_code == status
    assert exc_info.value.provider == "hifi"


@pytest.mark.asyncio
async def test_invalid_json_is_unavailable():
    provider = _provider(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(ProviderUnavailable):
        await provider.search("x")
