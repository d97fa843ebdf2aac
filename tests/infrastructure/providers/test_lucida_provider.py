"""
🧪 test_lucida_provider.py — агрегатор Lucida

Перевіряє:
- Пошук у першій країні каталогу
- Перебір країн при відмові handoff
- Опитування воркера і прогрес лише для нових повідомлень
- Помилку, коли всі країни відмовили
"""

import json

import httpx
import pytest

from conftest import RecordingSink, make_entry
from trackbot.domain.music.entities import ProviderTag
from trackbot.errors.custom_errors import ProviderUnavailable
from trackbot.infrastructure.providers import LucidaProvider

BASE = "https://lucida.test"


def _provider(handler, **kwargs) -> LucidaProvider:
    return LucidaProvider(
        base_url=BASE,
        worker_url_template="https://{server}.worker.test",
        poll_interval=0,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


def _countries(request: httpx.Request):
    if request.url.params.get("url", "").startswith("/api/countries"):
        return httpx.Response(200, json={"countries": [{"code": "US"}, {"code": "DE"}]})
    return None


@pytest.mark.asyncio
async def test_search_uses_first_country():
    def handler(request: httpx.Request) -> httpx.Response:
        countries = _countries(request)
        if countries is not None:
            assert "service=qobuz" in request.url.params["url"]
            return countries
        inner = request.url.params["url"]
        assert "country=US" in inner and "query=song" in inner
        return httpx.Response(200, json={"results": {"tracks": [
            {
                "id": "q1",
                "url": "https://play.qobuz.com/track/1",
                "title": "Song",
                "durationMs": 1000,
                "artists": [{"name": "Singer"}],
                "album": {"coverArtwork": [{"url": "https://img/s"}, {"url": "https://img/l"}]},
            },
            {"title": "no url"},
        ]}})

    entries = await _provider(handler).search("song", catalog="qobuz")

    assert len(entries) == 1
    reference = entries[0].reference
    assert reference.provider is ProviderTag.LUCIDA
    assert reference.catalog == "qobuz"
    assert reference.cover_url == "https://img/l"


@pytest.mark.asyncio
async def test_stream_falls_back_to_next_country_and_reports_progress():
    polls = iter([
        {"status": "working", "message": "Fetching"},
        {"status": "working", "message": "Fetching"},
        {"status": "completed", "message": "Done"},
    ])

    def handler(request: httpx.Request) -> httpx.Response:
        countries = _countries(request)
        if countries is not None:
            return countries
        if request.method == "POST":
            payload = json.loads(request.content)
            if payload["account"]["id"] == "US":
                return httpx.Response(200, json={"success": False, "error": "region"})
            return httpx.Response(200, json={"success": True, "handoff": "h1", "server": "w1"})
        if request.url.path.endswith("/download"):
            return httpx.Response(200, content=b"flac", headers={"content-type": "audio/flac"})
        assert str(request.url) == "https://w1.worker.test/api/fetch/request/h1"
        return httpx.Response(200, json=next(polls))

    sink = RecordingSink()
    provider = _provider(handler, progress_template="{title}: {message}")
    entry = make_entry("https://tidal.com/browse/track/9", provider=ProviderTag.LUCIDA, title="Nine")
    async with provider.stream(entry, sink) as resolved:
        body = b"".join([chunk async for chunk in resolved.chunks])

    assert body == b"flac"
    assert sink.messages == [
        "Nine: Запит до сервера (US)",
        "Nine: Запит до сервера (DE)",
        "Nine: Fetching",
        "Nine: Done",
    ]


@pytest.mark.asyncio
async def test_stream_fails_when_every_country_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        countries = _countries(request)
        if countries is not None:
            return countries
        return httpx.Response(200, json={"success": True, "handoff": "h", "server": "w"}) \
            if request.method == "POST" else httpx.Response(200, json={"status": "error", "message": "boom"})

    entry = make_entry(provider=ProviderTag.LUCIDA)
    with pytest.raises(ProviderUnavailable) as exc_info:
        async with _provider(handler).stream(entry):
            pass
    assert "all 2 countries failed" in exc_info.value.details


@pytest.mark.asyncio
async def test_empty_country_list_is_unavailable():
    provider = _provider(lambda request: httpx.Response(200, json={"countries": []}))
    with pytest.raises(ProviderUnavailable):
        await provider.search("x")
