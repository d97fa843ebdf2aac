"""
🧪 test_acquisition_pipeline.py — кеш → провайдер → ffmpeg → вивантаження

Перевіряє:
- Промах кешу: етапи прогресу по черзі і запис у кеш
- Влучання: без мережі і без прогресу
- `refresh=True` обходить кеш і перезаписує запис
- Обкладинку для тегування та окремий ассет обкладинки в artwork_dir
- `AcquisitionFailed` з причиною та прибраний тимчасовий каталог (провайдер, ffmpeg)
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import FakeProvider, RecordingSink, make_entry
from trackbot.bot.ui import static_messages as msg
from trackbot.domain.music.entities import ProviderTag
from trackbot.errors.custom_errors import AcquisitionFailed, ProcessingFailure, ProviderUnavailable
from trackbot.infrastructure.cache import FileMediaCache, MemoryMediaCache
from trackbot.infrastructure.music import AcquisitionPipeline
from trackbot.infrastructure.providers import ProviderRegistry

COVER_URL = "https://img.test/cover"


async def _fake_tag(source, out_dir, stem, metadata, cover=None):
    target = out_dir / f"{stem}{source.suffix}"
    target.write_bytes(source.read_bytes())
    return target


async def _fake_download(url, dest_dir, stem="cover"):
    path = dest_dir / f"{stem}.jpg"
    path.write_bytes(b"\xff\xd8jpeg")
    return path, "image/jpeg"


@pytest.fixture
def work_dir(tmp_path):
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def provider():
    return FakeProvider(ProviderTag.HIFI)


@pytest.fixture
def processor():
    mock = MagicMock()
    mock.tag = AsyncMock(side_effect=_fake_tag)
    return mock


@pytest.fixture
def transport():
    mock = MagicMock()
    mock.upload = AsyncMock(side_effect=["H1", "H2", "H3"])
    return mock


@pytest.fixture
def artwork():
    mock = MagicMock()
    mock.download = AsyncMock(side_effect=_fake_download)
    return mock


def _pipeline(cache, provider, processor, transport, artwork, tmp_path, work_dir):
    return AcquisitionPipeline(
        cache,
        ProviderRegistry([provider]),
        processor,
        transport,
        artwork,
        artwork_dir=tmp_path / "artwork",
        work_dir=work_dir,
    )


@pytest.mark.asyncio
async def test_miss_then_hit(provider, processor, transport, artwork, tmp_path, work_dir):
    cache = MemoryMediaCache()
    pipeline = _pipeline(cache, provider, processor, transport, artwork, tmp_path, work_dir)
    entry = make_entry()
    sink = RecordingSink()

    handle = await pipeline.acquire_track(entry, progress=sink)

    assert handle.file_id == "H1"
    assert handle.content_type == "audio/flac"
    assert sink.messages == [msg.STAGE_FETCH, msg.STAGE_PROCESS, msg.STAGE_UPLOAD]
    assert await cache.get(entry.source_url) == handle

    again = await pipeline.acquire_track(entry, progress=sink)

    assert again == handle
    assert provider.stream_calls == 1
    assert transport.upload.await_count == 1
    assert len(sink.messages) == 3
    assert list(work_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_tagging_receives_raw_file_and_display_name(provider, processor, transport, artwork, tmp_path, work_dir):
    pipeline = _pipeline(MemoryMediaCache(), provider, processor, transport, artwork, tmp_path, work_dir)
    entry = make_entry(title="Song", artist="Artist")

    await pipeline.acquire_track(entry)

    source, out_dir, stem, metadata, cover = processor.tag.await_args.args
    assert source.name == "source.flac"
    assert stem == "Artist - Song"
    assert metadata is entry.metadata
    assert cover is None
    uploaded, content_type = transport.upload.await_args.args
    assert uploaded.name == "Artist - Song.flac"
    assert content_type == "audio/flac"
    assert transport.upload.await_args.kwargs == {"metadata": entry.metadata, "thumbnail": None}


@pytest.mark.asyncio
async def test_refresh_bypasses_cache_and_overwrites(provider, processor, transport, artwork, tmp_path, work_dir):
    cache = MemoryMediaCache()
    pipeline = _pipeline(cache, provider, processor, transport, artwork, tmp_path, work_dir)
    entry = make_entry()

    first = await pipeline.acquire_track(entry)
    second = await pipeline.acquire_track(entry, refresh=True)

    assert (first.file_id, second.file_id) == ("H1", "H2")
    assert provider.stream_calls == 2
    assert (await cache.get(entry.source_url)).file_id == "H2"


@pytest.mark.asyncio
async def test_cover_is_embedded_and_used_as_thumbnail(provider, processor, transport, artwork, tmp_path, work_dir):
    pipeline = _pipeline(MemoryMediaCache(), provider, processor, transport, artwork, tmp_path, work_dir)
    sink = RecordingSink()

    await pipeline.acquire_track(make_entry(cover_url=COVER_URL), progress=sink)

    assert sink.messages == [msg.STAGE_FETCH, msg.STAGE_FETCH_COVER, msg.STAGE_PROCESS, msg.STAGE_UPLOAD]
    cover = processor.tag.await_args.args[4]
    assert cover.name == "cover.jpg"
    assert transport.upload.await_args.kwargs["thumbnail"] == cover


@pytest.mark.asyncio
async def test_broken_cover_does_not_fail_track(provider, processor, transport, artwork, tmp_path, work_dir):
    artwork.download = AsyncMock(side_effect=ProviderUnavailable(details="404"))
    pipeline = _pipeline(MemoryMediaCache(), provider, processor, transport, artwork, tmp_path, work_dir)

    handle = await pipeline.acquire_track(make_entry(cover_url=COVER_URL))

    assert handle.file_id == "H1"
    assert processor.tag.await_args.args[4] is None


@pytest.mark.asyncio
async def test_provider_failure_wraps_cause_and_cleans_up(processor, transport, artwork, tmp_path, work_dir):
    cause = ProviderUnavailable(provider="hifi", details="HTTP 500")
    cache = MemoryMediaCache()
    pipeline = _pipeline(cache, FakeProvider(error=cause), processor, transport, artwork, tmp_path, work_dir)
    entry = make_entry()

    with pytest.raises(AcquisitionFailed) as exc_info:
        await pipeline.acquire_track(entry)

    assert exc_info.value.asset == "track"
    assert exc_info.value.url == entry.source_url
    assert exc_info.value.__cause__ is cause
    assert await cache.get(entry.source_url) is None
    transport.upload.assert_not_awaited()
    assert list(work_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_inactive_provider_is_acquisition_failure(provider, processor, transport, artwork, tmp_path, work_dir):
    pipeline = _pipeline(MemoryMediaCache(), provider, processor, transport, artwork, tmp_path, work_dir)

    with pytest.raises(AcquisitionFailed) as exc_info:
        await pipeline.acquire_track(make_entry(provider=ProviderTag.YANDEX))
    assert isinstance(exc_info.value.__cause__, ProviderUnavailable)


@pytest.mark.asyncio
async def test_acquire_cover_without_url_returns_none(provider, processor, transport, artwork, tmp_path, work_dir):
    pipeline = _pipeline(MemoryMediaCache(), provider, processor, transport, artwork, tmp_path, work_dir)
    assert await pipeline.acquire_cover(make_entry()) is None
    artwork.download.assert_not_awaited()


@pytest.mark.asyncio
async def test_acquire_cover_keeps_durable_copy(provider, processor, transport, artwork, tmp_path, work_dir):
    cache_dir = tmp_path / "cache"
    pipeline = _pipeline(FileMediaCache(cache_dir), provider, processor, transport, artwork, tmp_path, work_dir)
    entry = make_entry(cover_url=COVER_URL)

    handle = await pipeline.acquire_cover(entry)

    durable = tmp_path / "artwork" / f"{AcquisitionPipeline.artwork_stem(COVER_URL)}.jpg"
    assert handle.file_id == str(durable)
    assert handle.content_type == "image/jpeg"
    assert handle.local_path == str(durable)
    assert durable.read_bytes() == b"\xff\xd8jpeg"

    restarted = _pipeline(FileMediaCache(cache_dir), provider, processor, transport, artwork, tmp_path, work_dir)
    cached = await restarted.acquire_cover(entry)

    assert cached.file_id == str(durable)
    assert cached.local_path == str(durable)
    assert artwork.download.await_count == 1
    transport.upload.assert_not_awaited()


@pytest.mark.asyncio
async def test_acquire_cover_failure(provider, processor, transport, artwork, tmp_path, work_dir):
    artwork.download = AsyncMock(side_effect=ProviderUnavailable(details="not an image"))
    pipeline = _pipeline(MemoryMediaCache(), provider, processor, transport, artwork, tmp_path, work_dir)

    with pytest.raises(AcquisitionFailed) as exc_info:
        await pipeline.acquire_cover(make_entry(cover_url=COVER_URL))
    assert exc_info.value.asset == "cover"


@pytest.mark.asyncio
async def test_missing_artwork_file_is_refetched(provider, processor, transport, artwork, tmp_path, work_dir):
    pipeline = _pipeline(MemoryMediaCache(), provider, processor, transport, artwork, tmp_path, work_dir)
    entry = make_entry(cover_url=COVER_URL)
    first = await pipeline.acquire_cover(entry)

    Path(first.local_path).unlink()
    second = await pipeline.acquire_cover(entry)

    assert artwork.download.await_count == 2
    assert second.local_path == first.local_path


@pytest.mark.asyncio
async def test_acquired_cover_is_reused_for_tagging(provider, processor, transport, artwork, tmp_path, work_dir):
    pipeline = _pipeline(MemoryMediaCache(), provider, processor, transport, artwork, tmp_path, work_dir)
    entry = make_entry(cover_url=COVER_URL)
    sink = RecordingSink()

    cover = await pipeline.acquire_cover(entry)
    await pipeline.acquire_track(entry, progress=sink, cover=cover, fetch_cover=False)

    assert artwork.download.await_count == 1
    assert str(processor.tag.await_args.args[4]) == cover.local_path
    assert str(transport.upload.await_args.kwargs["thumbnail"]) == cover.local_path
    assert sink.messages == [msg.STAGE_FETCH, msg.STAGE_FETCH_COVER, msg.STAGE_PROCESS, msg.STAGE_UPLOAD]


@pytest.mark.asyncio
async def test_no_cover_and_no_fetch_tags_without_cover(provider, processor, transport, artwork, tmp_path, work_dir):
    pipeline = _pipeline(MemoryMediaCache(), provider, processor, transport, artwork, tmp_path, work_dir)

    await pipeline.acquire_track(make_entry(cover_url=COVER_URL), cover=None, fetch_cover=False)

    artwork.download.assert_not_awaited()
    assert processor.tag.await_args.args[4] is None


@pytest.mark.asyncio
async def test_processing_failure_wraps_cause_and_cleans_up(provider, processor, transport, artwork, tmp_path, work_dir):
    cause = ProcessingFailure(details="ffmpeg exited with 1")
    processor.tag = AsyncMock(side_effect=cause)
    cache = MemoryMediaCache()
    pipeline = _pipeline(cache, provider, processor, transport, artwork, tmp_path, work_dir)
    entry = make_entry(cover_url=COVER_URL)

    with pytest.raises(AcquisitionFailed) as exc_info:
        await pipeline.acquire_track(entry)

    assert exc_info.value.__cause__ is cause
    assert await cache.get(entry.source_url) is None
    transport.upload.assert_not_awaited()
    assert list(work_dir.iterdir()) == []
