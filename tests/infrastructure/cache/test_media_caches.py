"""
🧪 test_media_caches.py — памʼять, файловий та двоярусний кеш медіа

Перевіряє:
- Формат двох файлів на запис
- Промах замість винятку при збоях I/O
- Промоцію влучань з диска в памʼять
"""

import pytest

from trackbot.domain.music.entities import CachedMediaHandle
from trackbot.infrastructure.cache import FileMediaCache, MemoryMediaCache, TieredMediaCache

URL = "https://x/1.flac"
HANDLE = CachedMediaHandle(file_id="H1", content_type="audio/flac")


@pytest.mark.asyncio
async def test_memory_cache_put_get_clear():
    cache = MemoryMediaCache()
    assert await cache.get(URL) is None
    assert await cache.put(URL, HANDLE) is HANDLE
    assert await cache.get(URL) is HANDLE
    await cache.clear()
    assert await cache.get(URL) is None


@pytest.mark.asyncio
async def test_file_cache_writes_two_sibling_files(tmp_path):
    cache = FileMediaCache(tmp_path)
    await cache.put(URL, HANDLE)

    payload = tmp_path / "++media+https+++x+1.flac+payload"
    content_type = tmp_path / "++media+https+++x+1.flac+content_type"
    assert payload.read_text(encoding="utf-8") == "H1"
    assert content_type.read_text(encoding="utf-8") == "audio/flac"

    reopened = FileMediaCache(tmp_path)
    assert await reopened.get(URL) == HANDLE


@pytest.mark.asyncio
async def test_file_cache_incomplete_entry_is_miss(tmp_path):
    (tmp_path / "++media+https+++x+1.flac+payload").write_text("H1", encoding="utf-8")
    assert await FileMediaCache(tmp_path).get(URL) is None


@pytest.mark.asyncio
async def test_file_cache_io_failure_fails_open(tmp_path):
    not_a_dir = tmp_path / "blocked"
    not_a_dir.write_text("file, not a directory", encoding="utf-8")
    cache = FileMediaCache(not_a_dir)

    assert await cache.put(URL, HANDLE) is HANDLE
    assert await cache.get(URL) is None


@pytest.mark.asyncio
async def test_file_cache_clear_removes_entries_only(tmp_path):
    cache = FileMediaCache(tmp_path)
    await cache.put(URL, HANDLE)
    (tmp_path / "keep.txt").write_text("x", encoding="utf-8")

    await cache.clear()

    assert await cache.get(URL) is None
    assert (tmp_path / "keep.txt").exists()


@pytest.mark.asyncio
async def test_tiered_cache_promotes_durable_hits(tmp_path):
    durable = FileMediaCache(tmp_path)
    await durable.put(URL, HANDLE)
    front = MemoryMediaCache()
    tiered = TieredMediaCache(front, durable)

    assert await tiered.get(URL) == HANDLE
    assert await front.get(URL) == HANDLE


@pytest.mark.asyncio
async def test_tiered_cache_writes_both_tiers(tmp_path):
    front, back = MemoryMediaCache(), FileMediaCache(tmp_path)
    tiered = TieredMediaCache(front, back)

    await tiered.put(URL, HANDLE)

    assert await front.get(URL) == HANDLE
    assert await back.get(URL) == HANDLE
