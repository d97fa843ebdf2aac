"""
🧪 test_music_keys_and_entities.py — ключі кешу, id inline-результатів і DTO треків

Перевіряє:
- Екранування `/` та `:` у ключі файлового кешу
- Компактний SHA-1 ключ пошукового кешу
- Формат `{provider}|{key}` та псевдонім `qobuz`
- Інваріанти `TrackMetadata`
"""

import hashlib

import pytest

from trackbot.domain.music.entities import CachedMediaHandle, ProviderTag, TrackMetadata, TrackReference
from trackbot.domain.music.keys import build_result_id, cache_key, parse_result_id, search_cache_key


def test_cache_key_escapes_slashes_and_colons():
    assert cache_key("https://x/1.flac", "payload") == "++media+https+++x+1.flac+payload"
    assert "/" not in cache_key("https://a.b/c/d?e=f", "content_type")


def test_search_cache_key_is_sha1_prefix():
    url = "https://tidal.com/browse/track/1"
    key = search_cache_key(url)
    assert len(key) == 16
    assert key == hashlib.sha1(url.encode("utf-8")).hexdigest()[:16]


def test_result_id_round_trip():
    result_id = build_result_id(ProviderTag.LUCIDA, "0123456789abcdef")
    assert result_id == "lucida|0123456789abcdef"
    assert parse_result_id(result_id) == (ProviderTag.LUCIDA, "0123456789abcdef")
    assert len(result_id.encode("utf-8")) <= 64


def test_qobuz_alias_resolves_to_hifi():
    assert ProviderTag.parse("qobuz") is ProviderTag.HIFI
    assert parse_result_id("qobuz|abc")[0] is ProviderTag.HIFI


@pytest.mark.parametrize("raw", ["", "hifi", "hifi|", "spotify|abc"])
def test_parse_result_id_rejects_malformed(raw):
    with pytest.raises(ValueError):
        parse_result_id(raw)


def test_metadata_rejects_empty_artist():
    with pytest.raises(ValueError):
        TrackMetadata(title="Song", artist="  ")


def test_metadata_display_name_and_duration():
    meta = TrackMetadata(title="Song", artist="Artist", duration_ms=181_600)
    assert meta.display_name == "Artist - Song"
    assert meta.duration_sec == 182


def test_reference_requires_source_url():
    with pytest.raises(ValueError):
        TrackReference(provider_id="1", provider=ProviderTag.HIFI, source_url="")


def test_cached_handle_is_immutable():
    handle = CachedMediaHandle(file_id="F1", content_type="audio/flac")
    with pytest.raises(AttributeError):
        handle.file_id = "F2"  # type: ignore[misc]
