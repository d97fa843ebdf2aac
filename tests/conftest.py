# tests/conftest.py
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

import pytest

# Додаємо src в sys.path, щоб працював імпорт "trackbot.…"
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from trackbot.domain.music.entities import (  # noqa: E402
    ProviderTag,
    TrackEntry,
    TrackMetadata,
    TrackReference,
)
from trackbot.domain.music.interfaces import ResolvedStream  # noqa: E402


def make_entry(
    url: str = "https://x/1.flac",
    *,
    provider: ProviderTag = ProviderTag.HIFI,
    title: str = "Song",
    artist: str = "Artist",
    cover_url: Optional[str] = None,
    provider_id: str = "1",
    catalog: Optional[str] = None,
) -> TrackEntry:
    return TrackEntry(
        reference=TrackReference(
            provider_id=provider_id,
            provider=provider,
            source_url=url,
            cover_url=cover_url,
            catalog=catalog,
        ),
        metadata=TrackMetadata(title=title, artist=artist, duration_ms=180_000),
    )


async def _chunks(payload: bytes):
    yield payload[: len(payload) // 2]
    yield payload[len(payload) // 2:]


class FakeProvider:
    """Провайдер без мережі: рахує звернення і віддає фіксований потік."""

    def __init__(self, tag: ProviderTag = ProviderTag.HIFI, *, payload: bytes = b"fLaC-audio", error: Optional[Exception] = None):
        self.tag = tag
        self.payload = payload
        self.error = error
        self.stream_calls = 0
        self.search_calls: List[str] = []
        self.search_catalogs: List[Optional[str]] = []
        self.search_results: List[TrackEntry] = []

    async def search(self, query, page=0, *, catalog=None):
        self.search_calls.append(query)
        self.search_catalogs.append(catalog)
        return list(self.search_results)

    @asynccontextmanager
    async def stream(self, entry, progress=None):
        self.stream_calls += 1
        if self.error is not None:
            raise self.error
        yield ResolvedStream(chunks=_chunks(self.payload), content_type="audio/flac", filename="audio.flac")

    async def aclose(self):
        return None


class RecordingSink:
    def __init__(self) -> None:
        self.messages: List[str] = []

    async def send(self, text: str) -> None:
        self.messages.append(text)


@pytest.fixture
def entry() -> TrackEntry:
    return make_entry()
