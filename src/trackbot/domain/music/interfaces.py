# 🎵 trackbot/domain/music/interfaces.py
"""
🎵 Контракти домену отримання треків.

🔹 `IMediaCache` — сховище `url-ключ → CachedMediaHandle` (пам'ять / файли / двоярусне).
🔹 `ISourceProvider` — бекенд, що шукає треки та віддає сирий потік байтів.
🔹 `IMediaProcessor`, `IMediaTransport`, `IProgressSink` — тегування, Telegram та канал прогресу.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass                                                    # 🧱 DTO потоку
from pathlib import Path                                                             # 📂 Шляхи до файлів
from typing import (
    AsyncContextManager,
    AsyncIterator,
    List,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

# 🧩 Внутрішні модулі проєкту
from .entities import CachedMediaHandle, ProviderTag, TrackEntry, TrackMetadata


# ================================
# 🏛️ DTO ПОТОКУ
# ================================
@dataclass(frozen=True, slots=True)
class ResolvedStream:
    """
    🌊 Сирий аудіопотік від провайдера.

    `chunks` валідний лише всередині контекст-менеджера `ISourceProvider.stream`.
    """

    chunks: AsyncIterator[bytes]
    content_type: str
    filename: Optional[str] = None


# ================================
# 🔌 КОНТРАКТИ
# ================================
@runtime_checkable
class IProgressSink(Protocol):
    """📣 Приймає людиночитні повідомлення про етапи."""

    async def send(self, text: str) -> None: ...


@runtime_checkable
class IMediaCache(Protocol):
    """🧊 Кеш завантажених файлів. Збої I/O повертаються як промах, не як виняток."""

    async def get(self, key: str) -> Optional[CachedMediaHandle]: ...

    async def put(self, key: str, handle: CachedMediaHandle) -> CachedMediaHandle: ...

    async def clear(self) -> None: ...


@runtime_checkable
class ISourceProvider(Protocol):
    """🎧 Бекенд музичного сервісу."""

    @property
    def tag(self) -> ProviderTag: ...

    async def search(self, query: str, page: int = 0, *, catalog: Optional[str] = None) -> List[TrackEntry]: ...

    def stream(
        self,
        entry: TrackEntry,
        progress: Optional[IProgressSink] = None,
    ) -> AsyncContextManager[ResolvedStream]: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class IMediaProcessor(Protocol):
    """🏷️ Тегування/ремукс сирого файлу."""

    async def tag(
        self,
        source: Path,
        out_dir: Path,
        stem: str,
        metadata: TrackMetadata,
        cover: Optional[Path] = None,
    ) -> Path: ...


@runtime_checkable
class IMediaTransport(Protocol):
    """✉️ Месенджер: вивантаження файлів, редагування inline-повідомлень, відповіді на inline-запити."""

    async def upload(
        self,
        path: Path,
        content_type: str,
        *,
        metadata: Optional[TrackMetadata] = None,
        thumbnail: Optional[Path] = None,
    ) -> str: ...

    async def edit_message(self, inline_message_id: str, text: str, *, button: Optional[str] = None) -> bool: ...

    async def deliver_audio(
        self,
        inline_message_id: str,
        entry: TrackEntry,
        track: CachedMediaHandle,
    ) -> bool: ...

    async def answer_inline(self, query_id: str, results: Sequence[object]) -> None: ...


__all__ = [
    "ResolvedStream",
    "IProgressSink",
    "IMediaCache",
    "ISourceProvider",
    "IMediaProcessor",
    "IMediaTransport",
]
