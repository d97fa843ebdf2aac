# 🎵 trackbot/domain/music/entities.py
"""
🎵 DTO домену отримання треків.

🔹 `TrackReference` — ідентифікатор треку у провайдері + канонічний URL (ключ кешу).
🔹 `TrackMetadata` / `TrackEntry` — те, що створює пошук і споживає вибір inline-результату.
🔹 `CachedMediaHandle` — незмінний дескриптор уже збереженого ассета (трек у Telegram, обкладинка на диску).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass                                                    # 🧱 Структуруємо DTO
from enum import Enum                                                                # 🏷️ Теги провайдерів
from typing import Optional                                                          # 🧰 Типи

PLACEHOLDER_ARTIST = "Unknown Artist"                                                # 🎭 Виконавець для треків без артистів


# ================================
# 🏷️ ПЕРЕЛІКИ
# ================================
class ProviderTag(str, Enum):
    """🏷️ Бекенд, з якого походить трек."""

    YANDEX = "yandex"
    HIFI = "hifi"
    LUCIDA = "lucida"

    @classmethod
    def parse(cls, raw: str) -> "ProviderTag":
        """Приймає також псевдонім `qobuz` (Hifi-проксі обслуговує обидва каталоги)."""
        value = (raw or "").strip().lower()
        if value == "qobuz":
            return cls.HIFI
        return cls(value)                                                            # ❗ ValueError для невідомих


class AssetKind(str, Enum):
    """📦 Вид ассета, що проходить пайплайн."""

    TRACK = "track"
    COVER = "cover"


# ================================
# 🏛️ DTO
# ================================
@dataclass(frozen=True, slots=True)
class TrackReference:
    """
    🔗 Посилання на один аудіозапис у конкретному провайдері.
    """

    provider_id: str                                                                  # 🆔 Непрозорий id у провайдері
    provider: ProviderTag                                                             # 🏷️ Хто вміє його завантажити
    source_url: str                                                                   # 🌐 Канонічний URL = ключ кешу
    cover_url: Optional[str] = None                                                   # 🖼️ Обкладинка (якщо є)
    catalog: Optional[str] = None                                                     # 🗂️ Каталог агрегатора (tidal, qobuz …)

    def __post_init__(self) -> None:
        if not self.source_url:
            raise ValueError("TrackReference.source_url must not be empty")


@dataclass(frozen=True, slots=True)
class TrackMetadata:
    """
    🎼 Метадані для тегування та підпису аудіо.
    """

    title: str
    artist: str
    duration_ms: int = 0

    def __post_init__(self) -> None:
        if not self.artist.strip():                                                   # 🚫 Порожній виконавець недопустимий
            raise ValueError(f"TrackMetadata.artist must not be empty (title={self.title!r})")
        if self.duration_ms < 0:
            raise ValueError("TrackMetadata.duration_ms must be >= 0")

    @property
    def display_name(self) -> str:
        """«Виконавець - Назва» — імʼя файлу та підпис у логах."""
        return f"{self.artist} - {self.title}"

    @property
    def duration_sec(self) -> int:
        return int(round(self.duration_ms / 1000))


@dataclass(frozen=True, slots=True)
class TrackEntry:
    """
    📦 Результат пошуку: посилання + метадані.
    """

    reference: TrackReference
    metadata: TrackMetadata

    @property
    def source_url(self) -> str:
        return self.reference.source_url


@dataclass(frozen=True, slots=True)
class CachedMediaHandle:
    """
    📎 Дескриптор ассета у сховищі: Telegram `file_id` для треку, шлях в `artwork_dir` для обкладинки.

    Після збереження ніколи не змінюється; живість `file_id` повторно не перевіряється.
    """

    file_id: str                                                                      # 📎 Ідентифікатор у сховищі
    content_type: str                                                                 # 🧾 MIME-тип
    local_path: Optional[str] = None                                                  # 📂 Локальна копія (обкладинки)


__all__ = [
    "PLACEHOLDER_ARTIST",
    "ProviderTag",
    "AssetKind",
    "TrackReference",
    "TrackMetadata",
    "TrackEntry",
    "CachedMediaHandle",
]
