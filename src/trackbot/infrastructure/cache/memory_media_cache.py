# 🧊 trackbot/infrastructure/cache/memory_media_cache.py
"""
🧊 MemoryMediaCache — процесний кеш `ключ → CachedMediaHandle`.

🔹 Останній запис перемагає; блокувань між операціями немає.
🔹 Живе до рестарту процесу або `clear()`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування
from typing import Dict, Optional                                      # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import CachedMediaHandle
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.cache")


class MemoryMediaCache:
    """🧊 Словник у памʼяті, що реалізує `IMediaCache`."""

    def __init__(self) -> None:
        self._items: Dict[str, CachedMediaHandle] = {}

    async def get(self, key: str) -> Optional[CachedMediaHandle]:
        return self._items.get(key)

    async def put(self, key: str, handle: CachedMediaHandle) -> CachedMediaHandle:
        self._items[key] = handle
        logger.debug("🧊 memory put %s", key)
        return handle

    async def clear(self) -> None:
        count = len(self._items)
        self._items.clear()
        logger.info("🧹 Memory media cache cleared (%d entries)", count)

    def __len__(self) -> int:
        return len(self._items)


__all__ = ["MemoryMediaCache"]
