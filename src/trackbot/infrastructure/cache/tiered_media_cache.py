# 🧱 trackbot/infrastructure/cache/tiered_media_cache.py
"""
🧱 TieredMediaCache — памʼять перед довговічним шаром.

🔹 Читання: памʼять → диск (влучання з диска піднімається в памʼять).
🔹 Запис і очищення виконуються на обох ярусах.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Optional                                            # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import CachedMediaHandle
from trackbot.domain.music.interfaces import IMediaCache


class TieredMediaCache:
    def __init__(self, front: IMediaCache, back: IMediaCache) -> None:
        self._front = front
        self._back = back

    async def get(self, key: str) -> Optional[CachedMediaHandle]:
        handle = await self._front.get(key)
        if handle is not None:
            return handle
        handle = await self._back.get(key)
        if handle is not None:
            await self._front.put(key, handle)                         # ⬆️ Промоція в памʼять
        return handle

    async def put(self, key: str, handle: CachedMediaHandle) -> CachedMediaHandle:
        await self._back.put(key, handle)
        return await self._front.put(key, handle)

    async def clear(self) -> None:
        await self._front.clear()
        await self._back.clear()


__all__ = ["TieredMediaCache"]
