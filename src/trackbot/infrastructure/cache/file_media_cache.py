# 💾 trackbot/infrastructure/cache/file_media_cache.py
"""
💾 FileMediaCache — довговічний кеш завантажених файлів.

🔹 Кожен запис — два сусідні файли: `++media+{url}+payload` (file_id) та `++media+{url}+content_type`.
🔹 `/` та `:` в URL замінюються на `+`, тож імена безпечні для файлової системи.
🔹 Будь-який збій I/O логується і трактується як промах — виняток назовні не виходить.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles                                                        # 📂 Асинхронний файловий I/O

# 🔠 Системні імпорти
import asyncio                                                         # 🧵 to_thread для службових операцій
import logging                                                         # 🧾 Логування
from pathlib import Path                                               # 📂 Шляхи
from typing import Optional, Union                                     # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import CachedMediaHandle
from trackbot.domain.music.keys import CACHE_KEY_PREFIX, CONTENT_TYPE, PAYLOAD, cache_key
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.cache")


class FileMediaCache:
    """💾 `IMediaCache` поверх каталогу на диску. Ключ — канонічний URL ассета."""

    def __init__(self, root: Union[str, Path]) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, url: str, discriminator: str) -> Path:
        return self._root / cache_key(url, discriminator)

    async def get(self, key: str) -> Optional[CachedMediaHandle]:
        try:
            async with aiofiles.open(self._path(key, PAYLOAD), "r", encoding="utf-8") as f:
                file_id = (await f.read()).strip()
            async with aiofiles.open(self._path(key, CONTENT_TYPE), "r", encoding="utf-8") as f:
                content_type = (await f.read()).strip()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("⚠️ File cache read failed for %s: %s", key, exc)
            return None
        if not file_id or not content_type:                            # 🧩 Обрізаний запис = промах
            logger.warning("⚠️ File cache entry incomplete for %s", key)
            return None
        return CachedMediaHandle(file_id=file_id, content_type=content_type)

    async def put(self, key: str, handle: CachedMediaHandle) -> CachedMediaHandle:
        try:
            await asyncio.to_thread(self._root.mkdir, parents=True, exist_ok=True)
            async with aiofiles.open(self._path(key, CONTENT_TYPE), "w", encoding="utf-8") as f:
                await f.write(handle.content_type)
            async with aiofiles.open(self._path(key, PAYLOAD), "w", encoding="utf-8") as f:
                await f.write(handle.file_id)
            logger.debug("💾 file put %s", key)
        except OSError as exc:
            logger.warning("⚠️ File cache write failed for %s: %s", key, exc)
        return handle

    async def clear(self) -> None:
        removed = await asyncio.to_thread(self._clear_sync)
        logger.info("🧹 File media cache cleared (%d files)", removed)

    def _clear_sync(self) -> int:
        removed = 0
        if not self._root.is_dir():
            return removed
        for path in self._root.glob(f"{CACHE_KEY_PREFIX}*"):
            try:
                path.unlink()
                removed += 1
            except OSError as exc:
                logger.warning("⚠️ Не вдалося видалити %s: %s", path, exc)
        return removed


__all__ = ["FileMediaCache"]
