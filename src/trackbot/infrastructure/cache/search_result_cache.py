# 🗂️ trackbot/infrastructure/cache/search_result_cache.py
"""
🗂️ SearchResultCache — короткоживуча мапа `компактний id → TrackEntry`.

🔹 Заповнюється під час inline-пошуку: дублікати за ключем відкидаються (перший виграє).
🔹 Читається під час вибору результату без видалення; відсутній ключ → `StaleReference`.
🔹 Вичищається цілком фоновою задачею раз на `sweep_interval` секунд.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                         # ⏱️ Фонова задача очищення
import contextlib                                                      # 🧹 suppress для скасування
import logging                                                         # 🧾 Логування
from typing import Dict, Iterable, List, Optional, Tuple               # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import TrackEntry
from trackbot.domain.music.keys import search_cache_key
from trackbot.errors.custom_errors import StaleReference
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.search_cache")


class SearchResultCache:
    """🗂️ Міст між результатами inline-пошуку та подією вибору."""

    def __init__(self, sweep_interval: float = 300.0) -> None:
        self._items: Dict[str, TrackEntry] = {}
        self._sweep_interval = float(sweep_interval)
        self._sweeper: Optional[asyncio.Task] = None

    # ================================
    # 🔑 ПУБЛІЧНИЙ API
    # ================================
    def put_results(self, entries: Iterable[TrackEntry]) -> List[Tuple[str, TrackEntry]]:
        """
        Вставляє результати пошуку і повертає саме той дедуплікований список,
        що піде в Telegram: `[(key, entry), ...]` у вихідному порядку.
        """
        survivors: List[Tuple[str, TrackEntry]] = []
        seen: set[str] = set()
        for entry in entries:
            key = search_cache_key(entry.source_url)
            if key in seen:                                            # 🔁 Колізія префікса: перший виграє
                logger.debug("🔁 Duplicate search key %s dropped (%s)", key, entry.source_url)
                continue
            seen.add(key)
            survivors.append((key, entry))
        for key, entry in survivors:
            self._items[key] = entry
        return survivors

    def get(self, key: str) -> TrackEntry:
        """Повертає запис без видалення; відсутній ключ → `StaleReference`."""
        entry = self._items.get(key)
        if entry is None:
            raise StaleReference(key)
        return entry

    def clear(self) -> int:
        count = len(self._items)
        self._items.clear()
        return count

    def __len__(self) -> int:
        return len(self._items)

    # ================================
    # 🧹 ФОНОВЕ ОЧИЩЕННЯ
    # ================================
    def start_sweeper(self) -> asyncio.Task:
        """Запускає періодичне очищення у поточному event loop (ідемпотентно)."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_loop(), name="search-cache-sweeper")
            logger.info("🧹 Search cache sweeper started (every %.0fs)", self._sweep_interval)
        return self._sweeper

    async def stop_sweeper(self) -> None:
        task, self._sweeper = self._sweeper, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            removed = self.clear()
            logger.debug("🧹 Search cache swept (%d entries)", removed)


__all__ = ["SearchResultCache"]
