# 📣 trackbot/infrastructure/music/progress_reporter.py
"""
📣 ProgressReporter — впорядкований обмежений канал статусів для одного inline-повідомлення.

🔹 Продюсери (`open_producer()`) пишуть рядки в `asyncio.Queue(maxsize)`; повна черга пригальмовує продюсера.
🔹 Єдиний споживач викликає редактор для кожного рядка; збої редактора лише логуються.
🔹 Коли закривається останній продюсер, у чергу йде сентинел і споживач завершується.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                         # 📬 Черга і задача-споживач
import logging                                                         # 🧾 Логування
from typing import Awaitable, Callable, Optional                       # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.progress")

DEFAULT_BUFFER_SIZE = 16
_SENTINEL = object()

ProgressEditor = Callable[[str], Awaitable[object]]


class ProgressProducer:
    """✍️ Дескриптор продюсера; реалізує `IProgressSink`."""

    def __init__(self, reporter: "ProgressReporter") -> None:
        self._reporter = reporter
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, text: str) -> None:
        if self._closed:
            raise RuntimeError("progress producer is closed")
        await self._reporter._queue.put(text)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._reporter._release()

    async def __aenter__(self) -> "ProgressProducer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class ProgressReporter:
    """📣 Канал прогресу з одним споживачем на групу доставки."""

    def __init__(self, editor: ProgressEditor, *, maxsize: int = DEFAULT_BUFFER_SIZE, name: str = "progress") -> None:
        self._editor = editor
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max(1, int(maxsize)))
        self._name = name
        self._producers = 0
        self._closed = False
        self._consumer: Optional[asyncio.Task] = None

    # ================================
    # ✍️ ПРОДЮСЕРИ
    # ================================
    def open_producer(self) -> ProgressProducer:
        if self._closed:
            raise RuntimeError("progress channel is closed")
        if self._consumer is None:
            self._consumer = asyncio.create_task(self._consume(), name=f"{self._name}-consumer")
        self._producers += 1
        return ProgressProducer(self)

    async def _release(self) -> None:
        self._producers -= 1
        if self._producers <= 0:
            await self._close_channel()

    async def _close_channel(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_SENTINEL)

    # ================================
    # ⏳ СИНХРОНІЗАЦІЯ
    # ================================
    async def flush(self) -> None:
        """Чекає, доки кожне вже надіслане повідомлення буде оброблене споживачем."""
        if self._consumer is None or self._consumer.done():
            return
        await self._queue.join()

    async def drain(self) -> None:
        """Чекає завершення споживача (після закриття всіх продюсерів)."""
        if self._consumer is not None:
            await self._consumer

    async def aclose(self) -> None:
        """Примусово закриває канал і чекає, поки споживач розбере залишок черги."""
        await self._close_channel()
        await self.drain()

    # ================================
    # 📬 СПОЖИВАЧ
    # ================================
    async def _consume(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if item is _SENTINEL:
                    return
                try:
                    await self._editor(item)
                except Exception as exc:  # noqa: BLE001
                    logger.warning("⚠️ Progress edit failed (%s): %s", self._name, exc)
            finally:
                self._queue.task_done()


__all__ = ["ProgressReporter", "ProgressProducer", "ProgressEditor", "DEFAULT_BUFFER_SIZE"]
