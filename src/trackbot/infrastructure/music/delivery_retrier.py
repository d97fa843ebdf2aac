# 🔁 trackbot/infrastructure/music/delivery_retrier.py
"""
🔁 DeliveryRetrier — скінченний автомат доставки треку в inline-повідомлення.

    IDLE → ATTEMPT_0 → (успіх) DELIVERED
                     → (збій)  ATTEMPT_1 [refresh=True] → DELIVERED | FAILED

🔹 На кожній спробі спершу обкладинка, потім трек із нею в тегах; збій обкладинки означає трек без неї.
🔹 Друга спроба завжди ігнорує кеш.
🔹 У стані FAILED статус замінюється фіксованим текстом; назовні не виходить жодна помилка, крім скасування.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування
from enum import Enum                                                  # 🏷️ Стани автомата
from typing import Optional                                            # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.ui import static_messages as msg
from trackbot.domain.music.entities import CachedMediaHandle, TrackEntry
from trackbot.domain.music.interfaces import IMediaTransport
from trackbot.errors.custom_errors import AcquisitionFailed, DeliveryRejected
from trackbot.shared.metrics import DELIVERY_OUTCOMES
from trackbot.shared.utils.logger import LOG_NAME
from .acquisition_pipeline import AcquisitionPipeline
from .progress_reporter import DEFAULT_BUFFER_SIZE, ProgressProducer, ProgressReporter

logger = logging.getLogger(f"{LOG_NAME}.delivery")

MAX_ATTEMPTS = 2


class DeliveryState(str, Enum):
    IDLE = "idle"
    ATTEMPT_0 = "attempt_0"
    ATTEMPT_1 = "attempt_1"
    DELIVERED = "delivered"
    FAILED = "failed"

    @classmethod
    def attempt(cls, index: int) -> "DeliveryState":
        return cls.ATTEMPT_0 if index == 0 else cls.ATTEMPT_1


class DeliveryRetrier:
    """🔁 Не більше двох спроб на одну доставку; друга — з обходом кешу."""

    def __init__(
        self,
        pipeline: AcquisitionPipeline,
        transport: IMediaTransport,
        *,
        max_attempts: int = MAX_ATTEMPTS,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._pipeline = pipeline
        self._transport = transport
        self._max_attempts = max(1, min(int(max_attempts), MAX_ATTEMPTS))
        self._buffer_size = buffer_size

    async def deliver(self, entry: TrackEntry, inline_message_id: str) -> DeliveryState:
        async def _edit_status(text: str) -> bool:
            return await self._transport.edit_message(inline_message_id, text, button=msg.DOWNLOADING_BUTTON)

        reporter = ProgressReporter(_edit_status, maxsize=self._buffer_size, name=f"progress:{inline_message_id}")
        producer = reporter.open_producer()
        state = DeliveryState.IDLE
        try:
            for index in range(self._max_attempts):
                state = DeliveryState.attempt(index)
                try:
                    await self._attempt(entry, inline_message_id, reporter, producer, refresh=index > 0)
                except (AcquisitionFailed, DeliveryRejected) as exc:
                    logger.warning("🔁 %s failed for %s: %s", state.value, entry.source_url, exc.details or exc)
                    continue
                except Exception:  # noqa: BLE001
                    logger.exception("💥 Unexpected error in %s for %s", state.value, entry.source_url)
                    continue
                state = DeliveryState.DELIVERED
                break
            else:
                state = DeliveryState.FAILED
        finally:
            await producer.close()
            await reporter.drain()

        if state is DeliveryState.FAILED:
            await self._transport.edit_message(inline_message_id, msg.DOWNLOAD_FAILED)
        DELIVERY_OUTCOMES.labels(state=state.value).inc()
        logger.info("📬 Delivery of %s finished: %s", entry.metadata.display_name, state.value)
        return state

    async def _attempt(
        self,
        entry: TrackEntry,
        inline_message_id: str,
        reporter: ProgressReporter,
        producer: ProgressProducer,
        *,
        refresh: bool,
    ) -> None:
        cover = await self._acquire_cover(entry, refresh=refresh)
        track = await self._pipeline.acquire_track(
            entry,
            refresh=refresh,
            progress=producer,
            cover=cover,
            fetch_cover=False,
        )
        await reporter.flush()                                         # 📣 Статуси не перезапишуть аудіо
        applied = await self._transport.deliver_audio(inline_message_id, entry, track)
        if not applied:
            raise DeliveryRejected(details=f"edit not applied for {inline_message_id}")

    async def _acquire_cover(self, entry: TrackEntry, *, refresh: bool) -> Optional[CachedMediaHandle]:
        try:
            return await self._pipeline.acquire_cover(entry, refresh=refresh)
        except Exception as exc:  # noqa: BLE001
            logger.info("🖼️ Delivering %s without cover: %s", entry.source_url, exc)
            return None


__all__ = ["DeliveryRetrier", "DeliveryState", "MAX_ATTEMPTS"]
