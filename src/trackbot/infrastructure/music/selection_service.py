# 🎯 trackbot/infrastructure/music/selection_service.py
"""
🎯 SelectionService — обробка вибору inline-результату.

🔹 Відновлює `TrackEntry` за id результату з SearchResultCache (без видалення).
🔹 Відсутній запис → статус «Застаріле повідомлення» без жодного звернення до провайдера.
🔹 Інакше запускає DeliveryRetrier і повертає його фінальний стан.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування
from typing import Optional                                            # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import TrackEntry
from trackbot.domain.music.interfaces import IMediaTransport
from trackbot.domain.music.keys import parse_result_id
from trackbot.errors.custom_errors import StaleReference
from trackbot.infrastructure.cache.search_result_cache import SearchResultCache
from trackbot.shared.metrics import STALE_SELECTIONS
from trackbot.shared.utils.logger import LOG_NAME
from .delivery_retrier import DeliveryRetrier, DeliveryState

logger = logging.getLogger(f"{LOG_NAME}.selection")


class SelectionService:
    def __init__(self, search_cache: SearchResultCache, retrier: DeliveryRetrier, transport: IMediaTransport) -> None:
        self._search_cache = search_cache
        self._retrier = retrier
        self._transport = transport

    def lookup(self, result_id: str) -> TrackEntry:
        """
        Raises:
            StaleReference: id пошкоджений, запис вичищено або він належить іншому провайдеру.
        """
        try:
            provider, key = parse_result_id(result_id)
        except ValueError as exc:
            raise StaleReference(result_id, details=str(exc)) from exc
        entry = self._search_cache.get(key)
        if entry.reference.provider is not provider:
            raise StaleReference(key, details=f"provider mismatch: {provider.value} != {entry.reference.provider.value}")
        return entry

    async def handle(self, result_id: str, inline_message_id: Optional[str]) -> Optional[DeliveryState]:
        """
        Returns:
            Фінальний стан доставки або `None` для застарілого вибору.
        """
        if not inline_message_id:
            logger.warning("⚠️ Chosen result %s has no inline_message_id", result_id)
            return None
        try:
            entry = self.lookup(result_id)
        except StaleReference as exc:
            STALE_SELECTIONS.inc()
            logger.info("⌛ Stale selection %s (%s)", result_id, exc.details or exc.key)
            await self._transport.edit_message(inline_message_id, exc.message)
            return None
        logger.info("🎯 Selected %s → %s", result_id, entry.metadata.display_name)
        return await self._retrier.deliver(entry, inline_message_id)


__all__ = ["SelectionService"]
