# 🔎 trackbot/bot/handlers/inline_search_handler.py
"""
🔎 InlineSearchHandler — відповідь на inline-запит списком треків.

🔹 Уся логіка пошуку живе в `SearchService`; тут лише UI: аудіо-результати або стаття з підказкою.
🔹 Очікувані збої (`UserVisibleError`) показуються однією статтею, решта йде в глобальний обробник.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import logging
from typing import List

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.services.custom_context import CustomContext
from trackbot.bot.ui.inline_results import build_audio_result, text_results
from trackbot.domain.music.interfaces import IMediaTransport
from trackbot.errors.custom_errors import UserVisibleError
from trackbot.infrastructure.music.search_service import SearchService
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.handlers.inline_search")


class InlineSearchHandler:
    def __init__(self, search_service: SearchService, transport: IMediaTransport, *, placeholder_audio_url: str) -> None:
        self._search = search_service
        self._transport = transport
        self._placeholder = placeholder_audio_url

    async def handle(self, update: Update, context: CustomContext) -> None:
        query = update.inline_query
        if query is None:
            return
        try:
            found = await self._search.search(query.query)
        except UserVisibleError as exc:
            logger.info("🔎 Inline query %r rejected: %s", query.query, exc.details or exc.message)
            await self._transport.answer_inline(query.id, text_results(exc.message))
            return

        results: List[object] = [build_audio_result(key, entry, self._placeholder) for key, entry in found]
        await self._transport.answer_inline(query.id, results)


__all__ = ["InlineSearchHandler"]
