# 📬 trackbot/bot/handlers/inline_send_handler.py
"""
📬 InlineSendHandler — подія вибору inline-результату → доставка треку в надіслане повідомлення.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import logging

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.services.custom_context import CustomContext
from trackbot.infrastructure.music.selection_service import SelectionService
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.handlers.inline_send")


class InlineSendHandler:
    def __init__(self, selection_service: SelectionService) -> None:
        self._selection = selection_service

    async def handle(self, update: Update, context: CustomContext) -> None:
        chosen = update.chosen_inline_result
        if chosen is None:
            return
        user_id = getattr(chosen.from_user, "id", "unknown")
        logger.info("🎯 Chosen result %s by user=%s", chosen.result_id, user_id)
        await self._selection.handle(chosen.result_id, chosen.inline_message_id)


__all__ = ["InlineSendHandler"]
