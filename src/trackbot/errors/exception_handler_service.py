# 🛡️ trackbot/errors/exception_handler_service.py
"""
🛡️ Центральний сервіс обробки помилок для inline-бота.

🔹 Конвертує будь-які винятки в доменні `AppError`, використовуючи передані стратегії.
🔹 Відповідає там, де користувач чекає: inline-запит (стаття), inline-повідомлення (редагування) або чат.
🔹 Логує повний контекст і ніколи не валить хендлер.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import InlineQueryResultArticle, InputTextMessageContent, Update  # 🤖 Telegram DTO

# 🔠 Системні імпорти
import asyncio                                                        # ⏱️ CancelledError
import logging                                                        # 🧾 Логування кроків
from typing import List, Optional                                     # 📐 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.ui import static_messages as msg                    # 💬 Стандартні повідомлення
from trackbot.bot.ui.error_presenter import build_error_message       # 🧱 Формування тексту помилки
from trackbot.shared.utils.logger import LOG_NAME                     # 🏷️ Спільний неймспейс логів
from .custom_errors import AppError, UserVisibleError                 # ⚠️ Доменні винятки
from .reason_mapper import map_error_to_reason                        # 🗺️ Маппер причин
from .strategies import IErrorHandlingStrategy                        # 🧠 Конвертери винятків


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors")


# ================================
# 🧠 СЕРВІС ОБРОБКИ ПОМИЛОК
# ================================
class ExceptionHandlerService:
    """🧠 Глобальний диспетчер помилок для асинхронних Telegram-хендлерів."""

    def __init__(self, strategies: List[IErrorHandlingStrategy]) -> None:
        self._strategies = list(strategies)                           # 📦 Копія списку
        logger.debug("🛡️ ExceptionHandlerService init (strategies=%d)", len(self._strategies))

    # ================================
    # 🔑 ПУБЛІЧНИЙ API
    # ================================
    async def handle(self, error: Exception, update: Optional[Update]) -> None:
        """
        Головна точка входу. Нічого не піднімає, окрім CancelledError.
        """
        if isinstance(error, asyncio.CancelledError):
            raise error

        domain_error = self._convert_error(error)
        user_id = self._extract_user_id(update)

        if isinstance(domain_error, UserVisibleError):                # 👀 Показуємо повідомлення як є
            logger.warning(
                "⚠️ UserVisibleError for user=%s: %s",
                user_id,
                domain_error,
                extra=domain_error.to_log_extra(),
            )
            await self._safe_reply(update, domain_error.message)
            return

        await self._handle_unified(domain_error or error, user_id, update)

    # ================================
    # 🛠️ ДОПОМІЖНІ МЕТОДИ
    # ================================
    def _convert_error(self, error: Exception) -> Optional[AppError]:
        """🔄 Пропускає виняток через стратегії й повертає `AppError`, якщо можливо."""
        if isinstance(error, AppError):
            return error
        for strategy in self._strategies:
            try:
                converted = strategy.handle(error)
            except Exception:                                         # noqa: BLE001
                logger.exception("🔥 Strategy failed: %r", strategy)
                continue
            if converted:
                converted.__cause__ = error
                return converted
        return None

    @staticmethod
    def _extract_user_id(update: Optional[Update]) -> str:
        """🆔 Витягує user_id для логів, навіть якщо update None."""
        user = getattr(update, "effective_user", None) if update else None
        return str(user.id) if user else "N/A"

    async def _handle_unified(self, error: Exception, user_id: str, update: Optional[Update]) -> None:
        """🌐 Єдиний фолбек — мапимо код + будуємо повідомлення."""
        try:
            logger.error("🔥 Unhandled exception for user=%s", user_id, exc_info=error)
            code, ctx = map_error_to_reason(error)
            text = build_error_message(code, ctx=ctx)
            await self._safe_reply(update, text)
        except Exception:                                             # noqa: BLE001
            logger.exception("🔥 Failed to present unified error for user=%s", user_id)
            await self._safe_reply(update, msg.ERROR_CRITICAL)

    async def _safe_reply(self, update: Optional[Update], text: str) -> None:
        """💬 Тихо намагається відповісти користувачу там, де він чекає."""
        if not update:
            return
        try:
            if update.inline_query is not None:                       # 🔎 Inline-запит → одна стаття
                await update.inline_query.answer(
                    [InlineQueryResultArticle(id="error", title=text, input_message_content=InputTextMessageContent(text))],
                    cache_time=0,
                    is_personal=True,
                )
                return
            chosen = update.chosen_inline_result
            if chosen is not None and chosen.inline_message_id:       # ✉️ Inline-повідомлення → редагування
                await update.get_bot().edit_message_caption(inline_message_id=chosen.inline_message_id, caption=text)
                return
            message = update.effective_message
            if message is not None:
                await message.reply_text(text)
        except Exception as send_err:                                 # noqa: BLE001
            logger.warning("⚠️ Failed to send error message: %s", send_err)


__all__ = ["ExceptionHandlerService"]
