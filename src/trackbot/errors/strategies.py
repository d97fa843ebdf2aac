# 📜 trackbot/errors/strategies.py
"""
📜 Стратегії конвертації сторонніх винятків у доменні `AppError`.

🔹 Виносять логіку із `ExceptionHandlerService`, щоб сервіс залишався простим DI-клієнтом.
🔹 Збої httpx стають «сервіс недоступний», збої Telegram — загальною помилкою Telegram.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                           # 🌐 HTTP-клієнт (винятки)
from telegram.error import RetryAfter, TelegramError                   # 🤖 Telegram винятки

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування стратегій
from typing import Optional, Protocol, runtime_checkable               # 📐 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.ui import static_messages as msg                     # 💬 Повідомлення
from .custom_errors import AppError, ProviderUnavailable, UserVisibleError


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger("trackbot.errors.strategies")


# ================================
# 🧠 КОНТРАКТ СТРАТЕГІЙ
# ================================
@runtime_checkable
class IErrorHandlingStrategy(Protocol):
    """🧠 Контракт, що визначає єдиний метод `handle`."""

    def handle(self, error: Exception) -> Optional[AppError]:
        """Вертає `AppError`, якщо виняток розпізнано, або None."""


# ================================
# 🌐 HTTPX-СТРАТЕГІЯ
# ================================
class HttpxErrorStrategy:
    """🌐 Перетворює httpx-помилки на `ProviderUnavailable`."""

    def handle(self, error: Exception) -> Optional[AppError]:
        if not isinstance(error, httpx.HTTPError):
            return None
        url = "N/A"
        try:
            url = str(error.request.url)
        except RuntimeError:                                           # 🚫 request не привʼязано
            pass
        status = error.response.status_code if isinstance(error, httpx.HTTPStatusError) else None
        logger.debug("🌐 httpx error converted", extra={"url": url, "status": status})
        return ProviderUnavailable(details=f"{type(error).__name__}: {url}", status_code=status)


# ================================
# 🤖 TELEGRAM-СТРАТЕГІЯ
# ================================
class TelegramErrorStrategy:
    """🤖 Конвертує Telegram-помилки у видимі користувачу повідомлення."""

    def handle(self, error: Exception) -> Optional[AppError]:
        if isinstance(error, RetryAfter):
            retry_after = error.retry_after
            secs = int(retry_after.total_seconds()) if hasattr(retry_after, "total_seconds") else int(retry_after)
            logger.debug("⏳ Telegram retry_after", extra={"seconds": secs})
            return UserVisibleError(msg.ERROR_TELEGRAM_RETRY_AFTER.format(seconds=secs), details=str(error))
        if isinstance(error, TelegramError):
            return UserVisibleError(msg.ERROR_TELEGRAM_GENERAL, details=str(error))
        return None


__all__ = [
    "IErrorHandlingStrategy",
    "HttpxErrorStrategy",
    "TelegramErrorStrategy",
]
