# 🧭 trackbot/errors/reason_mapper.py
"""
🧭 Мапить винятки → `ReasonCode` + контекст для тексту помилки.

🔹 Розрізняє доменні помилки пайплайна і технічні збої httpx/Telegram.
🔹 Повертає словник параметрів (`ctx`), який підставляється в повідомлення.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                           # 🌐 HTTP-клієнт (винятки)
from telegram.error import RetryAfter, TelegramError                   # 🤖 Помилки Telegram

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування процесу мапінгу
from typing import Any, Dict, Optional, Tuple                          # 📐 Типи

# 🧩 Внутрішні модулі проєкту
from .custom_errors import (
    AcquisitionFailed,
    DeliveryRejected,
    ProcessingFailure,
    ProviderUnavailable,
    StaleReference,
    TrackNotFound,
)
from .reason_codes import ReasonCode


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger("trackbot.errors.reason_mapper")


# ================================
# 🧭 ОСНОВНИЙ МАПЕР
# ================================
def map_error_to_reason(exc: Exception) -> Tuple[ReasonCode, Dict[str, Any]]:
    """
    Повертає (reason_code, ctx) — ctx підставляється у текст (наприклад, {status_code}).
    """
    domain = _map_domain_errors(exc)
    if domain:
        return domain

    httpx_result = _map_httpx_errors(exc)
    if httpx_result:
        return httpx_result

    if isinstance(exc, RetryAfter):
        retry_after = exc.retry_after
        seconds = int(retry_after.total_seconds()) if hasattr(retry_after, "total_seconds") else int(retry_after)
        return ReasonCode.TELEGRAM_RETRY_AFTER, {"seconds": seconds}
    if isinstance(exc, TelegramError):
        return ReasonCode.TELEGRAM_GENERAL, {}

    logger.warning("❓ Unknown error mapped to INTERNAL", extra={"exc_type": type(exc).__name__})
    return ReasonCode.INTERNAL, {}


# ================================
# 🧩 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _map_domain_errors(exc: Exception) -> Optional[Tuple[ReasonCode, Dict[str, Any]]]:
    if isinstance(exc, StaleReference):
        return ReasonCode.STALE_SELECTION, {"key": exc.key}
    if isinstance(exc, TrackNotFound):
        return ReasonCode.TRACK_NOT_FOUND, {}
    if isinstance(exc, ProviderUnavailable):
        return ReasonCode.SERVICE_UNAVAILABLE, {"provider": exc.provider}
    if isinstance(exc, (AcquisitionFailed, ProcessingFailure, DeliveryRejected)):
        return ReasonCode.DOWNLOAD_FAILED, {}
    return None


def _map_httpx_errors(exc: Exception) -> Optional[Tuple[ReasonCode, Dict[str, Any]]]:
    """Повертає ReasonCode для httpx-винятків або None."""
    if isinstance(exc, httpx.TimeoutException):
        return ReasonCode.HTTP_TIMEOUT, {}
    if isinstance(exc, httpx.ConnectError):
        return ReasonCode.HTTP_CONNECTION, {}
    if isinstance(exc, httpx.HTTPStatusError):
        return ReasonCode.HTTP_STATUS, {"status_code": exc.response.status_code}
    return None


__all__ = ["map_error_to_reason"]
