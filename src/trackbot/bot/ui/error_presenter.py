# 🚨 trackbot/bot/ui/error_presenter.py
"""
🚨 Формує користувацькі повідомлення про помилки.

🔹 Підбирає тексти з `static_messages` за `ReasonCode`.
🔹 Підставляє контекст (HTTP-статус, retry-after).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Any, Dict, Optional                                 # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.ui import static_messages as msg                     # 📝 Локалізовані повідомлення
from trackbot.errors.reason_codes import ReasonCode                    # 🧾 Коди помилок


def build_error_message(code: ReasonCode, *, ctx: Optional[Dict[str, Any]] = None) -> str:
    """
    Повертає коротке локалізоване повідомлення; деталі лишаються в логах.
    """
    context = ctx or {}
    mapping: Dict[ReasonCode, str] = {
        ReasonCode.SERVICE_UNAVAILABLE: msg.SERVICE_UNAVAILABLE,
        ReasonCode.TRACK_NOT_FOUND: msg.SEARCH_NO_RESULTS,
        ReasonCode.STALE_SELECTION: msg.STALE_SELECTION,
        ReasonCode.DOWNLOAD_FAILED: msg.DOWNLOAD_FAILED,
        ReasonCode.HTTP_TIMEOUT: msg.ERROR_HTTP_TIMEOUT,
        ReasonCode.HTTP_CONNECTION: msg.ERROR_HTTP_CONNECTION,
        ReasonCode.HTTP_STATUS: msg.ERROR_HTTP_STATUS.format(status_code=context.get("status_code", "N/A")),
        ReasonCode.TELEGRAM_RETRY_AFTER: msg.ERROR_TELEGRAM_RETRY_AFTER.format(seconds=context.get("seconds", 1)),
        ReasonCode.TELEGRAM_GENERAL: msg.ERROR_TELEGRAM_GENERAL,
        ReasonCode.INTERNAL: msg.ERROR_CRITICAL,
    }
    return mapping.get(code, msg.ERROR_UNKNOWN)


__all__ = ["build_error_message"]
