# 🧮 trackbot/errors/reason_codes.py
"""
🧮 Перелік причин збоїв, які бачить користувач.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from enum import Enum                                                  # 🏷️ Перелік


class ReasonCode(str, Enum):
    """🧮 Узагальнена причина помилки для презентера."""

    SERVICE_UNAVAILABLE = "service_unavailable"                        # 🎧 Провайдер недоступний
    TRACK_NOT_FOUND = "track_not_found"                                # 🔎 Немає треку
    STALE_SELECTION = "stale_selection"                                # ⌛ Застарілий inline-результат
    DOWNLOAD_FAILED = "download_failed"                                # ⬇️ Пайплайн не впорався
    HTTP_TIMEOUT = "http_timeout"
    HTTP_CONNECTION = "http_connection"
    HTTP_STATUS = "http_status"
    TELEGRAM_RETRY_AFTER = "telegram_retry_after"
    TELEGRAM_GENERAL = "telegram_general"
    INTERNAL = "internal"                                              # ❓ Резервний код


__all__ = ["ReasonCode"]
