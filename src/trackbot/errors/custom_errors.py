# 🚨 trackbot/errors/custom_errors.py
"""
🚨 Ієрархія доменних винятків бота.

🔹 `AppError` / `UserVisibleError` — база для всього, що показуємо користувачу коротким текстом.
🔹 Збої джерела (`ProviderUnavailable` і нащадки), застарілий вибір (`StaleReference`), тегування,
   відхилена доставка та агрегований `AcquisitionFailed` для одного ассета.
🔹 Усі винятки мають `to_log_extra()` для структурованих логів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Dict, Optional                                   # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.ui import static_messages as msg                  # 💬 Тексти за замовчуванням


# ================================
# 🧠 БАЗА
# ================================
class AppError(Exception):
    """🧠 Базовий виняток застосунку."""

    default_message: str = msg.ERROR_CRITICAL

    def __init__(self, message: Optional[str] = None, *, details: Optional[str] = None) -> None:
        self.message = message or self.default_message              # 💬 Текст для користувача
        self.details = details                                      # 🔍 Технічні деталі лише для логів
        super().__init__(self.message)

    def to_log_extra(self) -> Dict[str, object]:
        extra: Dict[str, object] = {"error_type": type(self).__name__}
        if self.details:
            extra["details"] = self.details
        return extra


class UserVisibleError(AppError):
    """👀 Помилка, текст якої безпечно показати користувачу як є."""


# ================================
# 🎧 ДЖЕРЕЛА
# ================================
class ProviderUnavailable(UserVisibleError):
    """🌐 Мережевий збій, неактивний модуль або відмова джерела."""

    default_message = msg.SERVICE_UNAVAILABLE

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        provider: Optional[str] = None,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.provider = provider
        self.status_code = status_code

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.provider:
            extra["provider"] = self.provider
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


class ProviderUnauthenticated(ProviderUnavailable):
    """🔐 Токен відсутній або відхилений."""


class TrackNotFound(ProviderUnavailable):
    """🔎 Провайдер не має такого треку (або посилання на стрім)."""

    default_message = msg.SEARCH_NO_RESULTS


# ================================
# 🧭 ВИБІР / ОБРОБКА / ДОСТАВКА
# ================================
class StaleReference(UserVisibleError):
    """⌛ Id inline-результату вже вичищено з SearchResultCache."""

    default_message = msg.STALE_SELECTION

    def __init__(self, key: str, *, details: Optional[str] = None) -> None:
        super().__init__(None, details=details)
        self.key = key

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["key"] = self.key
        return extra


class InvalidInlineQuery(UserVisibleError):
    """⌨️ Inline-запит не відповідає граматиці `music|lucida [сервіс] запит`."""

    default_message = msg.ENTER_COMMAND


class ProcessingFailure(AppError):
    """🏷️ ffmpeg не зміг тегувати/ремуксувати файл."""

    default_message = msg.DOWNLOAD_FAILED


class DeliveryRejected(AppError):
    """📭 Транспорт повідомив, що редагування не застосовано."""

    default_message = msg.DOWNLOAD_FAILED


class AcquisitionFailed(AppError):
    """⬇️ Один ассет (трек або обкладинка) не вдалося отримати; причина — у `__cause__`."""

    default_message = msg.DOWNLOAD_FAILED

    def __init__(self, asset: str, url: str, *, details: Optional[str] = None) -> None:
        super().__init__(None, details=details)
        self.asset = asset
        self.url = url

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra.update({"asset": self.asset, "url": self.url})
        return extra


# ================================
# 📤 ПУБЛІЧНИЙ API
# ================================
__all__ = [
    "AppError",
    "UserVisibleError",
    "ProviderUnavailable",
    "ProviderUnauthenticated",
    "TrackNotFound",
    "StaleReference",
    "InvalidInlineQuery",
    "ProcessingFailure",
    "DeliveryRejected",
    "AcquisitionFailed",
]
