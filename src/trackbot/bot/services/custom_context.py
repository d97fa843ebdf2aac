# 🧠 trackbot/bot/services/custom_context.py
"""
🧠 Розширений контекст PTB із доступом до DI-контейнера.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram.ext import CallbackContext, ExtBot                       # 🤖 Базовий контекст PTB

# 🔠 Системні імпорти
from typing import TYPE_CHECKING, Any, Dict                            # 🧰 Типи

if TYPE_CHECKING:
    from trackbot.config.setup.container import Container


class CustomContext(CallbackContext[ExtBot, Dict[Any, Any], Dict[Any, Any], Dict[Any, Any]]):
    """🧠 Контекст, що знає про контейнер застосунку."""

    @property
    def container(self) -> "Container":
        return self.application.bot_data["container"]


__all__ = ["CustomContext"]
