# 🏛️ trackbot/bot/commands/base.py
"""
🏛️ Контракт фічі бота: кожна фіча сама реєструє свої хендлери.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram.ext import Application                                   # 🤖 PTB Application

# 🔠 Системні імпорти
from typing import Protocol, runtime_checkable                         # 🧰 Протоколи


@runtime_checkable
class BaseFeature(Protocol):
    def register_handlers(self, application: Application) -> None: ...


__all__ = ["BaseFeature"]
