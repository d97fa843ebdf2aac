# 🧠 trackbot/bot/services/__init__.py
"""🧠 Допоміжні сервіси шару бота."""

from .custom_context import CustomContext

__all__ = ["CustomContext"]
