# 🤖 trackbot/bot/handlers/__init__.py
"""
🤖 Пакет `handlers` — inline-пошук та доставка вибраного треку.
"""

from .inline_search_handler import InlineSearchHandler
from .inline_send_handler import InlineSendHandler

__all__ = ["InlineSearchHandler", "InlineSendHandler"]
