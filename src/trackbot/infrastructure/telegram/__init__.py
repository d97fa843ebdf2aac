# ✉️ trackbot/infrastructure/telegram/__init__.py
"""✉️ Транспорт Telegram: вивантаження у службовий чат і редагування inline-повідомлень."""

from .telegram_transport import PROGRESS_CALLBACK_DATA, TelegramTransport, progress_keyboard

__all__ = ["PROGRESS_CALLBACK_DATA", "TelegramTransport", "progress_keyboard"]
