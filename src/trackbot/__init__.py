# 🎧 trackbot/__init__.py
"""
🎧 trackbot — inline Telegram-бот, що шукає треки у музичних сервісах і доставляє тегований аудіофайл.
"""

__version__ = "0.1.0"
