# 🤖 trackbot/bot/__init__.py
"""🤖 Telegram-шар: хендлери, UI-тексти та entry-point."""
