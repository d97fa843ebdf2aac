# 📬 trackbot/bot/commands/__init__.py
"""📬 Командні фічі бота."""
