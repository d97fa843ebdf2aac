# 🎨 trackbot/bot/ui/__init__.py
"""🎨 UI-шар: статичні тексти, inline-результати та презентер помилок."""
