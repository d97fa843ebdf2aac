# 🏗️ trackbot/infrastructure/__init__.py
"""🏗️ Інфраструктура: кеші, провайдери, ffmpeg, Telegram-транспорт та оркестрація треків."""
