# 🧱 trackbot/config/setup/__init__.py
"""🧱 DI-контейнер, реєстрація хендлерів і константи."""
