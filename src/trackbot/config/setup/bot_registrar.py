# 🧾 trackbot/config/setup/bot_registrar.py
"""
🧾 bot_registrar.py — реєстрація всіх обробників у застосунку.

🔹 Клас `BotRegistrar`:
- Ініціалізується додатком (Application) та контейнером залежностей (Container).
- Реєструє командні фічі.
- Реєструє inline-обробники: пошук та вибір результату.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram.ext import Application, ChosenInlineResultHandler, InlineQueryHandler

# 🔠 Системні імпорти
import logging

# 🧩 Внутрішні модулі проєкту
from trackbot.config.setup.container import Container                  # 📦 DI-контейнер усіх залежностей
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)


# ================================
# 🏛️ КЛАС РЕЄСТРАТОРА
# ================================
class BotRegistrar:
    """
    🔌 Реєструє всі обробники (хендлери) в Telegram Application.
    """

    def __init__(self, application: Application, container: Container):
        self.app = application
        self.container = container

    def register_handlers(self) -> None:
        """
        🔗 Реєструє обробники: спочатку фічі, потім inline-маршрути.
        """
        logger.info("--- Починаю реєстрацію фіч ---")
        for feature in self.container.features:
            feature.register_handlers(self.app)
            logger.info("✅ Фіча '%s' зареєстрована.", feature.__class__.__name__)

        wrap = self.container.error_handler
        self.app.add_handler(InlineQueryHandler(wrap(self.container.inline_search_handler.handle)))
        self.app.add_handler(ChosenInlineResultHandler(wrap(self.container.inline_send_handler.handle)))
        logger.info("--- Inline-обробники зареєстровано ---")


__all__ = ["BotRegistrar"]
