# 📬 trackbot/bot/commands/core_commands_feature.py
"""
📬 Реалізація базових команд `/start` та `/help`.

🔹 Бот працює в inline-режимі, тож команди лише пояснюють синтаксис запиту.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update                                              # 📡 Об'єкт вхідного апдейту
from telegram.ext import Application, CommandHandler                     # 🧰 Реєстрація команд у застосунку

# 🔠 Системні імпорти
import logging                                                           # 🧾 Логування подій
from typing import Any, Callable                                         # 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.services.custom_context import CustomContext           # 🧠 Розширений контекст
from trackbot.bot.ui import static_messages as msg                       # 📝 Статичні тексти інтерфейсу
from trackbot.config.setup.constants import AppConstants                 # ⚙️ Константи застосунку
from trackbot.shared.utils.logger import LOG_NAME                        # 🏷️ Ім'я кореневого логера

# ================================
# 🧾 ЛОГЕР МОДУЛЯ
# ================================
logger = logging.getLogger(f"{LOG_NAME}.commands")


# ================================
# 🏛️ ФІЧА БАЗОВИХ КОМАНД
# ================================
class CoreCommandsFeature:
    """
    ✨ Інкапсулює `/start` і `/help`.
    """

    def __init__(self, constants: AppConstants, error_handler: Callable[[Any], Any]) -> None:
        self.const = constants                                            # ⚙️ Константи інтерфейсу
        self._wrap = error_handler                                        # 🛡️ Обгортка для винятків

    def register_handlers(self, application: Application) -> None:
        commands = self.const.COMMANDS                                    # 🧭 Простір імен команд
        application.add_handler(CommandHandler(commands.START, self._wrap(self.start_command)))  # ➕ /start
        application.add_handler(CommandHandler(commands.HELP, self._wrap(self.start_command)))   # ➕ /help
        logger.info("🧾 Core commands registered (start/help)")

    async def start_command(self, update: Update, context: CustomContext) -> None:
        """
        Надсилає коротку інструкцію з синтаксисом inline-запиту.
        """
        user_id = getattr(update.effective_user, "id", "unknown")         # 🆔 ID користувача для логів
        logger.info("➡️ /start by user=%s", user_id)

        if update.message is None:                                        # 🚫 Немає повідомлення → відповідати нікуди
            return

        await update.message.reply_text(
            msg.START_GREETING.format(bot=context.bot.username or "bot"),
            parse_mode=self.const.PARSE_MODE,
        )


__all__ = ["CoreCommandsFeature"]
