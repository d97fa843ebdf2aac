# 🤖 trackbot/bot/main.py
"""
🤖 Entry-point inline-бота trackbot.

🔹 Готує середовище (CLI-флаги → ENV), конфіг і логування.
🔹 Будує Application PTB, DI-контейнер, реєструє обробники й глобальний error-handler.
🔹 `post_init` запускає фонові задачі, `post_shutdown` їх зупиняє; далі `run_polling`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from dotenv import load_dotenv                                         # 🌱 Завантаження змінних оточення з .env
from telegram import Update                                            # 📡 Типи апдейтів
from telegram.ext import Application, ApplicationBuilder, ContextTypes # 🤖 PTB v21 Application API

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування подій запуску
import os                                                              # 🌍 Робота з оточенням/ENV
import sys                                                             # 🧵 CLI-аргументи
from typing import List, Optional                                      # 🧮 Анотації

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.services import CustomContext                        # 🧠 Кастомний PTB-контекст
from trackbot.config.config_service import ConfigService               # ⚙️ Завантаження конфігів
from trackbot.config.setup.bot_registrar import BotRegistrar           # 📋 Реєстрація хендлерів
from trackbot.config.setup.container import Container, bootstrap_logging  # 🚀 Логування + DI-контейнер
from trackbot.shared.utils.logger import LOG_NAME                      # 🏷️ Ім'я кореневого логера

# ================================
# 🪵 ГЛОБАЛЬНИЙ ЛОГЕР
# ================================
logger = logging.getLogger(LOG_NAME)

CONTAINER_KEY = "container"


# ================================
# 🧩 DI / APPLICATION BUILDER
# ================================
def build_application(token: str, config: Optional[ConfigService] = None) -> Application:
    """
    Створює та повертає PTB Application із зареєстрованими обробниками.
    """
    config = config or ConfigService()

    logger.debug("🤖 Будуємо Application через ApplicationBuilder")
    application = (
        ApplicationBuilder()
        .token(token)
        .context_types(ContextTypes(context=CustomContext))
        .concurrent_updates(bool(config.get("telegram.concurrent_updates", True)))  # 🧵 Кожен апдейт — окрема задача
        .post_init(_post_init)
        .post_shutdown(_post_shutdown)
        .build()
    )

    container = Container(config, application.bot)
    application.bot_data[CONTAINER_KEY] = container
    BotRegistrar(application, container).register_handlers()

    async def _on_error(update: object, context: CustomContext) -> None:
        """
        Глобальний error-handler PTB: відправляє винятки у централізований сервіс.
        """
        err = getattr(context, "error", None)
        if err is None:
            return
        logger.error("🔥 Виняток у PTB: %s", err, exc_info=err)
        try:
            await container.exception_handler_service.handle(err, update if isinstance(update, Update) else None)
        except Exception as nested:  # noqa: BLE001
            logger.exception("💥 Global error handler failed: %s", nested)

    application.add_error_handler(_on_error)
    logger.info("✅ Application готовий до запуску")
    return application


async def _post_init(application: Application) -> None:
    container: Container = application.bot_data[CONTAINER_KEY]
    await container.start()
    logger.info("🚀 Фонові задачі запущено")


async def _post_shutdown(application: Application) -> None:
    container: Optional[Container] = application.bot_data.get(CONTAINER_KEY)
    if container is not None:
        await container.shutdown()


# ================================
# ⚙️ CLI-ФЛАГИ → ENV
# ================================
def _apply_cli_flags_to_env(args: List[str]) -> None:
    """
    Мапить CLI-прапорці на ENV змінні, які читає ConfigService.
    """

    def value(prefix: str) -> Optional[str]:
        for arg in args:
            if arg.startswith(prefix + "="):
                return arg.split("=", 1)[1]
        return None

    level = value("--log-level")
    if level:
        os.environ["TRACKBOT_LOG_LEVEL"] = level.upper()
    cache_dir = value("--cache-dir")
    if cache_dir:
        os.environ["TRACKBOT_CACHE_DIR"] = cache_dir
    config_path = value("--config")
    if config_path:
        os.environ["TRACKBOT_CONFIG"] = config_path


# ================================
# 🚀 ENTRYPOINT
# ================================
def run() -> None:
    """
    Основна точка входу: парсить CLI-флаги, читає токен і запускає бота.
    """
    _apply_cli_flags_to_env(list(sys.argv[1:]))
    load_dotenv()
    config = ConfigService.reload()                                    # ♻️ Підхоплюємо ENV із флагів
    bootstrap_logging()

    token = config.get("telegram.bot_token")
    if not token:
        logger.critical("🚨 Не знайдено токен Telegram")
        raise RuntimeError("Set TELEGRAM_TOKEN in environment or telegram.bot_token in config.")

    application = build_application(str(token), config)
    logger.info("🤖 Bot is starting…")
    application.run_polling(allowed_updates=Update.ALL_TYPES)          # 📡 Включно з chosen_inline_result
    logger.info("👋 Bot stopped")


if __name__ == "__main__":
    run()
