# 🛠️ trackbot/errors/error_handler.py
"""
🛠️ Фабрика декораторів для безпечного виконання async-хендлерів Telegram-бота.

🔹 Не змінює сигнатуру функції, працює з будь-якими *args/**kwargs.
🔹 Коректно пропускає `asyncio.CancelledError`, щоб не ламати зупинку задач.
🔹 Шукає обʼєкт `Update` серед аргументів і делегує винятки `ExceptionHandlerService`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update                                           # 🤖 Telegram DTO

# 🔠 Системні імпорти
import asyncio                                                        # ⏱️ CancelledError
import functools                                                      # 🧱 wraps для збереження метаданих
import logging                                                        # 🧾 Логи обробки помилок
from typing import Any, Callable, Coroutine, Optional                 # 📐 Типи для сигнатур

# 🧩 Внутрішні модулі проєкту
from .exception_handler_service import ExceptionHandlerService        # 🛡️ Центральний сервіс обробки винятків


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger("trackbot.errors.error_handler")


# ================================
# 🔧 ТИПИ
# ================================
AsyncHandler = Callable[..., Coroutine[Any, Any, Any]]


# ================================
# 🏭 ФАБРИКА ДЕКОРАТОРІВ
# ================================
def make_error_handler(service: ExceptionHandlerService) -> Callable[[AsyncHandler], AsyncHandler]:
    """
    Створює декоратор, замкнений на `ExceptionHandlerService`.

    Args:
        service: Сервіс, який отримує винятки і `Update`.
    """

    def decorator(func: AsyncHandler) -> AsyncHandler:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except asyncio.CancelledError:
                logger.info("⏹️ handler cancelled: %s", func.__name__)
                raise                                                 # ⚠️ Ніколи не глотаємо cancel
            except Exception as exc:                                  # noqa: BLE001
                update: Optional[Update] = kwargs.get("update")
                if update is None:
                    update = next((arg for arg in args if isinstance(arg, Update)), None)
                logger.error("🔥 handler %s failed (has_update=%s)", func.__name__, update is not None, exc_info=True)
                await service.handle(exc, update)
                return None

        return wrapper

    return decorator


__all__ = ["make_error_handler"]
