# 📈 trackbot/shared/metrics/exporters.py
"""
📈 Легкий bootstrap HTTP-експортера Prometheus (`/metrics`).

🔹 Запускається один раз на процес, повторні виклики ігноруються.
🔹 Помилки біндингу порту логуються і не зупиняють бота.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import start_http_server                       # 📡 Вбудований HTTP-сервер метрик

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування запуску
import threading                                                       # 🔒 Захист від подвійного старту

# 🧩 Внутрішні модулі проєкту
from trackbot.shared.utils.logger import LOG_NAME                      # 🏷️ Спільний неймспейс логів


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.metrics")

_started = False                                                       # 🚦 Чи вже запущено експортер
_lock = threading.Lock()


def maybe_start_prometheus(port: int, addr: str = "0.0.0.0") -> bool:
    """
    Стартує експортер, якщо він ще не працює.

    Returns:
        bool: True, якщо сервер запущено саме цим викликом.
    """
    global _started
    with _lock:
        if _started:                                                   # ♻️ Уже працює
            logger.debug("📈 Prometheus уже запущено, пропускаємо")
            return False
        try:
            start_http_server(port, addr=addr)                         # 🚀 Піднімаємо /metrics
        except OSError as exc:
            logger.warning("⚠️ Не вдалося запустити Prometheus на %s:%s: %s", addr, port, exc)
            return False
        _started = True
        logger.info("📈 Prometheus /metrics слухає %s:%s", addr, port)
        return True


__all__ = ["maybe_start_prometheus"]
