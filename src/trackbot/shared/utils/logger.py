# 📜 trackbot/shared/utils/logger.py
"""
📜 Єдина схема логування для inline-бота та пайплайна завантаження треків.

🔹 Ініціалізує логер `trackbot` із консольним і файловим виводом (ротація за часом).
🔹 Підтримує JSON-формат файлу, окремі рівні для консолі/файлу та приглушення сторонніх бібліотек.
🔹 Надає `get_logger(suffix)` для дочірніх логерів (`trackbot.pipeline`, `trackbot.providers` …).
"""
from __future__ import annotations

# 🔠 Системні імпорти
import json									# 📦 Серіалізація payload логів
import logging									# 🪵 Робота з логерами Python
import sys									# 🧵 Потік stdout
import threading								# 🧵 Захист ініціалізації
from dataclasses import dataclass, field					# 🧱 DTO-конфіг логування
from logging.handlers import TimedRotatingFileHandler			# 📁 Хендлер з ротацією файлів
from pathlib import Path								# 📂 Операції з файловими шляхами
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union	# 🧰 Типи

# ================================
# 🧾 КОНСТАНТИ МОДУЛЯ
# ================================
LOG_NAME: str = "trackbot"							# 🏷️ Базовий префікс логерів
PLAIN_FORMAT: str = "%(asctime)s [%(levelname)s] - (%(name)s).%(funcName)s(%(lineno)d) - %(message)s"	# 📄 Формат для файлів
CONSOLE_FORMAT: str = "[%(levelname).1s] %(name)s: %(message)s"		# 🖥️ Консольний формат
DEFAULT_SUPPRESS: Dict[str, str] = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "telegram.ext": "INFO",
}										# 🙊 Шумні бібліотеки за замовчуванням

_RESERVED_ATTRS: FrozenSet[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}							# 🧱 Службові поля LogRecord

_lock = threading.Lock()							# 🔒 Блокуємо одночасну ініціалізацію


# ================================
# 🧾 DTO КОНФІГУРАЦІЇ
# ================================
@dataclass
class LoggingConfig:
    """Контейнер налаштувань логування з дефолтними значеннями."""
    level: str = "INFO"							# 🎚️ Глобальний рівень логів
    console: bool = True							# 🖥️ Чи вмикати консольний вивід
    json: bool = False								# 📦 JSON-формат для файлу
    file: Optional[str] = "logs/trackbot.log"			# 📁 Шлях до лог-файлу (None → без файлу)
    when: str = "midnight"						# ⏰ Періодичність ротації
    backup_count: int = 7							# ♻️ Скільки копій зберігати
    suppress: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SUPPRESS))	# 🙊 Треті сторони
    console_level: str = "INFO"						# 🖥️ Рівень для консолі
    file_level: str = "DEBUG"						# 📁 Рівень для файлу


# ================================
# 🧰 ФОРМАТТЕР
# ================================
class JsonFormatter(logging.Formatter):
    """Форматує записи у плоский JSON разом з `extra`-полями."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "func": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():			# 🔎 Custom extra-поля
            if key in _RESERVED_ATTRS or key.startswith("_") or key in payload:
                continue
            try:
                json.dumps(value)					# ✅ Перевіряємо серіалізованість
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = str(value)				# 🔄 Повертаємось до рядка
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


# ================================
# 🛠️ ДОПОМОЖНІ ФУНКЦІЇ
# ================================
def _to_level(value: Union[str, int, None], default: int) -> int:
    """Перетворює рядок/інт у числовий рівень логування."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    return getattr(logging, str(value).upper(), default)


def _build_handlers(cfg: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if cfg.console:
        console = logging.StreamHandler(sys.stdout)			# 🖥️ Потік stdout
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console.setLevel(_to_level(cfg.console_level, logging.INFO))
        handlers.append(console)
    if cfg.file:
        log_path = Path(cfg.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)		# 🧱 Гарантуємо директорію
        file_handler = TimedRotatingFileHandler(
            filename=str(log_path),
            when=cfg.when,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JsonFormatter() if cfg.json else logging.Formatter(PLAIN_FORMAT))
        file_handler.setLevel(_to_level(cfg.file_level, logging.DEBUG))
        handlers.append(file_handler)
    return handlers


# ================================
# 🚀 ПУБЛІЧНИЙ API
# ================================
def init_logging(cfg: Optional[LoggingConfig] = None) -> logging.Logger:
    """Ініціалізує логер застосунку. Повторний виклик замінює наші хендлери."""
    cfg = cfg or LoggingConfig()
    with _lock:
        root_logger = logging.getLogger(LOG_NAME)
        root_logger.setLevel(min(
            _to_level(cfg.level, logging.INFO),
            _to_level(cfg.console_level, logging.INFO) if cfg.console else logging.CRITICAL,
            _to_level(cfg.file_level, logging.DEBUG) if cfg.file else logging.CRITICAL,
        ))									# 🧮 Нижня межа серед увімкнених виводів

        for handler in list(root_logger.handlers):			# 🧹 Прибираємо попередні хендлери
            root_logger.removeHandler(handler)
            handler.close()
        for handler in _build_handlers(cfg):
            root_logger.addHandler(handler)

        for name, level in (cfg.suppress or {}).items():		# 🙊 Приглушуємо сторонні логери
            logging.getLogger(name).setLevel(_to_level(level, logging.WARNING))

        root_logger.info(
            "✅ Logging initialized | level=%s console=%s json=%s file=%s",
            cfg.level.upper(),
            "ON" if cfg.console else "OFF",
            "ON" if cfg.json else "OFF",
            cfg.file or "-",
        )
        return root_logger


def init_logging_from_config(node: Optional[Mapping[str, Any]]) -> logging.Logger:
    """
    Ініціалізує логування з розділу `logging` ConfigService.

    Args:
        node: Словник налаштувань (може бути None або неповним).
    """
    node = node or {}
    defaults = LoggingConfig()
    suppress = dict(DEFAULT_SUPPRESS)
    suppress.update(node.get("suppress") or {})
    cfg = LoggingConfig(
        level=str(node.get("level") or defaults.level),
        console=defaults.console if node.get("console") is None else bool(node.get("console")),
        json=bool(node.get("json", defaults.json)),
        file=node.get("file", defaults.file),
        when=str(node.get("when") or defaults.when),
        backup_count=int(node.get("backup_count") or defaults.backup_count),
        suppress=suppress,
        console_level=str(node.get("console_level") or node.get("level") or defaults.console_level),
        file_level=str(node.get("file_level") or defaults.file_level),
    )
    return init_logging(cfg)


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """Повертає дочірній логер `trackbot.<suffix>` або кореневий логер застосунку."""
    return logging.getLogger(LOG_NAME if not suffix else f"{LOG_NAME}.{suffix}")


__all__ = [
    "LOG_NAME",
    "LoggingConfig",
    "JsonFormatter",
    "init_logging",
    "init_logging_from_config",
    "get_logger",
]
