# ⚙️ config_service.py
"""
⚙️ config_service.py — Сервіс для доступу до статичної конфігурації.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з config.yaml пакета, файлу `TRACKBOT_CONFIG` та .env.
- Надає єдиний метод .get() для доступу до будь-якого параметра.
- Працює як Singleton.
"""

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import os                                   # 📁 Доступ до змінних середовища
import logging                              # 🧾 Логування
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Dict, Optional      # 🧩 Типізація


logger = logging.getLogger("trackbot.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"     # 📘 Базовий YAML у пакеті
OVERRIDE_ENV = "TRACKBOT_CONFIG"                                # 🗂️ ENV зі шляхом до YAML-перевизначень

# 🔐 ENV → крапковий ключ конфігурації
ENV_MAPPING: Dict[str, str] = {
    "TELEGRAM_TOKEN": "telegram.bot_token",
    "TELEGRAM_STORAGE_CHAT_ID": "telegram.storage_chat_id",
    "YANDEX_TOKEN": "providers.yandex.token",
    "HIFI_BASE_URL": "providers.hifi.base_url",
    "LUCIDA_BASE_URL": "providers.lucida.base_url",
    "TRACKBOT_CACHE_DIR": "cache.dir",
    "TRACKBOT_LOG_LEVEL": "logging.level",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх статичних конфігураційних параметрів бота.
    Працює як Singleton — конфігурація зчитується лише один раз.
    """

    _instance = None                          # 🧩 Singleton-екземпляр
    _config: Dict[str, Any] = {}              # 📦 Обʼєднана конфігурація зі всіх джерел

    def __new__(cls):
        # ✅ Патерн Singleton: створюємо лише один екземпляр
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = {}
            cls._instance._load_all_configs()
            logger.debug("🔄 Singleton ConfigService створено і конфігурація завантажена")
        return cls._instance

    @classmethod
    def reload(cls) -> "ConfigService":
        """♻️ Скидає singleton і перечитує всі джерела (CLI-флаги, тести)."""
        cls._instance = None
        return cls()

    def _load_all_configs(self) -> None:
        """
        📥 Завантажує всі джерела конфігурації в один словник.
        Пріоритет (останній перемагає): config.yaml → TRACKBOT_CONFIG → .env/ENV
        """

        # --- 1. YAML пакета ---
        self._merge_yaml(DEFAULT_CONFIG_PATH)

        # --- 2. Файл перевизначень ---
        override_path = os.getenv(OVERRIDE_ENV)
        if override_path:
            self._merge_yaml(Path(override_path))

        # --- 3. .env змінні ---
        load_dotenv()
        env_vars = {
            key: os.environ[env_name]
            for env_name, key in ENV_MAPPING.items()
            if os.environ.get(env_name)
        }                                                            # 🔐 Лише задані змінні
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію успішно завантажено (env keys=%d)", len(env_vars))

    def _merge_yaml(self, path: Path) -> None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Не вдалося завантажити %s: %s", path, e)
            return
        if not isinstance(data, dict):
            logger.warning("⚠️ %s не містить словника верхнього рівня", path)
            return
        self._deep_update(self._config, data)
        logger.debug("📘 Завантажено %s", path)

    def get(self, key: str, default: Any = None, cast: Optional[type] = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'telegram.bot_token').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.
            cast (type): Необовʼязкове приведення типу; при збої повертається default.

        Returns:
            Any: Значення параметра або default.
        """
        value: Any = self._config
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]                 # 🔎 Переходимо глибше в структуру
            else:
                return default                   # ❌ Ключ не знайдено
        if value is None:
            return default
        if cast is not None and not isinstance(value, cast):
            try:
                return cast(value)
            except (TypeError, ValueError):
                logger.warning("⚠️ Ключ '%s' не приводиться до %s: %r", key, cast.__name__, value)
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """🧷 Точково перевизначає значення (CLI-флаги, тести)."""
        self._deep_update(self._config, self._unflatten_dict({key: value}))

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================

    @staticmethod
    def _unflatten_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'telegram.token' → {'telegram': {'token': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split('.')
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict, overrides: Dict) -> None:
        """
        🔁 Рекурсивно обʼєднує два словника (оновлення значень).
        """
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                self._deep_update(source[key], value)  # 🔁 Глибоке обʼєднання
            else:
                source[key] = value                    # 🧩 Перезапис простого значення
