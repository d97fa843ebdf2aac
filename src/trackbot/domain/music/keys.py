# 🔑 trackbot/domain/music/keys.py
"""
🔑 Детерміновані ключі кешу та ідентифікатори inline-результатів.

🔹 `cache_key(url, discriminator)` — безпечне для файлової системи імʼя запису медіакешу.
🔹 `search_cache_key(url)` — перші 16 hex-символів SHA-1, компактний id для inline-результату.
🔹 `build_result_id` / `parse_result_id` — формат `{provider}|{key}` (вкладається в 64 байти Telegram).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import hashlib                                                         # 🔐 SHA-1 для компактних ключів
from typing import Tuple                                               # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from .entities import ProviderTag

# ================================
# 🧾 КОНСТАНТИ
# ================================
CACHE_KEY_PREFIX = "++media+"
PAYLOAD = "payload"                                                    # 📦 Файл із file_id
CONTENT_TYPE = "content_type"                                          # 🧾 Файл із MIME-типом
SEARCH_KEY_LENGTH = 16
RESULT_ID_SEPARATOR = "|"


def cache_key(url: str, discriminator: str) -> str:
    """`++media+{url}+{discriminator}` з `/` та `:` заміненими на `+`."""
    raw = f"{CACHE_KEY_PREFIX}{url}+{discriminator}"
    return raw.replace("/", "+").replace(":", "+")


def search_cache_key(url: str) -> str:
    """
    Компактний ключ для SearchResultCache.

    Різні URL з однаковим префіксом хешу вважаються одним записом (виграє перший).
    """
    return hashlib.sha1(url.encode("utf-8")).hexdigest()[:SEARCH_KEY_LENGTH]


def build_result_id(provider: ProviderTag, key: str) -> str:
    return f"{provider.value}{RESULT_ID_SEPARATOR}{key}"


def parse_result_id(result_id: str) -> Tuple[ProviderTag, str]:
    """
    Розбирає id вибраного inline-результату.

    Raises:
        ValueError: невідомий провайдер або пошкоджений формат.
    """
    provider_raw, sep, key = (result_id or "").partition(RESULT_ID_SEPARATOR)
    if not sep or not key:
        raise ValueError(f"Malformed inline result id: {result_id!r}")
    return ProviderTag.parse(provider_raw), key


__all__ = [
    "CACHE_KEY_PREFIX",
    "PAYLOAD",
    "CONTENT_TYPE",
    "cache_key",
    "search_cache_key",
    "build_result_id",
    "parse_result_id",
]
