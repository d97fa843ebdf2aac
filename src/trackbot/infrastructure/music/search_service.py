# 🔎 trackbot/infrastructure/music/search_service.py
"""
🔎 SearchService — розбір inline-запиту, пошук у провайдері та заповнення SearchResultCache.

Граматика запиту:
    music  [yandex|hifi|qobuz] <запит>
    lucida [tidal|qobuz|deezer|soundcloud|amazon] <запит>

🔹 Перше слово після команди вважається сервісом, лише якщо воно з дозволеного списку.
🔹 Повертає щонайбільше `result_limit` дедуплікованих записів у порядку провайдера.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування
from dataclasses import dataclass                                      # 🧱 DTO команди
from typing import List, Optional, Sequence, Tuple                     # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.ui import static_messages as msg
from trackbot.domain.music.entities import ProviderTag, TrackEntry
from trackbot.errors.custom_errors import InvalidInlineQuery, ProviderUnavailable, TrackNotFound
from trackbot.infrastructure.cache.search_result_cache import SearchResultCache
from trackbot.infrastructure.providers.lucida_provider import DEFAULT_CATALOGS
from trackbot.infrastructure.providers.registry import ProviderRegistry
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.search")

MUSIC_COMMAND = "music"
LUCIDA_COMMAND = "lucida"
MUSIC_SERVICES: Sequence[str] = ("yandex", "hifi", "qobuz")
DEFAULT_RESULT_LIMIT = 10


@dataclass(frozen=True, slots=True)
class SearchCommand:
    provider: ProviderTag
    query: str
    catalog: Optional[str] = None


class SearchService:
    """🔎 Inline-пошук поверх реєстру провайдерів."""

    def __init__(
        self,
        registry: ProviderRegistry,
        search_cache: SearchResultCache,
        *,
        result_limit: int = DEFAULT_RESULT_LIMIT,
        default_provider: ProviderTag = ProviderTag.HIFI,
        lucida_catalogs: Sequence[str] = DEFAULT_CATALOGS,
        default_catalog: str = "tidal",
    ) -> None:
        self._registry = registry
        self._search_cache = search_cache
        self._result_limit = max(1, int(result_limit))
        self._default_provider = default_provider
        self._lucida_catalogs = tuple(c.lower() for c in lucida_catalogs)
        self._default_catalog = default_catalog

    # ================================
    # ⌨️ РОЗБІР ЗАПИТУ
    # ================================
    def parse(self, text: str) -> SearchCommand:
        """
        Raises:
            InvalidInlineQuery: порожній запит, невідома команда або відсутній текст пошуку.
        """
        words = (text or "").split()
        if not words:
            raise InvalidInlineQuery(msg.ENTER_COMMAND)
        command, args = words[0].lower(), words[1:]
        if command == MUSIC_COMMAND:
            services: Sequence[str] = MUSIC_SERVICES
        elif command == LUCIDA_COMMAND:
            services = self._lucida_catalogs
        else:
            raise InvalidInlineQuery(msg.UNKNOWN_COMMAND)

        service: Optional[str] = None
        if args and args[0].lower() in services:
            service, args = args[0].lower(), args[1:]
        if not args:
            raise InvalidInlineQuery(msg.ENTER_QUERY)
        query = " ".join(args)

        if command == LUCIDA_COMMAND:
            return SearchCommand(provider=ProviderTag.LUCIDA, query=query, catalog=service or self._default_catalog)
        provider = ProviderTag.parse(service) if service else self._default_provider
        return SearchCommand(provider=provider, query=query)

    # ================================
    # 🔎 ПОШУК
    # ================================
    async def search(self, text: str) -> List[Tuple[str, TrackEntry]]:
        """
        Повертає `[(ключ, запис), ...]`, які вже лежать у SearchResultCache.

        Raises:
            InvalidInlineQuery: запит не відповідає граматиці.
            ProviderUnavailable: провайдер неактивний або не відповів.
            TrackNotFound: провайдер нічого не знайшов.
        """
        command = self.parse(text)
        if not self._registry.is_active(command.provider):
            raise ProviderUnavailable(provider=command.provider.value, details="module not active")
        provider = self._registry.get(command.provider)
        entries = await provider.search(command.query, 0, catalog=command.catalog)
        survivors = self._search_cache.put_results(entries[: self._result_limit])
        logger.info(
            "🔎 %s%s %r → %d results",
            command.provider.value,
            f"/{command.catalog}" if command.catalog else "",
            command.query,
            len(survivors),
        )
        if not survivors:
            raise TrackNotFound(provider=command.provider.value, details=f"no results for {command.query!r}")
        return survivors


__all__ = ["SearchService", "SearchCommand", "MUSIC_SERVICES"]
