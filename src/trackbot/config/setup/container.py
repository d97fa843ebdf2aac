# 📦 trackbot/config/setup/container.py
"""
📦 Контейнер залежностей Telegram-бота.

🔹 Створює кеші, провайдери, медіа-інструменти та сервіси пайплайна в правильному порядку DI.
🔹 Нічого не стартує в event loop: фонові задачі запускає `start()` із `post_init`.
🔹 Дає єдину точку доступу до хендлерів і фіч для `BotRegistrar`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Bot                                                 # 🤖 Клієнт Bot API

# 🔠 Системні імпорти
import logging                                                           # 🧾 Базові засоби логування
from typing import TYPE_CHECKING, Any, List, Optional, Union             # 🧮 Допоміжні типи

# 🧩 Внутрішні модулі проєкту

# 🤖 Bot-фічі та хендлери
from trackbot.bot.commands.base import BaseFeature                       # 🏛️ Контракт фічі
from trackbot.bot.commands.core_commands_feature import CoreCommandsFeature  # 🧱 Базові команди бота
from trackbot.bot.handlers.inline_search_handler import InlineSearchHandler  # 🔎 Inline-пошук
from trackbot.bot.handlers.inline_send_handler import InlineSendHandler  # 📬 Вибір результату

# ⚙️ Конфігурація
from trackbot.config.setup.constants import CONST, AppConstants          # ⚙️ Глобальні константи

# 🏭 Доменна логіка
from trackbot.domain.music.entities import ProviderTag                   # 🏷️ Теги провайдерів
from trackbot.domain.music.interfaces import IMediaCache, ISourceProvider  # 🔌 Контракти

# 🚨 Обробка помилок
from trackbot.errors.error_handler import make_error_handler             # 🚨 Обгортка обробки помилок
from trackbot.errors.exception_handler_service import ExceptionHandlerService  # 🛡️ Менеджер винятків
from trackbot.errors.strategies import HttpxErrorStrategy, TelegramErrorStrategy  # 🧱 Набір стратегій помилок

# 🧊 Інфраструктура
from trackbot.infrastructure.cache import FileMediaCache, MemoryMediaCache, SearchResultCache, TieredMediaCache
from trackbot.infrastructure.media import ArtworkDownloader, FfmpegProcessor
from trackbot.infrastructure.music import (
    AcquisitionPipeline,
    DeliveryRetrier,
    SearchService,
    SelectionService,
)
from trackbot.infrastructure.providers import HifiProvider, LucidaProvider, ProviderRegistry, YandexProvider
from trackbot.infrastructure.providers.lucida_provider import DEFAULT_CATALOGS
from trackbot.infrastructure.telegram import TelegramTransport
from trackbot.shared.metrics.exporters import maybe_start_prometheus     # 📈 Bootstrap метрик
from trackbot.shared.utils.logger import LOG_NAME, init_logging_from_config  # 🧾 Конфіг логування

if TYPE_CHECKING:
    from trackbot.config.config_service import ConfigService             # 🗂️ Тип під час перевірки

logger = logging.getLogger(LOG_NAME)                                     # 🧾 Модульний логер контейнера


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _int_or_default(value: Any, default: int) -> int:
    """
    Повертає ціле число або запасне значення, якщо каст неможливий.
    """
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float_or_default(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _chat_id(value: Any) -> Optional[Union[int, str]]:
    """`storage_chat_id` буває числом або `@username` каналу."""
    if value in (None, ""):
        return None
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return text


def bootstrap_logging() -> logging.Logger:
    """
    Зчитує конфіг логування і запускає кореневий логер.
    """
    from trackbot.config.config_service import ConfigService             # 🧭 Локальний імпорт для уникнення циклів

    cfg = ConfigService()
    node = cfg.get("logging", {}) or {}
    return init_logging_from_config(node)


# ================================
# 🏛️ КОНТЕЙНЕР ЗАЛЕЖНОСТЕЙ
# ================================
class Container:
    """
    Координує ініціалізацію інфраструктурних сервісів і хендлерів бота.
    """

    def __init__(self, config: ConfigService, bot: Bot):
        self.config = config                                              # ⚙️ Джерело конфігурацій DI
        self.bot = bot                                                    # 🤖 Bot API для транспорту
        self.constants: AppConstants = CONST                              # 🧱 Глобальні константи застосунку
        logger.info("🚀 Стартуємо побудову контейнера залежностей")
        self._setup_error_handlers()                                      # 🛡️ Стратегії помилок
        self._setup_caches()                                              # 🧊 Медіа- та пошуковий кеш
        self._setup_providers()                                           # 🎧 Бекенди музики
        self._setup_media()                                               # 🎚️ ffmpeg, обкладинки, транспорт
        self._setup_services()                                            # ⬇️ Пайплайн, ретраї, пошук, вибір
        self._setup_features_and_handlers()                               # 📚 Telegram-фічі та роутери
        logger.info("✅ Контейнер ініціалізовано успішно")

    # ================================
    # 📈 МЕТРИКИ
    # ================================
    def _bootstrap_metrics_if_enabled(self) -> None:
        """
        Стартує Prometheus-експортер, якщо це дозволено конфігурацією.
        """
        if not bool(self.config.get("metrics.enabled", False)):
            logger.debug("📉 Prometheus вимкнено конфігом")
            return
        exporter_name = str(self.config.get("metrics.exporter", "prometheus")).lower()
        if exporter_name != "prometheus":
            logger.debug("📉 Експортер %s не підтримується", exporter_name)
            return
        port = _int_or_default(self.config.get("metrics.prometheus.port", 9108, cast=int), 9108)
        maybe_start_prometheus(port)

    # ================================
    # 🛡️ ОБРОБКА ПОМИЛОК
    # ================================
    def _setup_error_handlers(self) -> None:
        strategies = [
            HttpxErrorStrategy(),                                        # 🌐 HTTP-рівень
            TelegramErrorStrategy(),                                     # ✉️ Telegram Bot API
        ]
        self.exception_handler_service = ExceptionHandlerService(strategies=strategies)
        self.error_handler = make_error_handler(self.exception_handler_service)
        logger.debug("🛡️ ExceptionHandlerService активовано (%d стратегій)", len(strategies))

    # ================================
    # 🧊 КЕШІ
    # ================================
    def _setup_caches(self) -> None:
        backend = str(self.config.get("cache.backend", "tiered")).lower()
        cache_dir = str(self.config.get("cache.dir", "var/media_cache"))
        self.media_cache: IMediaCache
        if backend == "memory":
            self.media_cache = MemoryMediaCache()
        elif backend == "file":
            self.media_cache = FileMediaCache(cache_dir)
        else:
            if backend != "tiered":
                logger.warning("⚠️ Невідомий cache.backend=%s, використовуємо tiered", backend)
            self.media_cache = TieredMediaCache(MemoryMediaCache(), FileMediaCache(cache_dir))
        sweep = _float_or_default(self.config.get("music.search_cache.sweep_interval_sec", 300), 300.0)
        self.search_cache = SearchResultCache(sweep_interval=sweep)
        logger.debug("🧊 Кеші готові (backend=%s dir=%s sweep=%.0fs)", backend, cache_dir, sweep)

    # ================================
    # 🎧 ПРОВАЙДЕРИ
    # ================================
    def _setup_providers(self) -> None:
        cfg = self.config
        common = {
            "timeout": _float_or_default(cfg.get("providers.timeout_sec", 30), 30.0),
            "user_agent": str(cfg.get("providers.user_agent", "trackbot")),
        }
        providers: List[ISourceProvider] = []

        yandex_token = cfg.get("providers.yandex.token")
        if cfg.get("providers.yandex.enabled", True) and yandex_token:
            providers.append(
                YandexProvider(
                    str(yandex_token),
                    base_url=str(cfg.get("providers.yandex.base_url", "https://api.music.yandex.net")),
                    cover_size=str(cfg.get("providers.yandex.cover_size", "400x400")),
                    **common,
                )
            )
        else:
            logger.info("🟡 Yandex неактивний (немає токена або вимкнено)")

        hifi_base = cfg.get("providers.hifi.base_url")
        if cfg.get("providers.hifi.enabled", True) and hifi_base:
            providers.append(
                HifiProvider(str(hifi_base), quality=str(cfg.get("providers.hifi.quality", "LOSSLESS")), **common)
            )
        else:
            logger.info("🎼 Hifi неактивний (немає base_url або вимкнено)")

        if cfg.get("providers.lucida.enabled", True):
            catalogs = cfg.get("providers.lucida.catalogs") or DEFAULT_CATALOGS
            providers.append(
                LucidaProvider(
                    base_url=str(cfg.get("providers.lucida.base_url", "https://lucida.to")),
                    default_catalog=str(cfg.get("providers.lucida.default_catalog", "tidal")),
                    catalogs=[str(c) for c in catalogs],
                    poll_interval=_float_or_default(cfg.get("providers.lucida.poll_interval_sec", 2.0), 2.0),
                    poll_timeout=_float_or_default(cfg.get("providers.lucida.poll_timeout_sec", 180), 180.0),
                    progress_template=str(cfg.get("music.progress.provider_template", "{title}\n{message}")),
                    token=cfg.get("providers.lucida.token"),
                    token_expiry=_int_or_default(cfg.get("providers.lucida.token_expiry"), 0) or None,
                    **common,
                )
            )

        self.provider_registry = ProviderRegistry(providers)
        logger.info("🎧 Активні провайдери: %s", [t.value for t in self.provider_registry.active_tags])

    # ================================
    # 🎚️ МЕДІА ТА ТРАНСПОРТ
    # ================================
    def _setup_media(self) -> None:
        storage_chat_id = _chat_id(self.config.get("telegram.storage_chat_id"))
        if storage_chat_id is None:
            logger.critical("🚨 telegram.storage_chat_id не задано")
            raise RuntimeError("Set TELEGRAM_STORAGE_CHAT_ID (chat for media uploads).")
        self.transport = TelegramTransport(self.bot, storage_chat_id)
        self.processor = FfmpegProcessor(
            str(self.config.get("media.ffmpeg.binary", "ffmpeg")),
            timeout=_float_or_default(self.config.get("media.ffmpeg.timeout_sec", 120), 120.0),
        )
        self.artwork_downloader = ArtworkDownloader(
            timeout=_float_or_default(self.config.get("providers.timeout_sec", 30), 30.0),
        )

    # ================================
    # ⬇️ СЕРВІСИ ПАЙПЛАЙНА
    # ================================
    def _setup_services(self) -> None:
        cfg = self.config
        self.pipeline = AcquisitionPipeline(
            self.media_cache,
            self.provider_registry,
            self.processor,
            self.transport,
            self.artwork_downloader,
            artwork_dir=str(cfg.get("cache.artwork_dir", "var/artwork")),
        )
        self.retrier = DeliveryRetrier(
            self.pipeline,
            self.transport,
            max_attempts=_int_or_default(cfg.get("music.retry.max_attempts", 2), 2),
            buffer_size=_int_or_default(cfg.get("music.progress.buffer_size", 16), 16),
        )
        try:
            default_provider = ProviderTag.parse(str(cfg.get("music.search.default_provider", "hifi")))
        except ValueError:
            logger.warning("⚠️ Невідомий music.search.default_provider, використовуємо hifi")
            default_provider = ProviderTag.HIFI
        self.search_service = SearchService(
            self.provider_registry,
            self.search_cache,
            result_limit=_int_or_default(cfg.get("music.search.result_limit", 10), 10),
            default_provider=default_provider,
            lucida_catalogs=[str(c) for c in cfg.get("providers.lucida.catalogs") or DEFAULT_CATALOGS],
            default_catalog=str(cfg.get("providers.lucida.default_catalog", "tidal")),
        )
        self.selection_service = SelectionService(self.search_cache, self.retrier, self.transport)

    # ================================
    # 📚 ФІЧІ ТА ХЕНДЛЕРИ
    # ================================
    def _setup_features_and_handlers(self) -> None:
        self.features: List[BaseFeature] = [
            CoreCommandsFeature(constants=self.constants, error_handler=self.error_handler),
        ]
        self.inline_search_handler = InlineSearchHandler(
            self.search_service,
            self.transport,
            placeholder_audio_url=str(
                self.config.get("music.search.placeholder_audio_url", "https://s.myst33d.ru/placeholder.mp3")
            ),
        )
        self.inline_send_handler = InlineSendHandler(self.selection_service)

    # ================================
    # 🔌 ЖИТТЄВИЙ ЦИКЛ
    # ================================
    async def start(self) -> None:
        """Запускає фонові задачі (викликається з `post_init`)."""
        self._bootstrap_metrics_if_enabled()
        self.search_cache.start_sweeper()

    async def shutdown(self) -> None:
        """Зупиняє фонові задачі та закриває HTTP-клієнти (викликається з `post_shutdown`)."""
        await self.search_cache.stop_sweeper()
        await self.provider_registry.aclose()
        await self.artwork_downloader.aclose()
        logger.info("👋 Контейнер зупинено")


__all__ = ["Container", "bootstrap_logging"]
