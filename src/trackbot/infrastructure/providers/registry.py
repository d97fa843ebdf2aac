# 🗂️ trackbot/infrastructure/providers/registry.py
"""
🗂️ ProviderRegistry — диспетчеризація провайдерів за тегом, який несе `TrackReference`.

🔹 Неналаштований провайдер («модуль неактивний») → `ProviderUnavailable`.
🔹 Закриває HTTP-клієнти всіх провайдерів при зупинці.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування
from typing import Dict, Iterable, List                                # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import ProviderTag
from trackbot.domain.music.interfaces import ISourceProvider
from trackbot.errors.custom_errors import ProviderUnavailable
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.providers")


class ProviderRegistry:
    """🗂️ Активні провайдери процесу."""

    def __init__(self, providers: Iterable[ISourceProvider] = ()) -> None:
        self._providers: Dict[ProviderTag, ISourceProvider] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: ISourceProvider) -> None:
        self._providers[provider.tag] = provider
        logger.info("🎧 Provider registered: %s", provider.tag.value)

    def get(self, tag: ProviderTag) -> ISourceProvider:
        provider = self._providers.get(tag)
        if provider is None:
            raise ProviderUnavailable(provider=tag.value, details="module not active")
        return provider

    def is_active(self, tag: ProviderTag) -> bool:
        return tag in self._providers

    @property
    def active_tags(self) -> List[ProviderTag]:
        return list(self._providers)

    async def aclose(self) -> None:
        for provider in self._providers.values():
            try:
                await provider.aclose()
            except Exception:                                          # noqa: BLE001
                logger.exception("⚠️ Failed to close provider %s", provider.tag.value)


__all__ = ["ProviderRegistry"]
