# 🎧 trackbot/infrastructure/providers/__init__.py
"""
🎧 Провайдери музичних сервісів: Yandex, Hifi та агрегатор Lucida.
"""

from .base import BaseHttpProvider, first_artist_name
from .hifi_provider import HifiProvider
from .lucida_provider import LucidaProvider
from .registry import ProviderRegistry
from .yandex_provider import YandexProvider

__all__ = [
    "BaseHttpProvider",
    "first_artist_name",
    "HifiProvider",
    "LucidaProvider",
    "ProviderRegistry",
    "YandexProvider",
]
