# 🧊 trackbot/infrastructure/cache/__init__.py
"""
🧊 Кеші: медіа-дескриптори (памʼять / диск / двоярусний) та результати inline-пошуку.
"""

from .file_media_cache import FileMediaCache
from .memory_media_cache import MemoryMediaCache
from .search_result_cache import SearchResultCache
from .tiered_media_cache import TieredMediaCache

__all__ = [
    "FileMediaCache",
    "MemoryMediaCache",
    "SearchResultCache",
    "TieredMediaCache",
]
