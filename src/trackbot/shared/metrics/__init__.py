# 📊 trackbot/shared/metrics/__init__.py
"""
📊 Пакет метрик Prometheus для застосунку.

🔹 Лічильники кешу, отримання та доставки треків.
🔹 Легкий bootstrap експортер `/metrics`.
"""

from __future__ import annotations

# 🎧 Метрики пайплайна
from .music import (
    ACQUISITION_FAILURES,
    ACQUISITION_LATENCY,
    DELIVERY_OUTCOMES,
    MEDIA_CACHE_HITS,
    MEDIA_CACHE_MISSES,
    STALE_SELECTIONS,
)

# 🚀 Експортер Prometheus
from .exporters import maybe_start_prometheus

# ================================
# 📦 ЕКСПОРТ ПАКЕТУ
# ================================
__all__ = [
    "MEDIA_CACHE_HITS",
    "MEDIA_CACHE_MISSES",
    "ACQUISITION_FAILURES",
    "ACQUISITION_LATENCY",
    "DELIVERY_OUTCOMES",
    "STALE_SELECTIONS",
    "maybe_start_prometheus",
]
