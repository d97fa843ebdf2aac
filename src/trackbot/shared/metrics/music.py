# 📊 trackbot/shared/metrics/music.py
"""
📊 Prometheus-метрики пайплайна отримання треків.

🔹 `MEDIA_CACHE_HITS` / `MEDIA_CACHE_MISSES` — кеш завантажених файлів (label `asset`: track/cover).
🔹 `ACQUISITION_FAILURES` / `ACQUISITION_LATENCY` — збої та тривалість отримання одного ассета.
🔹 `DELIVERY_OUTCOMES` — фінальні стани доставки, `STALE_SELECTIONS` — застарілі вибори inline-результатів.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter, Histogram                      # 📊 Prometheus-метрики

# ================================
# 📊 КЕШ МЕДІА
# ================================
MEDIA_CACHE_HITS = Counter(
    "trackbot_media_cache_hits_total",
    "Media cache hits by asset kind",
    ["asset"],
)

MEDIA_CACHE_MISSES = Counter(
    "trackbot_media_cache_misses_total",
    "Media cache misses (or forced refreshes) by asset kind",
    ["asset"],
)

# ================================
# ⬇️ ОТРИМАННЯ АССЕТІВ
# ================================
ACQUISITION_FAILURES = Counter(
    "trackbot_acquisition_failures_total",
    "Failed asset acquisitions by asset kind",
    ["asset"],
)

ACQUISITION_LATENCY = Histogram(
    "trackbot_acquisition_seconds",
    "Time to fetch, process and upload one asset",
    ["asset"],
)

# ================================
# 📬 ДОСТАВКА
# ================================
DELIVERY_OUTCOMES = Counter(
    "trackbot_delivery_outcomes_total",
    "Terminal delivery states",
    ["state"],
)

STALE_SELECTIONS = Counter(
    "trackbot_stale_selections_total",
    "Chosen inline results whose search entry was already evicted",
)


__all__ = [
    "MEDIA_CACHE_HITS",
    "MEDIA_CACHE_MISSES",
    "ACQUISITION_FAILURES",
    "ACQUISITION_LATENCY",
    "DELIVERY_OUTCOMES",
    "STALE_SELECTIONS",
]
