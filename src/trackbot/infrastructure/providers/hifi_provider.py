# 🎼 trackbot/infrastructure/providers/hifi_provider.py
"""
🎼 HifiProvider — REST-проксі lossless-каталогу (`/search/`, `/track/`).

🔹 Пошук: `{base}/search/?s=<запит>`; відповідь — `items` з треками.
🔹 Стрім: `{base}/track/?id=<id>&quality=<якість>` повертає пряме `OriginalTrackUrl`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування
from contextlib import asynccontextmanager                             # 🧰 Контекст стріму
from typing import Any, AsyncIterator, Iterable, List, Mapping, Optional  # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import ProviderTag, TrackEntry, TrackMetadata, TrackReference
from trackbot.domain.music.interfaces import IProgressSink, ResolvedStream
from trackbot.errors.custom_errors import TrackNotFound
from trackbot.shared.utils.logger import LOG_NAME
from .base import BaseHttpProvider, first_artist_name

logger = logging.getLogger(f"{LOG_NAME}.providers.hifi")

TRACK_PAGE = "https://tidal.com/browse/track"
COVER_TEMPLATE = "https://resources.tidal.com/images/{path}/640x640.jpg"
PAGE_SIZE = 25


class HifiProvider(BaseHttpProvider):
    """🎼 Бекенд Hifi (lossless, FLAC)."""

    tag = ProviderTag.HIFI

    def __init__(self, base_url: str, *, quality: str = "LOSSLESS", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._base_url = base_url.rstrip("/")
        self._quality = quality

    # ================================
    # 🔎 ПОШУК
    # ================================
    async def search(self, query: str, page: int = 0, *, catalog: Optional[str] = None) -> List[TrackEntry]:
        data = await self._get_json(
            f"{self._base_url}/search/",
            params={"s": query, "offset": page * PAGE_SIZE, "limit": PAGE_SIZE},
        )
        entries = [entry for entry in (self._parse_track(item) for item in _items(data)) if entry is not None]
        logger.debug("🔎 hifi search %r → %d", query, len(entries))
        return entries

    def _parse_track(self, item: Mapping[str, Any]) -> Optional[TrackEntry]:
        track_id = str(item.get("id") or "").strip()
        if not track_id:
            return None
        artists = item.get("artists") or ([item["artist"]] if item.get("artist") else [])
        cover_id = ((item.get("album") or {}).get("cover") or "").strip()
        reference = TrackReference(
            provider_id=track_id,
            provider=self.tag,
            source_url=str(item.get("url") or f"{TRACK_PAGE}/{track_id}").replace("http://", "https://"),
            cover_url=COVER_TEMPLATE.format(path=cover_id.replace("-", "/")) if cover_id else None,
        )
        metadata = TrackMetadata(
            title=str(item.get("title") or track_id),
            artist=first_artist_name(artists),
            duration_ms=int(item.get("duration") or 0) * 1000,
        )
        return TrackEntry(reference=reference, metadata=metadata)

    # ================================
    # ⬇️ СТРІМ
    # ================================
    @asynccontextmanager
    async def stream(
        self,
        entry: TrackEntry,
        progress: Optional[IProgressSink] = None,
    ) -> AsyncIterator[ResolvedStream]:
        track_id = entry.reference.provider_id
        data = await self._get_json(f"{self._base_url}/track/", params={"id": track_id, "quality": self._quality})
        direct_url = _find_original_url(data)
        if not direct_url:
            raise TrackNotFound(provider=self.tag.value, details=f"no OriginalTrackUrl for {track_id}")
        async with self._open_stream(direct_url, default_content_type="audio/flac") as resolved:
            yield resolved


def _items(data: Any) -> Iterable[Mapping[str, Any]]:
    if isinstance(data, list):                                         # 🧩 Деякі інстанси віддають [ {items: …} ]
        data = next((d for d in data if isinstance(d, Mapping) and "items" in d), {})
    if not isinstance(data, Mapping):
        return []
    if "items" not in data and isinstance(data.get("data"), Mapping):
        data = data["data"]
    return [item for item in data.get("items") or [] if isinstance(item, Mapping)]


def _find_original_url(data: Any) -> Optional[str]:
    candidates = data if isinstance(data, list) else [data]
    for candidate in candidates:
        if isinstance(candidate, Mapping) and candidate.get("OriginalTrackUrl"):
            return str(candidate["OriginalTrackUrl"])
    return None


__all__ = ["HifiProvider"]
