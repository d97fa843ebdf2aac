# 🟡 trackbot/infrastructure/providers/yandex_provider.py
"""
🟡 YandexProvider — пошук і завантаження через api.music.yandex.net.

🔹 Авторизація OAuth-токеном; без токена провайдер не реєструється.
🔹 Посилання на файл: download-info → host/path/ts/s → підписаний `get-mp3` URL.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                           # 🌐 Винятки HTTP-клієнта

# 🔠 Системні імпорти
import hashlib                                                         # 🔐 md5-підпис посилання
import json                                                            # 📄 JSON-варіант download-info
import logging                                                         # 🧾 Логування
import xml.etree.ElementTree as ElementTree                            # 🧾 XML-варіант download-info
from contextlib import asynccontextmanager                             # 🧰 Контекст стріму
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional   # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import ProviderTag, TrackEntry, TrackMetadata, TrackReference
from trackbot.domain.music.interfaces import IProgressSink, ResolvedStream
from trackbot.errors.custom_errors import ProviderUnavailable, TrackNotFound
from trackbot.shared.utils.logger import LOG_NAME
from .base import BaseHttpProvider, first_artist_name

logger = logging.getLogger(f"{LOG_NAME}.providers.yandex")

SIGN_SALT = "XGRlBW9FXlekgbPrRHuSiA"
TRACK_PAGE = "https://music.yandex.ru"


def sign_download_path(path: str, secret: str) -> str:
    """md5(сіль + path без першого `/` + s)."""
    return hashlib.md5(f"{SIGN_SALT}{path[1:]}{secret}".encode("utf-8")).hexdigest()


class YandexProvider(BaseHttpProvider):
    """🟡 Бекенд Яндекс Музики."""

    tag = ProviderTag.YANDEX

    def __init__(
        self,
        token: str,
        *,
        base_url: str = "https://api.music.yandex.net",
        cover_size: str = "400x400",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._cover_size = cover_size

    def _default_headers(self) -> Dict[str, str]:
        return {"Authorization": f"OAuth {self._token}"}

    # ================================
    # 🔎 ПОШУК
    # ================================
    async def search(self, query: str, page: int = 0, *, catalog: Optional[str] = None) -> List[TrackEntry]:
        data = await self._get_json(
            f"{self._base_url}/search",
            params={"text": query, "type": "track", "page": page, "nocorrect": "false"},
        )
        tracks = (((data or {}).get("result") or {}).get("tracks") or {}).get("results") or []
        entries = [entry for entry in (self._parse_track(item) for item in tracks) if entry is not None]
        logger.debug("🔎 yandex search %r → %d", query, len(entries))
        return entries

    def _parse_track(self, item: Mapping[str, Any]) -> Optional[TrackEntry]:
        track_id = str(item.get("id") or "").strip()
        if not track_id:
            return None
        if item.get("available") is False:                             # 🚫 Недоступні для прослуховування
            return None
        albums = item.get("albums") or []
        album_id = albums[0].get("id") if albums else None
        url = f"{TRACK_PAGE}/album/{album_id}/track/{track_id}" if album_id else f"{TRACK_PAGE}/track/{track_id}"
        cover_uri = item.get("coverUri") or (albums[0].get("coverUri") if albums else None)
        cover_url = f"https://{cover_uri.replace('%%', self._cover_size)}" if cover_uri else None
        reference = TrackReference(
            provider_id=track_id,
            provider=self.tag,
            source_url=url,
            cover_url=cover_url,
        )
        metadata = TrackMetadata(
            title=str(item.get("title") or track_id),
            artist=first_artist_name(item.get("artists")),
            duration_ms=int(item.get("durationMs") or 0),
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
        direct_url = await self._resolve_direct_url(entry.reference.provider_id)
        async with self._open_stream(direct_url, default_content_type="audio/mpeg") as resolved:
            yield resolved

    async def _resolve_direct_url(self, track_id: str) -> str:
        info = await self._get_json(f"{self._base_url}/tracks/{track_id}/download-info")
        variants = [v for v in ((info or {}).get("result") or []) if v.get("downloadInfoUrl")]
        if not variants:
            raise TrackNotFound(provider=self.tag.value, details=f"no download-info for {track_id}")
        mp3 = [v for v in variants if v.get("codec") == "mp3"] or variants
        best = max(mp3, key=lambda v: int(v.get("bitrateInKbps") or 0))

        client = await self._ensure_client()
        try:
            response = await client.get(best["downloadInfoUrl"], params={"format": "json"}, headers=self._default_headers())
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise self._translate(exc) from exc
        fields = _parse_download_info(response.text)
        try:
            host, path, ts, secret = fields["host"], fields["path"], fields["ts"], fields["s"]
        except KeyError as exc:
            raise ProviderUnavailable(provider=self.tag.value, details=f"download-info misses {exc}") from exc
        return f"https://{host}/get-mp3/{sign_download_path(path, secret)}/{ts}{path}"


def _parse_download_info(body: str) -> Dict[str, str]:
    """download-info приходить як JSON (format=json) або як XML."""
    text = (body or "").strip()
    if text.startswith("{"):
        try:
            data = json.loads(text)
        except ValueError:
            return {}
        return {key: str(value) for key, value in data.items() if value is not None}
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError:
        return {}
    return {child.tag: (child.text or "") for child in root}


__all__ = ["YandexProvider", "sign_download_path"]
