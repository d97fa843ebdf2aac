# 🌍 trackbot/infrastructure/providers/lucida_provider.py
"""
🌍 LucidaProvider — агрегатор, що сам ходить у каталоги (tidal, qobuz, deezer …).

🔹 Пошук: спершу список країн каталогу, далі пошук у першій країні.
🔹 Завантаження: по черзі для кожної країни — handoff-запит, опитування воркера до `completed`,
   потім стрім `/download`. Кожен крок шле текст у канал прогресу користувача.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                         # ⏱️ Пауза між опитуваннями
import logging                                                         # 🧾 Логування
from contextlib import asynccontextmanager                             # 🧰 Контекст стріму
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence  # 🧰 Типи
from urllib.parse import urlencode                                     # 🔗 Вкладений URL пошуку

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import ProviderTag, TrackEntry, TrackMetadata, TrackReference
from trackbot.domain.music.interfaces import IProgressSink, ResolvedStream
from trackbot.errors.custom_errors import ProviderUnavailable
from trackbot.shared.utils.logger import LOG_NAME
from .base import BaseHttpProvider, first_artist_name

logger = logging.getLogger(f"{LOG_NAME}.providers.lucida")

DEFAULT_CATALOGS: Sequence[str] = ("tidal", "qobuz", "deezer", "soundcloud", "amazon")
DEFAULT_FILENAME = "audio.flac"
DEFAULT_CONTENT_TYPE = "audio/flac"


class LucidaProvider(BaseHttpProvider):
    """🌍 Бекенд-агрегатор Lucida."""

    tag = ProviderTag.LUCIDA

    def __init__(
        self,
        *,
        base_url: str = "https://lucida.to",
        worker_url_template: str = "https://{server}.lucida.to",
        default_catalog: str = "tidal",
        catalogs: Sequence[str] = DEFAULT_CATALOGS,
        poll_interval: float = 2.0,
        poll_timeout: float = 180.0,
        progress_template: str = "{title}\n{message}",
        token: Optional[str] = None,
        token_expiry: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._base_url = base_url.rstrip("/")
        self._worker_url_template = worker_url_template
        self._default_catalog = default_catalog
        self._catalogs = tuple(catalogs)
        self._poll_interval = float(poll_interval)
        self._poll_timeout = float(poll_timeout)
        self._progress_template = progress_template
        self._token = token
        self._token_expiry = token_expiry

    @property
    def catalogs(self) -> Sequence[str]:
        return self._catalogs

    @property
    def default_catalog(self) -> str:
        return self._default_catalog

    # ================================
    # 🌍 КРАЇНИ
    # ================================
    async def fetch_countries(self, catalog: str) -> List[str]:
        data = await self._get_json(f"{self._base_url}/api/load", params={"url": f"/api/countries?service={catalog}"})
        countries = [str(c.get("code")) for c in (data or {}).get("countries") or [] if c.get("code")]
        logger.debug("🌍 lucida %s countries: %s", catalog, countries)
        return countries

    async def _countries_or_fail(self, catalog: str) -> List[str]:
        countries = await self.fetch_countries(catalog)
        if not countries:
            raise ProviderUnavailable(provider=self.tag.value, details=f"no countries for {catalog}")
        return countries

    # ================================
    # 🔎 ПОШУК
    # ================================
    async def search(self, query: str, page: int = 0, *, catalog: Optional[str] = None) -> List[TrackEntry]:
        catalog = catalog or self._default_catalog
        countries = await self._countries_or_fail(catalog)
        data = await self._get_json(
            f"{self._base_url}/api/load",
            params={"url": "/api/search?" + urlencode({"service": catalog, "country": countries[0], "query": query})},
        )
        tracks = (((data or {}).get("results") or {}).get("tracks")) or []
        entries = [entry for entry in (self._parse_track(item, catalog) for item in tracks) if entry is not None]
        logger.debug("🔎 lucida %s search %r → %d", catalog, query, len(entries))
        return entries

    def _parse_track(self, item: Mapping[str, Any], catalog: str) -> Optional[TrackEntry]:
        url = str(item.get("url") or "").strip()
        if not url:
            return None
        reference = TrackReference(
            provider_id=str(item.get("id") or url),
            provider=self.tag,
            source_url=url,
            cover_url=_artwork_url(item),
            catalog=catalog,
        )
        metadata = TrackMetadata(
            title=str(item.get("title") or url),
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
        catalog = entry.reference.catalog or self._default_catalog
        countries = await self._countries_or_fail(catalog)

        download_url: Optional[str] = None
        last_error: Optional[ProviderUnavailable] = None
        for country in countries:                                      # 🔁 Пробуємо всі регіони по черзі
            try:
                download_url = await self._negotiate(entry, country, progress)
                break
            except ProviderUnavailable as exc:
                last_error = exc
                logger.info("🌍 lucida %s/%s failed: %s", catalog, country, exc.details)
        if download_url is None:
            raise ProviderUnavailable(
                provider=self.tag.value,
                details=f"all {len(countries)} countries failed for {entry.source_url}",
            ) from last_error

        async with self._open_stream(
            download_url,
            default_content_type=DEFAULT_CONTENT_TYPE,
            default_filename=DEFAULT_FILENAME,
        ) as resolved:
            yield resolved

    async def _negotiate(self, entry: TrackEntry, country: str, progress: Optional[IProgressSink]) -> str:
        """Handoff + опитування воркера. Повертає URL готового файлу."""
        await self._say(progress, entry, f"Запит до сервера ({country})")
        payload: Dict[str, Any] = {
            "url": entry.source_url,
            "metadata": True,
            "compat": False,
            "private": True,
            "handoff": True,
            "downscale": "original",
            "account": {"type": "country", "id": country},
            "upload": {"enabled": False},
        }
        if self._token:
            payload["token"] = {"primary": self._token, "expiry": self._token_expiry}
        data = await self._post_json(f"{self._base_url}/api/load", params={"url": "/api/fetch/stream/v2"}, json=payload)
        if not data or not data.get("success") or not data.get("handoff") or not data.get("server"):
            raise ProviderUnavailable(provider=self.tag.value, details=f"handoff rejected: {(data or {}).get('error')}")

        request_url = f"{self._worker_url_template.format(server=data['server'])}/api/fetch/request/{data['handoff']}"
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._poll_timeout
        last_message: Optional[str] = None
        while True:
            status = await self._get_json(request_url) or {}
            message = status.get("message")
            if message and message != last_message:                    # 📣 Лише нові повідомлення
                last_message = message
                await self._say(progress, entry, str(message))
            state = status.get("status")
            if state == "completed":
                return f"{request_url}/download"
            if state == "error" or status.get("success") is False:
                raise ProviderUnavailable(provider=self.tag.value, details=f"worker error: {message}")
            if loop.time() >= deadline:
                raise ProviderUnavailable(provider=self.tag.value, details="worker poll timeout")
            await asyncio.sleep(self._poll_interval)

    async def _say(self, progress: Optional[IProgressSink], entry: TrackEntry, message: str) -> None:
        await self._emit(progress, self._progress_template.format(title=entry.metadata.title, message=message))


def _artwork_url(item: Mapping[str, Any]) -> Optional[str]:
    album = item.get("album") or {}
    artworks = album.get("coverArtwork") or item.get("coverArtwork") or []
    urls = [a.get("url") for a in artworks if isinstance(a, Mapping) and a.get("url")]
    return str(urls[-1]) if urls else None                             # 🖼️ Найбільша — остання


__all__ = ["LucidaProvider", "DEFAULT_CATALOGS"]
