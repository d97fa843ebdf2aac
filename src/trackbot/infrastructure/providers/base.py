# 🌐 trackbot/infrastructure/providers/base.py
"""
🌐 Спільна основа HTTP-провайдерів (httpx.AsyncClient).

🔹 Ледача ініціалізація клієнта та коректне закриття (`aclose`).
🔹 Уніфікований мапінг збоїв: 401/403 → `ProviderUnauthenticated`, 404 → `TrackNotFound`,
   решта мережевих/HTTP/JSON помилок → `ProviderUnavailable`.
🔹 `_open_stream` — контекст-менеджер, що віддає `ResolvedStream` поверх стрімінгової відповіді.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                           # 🌐 Асинхронний HTTP-клієнт

# 🔠 Системні імпорти
import asyncio                                                         # 🔐 Lock для ледачої ініціалізації
import logging                                                         # 🧾 Логування
from contextlib import asynccontextmanager                             # 🧰 Контекст для стріму
from typing import Any, AsyncIterator, Dict, Iterable, Mapping, Optional  # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import PLACEHOLDER_ARTIST, ProviderTag
from trackbot.domain.music.interfaces import IProgressSink, ResolvedStream
from trackbot.errors.custom_errors import ProviderUnauthenticated, ProviderUnavailable, TrackNotFound
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.providers")

DEFAULT_TIMEOUT_SEC = 30.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) trackbot/0.1"


def first_artist_name(artists: Optional[Iterable[Mapping[str, Any]]], *, fallback: str = PLACEHOLDER_ARTIST) -> str:
    """Імʼя першого виконавця; для треків без виконавців — заглушка."""
    for artist in artists or ():
        name = str((artist or {}).get("name") or "").strip()
        if name:
            return name
    return fallback


class BaseHttpProvider:
    """🌐 База для провайдерів: клієнт, JSON-запити, стрім і мапінг помилок."""

    tag: ProviderTag

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._timeout = float(timeout)
        self._user_agent = user_agent
        self._client: Optional[httpx.AsyncClient] = client
        self._init_lock = asyncio.Lock()

    # ================================
    # 🔌 ЖИТТЄВИЙ ЦИКЛ КЛІЄНТА
    # ================================
    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is not None and not self._client.is_closed:
            return self._client
        async with self._init_lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.AsyncClient(
                    timeout=self._timeout,
                    follow_redirects=True,
                    headers={"User-Agent": self._user_agent},
                )
                logger.debug("🔧 HTTP-клієнт %s створено", self.tag.value)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.info("🔌 HTTP-клієнт %s закрито", self.tag.value)

    def _default_headers(self) -> Dict[str, str]:
        return {}

    # ================================
    # 🧭 МАПІНГ ПОМИЛОК
    # ================================
    def _translate(self, exc: Exception) -> ProviderUnavailable:
        provider = self.tag.value
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            details = f"HTTP {status} for {exc.request.url}"
            if status in (401, 403):
                return ProviderUnauthenticated(provider=provider, details=details, status_code=status)
            if status == 404:
                return TrackNotFound(provider=provider, details=details, status_code=status)
            return ProviderUnavailable(provider=provider, details=details, status_code=status)
        if isinstance(exc, httpx.HTTPError):
            return ProviderUnavailable(provider=provider, details=f"{type(exc).__name__}: {exc}")
        return ProviderUnavailable(provider=provider, details=f"invalid response: {exc}")

    # ================================
    # 📡 ЗАПИТИ
    # ================================
    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        client = await self._ensure_client()
        headers = {**self._default_headers(), **(kwargs.pop("headers", None) or {})}
        try:
            response = await client.request(method, url, headers=headers, **kwargs)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            translated = self._translate(exc)
            logger.warning("⚠️ %s %s failed: %s", self.tag.value, method, translated.details)
            raise translated from exc

    async def _get_json(self, url: str, **kwargs: Any) -> Any:
        return await self._request_json("GET", url, **kwargs)

    async def _post_json(self, url: str, **kwargs: Any) -> Any:
        return await self._request_json("POST", url, **kwargs)

    @asynccontextmanager
    async def _open_stream(
        self,
        url: str,
        *,
        default_content_type: str,
        default_filename: Optional[str] = None,
    ) -> AsyncIterator[ResolvedStream]:
        client = await self._ensure_client()
        try:
            async with client.stream("GET", url, headers=self._default_headers()) as response:
                response.raise_for_status()
                content_type = (response.headers.get("content-type") or "").split(";")[0].strip()
                if not content_type or content_type in ("application/octet-stream", "binary/octet-stream"):
                    content_type = default_content_type
                yield ResolvedStream(
                    chunks=response.aiter_bytes(),
                    content_type=content_type,
                    filename=_filename_from_disposition(response.headers.get("content-disposition")) or default_filename,
                )
        except httpx.HTTPError as exc:
            translated = self._translate(exc)
            logger.warning("⚠️ %s stream failed: %s", self.tag.value, translated.details)
            raise translated from exc

    # ================================
    # 📣 ПРОГРЕС
    # ================================
    @staticmethod
    async def _emit(progress: Optional[IProgressSink], text: str) -> None:
        if progress is not None:
            await progress.send(text)


def _filename_from_disposition(value: Optional[str]) -> Optional[str]:
    """Витягує `filename=` з Content-Disposition (без шляхів)."""
    if not value:
        return None
    for part in value.split(";"):
        key, _, raw = part.strip().partition("=")
        if key.lower() == "filename" and raw:
            name = raw.strip().strip('"').replace("/", "_").replace("\\", "_")
            return name or None
    return None


__all__ = ["BaseHttpProvider", "first_artist_name", "DEFAULT_TIMEOUT_SEC", "DEFAULT_USER_AGENT"]
