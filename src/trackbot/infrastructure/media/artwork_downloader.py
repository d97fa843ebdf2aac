# 🖼️ trackbot/infrastructure/media/artwork_downloader.py
"""
🖼️ Завантаження обкладинок треків.

🔹 Стримить відповідь через `httpx`, перевіряє `Content-Type` і сигнатуру JPEG/PNG/WebP.
🔹 Обмежує розмір файлу та повертає шлях разом із визначеним MIME-типом.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles                                                        # 📂 Асинхронний запис
import httpx                                                           # 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import asyncio                                                         # 🔐 Lock ініціалізації
import logging                                                         # 🧾 Логування
from pathlib import Path                                               # 📂 Шляхи
from typing import Optional, Tuple                                     # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.errors.custom_errors import ProviderUnavailable
from trackbot.shared.utils.logger import LOG_NAME
from .file_utils import CONTENT_TYPE_EXTENSIONS

logger = logging.getLogger(f"{LOG_NAME}.artwork")

MAX_ARTWORK_BYTES = 10 * 1024 * 1024
MAGIC_SIGNATURES: Tuple[Tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8", "image/jpeg"),
    (b"RIFF", "image/webp"),
)


def sniff_image_type(head: bytes) -> Optional[str]:
    for signature, content_type in MAGIC_SIGNATURES:
        if head.startswith(signature):
            if content_type == "image/webp" and head[8:12] != b"WEBP":
                return None
            return content_type
    return None


class ArtworkDownloader:
    """🖼️ Завантажує обкладинку у вказаний каталог."""

    def __init__(self, *, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None) -> None:
        self._timeout = float(timeout)
        self._client = client
        self._init_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._init_lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def download(self, url: str, dest_dir: Path, stem: str = "cover") -> Tuple[Path, str]:
        """
        Returns:
            (шлях, content_type)

        Raises:
            ProviderUnavailable: мережевий збій, не-зображення або завеликий файл.
        """
        client = await self._ensure_client()
        tmp_path = dest_dir / f"{stem}.part"
        try:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                written = 0
                head = b""
                async with aiofiles.open(tmp_path, "wb") as out:
                    async for chunk in response.aiter_bytes():
                        if len(head) < 16:
                            head += chunk[: 16 - len(head)]
                        written += len(chunk)
                        if written > MAX_ARTWORK_BYTES:
                            raise ProviderUnavailable(details=f"artwork too large: {url}")
                        await out.write(chunk)
        except httpx.HTTPError as exc:
            tmp_path.unlink(missing_ok=True)
            raise ProviderUnavailable(details=f"artwork download failed: {exc}") from exc
        except ProviderUnavailable:
            tmp_path.unlink(missing_ok=True)
            raise

        content_type = sniff_image_type(head)
        if content_type is None:
            tmp_path.unlink(missing_ok=True)
            raise ProviderUnavailable(details=f"artwork is not an image: {url}")
        final_path = dest_dir / f"{stem}{CONTENT_TYPE_EXTENSIONS[content_type]}"
        tmp_path.replace(final_path)
        logger.debug("🖼️ Artwork saved %s (%d bytes)", final_path, written)
        return final_path, content_type


__all__ = ["ArtworkDownloader", "sniff_image_type"]
