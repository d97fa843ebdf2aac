# ⬇️ trackbot/infrastructure/music/acquisition_pipeline.py
"""
⬇️ AcquisitionPipeline — кеш → провайдер → ffmpeg → вивантаження → кеш, окремо для треку і обкладинки.

🔹 Без `refresh` влучання в кеш повертається одразу: без мережі й без повідомлень прогресу.
🔹 Усі проміжні файли живуть у тимчасовому каталозі, який прибирається на будь-якому виході.
🔹 Запис у кеш відбувається лише після повністю успішного вивантаження.
🔹 Будь-який збій етапу → один `AcquisitionFailed` із причиною в `__cause__`.
🔹 Обкладинка живе в `artwork_dir`; трек бере її звідти для тегів і мініатюри.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                         # 🧵 to_thread для файлових операцій
import logging                                                         # 🧾 Логування
import shutil                                                          # 📂 Копія обкладинки
import tempfile                                                        # 🗂️ Тимчасовий робочий каталог
import time                                                            # ⏱️ Вимір тривалості
from dataclasses import replace                                        # 🧱 Оновлення frozen DTO
from enum import Enum                                                  # 🏷️ Етапи
from pathlib import Path                                               # 📂 Шляхи
from typing import Dict, Optional, Union                               # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.ui import static_messages as msg
from trackbot.domain.music.entities import AssetKind, CachedMediaHandle, TrackEntry
from trackbot.domain.music.interfaces import IMediaCache, IMediaProcessor, IMediaTransport, IProgressSink
from trackbot.domain.music.keys import cache_key
from trackbot.errors.custom_errors import AcquisitionFailed, ProviderUnavailable
from trackbot.infrastructure.media.artwork_downloader import ArtworkDownloader
from trackbot.infrastructure.media.file_utils import content_type_for, extension_for, save_stream
from trackbot.infrastructure.providers.registry import ProviderRegistry
from trackbot.shared.metrics import ACQUISITION_FAILURES, ACQUISITION_LATENCY, MEDIA_CACHE_HITS, MEDIA_CACHE_MISSES
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.pipeline")

ARTWORK_DISCRIMINATOR = "artwork"
THUMBNAIL_SUFFIXES = (".jpg", ".jpeg")                                 # 🖼️ Telegram приймає мініатюри лише у JPEG


# ================================
# 🏷️ ЕТАПИ
# ================================
class Stage(str, Enum):
    FETCH = "fetch"
    FETCH_COVER = "fetch_cover"
    PROCESS = "process"
    UPLOAD = "upload"


STAGE_MESSAGES: Dict[Stage, str] = {
    Stage.FETCH: msg.STAGE_FETCH,
    Stage.FETCH_COVER: msg.STAGE_FETCH_COVER,
    Stage.PROCESS: msg.STAGE_PROCESS,
    Stage.UPLOAD: msg.STAGE_UPLOAD,
}


class AcquisitionPipeline:
    """⬇️ Отримує один ассет і повертає його `CachedMediaHandle`."""

    def __init__(
        self,
        cache: IMediaCache,
        registry: ProviderRegistry,
        processor: IMediaProcessor,
        transport: IMediaTransport,
        artwork: ArtworkDownloader,
        *,
        artwork_dir: Union[str, Path],
        work_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        self._cache = cache
        self._registry = registry
        self._processor = processor
        self._transport = transport
        self._artwork = artwork
        self._artwork_dir = Path(artwork_dir)
        self._work_dir = str(work_dir) if work_dir else None

    # ================================
    # 🎧 ТРЕК
    # ================================
    async def acquire_track(
        self,
        entry: TrackEntry,
        *,
        refresh: bool = False,
        progress: Optional[IProgressSink] = None,
        cover: Optional[CachedMediaHandle] = None,
        fetch_cover: bool = True,
    ) -> CachedMediaHandle:
        """
        `cover` — уже отриманий ассет обкладинки; його локальна копія йде в теги.
        `fetch_cover=False` — не завантажувати обкладинку самостійно, якщо `cover` немає.
        """
        key = entry.source_url
        if not refresh:
            cached = await self._cache.get(key)
            if cached is not None:
                MEDIA_CACHE_HITS.labels(asset=AssetKind.TRACK.value).inc()
                logger.debug("🧊 Track cache hit %s", key)
                return cached
        MEDIA_CACHE_MISSES.labels(asset=AssetKind.TRACK.value).inc()

        started = time.perf_counter()
        try:
            with tempfile.TemporaryDirectory(prefix="trackbot-", dir=self._work_dir) as tmp:
                handle = await self._fetch_track(entry, Path(tmp), progress, cover, fetch_cover)
        except Exception as exc:  # noqa: BLE001
            ACQUISITION_FAILURES.labels(asset=AssetKind.TRACK.value).inc()
            logger.warning("❌ Track acquisition failed for %s: %s", key, exc)
            raise AcquisitionFailed(AssetKind.TRACK.value, key, details=str(exc)) from exc

        ACQUISITION_LATENCY.labels(asset=AssetKind.TRACK.value).observe(time.perf_counter() - started)
        await self._cache.put(key, handle)
        logger.info("✅ Track acquired %s (refresh=%s)", entry.metadata.display_name, refresh)
        return handle

    async def _fetch_track(
        self,
        entry: TrackEntry,
        work: Path,
        progress: Optional[IProgressSink],
        cover_handle: Optional[CachedMediaHandle],
        fetch_cover: bool,
    ) -> CachedMediaHandle:
        await self._stage(progress, Stage.FETCH)
        provider = self._registry.get(entry.reference.provider)
        async with provider.stream(entry, progress) as resolved:
            raw = work / f"source{extension_for(resolved.content_type, resolved.filename)}"
            size = await save_stream(resolved.chunks, raw)
            content_type = resolved.content_type
        logger.debug("⬇️ %s: %d bytes (%s)", entry.source_url, size, content_type)

        cover: Optional[Path] = None
        if entry.reference.cover_url:
            await self._stage(progress, Stage.FETCH_COVER)
            if cover_handle is not None and cover_handle.local_path:
                cover = Path(cover_handle.local_path)
            elif fetch_cover:
                cover = await self._tagging_cover(entry.reference.cover_url, work)

        await self._stage(progress, Stage.PROCESS)
        tagged = await self._processor.tag(raw, work, entry.metadata.display_name, entry.metadata, cover)

        await self._stage(progress, Stage.UPLOAD)
        thumbnail = cover if cover is not None and cover.suffix.lower() in THUMBNAIL_SUFFIXES else None
        final_type = content_type_for(tagged, default=content_type)
        file_id = await self._transport.upload(tagged, final_type, metadata=entry.metadata, thumbnail=thumbnail)
        return CachedMediaHandle(file_id=file_id, content_type=final_type)

    async def _tagging_cover(self, cover_url: str, work: Path) -> Optional[Path]:
        """Разове завантаження обкладинки в робочий каталог; збій → без обкладинки."""
        try:
            path, _ = await self._artwork.download(cover_url, work, "cover")
        except ProviderUnavailable as exc:
            logger.info("🖼️ Tagging cover skipped for %s: %s", cover_url, exc.details)
            return None
        return path

    # ================================
    # 🖼️ ОБКЛАДИНКА
    # ================================
    async def acquire_cover(self, entry: TrackEntry, *, refresh: bool = False) -> Optional[CachedMediaHandle]:
        """
        Обкладинка «вивантажується» у довговічне сховище `artwork_dir`: дескриптор — шлях до файлу.

        Повертає `None`, якщо в треку немає обкладинки.
        """
        url = entry.reference.cover_url
        if not url:
            return None
        if not refresh:
            cached = await self._cache.get(url)
            if cached is not None:
                local = Path(cached.local_path or cached.file_id)     # 💾 Файловий ярус не зберігає local_path
                if await asyncio.to_thread(local.is_file):
                    MEDIA_CACHE_HITS.labels(asset=AssetKind.COVER.value).inc()
                    return replace(cached, local_path=str(local))
                logger.info("🖼️ Cached artwork for %s is gone, refetching", url)
        MEDIA_CACHE_MISSES.labels(asset=AssetKind.COVER.value).inc()

        started = time.perf_counter()
        try:
            await asyncio.to_thread(self._artwork_dir.mkdir, parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(prefix="trackbot-cover-", dir=self._work_dir) as tmp:
                path, content_type = await self._artwork.download(url, Path(tmp), "cover")
                durable = self._artwork_dir / f"{self.artwork_stem(url)}{path.suffix}"
                await asyncio.to_thread(shutil.copyfile, path, durable)
        except Exception as exc:  # noqa: BLE001
            ACQUISITION_FAILURES.labels(asset=AssetKind.COVER.value).inc()
            logger.info("🖼️ Cover acquisition failed for %s: %s", url, exc)
            raise AcquisitionFailed(AssetKind.COVER.value, url, details=str(exc)) from exc

        ACQUISITION_LATENCY.labels(asset=AssetKind.COVER.value).observe(time.perf_counter() - started)
        handle = CachedMediaHandle(file_id=str(durable), content_type=content_type, local_path=str(durable))
        return await self._cache.put(url, handle)

    @staticmethod
    def artwork_stem(url: str) -> str:
        return cache_key(url, ARTWORK_DISCRIMINATOR)

    # ================================
    # 📣 ПРОГРЕС
    # ================================
    @staticmethod
    async def _stage(progress: Optional[IProgressSink], stage: Stage) -> None:
        if progress is not None:
            await progress.send(STAGE_MESSAGES[stage])


__all__ = ["AcquisitionPipeline", "Stage", "STAGE_MESSAGES"]
