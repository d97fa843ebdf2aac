# 🏷️ trackbot/infrastructure/media/ffmpeg_processor.py
"""
🏷️ FfmpegProcessor — тегування та ремукс аудіо через зовнішній `ffmpeg`.

🔹 Аудіо копіюється без перекодування (`-c:a copy`), контейнер зберігається.
🔹 Записує `title` / `artist`; обкладинку вбудовує як `attached_pic`.
🔹 Будь-який збій (немає бінарника, таймаут, ненульовий код) → `ProcessingFailure`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                         # 🧵 Асинхронний subprocess
import logging                                                         # 🧾 Логування
from pathlib import Path                                               # 📂 Шляхи
from typing import List, Optional                                      # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import TrackMetadata
from trackbot.errors.custom_errors import ProcessingFailure
from trackbot.shared.utils.logger import LOG_NAME
from .file_utils import clean_name

logger = logging.getLogger(f"{LOG_NAME}.ffmpeg")

DEFAULT_TIMEOUT_SEC = 120.0
MAX_STDERR_CHARS = 800
MP4_FAMILY = (".m4a", ".mp4")


class FfmpegProcessor:
    """🏷️ `IMediaProcessor` поверх бінарника ffmpeg."""

    def __init__(self, binary: str = "ffmpeg", *, timeout: float = DEFAULT_TIMEOUT_SEC) -> None:
        self._binary = binary
        self._timeout = float(timeout)

    def build_command(self, source: Path, target: Path, metadata: TrackMetadata, cover: Optional[Path] = None) -> List[str]:
        cmd: List[str] = [self._binary, "-y", "-hide_banner", "-loglevel", "error", "-i", str(source)]
        if cover is not None:
            cmd.extend(["-i", str(cover), "-map", "0:a", "-map", "1:v"])
            cmd.extend(["-c:v", "mjpeg" if target.suffix in MP4_FAMILY else "copy"])
            cmd.extend(["-disposition:v:0", "attached_pic"])
        else:
            cmd.extend(["-map", "0:a"])
        cmd.extend(["-c:a", "copy"])
        cmd.extend(["-metadata", f"title={metadata.title}", "-metadata", f"artist={metadata.artist}"])
        if target.suffix == ".mp3":
            cmd.extend(["-id3v2_version", "3"])                        # 🏷️ ID3v2.3 читається всіма плеєрами
        cmd.append(str(target))
        return cmd

    async def tag(
        self,
        source: Path,
        out_dir: Path,
        stem: str,
        metadata: TrackMetadata,
        cover: Optional[Path] = None,
    ) -> Path:
        """
        Повертає шлях до готового файлу `{stem}{розширення джерела}` у `out_dir`.

        Raises:
            ProcessingFailure: ffmpeg відсутній, завис або завершився з помилкою.
        """
        target = out_dir / f"{clean_name(stem)}{source.suffix or '.bin'}"
        if target == source:
            target = out_dir / f"{clean_name(stem)}.tagged{source.suffix}"
        cmd = self.build_command(source, target, metadata, cover)
        logger.debug("🏷️ ffmpeg: %s", " ".join(cmd))

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise ProcessingFailure(details=f"ffmpeg binary not found: {self._binary}") from exc

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            proc.kill()
            await proc.wait()
            raise ProcessingFailure(details=f"ffmpeg timed out after {self._timeout:.0f}s") from exc

        if proc.returncode != 0:
            err = (stderr or b"").decode("utf-8", errors="replace").strip()[:MAX_STDERR_CHARS]
            raise ProcessingFailure(details=f"ffmpeg exited with {proc.returncode}: {err}")
        logger.info("🏷️ Tagged %s", target.name)
        return target


__all__ = ["FfmpegProcessor"]
