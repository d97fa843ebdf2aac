# 📁 trackbot/infrastructure/media/file_utils.py
"""
📁 Файлові утиліти пайплайна: імена, розширення за MIME та запис потоків на диск.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles                                                        # 📂 Асинхронний запис

# 🔠 Системні імпорти
import mimetypes                                                       # 🧾 Резервне визначення MIME
import re                                                              # 🧹 Очищення імен
from pathlib import Path                                               # 📂 Шляхи
from typing import AsyncIterator, Dict, Optional                       # 🧰 Типи

# ================================
# 🧾 MIME ↔ РОЗШИРЕННЯ
# ================================
CONTENT_TYPE_EXTENSIONS: Dict[str, str] = {
    "audio/flac": ".flac",
    "audio/x-flac": ".flac",
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/mp4": ".m4a",
    "audio/x-m4a": ".m4a",
    "audio/aac": ".m4a",
    "audio/ogg": ".ogg",
    "audio/opus": ".opus",
    "audio/wav": ".wav",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}
EXTENSION_CONTENT_TYPES: Dict[str, str] = {
    ".flac": "audio/flac",
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".opus": "audio/opus",
    ".wav": "audio/wav",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
}
MAX_STEM_LENGTH = 120
_UNSAFE_CHARS = re.compile(r"[^\w\s\-\(\)\[\]\.,&']")


def clean_name(name: str, *, fallback: str = "track") -> str:
    """Прибирає символи, небезпечні для імені файлу; пробіли лишаються для підпису в Telegram."""
    cleaned = _UNSAFE_CHARS.sub("", name or "")
    cleaned = re.sub(r"\s+", " ", cleaned).strip(" .")
    return cleaned[:MAX_STEM_LENGTH] or fallback


def extension_for(content_type: Optional[str], filename: Optional[str] = None) -> str:
    """Розширення за MIME; інакше з імені файлу; інакше `.bin`."""
    if content_type:
        ext = CONTENT_TYPE_EXTENSIONS.get(content_type.lower())
        if ext:
            return ext
    if filename:
        suffix = Path(filename).suffix.lower()
        if suffix:
            return suffix
    guessed = mimetypes.guess_extension(content_type or "") if content_type else None
    return guessed or ".bin"


def content_type_for(path: Path, default: str = "application/octet-stream") -> str:
    ct = EXTENSION_CONTENT_TYPES.get(path.suffix.lower())
    if ct:
        return ct
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or default


async def save_stream(chunks: AsyncIterator[bytes], path: Path) -> int:
    """Записує асинхронний потік байтів у файл; повертає кількість записаних байтів."""
    written = 0
    async with aiofiles.open(path, "wb") as out:
        async for chunk in chunks:
            if chunk:
                await out.write(chunk)
                written += len(chunk)
    return written


__all__ = [
    "CONTENT_TYPE_EXTENSIONS",
    "clean_name",
    "extension_for",
    "content_type_for",
    "save_stream",
]
