# 🎚️ trackbot/infrastructure/media/__init__.py
"""
🎚️ Робота з медіафайлами: запис потоків, обкладинки, тегування ffmpeg.
"""

from .artwork_downloader import ArtworkDownloader
from .ffmpeg_processor import FfmpegProcessor
from .file_utils import clean_name, content_type_for, extension_for, save_stream

__all__ = [
    "ArtworkDownloader",
    "FfmpegProcessor",
    "clean_name",
    "content_type_for",
    "extension_for",
    "save_stream",
]
