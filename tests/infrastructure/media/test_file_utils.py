"""
🧪 test_file_utils.py — імена файлів, MIME-розширення, запис потоку
"""

from pathlib import Path

import pytest

from trackbot.infrastructure.media import clean_name, content_type_for, extension_for, save_stream


def test_clean_name_strips_unsafe_characters():
    assert clean_name('AC/DC - Back in Black?*"') == "ACDC - Back in Black"
    assert clean_name("  ...  ") == "track"
    assert clean_name("a" * 300) == "a" * 120


def test_clean_name_keeps_unicode_and_brackets():
    assert clean_name("Океан Ельзи - Обійми (Live) [2020]") == "Океан Ельзи - Обійми (Live) [2020]"


@pytest.mark.parametrize(
    ("content_type", "filename", "expected"),
    [
        ("audio/flac", None, ".flac"),
        ("AUDIO/MPEG", None, ".mp3"),
        ("application/octet-stream", "song.OGG", ".ogg"),
        (None, None, ".bin"),
    ],
)
def test_extension_for(content_type, filename, expected):
    assert extension_for(content_type, filename) == expected


def test_content_type_for_known_and_default():
    assert content_type_for(Path("x.m4a")) == "audio/mp4"
    assert content_type_for(Path("x.unknownext"), default="audio/flac") == "audio/flac"


@pytest.mark.asyncio
async def test_save_stream_writes_all_chunks(tmp_path):
    async def chunks():
        yield b"abc"
        yield b""
        yield b"def"

    target = tmp_path / "out.bin"
    written = await save_stream(chunks(), target)

    assert written == 6
    assert target.read_bytes() == b"abcdef"
