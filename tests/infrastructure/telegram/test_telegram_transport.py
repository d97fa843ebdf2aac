"""
🧪 test_telegram_transport.py — вивантаження і редагування inline-повідомлень

Перевіряє:
- Вибір методу Bot API за MIME-типом і повернення `file_id`
- `DeliveryRejected` при збоях вивантаження
- «message is not modified» вважається успіхом, інші збої → False
- Підміну повідомлення на аудіо за `file_id`
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import InlineKeyboardMarkup, InputMediaAudio
from telegram.error import BadRequest, NetworkError

from conftest import make_entry
from trackbot.domain.music.entities import CachedMediaHandle, TrackMetadata
from trackbot.errors.custom_errors import DeliveryRejected
from trackbot.infrastructure.telegram import TelegramTransport
from trackbot.infrastructure.telegram.telegram_transport import PROGRESS_CALLBACK_DATA, progress_keyboard


@pytest.fixture
def bot():
    mock = MagicMock()
    mock.send_audio = AsyncMock(return_value=MagicMock(audio=MagicMock(file_id="A1")))
    mock.send_photo = AsyncMock(return_value=MagicMock(photo=[MagicMock(file_id="small"), MagicMock(file_id="P1")]))
    mock.send_document = AsyncMock(return_value=MagicMock(document=MagicMock(file_id="D1")))
    mock.edit_message_caption = AsyncMock()
    mock.edit_message_media = AsyncMock()
    mock.answer_inline_query = AsyncMock()
    return mock


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "Artist - Song.flac"
    path.write_bytes(b"fLaC")
    return path


def test_progress_keyboard():
    markup = progress_keyboard("Завантажуємо...")
    assert isinstance(markup, InlineKeyboardMarkup)
    button = markup.inline_keyboard[0][0]
    assert button.text == "Завантажуємо..."
    assert button.callback_data == PROGRESS_CALLBACK_DATA
    assert progress_keyboard(None) is None


@pytest.mark.asyncio
async def test_upload_audio_to_storage_chat(bot, audio_file, tmp_path):
    thumb = tmp_path / "cover.jpg"
    thumb.write_bytes(b"\xff\xd8")
    transport = TelegramTransport(bot, -100500)
    metadata = TrackMetadata(title="Song", artist="Artist", duration_ms=181_000)

    file_id = await transport.upload(audio_file, "audio/flac", metadata=metadata, thumbnail=thumb)

    assert file_id == "A1"
    kwargs = bot.send_audio.await_args.kwargs
    assert kwargs["chat_id"] == -100500
    assert kwargs["filename"] == "Artist - Song.flac"
    assert (kwargs["title"], kwargs["performer"], kwargs["duration"]) == ("Song", "Artist", 181)
    assert kwargs["thumbnail"] is not None
    assert kwargs["disable_notification"] is True


@pytest.mark.asyncio
async def test_upload_image_uses_largest_photo(bot, tmp_path):
    path = tmp_path / "cover.png"
    path.write_bytes(b"\x89PNG")

    assert await TelegramTransport(bot, 1).upload(path, "image/png") == "P1"
    bot.send_audio.assert_not_awaited()


@pytest.mark.asyncio
async def test_upload_other_as_document(bot, tmp_path):
    path = tmp_path / "blob.bin"
    path.write_bytes(b"x")

    assert await TelegramTransport(bot, 1).upload(path, "application/octet-stream") == "D1"


@pytest.mark.asyncio
async def test_upload_failure_is_rejected(bot, audio_file):
    bot.send_audio.side_effect = NetworkError("timeout")

    with pytest.raises(DeliveryRejected):
        await TelegramTransport(bot, 1).upload(audio_file, "audio/flac")


@pytest.mark.asyncio
async def test_upload_without_file_id_is_rejected(bot, audio_file):
    bot.send_audio.return_value = MagicMock(audio=None)

    with pytest.raises(DeliveryRejected):
        await TelegramTransport(bot, 1).upload(audio_file, "audio/flac")


@pytest.mark.asyncio
async def test_edit_message_sets_caption_of_audio_placeholder(bot):
    applied = await TelegramTransport(bot, 1).edit_message("m1", "status", button="Завантажуємо...")

    assert applied is True
    kwargs = bot.edit_message_caption.await_args.kwargs
    assert kwargs["caption"] == "status"
    assert kwargs["inline_message_id"] == "m1"
    assert kwargs["reply_markup"].inline_keyboard[0][0].text == "Завантажуємо..."
    bot.edit_message_text.assert_not_called()


@pytest.mark.asyncio
async def test_edit_message_not_modified_counts_as_applied(bot):
    bot.edit_message_caption.side_effect = BadRequest("Message is not modified: specified new message content is the same")
    assert await TelegramTransport(bot, 1).edit_message("m1", "same") is True


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [BadRequest("Message to edit not found"), NetworkError("down")])
async def test_edit_message_failures_return_false(bot, error):
    bot.edit_message_caption.side_effect = error
    assert await TelegramTransport(bot, 1).edit_message("m1", "x") is False


@pytest.mark.asyncio
async def test_deliver_audio_by_file_id(bot):
    entry = make_entry(title="Song", artist="Artist")
    track = CachedMediaHandle(file_id="A1", content_type="audio/flac")

    assert await TelegramTransport(bot, 1).deliver_audio("m1", entry, track) is True

    kwargs = bot.edit_message_media.await_args.kwargs
    media = kwargs["media"]
    assert isinstance(media, InputMediaAudio)
    assert media.media == "A1"
    assert (media.title, media.performer) == ("Song", "Artist")
    assert kwargs["inline_message_id"] == "m1"
    assert kwargs["reply_markup"] is None


@pytest.mark.asyncio
async def test_deliver_audio_failure_returns_false(bot):
    bot.edit_message_media.side_effect = BadRequest("Wrong file identifier")
    track = CachedMediaHandle(file_id="A1", content_type="audio/flac")

    assert await TelegramTransport(bot, 1).deliver_audio("m1", make_entry(), track) is False


@pytest.mark.asyncio
async def test_answer_inline_is_personal_and_uncached(bot):
    await TelegramTransport(bot, 1).answer_inline("q1", ("a", "b"))

    bot.answer_inline_query.assert_awaited_once_with("q1", results=["a", "b"], cache_time=0, is_personal=True)
