# ✉️ trackbot/infrastructure/telegram/telegram_transport.py
"""
✉️ TelegramTransport — реалізація `IMediaTransport` поверх `telegram.Bot`.

🔹 `upload` шле файл у службовий чат (`storage_chat_id`) і повертає `file_id` для повторного використання.
🔹 `edit_message` / `deliver_audio` редагують inline-повідомлення; збої Telegram повертаються як `False`.
🔹 `answer_inline` відповідає на inline-запит персонально і без кешування на боці Telegram.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup, InputMediaAudio
from telegram.error import BadRequest, TelegramError

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування
from contextlib import ExitStack                                       # 📂 Кілька відкритих файлів
from pathlib import Path                                               # 📂 Шляхи
from typing import Optional, Sequence, Union                           # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.domain.music.entities import CachedMediaHandle, TrackEntry, TrackMetadata
from trackbot.errors.custom_errors import DeliveryRejected
from trackbot.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.telegram")

PROGRESS_CALLBACK_DATA = "trackbot:progress"
NOT_MODIFIED = "message is not modified"


def progress_keyboard(button: Optional[str]) -> Optional[InlineKeyboardMarkup]:
    """Клавіатура з однією кнопкою статусу (без неї Telegram не видає `inline_message_id`)."""
    if not button:
        return None
    return InlineKeyboardMarkup([[InlineKeyboardButton(button, callback_data=PROGRESS_CALLBACK_DATA)]])


class TelegramTransport:
    """✉️ Вивантаження файлів та редагування inline-повідомлень."""

    def __init__(self, bot: Bot, storage_chat_id: Union[int, str], *, upload_timeout: float = 120.0) -> None:
        self._bot = bot
        self._storage_chat_id = storage_chat_id
        self._upload_timeout = float(upload_timeout)

    # ================================
    # 📤 ВИВАНТАЖЕННЯ
    # ================================
    async def upload(
        self,
        path: Path,
        content_type: str,
        *,
        metadata: Optional[TrackMetadata] = None,
        thumbnail: Optional[Path] = None,
    ) -> str:
        """
        Вивантажує файл у службовий чат.

        Raises:
            DeliveryRejected: Telegram не прийняв файл або не повернув `file_id`.
        """
        kind = content_type.split("/", 1)[0]
        try:
            with ExitStack() as stack:
                data = stack.enter_context(open(path, "rb"))
                if kind == "audio":
                    thumb = stack.enter_context(open(thumbnail, "rb")) if thumbnail else None
                    message = await self._bot.send_audio(
                        chat_id=self._storage_chat_id,
                        audio=data,
                        filename=path.name,
                        title=metadata.title if metadata else None,
                        performer=metadata.artist if metadata else None,
                        duration=metadata.duration_sec if metadata and metadata.duration_ms else None,
                        thumbnail=thumb,
                        disable_notification=True,
                        write_timeout=self._upload_timeout,
                    )
                    file_id = message.audio.file_id if message.audio else None
                elif kind == "image":
                    message = await self._bot.send_photo(
                        chat_id=self._storage_chat_id,
                        photo=data,
                        disable_notification=True,
                        write_timeout=self._upload_timeout,
                    )
                    file_id = message.photo[-1].file_id if message.photo else None
                else:
                    message = await self._bot.send_document(
                        chat_id=self._storage_chat_id,
                        document=data,
                        filename=path.name,
                        disable_notification=True,
                        write_timeout=self._upload_timeout,
                    )
                    file_id = message.document.file_id if message.document else None
        except TelegramError as exc:
            raise DeliveryRejected(details=f"upload of {path.name} failed: {exc}") from exc

        if not file_id:
            raise DeliveryRejected(details=f"upload of {path.name} returned no file_id")
        logger.info("📤 Uploaded %s (%s)", path.name, content_type)
        return file_id

    # ================================
    # ✏️ РЕДАГУВАННЯ INLINE-ПОВІДОМЛЕНЬ
    # ================================
    async def edit_message(self, inline_message_id: str, text: str, *, button: Optional[str] = None) -> bool:
        try:
            await self._bot.edit_message_caption(                    # 🎵 Inline-повідомлення є аудіо: текст у підписі
                inline_message_id=inline_message_id,
                caption=text,
                reply_markup=progress_keyboard(button),
            )
        except BadRequest as exc:
            if NOT_MODIFIED in str(exc).lower():                       # 🔁 Той самий текст вважаємо застосованим
                return True
            logger.warning("⚠️ edit_message_caption rejected: %s", exc)
            return False
        except TelegramError as exc:
            logger.warning("⚠️ edit_message_caption failed: %s", exc)
            return False
        return True

    async def deliver_audio(
        self,
        inline_message_id: str,
        entry: TrackEntry,
        track: CachedMediaHandle,
    ) -> bool:
        """
        Замінює статус-повідомлення на аудіо за `file_id`.

        Обкладинка вже вбудована у файл під час вивантаження: редагування медіа
        за `file_id` не приймає нової мініатюри.
        """
        media = InputMediaAudio(
            media=track.file_id,
            title=entry.metadata.title,
            performer=entry.metadata.artist,
            duration=entry.metadata.duration_sec or None,
        )
        try:
            await self._bot.edit_message_media(media=media, inline_message_id=inline_message_id, reply_markup=None)
        except TelegramError as exc:
            logger.warning("⚠️ edit_message_media failed for %s: %s", entry.source_url, exc)
            return False
        logger.info("📬 Delivered %s", entry.metadata.display_name)
        return True

    # ================================
    # 🔎 INLINE-ВІДПОВІДІ
    # ================================
    async def answer_inline(self, query_id: str, results: Sequence[object]) -> None:
        await self._bot.answer_inline_query(query_id, results=list(results), cache_time=0, is_personal=True)


__all__ = ["TelegramTransport", "progress_keyboard", "PROGRESS_CALLBACK_DATA"]
