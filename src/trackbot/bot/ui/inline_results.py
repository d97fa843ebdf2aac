# 🧾 trackbot/bot/ui/inline_results.py
"""
🧾 Побудова inline-результатів для відповіді на запит.

🔹 Трек → `InlineQueryResultAudio` з плейсхолдер-аудіо та кнопкою статусу.
🔹 Помилка/підказка → `InlineQueryResultArticle` з тим самим текстом у заголовку і тілі.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import InlineQueryResultArticle, InlineQueryResultAudio, InputTextMessageContent

# 🔠 Системні імпорти
import hashlib                                                         # 🆔 Стабільний id статті
from typing import List                                                # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from trackbot.bot.ui import static_messages as msg
from trackbot.domain.music.entities import TrackEntry
from trackbot.domain.music.keys import build_result_id
from trackbot.infrastructure.telegram.telegram_transport import progress_keyboard


def build_audio_result(key: str, entry: TrackEntry, placeholder_audio_url: str) -> InlineQueryResultAudio:
    return InlineQueryResultAudio(
        id=build_result_id(entry.reference.provider, key),
        audio_url=placeholder_audio_url,
        title=entry.metadata.title,
        performer=entry.metadata.artist,
        audio_duration=entry.metadata.duration_sec or None,
        reply_markup=progress_keyboard(msg.DOWNLOADING_BUTTON),        # 🔘 Без кнопки немає inline_message_id
    )


def build_text_result(text: str) -> InlineQueryResultArticle:
    article_id = hashlib.sha1(text.encode("utf-8")).hexdigest()[:16]
    return InlineQueryResultArticle(
        id=article_id,
        title=text,
        input_message_content=InputTextMessageContent(text),
    )


def text_results(text: str) -> List[InlineQueryResultArticle]:
    return [build_text_result(text)]


__all__ = ["build_audio_result", "build_text_result", "text_results"]
