"""
🧪 test_inline_handlers.py — inline-пошук, вибір результату та /start

Перевіряє:
- Аудіо-результати з id `{provider}|{key}` і кнопкою статусу
- Підказку статтею при `UserVisibleError`
- Передачу `result_id` / `inline_message_id` у SelectionService
- Привітання з імʼям бота
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import InlineQueryResultArticle, InlineQueryResultAudio

from conftest import make_entry
from trackbot.bot.commands.core_commands_feature import CoreCommandsFeature
from trackbot.bot.handlers import InlineSearchHandler, InlineSendHandler
from trackbot.bot.ui import static_messages as msg
from trackbot.config.setup.constants import CONST
from trackbot.errors.custom_errors import InvalidInlineQuery

PLACEHOLDER = "https://example.test/placeholder.mp3"


def _inline_update(text: str):
    update = MagicMock()
    update.inline_query.query = text
    update.inline_query.id = "q1"
    return update


@pytest.mark.asyncio
async def test_inline_search_answers_with_audio_results():
    entry = make_entry(title="Song", artist="Artist")
    search = MagicMock(search=AsyncMock(return_value=[("0123456789abcdef", entry)]))
    transport = MagicMock(answer_inline=AsyncMock())

    await InlineSearchHandler(search, transport, placeholder_audio_url=PLACEHOLDER).handle(
        _inline_update("music song"), MagicMock()
    )

    search.search.assert_awaited_once_with("music song")
    query_id, results = transport.answer_inline.await_args.args
    assert query_id == "q1"
    [result] = results
    assert isinstance(result, InlineQueryResultAudio)
    assert result.id == "hifi|0123456789abcdef"
    assert result.audio_url == PLACEHOLDER
    assert (result.title, result.performer, result.audio_duration) == ("Song", "Artist", 180)
    assert result.reply_markup.inline_keyboard[0][0].text == msg.DOWNLOADING_BUTTON


@pytest.mark.asyncio
async def test_inline_search_shows_hint_article():
    search = MagicMock(search=AsyncMock(side_effect=InvalidInlineQuery(msg.ENTER_QUERY)))
    transport = MagicMock(answer_inline=AsyncMock())

    await InlineSearchHandler(search, transport, placeholder_audio_url=PLACEHOLDER).handle(
        _inline_update("music"), MagicMock()
    )

    _, results = transport.answer_inline.await_args.args
    [article] = results
    assert isinstance(article, InlineQueryResultArticle)
    assert article.title == msg.ENTER_QUERY
    assert article.input_message_content.message_text == msg.ENTER_QUERY


@pytest.mark.asyncio
async def test_inline_search_ignores_other_updates():
    search = MagicMock(search=AsyncMock())
    update = MagicMock(inline_query=None)

    await InlineSearchHandler(search, MagicMock(), placeholder_audio_url=PLACEHOLDER).handle(update, MagicMock())

    search.search.assert_not_awaited()


@pytest.mark.asyncio
async def test_inline_send_delegates_to_selection():
    selection = MagicMock(handle=AsyncMock())
    update = MagicMock()
    update.chosen_inline_result.result_id = "hifi|abc"
    update.chosen_inline_result.inline_message_id = "m1"

    await InlineSendHandler(selection).handle(update, MagicMock())

    selection.handle.assert_awaited_once_with("hifi|abc", "m1")


@pytest.mark.asyncio
async def test_start_command_explains_inline_syntax():
    update = MagicMock()
    update.message.reply_text = AsyncMock()
    context = MagicMock()
    context.bot.username = "track_bot"

    await CoreCommandsFeature(CONST, error_handler=lambda f: f).start_command(update, context)

    text = update.message.reply_text.await_args.args[0]
    assert "@track_bot music" in text
    assert update.message.reply_text.await_args.kwargs == {"parse_mode": "HTML"}


def test_core_commands_registration():
    application = MagicMock()
    wrapped = []

    def wrap(func):
        wrapped.append(func.__name__)
        return func

    CoreCommandsFeature(CONST, error_handler=wrap).register_handlers(application)

    assert application.add_handler.call_count == 2
    assert wrapped == ["start_command", "start_command"]
