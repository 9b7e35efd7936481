"""
Telegram handler tests (updates mocked).
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from propmatch.bot import PreferenceHandler, build_keyboard, format_property_card
from propmatch.conversation import ChatReply, ChatService, ConversationFlow
from propmatch.matching import FilterSearcher, MatchResult, load_demo_properties
from propmatch.models import ConversationState, Step, UserPreferences


def labels(markup) -> list[list[str]]:
    return [[button.text for button in row] for row in markup.inline_keyboard]


def command_update(chat_id: int = 42) -> MagicMock:
    update = MagicMock()
    update.effective_chat.id = chat_id
    update.message.reply_text = AsyncMock()
    return update


def callback_update(data: str, chat_id: int = 42) -> MagicMock:
    update = MagicMock()
    query = update.callback_query
    query.data = data
    query.answer = AsyncMock()
    query.edit_message_reply_markup = AsyncMock()
    query.message.chat_id = chat_id
    query.message.reply_text = AsyncMock()
    query.message.reply_photo = AsyncMock()
    return update


@pytest.fixture
def handler():
    service = ChatService(ConversationFlow(), FilterSearcher(load_demo_properties))
    return PreferenceHandler(service)


class TestCommands:

    async def test_start_sends_greeting_keyboard(self, handler):
        update = command_update()

        await handler.start(update, MagicMock())

        args, kwargs = update.message.reply_text.call_args
        assert args[0].startswith("👋 Hi!")
        assert labels(kwargs["reply_markup"]) == [
            ["🏠 Property Inquiry", "💰 Loan Inquiry"],
            ["📄 Document Assistance", "📞 Contact Sales"],
        ]
        assert handler.get_state(42) == ConversationState()

    async def test_reset_clears_state(self, handler):
        handler._states[42] = ConversationState(
            step=Step.BUDGET, preferences=UserPreferences(property_type="Villa")
        )
        update = command_update()

        await handler.reset(update, MagicMock())

        assert handler.get_state(42) == ConversationState()
        assert update.message.reply_text.await_count == 2


class TestCallbacks:

    async def test_select_moves_to_next_step(self, handler):
        update = callback_update("sel:property_inquiry")

        await handler.handle_callback(update, MagicMock())

        update.callback_query.answer.assert_awaited_once()
        assert handler.get_state(42).step == Step.PROPERTY_TYPE
        args, _ = update.callback_query.message.reply_text.call_args
        assert args[0] == "What type of property are you looking for?"

    async def test_toggle_only_updates_checkmarks(self, handler):
        handler._states[42] = ConversationState(step=Step.NEAR)
        update = callback_update("tog:School")

        await handler.handle_callback(update, MagicMock())

        markup = update.callback_query.edit_message_reply_markup.call_args.kwargs["reply_markup"]
        rows = labels(markup)
        assert rows[0][0] == "✅ 🏫 School"
        assert rows[-1] == ["✔️ Next"]
        update.callback_query.message.reply_text.assert_not_awaited()
        assert handler.get_state(42).preferences.near == ["School"]

    async def test_stale_toggle_repeats_the_prompt(self, handler):
        handler._states[42] = ConversationState(step=Step.AMENITIES)
        # "School" belongs to the near step keyboard
        update = callback_update("tog:School")

        await handler.handle_callback(update, MagicMock())

        update.callback_query.edit_message_reply_markup.assert_not_awaited()
        args, kwargs = update.callback_query.message.reply_text.call_args
        assert args[0].startswith("Please choose one of the options below.")
        assert labels(kwargs["reply_markup"])[0][0] == "🏊 Swimming Pool"
        assert handler.get_state(42) == ConversationState(step=Step.AMENITIES)

    async def test_search_sends_one_card_per_match(self, handler):
        handler._states[42] = ConversationState(
            step=Step.AMENITIES,
            preferences=UserPreferences(location="Dubai Hills", amenities=["Pool"]),
        )
        update = callback_update("next")

        await handler.handle_callback(update, MagicMock())

        message = update.callback_query.message
        assert message.reply_photo.await_count == 3
        first_text = message.reply_text.call_args_list[0].args[0]
        assert first_text == "Found 3 matching properties:"

    async def test_photo_failure_falls_back_to_text(self, handler):
        handler._states[42] = ConversationState(
            step=Step.AMENITIES,
            preferences=UserPreferences(budget_min=2_000_000, budget_max=3_000_000),
        )
        update = callback_update("next")
        update.callback_query.message.reply_photo.side_effect = RuntimeError("bad image")

        await handler.handle_callback(update, MagicMock())

        texts = [c.args[0] for c in update.callback_query.message.reply_text.call_args_list]
        assert any("Rosehill" in text for text in texts)

    async def test_unknown_callback_is_ignored(self, handler):
        update = callback_update("like_123")

        await handler.handle_callback(update, MagicMock())

        assert handler.get_state(42) == ConversationState()
        update.callback_query.message.reply_text.assert_not_awaited()


class TestRendering:

    def test_card_with_similarity(self):
        listing = load_demo_properties()[0]
        card = format_property_card(MatchResult(property=listing, similarity=0.75))

        assert card.startswith("🏠 *Rosehill*")
        assert "AED 2,310,000" in card
        assert "🎯 Match: *75%*" in card

    def test_card_without_similarity(self):
        listing = load_demo_properties()[1]
        card = format_property_card(MatchResult(property=listing))
        assert "Match" not in card

    def test_no_buttons_no_keyboard(self):
        assert build_keyboard(ChatReply(state=ConversationState(), message="hi")) is None
