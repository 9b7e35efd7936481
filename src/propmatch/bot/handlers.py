"""
Telegram handlers.

Drive the preference conversation over inline keyboards and send one
card per matched property.
"""

from typing import Optional

import structlog
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from propmatch.conversation import ChatReply, ChatService
from propmatch.matching import MatchResult
from propmatch.models import Action, ActionKind, ConversationState

logger = structlog.get_logger()

BUTTONS_PER_ROW = 2


def build_keyboard(reply: ChatReply) -> Optional[InlineKeyboardMarkup]:
    """Inline keyboard for the reply buttons, two per row, Next on its own row."""
    if not reply.buttons:
        return None

    keyboard = []
    row = []

    for button in reply.buttons:
        if button.action.kind == ActionKind.ADVANCE:
            continue
        emoji = "✅ " if button.selected else ""
        row.append(
            InlineKeyboardButton(
                f"{emoji}{button.label}",
                callback_data=button.action.to_token(),
            )
        )
        if len(row) == BUTTONS_PER_ROW:
            keyboard.append(row)
            row = []

    if row:
        keyboard.append(row)

    for button in reply.buttons:
        if button.action.kind == ActionKind.ADVANCE:
            keyboard.append([
                InlineKeyboardButton(button.label, callback_data=button.action.to_token())
            ])

    return InlineKeyboardMarkup(keyboard)


def format_property_card(result: MatchResult) -> str:
    """Markdown caption for one matched property."""
    prop = result.property

    def md(text) -> str:
        return escape_markdown(str(text))

    lines = [
        f"🏠 *{md(prop.name)}*",
        f"📍 {md(prop.location)} • {prop.bedrooms} BR • {md(prop.type)}",
        f"💰 {md(prop.price_range)}",
        f"📐 {md(prop.size)}",
    ]
    if prop.amenities:
        lines.append(f"✨ {md(', '.join(prop.amenities[:4]))}")
    if prop.description:
        lines.append(f"\n📝 {md(prop.description[:200])}")
    if result.similarity is not None:
        lines.append(f"\n🎯 Match: *{int(result.similarity * 100)}%*")

    return "\n".join(lines)


class PreferenceHandler:
    """
    Runs the button conversation for every chat.

    Each chat keeps its own ConversationState; /start and /reset begin a
    new one.
    """

    def __init__(self, service: ChatService):
        self.service = service
        self._states: dict[int, ConversationState] = {}  # chat_id -> state

    def get_state(self, chat_id: int) -> ConversationState:
        if chat_id not in self._states:
            self._states[chat_id] = self.service.flow.initial_state()
        return self._states[chat_id]

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/start command: greets and shows the first step."""
        chat_id = update.effective_chat.id
        reply = self.service.start()
        self._states[chat_id] = reply.state

        logger.info("Conversation started", chat_id=chat_id)
        await update.message.reply_text(
            reply.message,
            reply_markup=build_keyboard(reply),
        )

    async def reset(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/reset command: drops the collected preferences."""
        chat_id = update.effective_chat.id
        self._states.pop(chat_id, None)

        await update.message.reply_text("🔄 Preferences cleared.")
        await self.start(update, context)

    async def help_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/help command."""
        await update.message.reply_text(
            "🏠 *Property Assistant*\n\n"
            "/start - Start a property search\n"
            "/reset - Clear your preferences\n"
            "/help - Show this help\n\n"
            "Answer each question with the buttons and I'll show you "
            "the properties that match.",
            parse_mode="Markdown",
        )

    async def handle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Processes a button press."""
        query = update.callback_query
        await query.answer()

        chat_id = query.message.chat_id

        try:
            action = Action.from_token(query.data)
        except ValueError:
            logger.warning("Unknown callback data", chat_id=chat_id, data=query.data)
            return

        state = self.get_state(chat_id)
        reply = await self.service.handle(state, action)
        self._states[chat_id] = reply.state

        # Accepted toggles only refresh the checkmarks of the current keyboard
        if (
            action.kind == ActionKind.TOGGLE
            and reply.state.step == state.step
            and reply.state.preferences != state.preferences
        ):
            await query.edit_message_reply_markup(reply_markup=build_keyboard(reply))
            return

        await query.message.reply_text(
            reply.message,
            reply_markup=None if reply.results else build_keyboard(reply),
        )

        for result in reply.results:
            await self._send_property_card(query.message, result)

        if reply.results:
            await query.message.reply_text(
                "Want to try different preferences?",
                reply_markup=build_keyboard(reply),
            )

    async def _send_property_card(self, message, result: MatchResult):
        prop = result.property
        caption = format_property_card(result)
        keyboard = None
        if prop.link:
            keyboard = InlineKeyboardMarkup([
                [InlineKeyboardButton("🔗 View listing", url=prop.link)]
            ])

        if prop.image_url:
            try:
                await message.reply_photo(
                    photo=prop.image_url,
                    caption=caption,
                    parse_mode="Markdown",
                    reply_markup=keyboard,
                )
                return
            except Exception as e:
                logger.warning(
                    "Could not send property photo",
                    property_id=prop.id,
                    error=str(e),
                )

        await message.reply_text(
            caption,
            parse_mode="Markdown",
            reply_markup=keyboard,
        )
