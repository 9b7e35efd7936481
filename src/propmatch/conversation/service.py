"""
Conversation service.

Transport-neutral surface over the preference state machine: a chat
adapter passes in the session state and the pressed button, and renders
the reply (message, buttons, matched properties). Runs the search when
the conversation reaches the search step.
"""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from propmatch.conversation.flow import ConversationFlow, MULTI_SELECT_FIELDS
from propmatch.conversation.prompts import (
    GREETING_REPLIES,
    INVALID_ACTION_MESSAGE,
    NEXT_LABEL,
    NO_MATCHES_MESSAGE,
    RELAX_OPTIONS,
    RESULTS_MESSAGE,
)
from propmatch.exceptions import InvalidTransitionError
from propmatch.matching.engine import MatchResult, Searcher
from propmatch.models import Action, ConversationState, Step

logger = structlog.get_logger()


@dataclass(frozen=True)
class Button:
    label: str
    action: Action
    selected: bool = False


@dataclass
class ChatReply:
    """What the chat should show after an action."""

    state: ConversationState
    message: str
    buttons: list[Button] = field(default_factory=list)
    results: list[MatchResult] = field(default_factory=list)


class ChatService:
    """
    Runs one conversation turn at a time.

    The service holds no per-session data: the caller keeps each
    session's ConversationState and passes it back on the next turn.
    """

    def __init__(self, flow: ConversationFlow, searcher: Searcher):
        self.flow = flow
        self.searcher = searcher

    def start(self) -> ChatReply:
        """Greeting of a new session."""
        return self._prompt_reply(self.flow.initial_state())

    async def handle(self, state: ConversationState, action: Action) -> ChatReply:
        """
        Applies a user action and builds the reply.

        An action the current step does not accept leaves the state
        unchanged and repeats the current prompt.
        """
        try:
            new_state = self.flow.transition(state, action)
        except InvalidTransitionError as e:
            logger.warning(
                "Invalid action",
                step=state.step.value,
                action=action.to_token(),
                error=str(e),
            )
            return self._prompt_reply(state, prefix=INVALID_ACTION_MESSAGE)

        if new_state.step == Step.SEARCH:
            return await self._search_reply(new_state)

        if new_state.step == Step.GREETING and action.value in GREETING_REPLIES:
            return self._prompt_reply(new_state, prefix=GREETING_REPLIES[action.value])

        return self._prompt_reply(new_state)

    def _prompt_reply(self, state: ConversationState, prefix: Optional[str] = None) -> ChatReply:
        if state.step == Step.SEARCH:
            return ChatReply(
                state=state,
                message=prefix or NO_MATCHES_MESSAGE,
                buttons=self._relax_buttons(state),
            )

        prompt = self.flow.prompt_for(state)
        message = f"{prefix}\n\n{prompt.message}" if prefix else prompt.message

        if prompt.multi_select:
            multi_field = MULTI_SELECT_FIELDS.get(state.step)
            selected = getattr(state.preferences, multi_field) if multi_field else []
            buttons = [
                Button(o.label, Action.toggle(o.value), selected=o.value in selected)
                if o.multi_select
                else Button(o.label, Action.select(o.value))
                for o in prompt.options
            ]
            buttons.append(Button(NEXT_LABEL, Action.advance()))
        else:
            buttons = [Button(o.label, Action.select(o.value)) for o in prompt.options]

        return ChatReply(state=state, message=message, buttons=buttons)

    def _relax_buttons(self, state: ConversationState) -> list[Button]:
        return [
            Button(label, action)
            for label, action in RELAX_OPTIONS
            if action.value not in state.relaxed
        ]

    async def _search_reply(self, state: ConversationState) -> ChatReply:
        preferences = state.effective_preferences()
        try:
            results = await self.searcher.search(preferences)
        except Exception as e:
            logger.error("Search failed", error=str(e), exc_info=True)
            results = []

        if not results:
            return ChatReply(
                state=state,
                message=NO_MATCHES_MESSAGE,
                buttons=self._relax_buttons(state),
            )

        return ChatReply(
            state=state,
            message=RESULTS_MESSAGE.format(count=len(results)),
            buttons=[Button("Start Over", Action.restart())],
            results=results,
        )
