"""
Preference state machine.

Drives the button conversation:

    greeting -> property_type -> size -> bedrooms -> location -> budget
             -> near (multi) -> amenities (multi) -> [summary] -> search

Transitions are pure: they return a new ConversationState and never
touch the one they were given. Every (step, action kind) pair outside
TRANSITIONS is rejected with InvalidTransitionError.
"""

from typing import Optional

import structlog

from propmatch.config import UNBOUNDED_BUDGET
from propmatch.conversation.prompts import (
    PROMPTS,
    PROPERTY_INQUIRY,
    RESTART_CHOICE,
    SEARCH_CHOICE,
    StepPrompt,
)
from propmatch.exceptions import InvalidTransitionError
from propmatch.models import (
    Action,
    ActionKind,
    ConversationState,
    RELAXABLE_FILTERS,
    Step,
    UserPreferences,
    parse_budget,
)

logger = structlog.get_logger()

# Action kinds accepted at each step
TRANSITIONS: dict[Step, frozenset[ActionKind]] = {
    Step.GREETING: frozenset({ActionKind.SELECT, ActionKind.RESTART}),
    Step.PROPERTY_TYPE: frozenset({ActionKind.SELECT, ActionKind.RESTART}),
    Step.SIZE: frozenset({ActionKind.SELECT, ActionKind.RESTART}),
    Step.BEDROOMS: frozenset({ActionKind.SELECT, ActionKind.RESTART}),
    Step.LOCATION: frozenset({ActionKind.SELECT, ActionKind.RESTART}),
    Step.BUDGET: frozenset({ActionKind.SELECT, ActionKind.RESTART}),
    Step.NEAR: frozenset({ActionKind.TOGGLE, ActionKind.ADVANCE, ActionKind.RESTART}),
    Step.AMENITIES: frozenset({ActionKind.TOGGLE, ActionKind.ADVANCE, ActionKind.RESTART}),
    Step.SUMMARY: frozenset({ActionKind.SELECT, ActionKind.RESTART}),
    Step.SEARCH: frozenset({ActionKind.RELAX, ActionKind.RESTART}),
}

# Where a single select (or advance, for the multi-select steps) leads
NEXT_STEP: dict[Step, Step] = {
    Step.PROPERTY_TYPE: Step.SIZE,
    Step.SIZE: Step.BEDROOMS,
    Step.BEDROOMS: Step.LOCATION,
    Step.LOCATION: Step.BUDGET,
    Step.BUDGET: Step.NEAR,
    Step.NEAR: Step.AMENITIES,
    Step.AMENITIES: Step.SEARCH,
}

# Single-select steps and the preference field they fill
SELECT_FIELDS: dict[Step, str] = {
    Step.PROPERTY_TYPE: "property_type",
    Step.SIZE: "size",
    Step.BEDROOMS: "bedrooms",
    Step.LOCATION: "location",
}

MULTI_SELECT_FIELDS: dict[Step, str] = {
    Step.NEAR: "near",
    Step.AMENITIES: "amenities",
}


class ConversationFlow:
    """
    Deterministic preference-collection state machine.

    Args:
        prompts: Message and buttons per step
        confirm_before_search: Show the summary step before searching
    """

    def __init__(
        self,
        prompts: Optional[dict[Step, StepPrompt]] = None,
        confirm_before_search: bool = False,
    ):
        self.prompts = prompts or PROMPTS
        self.confirm_before_search = confirm_before_search

    def initial_state(self) -> ConversationState:
        return ConversationState()

    def prompt_for(self, state: ConversationState) -> StepPrompt:
        """Prompt of the current step; the summary step shows the preferences."""
        prompt = self.prompts[state.step]
        if state.step == Step.SUMMARY:
            return StepPrompt(message=summarize(state.preferences), options=prompt.options)
        return prompt

    def allowed(self, step: Step) -> frozenset[ActionKind]:
        return TRANSITIONS.get(step, frozenset())

    def transition(self, state: ConversationState, action: Action) -> ConversationState:
        """
        Applies an action to a state.

        Returns:
            A new state; the given one is never modified

        Raises:
            InvalidTransitionError: If the step does not accept the action
                or the value is not one of the step's options
        """
        if action.kind not in self.allowed(state.step):
            raise InvalidTransitionError(
                f"Step '{state.step.value}' does not accept '{action.kind.value}'"
            )

        if action.kind == ActionKind.RESTART:
            return self.initial_state()

        if action.kind == ActionKind.RELAX:
            return self._relax(state, action.value)

        self._check_option(state.step, action.value)

        if action.kind == ActionKind.SELECT:
            return self._select(state, action.value)
        if action.kind == ActionKind.TOGGLE:
            return self._toggle(state, action.value)
        return self._advance(state)

    def _check_option(self, step: Step, value: Optional[str]) -> None:
        if value is None:
            return
        if value not in self.prompts[step].values():
            raise InvalidTransitionError(
                f"'{value}' is not an option of step '{step.value}'"
            )

    def _select(self, state: ConversationState, value: Optional[str]) -> ConversationState:
        if value is None:
            raise InvalidTransitionError("A selection needs a value")

        step = state.step

        if step == Step.GREETING:
            if value == PROPERTY_INQUIRY:
                return state.model_copy(update={"step": Step.PROPERTY_TYPE}, deep=True)
            return state.model_copy(deep=True)

        if step == Step.SUMMARY:
            if value == SEARCH_CHOICE:
                return state.model_copy(update={"step": Step.SEARCH}, deep=True)
            if value == RESTART_CHOICE:
                return self.initial_state()
            raise InvalidTransitionError(f"'{value}' is not a summary choice")

        if step == Step.BUDGET:
            budget_min, budget_max = parse_budget(value)
            if budget_min is None:
                logger.warning("Unparseable budget treated as no constraint", value=value)
            updates = {"budget_min": budget_min, "budget_max": budget_max}
        else:
            updates = {SELECT_FIELDS[step]: value}

        preferences = state.preferences.model_copy(update=updates, deep=True)
        return state.model_copy(
            update={"step": NEXT_STEP[step], "preferences": preferences}, deep=True
        )

    def _toggle(self, state: ConversationState, value: Optional[str]) -> ConversationState:
        if value is None:
            raise InvalidTransitionError("A toggle needs a value")

        field_name = MULTI_SELECT_FIELDS[state.step]
        current = list(getattr(state.preferences, field_name))
        if value in current:
            current.remove(value)
        else:
            current.append(value)

        preferences = state.preferences.model_copy(update={field_name: current}, deep=True)
        return state.model_copy(update={"preferences": preferences}, deep=True)

    def _advance(self, state: ConversationState) -> ConversationState:
        next_step = NEXT_STEP[state.step]
        if next_step == Step.SEARCH and self.confirm_before_search:
            next_step = Step.SUMMARY
        return state.model_copy(update={"step": next_step}, deep=True)

    def _relax(self, state: ConversationState, filter_name: Optional[str]) -> ConversationState:
        if filter_name not in RELAXABLE_FILTERS:
            raise InvalidTransitionError(f"'{filter_name}' cannot be relaxed")

        relaxed = list(state.relaxed)
        if filter_name not in relaxed:
            relaxed.append(filter_name)
        return state.model_copy(update={"relaxed": relaxed}, deep=True)


def _format_budget(preferences: UserPreferences) -> str:
    if preferences.budget_min is None:
        return "Any"
    if preferences.budget_max is None or preferences.budget_max >= UNBOUNDED_BUDGET:
        return f"AED {preferences.budget_min:,} - No limit"
    return f"AED {preferences.budget_min:,} - {preferences.budget_max:,}"


def summarize(preferences: UserPreferences) -> str:
    """Human-readable summary of the collected preferences."""
    parts = [
        "Perfect! Here's what you're looking for:\n",
        f"Property: {preferences.property_type or 'Any'}",
        f"Size: {preferences.size + ' sq ft' if preferences.size else 'Any'}",
        f"Bedrooms: {preferences.bedrooms or 'Any'}",
        f"Location: {preferences.location or 'Any'}",
        f"Budget: {_format_budget(preferences)}",
    ]

    if preferences.near:
        parts.append(f"Near: {', '.join(preferences.near)}")

    if preferences.amenities:
        parts.append(f"Amenities: {', '.join(preferences.amenities)}")

    return "\n".join(parts)
