"""
Conversation state.

A session is a single current step plus the preferences accumulated so
far. Actions are what the user can do on a step: pick an option, toggle
a multi-select option, move on, relax a filter or start over.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from propmatch.models.preferences import UserPreferences


class Step(str, Enum):
    GREETING = "greeting"
    PROPERTY_TYPE = "property_type"
    SIZE = "size"
    BEDROOMS = "bedrooms"
    LOCATION = "location"
    BUDGET = "budget"
    NEAR = "near"
    AMENITIES = "amenities"
    SUMMARY = "summary"
    SEARCH = "search"


class ActionKind(str, Enum):
    SELECT = "sel"
    TOGGLE = "tog"
    ADVANCE = "next"
    RELAX = "relax"
    RESTART = "restart"


# Filters a user can relax after a search without matches
RELAXABLE_FILTERS = ("amenities", "budget", "location")


class Action(BaseModel):
    """A user action; serializes to a short token usable as button payload."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    value: Optional[str] = None

    @classmethod
    def select(cls, value: str) -> "Action":
        return cls(kind=ActionKind.SELECT, value=value)

    @classmethod
    def toggle(cls, value: str) -> "Action":
        return cls(kind=ActionKind.TOGGLE, value=value)

    @classmethod
    def advance(cls) -> "Action":
        return cls(kind=ActionKind.ADVANCE)

    @classmethod
    def relax(cls, filter_name: str) -> "Action":
        return cls(kind=ActionKind.RELAX, value=filter_name)

    @classmethod
    def restart(cls) -> "Action":
        return cls(kind=ActionKind.RESTART)

    def to_token(self) -> str:
        """'sel:Villa', 'tog:Gym', 'next', 'relax:budget', 'restart'."""
        if self.value is None:
            return self.kind.value
        return f"{self.kind.value}:{self.value}"

    @classmethod
    def from_token(cls, token: str) -> "Action":
        """
        Inverse of to_token.

        Raises:
            ValueError: If the token does not name a known action
        """
        kind, _, value = token.partition(":")
        return cls(kind=ActionKind(kind), value=value or None)


class ConversationState(BaseModel):
    """Current step plus accumulated preferences of one chat session."""

    step: Step = Step.GREETING
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    relaxed: list[str] = Field(
        default_factory=list,
        description="Filters relaxed after an empty search; preferences stay intact",
    )

    def effective_preferences(self) -> UserPreferences:
        """Preferences with the relaxed filters masked out, used for searching."""
        updates: dict = {}
        if "amenities" in self.relaxed:
            updates["amenities"] = []
        if "budget" in self.relaxed:
            updates["budget_min"] = None
            updates["budget_max"] = None
        if "location" in self.relaxed:
            updates["location"] = None
        return self.preferences.model_copy(update=updates, deep=True)
