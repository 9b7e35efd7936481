"""
Data models.

- PropertyRecord / PropertyListing: extracted property and its display shape
- EmbeddingRecord: persisted corpus entry
- UserPreferences / ConversationState: conversation side
"""

from propmatch.models.property import (
    PropertyRecord,
    PropertyListing,
    EmbeddingRecord,
    PropertyType,
)
from propmatch.models.preferences import (
    UserPreferences,
    parse_range,
    parse_budget,
    parse_bedrooms,
)
from propmatch.models.conversation import (
    Action,
    ActionKind,
    ConversationState,
    Step,
    RELAXABLE_FILTERS,
)

__all__ = [
    # Properties
    "PropertyRecord",
    "PropertyListing",
    "EmbeddingRecord",
    "PropertyType",
    # Preferences
    "UserPreferences",
    "parse_range",
    "parse_budget",
    "parse_bedrooms",
    # Conversation
    "Action",
    "ActionKind",
    "ConversationState",
    "Step",
    "RELAXABLE_FILTERS",
]
