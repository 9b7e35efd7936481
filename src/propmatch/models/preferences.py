"""
User preferences collected by the conversation.

Every field is optional: absence means "no preference". The range tokens
coming from the buttons ("2000000-5000000", "2500+", "4+ BHK") are parsed
here; a malformed token is treated as no constraint.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from propmatch.config import UNBOUNDED_BUDGET


class UserPreferences(BaseModel):
    """Search preferences accumulated one step at a time."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    property_type: Optional[str] = Field(None, description="Apartment, Villa...")
    size: Optional[str] = Field(None, description="Range token in sq ft: '800-1200', '2500+'")
    bedrooms: Optional[str] = Field(None, description="Token: '3 BHK', '4+ BHK'")
    location: Optional[str] = Field(None, description="Place name or 'No Preference'")
    budget_min: Optional[int] = Field(None, ge=0)
    budget_max: Optional[int] = Field(None, ge=0)
    near: list[str] = Field(default_factory=list, description="Proximity tags")
    amenities: list[str] = Field(default_factory=list, description="Requested amenities")

    def is_empty(self) -> bool:
        return self == UserPreferences()


def parse_range(token: Optional[str]) -> tuple[Optional[int], Optional[int]]:
    """
    Parses "<min>-<max>" or "<min>+" into numeric bounds.

    Returns:
        (min, max); max is None for open-ended tokens, both None when
        the token is missing or malformed.
    """
    if not token:
        return None, None

    cleaned = token.replace(",", "").replace(" ", "")

    match = re.fullmatch(r"(\d+)\+", cleaned)
    if match:
        return int(match.group(1)), None

    match = re.fullmatch(r"(\d+)-(\d+)", cleaned)
    if match:
        low, high = int(match.group(1)), int(match.group(2))
        if low <= high:
            return low, high

    return None, None


def parse_budget(token: Optional[str]) -> tuple[Optional[int], Optional[int]]:
    """
    Parses a budget button value.

    "5000000-10000000" -> (5000000, 10000000)
    "10000000+"        -> (10000000, UNBOUNDED_BUDGET)
    """
    low, high = parse_range(token)
    if low is None:
        return None, None
    return low, high if high is not None else UNBOUNDED_BUDGET


def parse_bedrooms(token: Optional[str]) -> tuple[Optional[int], bool]:
    """
    Parses a bedroom token.

    Returns:
        (count, at_least); "4+ BHK" -> (4, True), "2 BHK" -> (2, False),
        (None, False) when unparseable.
    """
    if not token:
        return None, False
    match = re.match(r"\s*(\d+)\s*(\+)?", token)
    if not match:
        return None, False
    return int(match.group(1)), bool(match.group(2))
