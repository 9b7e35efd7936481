"""
Hard filters applied to candidate properties.

A preference that is absent (None, empty list, "No Preference") never
excludes anything. Unknown candidate values (no numeric size) pass.
"""

from typing import Iterable, TypeVar

from propmatch.config import NO_PREFERENCE
from propmatch.models import PropertyRecord, UserPreferences, parse_bedrooms, parse_range

R = TypeVar("R", bound=PropertyRecord)

# Property types offered under one button
TYPE_ALIASES = {"flat": "apartment"}


def _canonical_type(value: str) -> str:
    value = value.strip().lower()
    return TYPE_ALIASES.get(value, value)


def _contains_all(wanted: list[str], available: list[str]) -> bool:
    """Every wanted label is a case-insensitive substring of some available label."""
    available = [a.lower() for a in available]
    return all(any(w.lower() in a for a in available) for w in wanted)


def matches_type(record: PropertyRecord, preferences: UserPreferences) -> bool:
    if not preferences.property_type:
        return True
    return _canonical_type(record.type) == _canonical_type(preferences.property_type)


def matches_location(record: PropertyRecord, preferences: UserPreferences) -> bool:
    location = preferences.location
    if not location or location == NO_PREFERENCE:
        return True
    return location.lower() in record.location.lower()


def matches_bedrooms(record: PropertyRecord, preferences: UserPreferences) -> bool:
    count, at_least = parse_bedrooms(preferences.bedrooms)
    if count is None:
        return True
    if at_least:
        return record.bedrooms >= count
    return record.bedrooms == count


def matches_budget(record: PropertyRecord, preferences: UserPreferences) -> bool:
    """The record's price range overlaps the budget."""
    if preferences.budget_max is not None and record.price_min > preferences.budget_max:
        return False
    if preferences.budget_min is not None and record.price_max < preferences.budget_min:
        return False
    return True


def matches_size(record: PropertyRecord, preferences: UserPreferences) -> bool:
    low, high = parse_range(preferences.size)
    if low is None or record.size_sqft is None:
        return True
    if record.size_sqft < low:
        return False
    return high is None or record.size_sqft <= high


def matches_amenities(record: PropertyRecord, preferences: UserPreferences) -> bool:
    return _contains_all(preferences.amenities, record.amenities)


def matches_near(record: PropertyRecord, preferences: UserPreferences) -> bool:
    return _contains_all(preferences.near, record.near)


PREDICATES = (
    matches_type,
    matches_location,
    matches_bedrooms,
    matches_budget,
    matches_size,
    matches_amenities,
    matches_near,
)


def matches_preferences(record: PropertyRecord, preferences: UserPreferences) -> bool:
    """True when the record passes every hard filter."""
    return all(predicate(record, preferences) for predicate in PREDICATES)


def filter_candidates(candidates: Iterable[R], preferences: UserPreferences) -> list[R]:
    """Keeps the candidates that pass every hard filter, in their original order."""
    return [c for c in candidates if matches_preferences(c, preferences)]
