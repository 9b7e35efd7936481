"""
Structured field extraction from brochure text.

Pulls name, type, price, size, location, amenities, bedrooms and nearby
places out of free text with ordered regex heuristics. Every field has a
fallback value, so extraction never fails and always returns a fully
populated record.
"""

import re
import unicodedata
from typing import Optional

from propmatch.config import (
    DEFAULT_AMENITIES,
    DEFAULT_BEDROOMS,
    DEFAULT_MIN_PRICE,
    DEFAULT_PRICE_RANGE,
    DEFAULT_PROPERTY_TYPE,
    DEFAULT_SIZE,
    DESCRIPTION_LENGTH,
    GENERIC_PROPERTY_NAME,
    KNOWN_LOCATIONS,
    PRICE_MAX_MULTIPLIER,
    PROPERTY_TYPES,
    RECORD_WINDOW,
    UNSPECIFIED_LOCATION,
)
from propmatch.models import PropertyRecord

# A line starting with one of the boundary keywords followed by a name
RECORD_BOUNDARY_PATTERN = re.compile(
    r"^[ \t]*(?:Property|Project|Development|Building)\b[ \t:\-]+(\S[^\n]*)$",
    re.IGNORECASE | re.MULTILINE,
)

MAX_NAME_WORDS = 6

_CURRENCY = r"(?:AED|Dhs?\.?|₹|Rs\.?|INR|USD|US\$|\$|£|€)"
_UNITS = r"crores?|cr|lakhs?|lacs?|l|millions?|mn|m|thousand|k"

PRICE_PATTERN = re.compile(
    rf"(?<![A-Za-z]){_CURRENCY}\s*(\d[\d,]*(?:\.\d+)?)(?:\s*({_UNITS})\b)?",
    re.IGNORECASE,
)

# Checked in order against the lower-cased unit suffix
UNIT_MULTIPLIERS: list[tuple[str, float]] = [
    ("cr", 10_000_000),
    ("l", 100_000),
    ("m", 1_000_000),
    ("thousand", 1_000),
    ("k", 1_000),
]

SIZE_PATTERN = re.compile(
    r"(\d[\d,]*)\s*(?:sq\.?\s*(?:ft|feet)\.?|sqft|square\s*(?:feet|foot|ft))",
    re.IGNORECASE,
)

BEDROOM_PATTERN = re.compile(
    r"(\d+)[\s-]*(?:bhk|br|bed(?:room)?s?)\b",
    re.IGNORECASE,
)


def clean_record_name(raw: str) -> str:
    """
    Trims a boundary line down to the name itself.

    PDF pages usually come out as one long line, so the name is cut at
    the first separator and capped to a few words.
    """
    head = re.split(r"\s{2,}|[|,;:.]|\s[-–]\s", raw.strip(), maxsplit=1)[0]
    words = head.split()[:MAX_NAME_WORDS]
    return " ".join(words)


def find_record_names(text: str) -> list[tuple[int, str]]:
    """Returns (offset, name) for every record boundary line in the text."""
    found = []
    for match in RECORD_BOUNDARY_PATTERN.finditer(text or ""):
        name = clean_record_name(match.group(1))
        if name:
            found.append((match.start(), name))
    return found


class FieldExtractor:
    """Keyword and pattern based extractor for property brochures."""

    AMENITY_PATTERNS: dict[str, list[str]] = {
        "Swimming Pool": [r"\bpools?\b", r"\bswimming\b"],
        "Gym": [r"\bgym(?:nasium)?s?\b", r"\bfitness cent(?:er|re)\b"],
        "Parking": [r"\bparking\b", r"\bcar ?park\b"],
        "24/7 Security": [r"\bsecurity\b", r"\bcctv\b"],
        "Clubhouse": [r"\bclub ?house\b"],
        "Kids Play Area": [r"\bplay ?grounds?\b", r"\bplay area\b"],
        "Pet Friendly": [r"\bpets?\b", r"\bpet[- ]friendly\b"],
        "Garden": [r"\bgardens?\b"],
        "Elevator": [r"\blifts?\b", r"\belevators?\b"],
    }

    NEAR_PATTERNS: dict[str, list[str]] = {
        "School": [r"\bschools?\b", r"\bnursery\b"],
        "Hospital": [r"\bhospitals?\b", r"\bclinics?\b"],
        "Mall": [r"\bmalls?\b", r"\bsupermarkets?\b"],
        "Metro": [r"\bmetro\b", r"\btram\b"],
        "Park": [r"(?<!car )\bparks?\b"],
        "Office": [r"\boffices?\b", r"\bbusiness district\b"],
    }

    # Negation word right before the keyword ("no pets", "without parking")
    LEADING_NEGATION = re.compile(r"\b(?:no|not|without|non)\b\W+(?:\w+\W+)?$")
    # Negation right after it ("pets are not allowed")
    TRAILING_NEGATION = re.compile(
        r"^\W*(?:\w+\W+)?(?:not allowed|not permitted|prohibited)\b"
    )

    def _normalize(self, text: str) -> str:
        normalized = unicodedata.normalize("NFKD", text or "")
        ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
        return re.sub(r"[ \t]+", " ", ascii_text).strip().lower()

    def _split_sentences(self, text: str) -> list[str]:
        return [s.strip() for s in re.split(r"[.!?\n;:]+", text) if s.strip()]

    def _is_negated(self, sentence: str, match: re.Match) -> bool:
        before = sentence[max(0, match.start() - 25):match.start()]
        after = sentence[match.end():match.end() + 25]
        return bool(
            self.LEADING_NEGATION.search(before) or self.TRAILING_NEGATION.search(after)
        )

    def _detect_labels(self, text: str, table: dict[str, list[str]]) -> list[str]:
        sentences = self._split_sentences(self._normalize(text))
        found = []
        for label, patterns in table.items():
            if any(
                not self._is_negated(sentence, match)
                for sentence in sentences
                for pattern in patterns
                for match in re.finditer(pattern, sentence)
            ):
                found.append(label)
        return found

    def extract_type(self, text: str) -> str:
        lower = (text or "").lower()
        for property_type in PROPERTY_TYPES:
            if re.search(rf"\b{property_type.lower()}s?\b", lower):
                return property_type
        return DEFAULT_PROPERTY_TYPE

    def extract_price_range(self, text: str) -> str:
        matches = list(PRICE_PATTERN.finditer(text or ""))[:2]
        if not matches:
            return DEFAULT_PRICE_RANGE
        return " - ".join(m.group(0).strip().rstrip(",") for m in matches)

    def _price_value(self, match: re.Match) -> Optional[float]:
        digits = re.sub(r"[^\d.]", "", match.group(1))
        try:
            value = float(digits)
        except ValueError:
            return None

        unit = (match.group(2) or "").lower()
        if unit:
            for prefix, multiplier in UNIT_MULTIPLIERS:
                if unit.startswith(prefix):
                    value *= multiplier
                    break
        return value

    def _price_values(self, text: str) -> list[float]:
        values = []
        for match in PRICE_PATTERN.finditer(text or ""):
            value = self._price_value(match)
            if value is not None:
                values.append(value)
            if len(values) == 2:
                break
        return values

    def extract_min_price(self, text: str) -> float:
        values = self._price_values(text)
        return values[0] if values else DEFAULT_MIN_PRICE

    def extract_max_price(self, text: str) -> float:
        """Second quoted price when it is higher, else min * PRICE_MAX_MULTIPLIER."""
        values = self._price_values(text)
        price_min = values[0] if values else DEFAULT_MIN_PRICE
        if len(values) > 1 and values[1] > price_min:
            return values[1]
        return price_min * PRICE_MAX_MULTIPLIER

    def extract_size(self, text: str) -> tuple[str, Optional[int]]:
        """Returns the display size and its numeric value in sq ft."""
        match = SIZE_PATTERN.search(text or "")
        if not match:
            return DEFAULT_SIZE, None
        try:
            sqft = int(match.group(1).replace(",", ""))
        except ValueError:
            sqft = None
        return match.group(0).strip(), sqft

    def extract_location(self, text: str) -> str:
        lower = (text or "").lower()
        for location in KNOWN_LOCATIONS:
            if location.lower() in lower:
                return location
        return UNSPECIFIED_LOCATION

    def extract_amenities(self, text: str) -> list[str]:
        return self._detect_labels(text, self.AMENITY_PATTERNS) or list(DEFAULT_AMENITIES)

    def extract_near(self, text: str) -> list[str]:
        return self._detect_labels(text, self.NEAR_PATTERNS)

    def extract_bedrooms(self, text: str) -> int:
        match = BEDROOM_PATTERN.search(text or "")
        if not match:
            return DEFAULT_BEDROOMS
        try:
            return int(match.group(1))
        except ValueError:
            return DEFAULT_BEDROOMS

    def extract_description(self, text: str, name: Optional[str] = None) -> str:
        """
        Snippet for the record.

        Without a name: the first DESCRIPTION_LENGTH characters.
        With a name: RECORD_WINDOW characters starting where the name appears.
        """
        text = text or ""
        if not name:
            return text[:DESCRIPTION_LENGTH].strip()

        index = text.lower().find(name.lower())
        if index == -1:
            return text[:RECORD_WINDOW].strip()
        return text[index:index + RECORD_WINDOW].strip()

    def extract(self, text: str, name: Optional[str] = None) -> PropertyRecord:
        """
        Extracts a PropertyRecord from one text span.

        Args:
            text: Raw text of the span
            name: Name hint when the span is one record of a larger document

        Returns:
            Fully populated PropertyRecord
        """
        text = text or ""
        if name:
            record_name = name
            description = self.extract_description(text, name)
        else:
            detected = find_record_names(text)
            record_name = detected[0][1] if detected else GENERIC_PROPERTY_NAME
            description = self.extract_description(text)

        size, size_sqft = self.extract_size(text)

        return PropertyRecord(
            name=record_name,
            type=self.extract_type(text),
            description=description,
            price_range=self.extract_price_range(text),
            size=size,
            size_sqft=size_sqft,
            location=self.extract_location(text),
            amenities=self.extract_amenities(text),
            near=self.extract_near(text),
            bedrooms=self.extract_bedrooms(text),
            price_min=self.extract_min_price(text),
            price_max=self.extract_max_price(text),
        )
