"""
Property records and embeddings.

PropertyRecord is what the extractor produces from a brochure, the
EmbeddingRecord is what gets persisted in the corpus, and PropertyListing
is the display projection returned to the conversation.
"""

import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

PropertyType = Literal[
    "Apartment", "Villa", "Penthouse", "Townhouse", "Studio", "Flat", "House"
]


class PropertyRecord(BaseModel):
    """Structured attributes of one property, extracted from a text span."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project / building name")
    type: PropertyType = Field("Apartment", description="Property type")
    description: str = Field("", description="Bounded text snippet")
    price_range: str = Field(..., description="Display price, e.g. 'AED 2,310,000'")
    size: str = Field(..., description="Display size, e.g. '1,419 sq ft'")
    size_sqft: Optional[int] = Field(None, ge=0, description="Numeric size in sq ft")
    location: str = Field(..., description="Known place name or 'Location not specified'")
    amenities: list[str] = Field(default_factory=list, description="Canonical amenity labels")
    near: list[str] = Field(default_factory=list, description="Proximity tags: School, Mall...")
    bedrooms: int = Field(2, ge=0)
    price_min: float = Field(..., ge=0)
    price_max: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_price_bounds(self) -> "PropertyRecord":
        if self.price_max < self.price_min:
            raise ValueError(
                f"price_max ({self.price_max}) is below price_min ({self.price_min})"
            )
        return self


# Stock pictures per property type for listings without their own image
PROPERTY_IMAGES = {
    "Apartment": "https://images.pexels.com/photos/1396122/pexels-photo-1396122.jpeg?auto=compress&cs=tinysrgb&w=800",
    "Flat": "https://images.pexels.com/photos/1396122/pexels-photo-1396122.jpeg?auto=compress&cs=tinysrgb&w=800",
    "Villa": "https://images.pexels.com/photos/1396132/pexels-photo-1396132.jpeg?auto=compress&cs=tinysrgb&w=800",
    "Penthouse": "https://images.pexels.com/photos/1571460/pexels-photo-1571460.jpeg?auto=compress&cs=tinysrgb&w=800",
    "Townhouse": "https://images.pexels.com/photos/1438832/pexels-photo-1438832.jpeg?auto=compress&cs=tinysrgb&w=800",
    "Studio": "https://images.pexels.com/photos/1571471/pexels-photo-1571471.jpeg?auto=compress&cs=tinysrgb&w=800",
}


def _slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-") or "property"


class PropertyListing(PropertyRecord):
    """PropertyRecord projected to the shape shown to the user."""

    id: str = Field(..., description="Stable identifier for display")
    link: str = Field("", description="Brochure / listing URL")
    image_url: str = Field("", description="Cover picture")

    @classmethod
    def from_record(
        cls,
        record: PropertyRecord,
        position: int = 0,
        link: str = "",
    ) -> "PropertyListing":
        """Builds a listing from a record; the id derives from name + corpus position."""
        return cls(
            **record.model_dump(),
            id=f"{_slugify(record.name)}-{position}",
            link=link,
            image_url=PROPERTY_IMAGES.get(record.type, PROPERTY_IMAGES["Apartment"]),
        )


class EmbeddingRecord(BaseModel):
    """Canonical text blob, its vector and the record it describes."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Text that was embedded")
    embedding: list[float] = Field(..., description="Embedding vector")
    metadata: PropertyRecord = Field(..., description="Record the vector describes")

    def to_db_dict(self) -> dict:
        """Converts to a dict for JSON / Supabase storage."""
        return {
            "content": self.content,
            "embedding": list(self.embedding),
            "metadata": self.metadata.model_dump(),
        }
