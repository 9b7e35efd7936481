"""
Built-in demo listings: three Dubai Hills projects.

Used when no embedded corpus is available (use_demo_corpus). A fresh
list is built on every call.
"""

from propmatch.models import PropertyListing

_BAYUT_THUMB = "https://images.bayut.com/thumbnails/{}-800x600.webp"


def load_demo_properties() -> list[PropertyListing]:
    """Returns the demo listings."""
    return [
        PropertyListing(
            id="rosehill",
            name="Rosehill",
            type="Apartment",
            description="2BHK apartment in Dubai Hills with premium amenities.",
            price_range="AED 2,310,000",
            size="1,419 sqft",
            size_sqft=1419,
            location="Dubai Hills",
            amenities=[
                "Furnished",
                "Electricity Backup",
                "Parking Spaces: 2",
                "Gym or Health Club",
                "Swimming Pool",
            ],
            near=["School", "Mall", "Office"],
            bedrooms=2,
            price_min=2_310_000,
            price_max=2_310_000,
            link="https://www.bayut.com/property/details-13038073.html",
            image_url=_BAYUT_THUMB.format(798953965),
        ),
        PropertyListing(
            id="acacia",
            name="Acacia",
            type="Apartment",
            description="Modern 2BHK apartment in Acacia, Dubai Hills.",
            price_range="AED 3,850,000",
            size="1,322 sqft",
            size_sqft=1322,
            location="Dubai Hills",
            amenities=["Swimming Pool", "Gym or Health Club", "Security Staff"],
            near=["School", "Mall", "Office"],
            bedrooms=2,
            price_min=3_850_000,
            price_max=3_850_000,
            link="https://www.bayut.com/property/details-12941480.html",
            image_url=_BAYUT_THUMB.format(797218561),
        ),
        PropertyListing(
            id="executive-residences",
            name="Executive Residences",
            type="Apartment",
            description="Elegant 2BHK at Executive Residences, Dubai Hills.",
            price_range="AED 4,100,000",
            size="1,277 sqft",
            size_sqft=1277,
            location="Dubai Hills",
            amenities=["Swimming Pool", "Gym or Health Club", "Security Staff"],
            near=["School", "Mall", "Office"],
            bedrooms=2,
            price_min=4_100_000,
            price_max=4_100_000,
            link="https://www.bayut.com/property/details-12971676.html",
            image_url=_BAYUT_THUMB.format(797766113),
        ),
    ]
