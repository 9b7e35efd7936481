"""
Messages and buttons shown at each conversation step.
"""

from dataclasses import dataclass, field

from propmatch.models import Action, Step


@dataclass(frozen=True)
class Option:
    """A button: what the user sees and the value sent back."""

    label: str
    value: str
    multi_select: bool = False


@dataclass(frozen=True)
class StepPrompt:
    message: str
    options: tuple[Option, ...] = field(default_factory=tuple)

    def values(self) -> list[str]:
        return [option.value for option in self.options]

    @property
    def multi_select(self) -> bool:
        """True when the step's options are toggled and confirmed with Next."""
        return any(option.multi_select for option in self.options)


PROPERTY_INQUIRY = "property_inquiry"
SEARCH_CHOICE = "search"
RESTART_CHOICE = "restart"

PROMPTS: dict[Step, StepPrompt] = {
    Step.GREETING: StepPrompt(
        message="👋 Hi! Welcome to Dubai Property Assistant.\nHow can I help you today?",
        options=(
            Option("🏠 Property Inquiry", PROPERTY_INQUIRY),
            Option("💰 Loan Inquiry", "loan_inquiry"),
            Option("📄 Document Assistance", "document_assistance"),
            Option("📞 Contact Sales", "contact_sales"),
        ),
    ),
    Step.PROPERTY_TYPE: StepPrompt(
        message="What type of property are you looking for?",
        options=(
            Option("Apartment / Flat", "Apartment"),
            Option("Villa", "Villa"),
            Option("Penthouse", "Penthouse"),
            Option("Townhouse", "Townhouse"),
            Option("Studio", "Studio"),
            Option("Individual House", "House"),
        ),
    ),
    Step.SIZE: StepPrompt(
        message="What's your preferred property size?",
        options=(
            Option("500–800 sq ft", "500-800"),
            Option("800–1200 sq ft", "800-1200"),
            Option("1200–1800 sq ft", "1200-1800"),
            Option("1800–2500 sq ft", "1800-2500"),
            Option("2500+ sq ft", "2500+"),
        ),
    ),
    Step.BEDROOMS: StepPrompt(
        message="How many bedrooms would you prefer?",
        options=(
            Option("1 BHK", "1 BHK"),
            Option("2 BHK", "2 BHK"),
            Option("3 BHK", "3 BHK"),
            Option("4+ BHK", "4+ BHK"),
        ),
    ),
    Step.LOCATION: StepPrompt(
        message="Which location would you prefer?",
        options=(
            Option("Dubai Marina", "Dubai Marina"),
            Option("Downtown Dubai", "Downtown Dubai"),
            Option("Business Bay", "Business Bay"),
            Option("Jumeirah", "Jumeirah"),
            Option("Palm Jumeirah", "Palm Jumeirah"),
            Option("Dubai Hills", "Dubai Hills"),
            Option("🌀 No Preference", "No Preference"),
        ),
    ),
    Step.BUDGET: StepPrompt(
        message="What's your budget range?",
        options=(
            Option("AED 500K – 1M", "500000-1000000"),
            Option("AED 1M – 2M", "1000000-2000000"),
            Option("AED 2M – 5M", "2000000-5000000"),
            Option("AED 5M – 10M", "5000000-10000000"),
            Option("AED 10M+", "10000000+"),
        ),
    ),
    Step.NEAR: StepPrompt(
        message="Do you want your property near any of these?\n(Select all that apply)",
        options=(
            Option("🏫 School", "School", multi_select=True),
            Option("🏥 Hospital", "Hospital", multi_select=True),
            Option("🛒 Mall / Supermarket", "Mall", multi_select=True),
            Option("🚇 Metro Station", "Metro", multi_select=True),
            Option("🌳 Park", "Park", multi_select=True),
            Option("🏢 Office Area", "Office", multi_select=True),
        ),
    ),
    Step.AMENITIES: StepPrompt(
        message="Which amenities would you like?\n(Select all that apply)",
        options=(
            Option("🏊 Swimming Pool", "Pool", multi_select=True),
            Option("🏋️ Gym", "Gym", multi_select=True),
            Option("🏠 Clubhouse", "Clubhouse", multi_select=True),
            Option("🧒 Kids Play Area", "Kids Play Area", multi_select=True),
            Option("🚗 Parking", "Parking", multi_select=True),
            Option("🔐 Security", "Security", multi_select=True),
            Option("🐕 Pet Friendly", "Pet Friendly", multi_select=True),
        ),
    ),
    # The message is replaced by the preference summary when shown
    Step.SUMMARY: StepPrompt(
        message="Perfect! Here's what you're looking for:",
        options=(
            Option("🔍 Search Properties", SEARCH_CHOICE),
            Option("✏️ Edit Preferences", RESTART_CHOICE),
        ),
    ),
    Step.SEARCH: StepPrompt(message="Searching properties..."),
}

# Replies for greeting options this assistant does not handle
GREETING_REPLIES = {
    "loan_inquiry": "💰 Our mortgage advisors will get in touch with you shortly.",
    "document_assistance": "📄 Send your documents to our sales team and they will review them.",
    "contact_sales": "📞 A sales representative will contact you soon.",
}

RESULTS_MESSAGE = "Found {count} matching properties:"
NO_MATCHES_MESSAGE = "No exact matches found. Try relaxing some filters:"
INVALID_ACTION_MESSAGE = "Please choose one of the options below."

# Buttons shown after a search without matches
RELAX_OPTIONS = (
    ("Remove Amenities Filter", Action.relax("amenities")),
    ("Widen Budget", Action.relax("budget")),
    ("Change Location", Action.relax("location")),
    ("Start Over", Action.restart()),
)

NEXT_LABEL = "✔️ Next"
