"""
Match engine.

Implements:
- Vector ranking: cosine similarity between the preference query and
  every embedded record in the corpus
- Hard filtering: drops candidates that break an explicit preference

Also provides the pure-filter searcher used with the demo listings.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import structlog

from propmatch.analysis.embeddings import Embedder, EmbeddingGenerator, cosine_similarity
from propmatch.config import NO_PREFERENCE, Settings, get_settings
from propmatch.database.corpus_store import CorpusStore, get_corpus_store
from propmatch.matching.demo_corpus import load_demo_properties
from propmatch.matching.filters import filter_candidates, matches_preferences
from propmatch.models import PropertyListing, UserPreferences

logger = structlog.get_logger()


@dataclass
class MatchResult:
    """A matched property and its score."""

    property: PropertyListing
    similarity: Optional[float] = None  # None on the pure-filter path


class Searcher(Protocol):
    async def search(self, preferences: UserPreferences) -> list[MatchResult]:
        ...


def build_query_text(preferences: UserPreferences) -> str:
    """Natural-language query embedded for the preferences."""
    parts = []

    if preferences.property_type:
        parts.append(f"{preferences.property_type} property")
    if preferences.bedrooms:
        parts.append(f"{preferences.bedrooms} bedrooms")
    if preferences.size:
        parts.append(f"size {preferences.size}")
    if preferences.location and preferences.location != NO_PREFERENCE:
        parts.append(f"in {preferences.location}")
    if preferences.budget_min is not None and preferences.budget_max is not None:
        parts.append(f"budget {preferences.budget_min} to {preferences.budget_max}")
    if preferences.amenities:
        parts.append(f"with {', '.join(preferences.amenities)}")
    if preferences.near:
        parts.append(f"near {', '.join(preferences.near)}")

    return " ".join(parts) or "property"


class MatchEngine:
    """
    Ranks the embedded corpus against a preference query.

    Flow:
    1. Build the query text and embed it
    2. Score every corpus entry (ties keep corpus order)
    3. Keep the top max_candidates, then those strictly above similarity_floor
    4. Apply the hard filters
    """

    def __init__(
        self,
        embedder: Embedder,
        store: CorpusStore,
        similarity_floor: Optional[float] = None,
        max_candidates: Optional[int] = None,
        link: Optional[str] = None,
    ):
        settings = get_settings()
        self.embedder = embedder
        self.store = store
        self.similarity_floor = (
            settings.similarity_floor if similarity_floor is None else similarity_floor
        )
        self.max_candidates = max_candidates or settings.max_candidates
        self.link = settings.listing_link if link is None else link

    async def rank(self, preferences: UserPreferences) -> list[MatchResult]:
        """Scored candidates before hard filtering."""
        corpus = self.store.load()
        if not corpus:
            logger.info("Corpus is empty")
            return []

        query_text = build_query_text(preferences)
        query_vector = await self.embedder.embed(query_text)

        # Entries embedded at another dimensionality cannot be compared
        scored = [
            (cosine_similarity(query_vector, entry.embedding), position, entry)
            for position, entry in enumerate(corpus)
            if len(entry.embedding) == len(query_vector)
        ]
        skipped = len(corpus) - len(scored)
        if skipped:
            logger.warning(
                "Corpus entries with a different embedding size skipped",
                skipped=skipped,
                query_dim=len(query_vector),
            )
        # sorted() is stable: equal scores keep corpus order
        scored = sorted(scored, key=lambda item: item[0], reverse=True)
        top = scored[: self.max_candidates]

        return [
            MatchResult(
                property=PropertyListing.from_record(entry.metadata, position, self.link),
                similarity=similarity,
            )
            for similarity, position, entry in top
            if similarity > self.similarity_floor
        ]

    async def search(self, preferences: UserPreferences) -> list[MatchResult]:
        """
        Finds properties matching the preferences.

        Returns:
            MatchResults in descending similarity order

        Raises:
            EmbeddingServiceError: If the query cannot be embedded
        """
        ranked = await self.rank(preferences)
        matches = [m for m in ranked if matches_preferences(m.property, preferences)]

        logger.info(
            "Matches found",
            query=build_query_text(preferences),
            above_floor=len(ranked),
            matches=len(matches),
        )
        return matches


class FilterSearcher:
    """Hard filters only, over a fixed set of listings (no embeddings)."""

    def __init__(self, load_listings: Callable[[], list[PropertyListing]]):
        self.load_listings = load_listings

    async def search(self, preferences: UserPreferences) -> list[MatchResult]:
        listings = filter_candidates(self.load_listings(), preferences)
        logger.info("Demo matches found", matches=len(listings))
        return [MatchResult(property=listing) for listing in listings]


def get_searcher(settings: Optional[Settings] = None) -> Searcher:
    """Builds the searcher the settings ask for."""
    settings = settings or get_settings()

    if settings.use_demo_corpus:
        return FilterSearcher(load_demo_properties)

    return MatchEngine(EmbeddingGenerator(), get_corpus_store(settings))
