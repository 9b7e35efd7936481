"""
Matching module.

Vector ranking plus hard filters over the property corpus.
"""

from propmatch.matching.engine import (
    FilterSearcher,
    MatchEngine,
    MatchResult,
    Searcher,
    build_query_text,
    get_searcher,
)
from propmatch.matching.filters import filter_candidates, matches_preferences
from propmatch.matching.demo_corpus import load_demo_properties

__all__ = [
    "FilterSearcher",
    "MatchEngine",
    "MatchResult",
    "Searcher",
    "build_query_text",
    "get_searcher",
    "filter_candidates",
    "matches_preferences",
    "load_demo_properties",
]
