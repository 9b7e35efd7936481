"""
propmatch: preference-driven property matching.

Brochures are turned into structured, embedded property records offline;
a button conversation collects the user's preferences and the match
engine ranks the corpus against them.
"""

__version__ = "0.1.0"
