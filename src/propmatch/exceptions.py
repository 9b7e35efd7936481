"""
Errors raised by the matching pipeline.

Extraction fallbacks, empty searches and malformed preference tokens are
not errors: they resolve to defaults, an empty result or "no constraint".
"""


class PropMatchError(Exception):
    """Base class for all propmatch errors."""


class DocumentError(PropMatchError):
    """A source document could not be turned into records."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class DocumentReadError(DocumentError):
    """The source document cannot be read."""


class DocumentParseError(DocumentError):
    """Text extraction failed on a page of the document."""


class EmbeddingServiceError(PropMatchError):
    """The embedding service failed (network, quota or auth)."""


class InvalidTransitionError(PropMatchError):
    """The current conversation step does not accept the given action."""
