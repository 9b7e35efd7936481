"""
Document ingestion.

Turns one brochure into an ordered list of PropertyRecord: pages are
concatenated, record boundaries ("Project Rosehill", "Building: Acacia")
split the text into spans, and each span goes through the field
extractor. A document is ingested all-or-nothing.
"""

from typing import Iterable, Optional

import structlog

from propmatch.exceptions import DocumentError, DocumentParseError, DocumentReadError
from propmatch.extraction.field_extractor import FieldExtractor, find_record_names
from propmatch.extraction.page_sources import PageSource, PageText
from propmatch.models import PropertyRecord

logger = structlog.get_logger()


class DocumentIngestor:
    """Extracts property records from page-by-page document text."""

    def __init__(self, extractor: Optional[FieldExtractor] = None):
        self.extractor = extractor or FieldExtractor()

    @staticmethod
    def _page_text(page: PageText) -> str:
        if isinstance(page, str):
            return page
        return " ".join(page)

    def read_text(self, source: PageSource) -> str:
        """
        Reads every page and joins them with newlines.

        Raises:
            DocumentReadError: If the source cannot be read
            DocumentParseError: If text extraction fails on a page
        """
        texts = []
        try:
            for page in source.pages():
                texts.append(self._page_text(page))
        except DocumentError:
            raise
        except OSError as e:
            raise DocumentReadError(
                f"Cannot read document '{source.name}': {e}", source=source.name
            ) from e
        except Exception as e:
            raise DocumentParseError(
                f"Text extraction failed on page {len(texts) + 1} of '{source.name}': {e}",
                source=source.name,
            ) from e

        return "\n".join(texts)

    def split_records(self, text: str) -> list[tuple[Optional[str], str]]:
        """
        Splits the text at record boundaries.

        Returns:
            (name, span) pairs; a single (None, text) pair when the text
            has no boundary line.
        """
        boundaries = find_record_names(text)
        if not boundaries:
            return [(None, text)]

        spans = []
        for i, (start, name) in enumerate(boundaries):
            end = boundaries[i + 1][0] if i + 1 < len(boundaries) else len(text)
            spans.append((name, text[start:end]))
        return spans

    def ingest_text(self, text: str) -> list[PropertyRecord]:
        """Extracts records from already concatenated document text."""
        return [
            self.extractor.extract(span, name=name)
            for name, span in self.split_records(text)
        ]

    def ingest(self, source: PageSource) -> list[PropertyRecord]:
        """
        Ingests one document.

        Args:
            source: Page-text producer for the document

        Returns:
            Records in document order
        """
        text = self.read_text(source)
        records = self.ingest_text(text)
        logger.info(
            "Document ingested",
            source=source.name,
            characters=len(text),
            records=len(records),
        )
        return records

    def ingest_many(
        self, sources: Iterable[PageSource]
    ) -> tuple[dict[str, list[PropertyRecord]], dict[str, DocumentError]]:
        """
        Ingests several documents; a failing document does not stop the others.

        Returns:
            (records per source name, error per failed source name)
        """
        ingested: dict[str, list[PropertyRecord]] = {}
        failed: dict[str, DocumentError] = {}

        for source in sources:
            try:
                ingested[source.name] = self.ingest(source)
            except DocumentError as e:
                logger.error("Document ingestion failed", source=source.name, error=str(e))
                failed[source.name] = e

        return ingested, failed
