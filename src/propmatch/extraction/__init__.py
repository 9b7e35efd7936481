"""
Brochure text extraction.

Turns unstructured brochure text into PropertyRecord objects.
"""

from propmatch.extraction.field_extractor import (
    FieldExtractor,
    RECORD_BOUNDARY_PATTERN,
    clean_record_name,
    find_record_names,
)
from propmatch.extraction.document_ingestor import DocumentIngestor
from propmatch.extraction.page_sources import PageSource, PdfPageSource, TextPageSource

__all__ = [
    "FieldExtractor",
    "RECORD_BOUNDARY_PATTERN",
    "clean_record_name",
    "find_record_names",
    "DocumentIngestor",
    "PageSource",
    "PdfPageSource",
    "TextPageSource",
]
