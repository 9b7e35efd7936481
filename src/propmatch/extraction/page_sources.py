"""
Page-text producers for the document ingestor.

A page source yields one item per page: either the page text or the
sequence of text fragments found on it.
"""

from io import BytesIO
from pathlib import Path
from typing import Iterable, Iterator, Protocol, Sequence, Union

import structlog
from pypdf import PdfReader

logger = structlog.get_logger()

PageText = Union[str, Sequence[str]]


class PageSource(Protocol):
    """Anything that can produce the pages of one document."""

    name: str

    def pages(self) -> Iterable[PageText]:
        ...


class TextPageSource:
    """In-memory pages, for text that was already extracted elsewhere."""

    def __init__(self, pages: Sequence[PageText], name: str = "text"):
        self._pages = list(pages)
        self.name = name

    def pages(self) -> Iterator[PageText]:
        yield from self._pages


class PdfPageSource:
    """
    Reads a PDF brochure with pypdf.

    Each page is returned as the list of text fragments reported by the
    pypdf text visitor, in content-stream order.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.name = self.path.stem

    def pages(self) -> Iterator[list[str]]:
        data = self.path.read_bytes()
        reader = PdfReader(BytesIO(data))
        logger.info("PDF opened", source=self.name, pages=len(reader.pages))

        for page in reader.pages:
            fragments: list[str] = []

            def visitor(text, cm, tm, font_dict, font_size):
                if text:
                    fragments.append(text)

            page.extract_text(visitor_text=visitor)
            yield fragments
