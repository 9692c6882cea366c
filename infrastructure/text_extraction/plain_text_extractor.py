"""Text extractor that treats the payload as plain UTF-8 text."""
from __future__ import annotations

from domain.entities import PageText
from domain.interfaces import TextExtractor

PAGE_BREAK = "\f"


class PlainTextExtractor(TextExtractor):
    """Simple extractor for already-clean text blobs; form feeds split pages."""

    def extract_pages(self, source: bytes | str) -> list[PageText]:
        if isinstance(source, bytes):
            source = source.decode("utf-8", errors="ignore")
        return [
            PageText(page_number=number, text=text.strip())
            for number, text in enumerate(source.split(PAGE_BREAK), start=1)
            if text.strip()
        ]


__all__ = ["PAGE_BREAK", "PlainTextExtractor"]
