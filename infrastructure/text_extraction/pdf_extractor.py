"""PDF extractor that yields one text block per page using pypdf."""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from pypdf import PdfReader

from domain.entities import PageText
from domain.interfaces import ExtractionError, TextExtractor

logger = logging.getLogger(__name__)


class PdfExtractor(TextExtractor):
    """Reads PDF bytes or a PDF path; blank pages are skipped."""

    def extract_pages(self, source: bytes | str) -> list[PageText]:
        try:
            reader = PdfReader(BytesIO(source) if isinstance(source, bytes) else Path(source))
            pages: list[PageText] = []
            for page_number, page in enumerate(reader.pages, start=1):
                text = " ".join((page.extract_text() or "").split())
                if text:
                    pages.append(PageText(page_number=page_number, text=text))
        except Exception as exc:
            raise ExtractionError(f"Could not read PDF: {exc}") from exc
        logger.debug("Extracted %d non-empty pages from PDF", len(pages))
        return pages


__all__ = ["PdfExtractor"]
