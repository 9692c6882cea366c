"""DOCX extractor based on python-docx."""
from __future__ import annotations

from io import BytesIO

from docx import Document as DocxDocument

from domain.entities import PageText
from domain.interfaces import ExtractionError, TextExtractor


class DocxExtractor(TextExtractor):
    """Extracts DOCX text as a single page; Word stores no page layout."""

    def extract_pages(self, source: bytes | str) -> list[PageText]:
        try:
            doc = DocxDocument(BytesIO(source) if isinstance(source, bytes) else source)
        except Exception as exc:
            raise ExtractionError(f"Could not read DOCX: {exc}") from exc
        text = _collect_docx_text(doc)
        return [PageText(page_number=1, text=text)] if text else []


def _collect_docx_text(doc: DocxDocument) -> str:
    parts: list[str] = []
    parts.extend(paragraph.text for paragraph in doc.paragraphs if paragraph.text)
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                if cell.text:
                    parts.append(cell.text)
    return "\n".join(parts).strip()


__all__ = ["DocxExtractor"]
