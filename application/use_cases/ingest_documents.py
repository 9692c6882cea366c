"""Use case for ingesting a batch of documents into the index."""
from __future__ import annotations

import logging
from typing import Iterable

from application.services.document_index import DocumentIndex
from domain.entities import IngestFailure, IngestReport, IngestSuccess
from domain.interfaces import TextExtractor

logger = logging.getLogger(__name__)


def ingest_documents(
    sources: Iterable[tuple[str, bytes | str]],
    *,
    extractor: TextExtractor,
    index: DocumentIndex,
) -> IngestReport:
    """Ingest ``(name, source)`` pairs one at a time.

    A source whose extraction fails is reported as an :class:`IngestFailure`
    and the remaining sources are still ingested.
    """

    report = IngestReport()
    for name, source in sources:
        try:
            pages = extractor.extract_pages(source)
        except Exception as exc:  # noqa: BLE001 - recorded per document
            logger.warning("Text extraction failed for %s: %s", name, exc)
            report.results.append(IngestFailure(name=name, reason=str(exc) or type(exc).__name__))
            continue

        document = index.add_document(name, pages)
        chunk_count = len(index.get_document_chunks(document.id))
        report.results.append(IngestSuccess(name=name, document=document, chunk_count=chunk_count))

    logger.info("Ingested %d of %d documents", len(report.succeeded), len(report.results))
    return report


__all__ = ["ingest_documents"]
