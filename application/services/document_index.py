"""Document index: segments, encodes and searches uploaded documents."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Sequence

from domain.entities import Chunk, Document, IndexStats, PageText, ScoredChunk
from domain.interfaces import ChunkSplitter, ChunkStore, Embedder

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_page_order(pages: Sequence[PageText]) -> None:
    previous = 0
    for page in pages:
        if page.page_number <= previous:
            raise ValueError(
                f"Page numbers must be strictly increasing, got {page.page_number} after {previous}"
            )
        previous = page.page_number


class DocumentIndex:
    """Owns the corpus of one session.

    Callers construct an index explicitly and pass it around; there is no
    process-wide instance. Not-found and empty conditions are answered with
    empty results rather than exceptions.
    """

    def __init__(
        self,
        *,
        splitter: ChunkSplitter,
        embedder: Embedder,
        store: ChunkStore,
        default_top_k: int = 3,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._splitter = splitter
        self._embedder = embedder
        self._store = store
        self._default_top_k = default_top_k
        self._clock = clock
        self._disposed = False

    def add_document(self, name: str, pages: Sequence[PageText]) -> Document:
        """Index ``pages`` as a new document; the same file twice gives two documents.

        Raises ``ValueError`` unless page numbers are 1-based and strictly increasing.
        """

        self._ensure_open()
        _check_page_order(pages)
        document = Document(
            id=uuid.uuid4().hex,
            display_name=name,
            page_count=max((page.page_number for page in pages), default=0),
            ingested_at=self._clock(),
        )
        segments = self._splitter.segment(pages)
        vectors = self._embedder.embed_texts([segment.text for segment in segments])
        chunks = [
            Chunk(
                id=f"{document.id}-{position:04d}",
                document_id=document.id,
                text=segment.text,
                start_page=segment.start_page,
                end_page=segment.end_page,
                vector=tuple(vector),
            )
            for position, (segment, vector) in enumerate(zip(segments, vectors))
        ]
        self._store.add(document, chunks)
        if chunks:
            logger.info("Indexed %s as %s: %d pages, %d chunks", name, document.id, document.page_count, len(chunks))
        else:
            logger.warning("Indexed %s as %s with no indexable text", name, document.id)
        return document

    def remove_document(self, document_id: str) -> bool:
        self._ensure_open()
        removed = self._store.remove(document_id)
        if removed:
            logger.info("Removed document %s", document_id)
        return removed

    def search(
        self,
        query: str,
        *,
        scope_document_ids: str | Iterable[str] | None = None,
        top_k: int | None = None,
    ) -> list[ScoredChunk]:
        """Return up to ``top_k`` chunks, best first, ties in ingestion order."""

        self._ensure_open()
        limit = self._default_top_k if top_k is None else top_k
        if limit <= 0 or not query.strip():
            return []
        query_vector = self._embedder.encode(query)
        results = self._store.search(query_vector, limit, scope_document_ids)
        logger.debug("Query %r matched %d chunks", query, len(results))
        return results

    def get_document(self, document_id: str) -> Document | None:
        return self._store.get_document(document_id)

    def list_documents(self) -> list[Document]:
        return self._store.list_documents()

    def get_document_chunks(self, document_id: str) -> list[Chunk]:
        return self._store.document_chunks(document_id)

    def get_chunk(self, chunk_id: str) -> Chunk | None:
        return self._store.get_chunk(chunk_id)

    def clear(self) -> None:
        self._ensure_open()
        self._store.clear()
        logger.info("Index cleared")

    def stats(self) -> IndexStats:
        return self._store.stats()

    def dispose(self) -> None:
        """Drop all content; the index cannot be used afterwards."""

        if self._disposed:
            return
        self._store.clear()
        self._disposed = True

    def _ensure_open(self) -> None:
        if self._disposed:
            raise RuntimeError("DocumentIndex has been disposed")


__all__ = ["DocumentIndex"]
