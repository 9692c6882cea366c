"""In-memory chunk store searched by brute-force cosine similarity."""
from __future__ import annotations

import heapq
import threading
from typing import Iterable, Sequence

from domain.entities import Chunk, Document, IndexStats, ScoredChunk
from domain.interfaces import ChunkStore
from infrastructure.embedding.similarity import cosine_similarity


class InMemoryChunkStore(ChunkStore):
    """Keeps documents and chunks in insertion-ordered dicts.

    Mutations hold the lock for the whole step, so a document's chunks appear
    and disappear together. Searches copy the candidate list under the lock
    and score it without holding it.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._documents: dict[str, Document] = {}
        self._chunks: dict[str, Chunk] = {}
        self._chunk_ids_by_document: dict[str, list[str]] = {}

    def add(self, document: Document, chunks: Sequence[Chunk]) -> None:
        foreign = [chunk.id for chunk in chunks if chunk.document_id != document.id]
        if foreign:
            raise ValueError(f"Chunks {foreign} do not belong to document {document.id}")
        with self._lock:
            self._documents[document.id] = document
            self._chunk_ids_by_document[document.id] = [chunk.id for chunk in chunks]
            for chunk in chunks:
                self._chunks[chunk.id] = chunk

    def remove(self, document_id: str) -> bool:
        with self._lock:
            if document_id not in self._documents:
                return False
            del self._documents[document_id]
            for chunk_id in self._chunk_ids_by_document.pop(document_id, []):
                self._chunks.pop(chunk_id, None)
            return True

    def search(
        self,
        query_vector: Sequence[float],
        top_k: int,
        document_ids: str | Iterable[str] | None = None,
    ) -> list[ScoredChunk]:
        if top_k <= 0:
            return []
        with self._lock:
            if document_ids is None:
                candidates = list(self._chunks.values())
            else:
                scope = {document_ids} if isinstance(document_ids, str) else set(document_ids)
                candidates = [chunk for chunk in self._chunks.values() if chunk.document_id in scope]

        scored = (ScoredChunk(chunk=chunk, score=cosine_similarity(query_vector, chunk.vector)) for chunk in candidates)
        # nlargest is stable, so equal scores keep ingestion order.
        return heapq.nlargest(top_k, scored, key=lambda item: item.score)

    def get_document(self, document_id: str) -> Document | None:
        with self._lock:
            return self._documents.get(document_id)

    def list_documents(self) -> list[Document]:
        with self._lock:
            return list(self._documents.values())

    def get_chunk(self, chunk_id: str) -> Chunk | None:
        with self._lock:
            return self._chunks.get(chunk_id)

    def document_chunks(self, document_id: str) -> list[Chunk]:
        with self._lock:
            return [self._chunks[chunk_id] for chunk_id in self._chunk_ids_by_document.get(document_id, [])]

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()
            self._chunks.clear()
            self._chunk_ids_by_document.clear()

    def stats(self) -> IndexStats:
        with self._lock:
            return IndexStats(document_count=len(self._documents), chunk_count=len(self._chunks))


__all__ = ["InMemoryChunkStore"]
