"""Abstract interfaces for the StudySearch retrieval core."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Sequence

from domain.entities import Chunk, Document, IndexStats, PageText, ScoredChunk, Segment


class ExtractionError(RuntimeError):
    """The upstream text source could not produce pages for a document."""


class TextExtractor(ABC):
    """Extracts page-ordered text from user provided sources (files, bytes)."""

    @abstractmethod
    def extract_pages(self, source: bytes | str) -> list[PageText]:
        """Return the pages of a source in order.

        Implementations raise :class:`ExtractionError` when the source cannot
        be read.
        """


class ChunkSplitter(ABC):
    """Splits page-ordered text into overlapping passages."""

    @abstractmethod
    def segment(self, pages: Sequence[PageText]) -> list[Segment]:
        """Return segments for the provided pages, possibly none."""


class Embedder(ABC):
    """Turns text (passages or queries) into fixed-length vectors."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the length of every vector this embedder produces."""

    @abstractmethod
    def encode(self, text: str) -> list[float]:
        """Embed a single text."""

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        return [self.encode(text) for text in texts]


class ChunkStore(ABC):
    """Owns documents and their chunks and provides similarity search."""

    @abstractmethod
    def add(self, document: Document, chunks: Sequence[Chunk]) -> None:
        """Store a document together with all of its chunks."""

    @abstractmethod
    def remove(self, document_id: str) -> bool:
        """Delete a document and its chunks. Unknown ids are ignored."""

    @abstractmethod
    def search(
        self,
        query_vector: Sequence[float],
        top_k: int,
        document_ids: str | Iterable[str] | None = None,
    ) -> list[ScoredChunk]:
        """Return the best matching chunks, best first; a bare string is one document id."""

    @abstractmethod
    def get_document(self, document_id: str) -> Document | None:
        """Retrieve a document by id."""

    @abstractmethod
    def list_documents(self) -> list[Document]:
        """Return all stored documents in ingestion order."""

    @abstractmethod
    def get_chunk(self, chunk_id: str) -> Chunk | None:
        """Retrieve a chunk by id."""

    @abstractmethod
    def document_chunks(self, document_id: str) -> list[Chunk]:
        """Return the chunks of one document in order."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every document and chunk."""

    @abstractmethod
    def stats(self) -> IndexStats:
        """Return document and chunk counts."""


__all__ = [
    "ExtractionError",
    "TextExtractor",
    "ChunkSplitter",
    "Embedder",
    "ChunkStore",
]
