"""Domain entities for the StudySearch retrieval core."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class PageText:
    """Plain text of a single source page (1-based page numbers)."""

    page_number: int
    text: str


@dataclass(frozen=True, slots=True)
class Segment:
    """A passage produced by the splitter, before it is encoded."""

    text: str
    start_page: int
    end_page: int


@dataclass(frozen=True, slots=True)
class Document:
    """An ingested document. Re-ingesting the same file creates a new id."""

    id: str
    display_name: str
    page_count: int
    ingested_at: datetime


@dataclass(frozen=True, slots=True)
class Chunk:
    """A chunk of a larger document used for retrieval."""

    id: str
    document_id: str
    text: str
    start_page: int
    end_page: int
    vector: tuple[float, ...]

    @property
    def pages(self) -> list[int]:
        return list(range(self.start_page, self.end_page + 1))


@dataclass(frozen=True, slots=True)
class ScoredChunk:
    """Result returned after scoring a chunk against a query."""

    chunk: Chunk
    score: float


@dataclass(frozen=True, slots=True)
class Citation:
    document_id: str
    document_name: str
    pages: list[int]
    snippet: str


@dataclass(frozen=True, slots=True)
class SearchHit:
    """A ranked passage with its citation, as handed to query-time callers."""

    chunk_id: str
    document_id: str
    document_name: str
    pages: list[int]
    snippet: str
    score: float


@dataclass(frozen=True, slots=True)
class IndexStats:
    document_count: int
    chunk_count: int


@dataclass(frozen=True, slots=True)
class CacheStats:
    size: int
    max_entries: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


@dataclass(frozen=True, slots=True)
class IngestSuccess:
    name: str
    document: Document
    chunk_count: int


@dataclass(frozen=True, slots=True)
class IngestFailure:
    """Extraction of one document failed; the rest of the batch is unaffected."""

    name: str
    reason: str


IngestResult = Union[IngestSuccess, IngestFailure]


@dataclass(slots=True)
class IngestReport:
    results: list[IngestResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[IngestSuccess]:
        return [result for result in self.results if isinstance(result, IngestSuccess)]

    @property
    def failed(self) -> list[IngestFailure]:
        return [result for result in self.results if isinstance(result, IngestFailure)]


@dataclass(frozen=True, slots=True)
class Topic:
    word: str
    frequency: int
    score: float
    is_academic: bool


@dataclass(frozen=True, slots=True)
class Concept:
    """A broad subject area grouping related topics."""

    name: str
    confidence: float
    related_topics: tuple[str, ...]


@dataclass(slots=True)
class RecommendationReport:
    """Recommendations gathered for one scope across several search terms."""

    scope: str
    search_terms: list[str]
    items: list[Any] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    generated_at: datetime | None = None


__all__ = [
    "PageText",
    "Segment",
    "Document",
    "Chunk",
    "ScoredChunk",
    "Citation",
    "SearchHit",
    "IndexStats",
    "CacheStats",
    "IngestSuccess",
    "IngestFailure",
    "IngestResult",
    "IngestReport",
    "Topic",
    "Concept",
    "RecommendationReport",
]
