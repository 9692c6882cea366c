"""Dependency wiring for the StudySearch application."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Callable, Literal, Mapping

from application.services.document_index import DocumentIndex
from application.services.recommendation_cache import Lookup, RecommendationCache
from domain.interfaces import ChunkSplitter, ChunkStore, Embedder, TextExtractor
from infrastructure.embedding.bucket_hash_embedder import BucketHashEmbedder
from infrastructure.splitting.sentence_splitter import SentenceSplitter
from infrastructure.storage.in_memory_chunk_store import InMemoryChunkStore
from infrastructure.text_extraction.docx_extractor import DocxExtractor
from infrastructure.text_extraction.pdf_extractor import PdfExtractor
from infrastructure.text_extraction.plain_text_extractor import PlainTextExtractor

ExtractorName = Literal["pdf", "docx", "plain"]

ENV_PREFIX = "STUDYSEARCH_"


@dataclass(slots=True)
class Container:
    """Simple container bundling concrete infrastructure implementations."""

    config: ContainerConfig
    extractor: TextExtractor
    splitter: ChunkSplitter
    embedder: Embedder
    chunk_store: ChunkStore
    index: DocumentIndex
    recommendation_cache: RecommendationCache[Any]
    recommendation_lookup: Lookup[list[Any]] | None = None


@dataclass(slots=True)
class ContainerConfig:
    """Tunable options of the retrieval core."""

    extractor: ExtractorName = "pdf"
    chunk_target_size: int = 600
    chunk_overlap: int = 100
    vector_dimension: int = 100
    top_k: int = 3
    cache_ttl_ms: int = 86_400_000
    cache_max_entries: int = 100

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ContainerConfig:
        """Read ``STUDYSEARCH_<OPTION>`` overrides, e.g. ``STUDYSEARCH_TOP_K=5``."""

        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            extractor=env.get(f"{ENV_PREFIX}EXTRACTOR", defaults.extractor),  # type: ignore[arg-type]
            chunk_target_size=_to_int(env.get(f"{ENV_PREFIX}CHUNK_TARGET_SIZE"), default=defaults.chunk_target_size, minimum=1),
            chunk_overlap=_to_int(env.get(f"{ENV_PREFIX}CHUNK_OVERLAP"), default=defaults.chunk_overlap, minimum=0),
            vector_dimension=_to_int(env.get(f"{ENV_PREFIX}VECTOR_DIMENSION"), default=defaults.vector_dimension, minimum=1),
            top_k=_to_int(env.get(f"{ENV_PREFIX}TOP_K"), default=defaults.top_k, minimum=1),
            cache_ttl_ms=_to_int(env.get(f"{ENV_PREFIX}CACHE_TTL_MS"), default=defaults.cache_ttl_ms, minimum=0),
            cache_max_entries=_to_int(env.get(f"{ENV_PREFIX}CACHE_MAX_ENTRIES"), default=defaults.cache_max_entries, minimum=1),
        )

    def as_dict(self) -> dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


def _to_int(value: str | None, *, default: int, minimum: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"Expected an integer, got {value!r}") from exc
    return max(minimum, parsed)


_EXTRACTOR_FACTORIES: dict[ExtractorName, Callable[[], TextExtractor]] = {
    "pdf": PdfExtractor,
    "docx": DocxExtractor,
    "plain": PlainTextExtractor,
}


def build_default_container(
    config: ContainerConfig | None = None,
    *,
    recommendation_lookup: Lookup[list[Any]] | None = None,
) -> Container:
    """Instantiate the default infrastructure stack.

    ``recommendation_lookup`` is the async ``(query, limit)`` source behind the
    recommendation cache; without one the app serves no recommendations.
    """

    cfg = config or ContainerConfig()
    try:
        extractor = _EXTRACTOR_FACTORIES[cfg.extractor]()
    except KeyError as exc:
        raise ValueError(f"Unknown extractor '{cfg.extractor}'") from exc
    splitter = SentenceSplitter(target_size=cfg.chunk_target_size, overlap=cfg.chunk_overlap)
    embedder = BucketHashEmbedder(dimension=cfg.vector_dimension)
    chunk_store = InMemoryChunkStore()
    index = DocumentIndex(
        splitter=splitter,
        embedder=embedder,
        store=chunk_store,
        default_top_k=cfg.top_k,
    )
    recommendation_cache: RecommendationCache[Any] = RecommendationCache(
        ttl_seconds=cfg.cache_ttl_ms / 1000,
        max_entries=cfg.cache_max_entries,
    )

    return Container(
        config=cfg,
        extractor=extractor,
        splitter=splitter,
        embedder=embedder,
        chunk_store=chunk_store,
        index=index,
        recommendation_cache=recommendation_cache,
        recommendation_lookup=recommendation_lookup,
    )


__all__ = ["Container", "ContainerConfig", "ENV_PREFIX", "build_default_container"]
