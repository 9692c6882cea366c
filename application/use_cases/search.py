"""Use case that answers a free-text query with cited passages."""
from __future__ import annotations

from typing import Iterable

from application.services.citations import build_citation
from application.services.document_index import DocumentIndex
from domain.entities import SearchHit

UNKNOWN_DOCUMENT = "Unknown Document"


def search(
    query_text: str,
    *,
    index: DocumentIndex,
    scope_document_ids: str | Iterable[str] | None = None,
    top_k: int | None = None,
) -> list[SearchHit]:
    """Search the index and attach a citation to every ranked chunk."""

    hits: list[SearchHit] = []
    for result in index.search(query_text, scope_document_ids=scope_document_ids, top_k=top_k):
        document = index.get_document(result.chunk.document_id)
        citation = build_citation(
            result,
            query_text,
            document_name=document.display_name if document else UNKNOWN_DOCUMENT,
        )
        hits.append(
            SearchHit(
                chunk_id=result.chunk.id,
                document_id=citation.document_id,
                document_name=citation.document_name,
                pages=citation.pages,
                snippet=citation.snippet,
                score=result.score,
            )
        )
    return hits


__all__ = ["search"]
