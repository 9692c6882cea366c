"""Turns ranked chunks into page-attributed, query-focused snippets."""
from __future__ import annotations

import re
import string

from domain.entities import Citation, ScoredChunk

FALLBACK_LENGTH = 150
SNIPPET_LENGTH = 200
MAX_FRAGMENTS = 3
ELLIPSIS = "..."

_FRAGMENT = re.compile(r"[^.!?]+[.!?]*")


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + ELLIPSIS


def _query_terms(query: str) -> list[str]:
    terms: list[str] = []
    for raw in query.lower().split():
        term = raw.strip(string.punctuation)
        if len(term) > 3 and term not in terms:
            terms.append(term)
    return terms


def _fragments(text: str) -> list[str]:
    fragments = (match.group().strip() for match in _FRAGMENT.finditer(text))
    return [fragment for fragment in fragments if len(fragment) > 10]


def build_snippet(text: str, query: str) -> str:
    """Pick the sentences of ``text`` that mention the query the most."""

    terms = _query_terms(query)
    fragments = _fragments(text)
    scored = []
    for position, fragment in enumerate(fragments):
        lowered = fragment.lower()
        score = sum(lowered.count(term) for term in terms)
        if score > 0:
            scored.append((score, position, fragment))

    if not scored:
        return _truncate(text.strip(), FALLBACK_LENGTH)

    best = sorted(scored, key=lambda item: (-item[0], item[1]))[:MAX_FRAGMENTS]
    joined = " ".join(fragment for _score, _position, fragment in sorted(best, key=lambda item: item[1]))
    return _truncate(joined, SNIPPET_LENGTH)


def build_citation(scored_chunk: ScoredChunk, query: str, *, document_name: str) -> Citation:
    chunk = scored_chunk.chunk
    return Citation(
        document_id=chunk.document_id,
        document_name=document_name,
        pages=chunk.pages or [chunk.start_page],
        snippet=build_snippet(chunk.text, query),
    )


__all__ = ["build_citation", "build_snippet"]
