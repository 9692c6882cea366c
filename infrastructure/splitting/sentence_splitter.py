"""Chunk splitter that packs whole sentences into overlapping passages."""
from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import Literal, Sequence

from domain.entities import PageText, Segment
from domain.interfaces import ChunkSplitter

OverlapUnit = Literal["chars", "words"]

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_WORD = re.compile(r"\S+")
PAGE_SEPARATOR = "\n\n"


@dataclass(frozen=True, slots=True)
class _Span:
    start: int
    end: int


class _PageMap:
    """Maps character offsets of the joined text back to page numbers."""

    def __init__(self, pages: Sequence[PageText]) -> None:
        parts: list[str] = []
        self._starts: list[int] = []
        self._numbers: list[int] = []
        cursor = 0
        for index, page in enumerate(pages):
            if index:
                parts.append(PAGE_SEPARATOR)
                cursor += len(PAGE_SEPARATOR)
            if page.text:
                self._starts.append(cursor)
                self._numbers.append(page.page_number)
            parts.append(page.text)
            cursor += len(page.text)
        self.text = "".join(parts)

    def page_at(self, offset: int) -> int:
        position = bisect.bisect_right(self._starts, offset) - 1
        if position < 0:
            return 1
        return self._numbers[position]


def _sentences(text: str) -> list[_Span]:
    spans: list[_Span] = []
    cursor = 0
    boundaries = [match.start() for match in _SENTENCE_BOUNDARY.finditer(text)]
    for end in [*boundaries, len(text)]:
        fragment = text[cursor:end]
        stripped = fragment.strip()
        if stripped:
            start = cursor + (len(fragment) - len(fragment.lstrip()))
            spans.append(_Span(start, start + len(stripped)))
        cursor = end
    return spans


def _render(text: str, spans: Sequence[_Span]) -> str:
    return " ".join(" ".join(text[span.start : span.end].split()) for span in spans)


def _overlap_seed(text: str, spans: Sequence[_Span], overlap: int, unit: OverlapUnit) -> _Span | None:
    if overlap <= 0 or not spans:
        return None
    first, last = spans[0].start, spans[-1].end
    if unit == "chars":
        start = max(first, last - overlap)
        while start < last and text[start].isspace():
            start += 1
        return _Span(start, last) if start < last else None

    word_count = max(1, overlap // 5)
    words = list(_WORD.finditer(text, first, last))
    if not words:
        return None
    return _Span(words[-min(word_count, len(words))].start(), last)


def _segment(pages: Sequence[PageText], target_size: int, overlap: int, unit: OverlapUnit) -> list[Segment]:
    if target_size <= 0:
        raise ValueError("target_size must be > 0")
    if overlap < 0:
        raise ValueError("overlap must be >= 0")

    page_map = _PageMap(pages)
    text = page_map.text
    segments: list[Segment] = []

    def emit(spans: list[_Span]) -> None:
        segments.append(
            Segment(
                text=_render(text, spans),
                start_page=page_map.page_at(spans[0].start),
                end_page=page_map.page_at(spans[-1].end - 1),
            )
        )

    buffer: list[_Span] = []
    buffer_length = 0
    for sentence in _sentences(text):
        sentence_length = len(_render(text, [sentence]))
        projected = buffer_length + (1 if buffer else 0) + sentence_length
        if projected > target_size and buffer:
            emit(buffer)
            seed = _overlap_seed(text, buffer, overlap, unit)
            buffer = [seed] if seed else []
            buffer_length = len(_render(text, buffer)) if buffer else 0
        buffer.append(sentence)
        buffer_length += (1 if buffer_length else 0) + sentence_length

    if buffer:
        emit(buffer)
    return segments


def segment(text: str, *, target_size: int, overlap: int) -> list[Segment]:
    """Split unpaged text, seeding each new passage with trailing characters."""

    return _segment([PageText(page_number=1, text=text)], target_size, overlap, "chars")


def segment_pages(pages: Sequence[PageText], *, target_size: int, overlap: int) -> list[Segment]:
    """Split page-ordered text, seeding each new passage with trailing words.

    Page numbers come from exact character offsets into the joined page text,
    so a passage that crosses a page break reports both pages.
    """

    return _segment(pages, target_size, overlap, "words")


class SentenceSplitter(ChunkSplitter):
    """Pack sentences into passages of roughly ``target_size`` characters."""

    def __init__(self, target_size: int = 600, overlap: int = 100) -> None:
        self.target_size = target_size
        self.overlap = overlap

    def segment(self, pages: Sequence[PageText]) -> list[Segment]:
        return segment_pages(pages, target_size=self.target_size, overlap=self.overlap)


__all__ = ["PAGE_SEPARATOR", "SentenceSplitter", "segment", "segment_pages"]
