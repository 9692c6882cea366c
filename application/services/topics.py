"""Key-topic extraction used to derive recommendation search terms."""
from __future__ import annotations

import re
from collections import Counter

from domain.entities import Concept, Topic

ACADEMIC_KEYWORDS = (
    "mathematics", "calculus", "algebra", "geometry", "statistics", "probability",
    "physics", "chemistry", "biology", "computer science", "programming",
    "algorithm", "data structure", "machine learning", "artificial intelligence",
    "engineering", "mechanical", "electrical", "civil", "chemical", "software",
    "circuit", "system", "design", "analysis", "simulation",
    "economics", "finance", "accounting", "marketing", "management", "business",
    "strategy", "entrepreneurship", "leadership", "project management",
    "philosophy", "psychology", "sociology", "anthropology", "history",
    "literature", "linguistics", "political science", "law",
    "research", "methodology", "theory", "concept", "principle", "framework",
    "evaluation", "assessment", "conclusion", "introduction",
    "chapter", "section", "paragraph", "figure", "table", "equation",
)

STOP_WORDS = frozenset(
    """
    the a an and or but in on at to for of with by is are was were be been being
    have has had do does did will would could should may might must can this that
    these those i you he she it we they me him her us them my your his its our
    their what which who when where why how
    """.split()
)

QUERY_TEMPLATES = (
    "{} tutorial",
    "{} explained",
    "learn {}",
    "{} guide",
    "{} lecture",
    "understanding {}",
    "{} basics",
)

CONCEPT_GROUPS = {
    "mathematics": ("math", "calculus", "algebra", "geometry", "statistics", "probability"),
    "computer_science": ("programming", "algorithm", "computer", "software", "data", "machine"),
    "natural_sciences": ("physics", "chemistry", "biology", "science"),
    "engineering": ("engineering", "design", "system", "circuit", "mechanical", "electrical"),
    "business": ("business", "management", "economics", "finance", "marketing", "strategy"),
    "humanities": ("philosophy", "psychology", "sociology", "history", "literature", "political"),
}

FALLBACK_SEARCH_TERM = "educational tutorial"
UNKNOWN_DOCUMENT_NAME = "unknown.pdf"
MIN_TEXT_LENGTH = 100
MIN_WORDS = 10
TOP_TERMS = 5
FALLBACK_CONCEPTS = 3
DOCUMENT_NAME_WEIGHT = 0.8

_NON_WORD = re.compile(r"[^\w\s]")


def _matches(word: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in word or word in keyword for keyword in keywords)


def _is_academic(word: str) -> bool:
    return _matches(word, ACADEMIC_KEYWORDS)


def _score(word: str, frequency: int) -> float:
    score = float(frequency)
    if _is_academic(word):
        score *= 2
    if len(word) > 8:
        score *= 1.5
    if len(word) > 12:
        score *= 1.3
    return round(score, 2)


def extract_topics(text: str, *, max_topics: int = 15, min_word_length: int = 3) -> list[Topic]:
    """Return the most characteristic words of ``text``, best first."""

    if len(text) < MIN_TEXT_LENGTH:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    words = [
        word
        for word in cleaned.split()
        if len(word) >= min_word_length and word not in STOP_WORDS and not word.isdigit()
    ]
    if len(words) < MIN_WORDS:
        return []

    topics = []
    for word, frequency in Counter(words).items():
        academic = _is_academic(word)
        if not academic and frequency < 2:
            continue
        topics.append(Topic(word=word, frequency=frequency, score=_score(word, frequency), is_academic=academic))
    # sorted is stable: equal scores keep first-appearance order.
    topics.sort(key=lambda topic: topic.score, reverse=True)
    return topics[:max_topics]


def extract_concepts(topics: list[Topic]) -> list[Concept]:
    """Group topics into broad subject areas.

    A concept's confidence comes from the first (best) topic that matched it.
    When no group matches, the top topics stand in as their own concepts.
    """

    groups: dict[str, tuple[float, list[str]]] = {}
    for topic in topics:
        for name, keywords in CONCEPT_GROUPS.items():
            if not _matches(topic.word, keywords):
                continue
            if name not in groups:
                groups[name] = (topic.score / 10, [topic.word])
            elif topic.word not in groups[name][1]:
                groups[name][1].append(topic.word)

    concepts = [
        Concept(name=name, confidence=confidence, related_topics=tuple(words))
        for name, (confidence, words) in groups.items()
    ]
    if not concepts:
        concepts = [
            Concept(name=topic.word, confidence=topic.score / 10, related_topics=(topic.word,))
            for topic in topics[:FALLBACK_CONCEPTS]
        ]
    concepts.sort(key=lambda concept: concept.confidence, reverse=True)
    return concepts


def build_search_terms(
    topics: list[Topic],
    *,
    concepts: list[Concept] | tuple[Concept, ...] = (),
    document_name: str = "",
    max_terms: int = 8,
) -> list[str]:
    """Turn concepts, topics and the document name into ranked search phrases.

    Concepts weigh ``confidence * 2`` and topics their score. A phrase produced
    twice keeps the weight of its last producer, so document-name phrases end
    up at a fixed 0.8.
    """

    if not topics and not concepts:
        return [FALLBACK_SEARCH_TERM]

    weighted = [(concept.name, concept.confidence * 2) for concept in concepts]
    weighted.extend((topic.word, topic.score) for topic in topics)
    weighted.sort(key=lambda pair: pair[1], reverse=True)

    weights: dict[str, float] = {}
    for term, weight in weighted[:TOP_TERMS]:
        for position, template in enumerate(QUERY_TEMPLATES):
            weights[template.format(term)] = weight * (1 - position * 0.1)

    if document_name and document_name != UNKNOWN_DOCUMENT_NAME:
        stem = re.sub(r"\.pdf$", "", document_name, flags=re.IGNORECASE)
        name_words = [word for word in _NON_WORD.sub(" ", stem).split() if len(word) > 3]
        for word in name_words[:2]:
            weights[f"{word} tutorial"] = DOCUMENT_NAME_WEIGHT

    # sorted is stable: equal weights keep first-production order.
    ranked = sorted(weights, key=lambda term: weights[term], reverse=True)
    return ranked[:max_terms]


__all__ = ["Concept", "Topic", "build_search_terms", "extract_concepts", "extract_topics"]
