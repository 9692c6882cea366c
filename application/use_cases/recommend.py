"""Use case that gathers cached recommendations for several search terms."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Hashable, Iterable

from application.services.recommendation_cache import Lookup, RecommendationCache
from domain.entities import RecommendationReport

logger = logging.getLogger(__name__)


def _default_item_key(item: Any) -> Hashable:
    if isinstance(item, dict):
        return repr(item["id"]) if "id" in item else repr(sorted(item.items(), key=lambda pair: str(pair[0])))
    return item if isinstance(item, Hashable) else repr(item)


async def recommend(
    search_terms: Iterable[str],
    *,
    scope: str,
    cache: RecommendationCache[list[Any]],
    lookup: Lookup[list[Any]],
    per_term_limit: int = 2,
    max_results: int = 12,
    item_key: Callable[[Any], Hashable] = _default_item_key,
) -> RecommendationReport:
    """Collect up to ``per_term_limit`` items per term through ``cache``.

    A term whose lookup fails is recorded in ``errors`` and skipped. Items are
    de-duplicated by ``item_key`` keeping the first occurrence.
    """

    report = RecommendationReport(scope=scope, search_terms=[])
    seen: set[Hashable] = set()
    for term in search_terms:
        if term in report.search_terms:
            continue
        report.search_terms.append(term)
        try:
            candidates = await cache.get_or_fetch(term, scope, per_term_limit + 2, lookup)
        except Exception as exc:  # noqa: BLE001 - recorded per term
            logger.warning("Recommendation lookup failed for %r: %s", term, exc)
            report.errors[term] = str(exc) or type(exc).__name__
            continue

        for item in list(candidates)[:per_term_limit]:
            key = item_key(item)
            if key in seen:
                continue
            seen.add(key)
            report.items.append(item)

    report.items = report.items[:max_results]
    report.generated_at = datetime.now(timezone.utc)
    return report


__all__ = ["recommend"]
