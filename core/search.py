# core/search.py
import os
from enum import IntEnum
from typing import Iterable, List, Optional

from .models import CatalogEntry

MAX_RESULTS = 10
SEARCH_LIMIT = min(int(os.getenv("SEARCH_LIMIT", str(MAX_RESULTS))), MAX_RESULTS)
SCAN_CAP = 50


class MatchTier(IntEnum):
    EXACT = 0
    PREFIX = 1
    SUBSTRING = 2


def classify(name: str, query: str) -> Optional[MatchTier]:
    """
    Return the strongest tier `name` falls into for an already lower-cased
    query, or None when it does not match at all.
    """
    lowered = name.lower()
    if lowered == query:
        return MatchTier.EXACT
    if lowered.startswith(query):
        return MatchTier.PREFIX
    if query in lowered:
        return MatchTier.SUBSTRING
    return None


def search(
    query: str,
    entries: Iterable[CatalogEntry],
    limit: int = SEARCH_LIMIT,
    scan_cap: int = SCAN_CAP,
) -> List[CatalogEntry]:
    """
    Rank catalog entries against a partial name.

    Exact matches come first, then prefix matches, then substring matches,
    each group in catalog order. The scan stops as soon as more than
    `scan_cap` matches have been collected, so on very common substrings the
    tier ordering only holds within those first matches. That is accepted:
    only the first `limit` results are ever shown.
    """
    if not query or not query.strip():
        return []

    needle = query.lower()
    tiers: List[List[CatalogEntry]] = [[], [], []]
    found = 0

    for entry in entries:
        tier = classify(entry.display_name, needle)
        if tier is not None:
            tiers[tier].append(entry)
            found += 1
        if found > scan_cap:
            break

    ranked = tiers[MatchTier.EXACT] + tiers[MatchTier.PREFIX] + tiers[MatchTier.SUBSTRING]
    return ranked[:min(limit, MAX_RESULTS)]
