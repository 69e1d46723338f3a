from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

from .models import FoodRecord

logger = logging.getLogger(__name__)

MAX_RESULTS = 20


def _clamp_limit(limit: int) -> int:
    return max(1, min(limit, MAX_RESULTS))


def _matches(record: FoodRecord, query: str, folded_query: str) -> bool:
    if query in record.name_primary:
        return True
    if record.name_phonetic is None:
        return False
    return folded_query in record.name_phonetic.casefold()


def _rank_key(record: FoodRecord, query: str) -> tuple[int, int]:
    """Exact name first, then prefix matches, then shorter names."""
    name = record.name_primary
    if name == query:
        tier = 0
    elif name.startswith(query):
        tier = 1
    else:
        tier = 2
    return tier, len(name)


class FoodLookupEngine:
    """
    Read-only index of food records keyed by ``food_code``.

    The index is built once from the full record sequence and never mutated,
    so a single instance can be shared between callers without locking.
    """

    def __init__(self, records: Iterable[FoodRecord | Mapping[str, Any]]) -> None:
        index: dict[str, FoodRecord] = {}
        for item in records:
            record = item if isinstance(item, FoodRecord) else FoodRecord.model_validate(item)
            if record.food_code in index:
                logger.warning(
                    "Duplicate food_code %r; keeping the last loaded record",
                    record.food_code,
                )
            index[record.food_code] = record
        self._index: Mapping[str, FoodRecord] = MappingProxyType(index)
        logger.info("Food lookup index built with %d records", len(index))

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, food_code: object) -> bool:
        return food_code in self._index

    def __iter__(self) -> Iterator[FoodRecord]:
        return iter(self._index.values())

    def search_by_name(self, query: str, limit: int = MAX_RESULTS) -> list[FoodRecord]:
        """
        Records whose name contains ``query`` or whose phonetic reading
        contains it case-insensitively, ranked by relevance.
        """
        folded_query = query.strip().casefold()
        matches = [r for r in self._index.values() if _matches(r, query, folded_query)]
        # list.sort is stable, so equal-rank records keep dataset order.
        matches.sort(key=lambda r: _rank_key(r, query))
        return matches[: _clamp_limit(limit)]

    def get_food_by_code(self, food_code: str) -> FoodRecord | None:
        return self._index.get(food_code)

    def search_by_category(self, category: str, limit: int = MAX_RESULTS) -> list[FoodRecord]:
        results: list[FoodRecord] = []
        cap = _clamp_limit(limit)
        for record in self._index.values():
            if record.category == category:
                results.append(record)
                if len(results) >= cap:
                    break
        return results

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        return list(dict.fromkeys(r.category for r in self._index.values()))
