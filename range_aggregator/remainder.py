"""Key → count / first-occurrence index over prefix sums or residues."""

from __future__ import annotations

from collections import defaultdict
from enum import Enum


class Strategy(str, Enum):
    COUNT_ALL = "count_all"
    FIRST_OCCURRENCE_ONLY = "first_occurrence_only"


def normalize_residue(value: int, k: int) -> int:
    """Residue of ``value`` mod ``k`` in ``[0, k)`` for either sign of ``value``."""
    return ((value % k) + k) % k


class RemainderIndex:
    """Map from a prefix-derived key to how often, or where first, it was seen.

    One instance holds exactly one semantics, fixed by ``strategy``:

    * ``COUNT_ALL`` keeps an occurrence count per key; counts only grow.
    * ``FIRST_OCCURRENCE_ONLY`` keeps the first position per key; it is never
      overwritten once set.
    """

    def __init__(self, strategy: Strategy) -> None:
        self.strategy = strategy
        self._counts: dict[int, int] = defaultdict(int)
        self._first: dict[int, int] = {}

    def seed(self, key: int, position: int = 0) -> None:
        """Register the empty-prefix base case."""
        self.record(key, position)

    def lookup(self, key: int) -> int | None:
        """Prior count (``COUNT_ALL``) or first position, ``None`` if absent."""
        if self.strategy is Strategy.COUNT_ALL:
            return self._counts.get(key, 0)
        return self._first.get(key)

    def record(self, key: int, position: int) -> None:
        if self.strategy is Strategy.COUNT_ALL:
            self._counts[key] += 1
        elif key not in self._first:
            self._first[key] = position

    def record_and_query(self, key: int, position: int) -> int | None:
        """Return the prior state for ``key`` and then record this occurrence.

        For ``COUNT_ALL`` the prior count is returned before incrementing. For
        ``FIRST_OCCURRENCE_ONLY`` the stored first position is returned if
        present; otherwise ``position`` is stored and ``None`` returned.
        """
        prior = self.lookup(key)
        if self.strategy is Strategy.COUNT_ALL or prior is None:
            self.record(key, position)
        return prior

    def __contains__(self, key: int) -> bool:
        if self.strategy is Strategy.COUNT_ALL:
            return self._counts.get(key, 0) > 0
        return key in self._first

    def __len__(self) -> int:
        if self.strategy is Strategy.COUNT_ALL:
            return len(self._counts)
        return len(self._first)
