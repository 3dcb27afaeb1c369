"""Public API facade for the range aggregator."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from . import queries
from .alphabet import Alphabet
from .engine import RangeAggregationEngine
from .models import (
    ConstraintSpec,
    CoversCharFrequency,
    EngineConfig,
    WindowAggregate,
    WindowMatch,
)
from .storage import SequenceStore


class RangeAggregatorAPI:
    """High-level façade consumed by input and output collaborators.

    Every read takes a fresh snapshot, so lazily consumed results keep
    describing the sequence as it was when the call was made.
    """

    def __init__(self, config: EngineConfig, store: SequenceStore | None = None) -> None:
        self.engine = RangeAggregationEngine(config, store)

    def append(self, value: int) -> int:
        return self.engine.append(value)

    def extend(self, values: Iterable[int]) -> list[int]:
        """Append in-memory values, returning their indices."""
        return self.engine.extend(values)

    def get(self, index: int) -> int:
        return self.engine.get(index)

    def length(self) -> int:
        return self.engine.length()

    def clear(self) -> None:
        self.engine.clear()

    def values(self) -> list[int]:
        return list(self.engine.snapshot().values)

    def range_sum(self, left: int, right: int) -> int:
        return self.engine.range_sum(left, right)

    def max_per_fixed_window(self, k: int) -> Iterator[int]:
        """Lazy maxima of every size-``k`` window."""
        return queries.max_per_fixed_window(self.engine.snapshot(), k)

    def sum_per_fixed_window(self, k: int) -> Iterator[int]:
        return queries.sum_per_fixed_window(self.engine.snapshot(), k)

    def aggregates_per_fixed_window(self, k: int) -> Iterator[WindowAggregate]:
        return queries.iter_fixed_windows(self.engine.snapshot(), k)

    def max_fixed_window_sum(self, k: int) -> int:
        return queries.max_fixed_window_sum(self.engine.snapshot(), k)

    def longest_window_satisfying(self, spec: ConstraintSpec) -> WindowMatch:
        return queries.longest_window_satisfying(self.engine.snapshot(), spec)

    def shortest_window_satisfying(self, spec: ConstraintSpec) -> WindowMatch:
        return queries.shortest_window_satisfying(self.engine.snapshot(), spec)

    def count_subarrays_with_sum(self, target: int) -> int:
        return queries.count_subarrays_with_sum(self.engine.snapshot(), target)

    def count_subarrays_divisible_by(self, k: int) -> int:
        return queries.count_subarrays_divisible_by(self.engine.snapshot(), k)

    def longest_subarray_with_sum(self, target: int) -> WindowMatch:
        return queries.longest_subarray_with_sum(self.engine.snapshot(), target)

    def has_subarray_multiple_of(self, k: int, *, min_length: int = 2) -> WindowMatch:
        return queries.has_subarray_multiple_of(
            self.engine.snapshot(), k, min_length=min_length
        )

    def min_operations_to_reduce(self, x: int) -> int | None:
        return queries.min_operations_to_reduce(self.engine.snapshot(), x)

    def find_anagrams(self, target_counts: dict[int, int]) -> list[int]:
        return queries.find_anagrams(self.engine.snapshot(), target_counts)

    def extend_text(self, text: str, alphabet: Alphabet) -> list[int]:
        """Append the codes of every symbol in ``text``."""
        return self.engine.extend(alphabet.encode(text))

    def text(self, alphabet: Alphabet) -> str:
        return alphabet.decode(self.engine.snapshot().values)

    def find_anagrams_of(self, pattern: str, alphabet: Alphabet) -> list[int]:
        """Start index of every window that is a permutation of ``pattern``."""
        return self.find_anagrams(alphabet.counts(pattern))

    def shortest_cover_of(self, pattern: str, alphabet: Alphabet) -> WindowMatch:
        """Shortest window holding every symbol of ``pattern`` with multiplicity."""
        spec = CoversCharFrequency(target_counts=alphabet.counts(pattern))
        return self.shortest_window_satisfying(spec)


def build_api(config: EngineConfig | None = None) -> RangeAggregatorAPI:
    """Convenience constructor with defaults."""
    return RangeAggregatorAPI(config or EngineConfig())
