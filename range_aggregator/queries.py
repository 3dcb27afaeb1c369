"""Point-in-time queries over a snapshot of the sequence and its prefix sums."""

from __future__ import annotations

from bisect import bisect_left
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .constraints import ExactFrequencyTracker, build_tracker
from .errors import InvalidWindowSizeError, UnsupportedValueError
from .models import (
    ConstraintSpec,
    EqualZerosAndOnes,
    SumAtLeast,
    SumAtMost,
    WindowAggregate,
    WindowMatch,
)
from .prefix import PrefixIndex, check_range
from .remainder import RemainderIndex, Strategy, normalize_residue
from .windows import FixedWindow, Objective, VariableWindow


@dataclass(frozen=True)
class EngineSnapshot:
    """Immutable copy of ``values[:n]`` and ``prefix[:n + 1]``."""

    values: tuple[int, ...]
    prefix: tuple[int, ...]

    @classmethod
    def from_values(cls, values: Iterable[int], *, bits: int = 64) -> EngineSnapshot:
        index = PrefixIndex(bits)
        copied = tuple(values)
        for value in copied:
            index.extend(value)
        return cls(values=copied, prefix=index.values())

    @property
    def length(self) -> int:
        return len(self.values)

    def range_sum(self, left: int, right: int) -> int:
        check_range(left, right, self.length)
        return self.prefix[right] - self.prefix[left]


def _check_window_size(k: int, length: int) -> None:
    if k <= 0 or k > length:
        raise InvalidWindowSizeError(k, length)


def iter_fixed_windows(snapshot: EngineSnapshot, k: int) -> Iterator[WindowAggregate]:
    """Aggregates of every size-``k`` window, left to right.

    The size is validated immediately; the windows themselves are produced
    lazily and the iterator cannot be restarted.
    """
    _check_window_size(k, snapshot.length)
    return _fixed_windows(snapshot.values, k)


def _fixed_windows(values: tuple[int, ...], k: int) -> Iterator[WindowAggregate]:
    window = FixedWindow(k)
    for value in values:
        aggregate = window.push(value)
        if aggregate is not None:
            yield aggregate


def max_per_fixed_window(snapshot: EngineSnapshot, k: int) -> Iterator[int]:
    return (agg.maximum for agg in iter_fixed_windows(snapshot, k))


def sum_per_fixed_window(snapshot: EngineSnapshot, k: int) -> Iterator[int]:
    _check_window_size(k, snapshot.length)
    prefix = snapshot.prefix
    return (prefix[i + k] - prefix[i] for i in range(snapshot.length - k + 1))


def max_fixed_window_sum(snapshot: EngineSnapshot, k: int) -> int:
    return max(sum_per_fixed_window(snapshot, k))


def longest_window_satisfying(snapshot: EngineSnapshot, spec: ConstraintSpec) -> WindowMatch:
    if isinstance(spec, EqualZerosAndOnes):
        return _longest_balanced(snapshot.values)
    if _is_signed_sum(snapshot, spec):
        return _signed_sum_window(snapshot, spec, Objective.LONGEST)
    return _scan(snapshot.values, spec, Objective.LONGEST)


def shortest_window_satisfying(snapshot: EngineSnapshot, spec: ConstraintSpec) -> WindowMatch:
    if isinstance(spec, EqualZerosAndOnes):
        return _shortest_balanced(snapshot.values)
    if _is_signed_sum(snapshot, spec):
        return _signed_sum_window(snapshot, spec, Objective.SHORTEST)
    return _scan(snapshot.values, spec, Objective.SHORTEST)


def _scan(values: tuple[int, ...], spec: ConstraintSpec, objective: Objective) -> WindowMatch:
    window = VariableWindow(build_tracker(spec), objective)
    for value in values:
        window.push(value)
    return window.result()


def _is_signed_sum(snapshot: EngineSnapshot, spec: ConstraintSpec) -> bool:
    return isinstance(spec, (SumAtMost, SumAtLeast)) and any(v < 0 for v in snapshot.values)


def _signed_sum_window(
    snapshot: EngineSnapshot, spec: SumAtMost | SumAtLeast, objective: Objective
) -> WindowMatch:
    """Sum-bounded window over signed input, solved on prefix sums.

    A window ``[left, right)`` qualifies when ``key[right] - key[left] <= bound``;
    ``sum_at_least n`` is the same test on negated prefixes with bound ``-n``.
    Longest: smallest ``left`` whose running-max key reaches ``key[right] - bound``.
    Shortest: largest such ``left``, kept on a stack of strictly falling keys.
    O(n log n) either way.
    """
    sign = 1 if isinstance(spec, SumAtMost) else -1
    keys = [sign * p for p in snapshot.prefix]
    bound = sign * spec.n
    best = WindowMatch.not_found()
    running_max: list[int] = []
    stack: list[int] = []
    for right in range(1, len(keys)):
        target = keys[right] - bound
        if objective is Objective.LONGEST:
            previous = keys[right - 1]
            running_max.append(max(running_max[-1], previous) if running_max else previous)
            left = bisect_left(running_max, target)
            if left >= right:
                continue
            if best.found and right - left <= best.length:
                continue
        else:
            while stack and keys[stack[-1]] <= keys[right - 1]:
                stack.pop()
            stack.append(right - 1)
            lo, hi = 0, len(stack)
            while lo < hi:
                mid = (lo + hi) // 2
                if keys[stack[mid]] >= target:
                    lo = mid + 1
                else:
                    hi = mid
            if lo == 0:
                continue
            left = stack[lo - 1]
            if best.found and right - left >= best.length:
                continue
        best = WindowMatch.at(left, right, snapshot.range_sum(left, right))
    return best


def _check_binary(value: int) -> None:
    if value not in (0, 1):
        raise UnsupportedValueError(f"equal zeros and ones needs binary input, got {value}")


def _longest_balanced(values: tuple[int, ...]) -> WindowMatch:
    # zeros count as -1 so a balanced window has a zero sum
    first = RemainderIndex(Strategy.FIRST_OCCURRENCE_ONLY)
    first.seed(0, 0)
    running = 0
    best = WindowMatch.not_found()
    for position, value in enumerate(values, start=1):
        _check_binary(value)
        running += 1 if value else -1
        prior = first.record_and_query(running, position)
        if prior is None:
            continue
        if not best.found or position - prior > best.length:
            best = WindowMatch.at(prior, position, (position - prior) // 2)
    return best


def _shortest_balanced(values: tuple[int, ...]) -> WindowMatch:
    for value in values:
        _check_binary(value)
    # every balanced window contains an adjacent 0/1 pair, itself balanced
    for i, value in enumerate(values):
        if i and value != values[i - 1]:
            return WindowMatch.at(i - 1, i + 1, 1)
    return WindowMatch.not_found()


def count_subarrays_with_sum(snapshot: EngineSnapshot, target: int) -> int:
    seen = RemainderIndex(Strategy.COUNT_ALL)
    seen.seed(0)
    total = 0
    for position in range(1, snapshot.length + 1):
        prefix = snapshot.prefix[position]
        total += seen.lookup(prefix - target)
        seen.record(prefix, position)
    return total


def count_subarrays_divisible_by(snapshot: EngineSnapshot, k: int) -> int:
    if k <= 0:
        raise ValueError(f"divisor must be positive, got {k}")
    seen = RemainderIndex(Strategy.COUNT_ALL)
    seen.seed(0)
    total = 0
    for position in range(1, snapshot.length + 1):
        residue = normalize_residue(snapshot.prefix[position], k)
        total += seen.record_and_query(residue, position)
    return total


def longest_subarray_with_sum(snapshot: EngineSnapshot, target: int) -> WindowMatch:
    first = RemainderIndex(Strategy.FIRST_OCCURRENCE_ONLY)
    first.seed(0, 0)
    best = WindowMatch.not_found()
    for position in range(1, snapshot.length + 1):
        prefix = snapshot.prefix[position]
        prior = first.lookup(prefix - target)
        if prior is not None and (not best.found or position - prior > best.length):
            best = WindowMatch.at(prior, position, target)
        first.record(prefix, position)
    return best


def has_subarray_multiple_of(
    snapshot: EngineSnapshot, k: int, *, min_length: int = 2
) -> WindowMatch:
    """First window of at least ``min_length`` items whose sum is a multiple of ``k``."""
    if k <= 0:
        raise ValueError(f"divisor must be positive, got {k}")
    if min_length < 1:
        raise ValueError(f"min_length must be positive, got {min_length}")
    first = RemainderIndex(Strategy.FIRST_OCCURRENCE_ONLY)
    first.seed(0, 0)
    for position in range(1, snapshot.length + 1):
        residue = normalize_residue(snapshot.prefix[position], k)
        prior = first.record_and_query(residue, position)
        if prior is not None and position - prior >= min_length:
            return WindowMatch.at(prior, position, snapshot.range_sum(prior, position))
    return WindowMatch.not_found()


def min_operations_to_reduce(snapshot: EngineSnapshot, x: int) -> int | None:
    """Fewest items taken from either end summing to ``x``; ``None`` if impossible.

    Equivalent to keeping the longest middle window whose sum is ``total - x``.
    """
    values = snapshot.values
    for value in values:
        if value < 0:
            raise UnsupportedValueError(f"reduction needs non-negative values, got {value}")
    target = snapshot.range_sum(0, snapshot.length) - x
    if target < 0:
        return None
    best = 0 if target == 0 else -1
    left = 0
    current = 0
    for right, value in enumerate(values):
        current += value
        while current > target and left <= right:
            current -= values[left]
            left += 1
        if current == target:
            best = max(best, right - left + 1)
    if best < 0:
        return None
    return snapshot.length - best


def find_anagrams(snapshot: EngineSnapshot, target_counts: dict[int, int]) -> list[int]:
    """Start index of every window whose frequencies equal ``target_counts``."""
    tracker = ExactFrequencyTracker(target_counts)
    size = tracker.fixed_length
    if size <= 0:
        raise InvalidWindowSizeError(size)
    items: deque[int] = deque()
    starts: list[int] = []
    for right, value in enumerate(snapshot.values):
        tracker.admit(value)
        items.append(value)
        if len(items) > size:
            tracker.retract(items.popleft())
        if len(items) == size and tracker.holds():
            starts.append(right - size + 1)
    return starts
