from __future__ import annotations

import random

import pytest

from range_aggregator import queries
from range_aggregator.alphabet import Alphabet
from range_aggregator.errors import InvalidWindowSizeError, UnsupportedValueError
from range_aggregator.models import (
    CoversCharFrequency,
    EqualZerosAndOnes,
    ExactCharFrequencyMatch,
    MaxDistinct,
    NoRepeats,
    SumAtLeast,
    SumAtMost,
)
from range_aggregator.queries import EngineSnapshot


def _snap(values: list[int]) -> EngineSnapshot:
    return EngineSnapshot.from_values(values)


def test_fixed_window_maxima_and_sums() -> None:
    snap = _snap([2, 1, 5, 1, 3, 2])
    assert list(queries.max_per_fixed_window(snap, 3)) == [5, 5, 5, 3]
    assert list(queries.sum_per_fixed_window(snap, 3)) == [8, 7, 9, 6]
    assert queries.max_fixed_window_sum(snap, 3) == 9


def test_classic_sliding_window_maximum() -> None:
    snap = _snap([1, 3, -1, -3, 5, 3, 6, 7])
    assert list(queries.max_per_fixed_window(snap, 3)) == [3, 3, 5, 5, 6, 7]


def test_window_sums_match_brute_force() -> None:
    rng = random.Random(3)
    values = [rng.randint(-20, 20) for _ in range(30)]
    snap = _snap(values)
    for k in range(1, len(values) + 1):
        sums = list(queries.sum_per_fixed_window(snap, k))
        assert sums == [sum(values[i : i + k]) for i in range(len(values) - k + 1)]


@pytest.mark.parametrize("k", [0, -1, 7])
def test_invalid_window_size_raises_on_call(k: int) -> None:
    snap = _snap([2, 1, 5, 1, 3, 2])
    with pytest.raises(InvalidWindowSizeError):
        queries.max_per_fixed_window(snap, k)
    with pytest.raises(InvalidWindowSizeError):
        queries.sum_per_fixed_window(snap, k)


def test_empty_sequence_has_no_valid_window() -> None:
    with pytest.raises(InvalidWindowSizeError):
        queries.iter_fixed_windows(_snap([]), 1)


def test_maxima_iterator_is_not_restartable() -> None:
    maxima = queries.max_per_fixed_window(_snap([2, 1, 5, 1, 3, 2]), 3)
    assert list(maxima) == [5, 5, 5, 3]
    assert list(maxima) == []


def test_longest_equal_zeros_and_ones() -> None:
    snap = _snap([0, 1, 0, 0, 1, 1, 0])
    match = queries.longest_window_satisfying(snap, EqualZerosAndOnes())
    assert match.found
    assert (match.left, match.right, match.length) == (0, 6, 6)
    assert match.metric == 3


def test_shortest_equal_zeros_and_ones() -> None:
    snap = _snap([0, 0, 1, 1])
    match = queries.shortest_window_satisfying(snap, EqualZerosAndOnes())
    assert (match.left, match.right) == (1, 3)


def test_equal_zeros_and_ones_absent_or_invalid() -> None:
    assert not queries.longest_window_satisfying(_snap([0, 0, 0]), EqualZerosAndOnes()).found
    assert not queries.shortest_window_satisfying(_snap([1]), EqualZerosAndOnes()).found
    with pytest.raises(UnsupportedValueError):
        queries.longest_window_satisfying(_snap([0, 2]), EqualZerosAndOnes())


def test_longest_at_most_k_distinct() -> None:
    match = queries.longest_window_satisfying(_snap([1, 2, 1, 2, 3]), MaxDistinct(n=2))
    assert (match.left, match.right, match.metric) == (0, 4, 2)


def test_longest_without_repeats() -> None:
    codes = Alphabet.lowercase().encode("abcabcbb")
    match = queries.longest_window_satisfying(_snap(codes), NoRepeats())
    assert (match.left, match.right, match.length) == (0, 3, 3)


def test_sum_constraints() -> None:
    snap = _snap([2, 1, 5, 2, 3, 2])
    shortest = queries.shortest_window_satisfying(snap, SumAtLeast(n=7))
    assert (shortest.left, shortest.right) == (2, 4)
    longest = queries.longest_window_satisfying(snap, SumAtMost(n=8))
    assert longest.length == 3
    assert (longest.left, longest.right, longest.metric) == (0, 3, 8)


def test_no_solution_is_not_an_error() -> None:
    snap = _snap([1, 2, 3])
    assert not queries.shortest_window_satisfying(snap, SumAtLeast(n=50)).found
    assert not queries.longest_window_satisfying(snap, MaxDistinct(n=0)).found


def test_character_frequency_constraints() -> None:
    alphabet = Alphabet.from_text("ADOBECODEBANC")
    snap = _snap(alphabet.encode("ADOBECODEBANC"))
    cover = queries.shortest_window_satisfying(
        snap, CoversCharFrequency(target_counts=alphabet.counts("ABC"))
    )
    assert alphabet.decode(snap.values[cover.left : cover.right]) == "BANC"

    lower = Alphabet.lowercase()
    text = _snap(lower.encode("cbaebabacd"))
    target = lower.counts("abc")
    exact = queries.longest_window_satisfying(text, ExactCharFrequencyMatch(target_counts=target))
    assert (exact.left, exact.right) == (0, 3)
    assert queries.find_anagrams(text, target) == [0, 6]


def test_count_subarrays_with_sum() -> None:
    assert queries.count_subarrays_with_sum(_snap([1, 1, 1]), 2) == 2
    assert queries.count_subarrays_with_sum(_snap([1, -1, 0]), 0) == 3
    assert queries.count_subarrays_with_sum(_snap([]), 0) == 0


def test_count_subarrays_divisible_by() -> None:
    assert queries.count_subarrays_divisible_by(_snap([4, 5, 0, -2, -3, 1]), 5) == 7
    with pytest.raises(ValueError):
        queries.count_subarrays_divisible_by(_snap([1]), 0)


def test_counts_match_brute_force() -> None:
    rng = random.Random(5)
    values = [rng.randint(-4, 4) for _ in range(25)]
    snap = _snap(values)
    spans = [values[i:j] for i in range(len(values)) for j in range(i + 1, len(values) + 1)]
    assert queries.count_subarrays_with_sum(snap, 3) == sum(1 for s in spans if sum(s) == 3)
    assert queries.count_subarrays_divisible_by(snap, 4) == sum(1 for s in spans if sum(s) % 4 == 0)


def test_longest_subarray_with_sum() -> None:
    match = queries.longest_subarray_with_sum(_snap([1, -1, 5, -2, 3]), 3)
    assert (match.left, match.right, match.length) == (0, 4, 4)
    assert not queries.longest_subarray_with_sum(_snap([2, 2]), 3).found


def test_has_subarray_multiple_of() -> None:
    match = queries.has_subarray_multiple_of(_snap([23, 2, 4, 6, 7]), 6)
    assert (match.left, match.right, match.metric) == (1, 3, 6)
    assert not queries.has_subarray_multiple_of(_snap([23, 2, 6, 4, 7]), 13).found


def test_min_operations_to_reduce() -> None:
    assert queries.min_operations_to_reduce(_snap([1, 1, 4, 2, 3]), 5) == 2
    assert queries.min_operations_to_reduce(_snap([5, 6, 7, 8, 9]), 4) is None
    assert queries.min_operations_to_reduce(_snap([3, 2, 20, 1, 1, 3]), 10) == 5
    assert queries.min_operations_to_reduce(_snap([1, 1]), 2) == 2
    with pytest.raises(UnsupportedValueError):
        queries.min_operations_to_reduce(_snap([1, -1]), 1)


def test_shortest_equal_zeros_and_ones_rejects_any_non_binary_value() -> None:
    with pytest.raises(UnsupportedValueError):
        queries.shortest_window_satisfying(_snap([0, 1, 7]), EqualZerosAndOnes())


def test_sum_at_most_with_negative_values() -> None:
    match = queries.longest_window_satisfying(_snap([3, -1, 2]), SumAtMost(n=4))
    assert (match.left, match.right, match.metric) == (0, 3, 4)

    shortest = queries.shortest_window_satisfying(_snap([5, -3, 6]), SumAtLeast(n=7))
    assert (shortest.left, shortest.right, shortest.metric) == (0, 3, 8)


def _brute_sum_window(values: list[int], holds, longest: bool) -> tuple[int, int, int] | None:
    best: tuple[int, int, int] | None = None
    for left in range(len(values)):
        for right in range(left + 1, len(values) + 1):
            total = sum(values[left:right])
            if not holds(total):
                continue
            size = right - left
            if best is None:
                best = (left, right, total)
                continue
            best_size = best[1] - best[0]
            if (longest and size > best_size) or (not longest and size < best_size):
                best = (left, right, total)
    return best


@pytest.mark.parametrize("longest", [True, False])
def test_signed_sum_windows_match_brute_force(longest: bool) -> None:
    rng = random.Random(11)
    search = (
        queries.longest_window_satisfying if longest else queries.shortest_window_satisfying
    )
    for _ in range(200):
        values = [rng.randint(-6, 6) for _ in range(rng.randint(1, 12))]
        n = rng.randint(-8, 8)
        for spec, holds in (
            (SumAtMost(n=n), lambda total, n=n: total <= n),
            (SumAtLeast(n=n), lambda total, n=n: total >= n),
        ):
            expected = _brute_sum_window(values, holds, longest)
            match = search(_snap(values), spec)
            if expected is None:
                assert not match.found, (values, spec)
                continue
            assert match.found, (values, spec)
            assert match.length == expected[1] - expected[0], (values, spec)
            assert holds(sum(values[match.left : match.right])), (values, spec)
            assert match.metric == sum(values[match.left : match.right])
