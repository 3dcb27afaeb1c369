from __future__ import annotations

import random

import pytest

from range_aggregator.constraints import (
    CoversFrequencyTracker,
    ExactFrequencyTracker,
    MaxDistinctTracker,
    SumAtLeastTracker,
    SumAtMostTracker,
    build_tracker,
)
from range_aggregator.errors import InvalidWindowSizeError, UnsupportedValueError
from range_aggregator.models import NoRepeats
from range_aggregator.windows import FixedWindow, MonotonicMaxDeque, Objective, VariableWindow


def _push_all(window: FixedWindow, values: list[int]) -> list:
    return [agg for agg in (window.push(v) for v in values) if agg is not None]


def test_fixed_window_emits_once_per_position() -> None:
    aggregates = _push_all(FixedWindow(3), [2, 1, 5, 1, 3, 2])
    assert [agg.maximum for agg in aggregates] == [5, 5, 5, 3]
    assert [agg.sum for agg in aggregates] == [8, 7, 9, 6]
    assert [agg.distinct for agg in aggregates] == [3, 2, 3, 3]
    assert [(agg.left, agg.right) for agg in aggregates] == [(0, 3), (1, 4), (2, 5), (3, 6)]


def test_fixed_window_returns_none_while_filling() -> None:
    window = FixedWindow(2)
    assert window.push(4) is None
    assert window.aggregate() is None
    assert window.push(1).maximum == 4


def test_fixed_window_maxima_match_brute_force() -> None:
    rng = random.Random(11)
    values = [rng.randint(-50, 50) for _ in range(40)]
    for k in range(1, len(values) + 1):
        maxima = [agg.maximum for agg in _push_all(FixedWindow(k), values)]
        assert len(maxima) == len(values) - k + 1
        assert maxima == [max(values[i : i + k]) for i in range(len(values) - k + 1)]


@pytest.mark.parametrize("size", [0, -2])
def test_fixed_window_rejects_non_positive_size(size: int) -> None:
    with pytest.raises(InvalidWindowSizeError):
        FixedWindow(size)


def test_monotonic_deque_keeps_decreasing_candidates() -> None:
    dq = MonotonicMaxDeque()
    for index, value in enumerate([1, 3, -1, -3]):
        dq.push(index, value)
    assert dq.maximum == 3
    assert len(dq) == 3
    dq.evict_before(2)
    assert dq.maximum == -1
    dq.push(4, 5)
    assert len(dq) == 1


def test_variable_window_left_never_moves_back() -> None:
    window = VariableWindow(MaxDistinctTracker(2), Objective.LONGEST)
    lefts = []
    for value in [1, 2, 1, 2, 3, 3, 4, 1, 1, 5]:
        window.push(value)
        assert 0 <= window.left <= window.right
        lefts.append(window.left)
    assert lefts == sorted(lefts)
    match = window.result()
    assert (match.left, match.right, match.metric) == (0, 4, 2)


def test_longest_ties_keep_leftmost() -> None:
    window = VariableWindow(MaxDistinctTracker(1), Objective.LONGEST)
    for value in [1, 1, 2, 2]:
        window.push(value)
    assert (window.result().left, window.result().right) == (0, 2)


def test_shortest_sum_at_least() -> None:
    window = VariableWindow(SumAtLeastTracker(7), Objective.SHORTEST)
    for value in [2, 1, 5, 2, 3, 2]:
        window.push(value)
    match = window.result()
    assert (match.left, match.right, match.length, match.metric) == (2, 4, 2, 7)


def test_shortest_ties_keep_leftmost() -> None:
    window = VariableWindow(SumAtLeastTracker(3), Objective.SHORTEST)
    for value in [3, 3]:
        window.push(value)
    assert (window.result().left, window.result().right) == (0, 1)


def test_longest_sum_at_most() -> None:
    window = VariableWindow(SumAtMostTracker(7), Objective.LONGEST)
    for value in [3, 1, 2, 1, 5, 1]:
        window.push(value)
    match = window.result()
    assert (match.left, match.right, match.metric) == (0, 4, 7)


def test_sum_trackers_reject_negative_values() -> None:
    window = VariableWindow(SumAtMostTracker(7), Objective.LONGEST)
    with pytest.raises(UnsupportedValueError):
        window.push(-1)


def test_no_window_found_is_explicit() -> None:
    window = VariableWindow(SumAtLeastTracker(100), Objective.SHORTEST)
    for value in [1, 2, 3]:
        window.push(value)
    match = window.result()
    assert not match.found
    assert match.left is None and match.length is None


def test_longest_upward_closed_spans_prefix() -> None:
    window = VariableWindow(SumAtLeastTracker(5), Objective.LONGEST)
    for value in [1, 2, 3]:
        window.push(value)
    assert (window.result().left, window.result().right, window.result().metric) == (0, 3, 6)


def test_shortest_downward_closed_is_single_item() -> None:
    window = VariableWindow(build_tracker(NoRepeats()), Objective.SHORTEST)
    for value in [4, 4, 5]:
        window.push(value)
    assert (window.result().left, window.result().right) == (0, 1)


def test_covers_tracker_finds_minimum_cover() -> None:
    # "ADOBECODEBANC" covering A, B, C
    codes = {"A": 0, "B": 1, "C": 2, "D": 3, "O": 4, "E": 5, "N": 6}
    window = VariableWindow(CoversFrequencyTracker({0: 1, 1: 1, 2: 1}), Objective.SHORTEST)
    for symbol in "ADOBECODEBANC":
        window.push(codes[symbol])
    match = window.result()
    assert (match.left, match.right) == (9, 13)


def test_exact_tracker_matches_only_target_length() -> None:
    tracker = ExactFrequencyTracker({0: 1, 1: 1})
    assert tracker.fixed_length == 2
    tracker.admit(0)
    assert not tracker.holds()
    tracker.admit(1)
    assert tracker.holds()
    tracker.admit(1)
    assert not tracker.holds()
    tracker.retract(0)
    assert not tracker.holds()


def test_tracker_base_class_is_abstract() -> None:
    from range_aggregator.constraints import ConstraintTracker

    with pytest.raises(TypeError):
        ConstraintTracker()
