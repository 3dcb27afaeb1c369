"""Incremental trackers deciding whether a variable window is valid."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .errors import UnsupportedValueError
from .models import (
    ConstraintSpec,
    CoversCharFrequency,
    ExactCharFrequencyMatch,
    MaxDistinct,
    NoRepeats,
    SumAtLeast,
    SumAtMost,
)
from .windows import Closure, WindowState


class ConstraintTracker(ABC):
    """Base tracker; subclasses define ``holds`` and optionally ``metric``."""

    closure = Closure.DOWNWARD
    fixed_length = 0

    def __init__(self) -> None:
        self.state = WindowState()

    def admit(self, value: int) -> None:
        self._check(value)
        before = self.state.count(value)
        self.state.add(value)
        self._changed(value, before, before + 1)

    def retract(self, value: int) -> None:
        before = self.state.count(value)
        self.state.remove(value)
        self._changed(value, before, before - 1)

    @abstractmethod
    def holds(self) -> bool: ...

    def metric(self) -> int | None:
        return self.state.sum

    def _check(self, value: int) -> None:
        return None

    def _changed(self, value: int, before: int, after: int) -> None:
        return None


class MaxDistinctTracker(ConstraintTracker):
    def __init__(self, n: int) -> None:
        super().__init__()
        self.n = n

    def holds(self) -> bool:
        return self.state.distinct <= self.n

    def metric(self) -> int | None:
        return self.state.distinct


class NoRepeatsTracker(ConstraintTracker):
    def holds(self) -> bool:
        return self.state.distinct == self.state.size

    def metric(self) -> int | None:
        return self.state.distinct


class _NonNegativeSumTracker(ConstraintTracker):
    """Two-pointer sum tracking; only monotone over non-negative inputs.

    Signed sequences are answered from prefix sums in :mod:`.queries` instead.
    """

    def __init__(self, n: int) -> None:
        super().__init__()
        self.n = n

    def _check(self, value: int) -> None:
        if value < 0:
            raise UnsupportedValueError(
                f"sum constraints require non-negative values, got {value}"
            )


class SumAtMostTracker(_NonNegativeSumTracker):
    def holds(self) -> bool:
        return self.state.sum <= self.n


class SumAtLeastTracker(_NonNegativeSumTracker):
    closure = Closure.UPWARD

    def holds(self) -> bool:
        return self.state.sum >= self.n


class CoversFrequencyTracker(ConstraintTracker):
    """Counts how many target values currently meet their required count."""

    closure = Closure.UPWARD

    def __init__(self, target_counts: dict[int, int]) -> None:
        super().__init__()
        self.target = dict(target_counts)
        self._met = 0

    def _changed(self, value: int, before: int, after: int) -> None:
        need = self.target.get(value)
        if need is None:
            return
        if before < need <= after:
            self._met += 1
        elif after < need <= before:
            self._met -= 1

    def holds(self) -> bool:
        return self._met == len(self.target)

    def metric(self) -> int | None:
        return self.state.size


class ExactFrequencyTracker(ConstraintTracker):
    """Tracks the number of values whose count differs from the target."""

    closure = Closure.EXACT

    def __init__(self, target_counts: dict[int, int]) -> None:
        super().__init__()
        self.target = dict(target_counts)
        self.fixed_length = sum(self.target.values())
        self._mismatched = len(self.target)

    def _changed(self, value: int, before: int, after: int) -> None:
        need = self.target.get(value, 0)
        if before == need:
            self._mismatched += 1
        if after == need:
            self._mismatched -= 1

    def holds(self) -> bool:
        return self._mismatched == 0

    def metric(self) -> int | None:
        return self.state.size


def build_tracker(spec: ConstraintSpec) -> ConstraintTracker:
    """Create a fresh tracker for ``spec``; every search gets its own."""
    if isinstance(spec, MaxDistinct):
        return MaxDistinctTracker(spec.n)
    if isinstance(spec, NoRepeats):
        return NoRepeatsTracker()
    if isinstance(spec, SumAtMost):
        return SumAtMostTracker(spec.n)
    if isinstance(spec, SumAtLeast):
        return SumAtLeastTracker(spec.n)
    if isinstance(spec, CoversCharFrequency):
        return CoversFrequencyTracker(spec.target_counts)
    if isinstance(spec, ExactCharFrequencyMatch):
        return ExactFrequencyTracker(spec.target_counts)
    raise TypeError(f"no window tracker for constraint {spec.kind!r}")
