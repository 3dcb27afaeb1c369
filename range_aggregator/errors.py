"""Exception hierarchy for the range aggregation engine."""

from __future__ import annotations


class RangeAggregationError(Exception):
    """Base class for every error raised by the engine."""


class InvalidWindowSizeError(RangeAggregationError, ValueError):
    """Fixed window size is non-positive or larger than the sequence."""

    def __init__(self, size: int, length: int | None = None) -> None:
        self.size = size
        self.length = length
        if length is None:
            message = f"window size must be positive, got {size}"
        else:
            message = f"window size {size} is invalid for a sequence of length {length}"
        super().__init__(message)


class OutOfRangeError(RangeAggregationError, IndexError):
    """Index or range lies outside the assigned part of the sequence."""


class AccumulatorOverflowError(RangeAggregationError, OverflowError):
    """Prefix sum or input value does not fit the configured accumulator."""


class UnsupportedValueError(RangeAggregationError, ValueError):
    """Value cannot be handled by the requested constraint or alphabet."""
