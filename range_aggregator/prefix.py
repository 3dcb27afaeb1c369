"""Running prefix sums with O(1) range queries."""

from __future__ import annotations

from .errors import AccumulatorOverflowError, OutOfRangeError


def check_range(left: int, right: int, length: int) -> None:
    """Validate a half-open ``[left, right)`` range against ``length``."""
    if not 0 <= left <= right <= length:
        raise OutOfRangeError(
            f"range [{left}, {right}) outside sequence of length {length}"
        )


class PrefixIndex:
    """Cumulative sums where ``prefix[i]`` is the sum of the first ``i`` values.

    The accumulator is a signed integer of ``bits`` width. Python integers do not
    wrap, so a prefix leaving that range is rejected instead of stored.
    """

    def __init__(self, bits: int = 64) -> None:
        self.bits = bits
        self._low = -(1 << (bits - 1))
        self._high = (1 << (bits - 1)) - 1
        self._prefix: list[int] = [0]

    def peek(self, value: int) -> int:
        """Return the prefix ``value`` would produce, without storing it."""
        candidate = self._prefix[-1] + value
        if candidate < self._low or candidate > self._high:
            raise AccumulatorOverflowError(
                f"prefix sum {candidate} exceeds {self.bits}-bit accumulator"
            )
        return candidate

    def extend(self, value: int) -> int:
        candidate = self.peek(value)
        self._prefix.append(candidate)
        return candidate

    def range_sum(self, left: int, right: int) -> int:
        check_range(left, right, self.length())
        return self._prefix[right] - self._prefix[left]

    def at(self, position: int) -> int:
        """Prefix value at ``position`` in ``[0, length]``."""
        check_range(position, position, self.length())
        return self._prefix[position]

    def length(self) -> int:
        """Number of sequence values covered."""
        return len(self._prefix) - 1

    def values(self, upto: int | None = None) -> tuple[int, ...]:
        """Immutable copy of ``prefix[0..upto]`` inclusive."""
        end = self.length() if upto is None else upto
        check_range(end, end, self.length())
        return tuple(self._prefix[: end + 1])

    def clear(self) -> None:
        self._prefix = [0]
