"""Append-only sequence buffer with stable indices."""

from __future__ import annotations

from collections.abc import Iterator

from .errors import OutOfRangeError


class SequenceBuffer:
    """Indexable sequence of signed integers that only grows (or is cleared)."""

    def __init__(self) -> None:
        self._values: list[int] = []

    def append(self, value: int) -> int:
        """Store ``value`` and return the index it was assigned."""
        self._values.append(value)
        return len(self._values) - 1

    def get(self, index: int) -> int:
        if index < 0 or index >= len(self._values):
            raise OutOfRangeError(
                f"index {index} not assigned (length {len(self._values)})"
            )
        return self._values[index]

    def length(self) -> int:
        return len(self._values)

    def values(self, upto: int | None = None) -> tuple[int, ...]:
        """Immutable copy of the first ``upto`` values (all by default)."""
        end = len(self._values) if upto is None else upto
        if end < 0 or end > len(self._values):
            raise OutOfRangeError(f"cannot copy {end} values from length {len(self._values)}")
        return tuple(self._values[:end])

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)
