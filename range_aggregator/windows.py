"""Fixed-size and predicate-driven sliding windows."""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import TYPE_CHECKING

from .errors import InvalidWindowSizeError
from .models import WindowAggregate, WindowMatch

if TYPE_CHECKING:
    from .constraints import ConstraintTracker


class Objective(str, Enum):
    LONGEST = "longest"
    SHORTEST = "shortest"


class Closure(str, Enum):
    """How validity behaves when a window is shrunk or grown."""

    DOWNWARD = "downward"  # sub-windows of a valid window are valid
    UPWARD = "upward"  # super-windows of a valid window are valid
    EXACT = "exact"  # only windows of one fixed length can be valid


class WindowState:
    """Running sum and value frequencies of the items inside a window."""

    def __init__(self) -> None:
        self.sum = 0
        self.size = 0
        self._freq: dict[int, int] = {}

    def add(self, value: int) -> None:
        self.sum += value
        self.size += 1
        self._freq[value] = self._freq.get(value, 0) + 1

    def remove(self, value: int) -> None:
        remaining = self._freq[value] - 1
        if remaining:
            self._freq[value] = remaining
        else:
            del self._freq[value]
        self.sum -= value
        self.size -= 1

    def count(self, value: int) -> int:
        return self._freq.get(value, 0)

    @property
    def distinct(self) -> int:
        return len(self._freq)

    def clear(self) -> None:
        self.sum = 0
        self.size = 0
        self._freq.clear()


class MonotonicMaxDeque:
    """Indices whose values decrease front to back; the front is the maximum."""

    def __init__(self) -> None:
        self._items: deque[tuple[int, int]] = deque()

    def push(self, index: int, value: int) -> None:
        while self._items and self._items[-1][1] <= value:
            self._items.pop()
        self._items.append((index, value))

    def evict_before(self, left: int) -> None:
        while self._items and self._items[0][0] < left:
            self._items.popleft()

    @property
    def maximum(self) -> int:
        return self._items[0][1]

    def __len__(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        self._items.clear()


class FixedWindow:
    """Window of exactly ``size`` items advanced one append at a time.

    ``push`` returns a :class:`WindowAggregate` each time the window is full,
    i.e. once per valid window position, and ``None`` while it is still filling.
    Each push costs amortized O(1).
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise InvalidWindowSizeError(size)
        self.size = size
        self.left = 0
        self.right = 0
        self._items: deque[int] = deque()
        self._state = WindowState()
        self._max = MonotonicMaxDeque()

    def push(self, value: int) -> WindowAggregate | None:
        self._items.append(value)
        self._state.add(value)
        self._max.push(self.right, value)
        self.right += 1
        if self.right - self.left > self.size:
            self._state.remove(self._items.popleft())
            self.left += 1
            self._max.evict_before(self.left)
        if self.right - self.left == self.size:
            return self.aggregate()
        return None

    def aggregate(self) -> WindowAggregate | None:
        if self.right - self.left != self.size:
            return None
        return WindowAggregate(
            left=self.left,
            right=self.right,
            sum=self._state.sum,
            maximum=self._max.maximum,
            distinct=self._state.distinct,
        )

    def reset(self) -> None:
        self.left = 0
        self.right = 0
        self._items.clear()
        self._state.clear()
        self._max.clear()


class VariableWindow:
    """Two-pointer window that grows on every push and contracts on demand.

    How far ``left`` contracts depends on the tracker's :class:`Closure` and the
    requested :class:`Objective`. ``left`` never moves backwards. On equal
    length the earliest candidate (lowest ``left``) is kept.
    """

    def __init__(self, tracker: ConstraintTracker, objective: Objective) -> None:
        self.tracker = tracker
        self.objective = objective
        self.left = 0
        self.right = 0
        self._items: deque[int] = deque()
        self._best: WindowMatch = WindowMatch.not_found()

    @property
    def size(self) -> int:
        return self.right - self.left

    def push(self, value: int) -> None:
        self.tracker.admit(value)
        self._items.append(value)
        self.right += 1

        closure = self.tracker.closure
        if closure is Closure.EXACT:
            self._contract_to(self.tracker.fixed_length)
            if self.size == self.tracker.fixed_length and self.tracker.holds():
                self._offer()
        elif self.objective is Objective.LONGEST:
            if closure is Closure.DOWNWARD:
                while self.size and not self.tracker.holds():
                    self._retract()
            if self.size and self.tracker.holds():
                self._offer()
        elif closure is Closure.UPWARD:
            while self.size and self.tracker.holds():
                self._offer()
                self._retract()
        else:
            # shortest downward-closed window: a single valid item is optimal
            self._contract_to(1)
            if self.tracker.holds():
                self._offer()

    def result(self) -> WindowMatch:
        return self._best

    def _contract_to(self, size: int) -> None:
        while self.size > size:
            self._retract()

    def _retract(self) -> None:
        self.tracker.retract(self._items.popleft())
        self.left += 1

    def _offer(self) -> None:
        best = self._best
        if best.found:
            if self.objective is Objective.LONGEST and self.size <= best.length:
                return
            if self.objective is Objective.SHORTEST and self.size >= best.length:
                return
        self._best = WindowMatch.at(self.left, self.right, self.tracker.metric())
