"""Engine wiring the sequence buffer, prefix index and streaming windows."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .errors import AccumulatorOverflowError
from .models import EngineConfig, WindowAggregate
from .prefix import PrefixIndex
from .queries import EngineSnapshot
from .sequence import SequenceBuffer
from .storage import SequenceStore, create_store
from .windows import FixedWindow

logger = logging.getLogger(__name__)

WindowListener = Callable[[WindowAggregate], None]


@dataclass
class _Subscription:
    window: FixedWindow
    listener: WindowListener | None = None


class RangeAggregationEngine:
    """Single writer for one sequence and everything derived from it.

    Appends flow one way: buffer, then prefix index, then every subscribed
    fixed window. Writes and snapshots are serialized by one lock, so the
    engine can sit behind a threadpool. Readers go through :meth:`snapshot`.
    """

    def __init__(self, config: EngineConfig, store: SequenceStore | None = None) -> None:
        self.config = config
        self.store = store if store is not None else create_store(config)
        self._buffer = SequenceBuffer()
        self._prefix = PrefixIndex(config.accumulator_bits)
        self._subscriptions: list[_Subscription] = []
        self._lock = threading.RLock()
        restored = self.store.load()
        for value in restored:
            self._append(value)
        if restored:
            logger.debug("restored %d values from store", len(restored))

    def append(self, value: int) -> int:
        """Append one value, persist it and return its index."""
        return self.extend([value])[0]

    def extend(self, values: Iterable[int]) -> list[int]:
        """Append values in order; those accepted before a failure are kept.

        Listeners run only after the accepted values are persisted and every
        watched window has advanced, so a failing listener cannot leave the
        store or other windows behind.
        """
        accepted: list[int] = []
        indices: list[int] = []
        pending: list[tuple[WindowListener, WindowAggregate]] = []
        with self._lock:
            try:
                for value in values:
                    indices.append(self._append(value, pending))
                    accepted.append(int(value))
            finally:
                if accepted:
                    self.store.append_many(accepted)
        for listener, aggregate in pending:
            listener(aggregate)
        return indices

    def _append(
        self,
        value: int,
        pending: list[tuple[WindowListener, WindowAggregate]] | None = None,
    ) -> int:
        value = int(value)
        limit = self.config.max_abs_value
        if limit is not None and abs(value) > limit:
            logger.warning("rejected value %d outside bound %d", value, limit)
            raise AccumulatorOverflowError(f"value {value} exceeds configured bound {limit}")
        try:
            self._prefix.extend(value)
        except AccumulatorOverflowError:
            logger.warning("rejected value %d at index %d: prefix overflow", value, len(self._buffer))
            raise
        index = self._buffer.append(value)
        for sub in self._subscriptions:
            aggregate = sub.window.push(value)
            if aggregate is not None and sub.listener is not None and pending is not None:
                pending.append((sub.listener, aggregate))
        return index

    def get(self, index: int) -> int:
        return self._buffer.get(index)

    def length(self) -> int:
        return self._buffer.length()

    def range_sum(self, left: int, right: int) -> int:
        with self._lock:
            return self._prefix.range_sum(left, right)

    def watch_fixed_window(self, size: int, listener: WindowListener | None = None) -> FixedWindow:
        """Subscribe a size-``size`` window that advances on every append.

        Values already in the buffer are replayed first, so ``listener`` sees
        every window position from index 0.
        """
        window = FixedWindow(size)
        replayed: list[WindowAggregate] = []
        with self._lock:
            for value in self._buffer:
                aggregate = window.push(value)
                if aggregate is not None:
                    replayed.append(aggregate)
            self._subscriptions.append(_Subscription(window=window, listener=listener))
        if listener is not None:
            for aggregate in replayed:
                listener(aggregate)
        return window

    def snapshot(self) -> EngineSnapshot:
        """Point-in-time copy; later appends are not visible through it."""
        with self._lock:
            length = self._buffer.length()
            return EngineSnapshot(
                values=self._buffer.values(length),
                prefix=self._prefix.values(length),
            )

    def clear(self) -> None:
        """Drop every value; derived indices and windows start over."""
        with self._lock:
            logger.info("clearing %d values", self._buffer.length())
            self._buffer.clear()
            self._prefix.clear()
            for sub in self._subscriptions:
                sub.window.reset()
            self.store.clear()
