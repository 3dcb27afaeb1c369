"""Storage backends for appended sequence values."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .models import EngineConfig, StoredValue

logger = logging.getLogger(__name__)


class SequenceStore(Protocol):
    """Abstract store contract."""

    def load(self) -> list[int]: ...

    def append_many(self, values: Iterable[int]) -> None: ...

    def clear(self) -> None: ...


@dataclass
class InMemorySequenceStore(SequenceStore):
    """Simple in-memory store, convenient for tests."""

    _values: list[int] = field(default_factory=list)

    def load(self) -> list[int]:
        return list(self._values)

    def append_many(self, values: Iterable[int]) -> None:
        self._values.extend(values)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)


@dataclass
class JsonlSequenceStore(SequenceStore):
    """Persist values to a JSONL file, one ``{"index", "value"}`` record per line."""

    path: Path
    _values: InMemorySequenceStore = field(default_factory=InMemorySequenceStore)

    def load(self) -> list[int]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as fh:
            records = [StoredValue.model_validate_json(line) for line in fh if line.strip()]
        records.sort(key=lambda rec: rec.index)
        for expected, rec in enumerate(records):
            if rec.index != expected:
                raise ValueError(f"{self.path}: missing index {expected}, found {rec.index}")
        self._values.clear()
        self._values.append_many(rec.value for rec in records)
        logger.info("loaded %d values from %s", len(records), self.path)
        return self._values.load()

    def append_many(self, values: Iterable[int]) -> None:
        start = len(self._values)
        batch = list(values)
        self._values.append_many(batch)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as fh:
            for offset, value in enumerate(batch):
                fh.write(StoredValue(index=start + offset, value=value).model_dump_json())
                fh.write("\n")
        logger.debug("flushed %d values to %s", len(batch), self.path)

    def __len__(self) -> int:
        return len(self._values)

    def clear(self) -> None:
        self._values.clear()
        if self.path.exists():
            self.path.unlink()


def create_store(config: EngineConfig) -> SequenceStore:
    """Factory helper selecting the appropriate store."""
    if config.store_path:
        return JsonlSequenceStore(path=Path(config.store_path))
    return InMemorySequenceStore()
