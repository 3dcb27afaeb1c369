"""Explicit symbol ↔ integer mapping for text inputs."""

from __future__ import annotations

import string
from collections import Counter
from collections.abc import Iterable, Sequence

from .errors import OutOfRangeError, UnsupportedValueError


class Alphabet:
    """Bounded table mapping each symbol to a code in ``[0, len(symbols))``."""

    def __init__(self, symbols: Sequence[str]) -> None:
        if len(set(symbols)) != len(symbols):
            raise ValueError("alphabet symbols must be unique")
        self._symbols = tuple(symbols)
        self._codes = {symbol: code for code, symbol in enumerate(self._symbols)}

    @classmethod
    def lowercase(cls) -> Alphabet:
        return cls(string.ascii_lowercase)

    @classmethod
    def from_text(cls, *texts: str) -> Alphabet:
        """Alphabet of every symbol seen in ``texts``, in first-seen order."""
        seen: dict[str, None] = {}
        for text in texts:
            for symbol in text:
                seen.setdefault(symbol, None)
        return cls(list(seen))

    def code(self, symbol: str) -> int:
        try:
            return self._codes[symbol]
        except KeyError:
            raise UnsupportedValueError(f"symbol {symbol!r} not in alphabet") from None

    def symbol(self, code: int) -> str:
        if code < 0 or code >= len(self._symbols):
            raise OutOfRangeError(f"code {code} outside alphabet of size {len(self._symbols)}")
        return self._symbols[code]

    def encode(self, text: Iterable[str]) -> list[int]:
        return [self.code(symbol) for symbol in text]

    def decode(self, codes: Iterable[int]) -> str:
        return "".join(self.symbol(code) for code in codes)

    def counts(self, text: Iterable[str]) -> dict[int, int]:
        """Frequency table of ``text`` keyed by code."""
        return dict(Counter(self.encode(text)))

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._codes
