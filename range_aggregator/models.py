"""Typed data models used across the range aggregator."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class EngineConfig(BaseModel):
    """Runtime configuration switches."""

    accumulator_bits: int = Field(64, ge=8, le=256)
    max_abs_value: int | None = Field(None, ge=0)
    store_path: str | None = None
    log_level: str = "INFO"


class StoredValue(BaseModel):
    """Single persisted sequence entry."""

    index: int = Field(..., ge=0)
    value: int


class WindowAggregate(BaseModel):
    """Aggregate state of a full fixed-size window."""

    model_config = ConfigDict(frozen=True)

    left: int = Field(..., ge=0)
    right: int = Field(..., ge=0)
    sum: int
    maximum: int
    distinct: int = Field(..., ge=1)

    @property
    def size(self) -> int:
        return self.right - self.left


class WindowMatch(BaseModel):
    """Outcome of a variable-window search; ``found`` disambiguates absence."""

    model_config = ConfigDict(frozen=True)

    found: bool
    left: int | None = None
    right: int | None = None
    metric: int | None = None

    @property
    def length(self) -> int | None:
        if not self.found:
            return None
        return self.right - self.left

    @classmethod
    def not_found(cls) -> WindowMatch:
        return cls(found=False)

    @classmethod
    def at(cls, left: int, right: int, metric: int | None = None) -> WindowMatch:
        return cls(found=True, left=left, right=right, metric=metric)


class MaxDistinct(BaseModel):
    """At most ``n`` distinct values inside the window."""

    kind: Literal["max_distinct"] = "max_distinct"
    n: int = Field(..., ge=0)


class SumAtMost(BaseModel):
    """Window sum no greater than ``n`` (non-negative inputs only)."""

    kind: Literal["sum_at_most"] = "sum_at_most"
    n: int


class SumAtLeast(BaseModel):
    """Window sum no smaller than ``n`` (non-negative inputs only)."""

    kind: Literal["sum_at_least"] = "sum_at_least"
    n: int


class ExactCharFrequencyMatch(BaseModel):
    """Window frequency map equals ``target_counts`` exactly."""

    kind: Literal["exact_char_frequency_match"] = "exact_char_frequency_match"
    target_counts: dict[int, Annotated[int, Field(ge=1)]] = Field(..., min_length=1)


class CoversCharFrequency(BaseModel):
    """Window holds at least ``target_counts`` of every listed value."""

    kind: Literal["covers_char_frequency"] = "covers_char_frequency"
    target_counts: dict[int, Annotated[int, Field(ge=1)]] = Field(..., min_length=1)


class NoRepeats(BaseModel):
    """Every value inside the window is distinct."""

    kind: Literal["no_repeats"] = "no_repeats"


class EqualZerosAndOnes(BaseModel):
    """Binary window with as many zeros as ones."""

    kind: Literal["equal_zeros_and_ones"] = "equal_zeros_and_ones"


ConstraintSpec = Annotated[
    Union[
        MaxDistinct,
        SumAtMost,
        SumAtLeast,
        ExactCharFrequencyMatch,
        CoversCharFrequency,
        NoRepeats,
        EqualZerosAndOnes,
    ],
    Field(discriminator="kind"),
]
