"""Streaming range aggregation: prefix sums, sliding windows, remainder maps."""

from .alphabet import Alphabet
from .api import RangeAggregatorAPI, build_api
from .errors import (
    AccumulatorOverflowError,
    InvalidWindowSizeError,
    OutOfRangeError,
    RangeAggregationError,
    UnsupportedValueError,
)
from .models import EngineConfig, WindowAggregate, WindowMatch
from .service_http import create_app

__all__ = [
    "AccumulatorOverflowError",
    "Alphabet",
    "EngineConfig",
    "InvalidWindowSizeError",
    "OutOfRangeError",
    "RangeAggregationError",
    "RangeAggregatorAPI",
    "UnsupportedValueError",
    "WindowAggregate",
    "WindowMatch",
    "build_api",
    "create_app",
]

__version__ = "0.1.0"
