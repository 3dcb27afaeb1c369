from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable
from typing import Annotated

import uvicorn
from fastapi import FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .api import build_api
from .errors import OutOfRangeError, RangeAggregationError
from .models import ConstraintSpec, EngineConfig, WindowMatch

ValuesPayload = Annotated[list[int], Field(min_length=1)]


class AppendRequest(BaseModel):
    """Payload for appending values."""

    values: ValuesPayload


class AppendResponse(BaseModel):
    """Response returned after a successful append."""

    indices: list[int]
    length: int


class WindowSearchRequest(BaseModel):
    """Constraint to search for."""

    constraint: ConstraintSpec


class WindowSearchResponse(BaseModel):
    """Variable-window search outcome, flattened for JSON clients."""

    found: bool
    left: int | None = None
    right: int | None = None
    length: int | None = None
    metric: int | None = None

    @classmethod
    def from_match(cls, match: WindowMatch) -> WindowSearchResponse:
        return cls(
            found=match.found,
            left=match.left,
            right=match.right,
            length=match.length,
            metric=match.metric,
        )


def create_app(
    config: EngineConfig | None = None, *, cors_origins: Iterable[str] | None = None
) -> FastAPI:
    """Construct a FastAPI app backed by RangeAggregatorAPI."""

    api = build_api(config)
    app = FastAPI(title="Range Aggregator", version="0.1.0")
    app.state.api = api

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(RangeAggregationError)
    async def engine_error(request: Request, exc: RangeAggregationError) -> JSONResponse:
        code = (
            status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE
            if isinstance(exc, OutOfRangeError)
            else status.HTTP_400_BAD_REQUEST
        )
        return JSONResponse(
            status_code=code, content={"error": type(exc).__name__, "detail": str(exc)}
        )

    @app.get("/healthz", status_code=status.HTTP_200_OK)
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/append", response_model=AppendResponse, status_code=status.HTTP_201_CREATED)
    def append(payload: AppendRequest) -> AppendResponse:
        indices = app.state.api.extend(payload.values)
        return AppendResponse(indices=indices, length=app.state.api.length())

    @app.delete("/sequence", status_code=status.HTTP_204_NO_CONTENT)
    def clear() -> None:
        app.state.api.clear()

    @app.get("/range-sum")
    def range_sum(left: int = Query(ge=0), right: int = Query(ge=0)) -> dict[str, int]:
        return {"sum": app.state.api.range_sum(left, right)}

    @app.get("/windows/max", response_model=list[int])
    def window_max(k: int = Query()) -> list[int]:
        return list(app.state.api.max_per_fixed_window(k))

    @app.get("/windows/sums", response_model=list[int])
    def window_sums(k: int = Query()) -> list[int]:
        return list(app.state.api.sum_per_fixed_window(k))

    @app.post("/windows/longest", response_model=WindowSearchResponse)
    def longest(payload: WindowSearchRequest) -> WindowSearchResponse:
        match = app.state.api.longest_window_satisfying(payload.constraint)
        return WindowSearchResponse.from_match(match)

    @app.post("/windows/shortest", response_model=WindowSearchResponse)
    def shortest(payload: WindowSearchRequest) -> WindowSearchResponse:
        match = app.state.api.shortest_window_satisfying(payload.constraint)
        return WindowSearchResponse.from_match(match)

    @app.get("/subarrays/count-sum")
    def count_sum(target: int = Query()) -> dict[str, int]:
        return {"count": app.state.api.count_subarrays_with_sum(target)}

    @app.get("/subarrays/count-divisible")
    def count_divisible(k: int = Query(ge=1)) -> dict[str, int]:
        return {"count": app.state.api.count_subarrays_divisible_by(k)}

    return app


def run(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the range aggregator HTTP service.")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind.")
    parser.add_argument("--port", type=int, default=8000, help="TCP port for the service.")
    parser.add_argument(
        "--store", type=str, default=None, help="Optional JSONL store path for persistence."
    )
    parser.add_argument(
        "--accumulator-bits",
        type=int,
        default=64,
        help="Signed width of the prefix-sum accumulator.",
    )
    parser.add_argument(
        "--max-abs-value", type=int, default=None, help="Optional bound on appended values."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    parser.add_argument(
        "--cors-origin",
        action="append",
        dest="cors_origins",
        default=None,
        help="Optional CORS origin (repeatable).",
    )
    args = parser.parse_args(argv)

    config = EngineConfig(
        accumulator_bits=args.accumulator_bits,
        max_abs_value=args.max_abs_value,
        store_path=args.store,
        log_level=args.log_level,
    )
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    app = create_app(config=config, cors_origins=args.cors_origins)
    uvicorn.run(app, host=args.host, port=args.port, log_level=config.log_level.lower())


app = create_app()
