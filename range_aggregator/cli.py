"""CLI entrypoint for the range aggregator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .alphabet import Alphabet
from .api import RangeAggregatorAPI
from .errors import RangeAggregationError
from .models import ConstraintSpec, EngineConfig

_CONSTRAINT = TypeAdapter(ConstraintSpec)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="range-aggregator", description="Range sums and sliding-window queries."
    )
    parser.add_argument("--store", type=Path, help="Path to persistent JSONL store.")
    parser.add_argument(
        "--accumulator-bits",
        type=int,
        default=64,
        help="Signed width of the prefix-sum accumulator.",
    )
    parser.add_argument(
        "--max-abs-value",
        type=int,
        default=None,
        help="Reject appended values whose magnitude exceeds this bound.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")

    sub = parser.add_subparsers(dest="command", required=True)

    append = sub.add_parser("append", help="Append values to the sequence.")
    append.add_argument("values", type=int, nargs="+", help="Integers to append.")

    range_sum = sub.add_parser("range-sum", help="Sum of the half-open range [LEFT, RIGHT).")
    range_sum.add_argument("left", type=int)
    range_sum.add_argument("right", type=int)

    window_max = sub.add_parser("window-max", help="Maximum of every size-K window.")
    window_max.add_argument("k", type=int)

    window_sums = sub.add_parser("window-sums", help="Sum of every size-K window.")
    window_sums.add_argument("k", type=int)

    count_sum = sub.add_parser("count-sum", help="Count subarrays summing to TARGET.")
    count_sum.add_argument("target", type=int)

    count_div = sub.add_parser("count-divisible", help="Count subarrays divisible by K.")
    count_div.add_argument("k", type=int)

    for name in ("longest", "shortest"):
        search = sub.add_parser(name, help=f"{name.title()} window satisfying a constraint.")
        search.add_argument(
            "constraint",
            help='Constraint as JSON, e.g. \'{"kind": "max_distinct", "n": 2}\'.',
        )

    append_text = sub.add_parser(
        "append-text", help="Append lowercase text, one code per letter."
    )
    append_text.add_argument("text")

    anagrams = sub.add_parser("anagrams", help="Start indices of permutations of PATTERN.")
    anagrams.add_argument("pattern")

    sub.add_parser("dump", help="Print the sequence as JSON.")
    sub.add_parser("clear", help="Drop every stored value.")

    return parser


def _config_from_args(args: argparse.Namespace) -> EngineConfig:
    return EngineConfig(
        accumulator_bits=args.accumulator_bits,
        max_abs_value=args.max_abs_value,
        store_path=str(args.store) if args.store else None,
        log_level=args.log_level,
    )


def _print_values(values: Iterable[int]) -> None:
    print(" ".join(str(value) for value in values))


def _run(api: RangeAggregatorAPI, args: argparse.Namespace) -> int | None:
    if args.command == "append":
        indices = api.extend(args.values)
        print(f"appended {len(indices)} values, length={api.length()}")
        return 0
    if args.command == "range-sum":
        print(api.range_sum(args.left, args.right))
        return 0
    if args.command == "window-max":
        _print_values(api.max_per_fixed_window(args.k))
        return 0
    if args.command == "window-sums":
        _print_values(api.sum_per_fixed_window(args.k))
        return 0
    if args.command == "count-sum":
        print(api.count_subarrays_with_sum(args.target))
        return 0
    if args.command == "count-divisible":
        print(api.count_subarrays_divisible_by(args.k))
        return 0
    if args.command in ("longest", "shortest"):
        spec = _CONSTRAINT.validate_json(args.constraint)
        if args.command == "longest":
            match = api.longest_window_satisfying(spec)
        else:
            match = api.shortest_window_satisfying(spec)
        if not match.found:
            print("No window satisfies the constraint.")
            return 0
        print(f"[{match.left}, {match.right}) length={match.length} metric={match.metric}")
        return 0
    if args.command == "append-text":
        indices = api.extend_text(args.text, Alphabet.lowercase())
        print(f"appended {len(indices)} values, length={api.length()}")
        return 0
    if args.command == "anagrams":
        _print_values(api.find_anagrams_of(args.pattern, Alphabet.lowercase()))
        return 0
    if args.command == "dump":
        print(json.dumps(api.values()))
        return 0
    if args.command == "clear":
        api.clear()
        return 0
    return None


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = _config_from_args(args)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    api = RangeAggregatorAPI(config)
    try:
        code = _run(api, args)
    except ValidationError as exc:
        print(f"error: invalid constraint: {exc}", file=sys.stderr)
        return 2
    except (RangeAggregationError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    if code is None:
        parser.error(f"Unsupported command {args.command}")
        return 1
    return code


if __name__ == "__main__":
    sys.exit(main())
