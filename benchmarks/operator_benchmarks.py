"""Time the four matrix operators over growing sizes and worker counts."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from pathlib import Path

from _bench_utils import host_metadata, mean, percentile, sample_ms, stddev

from sqmatrix import ConcreteMatrix, Operator, Settings, use_settings


@dataclass(frozen=True)
class OperatorRow:
    operator: str
    size: int
    workers: int
    mean_ms: float
    p50_ms: float
    p90_ms: float
    stddev_ms: float


def _bench_operator(op: Operator, size: int, workers: int, args: argparse.Namespace) -> OperatorRow:
    lhs = ConcreteMatrix.random(size, seed=args.seed)
    rhs = ConcreteMatrix.random(size, seed=args.seed + 1)
    with use_settings(Settings(workers=workers)):
        rows = sample_ms(lambda: op.apply(lhs, rhs), repeats=args.repeats, warmup=args.warmup, samples=args.samples)
    return OperatorRow(
        operator=op.symbol,
        size=size,
        workers=workers,
        mean_ms=mean(rows),
        p50_ms=percentile(rows, 0.5),
        p90_ms=percentile(rows, 0.9),
        stddev_ms=stddev(rows),
    )


def _print_table(rows: list[OperatorRow]) -> None:
    print(f"{'op':>3} {'size':>6} {'workers':>8} {'mean(ms)':>10} {'p50(ms)':>10} {'p90(ms)':>10} {'sd(ms)':>9}")
    for row in rows:
        print(
            f"{row.operator:>3} {row.size:>6} {row.workers:>8} {row.mean_ms:10.3f} "
            f"{row.p50_ms:10.3f} {row.p90_ms:10.3f} {row.stddev_ms:9.3f}"
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark +, -, * and / on random concrete matrices.")
    parser.add_argument("--sizes", type=int, nargs="+", default=[4, 16, 64], help="matrix side lengths")
    parser.add_argument("--workers", type=int, nargs="+", default=[1, 2, 4], help="worker counts for + and -")
    parser.add_argument("--repeats", type=int, default=5, help="calls per sample")
    parser.add_argument("--warmup", type=int, default=2, help="untimed calls before sampling")
    parser.add_argument("--samples", type=int, default=5, help="timed samples per row")
    parser.add_argument("--seed", type=int, default=0, help="PRNG seed for the operands")
    parser.add_argument("--json-out", type=Path, default=None, help="optional path for JSON results")
    args = parser.parse_args()

    rows: list[OperatorRow] = []
    for size in args.sizes:
        for op in Operator:
            # * and / never touch the worker pool.
            worker_counts = args.workers if op in (Operator.ADD, Operator.SUB) else args.workers[:1]
            for workers in worker_counts:
                rows.append(_bench_operator(op, size, workers, args))

    print("Matrix operator benchmarks")
    print()
    _print_table(rows)

    if args.json_out is not None:
        payload = {"host": host_metadata(), "rows": [asdict(row) for row in rows]}
        args.json_out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote JSON benchmark output: {args.json_out}")


if __name__ == "__main__":
    main()
