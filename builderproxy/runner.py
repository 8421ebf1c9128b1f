"""
Benchmark runner — synthesized builders vs. the hand-written baseline.

For every multiplier ``n`` the runner builds ``n * scale`` ``Example``
objects twice, once through ``Example.builder`` (proxy) and once through
``ManualBuilder``, and records the wall time of each loop.
"""
from __future__ import annotations

import argparse
import logging
import platform
import time
from pathlib import Path
from typing import Callable, List, Optional

from builderproxy.config import settings
from builderproxy.example import Example, ManualBuilder
from builderproxy.io.schema import BenchmarkReport, BenchmarkRun
from builderproxy.io.writer import write_report

logger = logging.getLogger(__name__)

MANDATORY = "Mandatory!"


# ── Loops ────────────────────────────────────────────────────────────────────

def _proxy_once() -> str:
    return str(Example.builder(MANDATORY).optional1(35).optional2("A").build())


def _manual_once() -> str:
    return str(ManualBuilder(MANDATORY).optional1(35).optional2("A").build())


BUILDERS: dict[str, Callable[[], str]] = {
    "proxy": _proxy_once,
    "manual": _manual_once,
}


def time_builder(builder: str, count: int) -> float:
    """Build *count* objects with *builder*; return elapsed milliseconds."""
    make_one = BUILDERS[builder]
    start = time.perf_counter()
    for _ in range(count):
        make_one()
    return (time.perf_counter() - start) * 1000.0


# ── Public API ───────────────────────────────────────────────────────────────

def run_benchmark(
    multipliers: Optional[List[int]] = None,
    scale: Optional[int] = None,
    output_dir: Optional[Path] = None,
) -> BenchmarkReport:
    """
    Time proxy and manual builders for each multiplier.

    Parameters
    ----------
    multipliers : List[int], optional
        Defaults to ``settings.BENCH_MULTIPLIERS``.
    scale : int, optional
        Objects per multiplier unit.  Defaults to ``settings.BENCH_SCALE``.
    output_dir : Path, optional
        Directory to write ``benchmark_report.json``.  If None, nothing
        is written to disk.
    """
    if multipliers is None:
        multipliers = list(settings.BENCH_MULTIPLIERS)
    if scale is None:
        scale = settings.BENCH_SCALE
    if scale < 1 or any(n < 1 for n in multipliers):
        raise ValueError("multipliers and scale must be positive")

    report = BenchmarkReport(
        python_version=platform.python_version(),
        scale=scale,
        multipliers=list(multipliers),
    )

    for n in multipliers:
        count = n * scale
        for builder in BUILDERS:
            elapsed = time_builder(builder, count)
            logger.info("%10s%13s%10.1fms", builder, f"{count:,}", elapsed)
            report.runs.append(BenchmarkRun(
                builder=builder,
                multiplier=n,
                objects=count,
                elapsed_ms=elapsed,
            ))

    if output_dir is not None:
        path = write_report(report, output_dir)
        logger.info("Report written to %s", path)

    return report


# ── CLI ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None):
    """CLI entry point for the builder benchmark."""
    parser = argparse.ArgumentParser(
        description="builderproxy — synthesized vs. hand-written builder benchmark",
    )
    parser.add_argument(
        "-m", "--multipliers",
        type=int,
        nargs="+",
        default=None,
        help="Multipliers of --scale objects to build (default from settings)",
    )
    parser.add_argument(
        "-s", "--scale",
        type=int,
        default=None,
        help="Objects per multiplier unit",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=None,
        help="Directory to write benchmark_report.json",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    report = run_benchmark(
        multipliers=args.multipliers,
        scale=args.scale,
        output_dir=args.output_dir,
    )

    # Print summary
    print(f"Python {report.python_version}, scale={report.scale}")
    for builder in BUILDERS:
        print(f"{builder:>10}: {report.total_ms(builder):,.1f} ms total")

    if args.output_dir:
        print(f"Outputs written to: {args.output_dir}")


if __name__ == "__main__":
    main()
