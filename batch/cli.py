from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from annealer import AnnealConfig, InstanceParseError

from .config import BatchConfig, default_jobs
from .naming import PROBLEM_KINDS, parse_difficulty
from .parallel import BatchJob, correctness_verdict, result_lines, run_batch
from .solve import solve_file


logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anneal",
        description="Simulated annealing for knapsack / weighted SAT instance files.",
    )
    parser.add_argument("path", help="instance file, or a directory of instance files")
    parser.add_argument(
        "-t",
        "--test",
        metavar="DIR",
        help="correctness mode: compare results with the expected-result files in DIR",
    )
    parser.add_argument("-m", "--measure", action="store_true", help="print timing summaries instead of solutions")
    parser.add_argument("-j", "--jobs", type=_positive_int, help="parallel solver processes (directory mode)")
    parser.add_argument("-d", "--difficulty", type=float, help="skip instance files larger than this")
    parser.add_argument("-p", "--problem", choices=PROBLEM_KINDS, help="problem kind (default: from file name)")
    parser.add_argument("--seed", type=int, help="random seed, for reproducible test runs")
    parser.add_argument("--report", help="also write a batch report (.csv, .md or .xlsx)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level for stderr output",
    )
    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _emit(lines: List[str]) -> None:
    for line in lines:
        print(line)


def _run_directory(args: argparse.Namespace, path: Path, jobs: int) -> int:
    config = BatchConfig(
        jobs=jobs,
        max_difficulty=args.difficulty,
        expected_dir=Path(args.test) if args.test else None,
        measure=args.measure,
        problem=args.problem,
        seed=args.seed,
    )
    results = run_batch(path, config)
    _emit(result_lines(results))

    if args.report:
        # Local import: pandas is only needed for reports.
        from reports.batch_export import write_batch_report

        written = write_batch_report(results, args.report)
        logger.info("wrote batch report to %s", written)
    return 0


def _run_file(args: argparse.Namespace, path: Path) -> int:
    try:
        lines = solve_file(
            path,
            problem=args.problem,
            measure=args.measure,
            anneal_config=AnnealConfig(seed=args.seed),
        )
    except InstanceParseError as exc:
        logger.error("cannot parse instance file: %s", exc)
        return 1

    if args.test and not args.measure:
        difficulty = parse_difficulty(path)
        job = BatchJob(path=path, difficulty=difficulty if difficulty is not None else 0.0)
        _verdict, lines = correctness_verdict(job, lines, args.test)
        lines = list(lines)

    if args.report:
        logger.warning("--report only applies to directory runs; ignoring")

    _emit(lines)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    path = Path(args.path)
    if path.is_dir():
        try:
            jobs = args.jobs or default_jobs()
        except ValueError as exc:
            parser.error(str(exc))
        return _run_directory(args, path, jobs)
    if not path.is_file():
        parser.error(f"no such file or directory: {path}")
    return _run_file(args, path)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
