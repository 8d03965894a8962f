"""Run one solver process per instance file with a bounded worker pool.

Scheduling
----------
- Eligible files are queued largest-first so long jobs start early.
- A `ThreadPoolExecutor` with `jobs` threads pulls from that queue in order;
  each thread starts one isolated `python -m batch <file>` process and blocks
  until it exits, so at most `jobs` solver processes exist at any time and a
  finished job's slot goes straight to the next queued file.
- Every job produces one immutable `JobResult`. Results are only aggregated
  after the pool has drained, then ordered by difficulty (smallest first), so
  the output never depends on which process happened to finish first.

Failure isolation
-----------------
A job that crashes, exits non-zero or cannot be launched is recorded as an
error result; the remaining jobs still run. There are no retries or timeouts.

"""

from __future__ import annotations

import difflib
import logging
import os
import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from .config import BatchConfig
from .naming import find_expected_result, parse_difficulty


logger = logging.getLogger(__name__)

# Workers import the project packages; make them importable from a source checkout too.
PROJECT_ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class BatchJob:
    path: Path
    difficulty: float


@dataclass(frozen=True)
class JobResult:
    job: BatchJob
    returncode: Optional[int]
    lines: Tuple[str, ...] = ()
    error: Optional[str] = None
    verdict: Optional[str] = None  # "OK" / "FAIL" in correctness mode

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> str:
        if self.error is not None:
            return "error"
        if self.verdict is not None:
            return self.verdict.lower()
        return "ok"

    def output_lines(self) -> List[str]:
        if self.error is not None:
            return [f"{self.job.difficulty:g} ERROR {self.error}"]
        return list(self.lines)


WorkerFn = Callable[[BatchJob, BatchConfig], JobResult]


# -------------------------------------------------
# Queue
# -------------------------------------------------


def collect_jobs(directory: Union[str, Path], max_difficulty: Optional[float] = None) -> List[BatchJob]:
    """Instance files in `directory`, hardest first."""

    jobs: List[BatchJob] = []
    for path in sorted(Path(directory).iterdir()):
        if not path.is_file():
            continue
        difficulty = parse_difficulty(path)
        if difficulty is None:
            logger.warning("skipping %s: no size in file name", path.name)
            continue
        if max_difficulty is not None and difficulty > max_difficulty:
            logger.debug("skipping %s: size %g above %g", path.name, difficulty, max_difficulty)
            continue
        jobs.append(BatchJob(path=path, difficulty=difficulty))

    jobs.sort(key=lambda j: (-j.difficulty, j.path.name))
    return jobs


# -------------------------------------------------
# Worker process
# -------------------------------------------------


def build_worker_command(job: BatchJob, config: BatchConfig) -> List[str]:
    cmd = [config.python, "-m", "batch", str(job.path)]
    if config.measure:
        cmd.append("--measure")
    if config.problem is not None:
        cmd.extend(["--problem", config.problem])
    if config.seed is not None:
        cmd.extend(["--seed", str(config.seed)])
    return cmd


def _worker_env() -> Dict[str, str]:
    env = dict(os.environ)
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = str(PROJECT_ROOT) + (os.pathsep + existing if existing else "")
    return env


def run_solver_process(job: BatchJob, config: BatchConfig) -> JobResult:
    """Solve one file in a child process and capture its stdout lines."""

    cmd = build_worker_command(job, config)
    logger.debug("starting %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, env=_worker_env())
    except OSError as exc:
        return JobResult(job=job, returncode=None, error=f"launch failed: {exc}")

    lines = tuple(line.rstrip() for line in proc.stdout.splitlines() if line.strip())
    if proc.returncode != 0:
        stderr = proc.stderr.strip().splitlines()
        detail = stderr[-1] if stderr else "no stderr output"
        return JobResult(
            job=job,
            returncode=proc.returncode,
            lines=lines,
            error=f"exit status {proc.returncode}: {detail}",
        )
    return JobResult(job=job, returncode=proc.returncode, lines=lines)


# -------------------------------------------------
# Correctness mode
# -------------------------------------------------


def correctness_verdict(
    job: BatchJob,
    output_lines: List[str],
    expected_dir: Union[str, Path],
) -> Tuple[str, Tuple[str, ...]]:
    """Compare solver output with the expected result file.

    Returns:
        (verdict, lines) where verdict is "OK" or "FAIL" and lines start with
        `<size> <verdict>`, followed by a unified diff on failure.
    """

    size = f"{job.difficulty:g}"
    expected_path = find_expected_result(expected_dir, job.path)
    if expected_path is None:
        return "FAIL", (f"{size} FAIL no expected result for {job.path.name}",)

    expected = [line.rstrip() for line in expected_path.read_text(encoding="utf-8").splitlines() if line.strip()]
    actual = [line.rstrip() for line in output_lines if line.strip()]
    if expected == actual:
        return "OK", (f"{size} OK",)

    diff = difflib.unified_diff(
        expected,
        actual,
        fromfile=str(expected_path.name),
        tofile=job.path.name,
        lineterm="",
    )
    return "FAIL", (f"{size} FAIL",) + tuple(diff)


def _run_job(worker: WorkerFn, job: BatchJob, config: BatchConfig) -> JobResult:
    try:
        result = worker(job, config)
    except Exception as exc:  # noqa: BLE001
        logger.exception("worker for %s crashed", job.path.name)
        return JobResult(job=job, returncode=None, error=f"worker crashed: {exc}")

    if not result.ok:
        logger.warning("%s failed: %s", job.path.name, result.error)
        return result

    if config.expected_dir is not None and not config.measure:
        verdict, lines = correctness_verdict(job, list(result.lines), config.expected_dir)
        result = replace(result, verdict=verdict, lines=lines)

    logger.debug("finished %s (%s)", job.path.name, result.status)
    return result


# -------------------------------------------------
# Pool
# -------------------------------------------------


def run_jobs(jobs: List[BatchJob], config: BatchConfig, worker: WorkerFn = run_solver_process) -> List[JobResult]:
    """Run `jobs` in queue order with at most `config.jobs` in flight."""

    if config.jobs < 1:
        raise ValueError(f"jobs must be >= 1, got {config.jobs}")

    with ThreadPoolExecutor(max_workers=config.jobs) as executor:
        futures = [executor.submit(_run_job, worker, job, config) for job in jobs]
        results = [f.result() for f in futures]

    return sorted(results, key=lambda r: (r.job.difficulty, r.job.path.name))


def run_batch(
    directory: Union[str, Path],
    config: Optional[BatchConfig] = None,
    worker: WorkerFn = run_solver_process,
) -> List[JobResult]:
    """Solve every eligible instance file in `directory`.

    Returns:
        One result per file, ordered by ascending difficulty.
    """

    config = config or BatchConfig()
    jobs = collect_jobs(directory, config.max_difficulty)
    logger.info("running %d instance files with %d workers", len(jobs), config.jobs)
    return run_jobs(jobs, config, worker)


def result_lines(results: List[JobResult]) -> List[str]:
    out: List[str] = []
    for result in results:
        out.extend(result.output_lines())
    return out
