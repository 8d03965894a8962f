"""Batch runner configuration.

Environment overrides:
- `ANNEAL_JOBS`: default number of concurrent solver processes
  (falls back to the CPU count)
- `ANNEAL_PYTHON`: interpreter used to launch solver processes
  (falls back to the running interpreter)
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


ENV_JOBS = "ANNEAL_JOBS"
ENV_PYTHON = "ANNEAL_PYTHON"


def default_jobs() -> int:
    override = os.getenv(ENV_JOBS)
    if override:
        try:
            jobs = int(override)
        except ValueError as exc:
            raise ValueError(f"{ENV_JOBS} must be an integer, got {override!r}") from exc
        if jobs < 1:
            raise ValueError(f"{ENV_JOBS} must be >= 1, got {jobs}")
        return jobs
    return os.cpu_count() or 1


def default_python() -> str:
    return os.getenv(ENV_PYTHON) or sys.executable


@dataclass(frozen=True)
class BatchConfig:
    """How a directory of instance files is processed.

    Attributes:
        jobs: Maximum number of solver processes running at once.
        max_difficulty: Skip instance files whose size exceeds this.
        expected_dir: Enables correctness mode against `<expected_dir>/*.sol.dat`.
        measure: Workers report `<size> <avg> <min> <max>` instead of solutions.
        problem: Force a problem kind instead of inferring it from file names.
        seed: Passed to every worker; only useful for tests.
    """

    jobs: int = field(default_factory=default_jobs)
    max_difficulty: Optional[float] = None
    expected_dir: Optional[Path] = None
    measure: bool = False
    problem: Optional[str] = None
    seed: Optional[int] = None
    python: str = field(default_factory=default_python)
