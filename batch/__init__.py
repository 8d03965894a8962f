"""Single-file solving and the parallel batch runner."""

from .config import BatchConfig, default_jobs
from .parallel import BatchJob, JobResult, collect_jobs, result_lines, run_batch, run_jobs
from .solve import solve_file

__all__ = [
    "BatchConfig",
    "BatchJob",
    "JobResult",
    "collect_jobs",
    "default_jobs",
    "result_lines",
    "run_batch",
    "run_jobs",
    "solve_file",
]
