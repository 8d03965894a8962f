"""Solve every instance in one file.

This is what a single batch worker process runs (`python -m batch <file>`),
and what the CLI runs directly when given a file instead of a directory.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from annealer import AnnealConfig, SolveTimer
from problems.knapsack import format_knapsack_solution, load_knapsack_instances, solve_knapsack
from problems.weighted_sat import format_sat_solution, load_sat_instances, solve_weighted_sat

from .naming import KNAPSACK, PROBLEM_KINDS, SAT, parse_difficulty, problem_kind_for


logger = logging.getLogger(__name__)

T = TypeVar("T")


def detect_problem_kind(path: Union[str, Path], problem: Optional[str] = None) -> str:
    """Use `problem` if given, else the file name, else sniff for a `p cnf` line."""

    if problem is not None:
        if problem not in PROBLEM_KINDS:
            raise ValueError(f"unknown problem kind {problem!r}; expected one of {PROBLEM_KINDS}")
        return problem

    kind = problem_kind_for(path)
    if kind is not None:
        return kind

    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            if line.lstrip().startswith("p "):
                return SAT
    return KNAPSACK


def _timed(timer: Optional[SolveTimer], fn: Callable[[], T]) -> T:
    if timer is None:
        return fn()
    with timer.measure():
        return fn()


def solve_file(
    path: Union[str, Path],
    *,
    problem: Optional[str] = None,
    measure: bool = False,
    anneal_config: AnnealConfig = AnnealConfig(),
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Return the output lines for one instance file.

    Without `measure` these are the solution lines of every instance; with it,
    a single `<size> <avg> <min> <max>` timing line.

    Raises:
        InstanceParseError: if any line of the file is malformed.
    """

    path = Path(path)
    kind = detect_problem_kind(path, problem)
    if rng is None:
        rng = random.Random(anneal_config.seed)
    timer = SolveTimer() if measure else None

    lines: List[str] = []
    largest = 0

    if kind == KNAPSACK:
        for instance in load_knapsack_instances(str(path)):
            largest = max(largest, len(instance.items))
            result = _timed(timer, lambda: solve_knapsack(instance, anneal_config, rng))
            lines.append(format_knapsack_solution(instance, result.best_state))
    else:
        for instance in load_sat_instances(str(path)):
            largest = max(largest, len(instance.terms))
            result = _timed(timer, lambda: solve_weighted_sat(instance, anneal_config, rng))
            if not result.feasible:
                logger.warning(
                    "%s: instance %d ended without a satisfying assignment", path.name, instance.instance_id
                )
            lines.extend(format_sat_solution(instance, result.best_state, feasible=result.feasible))

    logger.debug("%s: solved %s file, %d output lines", path.name, kind, len(lines))

    if timer is None:
        return lines

    if not timer.samples:
        logger.warning("%s: no instances to measure", path.name)
        return []

    size = parse_difficulty(path)
    return [timer.summary_line(size if size is not None else float(largest))]
