"""Simulated annealing engine and run instrumentation."""

from .engine import AnnealConfig, AnnealResult, ProblemDomain, accept_move, anneal
from .errors import AnnealConfigurationError, InstanceParseError, TimerStateError
from .timing import SolveTimer

__all__ = [
    "AnnealConfig",
    "AnnealConfigurationError",
    "AnnealResult",
    "InstanceParseError",
    "ProblemDomain",
    "SolveTimer",
    "TimerStateError",
    "accept_move",
    "anneal",
]
