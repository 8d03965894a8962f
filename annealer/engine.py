"""Simulated annealing over a pluggable problem domain.

The engine knows nothing about knapsacks or clauses. A problem kind plugs in
by implementing the `ProblemDomain` capability set:

- `initial_state()` builds the starting candidate
- `neighbor(state, rng)` returns a *new* candidate one local move away
- `is_feasible(state)` checks the hard constraints
- `objective(state)` scores a candidate (higher is better)

plus three schedule hints (initial temperature, frozen temperature, inner loop
length) that can be overridden through `AnnealConfig`.

Cooling schedule
----------------
The temperature is multiplied by `cooling_factor` after every inner loop and
the search stops once it drops to the frozen threshold. With a fixed factor the
number of outer iterations is `log(T0 / T_frozen) / log(1 / factor)`, so the
total work per instance is `inner_loop_limit * outer_iterations`.

Acceptance
----------
A neighbor replaces the current candidate when it is feasible and the
Metropolis test passes: `cost <= 0` or `random() < exp(-cost / T)`, where
`cost = objective(current) - objective(neighbor)`. A zero cost is always
accepted.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, Protocol, TypeVar

import logging
import math
import random

from .errors import AnnealConfigurationError


logger = logging.getLogger(__name__)

TState = TypeVar("TState")


class ProblemDomain(Protocol[TState]):
    def initial_state(self) -> TState:  # pragma: no cover
        """Return the candidate the search starts from."""

    def neighbor(self, state: TState, rng: random.Random) -> TState:  # pragma: no cover
        """Return a fresh candidate one random move away from `state`."""

    def is_feasible(self, state: TState) -> bool:  # pragma: no cover
        """Return True if `state` satisfies every hard constraint."""

    def objective(self, state: TState) -> float:  # pragma: no cover
        """Return the quality of `state` to MAXIMIZE."""

    def initial_temperature(self) -> float:  # pragma: no cover
        ...

    def frozen_temperature(self) -> float:  # pragma: no cover
        ...

    def inner_loop_limit(self) -> int:  # pragma: no cover
        ...


class CallbackFn(Protocol[TState]):
    def __call__(
        self,
        step: int,
        temperature: float,
        current_state: TState,
        current_objective: float,
        accepted: bool,
    ) -> None:  # pragma: no cover
        """Optional progress callback called after every inner iteration."""


@dataclass(frozen=True)
class AnnealConfig:
    """Configuration for one annealing run.

    Attributes:
        cooling_factor: Multiplier applied to the temperature after each inner loop.
        initial_temperature: Overrides the domain's starting temperature.
        frozen_temperature: Overrides the domain's stopping threshold.
        inner_loop_limit: Overrides the domain's iterations per temperature.
        seed: RNG seed, only used when no `rng` is passed to `anneal`.
    """

    cooling_factor: float = 0.99
    initial_temperature: Optional[float] = None
    frozen_temperature: Optional[float] = None
    inner_loop_limit: Optional[int] = None
    seed: Optional[int] = None


@dataclass
class AnnealResult(Generic[TState]):
    state: TState
    objective: float
    feasible: bool
    best_state: TState
    best_objective: float
    outer_iterations: int
    total_steps: int
    accepted_moves: int
    final_temperature: float


@dataclass(frozen=True)
class _Schedule:
    initial_temperature: float
    frozen_temperature: float
    inner_loop_limit: int
    cooling_factor: float


def _resolve_schedule(domain: ProblemDomain, config: AnnealConfig) -> _Schedule:
    """Merge config overrides with the domain's hints and validate the result."""

    if not 0.0 < config.cooling_factor < 1.0:
        raise AnnealConfigurationError(f"cooling_factor must be in (0, 1), got {config.cooling_factor}")

    t_start = config.initial_temperature
    if t_start is None:
        t_start = domain.initial_temperature()

    t_frozen = config.frozen_temperature
    if t_frozen is None:
        t_frozen = domain.frozen_temperature()
    if t_frozen <= 0:
        raise AnnealConfigurationError(f"frozen temperature must be > 0, got {t_frozen}")

    inner = config.inner_loop_limit
    if inner is None:
        # Empty instances never enter the loop (T0 is 0), but keep the limit valid.
        inner = max(1, domain.inner_loop_limit())
    if inner < 1:
        raise AnnealConfigurationError(f"inner_loop_limit must be >= 1, got {inner}")

    return _Schedule(
        initial_temperature=float(t_start),
        frozen_temperature=float(t_frozen),
        inner_loop_limit=int(inner),
        cooling_factor=float(config.cooling_factor),
    )


def accept_move(cost: float, temperature: float, rng: random.Random) -> bool:
    """Metropolis criterion for a move that changes the objective by `-cost`."""

    if cost <= 0:
        return True
    return rng.random() < math.exp(-cost / temperature)


def anneal(
    domain: Optional[ProblemDomain[TState]],
    config: AnnealConfig = AnnealConfig(),
    rng: Optional[random.Random] = None,
    callback: Optional[CallbackFn[TState]] = None,
) -> AnnealResult[TState]:
    """Run simulated annealing and return the final candidate.

    Contract:
    - Maximizes `domain.objective(state)`
    - Only feasible neighbors ever replace the current candidate
    - `domain.neighbor` must not mutate its input

    Returns:
        AnnealResult whose `state` is the candidate held when the schedule
        froze. `feasible` is False only if the initial state was infeasible and
        no neighbor was ever accepted.

    Raises:
        AnnealConfigurationError: if no domain is bound or the schedule is invalid.
    """

    if domain is None:
        raise AnnealConfigurationError("no problem domain bound to the annealing engine")

    schedule = _resolve_schedule(domain, config)
    if rng is None:
        rng = random.Random(config.seed)

    current = domain.initial_state()
    current_obj = domain.objective(current)
    feasible = domain.is_feasible(current)

    best = current
    best_obj = current_obj
    best_feasible = feasible

    t = schedule.initial_temperature
    step = 0
    outer = 0
    accepted_moves = 0

    while t > schedule.frozen_temperature:
        for _ in range(schedule.inner_loop_limit):
            cand = domain.neighbor(current, rng)
            cand_obj = domain.objective(cand)
            cost = current_obj - cand_obj

            accepted = accept_move(cost, t, rng) and domain.is_feasible(cand)
            if accepted:
                current = cand
                current_obj = cand_obj
                feasible = True
                accepted_moves += 1

                if not best_feasible or current_obj > best_obj:
                    best = current
                    best_feasible = True
                    best_obj = current_obj

            if callback is not None:
                callback(
                    step=step,
                    temperature=t,
                    current_state=current,
                    current_objective=current_obj,
                    accepted=accepted,
                )
            step += 1

        t *= schedule.cooling_factor
        outer += 1

    logger.debug(
        "anneal finished: outer=%d steps=%d accepted=%d objective=%s best=%s feasible=%s",
        outer,
        step,
        accepted_moves,
        current_obj,
        best_obj,
        feasible,
    )

    return AnnealResult(
        state=current,
        objective=current_obj,
        feasible=feasible,
        best_state=best,
        best_objective=best_obj,
        outer_iterations=outer,
        total_steps=step,
        accepted_moves=accepted_moves,
        final_temperature=t,
    )
