import math
import random
import sys
from pathlib import Path

import pytest

# Ensure project root is on PYTHONPATH when tests are run via `pytest`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from annealer import AnnealConfig, AnnealConfigurationError, accept_move, anneal
from problems.knapsack import KnapsackDomain, parse_knapsack_line
from problems.weighted_sat import WeightedSatDomain, format_sat_solution, iter_sat_instances


class _Parabola:
    """Maximize -(x-3)^2 over integers with +/-1 moves."""

    def initial_state(self) -> int:
        return 50

    def neighbor(self, x: int, rng: random.Random) -> int:
        return x + (1 if rng.random() < 0.5 else -1)

    def is_feasible(self, x: int) -> bool:
        return True

    def objective(self, x: int) -> float:
        return -float((x - 3) ** 2)

    def initial_temperature(self) -> float:
        return 10.0

    def frozen_temperature(self) -> float:
        return 0.01

    def inner_loop_limit(self) -> int:
        return 20


def test_anneal_finds_peak_on_quadratic():
    result = anneal(_Parabola(), config=AnnealConfig(seed=1))

    assert result.best_objective == 0.0
    assert result.best_state == 3
    assert result.feasible


def test_unbound_domain_fails_before_searching():
    with pytest.raises(AnnealConfigurationError):
        anneal(None)


@pytest.mark.parametrize(
    "config",
    [
        AnnealConfig(cooling_factor=1.0),
        AnnealConfig(cooling_factor=0.0),
        AnnealConfig(frozen_temperature=0.0),
        AnnealConfig(inner_loop_limit=0),
    ],
)
def test_invalid_schedule_is_rejected(config):
    calls = []

    def callback(**kwargs):
        calls.append(kwargs)

    with pytest.raises(AnnealConfigurationError):
        anneal(_Parabola(), config=config, callback=callback)
    assert calls == []


def test_accept_move_always_takes_improving_and_neutral_moves():
    rng = random.Random(0)
    assert all(accept_move(-5.0, 0.001, rng) for _ in range(100))
    assert all(accept_move(0.0, 0.001, rng) for _ in range(100))


@pytest.mark.parametrize("cost,temperature", [(1.0, 1.0), (2.0, 4.0), (3.0, 1.5)])
def test_accept_move_matches_metropolis_probability(cost, temperature):
    rng = random.Random(123)
    trials = 20_000
    accepted = sum(accept_move(cost, temperature, rng) for _ in range(trials))

    expected = math.exp(-cost / temperature)
    assert abs(accepted / trials - expected) < 0.02


def test_temperature_strictly_decreases_and_loop_terminates():
    instance = parse_knapsack_line("1 4 10 2 3 3 4 4 5 5 6")
    temps = []

    def callback(step, temperature, current_state, current_objective, accepted):
        if not temps or temps[-1] != temperature:
            temps.append(temperature)

    result = anneal(KnapsackDomain(instance), config=AnnealConfig(seed=5), callback=callback)

    assert len(temps) == result.outer_iterations
    for prev, nxt in zip(temps, temps[1:]):
        assert nxt < prev
        assert nxt == pytest.approx(prev * 0.99)

    t0 = float(3 + 4 + 5 + 6)
    assert temps[0] == t0
    assert result.final_temperature <= 1.0 < result.final_temperature / 0.99
    assert result.outer_iterations == math.ceil(math.log(t0 / 1.0) / math.log(1 / 0.99))
    assert result.total_steps == result.outer_iterations * len(instance.items)


def test_knapsack_accepted_states_never_exceed_capacity():
    rng = random.Random(11)
    weights = [rng.randint(1, 30) for _ in range(15)]
    prices = [rng.randint(1, 60) for _ in range(15)]
    line = "7 15 60 " + " ".join(f"{w} {p}" for w, p in zip(weights, prices))
    instance = parse_knapsack_line(line)

    seen = []

    def callback(step, temperature, current_state, current_objective, accepted):
        assert current_state.weight <= instance.max_weight
        assert current_objective == current_state.price
        seen.append(accepted)

    result = anneal(KnapsackDomain(instance), config=AnnealConfig(seed=2), callback=callback)

    assert any(seen)
    assert result.state.weight <= instance.max_weight
    assert result.best_state.weight <= instance.max_weight
    assert result.best_objective >= result.objective


def test_sat_accepted_states_satisfy_every_clause():
    text = "\n".join(
        [
            "p cnf 6 8",
            "1 -2 3 0",
            "-1 4 0",
            "2 5 -6 0",
            "-3 -4 0",
            "6 -1 0",
            "-5 2 0",
            "3 4 -5 0",
            "-2 -6 0",
        ]
    )
    (instance,) = list(iter_sat_instances(text))

    def callback(step, temperature, current_state, current_objective, accepted):
        if accepted:
            assert instance.is_satisfied(current_state)

    result = anneal(WeightedSatDomain(instance), config=AnnealConfig(seed=4), callback=callback)

    assert result.feasible
    assert instance.is_satisfied(result.state)
    assert instance.is_satisfied(result.best_state)


def test_knapsack_small_instance_reaches_optimum():
    # Capacity 10 fits every item (weight 9, price 12).
    instance = parse_knapsack_line("1 3 10 2 3 3 4 4 5")
    prices = []
    for seed in range(20):
        result = anneal(KnapsackDomain(instance), config=AnnealConfig(seed=seed))
        assert result.best_state.weight <= 10
        assert result.best_objective <= 12
        prices.append(result.best_objective)
    assert 12 in prices


def test_knapsack_tight_capacity_reaches_items_two_and_three():
    instance = parse_knapsack_line("1 3 7 2 3 3 4 4 5")
    best = []
    for seed in range(20):
        result = anneal(KnapsackDomain(instance), config=AnnealConfig(seed=seed))
        assert result.best_state.weight <= 7
        assert result.best_objective <= 9
        best.append(result.best_state.bits())
    assert [0, 1, 1] in best


def test_sat_two_clause_block_ends_satisfied():
    (instance,) = list(iter_sat_instances("p cnf 2 2\n1 2 0\n-1 -2 0\n"))
    for seed in range(10):
        result = anneal(WeightedSatDomain(instance), config=AnnealConfig(seed=seed))
        assert result.feasible
        assert result.state.values in ([True, False], [False, True])


def test_sat_infeasible_initial_state_is_reported():
    # Both unit clauses must hold; no single flip from all-false satisfies them.
    (instance,) = list(iter_sat_instances("p cnf 2 2\n1 0\n2 0\n"))
    result = anneal(WeightedSatDomain(instance), config=AnnealConfig(seed=0))

    assert not result.feasible
    assert result.accepted_moves == 0
    assert format_sat_solution(instance, result.best_state, feasible=result.feasible) == ["1 INFEASIBLE"]


def test_empty_instance_returns_initial_state():
    instance = parse_knapsack_line("9 0 10")
    result = anneal(KnapsackDomain(instance))

    assert result.total_steps == 0
    assert result.objective == 0.0
    assert result.feasible
