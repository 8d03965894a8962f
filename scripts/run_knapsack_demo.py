"""Demo runner: anneal a few knapsack instances and print a summary table.

Usage:
    python scripts/run_knapsack_demo.py

"""

from __future__ import annotations

from pathlib import Path
import random
import sys

import pandas as pd

# Ensure project root is on PYTHONPATH when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from annealer import AnnealConfig, SolveTimer
from problems.knapsack import format_knapsack_solution, parse_knapsack_line, solve_knapsack


DEMO_INSTANCES = [
    "1 3 10 2 3 3 4 4 5",
    "2 3 7 2 3 3 4 4 5",
    "3 4 50 10 60 20 100 30 120 25 115",
    "4 6 15 5 10 4 40 6 30 3 50 7 35 2 12",
]


def main() -> None:
    rng = random.Random(7)
    timer = SolveTimer()
    rows = []

    for line in DEMO_INSTANCES:
        instance = parse_knapsack_line(line)
        with timer.measure():
            result = solve_knapsack(instance, AnnealConfig(), rng=rng)

        rows.append(
            {
                "id": instance.instance_id,
                "items": len(instance.items),
                "capacity": instance.max_weight,
                "best_price": result.best_objective,
                "best_weight": result.best_state.weight,
                "accepted_moves": result.accepted_moves,
                "total_steps": result.total_steps,
                "output": format_knapsack_solution(instance, result.best_state),
            }
        )

    print("\n=== Knapsack results (best found) ===")
    print(pd.DataFrame(rows).to_string(index=False))

    print("\n=== Timing (seconds) ===")
    print(f"avg: {timer.average():.6f}  min: {timer.minimum():.6f}  max: {timer.maximum():.6f}")


if __name__ == "__main__":
    main()
