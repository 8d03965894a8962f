"""Problem domains for the annealing engine (knapsack, weighted SAT)."""

from .knapsack import (
	Item,
	KnapsackDomain,
	KnapsackInstance,
	KnapsackSelection,
	format_knapsack_solution,
	load_knapsack_instances,
	solve_knapsack,
)

from .weighted_sat import (
	Clause,
	Literal,
	SatAssignment,
	SatInstance,
	Term,
	WeightedSatDomain,
	format_sat_solution,
	load_sat_instances,
	solve_weighted_sat,
)

__all__ = [
	"Item",
	"KnapsackDomain",
	"KnapsackInstance",
	"KnapsackSelection",
	"format_knapsack_solution",
	"load_knapsack_instances",
	"solve_knapsack",
	"Clause",
	"Literal",
	"SatAssignment",
	"SatInstance",
	"Term",
	"WeightedSatDomain",
	"format_sat_solution",
	"load_sat_instances",
	"solve_weighted_sat",
]
