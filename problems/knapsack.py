"""0/1 knapsack as an annealing problem domain.

Instance file format: every non-blank line is one instance

    id item_count max_weight w1 p1 w2 p2 ... wn pn

The candidate state is a membership flag per item with the selected weight and
price kept up to date on every flip, so the engine can score a neighbor in O(1).

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import random

from annealer import AnnealConfig, AnnealResult, InstanceParseError, anneal


FROZEN_TEMPERATURE = 1.0
MIN_INITIAL_TEMPERATURE = 10.0

# ----------------------------
# Data models
# ----------------------------


@dataclass(frozen=True)
class Item:
    weight: int
    price: int


@dataclass(frozen=True)
class KnapsackInstance:
    instance_id: int
    max_weight: int
    items: Tuple[Item, ...]


# ----------------------------
# State representation
# ----------------------------


class KnapsackSelection:
    """Subset of an instance's items, addressed by item index."""

    __slots__ = ("items", "_selected", "_weight", "_price")

    def __init__(self, items: Tuple[Item, ...]):
        self.items = items
        self._selected: List[bool] = [False] * len(items)
        self._weight = 0
        self._price = 0

    def clone(self) -> "KnapsackSelection":
        other = KnapsackSelection.__new__(KnapsackSelection)
        other.items = self.items
        other._selected = list(self._selected)
        other._weight = self._weight
        other._price = self._price
        return other

    def contains(self, index: int) -> bool:
        return self._selected[index]

    def add(self, index: int) -> "KnapsackSelection":
        if not self._selected[index]:
            item = self.items[index]
            self._selected[index] = True
            self._weight += item.weight
            self._price += item.price
        return self

    def remove(self, index: int) -> "KnapsackSelection":
        if self._selected[index]:
            item = self.items[index]
            self._selected[index] = False
            self._weight -= item.weight
            self._price -= item.price
        return self

    def toggle(self, index: int) -> "KnapsackSelection":
        if self._selected[index]:
            return self.remove(index)
        return self.add(index)

    @property
    def weight(self) -> int:
        return self._weight

    @property
    def price(self) -> int:
        return self._price

    def bits(self) -> List[int]:
        return [1 if flag else 0 for flag in self._selected]


# -------------------------------------------------
# Loading
# -------------------------------------------------


def parse_knapsack_line(line: str, *, path: Optional[str] = None, line_no: Optional[int] = None) -> KnapsackInstance:
    fields = line.split()
    try:
        numbers = [int(f) for f in fields]
    except ValueError as exc:
        raise InstanceParseError(f"non-integer token in knapsack line: {exc}", path=path, line_no=line_no) from exc

    if len(numbers) < 3:
        raise InstanceParseError("knapsack line needs at least id, item count and capacity", path=path, line_no=line_no)

    instance_id, count, max_weight = numbers[0], numbers[1], numbers[2]
    if count < 0:
        raise InstanceParseError(f"negative item count {count}", path=path, line_no=line_no)
    expected = 3 + 2 * count
    if len(numbers) != expected:
        raise InstanceParseError(
            f"expected {expected} numbers for {count} items, got {len(numbers)}",
            path=path,
            line_no=line_no,
        )

    items = tuple(Item(weight=numbers[3 + 2 * i], price=numbers[4 + 2 * i]) for i in range(count))
    return KnapsackInstance(instance_id=instance_id, max_weight=max_weight, items=items)


def iter_knapsack_instances(text: str, *, path: Optional[str] = None) -> Iterator[KnapsackInstance]:
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        yield parse_knapsack_line(line, path=path, line_no=line_no)


def load_knapsack_instances(path: str) -> List[KnapsackInstance]:
    """Parse every instance in a knapsack file."""

    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    return list(iter_knapsack_instances(text, path=path))


def format_knapsack_solution(instance: KnapsackInstance, selection: KnapsackSelection) -> str:
    """`<id> <item_count> <price> <bit per item>` in item order."""

    parts = [str(instance.instance_id), str(len(instance.items)), str(selection.price)]
    parts.extend(str(b) for b in selection.bits())
    return " ".join(parts)


# -------------------------------------------------
# Problem domain
# -------------------------------------------------


class KnapsackDomain:
    """Flip one item at a time; reject anything over capacity."""

    def __init__(self, instance: KnapsackInstance):
        self.instance = instance

    def initial_state(self) -> KnapsackSelection:
        return KnapsackSelection(self.instance.items)

    def neighbor(self, state: KnapsackSelection, rng: random.Random) -> KnapsackSelection:
        nxt = state.clone()
        if self.instance.items:
            nxt.toggle(rng.randrange(len(self.instance.items)))
        return nxt

    def is_feasible(self, state: KnapsackSelection) -> bool:
        return state.weight <= self.instance.max_weight

    def objective(self, state: KnapsackSelection) -> float:
        return float(state.price)

    def initial_temperature(self) -> float:
        # Upper bound on the total objective, floored so cheap instances still search.
        total = float(sum(item.price for item in self.instance.items))
        return max(total, MIN_INITIAL_TEMPERATURE)

    def frozen_temperature(self) -> float:
        return FROZEN_TEMPERATURE

    def inner_loop_limit(self) -> int:
        return len(self.instance.items)


# -------------------------------------------------
# Solve
# -------------------------------------------------


def solve_knapsack(
    instance: KnapsackInstance,
    anneal_config: AnnealConfig = AnnealConfig(),
    rng: Optional[random.Random] = None,
) -> AnnealResult[KnapsackSelection]:
    return anneal(KnapsackDomain(instance), config=anneal_config, rng=rng)
