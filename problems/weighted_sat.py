"""Weighted boolean satisfiability as an annealing problem domain.

Goal: find an assignment that satisfies every clause while maximizing the total
weight of the terms set to true.

Instance file format (DIMACS CNF with an optional weight line)
--------------------------------------------------------------
    c comment
    p cnf 3 2
    v 4 1 7
    1 -2 0
    2 3 -1 0

- a `p` line starts a new instance
- an optional `v` line lists one weight per variable; without it a
  variable's weight is its id
- each clause is a line of signed variable ids terminated by `0`
  (a minus sign negates the variable)
- blank, `c` and `%` lines close the current instance

Instances are numbered 1, 2, ... in file order.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import random

from annealer import AnnealConfig, AnnealResult, InstanceParseError, anneal


# ----------------------------
# Data models
# ----------------------------


@dataclass(frozen=True)
class Term:
    name: str
    weight: int


@dataclass(frozen=True)
class Literal:
    term_index: int
    negated: bool = False

    def evaluate(self, values: Sequence[bool]) -> bool:
        return values[self.term_index] != self.negated


@dataclass(frozen=True)
class Clause:
    literals: Tuple[Literal, ...]

    def is_satisfied(self, values: Sequence[bool]) -> bool:
        return any(lit.evaluate(values) for lit in self.literals)


@dataclass(frozen=True)
class SatInstance:
    instance_id: int
    terms: Tuple[Term, ...]
    clauses: Tuple[Clause, ...]

    def is_satisfied(self, assignment: "SatAssignment") -> bool:
        values = assignment.values
        return all(clause.is_satisfied(values) for clause in self.clauses)


# ----------------------------
# State representation
# ----------------------------


class SatAssignment:
    """A boolean value for every term, with the weight of true terms cached."""

    __slots__ = ("terms", "_values", "_weight")

    def __init__(self, terms: Tuple[Term, ...]):
        self.terms = terms
        self._values: List[bool] = [False] * len(terms)
        self._weight = 0

    def clone(self) -> "SatAssignment":
        other = SatAssignment.__new__(SatAssignment)
        other.terms = self.terms
        other._values = list(self._values)
        other._weight = self._weight
        return other

    @property
    def values(self) -> List[bool]:
        return self._values

    @property
    def weight(self) -> int:
        return self._weight

    def value(self, index: int) -> bool:
        return self._values[index]

    def set_value(self, index: int, value: bool) -> "SatAssignment":
        if self._values[index] != value:
            self._values[index] = value
            if value:
                self._weight += self.terms[index].weight
            else:
                self._weight -= self.terms[index].weight
        return self

    def toggle(self, index: int) -> "SatAssignment":
        return self.set_value(index, not self._values[index])


# -------------------------------------------------
# Loading
# -------------------------------------------------


class _BlockBuilder:
    def __init__(self, var_count: int):
        self.var_count = var_count
        self.weights: Optional[List[int]] = None
        self.clauses: List[Clause] = []

    def build(self, instance_id: int) -> SatInstance:
        weights = self.weights or list(range(1, self.var_count + 1))
        terms = tuple(Term(name=str(i + 1), weight=w) for i, w in enumerate(weights))
        return SatInstance(instance_id=instance_id, terms=terms, clauses=tuple(self.clauses))


def _ints(tokens: Sequence[str], *, path: Optional[str], line_no: int) -> List[int]:
    try:
        return [int(t) for t in tokens]
    except ValueError as exc:
        raise InstanceParseError(f"non-integer token: {exc}", path=path, line_no=line_no) from exc


def _parse_header(line: str, *, path: Optional[str], line_no: int) -> int:
    fields = line.split()
    if len(fields) != 4 or fields[1] != "cnf":
        raise InstanceParseError(f"malformed problem line {line!r}", path=path, line_no=line_no)
    var_count = _ints(fields[2:3], path=path, line_no=line_no)[0]
    try:
        # The clause count is informational; generated files may write it as a float.
        float(fields[3])
    except ValueError as exc:
        raise InstanceParseError(f"malformed clause count in {line!r}", path=path, line_no=line_no) from exc
    if var_count < 0:
        raise InstanceParseError(f"negative variable count {var_count}", path=path, line_no=line_no)
    return var_count


def _parse_clause(numbers: List[int], var_count: int, *, path: Optional[str], line_no: int) -> Clause:
    if not numbers or numbers[-1] != 0:
        raise InstanceParseError("clause must end with 0", path=path, line_no=line_no)
    body = numbers[:-1]
    if not body:
        raise InstanceParseError("empty clause", path=path, line_no=line_no)

    literals = []
    for n in body:
        if n == 0 or abs(n) > var_count:
            raise InstanceParseError(f"literal {n} out of range 1..{var_count}", path=path, line_no=line_no)
        literals.append(Literal(term_index=abs(n) - 1, negated=n < 0))
    return Clause(literals=tuple(literals))


def iter_sat_instances(text: str, *, path: Optional[str] = None) -> Iterator[SatInstance]:
    block: Optional[_BlockBuilder] = None
    next_id = 1

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()

        if not line or line.startswith("c") or line.startswith("%"):
            if block is not None:
                yield block.build(next_id)
                next_id += 1
                block = None
            continue

        if line.startswith("p"):
            if block is not None:
                yield block.build(next_id)
                next_id += 1
            block = _BlockBuilder(_parse_header(line, path=path, line_no=line_no))
            continue

        if block is None:
            # SATLIB files end with "%" followed by a lone "0".
            if line == "0":
                continue
            raise InstanceParseError("clause outside of a 'p cnf' block", path=path, line_no=line_no)

        if line.startswith("v"):
            weights = _ints(line.split()[1:], path=path, line_no=line_no)
            if len(weights) != block.var_count:
                raise InstanceParseError(
                    f"expected {block.var_count} weights, got {len(weights)}",
                    path=path,
                    line_no=line_no,
                )
            block.weights = weights
            continue

        numbers = _ints(line.split(), path=path, line_no=line_no)
        block.clauses.append(_parse_clause(numbers, block.var_count, path=path, line_no=line_no))

    if block is not None:
        yield block.build(next_id)


def load_sat_instances(path: str) -> List[SatInstance]:
    """Parse every instance in a weighted-SAT file."""

    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    return list(iter_sat_instances(text, path=path))


def format_sat_solution(instance: SatInstance, assignment: SatAssignment, *, feasible: bool = True) -> List[str]:
    """`<id> <weight>` followed by one `<term> => <0|1>` line per term.

    An assignment that violates a clause is reported as `<id> INFEASIBLE`.
    """

    if not feasible:
        return [f"{instance.instance_id} INFEASIBLE"]

    lines = [f"{instance.instance_id} {assignment.weight}"]
    for i, term in enumerate(instance.terms):
        lines.append(f"{term.name} => {1 if assignment.value(i) else 0}")
    return lines


# -------------------------------------------------
# Problem domain
# -------------------------------------------------


class WeightedSatDomain:
    """Flip one term at a time; only assignments satisfying every clause are accepted."""

    def __init__(self, instance: SatInstance):
        self.instance = instance

    def initial_state(self) -> SatAssignment:
        return SatAssignment(self.instance.terms)

    def neighbor(self, state: SatAssignment, rng: random.Random) -> SatAssignment:
        nxt = state.clone()
        if self.instance.terms:
            nxt.toggle(rng.randrange(len(self.instance.terms)))
        return nxt

    def is_feasible(self, state: SatAssignment) -> bool:
        return self.instance.is_satisfied(state)

    def objective(self, state: SatAssignment) -> float:
        return float(state.weight)

    def initial_temperature(self) -> float:
        return 5.0 * len(self.instance.terms)

    def frozen_temperature(self) -> float:
        return 4.0

    def inner_loop_limit(self) -> int:
        return len(self.instance.terms)


# -------------------------------------------------
# Solve
# -------------------------------------------------


def solve_weighted_sat(
    instance: SatInstance,
    anneal_config: AnnealConfig = AnnealConfig(),
    rng: Optional[random.Random] = None,
) -> AnnealResult[SatAssignment]:
    return anneal(WeightedSatDomain(instance), config=anneal_config, rng=rng)
