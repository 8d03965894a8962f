"""Random weighted 3-SAT instance generator.

Produces text in the format read by `problems.weighted_sat`:

    p cnf <terms> <clauses>
    v <weight> ... (one per term, 1..ceil(10 * ratio))
    <three distinct signed variables> 0
    ...
    <blank line>

"""

from __future__ import annotations

from typing import List, Optional

import math
import random


LITERALS_PER_CLAUSE = 3


def generate_sat_block(terms: int, ratio: float, rng: random.Random) -> List[str]:
    if terms < LITERALS_PER_CLAUSE:
        raise ValueError(f"need at least {LITERALS_PER_CLAUSE} terms, got {terms}")
    if ratio <= 0:
        raise ValueError(f"ratio must be > 0, got {ratio}")

    clause_count = int(round(terms * ratio))
    lines = [f"p cnf {terms} {clause_count}"]

    weights = [max(1, math.ceil(rng.random() * 10 * ratio)) for _ in range(terms)]
    lines.append("v " + " ".join(str(w) for w in weights))

    names = list(range(1, terms + 1))
    for _ in range(clause_count):
        picked = rng.sample(names, LITERALS_PER_CLAUSE)
        lits = [str(v) if rng.random() >= 0.5 else f"-{v}" for v in picked]
        lines.append(" ".join(lits) + " 0")

    lines.append("")
    return lines


def generate_sat_instances(count: int, terms: int, ratio: float, seed: Optional[int] = None) -> str:
    """Return `count` instances as one file body."""

    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")

    rng = random.Random(seed)
    lines: List[str] = []
    for _ in range(count):
        lines.extend(generate_sat_block(terms, ratio, rng))
    return "\n".join(lines) + "\n"


def sat_instance_filename(terms: int, ratio: float) -> str:
    return f"sat_{terms}_{ratio:g}.inst.dat"
