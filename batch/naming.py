"""Instance / expected-result file naming conventions.

Instance files carry their difficulty (the instance size) in the name:

    knap_40.inst.dat        -> knapsack, 40 items
    sat_20_4.3.inst.dat     -> weighted SAT, 20 terms (clause ratio 4.3)

Expected results for correctness checks live in a separate directory as
`<name>.sol.dat` (same stem), `sat.<size>.sol.dat` or `knap_<size>.sol.dat`.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

import re


KNAPSACK = "knapsack"
SAT = "sat"
PROBLEM_KINDS = (KNAPSACK, SAT)

_INSTANCE_RE = re.compile(
    r"(?P<prefix>knap|sat)_(?P<size>\d+(?:\.\d+)?)(?:_\d+(?:\.\d+)?)?\.inst\.dat$"
)

_PREFIX_TO_KIND = {"knap": KNAPSACK, "sat": SAT}


def _match(filename: Union[str, Path]):
    return _INSTANCE_RE.search(Path(filename).name)


def parse_difficulty(filename: Union[str, Path]) -> Optional[float]:
    """Return the size encoded in an instance filename, or None if it has none."""

    m = _match(filename)
    if m is None:
        return None
    return float(m.group("size"))


def problem_kind_for(filename: Union[str, Path]) -> Optional[str]:
    m = _match(filename)
    if m is None:
        return None
    return _PREFIX_TO_KIND[m.group("prefix")]


def expected_result_candidates(expected_dir: Union[str, Path], filename: Union[str, Path]) -> List[Path]:
    base = Path(expected_dir)
    name = Path(filename).name
    out = [base / name.replace(".inst.dat", ".sol.dat")]

    m = _match(name)
    if m is not None:
        prefix, size = m.group("prefix"), m.group("size")
        out.append(base / f"{prefix}.{size}.sol.dat")
        out.append(base / f"{prefix}_{size}.sol.dat")
    return out


def find_expected_result(expected_dir: Union[str, Path], filename: Union[str, Path]) -> Optional[Path]:
    for candidate in expected_result_candidates(expected_dir, filename):
        if candidate.is_file():
            return candidate
    return None
