"""Generate random weighted 3-SAT instance files.

Usage:
    python scripts/generate_sat_instances.py 50 20 4.3 --out data/sat

writes `data/sat/sat_20_4.3.inst.dat` with 50 instances of 20 terms and
86 clauses each. Without `--out` the instances are printed to stdout.

"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Ensure project root is on PYTHONPATH when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from problems.generator import generate_sat_instances, sat_instance_filename


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate weighted 3-SAT instances")
    parser.add_argument("instances", type=int, help="number of instances")
    parser.add_argument("terms", type=int, help="number of terms per instance")
    parser.add_argument("ratio", type=float, help="clauses / terms ratio")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--out", help="directory to write the instance file into")
    args = parser.parse_args(argv)

    text = generate_sat_instances(args.instances, args.terms, args.ratio, seed=args.seed)

    if args.out is None:
        sys.stdout.write(text)
        return 0

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / sat_instance_filename(args.terms, args.ratio)
    path.write_text(text, encoding="utf-8")
    print(f"Wrote: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
