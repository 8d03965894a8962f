from __future__ import annotations

from pathlib import Path
from typing import List, Union

import pandas as pd

from batch.parallel import JobResult


RESULT_COLUMNS = ["difficulty", "file", "status", "exit_code", "output_lines", "error"]
TIMING_COLUMNS = ["size", "file", "avg_seconds", "min_seconds", "max_seconds"]


def batch_results_df(results: List[JobResult]) -> pd.DataFrame:
    """One row per instance file, in the order the batch runner emitted them."""

    rows = [
        {
            "difficulty": r.job.difficulty,
            "file": r.job.path.name,
            "status": r.status,
            "exit_code": r.returncode,
            "output_lines": len(r.lines),
            "error": r.error or "",
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def timing_summary_df(results: List[JobResult]) -> pd.DataFrame:
    """Parse `<size> <avg> <min> <max>` lines from a measure run.

    Failed jobs and lines that are not timing summaries are left out.
    """

    rows = []
    for r in results:
        if not r.ok:
            continue
        for line in r.lines:
            parts = line.split()
            if len(parts) != 4:
                continue
            try:
                size, avg, lo, hi = (float(p) for p in parts)
            except ValueError:
                continue
            rows.append(
                {
                    "size": size,
                    "file": r.job.path.name,
                    "avg_seconds": avg,
                    "min_seconds": lo,
                    "max_seconds": hi,
                }
            )

    out = pd.DataFrame(rows, columns=TIMING_COLUMNS)
    if out.empty:
        return out
    return out.sort_values(["size", "file"]).reset_index(drop=True)


def _md_row(values) -> str:
    cells = (str(v).replace("\n", " ").replace("|", "\\|") for v in values)
    return "| " + " | ".join(cells) + " |"


def df_to_markdown(df: pd.DataFrame) -> str:
    """Render a report frame as a Markdown pipe table (tabulate not required)."""
    lines = [_md_row(df.columns), _md_row(["---"] * len(df.columns))]
    lines.extend(_md_row(row) for row in df.itertuples(index=False, name=None))
    return "\n".join(lines) + "\n"


def write_batch_report(results: List[JobResult], path: Union[str, Path]) -> Path:
    """Write the batch report; the format follows the file suffix.

    - `.xlsx`: "Results" sheet plus a "Timing" sheet when timings are present
    - `.md`: Markdown tables
    - anything else: CSV of the results table
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    results_df = batch_results_df(results)
    timing_df = timing_summary_df(results)
    suffix = path.suffix.lower()

    if suffix == ".xlsx":
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            results_df.to_excel(writer, sheet_name="Results", index=False)
            if not timing_df.empty:
                timing_df.to_excel(writer, sheet_name="Timing", index=False)
    elif suffix == ".md":
        parts = ["## Results\n", df_to_markdown(results_df)]
        if not timing_df.empty:
            parts += ["\n## Timing\n", df_to_markdown(timing_df)]
        path.write_text("\n".join(parts), encoding="utf-8")
    else:
        results_df.to_csv(path, index=False)

    return path
