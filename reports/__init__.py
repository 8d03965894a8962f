"""Tabular exports of batch results (CSV / Markdown / Excel)."""

from .batch_export import batch_results_df, df_to_markdown, timing_summary_df, write_batch_report

__all__ = ["batch_results_df", "df_to_markdown", "timing_summary_df", "write_batch_report"]
