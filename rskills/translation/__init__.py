"""Translation QA - structural comparison of markdown trees."""

from rskills.translation.compare import (
    ComparisonReport,
    FileComparison,
    TextStats,
    compare_trees,
    count_stats,
    count_stats_text,
    render_markdown,
    write_report,
)

__all__ = [
    "ComparisonReport",
    "FileComparison",
    "TextStats",
    "compare_trees",
    "count_stats",
    "count_stats_text",
    "render_markdown",
    "write_report",
]
