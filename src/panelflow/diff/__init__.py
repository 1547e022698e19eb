"""Version comparison for PanelFlow scripts."""

from __future__ import annotations

from .models import (
    ChangeStatus,
    DiffLine,
    DiffLineType,
    DiffResult,
    DiffStats,
    PageDiff,
    PanelDiff,
)
from .version_diff import (
    LOOKAHEAD,
    SIMILARITY_THRESHOLD,
    compare_pages,
    compare_panels,
    compute_line_diff,
    find_similar_line,
    generate_diff_summary,
    longest_common_subsequence,
    string_similarity,
)

__all__ = [
    "LOOKAHEAD",
    "SIMILARITY_THRESHOLD",
    "ChangeStatus",
    "DiffLine",
    "DiffLineType",
    "DiffResult",
    "DiffStats",
    "PageDiff",
    "PanelDiff",
    "compare_pages",
    "compare_panels",
    "compute_line_diff",
    "find_similar_line",
    "generate_diff_summary",
    "longest_common_subsequence",
    "string_similarity",
]
