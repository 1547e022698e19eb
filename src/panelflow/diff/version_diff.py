"""Line and structural diffs between two versions of a script.

The line diff anchors on the longest common subsequence of the two line
lists and then classifies the lines between anchors as removed, added or
modified. A removed line is upgraded to ``modified`` when one of the next
few unconsumed new lines is similar enough to it (Dice coefficient over
character bigrams).

Page and panel comparison is positional: page ``i`` of the old version is
compared with page ``i`` of the new version. Inserting a page early in the
issue therefore shows every later page as modified.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from panelflow.config import get_logger, get_settings
from panelflow.diff.models import (
    ChangeStatus,
    DiffLine,
    DiffLineType,
    DiffResult,
    DiffStats,
    PageDiff,
    PanelDiff,
)

logger = get_logger(__name__)

# Changing either constant changes observable diff output.
SIMILARITY_THRESHOLD = 0.6
LOOKAHEAD = 3


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _split_lines(text: str | None) -> list[str]:
    return text.split("\n") if text else []


def _bigrams(text: str) -> list[str]:
    return [text[i : i + 2] for i in range(len(text) - 1)]


def string_similarity(first: str, second: str) -> float:
    """Dice coefficient over character bigrams.

    Identical strings score 1.0. Strings shorter than two characters have
    no bigrams and score 0.0 against anything they are not equal to.

    Args:
        first: First string
        second: Second string

    Returns:
        Similarity in the range 0.0 to 1.0
    """
    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    first_bigrams = set(_bigrams(first))
    intersection = sum(1 for bigram in _bigrams(second) if bigram in first_bigrams)
    return (2.0 * intersection) / (len(first) + len(second) - 2)


def find_similar_line(target: str, candidates: Sequence[str]) -> int:
    """Index of the first candidate similar to ``target``, or -1.

    Comparison is case-insensitive and ignores surrounding whitespace.
    Blank targets and blank candidates never match.
    """
    normalized = target.strip().lower()
    if not normalized:
        return -1

    for index, candidate in enumerate(candidates):
        other = candidate.strip().lower()
        if not other:
            continue
        if string_similarity(normalized, other) > SIMILARITY_THRESHOLD:
            return index
    return -1


def longest_common_subsequence(
    old_lines: Sequence[str], new_lines: Sequence[str]
) -> list[tuple[int, int]]:
    """Index pairs of a longest common subsequence of two line lists.

    Uses the full dynamic programming table, so time and memory are
    O(len(old_lines) * len(new_lines)).

    Returns:
        ``(old_index, new_index)`` pairs in ascending order
    """
    m, n = len(old_lines), len(new_lines)
    table = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        row, previous = table[i], table[i - 1]
        old_line = old_lines[i - 1]
        for j in range(1, n + 1):
            if old_line == new_lines[j - 1]:
                row[j] = previous[j - 1] + 1
            else:
                row[j] = max(previous[j], row[j - 1])

    pairs: list[tuple[int, int]] = []
    i, j = m, n
    while i > 0 and j > 0:
        if old_lines[i - 1] == new_lines[j - 1]:
            pairs.append((i - 1, j - 1))
            i -= 1
            j -= 1
        elif table[i - 1][j] > table[i][j - 1]:
            i -= 1
        else:
            j -= 1

    pairs.reverse()
    return pairs


def _diff_gap(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    old_start: int,
    new_start: int,
) -> list[DiffLine]:
    """Classify the lines between two anchors.

    ``old_lines`` and ``new_lines`` are the gap contents; the start offsets
    turn gap positions into 1-based line numbers.
    """
    rows: list[DiffLine] = []

    def added(position: int) -> DiffLine:
        number = new_start + position + 1
        return DiffLine(
            type=DiffLineType.ADDED,
            line_number=number,
            new_line_number=number,
            content=new_lines[position],
        )

    def modified(old_position: int, new_position: int) -> DiffLine:
        number = new_start + new_position + 1
        return DiffLine(
            type=DiffLineType.MODIFIED,
            line_number=number,
            old_line_number=old_start + old_position + 1,
            new_line_number=number,
            content=new_lines[new_position],
            old_content=old_lines[old_position],
        )

    # A single line replaced between two anchors is an in-place edit, even
    # when it shares no bigrams with its replacement.
    if (
        len(old_lines) == 1
        and len(new_lines) == 1
        and old_lines[0].strip()
        and new_lines[0].strip()
    ):
        return [modified(0, 0)]

    cursor = 0
    for old_position, old_line in enumerate(old_lines):
        window = new_lines[cursor : cursor + LOOKAHEAD]
        offset = find_similar_line(old_line, window)
        if offset < 0:
            number = old_start + old_position + 1
            rows.append(
                DiffLine(
                    type=DiffLineType.REMOVED,
                    line_number=number,
                    old_line_number=number,
                    content=old_line,
                )
            )
            continue

        match = cursor + offset
        rows.extend(added(position) for position in range(cursor, match))
        rows.append(modified(old_position, match))
        cursor = match + 1

    rows.extend(added(position) for position in range(cursor, len(new_lines)))
    return rows


def _tally(lines: Iterable[DiffLine]) -> DiffStats:
    stats = DiffStats()
    for line in lines:
        field_name = line.type.value
        setattr(stats, field_name, getattr(stats, field_name) + 1)
    return stats


def compute_line_diff(
    old_text: str | None,
    new_text: str | None,
    max_cells: int | None = None,
) -> DiffResult:
    """Diff two texts line by line.

    Lines kept by the longest common subsequence are unchanged. Between two
    kept lines, a lone old line replaced by a lone new line is always
    modified, whatever their similarity; the 0.6 bigram threshold only
    pairs lines in larger gaps, looking up to three new lines ahead.

    Args:
        old_text: Previous version
        new_text: Current version
        max_cells: LCS table size above which a warning is logged.
            Defaults to the ``diff_max_cells`` setting.

    Returns:
        Classified lines, per-type counts and a 0-100 similarity score
    """
    old_lines = _split_lines(old_text)
    new_lines = _split_lines(new_text)

    cells = len(old_lines) * len(new_lines)
    limit = max_cells if max_cells is not None else get_settings().diff_max_cells
    if cells > limit:
        logger.warning(
            "Large line diff",
            old_lines=len(old_lines),
            new_lines=len(new_lines),
            cells=cells,
            limit=limit,
        )

    anchors = longest_common_subsequence(old_lines, new_lines)
    # sentinel anchor flushes the trailing gap
    anchors.append((len(old_lines), len(new_lines)))

    lines: list[DiffLine] = []
    old_index = new_index = 0
    for old_anchor, new_anchor in anchors:
        lines.extend(
            _diff_gap(
                old_lines[old_index:old_anchor],
                new_lines[new_index:new_anchor],
                old_index,
                new_index,
            )
        )
        if old_anchor < len(old_lines):
            lines.append(
                DiffLine(
                    type=DiffLineType.UNCHANGED,
                    line_number=new_anchor + 1,
                    old_line_number=old_anchor + 1,
                    new_line_number=new_anchor + 1,
                    content=new_lines[new_anchor],
                )
            )
        old_index, new_index = old_anchor + 1, new_anchor + 1

    stats = _tally(lines)
    total = stats.total
    similarity = _round_half_up(stats.unchanged / total * 100) if total else 100

    return DiffResult(lines=lines, stats=stats, similarity=similarity)


def _field(item: Any, *names: str, default: Any = None) -> Any:
    """Read the first non-null attribute or key of a page or panel."""
    for name in names:
        if isinstance(item, Mapping):
            value = item.get(name)
        else:
            value = getattr(item, name, None)
        if value is not None:
            return value
    return default


def _panels(page: Any) -> list[Any]:
    return list(_field(page, "panels", default=None) or [])


def _page_number(page: Any, index: int) -> int:
    return _field(page, "page_number", "pageNumber", default=index + 1)


def _visual(panel: Any) -> str:
    return _field(panel, "visual_description", "visualDescription", default=None) or ""


def compare_panels(
    old_panels: Sequence[Any], new_panels: Sequence[Any]
) -> list[PanelDiff]:
    """Compare panels position by position.

    A panel present in both versions is modified when its visual
    description changed; only the visual description is compared.
    """
    diffs: list[PanelDiff] = []
    for index in range(max(len(old_panels), len(new_panels))):
        number = index + 1
        if index >= len(old_panels):
            diffs.append(PanelDiff(panel_number=number, status=ChangeStatus.NEW))
            continue
        if index >= len(new_panels):
            diffs.append(PanelDiff(panel_number=number, status=ChangeStatus.REMOVED))
            continue

        old_visual = _visual(old_panels[index])
        new_visual = _visual(new_panels[index])
        if old_visual == new_visual:
            diffs.append(PanelDiff(panel_number=number, status=ChangeStatus.UNCHANGED))
        else:
            diffs.append(
                PanelDiff(
                    panel_number=number,
                    status=ChangeStatus.MODIFIED,
                    visual_diff=compute_line_diff(old_visual, new_visual),
                )
            )
    return diffs


def compare_pages(
    old_pages: Sequence[Any], new_pages: Sequence[Any]
) -> list[PageDiff]:
    """Compare two versions of an issue page by page.

    Pages may be mappings or objects exposing ``page_number`` (or
    ``pageNumber``) and ``panels``. Pages are paired by position, not by
    page number or identity.

    Args:
        old_pages: Pages of the previous version
        new_pages: Pages of the current version

    Returns:
        One entry per position in the longer of the two lists
    """
    diffs: list[PageDiff] = []
    for index in range(max(len(old_pages), len(new_pages))):
        old_page = old_pages[index] if index < len(old_pages) else None
        new_page = new_pages[index] if index < len(new_pages) else None

        if old_page is None:
            panels = _panels(new_page)
            diffs.append(
                PageDiff(
                    page_number=_page_number(new_page, index),
                    old_panel_count=0,
                    new_panel_count=len(panels),
                    status=ChangeStatus.NEW,
                    panels=[
                        PanelDiff(panel_number=i + 1, status=ChangeStatus.NEW)
                        for i in range(len(panels))
                    ],
                )
            )
            continue

        if new_page is None:
            panels = _panels(old_page)
            diffs.append(
                PageDiff(
                    page_number=_page_number(old_page, index),
                    old_panel_count=len(panels),
                    new_panel_count=0,
                    status=ChangeStatus.REMOVED,
                    panels=[
                        PanelDiff(panel_number=i + 1, status=ChangeStatus.REMOVED)
                        for i in range(len(panels))
                    ],
                )
            )
            continue

        old_panels = _panels(old_page)
        new_panels = _panels(new_page)
        panel_diffs = compare_panels(old_panels, new_panels)
        changed = len(old_panels) != len(new_panels) or any(
            diff.status is not ChangeStatus.UNCHANGED for diff in panel_diffs
        )
        diffs.append(
            PageDiff(
                page_number=_page_number(new_page, index),
                old_panel_count=len(old_panels),
                new_panel_count=len(new_panels),
                status=ChangeStatus.MODIFIED if changed else ChangeStatus.UNCHANGED,
                panels=panel_diffs,
            )
        )

    logger.debug(
        "Compared pages",
        old_pages=len(old_pages),
        new_pages=len(new_pages),
        changed=sum(1 for diff in diffs if diff.status is not ChangeStatus.UNCHANGED),
    )
    return diffs


def generate_diff_summary(page_diffs: Iterable[PageDiff]) -> str:
    """One-line summary such as ``"1 new page, 2 modified, 3 unchanged"``."""
    counts = dict.fromkeys(ChangeStatus, 0)
    for diff in page_diffs:
        counts[diff.status] += 1

    parts: list[str] = []
    if counts[ChangeStatus.NEW]:
        new = counts[ChangeStatus.NEW]
        parts.append(f"{new} new page{'s' if new > 1 else ''}")
    if counts[ChangeStatus.MODIFIED]:
        parts.append(f"{counts[ChangeStatus.MODIFIED]} modified")
    if counts[ChangeStatus.REMOVED]:
        parts.append(f"{counts[ChangeStatus.REMOVED]} removed")
    if counts[ChangeStatus.UNCHANGED]:
        parts.append(f"{counts[ChangeStatus.UNCHANGED]} unchanged")

    return ", ".join(parts) if parts else "No changes"
