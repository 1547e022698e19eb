"""Result models for line and structural diffs."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class DiffLineType(str, Enum):
    """Classification of one line in a line diff."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class ChangeStatus(str, Enum):
    """Status of a page or panel between two versions."""

    NEW = "new"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"
    REMOVED = "removed"


class DiffLine(BaseModel):
    """One row of a line diff.

    ``line_number`` is the old line number for removed lines and the new
    line number otherwise. Modified lines carry both texts.
    """

    type: DiffLineType
    line_number: int
    old_line_number: int | None = None
    new_line_number: int | None = None
    content: str
    old_content: str | None = None


class DiffStats(BaseModel):
    """Line counts per classification."""

    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0

    @property
    def total(self) -> int:
        """Number of diff rows."""
        return self.added + self.removed + self.modified + self.unchanged


class DiffResult(BaseModel):
    """Complete line diff between two texts."""

    lines: list[DiffLine] = Field(default_factory=list)
    stats: DiffStats = Field(default_factory=DiffStats)
    similarity: int = Field(
        default=100, ge=0, le=100, description="Unchanged lines as a percentage"
    )


class PanelDiff(BaseModel):
    """Comparison of the panel at one position in a page."""

    panel_number: int
    status: ChangeStatus
    visual_diff: DiffResult | None = None


class PageDiff(BaseModel):
    """Comparison of the page at one position in an issue."""

    page_number: int
    old_panel_count: int
    new_panel_count: int
    status: ChangeStatus
    panels: list[PanelDiff] = Field(default_factory=list)
