"""Data models for detected script structure."""

from dataclasses import dataclass, field
from enum import Enum


class StructureKind(str, Enum):
    """How much explicit structure a script carries."""

    FLAT = "flat"
    ACTS_ONLY = "acts-only"
    SCENES_ONLY = "scenes-only"
    ACTS_AND_SCENES = "acts-and-scenes"


IMPLICIT_MARKER = "(implicit)"
AUTO_GENERATED_MARKER = "(auto-generated)"


@dataclass
class DetectedScene:
    """A scene found while scanning script text."""

    title: str
    start_line: int
    raw_marker: str
    pages: list[int] = field(default_factory=list)
    end_line: int | None = None
    location: str | None = None
    time_of_day: str | None = None


@dataclass
class DetectedAct:
    """An act found while scanning script text.

    ``pages`` lists every page marker seen while the act was open, which
    lets acts without scene markers still be mapped onto pages.
    """

    name: str
    start_line: int
    raw_marker: str
    scenes: list[DetectedScene] = field(default_factory=list)
    pages: list[int] = field(default_factory=list)
    end_line: int | None = None

    @property
    def is_implicit(self) -> bool:
        """Whether the act was synthesized rather than written by the author."""
        return self.raw_marker in {IMPLICIT_MARKER, AUTO_GENERATED_MARKER}


@dataclass
class StructureAnalysis:
    """Result of one structure detection pass."""

    acts: list[DetectedAct]
    has_act_markers: bool
    has_scene_markers: bool
    total_pages: int
    suggested_structure: StructureKind

    @property
    def scene_count(self) -> int:
        """Total scenes across all acts."""
        return sum(len(act.scenes) for act in self.acts)


@dataclass
class ActBreak:
    """A proposed page range for one act."""

    act: int
    start_page: int
    end_page: int
