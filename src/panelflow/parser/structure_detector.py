"""Act, scene and page marker detection for free-form comic scripts.

Detection is a single fold over the script's lines. Each line is fed to
:func:`scan_line` together with the current :class:`ScanState` and returns
a new state; nothing is mutated in place, so the parse can be replayed and
inspected one line at a time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from functools import reduce
from re import Pattern

from panelflow.config import get_logger
from panelflow.parser.numbering import (
    PAGE_WORDS_ONE_TO_TWENTY,
    marker_number,
    word_to_number,
)
from panelflow.parser.structure_models import (
    AUTO_GENERATED_MARKER,
    IMPLICIT_MARKER,
    ActBreak,
    DetectedAct,
    DetectedScene,
    StructureAnalysis,
    StructureKind,
)

logger = get_logger(__name__)

_ACT_NUMBER = r"(?P<number>ONE|TWO|THREE|FOUR|FIVE|I|II|III|IV|V|\d+)"
_TIMES_OF_DAY = r"DAY|NIGHT|MORNING|EVENING|LATER|CONTINUOUS|MOMENTS LATER"

# Tried in order, first match wins.
ACT_PATTERNS: list[tuple[str, Pattern[str]]] = [
    (
        "plain",
        re.compile(rf"^\s*ACT\s+{_ACT_NUMBER}\s*[:.]?\s*$", re.IGNORECASE),
    ),
    (
        "dashed",
        re.compile(
            rf"^\s*[-=]{{2,}}\s*ACT\s+{_ACT_NUMBER}\s*[-=]{{2,}}\s*$", re.IGNORECASE
        ),
    ),
    (
        "heading",
        re.compile(rf"^\s*#{{1,3}}\s*ACT\s+{_ACT_NUMBER}\s*$", re.IGNORECASE),
    ),
    (
        "bracketed",
        re.compile(rf"^\s*\[\s*ACT\s+{_ACT_NUMBER}\s*\]\s*$", re.IGNORECASE),
    ),
    (
        "titled",
        re.compile(
            rf"^\s*ACT\s+{_ACT_NUMBER}\s*[-:.]\s*(?P<title>.+)$", re.IGNORECASE
        ),
    ),
]

SCENE_PATTERNS: list[tuple[str, Pattern[str]]] = [
    (
        "numbered",
        re.compile(
            r"^\s*SCENE\s+(?P<number>\d+)\b\s*[:.]?\s*(?P<title>.*)$", re.IGNORECASE
        ),
    ),
    (
        "explicit",
        re.compile(r"^\s*SCENE\b\s*[:.]?\s*(?P<title>.+)$", re.IGNORECASE),
    ),
    (
        "screenplay",
        re.compile(
            r"^\s*(?P<prefix>INT\.|EXT\.|INT/EXT\.)\s+(?P<location>[^-\n]+)"
            r"(?:\s*-\s*(?P<time>.+))?$",
            re.IGNORECASE,
        ),
    ),
    (
        # Bare location headers are only recognized in capitals.
        "location",
        re.compile(
            rf"^\s*(?P<location>[A-Z][A-Z\s]+?)\s*-\s*(?P<time>{_TIMES_OF_DAY})\s*$"
        ),
    ),
    (
        "bracketed",
        re.compile(
            r"^\s*\[\s*SCENE\b\s*[:.]?\s*(?P<title>[^\]]+)\]\s*$", re.IGNORECASE
        ),
    ),
    (
        "dashed",
        re.compile(
            r"^\s*[-=]{3,}\s*(?:SCENE\b\s*[:.]?\s*)?(?P<title>[^-=\s].*?)\s*[-=]{3,}\s*$",
            re.IGNORECASE,
        ),
    ),
]

PAGE_PATTERN = re.compile(
    r"^\s*(?:[-=]{2,}\s*|#{1,3}\s*|\[\s*)?(?:PAGE|Pg\.?|P)\s*:?\s*"
    rf"(?P<number>\d+|{PAGE_WORDS_ONE_TO_TWENTY})\b",
    re.IGNORECASE,
)

_LOCATION_TIME = re.compile(
    r"^(?P<location>.+)\s*-\s*(?P<time>DAY|NIGHT|MORNING|EVENING|LATER|CONTINUOUS)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ScanState:
    """Cursor state threaded through the line fold."""

    acts: tuple[DetectedAct, ...] = ()
    current_act: DetectedAct | None = None
    current_scene: DetectedScene | None = None
    current_page: int | None = None
    pages_seen: tuple[int, ...] = ()
    total_pages: int = 0


def match_page_marker(line: str) -> int | None:
    """Return the page number of a page marker line, if it is one."""
    match = PAGE_PATTERN.match(line)
    if not match:
        return None
    return word_to_number(match.group("number")) or None


def match_act_marker(line: str) -> DetectedAct | None:
    """Build an act from an act heading line (start line is filled later)."""
    for _name, pattern in ACT_PATTERNS:
        match = pattern.match(line)
        if match:
            number = marker_number(match.group("number"))
            title = (match.groupdict().get("title") or "").strip()
            return DetectedAct(
                name=title or f"Act {number}",
                start_line=0,
                raw_marker=line.strip(),
            )
    return None


def match_scene_marker(line: str) -> DetectedScene | None:
    """Build a scene from a scene heading line (start line is filled later).

    Screenplay sluglines and bare ``LOCATION - TIME`` headers yield location
    and time of day. Other headings are titled by their text, which is then
    checked for a trailing ``- DAY``/``- NIGHT`` style suffix.
    """
    for _name, pattern in SCENE_PATTERNS:
        match = pattern.match(line)
        if not match:
            continue

        groups = match.groupdict()
        location = (groups.get("location") or "").strip() or None
        time_of_day = (groups.get("time") or "").strip() or None
        prefix = groups.get("prefix")

        if prefix:
            title = f"{prefix.upper()} {location}"
            if time_of_day:
                title += f" - {time_of_day}"
        elif location and time_of_day:
            title = f"{location} - {time_of_day}"
        else:
            title = (groups.get("title") or "").strip()
            if not title and groups.get("number"):
                title = f"Scene {int(groups['number'])}"
            location_time = _LOCATION_TIME.match(title)
            if location_time:
                location = location_time.group("location").strip()
                time_of_day = location_time.group("time").strip()

        return DetectedScene(
            title=title,
            start_line=0,
            raw_marker=line.strip(),
            location=location,
            time_of_day=time_of_day,
        )
    return None


def _close_scene(state: ScanState, end_line: int) -> ScanState:
    if state.current_scene is None:
        return state
    scene = replace(state.current_scene, end_line=end_line)
    act = state.current_act
    if act is not None:
        act = replace(act, scenes=[*act.scenes, scene])
    return replace(state, current_act=act, current_scene=None)


def _close_act(state: ScanState, end_line: int) -> ScanState:
    state = _close_scene(state, end_line)
    if state.current_act is None:
        return state
    act = replace(state.current_act, end_line=end_line)
    return replace(state, acts=(*state.acts, act), current_act=None)


def _add_page(state: ScanState, page: int) -> ScanState:
    scene = state.current_scene
    if scene is not None and page not in scene.pages:
        scene = replace(scene, pages=[*scene.pages, page])
    act = state.current_act
    if act is not None and page not in act.pages:
        act = replace(act, pages=[*act.pages, page])
    pages_seen = state.pages_seen
    if page not in pages_seen:
        pages_seen = (*pages_seen, page)
    return replace(
        state,
        current_act=act,
        current_scene=scene,
        current_page=page,
        pages_seen=pages_seen,
        total_pages=max(state.total_pages, page),
    )


def scan_line(state: ScanState, index: int, line: str) -> ScanState:
    """Advance the scan by one line.

    Args:
        state: State after the previous line
        index: Zero-based index of ``line`` in the script
        line: Raw line text

    Returns:
        State after consuming the line
    """
    trimmed = line.strip()
    if not trimmed:
        return state

    page = match_page_marker(trimmed)
    if page is not None:
        return _add_page(state, page)

    act = match_act_marker(trimmed)
    if act is not None:
        state = _close_act(state, index - 1)
        return replace(state, current_act=replace(act, start_line=index))

    scene = match_scene_marker(trimmed)
    if scene is not None:
        state = _close_scene(state, index - 1)
        current_act = state.current_act or DetectedAct(
            name="Act 1", start_line=0, raw_marker=IMPLICIT_MARKER
        )
        scene = replace(
            scene,
            title=scene.title or f"Scene {len(current_act.scenes) + 1}",
            start_line=index,
            pages=[state.current_page] if state.current_page else [],
        )
        return replace(state, current_act=current_act, current_scene=scene)

    return state


def classify_structure(has_act_markers: bool, has_scene_markers: bool) -> StructureKind:
    """Map the presence of act and scene markers to a structure kind."""
    if has_act_markers and has_scene_markers:
        return StructureKind.ACTS_AND_SCENES
    if has_act_markers:
        return StructureKind.ACTS_ONLY
    if has_scene_markers:
        return StructureKind.SCENES_ONLY
    return StructureKind.FLAT


def detect_structure(script_text: str) -> StructureAnalysis:
    """Detect acts, scenes and page markers in a script.

    Scripts with no act or scene markers come back as a single implicit
    act holding one scene with every detected page in reading order.

    Args:
        script_text: Raw multi-line script text

    Returns:
        Detected structure and its suggested classification
    """
    lines = (script_text or "").split("\n")
    last_line = len(lines) - 1

    state = reduce(
        lambda acc, item: scan_line(acc, item[0], item[1]),
        enumerate(lines),
        ScanState(),
    )
    state = _close_act(state, last_line)
    acts = list(state.acts)

    has_act_markers = any(not act.is_implicit for act in acts)
    has_scene_markers = any(act.scenes for act in acts)
    suggested = classify_structure(has_act_markers, has_scene_markers)

    if suggested is StructureKind.FLAT:
        acts = [
            DetectedAct(
                name="Act 1",
                start_line=0,
                end_line=last_line,
                raw_marker=IMPLICIT_MARKER,
                pages=list(state.pages_seen),
                scenes=[
                    DetectedScene(
                        title="Main",
                        start_line=0,
                        end_line=last_line,
                        raw_marker=IMPLICIT_MARKER,
                        pages=list(state.pages_seen),
                    )
                ],
            )
        ]

    logger.debug(
        "Detected script structure",
        acts=len(acts),
        scenes=sum(len(act.scenes) for act in acts),
        total_pages=state.total_pages,
        structure=suggested.value,
    )

    return StructureAnalysis(
        acts=acts,
        has_act_markers=has_act_markers,
        has_scene_markers=has_scene_markers,
        total_pages=state.total_pages,
        suggested_structure=suggested,
    )


def create_flat_structure(page_count: int) -> StructureAnalysis:
    """Create a default one-act, one-scene structure over pages 1..n."""
    pages = list(range(1, max(page_count, 0) + 1))
    return StructureAnalysis(
        acts=[
            DetectedAct(
                name="Act 1",
                start_line=0,
                raw_marker=AUTO_GENERATED_MARKER,
                pages=list(pages),
                scenes=[
                    DetectedScene(
                        title="Main",
                        start_line=0,
                        raw_marker=AUTO_GENERATED_MARKER,
                        pages=pages,
                    )
                ],
            )
        ],
        has_act_markers=False,
        has_scene_markers=False,
        total_pages=max(page_count, 0),
        suggested_structure=StructureKind.FLAT,
    )


def suggest_act_breaks(page_count: int) -> list[ActBreak]:
    """Propose act page ranges for an issue with no explicit acts.

    Up to 8 pages is one act, up to 16 is two acts split at the midpoint,
    anything longer gets three acts cut at roughly 25% and 75%.
    """
    if page_count <= 0:
        return []
    if page_count <= 8:
        return [ActBreak(act=1, start_page=1, end_page=page_count)]
    if page_count <= 16:
        midpoint = -(-page_count // 2)
        return [
            ActBreak(act=1, start_page=1, end_page=midpoint),
            ActBreak(act=2, start_page=midpoint + 1, end_page=page_count),
        ]

    act1_end = -(-page_count // 4)
    act2_end = -(-page_count * 3 // 4)
    return [
        ActBreak(act=1, start_page=1, end_page=act1_end),
        ActBreak(act=2, start_page=act1_end + 1, end_page=act2_end),
        ActBreak(act=3, start_page=act2_end + 1, end_page=page_count),
    ]


def get_structure_label(kind: StructureKind | str) -> str:
    """Short label for a structure kind."""
    labels = {
        StructureKind.ACTS_AND_SCENES: "Full Structure (Acts & Scenes)",
        StructureKind.ACTS_ONLY: "Act Structure Only",
        StructureKind.SCENES_ONLY: "Scene Structure Only",
        StructureKind.FLAT: "No Structure Detected",
    }
    return labels[StructureKind(kind)]


def get_structure_description(analysis: StructureAnalysis) -> str:
    """One-line summary of what an import would create."""
    if analysis.suggested_structure is StructureKind.FLAT:
        return "No act or scene markers detected. Will import as single scene."

    act_count = len(analysis.acts)
    scene_count = analysis.scene_count
    parts = []
    if act_count:
        parts.append(f"{act_count} act{'s' if act_count != 1 else ''}")
    if scene_count:
        parts.append(f"{scene_count} scene{'s' if scene_count != 1 else ''}")
    parts.append(f"{analysis.total_pages} pages")
    return f"Detected: {', '.join(parts)}"
