"""Visual rhythm of an issue.

Each page is rated sparse, normal or dense by its panel count. Runs of
mostly silent pages are collected as silent sequences, and the mix of
densities gives the issue an overall tempo. Panels are counted as action
beats when their visual description uses an action word.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from panelflow.analysis.pacing import (
    InsightSeverity,
    InsightType,
    PacingInsight,
    Range,
    as_page,
    panel_word_count,
    round_half_up,
    safe_ratio,
)
from panelflow.config import get_logger
from panelflow.models import ActData, PageData, PageType

logger = get_logger(__name__)


class PageDensity(str, Enum):
    """How busy a page is."""

    SPARSE = "sparse"
    NORMAL = "normal"
    DENSE = "dense"


class Tempo(str, Enum):
    """Overall reading speed of an issue."""

    SLOW = "slow"
    MODERATE = "moderate"
    FAST = "fast"
    VARIABLE = "variable"


_TEMPO_LABELS = {
    Tempo.SLOW: "Slow & Deliberate",
    Tempo.MODERATE: "Moderate",
    Tempo.FAST: "Fast & Dense",
    Tempo.VARIABLE: "Variable (Good!)",
}


class RhythmThresholds(BaseModel):
    """Limits used to rate pages and the issue."""

    sparse_panels: int = 3
    dense_panels: int = 7
    silent_ratio: Range = Range(min=0.1, max=0.25)
    too_few_silent: float = 0.05
    too_many_silent: float = 0.4
    min_silent_run: int = 2
    max_breathing_run: int = 4
    quiet_page_words: int = 20
    mostly_silent_share: float = 0.5
    variety_share: float = 0.15
    majority_share: float = 0.5
    dense_run: int = 3
    splash_share: float = 0.2


RHYTHM_THRESHOLDS = RhythmThresholds()

# fmt: off
ACTION_KEYWORDS = (
    "punches", "kicks", "jumps", "runs", "falls", "crashes", "explodes",
    "fights", "attacks", "dodges", "swings", "shoots", "flies", "lands",
    "smashes", "throws", "catches", "leaps", "dives", "charges", "strikes",
    "impact", "collision", "action", "motion", "blur", "speed", "chase",
)
# fmt: on


class PageRhythm(BaseModel):
    """Rhythm figures for one page."""

    page_id: str | None = None
    page_number: int
    page_type: PageType = PageType.SINGLE
    panel_count: int = 0
    word_count: int = 0
    dialogue_panels: int = 0
    silent_panels: int = 0
    action_panels: int = 0
    density: PageDensity = PageDensity.NORMAL
    is_left_page: bool = False
    is_splash: bool = False
    is_spread: bool = False


class SilentSequence(BaseModel):
    """Consecutive mostly silent pages."""

    start_page: int
    end_page: int
    length: int
    pages: list[int] = Field(default_factory=list)

    @classmethod
    def from_pages(cls, pages: Sequence[int]) -> SilentSequence:
        return cls(
            start_page=pages[0],
            end_page=pages[-1],
            length=len(pages),
            pages=list(pages),
        )


class IssueRhythm(BaseModel):
    """Full result of :func:`analyze_rhythm`."""

    pages: list[PageRhythm] = Field(default_factory=list)
    tempo: Tempo = Tempo.MODERATE
    avg_panels_per_page: float = 0.0
    silent_ratio: float = 0.0
    dialogue_ratio: float = 0.0
    action_ratio: float = 0.0
    silent_sequences: list[SilentSequence] = Field(default_factory=list)
    insights: list[PacingInsight] = Field(default_factory=list)


def as_act(act: ActData | Mapping[str, Any]) -> ActData:
    """Validate a mapping as an act; models pass through."""
    return act if isinstance(act, ActData) else ActData.model_validate(act)


def iter_act_pages(acts: Iterable[ActData | Mapping[str, Any]]) -> Iterator[PageData]:
    """Every page of every scene, in tree order."""
    for act in acts:
        for scene in as_act(act).scenes:
            yield from scene.pages


def is_action_panel(visual_description: str | None) -> bool:
    """True when the description mentions an action word."""
    if not visual_description:
        return False
    lowered = visual_description.lower()
    return any(keyword in lowered for keyword in ACTION_KEYWORDS)


def _density(panel_count: int) -> PageDensity:
    if panel_count <= RHYTHM_THRESHOLDS.sparse_panels:
        return PageDensity.SPARSE
    if panel_count >= RHYTHM_THRESHOLDS.dense_panels:
        return PageDensity.DENSE
    return PageDensity.NORMAL


def calculate_page_rhythm(page: PageData | Mapping[str, Any]) -> PageRhythm:
    """Count panel kinds on a page and rate its density.

    Even pages are left-hand pages; page 1 sits on the right.
    """
    page = as_page(page)
    word_count = dialogue_panels = silent_panels = action_panels = 0
    for panel in page.panels:
        words = panel_word_count(panel)
        word_count += words
        if panel.dialogue:
            dialogue_panels += 1
        if words == 0:
            silent_panels += 1
        if is_action_panel(panel.visual_description):
            action_panels += 1

    return PageRhythm(
        page_id=page.id,
        page_number=page.page_number,
        page_type=page.page_type,
        panel_count=len(page.panels),
        word_count=word_count,
        dialogue_panels=dialogue_panels,
        silent_panels=silent_panels,
        action_panels=action_panels,
        density=_density(len(page.panels)),
        is_left_page=page.page_number % 2 == 0,
        is_splash=page.page_type is PageType.SPLASH,
        is_spread=page.page_type in {PageType.SPREAD_LEFT, PageType.SPREAD_RIGHT},
    )


def _is_mostly_silent(page: PageRhythm) -> bool:
    share = page.silent_panels / page.panel_count if page.panel_count else 0
    return (
        share >= RHYTHM_THRESHOLDS.mostly_silent_share
        or page.word_count < RHYTHM_THRESHOLDS.quiet_page_words
    )


def find_silent_sequences(pages: Iterable[PageRhythm]) -> list[SilentSequence]:
    """Runs of at least two consecutive mostly silent pages.

    A page is mostly silent when half its panels have no words or the page
    has fewer than 20 words in total.
    """
    sequences: list[SilentSequence] = []
    current: list[int] = []
    for page in pages:
        if _is_mostly_silent(page):
            current.append(page.page_number)
            continue
        if len(current) >= RHYTHM_THRESHOLDS.min_silent_run:
            sequences.append(SilentSequence.from_pages(current))
        current = []
    if len(current) >= RHYTHM_THRESHOLDS.min_silent_run:
        sequences.append(SilentSequence.from_pages(current))
    return sequences


def determine_tempo(pages: Sequence[PageRhythm]) -> Tempo:
    """Name the tempo from the share of sparse and dense pages."""
    if not pages:
        return Tempo.MODERATE

    total = len(pages)
    sparse = sum(1 for p in pages if p.density is PageDensity.SPARSE) / total
    dense = sum(1 for p in pages if p.density is PageDensity.DENSE) / total

    thresholds = RHYTHM_THRESHOLDS
    if sparse > thresholds.variety_share and dense > thresholds.variety_share:
        return Tempo.VARIABLE
    if dense > thresholds.majority_share:
        return Tempo.FAST
    if sparse > thresholds.majority_share:
        return Tempo.SLOW
    return Tempo.MODERATE


def _longest_dense_run(pages: Sequence[PageRhythm]) -> list[int]:
    """First longest run of consecutive page numbers among dense pages."""
    best: list[int] = []
    current: list[int] = []
    for page in pages:
        if page.density is not PageDensity.DENSE:
            continue
        if current and page.page_number == current[-1] + 1:
            current.append(page.page_number)
        else:
            current = [page.page_number]
        if len(current) > len(best):
            best = list(current)
    return best


def generate_rhythm_insights(
    pages: Sequence[PageRhythm],
    sequences: Sequence[SilentSequence],
    tempo: Tempo,
    silent_ratio: float,
) -> list[PacingInsight]:
    """Comment on tempo, silent runs, silent share, dense runs and splashes."""
    thresholds = RHYTHM_THRESHOLDS
    insights: list[PacingInsight] = []

    if tempo is Tempo.VARIABLE:
        insights.append(
            PacingInsight(
                type=InsightType.STRENGTH,
                severity=InsightSeverity.LOW,
                message="Good pacing variety: not monotonous",
            )
        )
    elif tempo in {Tempo.FAST, Tempo.SLOW}:
        density = PageDensity.DENSE if tempo is Tempo.FAST else PageDensity.SPARSE
        insights.append(
            PacingInsight(
                type=InsightType.SUGGESTION,
                severity=InsightSeverity.MEDIUM,
                pages=[p.page_number for p in pages if p.density is density],
                message=(
                    "Fast, dense pacing throughout"
                    if tempo is Tempo.FAST
                    else "Slow, sparse pacing throughout"
                ),
            )
        )

    if sequences:
        # ties go to the later sequence
        longest = max(reversed(sequences), key=lambda s: s.length)
        if longest.length <= thresholds.max_breathing_run:
            insights.append(
                PacingInsight(
                    type=InsightType.STRENGTH,
                    severity=InsightSeverity.LOW,
                    pages=longest.pages,
                    message=(
                        "Good visual breathing room "
                        f"(pages {longest.start_page}-{longest.end_page})"
                    ),
                )
            )
        else:
            insights.append(
                PacingInsight(
                    type=InsightType.SUGGESTION,
                    severity=InsightSeverity.MEDIUM,
                    pages=longest.pages,
                    message=f"Long silent sequence ({longest.length} pages)",
                )
            )
    elif len(pages) > 10:
        insights.append(
            PacingInsight(
                type=InsightType.SUGGESTION,
                severity=InsightSeverity.LOW,
                message="No significant silent sequences",
            )
        )

    if any(p.panel_count for p in pages):
        if thresholds.silent_ratio.contains(silent_ratio):
            percent = math.floor(silent_ratio * 100 + 0.5)
            insights.append(
                PacingInsight(
                    type=InsightType.STRENGTH,
                    severity=InsightSeverity.LOW,
                    message=f"Healthy silent panel ratio ({percent}%)",
                )
            )
        elif silent_ratio < thresholds.too_few_silent:
            insights.append(
                PacingInsight(
                    type=InsightType.SUGGESTION,
                    severity=InsightSeverity.MEDIUM,
                    message="Few silent panels: consider visual breathing room",
                )
            )
        elif silent_ratio > thresholds.too_many_silent:
            insights.append(
                PacingInsight(
                    type=InsightType.SUGGESTION,
                    severity=InsightSeverity.MEDIUM,
                    message="Many silent panels: ensure story clarity",
                )
            )

    dense_run = _longest_dense_run(pages)
    if len(dense_run) >= thresholds.dense_run:
        insights.append(
            PacingInsight(
                type=InsightType.WARNING,
                severity=InsightSeverity.MEDIUM,
                pages=dense_run,
                message=f"{len(dense_run)} consecutive dense pages",
            )
        )

    big_pages = sum(1 for p in pages if p.is_splash or p.is_spread)
    if big_pages and big_pages / len(pages) > thresholds.splash_share:
        insights.append(
            PacingInsight(
                type=InsightType.SUGGESTION,
                severity=InsightSeverity.LOW,
                message=f"High splash/spread usage ({big_pages} pages)",
            )
        )

    return insights


def analyze_rhythm(pages: Iterable[PageData | Mapping[str, Any]]) -> IssueRhythm:
    """Analyze the visual rhythm of an issue's pages.

    Args:
        pages: Page snapshots or mappings, in any order

    Returns:
        Per-page rhythm, ratios, silent sequences, tempo and insights
    """
    ordered = sorted((as_page(page) for page in pages), key=lambda p: p.page_number)
    rhythms = [calculate_page_rhythm(page) for page in ordered]

    total_panels = sum(r.panel_count for r in rhythms)
    silent_ratio = safe_ratio(sum(r.silent_panels for r in rhythms), total_panels, 3)
    sequences = find_silent_sequences(rhythms)
    tempo = determine_tempo(rhythms)

    result = IssueRhythm(
        pages=rhythms,
        tempo=tempo,
        avg_panels_per_page=(
            round_half_up(total_panels / len(rhythms), 1) if rhythms else 0.0
        ),
        silent_ratio=silent_ratio,
        dialogue_ratio=safe_ratio(
            sum(r.dialogue_panels for r in rhythms), total_panels, 3
        ),
        action_ratio=safe_ratio(sum(r.action_panels for r in rhythms), total_panels, 3),
        silent_sequences=sequences,
        insights=generate_rhythm_insights(rhythms, sequences, tempo, silent_ratio),
    )
    logger.debug(
        "Analyzed rhythm",
        pages=len(rhythms),
        tempo=tempo.value,
        silent_sequences=len(sequences),
    )
    return result


def analyze_issue_rhythm(acts: Iterable[ActData | Mapping[str, Any]]) -> IssueRhythm:
    """Analyze the pages of an act > scene > page tree."""
    return analyze_rhythm(list(iter_act_pages(acts)))


def get_tempo_label(tempo: Tempo) -> str:
    """Display label for a tempo."""
    return _TEMPO_LABELS[Tempo(tempo)]
