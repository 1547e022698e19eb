"""Pacing analysis for comic issues.

Computes per-page word and panel density, rolls it up into issue-wide
metrics, turns the numbers into insights and condenses everything into a
0-100 score. The analysis is purely rule based; thresholds follow common
comic scripting guidance.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from panelflow.config import get_logger
from panelflow.formatting.markdown import count_words
from panelflow.models import PageData, PanelData

logger = get_logger(__name__)


class Range(BaseModel):
    """Inclusive ideal range."""

    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


class PacingThresholds(BaseModel):
    """Density thresholds used by the analyzer."""

    words_per_page: Range = Range(min=30, max=100)
    words_per_page_warning: int = 150
    panels_per_page: Range = Range(min=4, max=6)
    panels_cramped: int = 8
    panels_sparse: int = 3
    dialogue_ratio: Range = Range(min=0.4, max=0.6)
    talking_heads: float = 0.8
    silent_ratio: Range = Range(min=0.1, max=0.2)
    no_breathing: float = 0.05
    words_per_panel: Range = Range(min=10, max=25)
    wall_of_text: int = 40


PACING_THRESHOLDS = PacingThresholds()

# Per-page dialogue share that makes a page part of a talking-heads run.
DIALOGUE_HEAVY_PAGE_RATIO = 0.7


class InsightType(str, Enum):
    """Kind of pacing insight."""

    WARNING = "warning"
    SUGGESTION = "suggestion"
    STRENGTH = "strength"


class InsightSeverity(str, Enum):
    """How much an insight matters."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PagePacingMetric(BaseModel):
    """Density figures for one page."""

    page_id: str | None = None
    page_number: int
    word_count: int = 0
    panel_count: int = 0
    dialogue_panels: int = 0
    silent_panels: int = 0
    words_per_panel: float = 0.0
    is_odd_page: bool = False
    warnings: list[str] = Field(default_factory=list)


class OverallMetrics(BaseModel):
    """Issue-wide totals, averages and ratios."""

    total_pages: int = 0
    total_panels: int = 0
    total_words: int = 0
    total_dialogue_panels: int = 0
    total_silent_panels: int = 0
    avg_words_per_page: float = 0.0
    avg_panels_per_page: float = 0.0
    avg_words_per_panel: float = 0.0
    dialogue_panel_ratio: float = 0.0
    silent_panel_ratio: float = 0.0


class PacingInsight(BaseModel):
    """A single observation about the issue's pacing."""

    type: InsightType
    severity: InsightSeverity
    pages: list[int] = Field(default_factory=list)
    message: str
    suggestion: str | None = None


class PacingAnalysis(BaseModel):
    """Full result of :func:`analyze_pacing`."""

    pages: list[PagePacingMetric] = Field(default_factory=list)
    overall: OverallMetrics = Field(default_factory=OverallMetrics)
    insights: list[PacingInsight] = Field(default_factory=list)
    score: int = Field(default=75, ge=0, le=100)


def round_half_up(value: float, digits: int) -> float:
    """Round like a calculator: halves go up."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def safe_ratio(part: int, whole: int, digits: int) -> float:
    return round_half_up(part / whole, digits) if whole else 0.0


def as_page(page: PageData | Mapping[str, Any]) -> PageData:
    """Validate a mapping as a page; models pass through."""
    return page if isinstance(page, PageData) else PageData.model_validate(page)


def panel_word_count(panel: PanelData) -> int:
    """Words in dialogue and captions; sound effects are not counted."""
    dialogue = sum(count_words(line.text) for line in panel.dialogue)
    captions = sum(count_words(caption.text) for caption in panel.captions)
    return dialogue + captions


def calculate_page_metrics(page: PageData | Mapping[str, Any]) -> PagePacingMetric:
    """Compute density figures for one page.

    Words come from dialogue and captions with emphasis markers ignored.
    A panel without any words counts as silent.

    Args:
        page: Page snapshot or a mapping that validates as one

    Returns:
        Metrics for the page, including human readable warnings
    """
    page = as_page(page)
    thresholds = PACING_THRESHOLDS

    word_count = 0
    dialogue_panels = 0
    silent_panels = 0
    for panel in page.panels:
        words = panel_word_count(panel)
        word_count += words
        if panel.dialogue:
            dialogue_panels += 1
        if words == 0:
            silent_panels += 1

    panel_count = len(page.panels)
    words_per_panel = word_count / panel_count if panel_count else 0.0

    warnings: list[str] = []
    if panel_count == 0:
        warnings.append("Empty page: no panels to read")
    if word_count > thresholds.words_per_page_warning:
        warnings.append("High word count: page may read slowly")
    if panel_count > thresholds.panels_cramped:
        warnings.append("Many panels: page may feel cramped")
    if 0 < panel_count < thresholds.panels_sparse:
        warnings.append("Few panels: ensure the moment warrants the space")
    if words_per_panel > thresholds.wall_of_text:
        warnings.append("High words per panel: consider splitting dialogue")

    return PagePacingMetric(
        page_id=page.id,
        page_number=page.page_number,
        word_count=word_count,
        panel_count=panel_count,
        dialogue_panels=dialogue_panels,
        silent_panels=silent_panels,
        words_per_panel=round_half_up(words_per_panel, 1),
        is_odd_page=page.page_number % 2 == 1,
        warnings=warnings,
    )


def calculate_overall_metrics(metrics: Iterable[PagePacingMetric]) -> OverallMetrics:
    """Roll page metrics up into issue-wide figures.

    Averages are rounded to one decimal and ratios to two. Empty inputs
    yield zeros rather than dividing by zero.
    """
    metrics = list(metrics)
    total_pages = len(metrics)
    total_panels = sum(m.panel_count for m in metrics)
    total_words = sum(m.word_count for m in metrics)
    total_dialogue = sum(m.dialogue_panels for m in metrics)
    total_silent = sum(m.silent_panels for m in metrics)

    return OverallMetrics(
        total_pages=total_pages,
        total_panels=total_panels,
        total_words=total_words,
        total_dialogue_panels=total_dialogue,
        total_silent_panels=total_silent,
        avg_words_per_page=safe_ratio(total_words, total_pages, 1),
        avg_panels_per_page=safe_ratio(total_panels, total_pages, 1),
        avg_words_per_panel=safe_ratio(total_words, total_panels, 1),
        dialogue_panel_ratio=safe_ratio(total_dialogue, total_panels, 2),
        silent_panel_ratio=safe_ratio(total_silent, total_panels, 2),
    )


def _dialogue_heavy_runs(metrics: list[PagePacingMetric]) -> list[list[int]]:
    """Runs of two or more consecutive dialogue-heavy pages."""
    runs: list[list[int]] = []
    current: list[int] = []
    for metric in metrics:
        ratio = (
            metric.dialogue_panels / metric.panel_count if metric.panel_count else 0
        )
        if ratio > DIALOGUE_HEAVY_PAGE_RATIO:
            current.append(metric.page_number)
            continue
        if len(current) >= 2:
            runs.append(current)
        current = []
    if len(current) >= 2:
        runs.append(current)
    return runs


def generate_insights(
    metrics: Iterable[PagePacingMetric], overall: OverallMetrics
) -> list[PacingInsight]:
    """Turn metrics into warnings, suggestions and strengths.

    Args:
        metrics: Per-page metrics in reading order
        overall: Issue-wide metrics for the same pages

    Returns:
        Insights, warnings first
    """
    metrics = list(metrics)
    thresholds = PACING_THRESHOLDS
    insights: list[PacingInsight] = []

    empty_pages = [m.page_number for m in metrics if m.panel_count == 0]
    if empty_pages:
        insights.append(
            PacingInsight(
                type=InsightType.WARNING,
                severity=InsightSeverity.HIGH,
                pages=empty_pages,
                message=f"{len(empty_pages)} page(s) have no panels",
                suggestion="Add panels or remove the empty pages before lettering",
            )
        )

    wordy_pages = [
        m.page_number
        for m in metrics
        if m.word_count > thresholds.words_per_page_warning
    ]
    if wordy_pages:
        insights.append(
            PacingInsight(
                type=InsightType.WARNING,
                severity=(
                    InsightSeverity.HIGH
                    if len(wordy_pages) > 3
                    else InsightSeverity.MEDIUM
                ),
                pages=wordy_pages,
                message=(
                    f"{len(wordy_pages)} page(s) have over "
                    f"{thresholds.words_per_page_warning} words: may read slowly"
                ),
                suggestion=(
                    "Consider splitting dialogue or adding visual beats to these pages"
                ),
            )
        )

    cramped_pages = [
        m.page_number for m in metrics if m.panel_count > thresholds.panels_cramped
    ]
    if cramped_pages:
        insights.append(
            PacingInsight(
                type=InsightType.WARNING,
                severity=InsightSeverity.MEDIUM,
                pages=cramped_pages,
                message=(
                    f"{len(cramped_pages)} page(s) have more than "
                    f"{thresholds.panels_cramped} panels: may feel cramped"
                ),
                suggestion="Consider spreading content across more pages",
            )
        )

    sparse_pages = [
        m.page_number
        for m in metrics
        if 0 < m.panel_count < thresholds.panels_sparse
    ]
    if len(sparse_pages) > 2:
        insights.append(
            PacingInsight(
                type=InsightType.SUGGESTION,
                severity=InsightSeverity.LOW,
                pages=sparse_pages,
                message=(
                    f"{len(sparse_pages)} pages have fewer than "
                    f"{thresholds.panels_sparse} panels"
                ),
                suggestion=(
                    "Ensure these moments warrant the space; "
                    "splash pages work best for key reveals"
                ),
            )
        )

    if overall.dialogue_panel_ratio > thresholds.talking_heads:
        runs = _dialogue_heavy_runs(metrics)
        if runs:
            insights.append(
                PacingInsight(
                    type=InsightType.WARNING,
                    severity=InsightSeverity.HIGH,
                    pages=[number for run in runs for number in run],
                    message=(
                        "Dialogue-heavy sequences detected: "
                        'risk of "talking heads"'
                    ),
                    suggestion=(
                        "Break up with action beats, visual variety or silent panels"
                    ),
                )
            )

    if overall.total_panels and overall.silent_panel_ratio < thresholds.no_breathing:
        percent = math.floor(overall.silent_panel_ratio * 100 + 0.5)
        insights.append(
            PacingInsight(
                type=InsightType.SUGGESTION,
                severity=InsightSeverity.MEDIUM,
                message=(
                    f"Only {percent}% silent panels: consider adding breathing room"
                ),
                suggestion=(
                    "Silent panels let readers absorb emotional moments "
                    "and vary the rhythm"
                ),
            )
        )

    # the last page has no page turn after it
    thin_odd_pages = [
        m
        for m in metrics
        if m.is_odd_page
        and m.page_number < len(metrics)
        and m.word_count < 20
        and m.panel_count <= 2
    ]
    if not thin_odd_pages and not empty_pages and len(metrics) > 4:
        insights.append(
            PacingInsight(
                type=InsightType.STRENGTH,
                severity=InsightSeverity.LOW,
                message="Good page density on odd-numbered pages",
                suggestion=(
                    "Strong content on odd pages creates natural page-turn hooks"
                ),
            )
        )

    if overall.total_pages and thresholds.words_per_page.contains(
        overall.avg_words_per_page
    ):
        insights.append(
            PacingInsight(
                type=InsightType.STRENGTH,
                severity=InsightSeverity.LOW,
                message=(
                    f"Average {overall.avg_words_per_page:g} words/page: "
                    "well within ideal range"
                ),
            )
        )

    if overall.total_pages and thresholds.panels_per_page.contains(
        overall.avg_panels_per_page
    ):
        insights.append(
            PacingInsight(
                type=InsightType.STRENGTH,
                severity=InsightSeverity.LOW,
                message=(
                    f"Average {overall.avg_panels_per_page:g} panels/page: "
                    "optimal panel density"
                ),
            )
        )

    return insights


def calculate_pacing_score(
    overall: OverallMetrics, insights: Iterable[PacingInsight]
) -> int:
    """Condense metrics and insights into a 0-100 score.

    Starts at 75, loses 15 per high and 8 per medium severity warning,
    gains 5 per strength and 5 per ideal range the issue falls in.
    """
    thresholds = PACING_THRESHOLDS
    score = 75

    for insight in insights:
        if insight.type is InsightType.WARNING:
            if insight.severity is InsightSeverity.HIGH:
                score -= 15
            elif insight.severity is InsightSeverity.MEDIUM:
                score -= 8
        elif insight.type is InsightType.STRENGTH:
            score += 5

    if overall.total_pages:
        if thresholds.words_per_page.contains(overall.avg_words_per_page):
            score += 5
        if thresholds.panels_per_page.contains(overall.avg_panels_per_page):
            score += 5
    if overall.total_panels:
        if thresholds.dialogue_ratio.contains(overall.dialogue_panel_ratio):
            score += 5
        if thresholds.silent_ratio.contains(overall.silent_panel_ratio):
            score += 5

    return max(0, min(100, score))


def analyze_pacing(pages: Iterable[PageData | Mapping[str, Any]]) -> PacingAnalysis:
    """Run the full pacing analysis over an issue.

    Pages are sorted by page number before analysis, so callers may pass
    them in any order.

    Args:
        pages: Page snapshots or mappings that validate as pages

    Returns:
        Per-page metrics, overall metrics, insights and score
    """
    ordered = sorted((as_page(page) for page in pages), key=lambda p: p.page_number)
    metrics = [calculate_page_metrics(page) for page in ordered]
    overall = calculate_overall_metrics(metrics)
    insights = generate_insights(metrics, overall)
    score = calculate_pacing_score(overall, insights)

    logger.debug(
        "Analyzed pacing",
        pages=overall.total_pages,
        insights=len(insights),
        score=score,
    )
    return PacingAnalysis(
        pages=metrics, overall=overall, insights=insights, score=score
    )


def get_score_label(score: int) -> str:
    """Word label for a pacing score."""
    if score >= 90:
        return "Excellent"
    if score >= 80:
        return "Great"
    if score >= 70:
        return "Good"
    if score >= 60:
        return "Fair"
    if score >= 50:
        return "Needs Work"
    return "Review Needed"
