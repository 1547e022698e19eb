"""Scene analytics: is each scene earning its pages?

Scenes are measured like small issues, given a dramatic function from
their place in the act structure and their dialogue share, and scored for
efficiency from 1 to 100.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from panelflow.analysis.pacing import (
    InsightSeverity,
    InsightType,
    PacingInsight,
    Range,
    panel_word_count,
    safe_ratio,
)
from panelflow.analysis.rhythm import as_act
from panelflow.config import get_logger
from panelflow.models import ActData, SceneData

logger = get_logger(__name__)


class DramaticFunction(str, Enum):
    """The job a scene does in the story."""

    EXPOSITION = "exposition"
    RISING_ACTION = "rising_action"
    CLIMAX = "climax"
    FALLING_ACTION = "falling_action"
    RESOLUTION = "resolution"
    CHARACTER_MOMENT = "character_moment"
    WORLD_BUILDING = "world_building"
    TRANSITION = "transition"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class SceneThresholds(BaseModel):
    """Density limits for a single scene."""

    words_per_page: Range = Range(min=30, max=100)
    sparse_words: int = 20
    dense_words: int = 120
    panels_per_page: Range = Range(min=4, max=6)
    sparse_panels: int = 3
    cramped_panels: int = 8
    dialogue_ratio: Range = Range(min=0.3, max=0.7)
    talking_heads: float = 0.85
    all_action: float = 0.1
    breathing_room: Range = Range(min=0.15, max=0.3)


SCENE_THRESHOLDS = SceneThresholds()


class SceneMetrics(BaseModel):
    """Totals and densities for one scene."""

    scene_id: str | None = None
    scene_name: str = "Untitled Scene"
    page_count: int = 0
    panel_count: int = 0
    word_count: int = 0
    dialogue_panels: int = 0
    silent_panels: int = 0
    words_per_page: float = 0.0
    panels_per_page: float = 0.0
    dialogue_ratio: float = 0.0


class SceneAnalysis(BaseModel):
    """Metrics, function, insights and efficiency score of a scene."""

    metrics: SceneMetrics
    dramatic_function: DramaticFunction
    efficiency_score: int = Field(ge=1, le=100)
    insights: list[PacingInsight] = Field(default_factory=list)


def _as_scene(scene: SceneData | Mapping[str, Any]) -> SceneData:
    return scene if isinstance(scene, SceneData) else SceneData.model_validate(scene)


def calculate_scene_metrics(scene: SceneData | Mapping[str, Any]) -> SceneMetrics:
    """Count words and panels across a scene's pages."""
    scene = _as_scene(scene)
    panel_count = word_count = dialogue_panels = silent_panels = 0
    for page in scene.pages:
        panel_count += len(page.panels)
        for panel in page.panels:
            words = panel_word_count(panel)
            word_count += words
            if panel.dialogue:
                dialogue_panels += 1
            if words == 0:
                silent_panels += 1

    page_count = len(scene.pages)
    return SceneMetrics(
        scene_id=scene.id,
        scene_name=scene.display_name,
        page_count=page_count,
        panel_count=panel_count,
        word_count=word_count,
        dialogue_panels=dialogue_panels,
        silent_panels=silent_panels,
        words_per_page=safe_ratio(word_count, page_count, 1),
        panels_per_page=safe_ratio(panel_count, page_count, 1),
        dialogue_ratio=safe_ratio(dialogue_panels, panel_count, 3),
    )


def assess_dramatic_function(
    metrics: SceneMetrics,
    act_index: int,
    scene_index: int,
    scenes_in_act: int,
    total_acts: int,
) -> DramaticFunction:
    """Guess a scene's function from its position first, then its content.

    Args:
        metrics: Metrics of the scene
        act_index: 0-based index of the scene's act
        scene_index: 0-based index of the scene within its act
        scenes_in_act: Number of scenes in the act
        total_acts: Number of acts in the issue
    """
    first_act = act_index == 0
    last_act = act_index == total_acts - 1
    middle_act = not first_act and not last_act
    first_scene = scene_index == 0
    last_scene = scene_index == scenes_in_act - 1

    dialogue_heavy = metrics.dialogue_ratio > 0.7
    short = metrics.page_count <= 1
    long = metrics.page_count >= 5

    if first_act and first_scene:
        return DramaticFunction.EXPOSITION
    if last_act and last_scene:
        return DramaticFunction.RESOLUTION
    if middle_act and (last_scene or (long and not dialogue_heavy)):
        return DramaticFunction.CLIMAX
    if last_act and first_scene:
        return DramaticFunction.FALLING_ACTION
    if first_act:
        return DramaticFunction.RISING_ACTION
    if short:
        return (
            DramaticFunction.CHARACTER_MOMENT
            if dialogue_heavy
            else DramaticFunction.TRANSITION
        )
    if dialogue_heavy and metrics.page_count >= 3:
        return DramaticFunction.CHARACTER_MOMENT
    return DramaticFunction.RISING_ACTION


def generate_scene_insights(
    metrics: SceneMetrics, function: DramaticFunction
) -> list[PacingInsight]:
    """Warnings, suggestions and strengths for one scene."""
    thresholds = SCENE_THRESHOLDS
    multi_page = metrics.page_count > 1
    insights: list[PacingInsight] = []

    def add(
        kind: InsightType,
        severity: InsightSeverity,
        message: str,
        suggestion: str | None = None,
    ) -> None:
        insights.append(
            PacingInsight(
                type=kind, severity=severity, message=message, suggestion=suggestion
            )
        )

    words = metrics.words_per_page
    if words > thresholds.dense_words:
        add(
            InsightType.WARNING,
            InsightSeverity.HIGH,
            f"Heavy dialogue ({words:g} words/page)",
            "Consider adding visual beats or splitting dialogue across panels",
        )
    elif words < thresholds.sparse_words and multi_page:
        add(
            InsightType.SUGGESTION,
            InsightSeverity.LOW,
            f"Sparse dialogue ({words:g} words/page)",
            "This scene may benefit from character moments or internal captions",
        )
    elif thresholds.words_per_page.contains(words):
        add(
            InsightType.STRENGTH,
            InsightSeverity.LOW,
            "Well-balanced dialogue density",
        )

    panels = metrics.panels_per_page
    if panels > thresholds.cramped_panels:
        add(
            InsightType.WARNING,
            InsightSeverity.MEDIUM,
            f"Cramped layout ({panels:g} panels/page)",
            "Consider expanding key moments across more pages",
        )
    elif panels < thresholds.sparse_panels and multi_page:
        add(
            InsightType.SUGGESTION,
            InsightSeverity.LOW,
            f"Sparse panels ({panels:g} panels/page)",
            "Ensure each splash or spread earns its space with impact",
        )

    if metrics.dialogue_ratio > thresholds.talking_heads:
        add(
            InsightType.WARNING,
            InsightSeverity.MEDIUM,
            "Talking heads syndrome",
            "Add visual variety: characters interacting with the environment",
        )
    elif (
        metrics.dialogue_ratio < thresholds.all_action
        and function is not DramaticFunction.TRANSITION
    ):
        add(
            InsightType.SUGGESTION,
            InsightSeverity.LOW,
            "Pure action sequence",
            "Consider if character voice would strengthen emotional impact",
        )

    silent_share = (
        metrics.silent_panels / metrics.panel_count if metrics.panel_count else 0
    )
    # exclusive on both ends
    breathing = thresholds.breathing_room
    if breathing.min < silent_share < breathing.max:
        add(InsightType.STRENGTH, InsightSeverity.LOW, "Good visual breathing room")

    if function is DramaticFunction.CLIMAX and metrics.page_count < 3:
        add(
            InsightType.SUGGESTION,
            InsightSeverity.MEDIUM,
            "Climax may be underserved",
            "Key dramatic moments typically need 3+ pages to land",
        )
    if function is DramaticFunction.TRANSITION and metrics.page_count > 2:
        add(
            InsightType.SUGGESTION,
            InsightSeverity.LOW,
            "Long transition",
            "Transitions work best as quick beats; can this be tightened?",
        )

    return insights


_WARNING_PENALTIES = {
    InsightSeverity.HIGH: 15,
    InsightSeverity.MEDIUM: 8,
    InsightSeverity.LOW: 3,
}


def calculate_efficiency_score(
    metrics: SceneMetrics,
    function: DramaticFunction,
    insights: Iterable[PacingInsight],
) -> int:
    """Score a scene from 1 to 100.

    Starts at 75. Warnings cost 15, 8 or 3 points by severity and each
    strength adds 5. Another 5 points each come from ideal words per page,
    panels per page and dialogue share, and from a climax with at least
    three pages.
    """
    thresholds = SCENE_THRESHOLDS
    score = 75
    for insight in insights:
        if insight.type is InsightType.WARNING:
            score -= _WARNING_PENALTIES[insight.severity]
        elif insight.type is InsightType.STRENGTH:
            score += 5

    if thresholds.words_per_page.contains(metrics.words_per_page):
        score += 5
    if thresholds.panels_per_page.contains(metrics.panels_per_page):
        score += 5
    if thresholds.dialogue_ratio.contains(metrics.dialogue_ratio):
        score += 5
    if function is DramaticFunction.CLIMAX and metrics.page_count >= 3:
        score += 5

    return max(1, min(100, score))


def analyze_scene(
    scene: SceneData | Mapping[str, Any],
    act_index: int,
    scene_index: int,
    scenes_in_act: int,
    total_acts: int,
) -> SceneAnalysis:
    """Metrics, dramatic function, insights and score for one scene."""
    metrics = calculate_scene_metrics(scene)
    function = assess_dramatic_function(
        metrics, act_index, scene_index, scenes_in_act, total_acts
    )
    insights = generate_scene_insights(metrics, function)
    return SceneAnalysis(
        metrics=metrics,
        dramatic_function=function,
        efficiency_score=calculate_efficiency_score(metrics, function, insights),
        insights=insights,
    )


def analyze_issue_scenes(
    acts: Iterable[ActData | Mapping[str, Any]],
) -> list[SceneAnalysis]:
    """Analyze every scene of an act > scene > page tree, in order."""
    tree = [as_act(act) for act in acts]
    results = [
        analyze_scene(scene, act_index, scene_index, len(act.scenes), len(tree))
        for act_index, act in enumerate(tree)
        for scene_index, scene in enumerate(act.scenes)
    ]
    logger.debug("Analyzed scenes", acts=len(tree), scenes=len(results))
    return results


def get_efficiency_label(score: int) -> str:
    """Word label for an efficiency score."""
    if score >= 85:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Fair"
    return "Needs Work"
