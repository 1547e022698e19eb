"""Script analysis for PanelFlow."""

from __future__ import annotations

from .pacing import (
    PACING_THRESHOLDS,
    InsightSeverity,
    InsightType,
    OverallMetrics,
    PacingAnalysis,
    PacingInsight,
    PacingThresholds,
    PagePacingMetric,
    analyze_pacing,
    calculate_overall_metrics,
    calculate_page_metrics,
    calculate_pacing_score,
    generate_insights,
    get_score_label,
)
from .rhythm import (
    RHYTHM_THRESHOLDS,
    IssueRhythm,
    PageDensity,
    PageRhythm,
    SilentSequence,
    Tempo,
    analyze_issue_rhythm,
    analyze_rhythm,
    calculate_page_rhythm,
    determine_tempo,
    find_silent_sequences,
    generate_rhythm_insights,
    get_tempo_label,
)
from .scenes import (
    SCENE_THRESHOLDS,
    DramaticFunction,
    SceneAnalysis,
    SceneMetrics,
    analyze_issue_scenes,
    analyze_scene,
    assess_dramatic_function,
    calculate_efficiency_score,
    calculate_scene_metrics,
    generate_scene_insights,
    get_efficiency_label,
)

__all__ = [
    "PACING_THRESHOLDS",
    "RHYTHM_THRESHOLDS",
    "SCENE_THRESHOLDS",
    "DramaticFunction",
    "InsightSeverity",
    "InsightType",
    "IssueRhythm",
    "OverallMetrics",
    "PacingAnalysis",
    "PacingInsight",
    "PacingThresholds",
    "PageDensity",
    "PagePacingMetric",
    "PageRhythm",
    "SceneAnalysis",
    "SceneMetrics",
    "SilentSequence",
    "Tempo",
    "analyze_issue_rhythm",
    "analyze_issue_scenes",
    "analyze_pacing",
    "analyze_rhythm",
    "analyze_scene",
    "assess_dramatic_function",
    "calculate_efficiency_score",
    "calculate_overall_metrics",
    "calculate_page_metrics",
    "calculate_pacing_score",
    "calculate_page_rhythm",
    "calculate_scene_metrics",
    "determine_tempo",
    "find_silent_sequences",
    "generate_insights",
    "generate_rhythm_insights",
    "generate_scene_insights",
    "get_efficiency_label",
    "get_score_label",
    "get_tempo_label",
]
