"""Tests for pacing metrics, insights and scoring."""

import pytest

from panelflow.analysis.pacing import (
    PACING_THRESHOLDS,
    InsightSeverity,
    InsightType,
    OverallMetrics,
    PacingInsight,
    analyze_pacing,
    calculate_overall_metrics,
    calculate_page_metrics,
    calculate_pacing_score,
    get_score_label,
)
from panelflow.models import PageData
from tests.factories import make_page, make_panel, words


def balanced_page(number: int) -> dict:
    """A page with three dialogue panels, a caption panel and a silent panel."""
    return make_page(
        number,
        [
            make_panel(dialogue=[words(10)]),
            make_panel(dialogue=[words(10)]),
            make_panel(dialogue=[words(10)]),
            make_panel(captions=[words(10)]),
            make_panel(visual="Wide shot of the city"),
        ],
    )


def talky_page(number: int) -> dict:
    """A page where every panel is a short exchange."""
    return make_page(number, [make_panel(dialogue=[words(5)]) for _ in range(5)])


class TestPageMetrics:
    """Test per-page metrics."""

    def test_counts(self) -> None:
        """Markdown does not add words and wordless panels are silent."""
        page = make_page(
            1,
            [
                make_panel(dialogue=["Hello **there** friend"]),
                make_panel(captions=["Later."]),
                make_panel(visual="An empty street"),
            ],
        )
        metric = calculate_page_metrics(page)

        assert metric.word_count == 4
        assert metric.panel_count == 3
        assert metric.dialogue_panels == 1
        assert metric.silent_panels == 1
        assert metric.words_per_panel == 1.3
        assert metric.is_odd_page
        assert metric.page_id == "page-1"
        assert metric.warnings == []

    def test_wordy_page(self) -> None:
        """A single crowded panel trips word, density and sparseness warnings."""
        page = make_page(2, [make_panel(dialogue=[words(151)])])
        metric = calculate_page_metrics(page)

        assert metric.warnings == [
            "High word count: page may read slowly",
            "Few panels: ensure the moment warrants the space",
            "High words per panel: consider splitting dialogue",
        ]
        assert not metric.is_odd_page

    def test_cramped_page(self) -> None:
        """More than eight panels is cramped."""
        metric = calculate_page_metrics(make_page(1, [make_panel()] * 9))
        assert metric.warnings == ["Many panels: page may feel cramped"]
        assert metric.silent_panels == 9

    def test_empty_page(self) -> None:
        """A page without panels is flagged and has zero density."""
        metric = calculate_page_metrics(make_page(1, []))
        assert metric.words_per_panel == 0.0
        assert metric.warnings == ["Empty page: no panels to read"]

    def test_camel_case_and_null_lists(self) -> None:
        """camelCase payloads and null lists are accepted."""
        metric = calculate_page_metrics(
            {
                "pageNumber": 2,
                "panels": [
                    {
                        "visualDescription": "Door",
                        "dialogue": None,
                        "captions": [{"text": "Hi"}],
                    }
                ],
            }
        )
        assert metric.page_number == 2
        assert metric.word_count == 1
        assert metric.dialogue_panels == 0
        assert metric.silent_panels == 0

    def test_null_balloon_text(self) -> None:
        """A balloon with null text counts as an empty balloon."""
        analysis = analyze_pacing(
            [{"page_number": 1, "panels": [{"dialogue": [{"text": None}]}]}]
        )

        metric = analysis.pages[0]
        assert metric.word_count == 0
        assert metric.dialogue_panels == 1
        assert metric.silent_panels == 1

    def test_accepts_models(self) -> None:
        """Validated page models are used as is."""
        page = PageData.model_validate(balanced_page(3))
        assert calculate_page_metrics(page).word_count == 40


class TestOverallMetrics:
    """Test issue-wide roll-ups."""

    def test_averages_and_ratios(self) -> None:
        """Averages round to one decimal and ratios to two."""
        metrics = [
            calculate_page_metrics(balanced_page(1)),
            calculate_page_metrics(make_page(2, [make_panel(dialogue=["one two"])])),
        ]
        overall = calculate_overall_metrics(metrics)

        assert overall.total_pages == 2
        assert overall.total_panels == 6
        assert overall.total_words == 42
        assert overall.avg_words_per_page == 21.0
        assert overall.avg_panels_per_page == 3.0
        assert overall.avg_words_per_panel == 7.0
        assert overall.dialogue_panel_ratio == 0.67
        assert overall.silent_panel_ratio == 0.17

    def test_empty(self) -> None:
        """No pages gives all zeros."""
        overall = calculate_overall_metrics([])
        assert overall == OverallMetrics()


class TestAnalyzePacing:
    """Test the full analysis."""

    def test_ideal_issue(self) -> None:
        """Balanced pages score top marks with strengths only."""
        analysis = analyze_pacing([balanced_page(n) for n in range(1, 7)])

        assert analysis.overall.avg_words_per_page == 40.0
        assert analysis.overall.dialogue_panel_ratio == 0.6
        assert analysis.overall.silent_panel_ratio == 0.2
        assert {insight.type for insight in analysis.insights} == {
            InsightType.STRENGTH
        }
        assert len(analysis.insights) == 3
        assert analysis.score == 100
        assert get_score_label(analysis.score) == "Excellent"

    def test_talking_heads(self) -> None:
        """All-dialogue issues warn about talking heads and silence."""
        analysis = analyze_pacing([talky_page(n) for n in range(1, 5)])

        warnings = [i for i in analysis.insights if i.type is InsightType.WARNING]
        assert len(warnings) == 1
        assert warnings[0].severity is InsightSeverity.HIGH
        assert warnings[0].pages == [1, 2, 3, 4]
        assert "talking heads" in warnings[0].message

        suggestions = [
            i for i in analysis.insights if i.type is InsightType.SUGGESTION
        ]
        assert [s.message for s in suggestions] == [
            "Only 0% silent panels: consider adding breathing room"
        ]
        assert analysis.score == 70
        assert get_score_label(analysis.score) == "Good"

    def test_empty_page_issue(self) -> None:
        """An empty page is a high severity warning and nothing else."""
        analysis = analyze_pacing([make_page(1, [])])

        assert len(analysis.insights) == 1
        insight = analysis.insights[0]
        assert insight.type is InsightType.WARNING
        assert insight.severity is InsightSeverity.HIGH
        assert insight.pages == [1]
        assert analysis.score == 60

    def test_no_pages(self) -> None:
        """An empty issue keeps the base score."""
        analysis = analyze_pacing([])
        assert analysis.pages == []
        assert analysis.insights == []
        assert analysis.score == 75

    def test_pages_sorted_by_number(self) -> None:
        """Out-of-order input is analyzed in page order."""
        analysis = analyze_pacing([balanced_page(3), balanced_page(1), talky_page(2)])
        assert [m.page_number for m in analysis.pages] == [1, 2, 3]

    def test_sparse_pages_suggestion(self) -> None:
        """Three or more sparse pages get a low severity suggestion."""
        pages = [make_page(n, [make_panel(visual="Splash")]) for n in range(1, 4)]
        analysis = analyze_pacing(pages)

        sparse = [
            i for i in analysis.insights if i.message.startswith("3 pages have fewer")
        ]
        assert len(sparse) == 1
        assert sparse[0].severity is InsightSeverity.LOW
        assert sparse[0].pages == [1, 2, 3]


class TestScore:
    """Test score arithmetic."""

    def test_clamped_at_zero(self) -> None:
        """Heavy penalties never go below 0."""
        insights = [
            PacingInsight(
                type=InsightType.WARNING, severity=InsightSeverity.HIGH, message="x"
            )
            for _ in range(6)
        ]
        assert calculate_pacing_score(OverallMetrics(), insights) == 0

    def test_clamped_at_hundred(self) -> None:
        """Many strengths never exceed 100."""
        insights = [
            PacingInsight(
                type=InsightType.STRENGTH, severity=InsightSeverity.LOW, message="x"
            )
            for _ in range(10)
        ]
        assert calculate_pacing_score(OverallMetrics(), insights) == 100

    def test_suggestions_do_not_move_score(self) -> None:
        """Only warnings and strengths change the score."""
        insights = [
            PacingInsight(
                type=InsightType.SUGGESTION,
                severity=InsightSeverity.MEDIUM,
                message="x",
            )
        ]
        assert calculate_pacing_score(OverallMetrics(), insights) == 75

    def test_thresholds(self) -> None:
        """Ideal ranges are inclusive."""
        assert PACING_THRESHOLDS.panels_per_page.contains(4)
        assert PACING_THRESHOLDS.panels_per_page.contains(6)
        assert not PACING_THRESHOLDS.panels_per_page.contains(6.1)

    @pytest.mark.parametrize(
        ("score", "label"),
        [
            (100, "Excellent"),
            (90, "Excellent"),
            (89, "Great"),
            (80, "Great"),
            (70, "Good"),
            (60, "Fair"),
            (50, "Needs Work"),
            (49, "Review Needed"),
            (0, "Review Needed"),
        ],
    )
    def test_labels(self, score: int, label: str) -> None:
        """Scores map to a readable label."""
        assert get_score_label(score) == label
