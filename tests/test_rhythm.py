"""Tests for visual rhythm analysis."""

import pytest

from panelflow.analysis.pacing import InsightSeverity, InsightType
from panelflow.analysis.rhythm import (
    PageDensity,
    Tempo,
    analyze_issue_rhythm,
    analyze_rhythm,
    calculate_page_rhythm,
    determine_tempo,
    find_silent_sequences,
    get_tempo_label,
    is_action_panel,
)
from panelflow.models import PageType
from tests.factories import make_page, make_panel, words


def silent_page(number: int, panel_count: int = 2) -> dict:
    """A page whose panels carry no text."""
    return make_page(
        number, [make_panel(visual="Rooftops at dusk") for _ in range(panel_count)]
    )


def talky_page(number: int, panel_count: int = 4) -> dict:
    """A page where every panel has a ten word balloon."""
    return make_page(
        number, [make_panel(dialogue=[words(10)]) for _ in range(panel_count)]
    )


def messages(rhythm) -> list[str]:
    return [insight.message for insight in rhythm.insights]


class TestPageRhythm:
    """Test per-page rhythm figures."""

    @pytest.mark.parametrize(
        ("panel_count", "density"),
        [
            (1, PageDensity.SPARSE),
            (3, PageDensity.SPARSE),
            (4, PageDensity.NORMAL),
            (6, PageDensity.NORMAL),
            (7, PageDensity.DENSE),
            (9, PageDensity.DENSE),
        ],
    )
    def test_density(self, panel_count: int, density: PageDensity) -> None:
        """Three panels or fewer is sparse, seven or more is dense."""
        assert calculate_page_rhythm(talky_page(1, panel_count)).density is density

    def test_panel_counts(self) -> None:
        """Words, dialogue, silent and action panels are counted."""
        page = make_page(
            3,
            [
                make_panel(dialogue=[words(5)]),
                make_panel(captions=[words(3)]),
                make_panel(visual="The hero punches through the wall"),
            ],
        )

        rhythm = calculate_page_rhythm(page)

        assert rhythm.page_id == "page-3"
        assert rhythm.panel_count == 3
        assert rhythm.word_count == 8
        assert rhythm.dialogue_panels == 1
        assert rhythm.silent_panels == 1
        assert rhythm.action_panels == 1

    def test_left_and_right_pages(self) -> None:
        """Even pages sit on the left."""
        assert calculate_page_rhythm(talky_page(2)).is_left_page is True
        assert calculate_page_rhythm(talky_page(1)).is_left_page is False

    def test_page_types(self) -> None:
        """Splash and spread pages are flagged."""
        splash = calculate_page_rhythm({**silent_page(1), "page_type": "SPLASH"})
        spread = calculate_page_rhythm({**silent_page(2), "pageType": "SPREAD_LEFT"})

        assert splash.is_splash is True
        assert splash.is_spread is False
        assert spread.page_type is PageType.SPREAD_LEFT
        assert spread.is_spread is True

    def test_camel_case_payload(self) -> None:
        """Persistence-layer camelCase keys and a null page type are accepted."""
        page = {
            "pageNumber": 4,
            "pageType": None,
            "panels": [
                {
                    "visualDescription": "A car chase",
                    "dialogueBlocks": [{"text": "Faster!"}],
                }
            ],
        }

        rhythm = calculate_page_rhythm(page)

        assert rhythm.page_type is PageType.SINGLE
        assert rhythm.dialogue_panels == 1
        assert rhythm.action_panels == 1


class TestActionPanels:
    """Test action word detection."""

    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("She LEAPS across the gap", True),
            ("Motion lines everywhere", True),
            ("A quiet kitchen", False),
            ("", False),
            (None, False),
        ],
    )
    def test_is_action_panel(self, description: str | None, expected: bool) -> None:
        """Matching is case insensitive and tolerates missing descriptions."""
        assert is_action_panel(description) is expected


class TestSilentSequences:
    """Test detection of runs of quiet pages."""

    def test_runs_including_trailing(self) -> None:
        """Runs are split by talky pages and a run at the end is kept."""
        pages = [
            silent_page(1),
            silent_page(2),
            talky_page(3),
            silent_page(4),
            silent_page(5),
            silent_page(6),
        ]

        sequences = find_silent_sequences([calculate_page_rhythm(p) for p in pages])

        assert [(s.start_page, s.end_page, s.length) for s in sequences] == [
            (1, 2, 2),
            (4, 6, 3),
        ]
        assert sequences[1].pages == [4, 5, 6]

    def test_single_quiet_page_is_not_a_run(self) -> None:
        """A lone quiet page does not count."""
        pages = [silent_page(1), talky_page(2), silent_page(3)]

        assert find_silent_sequences([calculate_page_rhythm(p) for p in pages]) == []

    def test_few_words_count_as_quiet(self) -> None:
        """Pages under twenty words are quiet even when every panel talks."""
        pages = [talky_page(1, panel_count=1), talky_page(2, panel_count=1)]

        sequences = find_silent_sequences([calculate_page_rhythm(p) for p in pages])

        assert len(sequences) == 1
        assert sequences[0].pages == [1, 2]


class TestTempo:
    """Test the overall tempo."""

    def test_empty(self) -> None:
        """No pages reads as moderate."""
        assert determine_tempo([]) is Tempo.MODERATE

    @pytest.mark.parametrize(
        ("panel_counts", "tempo"),
        [
            ([3, 3, 3, 3], Tempo.SLOW),
            ([7, 8, 7, 9], Tempo.FAST),
            ([5, 5, 5, 5], Tempo.MODERATE),
            ([2, 2, 8, 8, 5, 5], Tempo.VARIABLE),
            ([5, 5, 5, 5, 5, 5, 8], Tempo.MODERATE),
        ],
    )
    def test_tempo(self, panel_counts: list[int], tempo: Tempo) -> None:
        """Tempo follows the share of sparse and dense pages."""
        pages = [
            calculate_page_rhythm(talky_page(n, count))
            for n, count in enumerate(panel_counts, start=1)
        ]

        assert determine_tempo(pages) is tempo

    @pytest.mark.parametrize(
        ("tempo", "label"),
        [
            (Tempo.SLOW, "Slow & Deliberate"),
            (Tempo.MODERATE, "Moderate"),
            ("fast", "Fast & Dense"),
            (Tempo.VARIABLE, "Variable (Good!)"),
        ],
    )
    def test_labels(self, tempo: Tempo, label: str) -> None:
        """Tempos have display labels."""
        assert get_tempo_label(tempo) == label


class TestAnalyzeRhythm:
    """Test the full rhythm analysis."""

    def test_empty_issue(self) -> None:
        """An issue with no pages has no insights."""
        rhythm = analyze_rhythm([])

        assert rhythm.pages == []
        assert rhythm.tempo is Tempo.MODERATE
        assert rhythm.avg_panels_per_page == 0.0
        assert rhythm.silent_ratio == 0.0
        assert rhythm.insights == []

    def test_pages_are_sorted(self) -> None:
        """Pages are analyzed in page number order."""
        rhythm = analyze_rhythm([talky_page(3), talky_page(1), talky_page(2)])

        assert [page.page_number for page in rhythm.pages] == [1, 2, 3]

    def test_ratios(self) -> None:
        """Ratios use three decimals and the average one."""
        page = make_page(
            1,
            [
                make_panel(dialogue=[words(10)]),
                make_panel(visual="Empty street"),
                make_panel(visual="The car crashes"),
            ],
        )

        rhythm = analyze_rhythm([page])

        assert rhythm.avg_panels_per_page == 3.0
        assert rhythm.silent_ratio == 0.667
        assert rhythm.dialogue_ratio == 0.333
        assert rhythm.action_ratio == 0.333

    def test_fast_issue_with_dense_run(self) -> None:
        """Consecutive dense pages are a warning."""
        rhythm = analyze_rhythm([talky_page(n, 7) for n in range(1, 4)])

        assert rhythm.tempo is Tempo.FAST
        assert "Fast, dense pacing throughout" in messages(rhythm)
        assert "Few silent panels: consider visual breathing room" in messages(rhythm)
        warning = next(i for i in rhythm.insights if i.type is InsightType.WARNING)
        assert warning.message == "3 consecutive dense pages"
        assert warning.severity is InsightSeverity.MEDIUM
        assert warning.pages == [1, 2, 3]

    def test_dense_run_needs_consecutive_pages(self) -> None:
        """Dense pages split by a normal page are not a run."""
        pages = [talky_page(1, 7), talky_page(2, 7), talky_page(3), talky_page(4, 7)]

        rhythm = analyze_rhythm(pages)

        assert not any("consecutive dense" in m for m in messages(rhythm))

    def test_long_silent_sequence(self) -> None:
        """More than four quiet pages in a row is flagged."""
        rhythm = analyze_rhythm([silent_page(n) for n in range(1, 6)])

        assert rhythm.tempo is Tempo.SLOW
        assert "Slow, sparse pacing throughout" in messages(rhythm)
        assert "Long silent sequence (5 pages)" in messages(rhythm)
        assert "Many silent panels: ensure story clarity" in messages(rhythm)

    def test_breathing_room(self) -> None:
        """A short quiet run is a strength."""
        rhythm = analyze_rhythm([silent_page(1), silent_page(2), talky_page(3)])

        strength = next(
            i for i in rhythm.insights if i.message.startswith("Good visual")
        )
        assert strength.message == "Good visual breathing room (pages 1-2)"
        assert strength.type is InsightType.STRENGTH
        assert strength.pages == [1, 2]

    def test_no_silent_sequences_in_long_issue(self) -> None:
        """Long issues without quiet runs get a suggestion."""
        rhythm = analyze_rhythm([talky_page(n) for n in range(1, 12)])

        assert "No significant silent sequences" in messages(rhythm)

    def test_healthy_silent_ratio(self) -> None:
        """One silent panel in five is healthy."""
        page = make_page(
            1,
            [make_panel(dialogue=[words(10)]) for _ in range(4)]
            + [make_panel(visual="Wide shot of the city")],
        )

        rhythm = analyze_rhythm([page])

        assert rhythm.silent_ratio == 0.2
        assert "Healthy silent panel ratio (20%)" in messages(rhythm)

    def test_high_splash_usage(self) -> None:
        """More than a fifth of the pages as splashes or spreads is noted."""
        pages = [talky_page(n) for n in range(1, 4)] + [
            {**talky_page(4), "page_type": "SPREAD_LEFT"},
            {**talky_page(5), "page_type": "SPREAD_RIGHT"},
        ]

        rhythm = analyze_rhythm(pages)

        assert "High splash/spread usage (2 pages)" in messages(rhythm)


class TestAnalyzeIssueRhythm:
    """Test rhythm over an act > scene > page tree."""

    def test_pages_are_flattened(self) -> None:
        """Pages of every scene of every act are analyzed together."""
        acts = [
            {
                "name": "Act One",
                "scenes": [{"pages": [talky_page(1)]}, {"pages": [talky_page(2)]}],
            },
            {"name": "Act Two", "scenes": [{"pages": [talky_page(3)]}]},
            {"name": "Act Three", "scenes": None},
        ]

        rhythm = analyze_issue_rhythm(acts)

        assert [page.page_number for page in rhythm.pages] == [1, 2, 3]
