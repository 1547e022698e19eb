"""Tests for line and page diffs between script versions."""

from unittest.mock import MagicMock

import pytest

from panelflow.diff import version_diff
from panelflow.diff.models import ChangeStatus, DiffLineType
from panelflow.diff.version_diff import (
    LOOKAHEAD,
    SIMILARITY_THRESHOLD,
    compare_pages,
    compute_line_diff,
    find_similar_line,
    generate_diff_summary,
    longest_common_subsequence,
    string_similarity,
)
from panelflow.models import PageData
from tests.factories import make_page, make_panel


def line_types(result) -> list[DiffLineType]:
    """Types of each diff row in order."""
    return [line.type for line in result.lines]


class TestStringSimilarity:
    """Test the bigram Dice coefficient."""

    def test_identical(self) -> None:
        """Equal strings score 1."""
        assert string_similarity("abc", "abc") == 1.0

    def test_too_short(self) -> None:
        """Single characters have no bigrams."""
        assert string_similarity("a", "b") == 0.0
        assert string_similarity("", "ab") == 0.0

    def test_partial_overlap(self) -> None:
        """Shared bigrams raise the score."""
        assert string_similarity("abcd", "abce") == pytest.approx(2 / 3)

    def test_constants(self) -> None:
        """Threshold and lookahead stay at their documented values."""
        assert SIMILARITY_THRESHOLD == 0.6
        assert LOOKAHEAD == 3


class TestFindSimilarLine:
    """Test fuzzy line lookup."""

    def test_skips_blank_candidates(self) -> None:
        """Blank lines are never similar, case and padding are ignored."""
        assert find_similar_line("The Hero", ["", "  the hero! "]) == 1

    def test_blank_target(self) -> None:
        """A blank target matches nothing."""
        assert find_similar_line("   ", ["anything"]) == -1

    def test_no_match(self) -> None:
        """Dissimilar candidates return -1."""
        assert find_similar_line("rain falls", ["zebra crossing"]) == -1


class TestLongestCommonSubsequence:
    """Test LCS anchor pairs."""

    def test_pairs(self) -> None:
        """Pairs index the common lines in both inputs."""
        assert longest_common_subsequence(["a", "b", "c"], ["a", "c"]) == [
            (0, 0),
            (2, 1),
        ]

    def test_empty(self) -> None:
        """Nothing is common with an empty list."""
        assert longest_common_subsequence([], ["a"]) == []


class TestComputeLineDiff:
    """Test line-level diffs."""

    def test_identical_texts(self) -> None:
        """Identical texts are fully unchanged."""
        result = compute_line_diff("A\nB\nC", "A\nB\nC")

        assert line_types(result) == [DiffLineType.UNCHANGED] * 3
        assert result.similarity == 100

    def test_single_line_replaced_in_place(self) -> None:
        """A line swapped between unchanged neighbors is a modification."""
        result = compute_line_diff("A\nB\nC", "A\nX\nC")

        assert line_types(result) == [
            DiffLineType.UNCHANGED,
            DiffLineType.MODIFIED,
            DiffLineType.UNCHANGED,
        ]
        modified = result.lines[1]
        assert modified.content == "X"
        assert modified.old_content == "B"
        assert modified.line_number == 2
        assert modified.old_line_number == 2
        assert result.stats.modified == 1
        assert result.stats.unchanged == 2
        assert result.similarity == 67

    def test_dissimilar_single_line_is_still_modified(self) -> None:
        """The similarity threshold does not apply to a lone replaced line."""
        result = compute_line_diff("A\nThe hero leaps\nC", "A\nPAGE 1\nC")

        assert string_similarity("The hero leaps", "PAGE 1") < SIMILARITY_THRESHOLD
        assert line_types(result) == [
            DiffLineType.UNCHANGED,
            DiffLineType.MODIFIED,
            DiffLineType.UNCHANGED,
        ]

    def test_removed_line(self) -> None:
        """A dropped line is reported with its old line number."""
        result = compute_line_diff("A\nB\nC", "A\nC")

        assert line_types(result) == [
            DiffLineType.UNCHANGED,
            DiffLineType.REMOVED,
            DiffLineType.UNCHANGED,
        ]
        assert result.lines[1].content == "B"
        assert result.lines[1].line_number == 2
        assert result.lines[2].line_number == 2
        assert result.lines[2].old_line_number == 3

    def test_added_line(self) -> None:
        """An inserted line is reported with its new line number."""
        result = compute_line_diff("A\nC", "A\nB\nC")

        assert line_types(result) == [
            DiffLineType.UNCHANGED,
            DiffLineType.ADDED,
            DiffLineType.UNCHANGED,
        ]
        assert result.lines[1].line_number == 2
        assert result.stats.added == 1

    def test_similar_line_is_modified(self) -> None:
        """A reworded line is paired with its new version."""
        old = "PAGE 1\nThe hero runs fast\nTotally unrelated line\nEND"
        new = "PAGE 1\nThe hero runs faster\nEND"
        result = compute_line_diff(old, new)

        assert line_types(result) == [
            DiffLineType.UNCHANGED,
            DiffLineType.MODIFIED,
            DiffLineType.REMOVED,
            DiffLineType.UNCHANGED,
        ]
        assert result.lines[1].old_content == "The hero runs fast"
        assert result.lines[1].content == "The hero runs faster"
        assert result.similarity == 50

    def test_dissimilar_lines_are_removed_and_added(self) -> None:
        """Unrelated rewrites are not paired."""
        old = "A\nfirst old line\nsecond old line\nB"
        new = "A\ncompletely new text\nB"
        result = compute_line_diff(old, new)

        assert line_types(result) == [
            DiffLineType.UNCHANGED,
            DiffLineType.REMOVED,
            DiffLineType.REMOVED,
            DiffLineType.ADDED,
            DiffLineType.UNCHANGED,
        ]
        assert result.similarity == 40

    def test_similar_line_within_lookahead(self) -> None:
        """Lines skipped on the way to a similar line are added."""
        old = "A\nThe hero runs fast\nZ"
        new = "A\nnoise\nThe hero runs faster\nZ"
        result = compute_line_diff(old, new)

        assert line_types(result) == [
            DiffLineType.UNCHANGED,
            DiffLineType.ADDED,
            DiffLineType.MODIFIED,
            DiffLineType.UNCHANGED,
        ]

    def test_similar_line_beyond_lookahead(self) -> None:
        """Only the next few new lines are searched for a similar line."""
        old = "A\nThe hero runs fast\nZ"
        new = "A\nx1\nx2\nx3\nThe hero runs faster\nZ"
        result = compute_line_diff(old, new)

        assert result.stats.modified == 0
        assert result.stats.removed == 1
        assert result.stats.added == 4

    def test_empty_texts(self) -> None:
        """Two empty texts are identical."""
        result = compute_line_diff("", "")
        assert result.lines == []
        assert result.similarity == 100

    def test_from_empty(self) -> None:
        """Everything is added when the old text is empty."""
        result = compute_line_diff(None, "A\nB")
        assert line_types(result) == [DiffLineType.ADDED, DiffLineType.ADDED]
        assert result.similarity == 0

    def test_large_diff_is_logged(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Diffs above the cell limit log a warning and still complete."""
        mock_logger = MagicMock()
        monkeypatch.setattr(version_diff, "logger", mock_logger)

        result = compute_line_diff("a\nb", "a\nc", max_cells=2)

        mock_logger.warning.assert_called_once()
        assert result.stats.unchanged == 1

    def test_limit_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The default limit comes from the diff_max_cells setting."""
        from panelflow.config import PanelFlowSettings, set_settings

        mock_logger = MagicMock()
        monkeypatch.setattr(version_diff, "logger", mock_logger)
        set_settings(PanelFlowSettings(_env_file=None, diff_max_cells=1))

        compute_line_diff("a\nb", "a")

        mock_logger.warning.assert_called_once()


class TestComparePages:
    """Test structural page and panel comparison."""

    @pytest.fixture
    def pages(self) -> list[dict]:
        """Two pages with one panel each."""
        return [
            make_page(1, [make_panel(visual="A rooftop at dusk")]),
            make_page(2, [make_panel(visual="A long fall")]),
        ]

    def test_identical_pages(self, pages: list[dict]) -> None:
        """Comparing a version with itself changes nothing."""
        diffs = compare_pages(pages, pages)

        assert [d.status for d in diffs] == [ChangeStatus.UNCHANGED] * 2
        assert all(
            panel.status is ChangeStatus.UNCHANGED
            for diff in diffs
            for panel in diff.panels
        )
        assert generate_diff_summary(diffs) == "2 unchanged"

    def test_prepended_page_shifts_comparison(self, pages: list[dict]) -> None:
        """Pages are paired by position, so a new first page shifts every pair."""
        new_pages = [
            make_page(1, [make_panel(visual="A cold open")]),
            {**pages[0], "page_number": 2},
            {**pages[1], "page_number": 3},
        ]
        diffs = compare_pages(pages, new_pages)

        assert [d.status for d in diffs] == [
            ChangeStatus.MODIFIED,
            ChangeStatus.MODIFIED,
            ChangeStatus.NEW,
        ]
        assert [d.page_number for d in diffs] == [1, 2, 3]
        assert generate_diff_summary(diffs) == "1 new page, 2 modified"

    def test_removed_page(self, pages: list[dict]) -> None:
        """A missing page is removed along with its panels."""
        diffs = compare_pages(pages, pages[:1])

        removed = diffs[1]
        assert removed.status is ChangeStatus.REMOVED
        assert removed.page_number == 2
        assert (removed.old_panel_count, removed.new_panel_count) == (1, 0)
        assert [p.status for p in removed.panels] == [ChangeStatus.REMOVED]
        assert generate_diff_summary(diffs) == "1 removed, 1 unchanged"

    def test_new_page_panels_are_new(self, pages: list[dict]) -> None:
        """Every panel of an added page is new."""
        extra = make_page(3, [make_panel(visual="x"), make_panel(visual="y")])
        diffs = compare_pages(pages, [*pages, extra])

        assert diffs[2].status is ChangeStatus.NEW
        assert [p.status for p in diffs[2].panels] == [ChangeStatus.NEW] * 2
        assert diffs[2].new_panel_count == 2

    def test_added_panel_marks_page_modified(self, pages: list[dict]) -> None:
        """Panel count changes make a page modified."""
        grown = make_page(
            1,
            [make_panel(visual="A rooftop at dusk"), make_panel(visual="Wind")],
        )
        diffs = compare_pages(pages[:1], [grown])

        assert diffs[0].status is ChangeStatus.MODIFIED
        assert [p.status for p in diffs[0].panels] == [
            ChangeStatus.UNCHANGED,
            ChangeStatus.NEW,
        ]

    def test_modified_panel_carries_visual_diff(self, pages: list[dict]) -> None:
        """A changed visual description includes its line diff."""
        edited = make_page(1, [make_panel(visual="A rooftop at night")])
        diffs = compare_pages(pages[:1], [edited])

        panel = diffs[0].panels[0]
        assert panel.status is ChangeStatus.MODIFIED
        assert panel.visual_diff is not None
        assert panel.visual_diff.lines[0].old_content == "A rooftop at dusk"

    def test_only_visual_description_is_compared(self) -> None:
        """Dialogue edits alone do not modify a panel."""
        old = [make_page(1, [make_panel(dialogue=["Hi"], visual="Door")])]
        new = [make_page(1, [make_panel(dialogue=["Bye"], visual="Door")])]

        assert compare_pages(old, new)[0].status is ChangeStatus.UNCHANGED

    def test_missing_description_equals_empty(self) -> None:
        """A null description compares equal to an empty one."""
        old = [make_page(1, [make_panel(visual=None)])]
        new = [make_page(1, [make_panel(visual="")])]

        assert compare_pages(old, new)[0].status is ChangeStatus.UNCHANGED

    def test_null_snake_case_falls_back_to_camel_case(self) -> None:
        """A null snake_case key does not hide the camelCase value."""
        old = [
            {
                "page_number": None,
                "pageNumber": 2,
                "panels": [{"visual_description": None, "visualDescription": "x"}],
            }
        ]
        new = [{"pageNumber": 2, "panels": [{"visualDescription": "x"}]}]

        diffs = compare_pages(old, new)

        assert diffs[0].page_number == 2
        assert [p.status for p in diffs[0].panels] == [ChangeStatus.UNCHANGED]

    def test_accepts_models_and_camel_case(self) -> None:
        """Pydantic pages and camelCase mappings are both accepted."""
        old = [PageData.model_validate(make_page(4, [make_panel(visual="Sky")]))]
        new = [{"pageNumber": 4, "panels": [{"visualDescription": "Sky"}]}]

        diffs = compare_pages(old, new)

        assert diffs[0].page_number == 4
        assert diffs[0].status is ChangeStatus.UNCHANGED

    def test_empty_versions(self) -> None:
        """No pages on either side gives no diffs."""
        assert compare_pages([], []) == []


class TestDiffSummary:
    """Test summary text."""

    def test_no_changes(self) -> None:
        """An empty diff says so."""
        assert generate_diff_summary([]) == "No changes"

    def test_plural_new_pages(self) -> None:
        """New pages are pluralized."""
        diffs = compare_pages([], [make_page(1, []), make_page(2, [])])
        assert generate_diff_summary(diffs) == "2 new pages"
