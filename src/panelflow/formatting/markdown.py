"""Markdown emphasis utilities for panel text.

Handles the three-weight emphasis subset used throughout script text:
``*italic*``, ``**bold**`` and ``***bold-italic***``. Every feature that
counts, searches, renders or exports panel text goes through these helpers
so that formatting markers are treated the same way everywhere.

Malformed input never raises: a marker without a matching close is kept as
literal text.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

# Bold-italic must be tried before bold, and bold before italic.
EMPHASIS_PATTERN = re.compile(r"\*\*\*(.+?)\*\*\*|\*\*(.+?)\*\*|\*(.+?)\*")
# Runs whose content does not start or end with another marker.
WELL_FORMED_RUN = re.compile(
    r"\*\*\*[^*]+\*\*\*|\*\*[^*]+\*\*|(?<!\*)\*[^*]+\*(?!\*)"
)


class SegmentType(str, Enum):
    """Emphasis applied to a run of text."""

    TEXT = "text"
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold-italic"


class WordCountSeverity(str, Enum):
    """Length rating for the words in a single panel."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


WORD_COUNT_WARNING = 25
WORD_COUNT_ERROR = 35

_MARKERS = {
    SegmentType.TEXT: "",
    SegmentType.BOLD: "**",
    SegmentType.ITALIC: "*",
    SegmentType.BOLD_ITALIC: "***",
}


@dataclass
class MarkdownSegment:
    """A run of text sharing one emphasis type."""

    type: SegmentType
    content: str


@dataclass
class ParsedMarkdown:
    """Segments of a markdown string with its plain text and word count."""

    segments: list[MarkdownSegment] = field(default_factory=list)
    plain_text: str = ""
    word_count: int = 0


@dataclass
class WrapResult:
    """Text after toggling a wrapper plus the adjusted selection."""

    text: str
    new_start: int
    new_end: int


@dataclass
class PdfTextStyle:
    """Font flags for a PDF text run."""

    bold: bool = False
    italic: bool = False


@dataclass
class PdfTextRun:
    """Text rendered with a single font style by the page layout exporter."""

    text: str
    style: PdfTextStyle


def _iter_segments(text: str) -> Iterator[MarkdownSegment]:
    last_index = 0
    for match in EMPHASIS_PATTERN.finditer(text):
        if match.start() > last_index:
            yield MarkdownSegment(SegmentType.TEXT, text[last_index : match.start()])

        bold_italic, bold, italic = match.groups()
        if bold_italic is not None:
            yield MarkdownSegment(SegmentType.BOLD_ITALIC, bold_italic)
        elif bold is not None:
            yield MarkdownSegment(SegmentType.BOLD, bold)
        else:
            yield MarkdownSegment(SegmentType.ITALIC, italic)

        last_index = match.end()

    if last_index < len(text):
        yield MarkdownSegment(SegmentType.TEXT, text[last_index:])


def _count_plain_words(plain_text: str) -> int:
    return len(plain_text.split())


def parse_markdown(text: str) -> ParsedMarkdown:
    """Parse markdown text into emphasis segments.

    Example:
        >>> [s.content for s in parse_markdown("I **love** this").segments]
        ['I ', 'love', ' this']

    Args:
        text: Text possibly containing ``*``, ``**`` or ``***`` markers

    Returns:
        Parsed segments with the marker-free plain text and its word count
    """
    if not text:
        return ParsedMarkdown()

    segments = list(_iter_segments(text))
    plain_text = "".join(segment.content for segment in segments)
    return ParsedMarkdown(
        segments=segments,
        plain_text=plain_text,
        word_count=_count_plain_words(plain_text),
    )


def strip_markdown(text: str) -> str:
    """Remove emphasis markers, returning plain text only."""
    if not text:
        return ""
    return parse_markdown(text).plain_text


def count_words(text: str | None) -> int:
    """Count words in text, ignoring emphasis markers."""
    if not text:
        return 0
    return parse_markdown(text).word_count


def segments_to_markdown(segments: Iterable[MarkdownSegment]) -> str:
    """Convert segments back to a markdown string."""
    parts = []
    for segment in segments:
        marker = _MARKERS.get(SegmentType(segment.type), "")
        parts.append(f"{marker}{segment.content}{marker}")
    return "".join(parts)


def wrap_selection(text: str, start: int, end: int, wrapper: str) -> WrapResult:
    """Wrap a selection with ``*`` or ``**``, or unwrap it if already wrapped.

    Args:
        text: Full text being edited
        start: Selection start offset
        end: Selection end offset (exclusive)
        wrapper: Either ``"*"`` or ``"**"``

    Returns:
        New text and the selection offsets that cover the same words
    """
    if wrapper not in {"*", "**"}:
        raise ValueError(f"Unsupported wrapper: {wrapper!r}")

    if start == end or start < 0 or end > len(text):
        return WrapResult(text, start, end)

    before = text[:start]
    selected = text[start:end]
    after = text[end:]
    size = len(wrapper)

    if before.endswith(wrapper) and after.startswith(wrapper):
        return WrapResult(
            before[:-size] + selected + after[size:],
            start - size,
            end - size,
        )

    if (
        selected.startswith(wrapper)
        and selected.endswith(wrapper)
        and len(selected) > size * 2
    ):
        unwrapped = selected[size:-size]
        return WrapResult(before + unwrapped + after, start, start + len(unwrapped))

    return WrapResult(
        before + wrapper + selected + wrapper + after,
        start,
        end + size * 2,
    )


def is_markdown_balanced(text: str) -> bool:
    """Check that every ``*``, ``**`` and ``***`` marker has a partner.

    Escaped asterisks are ignored. A run only counts when both markers have
    the same width, so ``**bold*`` and a bare ``***`` are unbalanced.
    """
    if not text:
        return True

    remaining = WELL_FORMED_RUN.sub("", text.replace("\\*", ""))
    return "*" not in remaining


def escape_markdown(text: str) -> str:
    """Escape asterisks so they are kept as literal characters."""
    if not text:
        return ""
    return text.replace("*", "\\*")


def unescape_markdown(text: str) -> str:
    """Turn ``\\*`` back into ``*``."""
    if not text:
        return ""
    return text.replace("\\*", "*")


def find_in_markdown(
    text: str, search_term: str, case_sensitive: bool = False
) -> list[int]:
    """Find a term in the plain text of a markdown string.

    Positions are offsets into the marker-free text. Overlapping matches
    are all reported.
    """
    if not text or not search_term:
        return []

    plain_text = strip_markdown(text)
    haystack = plain_text if case_sensitive else plain_text.lower()
    needle = search_term if case_sensitive else search_term.lower()

    positions = []
    pos = haystack.find(needle)
    while pos != -1:
        positions.append(pos)
        pos = haystack.find(needle, pos + 1)
    return positions


def _group_runs(segments: list[MarkdownSegment]) -> list[list[MarkdownSegment]]:
    runs: list[list[MarkdownSegment]] = []
    for segment in segments:
        if runs and runs[-1][0].type == segment.type:
            runs[-1].append(segment)
        else:
            runs.append([segment])
    return runs


def replace_in_markdown(
    text: str,
    search_term: str,
    replacement: str,
    case_sensitive: bool = False,
    replace_all: bool = False,
) -> str:
    """Replace text inside a markdown string while keeping its formatting.

    Matching happens on segment contents, so markers are never part of a
    match. A match that straddles two adjacent segments of the same type is
    also replaced; those segments are merged into one.

    Args:
        text: Markdown text to edit
        search_term: Text to look for
        replacement: Replacement text (inserted literally)
        case_sensitive: Match case exactly when True
        replace_all: Replace every occurrence instead of only the first

    Returns:
        The edited markdown string, or ``text`` unchanged if nothing matched
    """
    if not text or not search_term:
        return text

    pattern = re.compile(
        re.escape(search_term), 0 if case_sensitive else re.IGNORECASE
    )
    count = 0 if replace_all else 1

    def substitute(content: str) -> str:
        return pattern.sub(lambda _match: replacement, content, count=count)

    result: list[MarkdownSegment] = []
    replaced = False

    for run in _group_runs(parse_markdown(text).segments):
        if replaced and not replace_all:
            result.extend(run)
            continue

        if any(pattern.search(segment.content) for segment in run):
            for segment in run:
                if (replaced and not replace_all) or not pattern.search(
                    segment.content
                ):
                    result.append(segment)
                    continue
                result.append(
                    MarkdownSegment(segment.type, substitute(segment.content))
                )
                replaced = True
            continue

        joined = "".join(segment.content for segment in run)
        if pattern.search(joined):
            result.append(MarkdownSegment(run[0].type, substitute(joined)))
            replaced = True
        else:
            result.extend(run)

    if not replaced:
        return text
    return segments_to_markdown(result)


def get_word_count_severity(
    word_count: int,
    warning: int = WORD_COUNT_WARNING,
    error: int = WORD_COUNT_ERROR,
) -> WordCountSeverity:
    """Rate a panel's word count against the length thresholds."""
    if word_count >= error:
        return WordCountSeverity.ERROR
    if word_count >= warning:
        return WordCountSeverity.WARNING
    return WordCountSeverity.OK


def parse_markdown_for_pdf(text: str) -> list[PdfTextRun]:
    """Split markdown into styled runs for sequential PDF rendering."""
    if not text:
        return []

    runs = []
    for segment in parse_markdown(text).segments:
        style = PdfTextStyle(
            bold=segment.type in {SegmentType.BOLD, SegmentType.BOLD_ITALIC},
            italic=segment.type in {SegmentType.ITALIC, SegmentType.BOLD_ITALIC},
        )
        runs.append(PdfTextRun(segment.content, style))
    return runs


def markdown_to_clipboard(text: str) -> str:
    """Plain-text clipboard representation."""
    return strip_markdown(text)


def markdown_to_html(text: str) -> str:
    """Render markdown emphasis as escaped HTML."""
    if not text:
        return ""

    parts = []
    for segment in parse_markdown(text).segments:
        content = html.escape(segment.content, quote=True)
        if segment.type == SegmentType.BOLD:
            parts.append(f"<strong>{content}</strong>")
        elif segment.type == SegmentType.ITALIC:
            parts.append(f"<em>{content}</em>")
        elif segment.type == SegmentType.BOLD_ITALIC:
            parts.append(f"<strong><em>{content}</em></strong>")
        else:
            parts.append(content)
    return "".join(parts)
