"""Text formatting helpers for PanelFlow."""

from __future__ import annotations

from .markdown import (
    WORD_COUNT_ERROR,
    WORD_COUNT_WARNING,
    MarkdownSegment,
    ParsedMarkdown,
    PdfTextRun,
    PdfTextStyle,
    SegmentType,
    WordCountSeverity,
    WrapResult,
    count_words,
    escape_markdown,
    find_in_markdown,
    get_word_count_severity,
    is_markdown_balanced,
    markdown_to_clipboard,
    markdown_to_html,
    parse_markdown,
    parse_markdown_for_pdf,
    replace_in_markdown,
    segments_to_markdown,
    strip_markdown,
    unescape_markdown,
    wrap_selection,
)

__all__ = [
    "WORD_COUNT_ERROR",
    "WORD_COUNT_WARNING",
    "MarkdownSegment",
    "ParsedMarkdown",
    "PdfTextRun",
    "PdfTextStyle",
    "SegmentType",
    "WordCountSeverity",
    "WrapResult",
    "count_words",
    "escape_markdown",
    "find_in_markdown",
    "get_word_count_severity",
    "is_markdown_balanced",
    "markdown_to_clipboard",
    "markdown_to_html",
    "parse_markdown",
    "parse_markdown_for_pdf",
    "replace_in_markdown",
    "segments_to_markdown",
    "strip_markdown",
    "unescape_markdown",
    "wrap_selection",
]
