"""Page and panel marker format detection for comic script import.

Writers mark pages in many ways (``PAGE 1``, ``PAGE ONE``, ``Pg. 1``,
``[PAGE 1]``, ``--- PAGE 1 ---``...). This module scores each known
convention against a script and splits the script into pages using the best
one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from re import Pattern

from panelflow.config import get_logger
from panelflow.parser.numbering import word_to_number

logger = get_logger(__name__)


@dataclass(frozen=True)
class FormatPattern:
    """A page/panel marker convention."""

    name: str
    description: str
    page_regex: Pattern[str]
    panel_regex: Pattern[str]
    confidence: int
    examples: tuple[str, ...] = ()


@dataclass
class DetectedFormat:
    """How well a format pattern matches a script."""

    pattern: FormatPattern
    page_matches: int
    panel_matches: int
    confidence: int
    sample_matches: list[str] = field(default_factory=list)


@dataclass
class ExtractedPage:
    """One page of script text split out by a format pattern."""

    page_number: int
    content: str
    start_line: int
    panel_count: int = 0


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


_SPELLED_PAGES = (
    r"ONE|TWO|THREE|FOUR|FIVE|SIX|SEVEN|EIGHT|NINE|TEN|ELEVEN|TWELVE|THIRTEEN|"
    r"FOURTEEN|FIFTEEN|SIXTEEN|SEVENTEEN|EIGHTEEN|NINETEEN|TWENTY|"
    r"TWENTY[- ]?ONE|TWENTY[- ]?TWO"
)

FORMAT_PATTERNS: list[FormatPattern] = [
    FormatPattern(
        name="standard",
        description="PAGE 1, PAGE 2, etc.",
        page_regex=_compile(r"^\s*PAGE\s+(\d+)\s*(?:\([^)]*\))?\s*[:.]?\s*$"),
        panel_regex=_compile(r"^\s*PANEL\s+(\d+)\s*[:.]?"),
        confidence=100,
        examples=("PAGE 1", "PAGE 2 (right)", "PAGE 12:"),
    ),
    FormatPattern(
        name="spelled-out",
        description="PAGE ONE, PAGE TWO, etc.",
        page_regex=_compile(rf"^\s*PAGE\s+({_SPELLED_PAGES})\s*[:.]?\s*$"),
        panel_regex=_compile(
            r"^\s*PANEL\s+(ONE|TWO|THREE|FOUR|FIVE|SIX|SEVEN|EIGHT|NINE|TEN)\s*[:.]?"
        ),
        confidence=95,
        examples=("PAGE ONE", "PAGE TWELVE", "PANEL THREE:"),
    ),
    FormatPattern(
        name="abbreviated",
        description="Pg. 1, Pg 2, P1, P2",
        page_regex=_compile(r"^\s*(?:Pg\.?|P)\s*(\d+)\s*[:.]?\s*$"),
        panel_regex=_compile(r"^\s*(?:Pnl\.?|Panel)\s*(\d+)\s*[:.]?"),
        confidence=85,
        examples=("Pg. 1", "Pg 2", "P1", "P12"),
    ),
    FormatPattern(
        name="bracketed",
        description="[PAGE 1], [Page 2]",
        page_regex=_compile(r"^\[\s*PAGE\s+(\d+)\s*\]\s*$"),
        panel_regex=_compile(r"^\[\s*PANEL\s+(\d+)\s*\]"),
        confidence=90,
        examples=("[PAGE 1]", "[Page 12]", "[PANEL 3]"),
    ),
    FormatPattern(
        name="dashed",
        description="--- PAGE 1 ---",
        page_regex=_compile(r"^\s*[-=]{2,}\s*PAGE\s+(\d+)\s*[-=]{2,}\s*$"),
        panel_regex=_compile(r"^\s*[-=]{2,}\s*PANEL\s+(\d+)\s*[-=]{2,}"),
        confidence=80,
        examples=("--- PAGE 1 ---", "=== Page 12 ==="),
    ),
    FormatPattern(
        name="hashmarks",
        description="## PAGE 1, ### Panel 1",
        page_regex=_compile(r"^\s*#{1,3}\s*PAGE\s+(\d+)\s*$"),
        panel_regex=_compile(r"^\s*#{1,4}\s*PANEL\s+(\d+)"),
        confidence=75,
        examples=("## PAGE 1", "### Panel 3"),
    ),
    FormatPattern(
        name="colon-prefix",
        description="Page: 1, Panel: 3",
        page_regex=_compile(r"^\s*PAGE\s*:\s*(\d+)\s*$"),
        panel_regex=_compile(r"^\s*PANEL\s*:\s*(\d+)"),
        confidence=85,
        examples=("Page: 1", "PAGE: 12", "Panel: 3"),
    ),
    FormatPattern(
        name="screenplay-style",
        description="INT. or EXT. scene headers (treats each as a page)",
        page_regex=_compile(
            r"^\s*(INT\.|EXT\.|INT/EXT\.)\s+[A-Z][^-\n]*(?:\s*-\s*[A-Z][^\n]*)?\s*$"
        ),
        panel_regex=_compile(r"^\s*(\d+)\s*[:.)]"),
        confidence=70,
        examples=("INT. APARTMENT - DAY", "EXT. ROOFTOP - NIGHT"),
    ),
]


def detect_script_format(script_text: str) -> list[DetectedFormat]:
    """Score every known format against a script.

    Confidence is the pattern's base confidence plus 5 per page marker
    found (at most +30), capped at 100.

    Returns:
        Matching formats, most confident first
    """
    lines = (script_text or "").split("\n")
    results: list[DetectedFormat] = []

    for pattern in FORMAT_PATTERNS:
        page_matches = 0
        panel_matches = 0
        samples: list[str] = []

        for line in lines:
            if pattern.page_regex.match(line):
                page_matches += 1
                if len(samples) < 3:
                    samples.append(line.strip())
            if pattern.panel_regex.match(line):
                panel_matches += 1

        if page_matches:
            bonus = min(page_matches * 5, 30)
            results.append(
                DetectedFormat(
                    pattern=pattern,
                    page_matches=page_matches,
                    panel_matches=panel_matches,
                    confidence=min(pattern.confidence + bonus, 100),
                    sample_matches=samples,
                )
            )

    # stable sort keeps table order for ties
    results.sort(key=lambda detected: detected.confidence, reverse=True)
    return results


def get_best_format(script_text: str) -> DetectedFormat | None:
    """Return the most confident format, or None when nothing matches."""
    formats = detect_script_format(script_text)
    return formats[0] if formats else None


def extract_pages_with_format(
    script_text: str, pattern: FormatPattern
) -> list[ExtractedPage]:
    """Split a script into pages at each page marker of ``pattern``.

    Text before the first marker is dropped. Markers without a readable
    number (screenplay sluglines) are numbered by position.
    """
    pages: list[ExtractedPage] = []
    current: tuple[int, int, list[str]] | None = None

    def flush() -> None:
        if current is None:
            return
        number, start_line, page_lines = current
        pages.append(
            ExtractedPage(
                page_number=number,
                content="\n".join(page_lines),
                start_line=start_line,
                panel_count=sum(
                    1 for text in page_lines if pattern.panel_regex.match(text)
                ),
            )
        )

    for index, line in enumerate((script_text or "").split("\n")):
        match = pattern.page_regex.match(line)
        if match:
            flush()
            number = word_to_number(match.group(1)) or len(pages) + 1
            current = (number, index, [line])
        elif current is not None:
            current[2].append(line)

    flush()

    logger.debug("Extracted pages", format=pattern.name, pages=len(pages))
    return pages


def get_confidence_label(confidence: int) -> str:
    """Human readable confidence bucket."""
    if confidence >= 90:
        return "High confidence"
    if confidence >= 70:
        return "Good match"
    if confidence >= 50:
        return "Possible match"
    return "Low confidence"
