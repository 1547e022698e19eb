"""Comic script structure and format detection for PanelFlow."""

from __future__ import annotations

from .format_detector import (
    FORMAT_PATTERNS,
    DetectedFormat,
    ExtractedPage,
    FormatPattern,
    detect_script_format,
    extract_pages_with_format,
    get_best_format,
    get_confidence_label,
)
from .numbering import word_to_number
from .structure_detector import (
    ScanState,
    create_flat_structure,
    detect_structure,
    get_structure_description,
    get_structure_label,
    scan_line,
    suggest_act_breaks,
)
from .structure_models import (
    ActBreak,
    DetectedAct,
    DetectedScene,
    StructureAnalysis,
    StructureKind,
)

__all__ = [
    "FORMAT_PATTERNS",
    "ActBreak",
    "DetectedAct",
    "DetectedFormat",
    "DetectedScene",
    "ExtractedPage",
    "FormatPattern",
    "ScanState",
    "StructureAnalysis",
    "StructureKind",
    "create_flat_structure",
    "detect_script_format",
    "detect_structure",
    "extract_pages_with_format",
    "get_best_format",
    "get_confidence_label",
    "get_structure_description",
    "get_structure_label",
    "scan_line",
    "suggest_act_breaks",
    "word_to_number",
]
