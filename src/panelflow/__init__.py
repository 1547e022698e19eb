"""PanelFlow: comic script import, versioning and pacing analysis.

PanelFlow reads free-form comic scripts, detects their act, scene and page
structure, compares versions of an issue and scores its pacing, visual
rhythm and scenes.
"""

__version__ = "0.1.0"
__author__ = "PanelFlow Contributors"

# Configuration imports
from .config import PanelFlowSettings, get_logger, get_settings

# Analysis imports
from .analysis import (
    PacingAnalysis,
    analyze_issue_rhythm,
    analyze_issue_scenes,
    analyze_pacing,
    analyze_rhythm,
    get_score_label,
)

# Diff imports
from .diff import compare_pages, compute_line_diff, generate_diff_summary

# Exceptions
from .exceptions import PanelFlowError

# Formatting imports
from .formatting import count_words, parse_markdown, strip_markdown

# Model imports
from .models import ActData, PageData, PanelData, SceneData

# Parser imports
from .parser import detect_script_format, detect_structure, suggest_act_breaks

__all__ = [
    "ActData",
    "PacingAnalysis",
    "PageData",
    "PanelData",
    "PanelFlowError",
    "PanelFlowSettings",
    "SceneData",
    "__version__",
    "analyze_issue_rhythm",
    "analyze_issue_scenes",
    "analyze_pacing",
    "analyze_rhythm",
    "compare_pages",
    "compute_line_diff",
    "count_words",
    "detect_script_format",
    "detect_structure",
    "generate_diff_summary",
    "get_logger",
    "get_score_label",
    "get_settings",
    "parse_markdown",
    "strip_markdown",
    "suggest_act_breaks",
]
