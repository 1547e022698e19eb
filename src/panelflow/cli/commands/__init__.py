"""PanelFlow CLI commands."""

from __future__ import annotations

from panelflow.cli.commands.act_breaks import act_breaks_command
from panelflow.cli.commands.diff import diff_command
from panelflow.cli.commands.formats import formats_command
from panelflow.cli.commands.pacing import pacing_command
from panelflow.cli.commands.rhythm import rhythm_command
from panelflow.cli.commands.scenes import scenes_command
from panelflow.cli.commands.structure import structure_command
from panelflow.cli.commands.wordcount import wordcount_command

__all__ = [
    "act_breaks_command",
    "diff_command",
    "formats_command",
    "pacing_command",
    "rhythm_command",
    "scenes_command",
    "structure_command",
    "wordcount_command",
]
