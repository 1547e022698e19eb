"""CLI command for panelflow structure."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from panelflow.cli.utils.cli_handler import CLIHandler
from panelflow.config import get_logger
from panelflow.parser.structure_detector import (
    detect_structure,
    get_structure_description,
    get_structure_label,
)
from panelflow.parser.structure_models import StructureAnalysis

logger = get_logger(__name__)
console = Console()


def _pages_label(pages: list[int]) -> str:
    if not pages:
        return "no pages"
    if len(pages) == 1:
        return f"page {pages[0]}"
    return f"pages {pages[0]}-{pages[-1]}"


def _build_tree(analysis: StructureAnalysis) -> Tree:
    tree = Tree(f"[bold cyan]{get_structure_label(analysis.suggested_structure)}[/]")
    for act in analysis.acts:
        style = "dim" if act.is_implicit else "bold"
        label = f"[{style}]{escape(act.name)}[/{style}]"
        act_node = tree.add(f"{label} ({_pages_label(act.pages)})")
        for scene in act.scenes:
            details = _pages_label(scene.pages)
            if scene.time_of_day:
                details = f"{scene.time_of_day}, {details}"
            act_node.add(f"{escape(scene.title)} [dim]({details})[/dim]")
    return tree


def structure_command(
    script: Annotated[Path, typer.Argument(help="Path to the comic script")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Detect acts, scenes and pages in a comic script."""
    handler = CLIHandler(console)

    try:
        text = handler.read_script(script)
        analysis = detect_structure(text)
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    logger.info(
        "Detected structure",
        script=str(script),
        structure=analysis.suggested_structure.value,
        acts=len(analysis.acts),
        scenes=analysis.scene_count,
    )

    if json_output:
        payload = dataclasses.asdict(analysis)
        payload["scene_count"] = analysis.scene_count
        payload["description"] = get_structure_description(analysis)
        handler.print_json(payload)
        return

    console.print(_build_tree(analysis))
    console.print(f"\n{get_structure_description(analysis)}")
    console.print(f"Pages detected: {analysis.total_pages}")
