"""Lint a diagram graph and its computed layout."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from gridwright_cli.utils import handle_error

if TYPE_CHECKING:
    from gridwright.linter import LintWarning

console = Console()

SEVERITY_STYLES = {"error": "bold red", "warning": "yellow", "info": "blue"}


def _findings_table(name: str, warnings: list[LintWarning]) -> Table:
    table = Table(title=f"Layout lint: {name}", show_lines=True)
    table.add_column("Severity", width=9)
    table.add_column("Rule", style="cyan")
    table.add_column("At")
    table.add_column("Problem")
    table.add_column("Fix")
    # Errors first, then by rule.
    order = {"error": 0, "warning": 1, "info": 2}
    for w in sorted(warnings, key=lambda w: (order.get(w.severity, 3), w.rule)):
        severity = Text(w.severity, style=SEVERITY_STYLES.get(w.severity, ""))
        table.add_row(severity, w.rule, w.component or "-", w.message, w.recommendation)
    return table


def lint(
    ctx: typer.Context,
    graph_file: Annotated[Path, typer.Argument(help="Diagram graph JSON or YAML file", exists=True)],
    output: Annotated[str, typer.Option(help="Output format: text, json")] = "text",
    strict: Annotated[bool, typer.Option(help="Fail on warnings too")] = False,
) -> None:
    """Check the graph for structural problems and its layout for collisions."""
    try:
        from gridwright import DiagramGraph
        from gridwright.engine import layout_diagram
        from gridwright.linter import lint_graph, lint_layout

        graph = DiagramGraph.from_file(graph_file)
        warnings = lint_graph(graph) + lint_layout(layout_diagram(graph))
        counts = Counter(w.severity for w in warnings)

        if output == "json":
            typer.echo(json.dumps([asdict(w) for w in warnings], indent=2))
        elif not warnings:
            console.print(f"[green][PASS][/green] No layout problems detected in {graph.system_name or graph_file.stem}")
        else:
            console.print(_findings_table(graph.system_name or graph_file.stem, warnings))
            console.print(
                f"\n[red]{counts['error']} error(s)[/red], [yellow]{counts['warning']} warning(s)[/yellow]"
            )

        if counts["error"] or (strict and counts["warning"]):
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
