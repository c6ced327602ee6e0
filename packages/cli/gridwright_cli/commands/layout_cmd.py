"""Lay out a diagram graph and emit the positioned JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from gridwright_cli.utils import handle_error

console = Console()


def layout(
    ctx: typer.Context,
    graph_file: Annotated[Path, typer.Argument(help="Diagram graph JSON or YAML file", exists=True)],
    mode: Annotated[str, typer.Option("--mode", "-m", help="Layout mode: auto, flat, hierarchical")] = "auto",
    viewport: Annotated[
        str | None, typer.Option("--viewport", help="Size preset: desktop, tablet, mobile")
    ] = None,
    title: Annotated[str | None, typer.Option("--title", help="Diagram title (defaults to systemName)")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write positioned JSON here")] = None,
) -> None:
    """Position components, route connectors and place labels."""
    try:
        from gridwright import DiagramGraph
        from gridwright.engine import layout_diagram

        graph = DiagramGraph.from_file(graph_file)
        diagram = layout_diagram(graph, title=title, viewport=viewport, mode=mode)
        payload = diagram.to_json()

        if output is None:
            print(payload)
            return

        output.write_text(payload)
        json_mode = ctx.obj.get("json", False) if ctx.obj else False
        if json_mode:
            print(
                json.dumps(
                    {
                        "output": str(output),
                        "mode": diagram.mode,
                        "width": diagram.width,
                        "height": diagram.height,
                        "components": len(diagram.components),
                        "connections": len(diagram.connections),
                        "events": len(diagram.events),
                    }
                )
            )
            return

        table = Table(title=f"Layout: {diagram.system_name or graph_file.stem}")
        table.add_column("Property", style="cyan")
        table.add_column("Value")
        table.add_row("Mode", diagram.mode)
        table.add_row("Canvas", f"{diagram.width:g} x {diagram.height:g}")
        table.add_row("Components", str(len(diagram.components)))
        table.add_row("Groups", str(len(diagram.groups)))
        table.add_row("Connections", str(len(diagram.connections)))
        table.add_row("Healing events", str(len(diagram.events)))
        console.print(table)
        console.print(f"[green]Written to {output}[/green]")

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
