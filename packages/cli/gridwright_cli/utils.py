"""Error reporting shared by every command."""

from __future__ import annotations

import json
from typing import NoReturn

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

err_console = Console(stderr=True)


def describe_error(e: Exception) -> str:
    """One line saying what went wrong with the input graph or options."""
    if isinstance(e, FileNotFoundError):
        return f"File not found: {e.filename or e}"
    if isinstance(e, yaml.YAMLError):
        return f"Invalid YAML: {e}"
    if isinstance(e, ValidationError):
        first = e.errors()[0]
        where = ".".join(str(part) for part in first["loc"]) or "graph"
        return f"Invalid graph: {e.error_count()} problem(s), first at {where}: {first['msg']}"
    if isinstance(e, ValueError):
        return str(e)
    return f"{type(e).__name__}: {e}"


def handle_error(ctx: typer.Context, e: Exception) -> NoReturn:
    """Report ``e`` as text or ``{"error": ...}`` JSON and exit 1."""
    opts = ctx.obj or {}
    msg = describe_error(e)
    if opts.get("json"):
        typer.echo(json.dumps({"error": msg}))
    else:
        err_console.print(f"[red]Error:[/red] {msg}")
    if opts.get("verbose"):
        err_console.print_exception()
    raise typer.Exit(1)
