import logging

import typer

from gridwright_cli import __version__
from gridwright_cli.commands.layout_cmd import layout
from gridwright_cli.commands.lint_cmd import lint


def _version_callback(value: bool) -> None:
    if value:
        print(f"gridwright {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="gridwright",
    help="Automatic layout for architecture diagrams",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version", callback=_version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json"] = json_output
    if verbose:
        # Library modules only log; the CLI decides where it goes.
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", force=True)


app.command()(layout)
app.command()(lint)
