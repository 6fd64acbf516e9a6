from __future__ import annotations

import typer

from portbot import __version__
from portbot.cli.commands.publish import publish
from portbot.cli.commands.render import render


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Publish vcpkg port updates for tagged releases.",
)


app.command()(publish)
app.command()(render)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def main() -> None:
    app()
