"""Typer application and global options."""

import logging

import typer
from rich.console import Console

from .. import __version__


app = typer.Typer(
    name="strata",
    help="Build, mint, reveal and render weighted generative collections.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"strata {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register commands
from .commands import (  # noqa: E402,F401
    config,
    validate,
    init,
    mint,
    reveal,
    override,
    inspect,
)
