"""Reveal command: set the collection seed (delayed reveal)."""

from pathlib import Path

import typer

from ..app import app, console
from ..utils import handle_errors, open_collection, persist


@app.command("reveal")
def reveal_command(
    caller: str = typer.Option(..., "--caller", help="Operator identity"),
    state: Path | None = typer.Option(None, "--state", "-s", help="State file"),
    seed: int | None = typer.Option(None, "--seed", help="Fixed entropy seed"),
) -> None:
    """Reveal the collection. Can only happen once."""
    with handle_errors():
        collection, path = open_collection(state, seed)
        collection.reveal(caller)
        persist(collection, path)

    console.print("[green]✓[/green] Collection revealed")
