"""Mint command: create items and allocate their identifiers."""

from pathlib import Path

import typer

from ..app import app, console
from ..utils import handle_errors, open_collection, persist


@app.command("mint")
def mint_command(
    recipient: str = typer.Option(..., "--to", help="Owner of the new items"),
    count: int = typer.Option(1, "--count", "-n", help="Number of items"),
    caller: str | None = typer.Option(None, "--caller", help="Requesting identity (default: recipient)"),
    state: Path | None = typer.Option(None, "--state", "-s", help="State file"),
    seed: int | None = typer.Option(None, "--seed", help="Fixed entropy seed"),
) -> None:
    """Mint items to a recipient."""
    with handle_errors():
        collection, path = open_collection(state, seed)
        item_ids = collection.mint(caller or recipient, recipient, count)
        persist(collection, path)

    console.print(
        f"[green]✓[/green] Minted {len(item_ids)} item(s) to {recipient}: "
        f"{item_ids[0]}..{item_ids[-1]} ({collection.pool.remaining} remaining)"
    )
