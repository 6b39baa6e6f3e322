"""Override command: pin an identifier to an explicit trait vector."""

from pathlib import Path

import typer

from ..app import app, console
from ..utils import handle_errors, open_collection, persist


def parse_vector(raw: str) -> list[int]:
    """'0,2,1' -> [0, 2, 1]; '' -> []."""
    raw = raw.strip()
    if not raw:
        return []
    try:
        return [int(part) for part in raw.split(",")]
    except ValueError:
        raise typer.BadParameter(f"Expected comma-separated integers, got '{raw}'") from None


@app.command("override")
def override_command(
    identifier: int = typer.Argument(..., help="Allocated identifier"),
    vector: str = typer.Argument(..., help="Trait indices, comma-separated; '' clears"),
    caller: str = typer.Option(..., "--caller", help="Operator identity"),
    state: Path | None = typer.Option(None, "--state", "-s", help="State file"),
) -> None:
    """Set or clear the trait override for an identifier."""
    traits = parse_vector(vector)
    with handle_errors():
        collection, path = open_collection(state)
        collection.set_override(caller, identifier, traits)
        persist(collection, path)

    if traits:
        console.print(f"[green]✓[/green] Identifier {identifier} -> {traits}")
    else:
        console.print(f"[green]✓[/green] Cleared override for identifier {identifier}")
