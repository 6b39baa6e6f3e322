"""Init command: build a collection from a spec and save its state."""

from pathlib import Path

import typer
from rich.markup import escape

from ...config import load_config
from ...core.errors import StrataError
from ...core.models import CollectionSpec
from ...core.storage import get_blob_store
from ...generation import build_collection, save_state
from ..app import app, console
from ..utils import entropy_for, state_path_for


@app.command("init")
def init_command(
    spec_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Collection spec YAML"),
    state: Path | None = typer.Option(None, "--state", "-s", help="State file to write"),
    seed: int | None = typer.Option(None, "--seed", help="Fixed entropy seed (reproducible runs)"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing state file"),
) -> None:
    """Upload trait images and create a new collection."""
    config = load_config()
    path = state_path_for(state, config)
    if path.exists() and not force:
        console.print(f"[red]✗[/red] State file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(1)

    try:
        spec = CollectionSpec.from_yaml(spec_file)
        collection = build_collection(
            spec,
            spec_file.parent,
            get_blob_store(config),
            entropy=entropy_for(seed),
        )
    except (StrataError, ValueError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    save_state(collection.state, path)
    status = "revealed" if collection.is_revealed() else "hidden until reveal"
    console.print(
        f"[green]✓[/green] Created '{spec.meta.name}' "
        f"(capacity {spec.meta.capacity}, {status}) -> {path}"
    )
