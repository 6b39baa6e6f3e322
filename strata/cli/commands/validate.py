"""Validate command: check a collection spec before building it."""

from pathlib import Path

import typer
from rich.markup import escape

from ...core.errors import StrataError
from ...core.models import CollectionSpec
from ...core.storage import MemoryBlobStore
from ...core.randomness import FixedEntropy
from ...generation import build_collection
from ..app import app, console


@app.command("validate")
def validate_command(
    spec_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Collection spec YAML"),
) -> None:
    """Validate a collection spec: images, references, weights and primes."""
    try:
        spec = CollectionSpec.from_yaml(spec_file)
        # Throwaway in-memory build; nothing is written to the real blob store
        collection = build_collection(
            spec, spec_file.parent, MemoryBlobStore(), entropy=FixedEntropy(0)
        )
    except (StrataError, ValueError) as e:
        console.print(f"[red]✗[/red] {spec_file}: {escape(str(e))}")
        raise typer.Exit(1)

    result = collection.validate()
    for issue in result.errors:
        console.print(f"[red]ERROR[/red] {escape(str(issue))}")
    for issue in result.warnings:
        console.print(f"[yellow]WARNING[/yellow] {escape(str(issue))}")

    if not result.valid:
        console.print(f"[red]✗[/red] {len(result.errors)} error(s)")
        raise typer.Exit(1)
    console.print(
        f"[green]✓[/green] {spec.meta.name}: {len(spec.layers)} layers, "
        f"{len(result.warnings)} warning(s)"
    )
