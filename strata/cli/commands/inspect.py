"""Read-only commands: traits and metadata for an item."""

from pathlib import Path

import typer
from rich.table import Table

from ..app import app, console
from ..utils import handle_errors, open_collection


@app.command("traits")
def traits_command(
    item_id: int = typer.Argument(..., help="Item id"),
    state: Path | None = typer.Option(None, "--state", "-s", help="State file"),
) -> None:
    """Show the identifier and derived traits of an item."""
    with handle_errors():
        collection, _ = open_collection(state)
        identifier = collection.get_identifier(item_id)
        vector = collection.trait_vector(item_id)

    table = Table(title=f"{collection.item_name(item_id)} (identifier {identifier})")
    table.add_column("Layer")
    table.add_column("Trait")
    table.add_column("Index", justify="right")
    for layer_index, trait_index in enumerate(vector):
        trait = collection.catalog.trait(layer_index, trait_index)
        name = f"{trait.name} [dim](hidden)[/dim]" if trait.hidden else trait.name
        table.add_row(collection.catalog.layer(layer_index).name, name, str(trait_index))
    console.print(table)


@app.command("metadata")
def metadata_command(
    item_id: int = typer.Argument(..., help="Item id"),
    state: Path | None = typer.Option(None, "--state", "-s", help="State file"),
    decode: bool = typer.Option(False, "--decode", help="Print JSON instead of a data URI"),
) -> None:
    """Print the metadata document of an item."""
    with handle_errors():
        collection, _ = open_collection(state)
        if decode:
            console.print_json(collection.metadata(item_id).decode("utf-8"))
        else:
            typer.echo(collection.token_uri(item_id))
