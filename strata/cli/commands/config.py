"""Config command: show or change user configuration."""

import typer
from rich.markup import escape
from rich.table import Table

from ...config import ConfigError, config_path, load_config, save_config, set_config_value
from ..app import app, console


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="show | set"),
    key: str | None = typer.Argument(None, help="section.field, for set"),
    value: str | None = typer.Argument(None, help="New value, for set"),
) -> None:
    """Show or change configuration."""
    if action == "show":
        config = load_config()
        for section_name, title in (
            ("storage", "Storage"),
            ("render", "Render"),
            ("collection", "Collection"),
        ):
            table = Table(title=title, show_header=False)
            section = getattr(config, section_name)
            for field_name, field_value in section.model_dump().items():
                table.add_row(f"{section_name}.{field_name}", str(field_value))
            console.print(table)
        console.print(f"[dim]Config file: {config_path()}[/dim]")
        return

    if action == "set":
        if key is None or value is None:
            console.print("[red]✗[/red] Usage: strata config set KEY VALUE")
            raise typer.Exit(1)
        try:
            config = set_config_value(load_config(), key, value)
        except ConfigError as e:
            console.print(f"[red]✗[/red] {escape(str(e))}")
            raise typer.Exit(1)
        path = save_config(config)
        console.print(f"[green]✓[/green] {key} = {value} ({path})")
        return

    console.print(f"[red]✗[/red] Unknown action: {action}")
    raise typer.Exit(1)
