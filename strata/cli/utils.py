"""Helpers shared by CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.markup import escape

from ..config import StrataConfig, load_config
from ..core.errors import StrataError
from ..core.randomness import EntropySource, EnvironmentEntropy, FixedEntropy
from ..core.storage import get_blob_store
from ..generation import Collection, load_state, save_state
from .app import console


def entropy_for(seed: int | None) -> EntropySource:
    """FixedEntropy for reproducible runs, EnvironmentEntropy otherwise."""
    if seed is None:
        return EnvironmentEntropy()
    return FixedEntropy(seed)


def state_path_for(state: Path | None, config: StrataConfig) -> Path:
    return state or Path(config.collection.state_file)


def open_collection(
    state: Path | None,
    seed: int | None = None,
    config: StrataConfig | None = None,
) -> tuple[Collection, Path]:
    config = config or load_config()
    path = state_path_for(state, config)
    collection = Collection(
        load_state(path),
        get_blob_store(config),
        entropy_for(seed),
        canvas=(config.render.canvas_width, config.render.canvas_height),
        name_template=config.collection.name_template,
    )
    return collection, path


@contextmanager
def handle_errors() -> Iterator[None]:
    """Print Strata errors in red and exit with status 1."""
    try:
        yield
    except StrataError as e:
        console.print(f"[red]✗[/red] {type(e).__name__}: {escape(str(e))}")
        raise typer.Exit(1)


def persist(collection: Collection, path: Path) -> None:
    save_state(collection.state, path)
