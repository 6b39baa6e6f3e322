"""Saving and loading collection state as JSON."""

import logging
from pathlib import Path

from pydantic import ValidationError

from ..core.errors import InvalidInputError
from ..core.models import CollectionState


logger = logging.getLogger(__name__)


def save_state(state: CollectionState, path: Path | str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w") as f:
        f.write(state.model_dump_json(indent=2))
    tmp.replace(path)
    logger.debug(f"Saved collection state to {path}")
    return path


def load_state(path: Path | str) -> CollectionState:
    """Load collection state.

    Raises:
        InvalidInputError: File is missing or does not hold a valid state
    """
    path = Path(path)
    if not path.exists():
        raise InvalidInputError(f"State file not found: {path}")
    with open(path) as f:
        raw = f.read()
    try:
        return CollectionState.model_validate_json(raw)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid state file {path}: {e}") from e
