"""CLI commands for Strata."""

from . import (
    config,
    validate,
    init,
    mint,
    reveal,
    override,
    inspect,
)

__all__ = [
    "config",
    "validate",
    "init",
    "mint",
    "reveal",
    "override",
    "inspect",
]
