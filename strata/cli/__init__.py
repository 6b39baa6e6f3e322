"""Command-line interface for Strata."""

from .app import app

__all__ = ["app"]
