"""Data models for Strata.

This package contains all Pydantic models used across the system:
- catalog.py: Layers, traits and linked-trait rules
- collection.py: The mutable collection state threaded through components
- spec.py: YAML collection specs used to build a collection
- validation.py: Validation issues and results
"""

from .catalog import (
    Trait,
    Layer,
    LinkRule,
)
from .collection import (
    CollectionSettings,
    PoolState,
    CollectionState,
)
from .spec import (
    CollectionMeta,
    TraitSpec,
    LayerSpec,
    LinkSpec,
    CollectionSpec,
)
from .validation import (
    Severity,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Catalog
    "Trait",
    "Layer",
    "LinkRule",
    # State
    "CollectionSettings",
    "PoolState",
    "CollectionState",
    # Spec
    "CollectionMeta",
    "TraitSpec",
    "LayerSpec",
    "LinkSpec",
    "CollectionSpec",
    # Validation
    "Severity",
    "ValidationIssue",
    "ValidationResult",
]
