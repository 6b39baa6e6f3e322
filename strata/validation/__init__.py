"""Shared validation primitives for Strata.

Modules:
    catalog: Weight sums, selection primes, links and override shapes
"""

from .catalog import (
    validate_weight_sum,
    validate_selection_prime,
    validate_link,
    validate_override_shape,
    validate_catalog,
)

__all__ = [
    "validate_weight_sum",
    "validate_selection_prime",
    "validate_link",
    "validate_override_shape",
    "validate_catalog",
]
