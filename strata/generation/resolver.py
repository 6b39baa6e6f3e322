"""Trait resolution: identifier + seed -> trait vector.

A pure function of (identifier, seed, catalog, overrides). Nothing is
cached; every metadata or image request recomputes the vector, so the
output must not depend on caller, time or call order.
"""

import logging
from collections.abc import Sequence

from ..core.errors import InvalidTraitSelectionError, NotYetAvailableError
from ..core.models import Layer
from .catalog import Catalog


logger = logging.getLogger(__name__)


def scramble(identifier: int, layer_index: int, seed: int, capacity: int, prime: int) -> int:
    """Layer-specific selection value in [0, capacity)."""
    return (identifier + layer_index + (seed % capacity)) * prime % capacity


def select_trait(layer: Layer, layer_index: int, value: int) -> int:
    """Weighted lottery: index of the trait whose interval contains value.

    Trait j owns [sum(weights[:j]), sum(weights[:j+1])). Zero-weight traits
    own an empty interval and are never selected.

    Raises:
        InvalidTraitSelectionError: value falls past the last interval
    """
    lower = 0
    for trait_index, trait in enumerate(layer.traits):
        upper = lower + trait.weight
        if lower <= value < upper:
            return trait_index
        lower = upper
    raise InvalidTraitSelectionError(layer_index, layer.name, value)


def derive_trait_vector(
    identifier: int,
    seed: int,
    catalog: Catalog,
    capacity: int,
    override: Sequence[int] | None = None,
) -> list[int]:
    """Trait index per layer for one identifier.

    An operator override, when given, is returned verbatim. Otherwise
    each layer runs its lottery in order; a selected trait with a link
    forces the target layer's result, and a forced layer is never rolled.

    Args:
        identifier: Identifier to resolve (already rotated for delayed reveal)
        seed: Collection reveal seed, must be non-zero
        catalog: Layers and link rules
        capacity: Size of the identifier space
        override: Trait vector the operator stored for this item, if any

    Returns:
        List with one trait index per layer

    Raises:
        NotYetAvailableError: seed is 0 (not revealed)
        InvalidTraitSelectionError: a layer's weights do not cover the value
    """
    if seed == 0:
        raise NotYetAvailableError("Collection is not revealed; traits cannot be derived yet")

    if override:
        return list(override)

    layers = catalog.layers
    vector: list[int | None] = [None] * len(layers)

    for i, layer in enumerate(layers):
        if vector[i] is not None:
            continue

        value = scramble(identifier, i, seed, capacity, layer.selection_prime)
        trait_index = select_trait(layer, i, value)
        vector[i] = trait_index

        rule = catalog.link(i, trait_index)
        if rule is not None:
            vector[rule.target_layer_index] = rule.forced_trait_index
            logger.debug(
                f"Identifier {identifier}: {i}/{trait_index} forces "
                f"{rule.target_layer_index}/{rule.forced_trait_index}"
            )

    return vector
