"""Catalog checks.

Trait derivation only discovers a layer whose weights undersum the
identifier space when an unlucky value falls past the last interval. These
checks find such problems up front so the operator can fix them before
the collection is sealed.

Catalog.set_layer already refuses even and duplicate selection primes, so
the SELECTION_PRIME error and DUPLICATE_PRIME checks only fire for state
loaded from disk or edited by hand.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..core.models import Layer, LinkRule, Severity, ValidationIssue, ValidationResult

if TYPE_CHECKING:
    from ..generation.catalog import Catalog


def validate_weight_sum(layer: Layer, capacity: int) -> str | None:
    """Error message if the layer's weights do not cover 0..capacity-1."""
    total = layer.total_weight
    if total < capacity:
        return f"trait weights sum to {total}, need at least {capacity}"
    return None


def validate_selection_prime(prime: int) -> str | None:
    if prime <= 0 or prime % 2 == 0:
        return f"selection prime {prime} must be a positive odd integer"
    return None


def validate_link(rule: LinkRule, layers: Sequence[Layer]) -> str | None:
    if rule.target_layer_index == rule.layer_index:
        return "link targets its own layer"
    for layer_index, trait_index in (
        (rule.layer_index, rule.trait_index),
        (rule.target_layer_index, rule.forced_trait_index),
    ):
        if not 0 <= layer_index < len(layers):
            return f"layer {layer_index} does not exist"
        if not 0 <= trait_index < layers[layer_index].trait_count:
            return f"trait {layer_index}/{trait_index} does not exist"
    return None


def validate_override_shape(vector: Sequence[int], layers: Sequence[Layer]) -> str | None:
    """Error message if vector is not one existing trait index per layer."""
    if len(vector) != len(layers):
        return f"override has {len(vector)} entries, expected {len(layers)}"
    for layer_index, trait_index in enumerate(vector):
        if not 0 <= trait_index < layers[layer_index].trait_count:
            return f"layer {layer_index} has no trait {trait_index}"
    return None


def validate_catalog(catalog: Catalog, capacity: int) -> ValidationResult:
    """Check every layer, link and stored override of a catalog."""
    result = ValidationResult()
    layers = catalog.layers

    def add(severity: Severity, category: str, location: str, message: str) -> None:
        result.issues.append(
            ValidationIssue(severity=severity, category=category, location=location, message=message)
        )

    if not layers:
        add(Severity.WARNING, "EMPTY_CATALOG", "catalog", "no layers defined")

    seen_primes: dict[int, str] = {}
    for layer_index, layer in enumerate(layers):
        location = f"layers[{layer_index}] '{layer.name}'"

        if layer.trait_count == 0:
            add(Severity.ERROR, "EMPTY_LAYER", location, "layer has no traits")
        elif (msg := validate_weight_sum(layer, capacity)) is not None:
            add(Severity.ERROR, "WEIGHT_UNDERSUM", location, msg)

        if (msg := validate_selection_prime(layer.selection_prime)) is not None:
            add(Severity.ERROR, "SELECTION_PRIME", location, msg)
        elif math.gcd(layer.selection_prime, capacity) != 1:
            add(
                Severity.WARNING,
                "SELECTION_PRIME",
                location,
                f"selection prime {layer.selection_prime} shares a factor with capacity "
                f"{capacity}; some trait intervals may be unreachable",
            )

        if layer.selection_prime in seen_primes:
            add(
                Severity.ERROR,
                "DUPLICATE_PRIME",
                location,
                f"selection prime {layer.selection_prime} also used by {seen_primes[layer.selection_prime]}",
            )
        else:
            seen_primes[layer.selection_prime] = location

        for trait_index, trait in enumerate(layer.traits):
            if trait.weight == 0:
                add(
                    Severity.WARNING,
                    "ZERO_WEIGHT",
                    f"{location} trait {trait_index} '{trait.name}'",
                    "weight 0; only reachable through links or overrides",
                )

    for rule in catalog.state.links:
        if (msg := validate_link(rule, layers)) is not None:
            add(
                Severity.ERROR,
                "DANGLING_LINK",
                f"link {rule.layer_index}/{rule.trait_index}",
                msg,
            )

    for identifier, vector in catalog.state.overrides.items():
        if (msg := validate_override_shape(vector, layers)) is not None:
            add(Severity.ERROR, "OVERRIDE_SHAPE", f"override[{identifier}]", msg)

    return result
