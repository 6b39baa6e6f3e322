"""Layer/trait catalog.

Holds layer and trait definitions plus linked-trait rules. All mutation is
refused once the collection is sealed (every identifier allocated); reads
are always allowed and are O(1) by (layer, trait).
"""

import logging

from pydantic import BaseModel, Field

from ..core.errors import InvalidInputError, NotAuthorizedError
from ..core.models import CollectionState, Layer, LinkRule, Trait
from ..core.storage import BlobStore


logger = logging.getLogger(__name__)


class TraitUpload(BaseModel):
    """A trait definition together with the image bytes to store for it."""

    name: str
    weight: int = Field(ge=0)
    data: bytes
    mime_type: str = "image/png"
    hidden: bool = False


class Catalog:
    """Catalog view over the shared collection state."""

    def __init__(self, state: CollectionState, blob_store: BlobStore) -> None:
        self.state = state
        self.blob_store = blob_store
        self._links: dict[tuple[int, int], LinkRule] = {}
        self._reindex_links()

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def layers(self) -> list[Layer]:
        return self.state.layers

    @property
    def layer_count(self) -> int:
        return len(self.state.layers)

    def layer(self, layer_index: int) -> Layer:
        if not 0 <= layer_index < len(self.state.layers):
            raise InvalidInputError(f"No layer at index {layer_index}")
        return self.state.layers[layer_index]

    def trait(self, layer_index: int, trait_index: int) -> Trait:
        layer = self.layer(layer_index)
        if not 0 <= trait_index < layer.trait_count:
            raise InvalidInputError(
                f"Layer {layer_index} ('{layer.name}') has no trait at index {trait_index}"
            )
        return layer.traits[trait_index]

    def link(self, layer_index: int, trait_index: int) -> LinkRule | None:
        return self._links.get((layer_index, trait_index))

    # =========================================================================
    # Mutations
    # =========================================================================

    def _require_unsealed(self) -> None:
        if self.state.sealed:
            raise NotAuthorizedError("Collection is sealed; the catalog can no longer change")

    def _touch(self) -> None:
        self.state.catalog_version += 1

    def _reindex_links(self) -> None:
        self._links = {rule.key: rule for rule in self.state.links}

    def _store(self, upload: TraitUpload) -> Trait:
        handle = self.blob_store.write(upload.data)
        return Trait(
            name=upload.name,
            mime_type=upload.mime_type,
            weight=upload.weight,
            blob_handle=handle,
            hidden=upload.hidden,
        )

    def set_layer(
        self,
        layer_index: int,
        name: str,
        selection_prime: int,
        traits: list[TraitUpload],
    ) -> Layer:
        """Add a layer at the end, or replace an existing layer's full trait set.

        Links that no longer point at existing traits are removed.

        Raises:
            NotAuthorizedError: Collection is sealed
            InvalidInputError: Index out of range or prime already in use
        """
        self._require_unsealed()
        if not 0 <= layer_index <= self.layer_count:
            raise InvalidInputError(
                f"Layer index {layer_index} out of range (layer count {self.layer_count})"
            )
        for i, other in enumerate(self.state.layers):
            if i != layer_index and other.selection_prime == selection_prime:
                raise InvalidInputError(
                    f"Selection prime {selection_prime} already used by layer {i} ('{other.name}')"
                )

        try:
            layer = Layer(name=name, selection_prime=selection_prime)
        except ValueError as e:
            raise InvalidInputError(str(e)) from e
        layer.traits = [self._store(t) for t in traits]

        if layer_index == self.layer_count:
            self.state.layers.append(layer)
            logger.info(f"Added layer {layer_index} '{name}' with {layer.trait_count} traits")
        else:
            self.state.layers[layer_index] = layer
            logger.info(f"Replaced layer {layer_index} '{name}' with {layer.trait_count} traits")

        self._drop_dangling_links()
        self._touch()
        return layer

    def set_trait(self, layer_index: int, trait_index: int, upload: TraitUpload) -> Trait:
        """Add (trait_index == trait_count) or replace a single trait."""
        self._require_unsealed()
        layer = self.layer(layer_index)
        trait = self._store(upload)
        self._place_trait(layer, layer_index, trait_index, trait)
        return trait

    def reuse_trait_data(
        self,
        layer_index: int,
        trait_index: int,
        name: str,
        weight: int,
        source_layer_index: int,
        source_trait_index: int,
        hidden: bool = False,
    ) -> Trait:
        """Add or replace a trait that shares another trait's stored bytes.

        Only the blob handle and MIME type are copied; nothing is uploaded.
        """
        self._require_unsealed()
        layer = self.layer(layer_index)
        source = self.trait(source_layer_index, source_trait_index)
        try:
            trait = Trait(
                name=name,
                mime_type=source.mime_type,
                weight=weight,
                blob_handle=source.blob_handle,
                hidden=hidden,
            )
        except ValueError as e:
            raise InvalidInputError(str(e)) from e
        self._place_trait(layer, layer_index, trait_index, trait)
        logger.debug(
            f"Trait {layer_index}/{trait_index} reuses data of "
            f"{source_layer_index}/{source_trait_index} ({source.blob_handle})"
        )
        return trait

    def _place_trait(self, layer: Layer, layer_index: int, trait_index: int, trait: Trait) -> None:
        if trait_index == layer.trait_count:
            layer.traits.append(trait)
            action = "Added"
        elif 0 <= trait_index < layer.trait_count:
            layer.traits[trait_index] = trait
            action = "Replaced"
        else:
            raise InvalidInputError(
                f"Trait index {trait_index} out of range for layer {layer_index} "
                f"(trait count {layer.trait_count})"
            )
        logger.info(f"{action} trait {layer_index}/{trait_index} '{trait.name}' in '{layer.name}'")
        self._touch()

    def set_link(
        self,
        layer_index: int,
        trait_index: int,
        target_layer_index: int,
        forced_trait_index: int,
    ) -> LinkRule:
        """Force target layer to forced trait whenever (layer, trait) is selected.

        Replaces any existing outgoing link of (layer, trait).
        """
        self._require_unsealed()
        self.trait(layer_index, trait_index)
        self.trait(target_layer_index, forced_trait_index)
        if target_layer_index == layer_index:
            raise InvalidInputError(f"Layer {layer_index} cannot link to itself")

        rule = LinkRule(
            layer_index=layer_index,
            trait_index=trait_index,
            target_layer_index=target_layer_index,
            forced_trait_index=forced_trait_index,
        )
        self.state.links = [r for r in self.state.links if r.key != rule.key]
        self.state.links.append(rule)
        self._reindex_links()
        self._touch()
        logger.info(
            f"Linked {layer_index}/{trait_index} -> {target_layer_index}/{forced_trait_index}"
        )
        return rule

    def clear_link(self, layer_index: int, trait_index: int) -> None:
        self._require_unsealed()
        key = (layer_index, trait_index)
        if key not in self._links:
            raise InvalidInputError(f"No link from {layer_index}/{trait_index}")
        self.state.links = [r for r in self.state.links if r.key != key]
        self._reindex_links()
        self._touch()

    def _drop_dangling_links(self) -> None:
        kept = []
        for rule in self.state.links:
            if self._exists(rule.layer_index, rule.trait_index) and self._exists(
                rule.target_layer_index, rule.forced_trait_index
            ):
                kept.append(rule)
            else:
                logger.warning(
                    f"Removed link {rule.layer_index}/{rule.trait_index} -> "
                    f"{rule.target_layer_index}/{rule.forced_trait_index}: trait no longer exists"
                )
        self.state.links = kept
        self._reindex_links()

    def _exists(self, layer_index: int, trait_index: int) -> bool:
        return (
            0 <= layer_index < len(self.state.layers)
            and 0 <= trait_index < self.state.layers[layer_index].trait_count
        )
