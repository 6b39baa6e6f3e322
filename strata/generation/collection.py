"""Top-level collection service.

`Collection` owns one `CollectionState` and hands it by reference to the
allocation pool, catalog and reveal controller. It is the only place that
checks who is calling.

Concurrency: state-mutating calls (mint, reveal, catalog and override
changes) assume a single writer; each runs to completion before the next
starts. There is no locking. Reads have no side effects and can run
concurrently with each other.
"""

import logging
import random
from collections.abc import Sequence

from ..core.errors import InvalidInputError, NotAuthorizedError, NotYetAvailableError
from ..core.models import (
    CollectionSettings,
    CollectionState,
    Layer,
    LinkRule,
    PoolState,
    Trait,
    ValidationResult,
)
from ..core.randomness import EntropyContext, EntropySource, EnvironmentEntropy, chain_digest
from ..core.storage import BlobStore, MemoryBlobStore
from . import composer
from .catalog import Catalog, TraitUpload
from .pool import AllocationPool
from .resolver import derive_trait_vector
from .reveal import RevealController


logger = logging.getLogger(__name__)


class Collection:
    """A fixed-size generative collection.

    Args:
        state: Collection state, shared with every component
        blob_store: Storage for trait image bytes
        entropy: Seed source for allocation and reveal (non-cryptographic)
        canvas: (width, height) of rendered SVGs
        name_template: Format string for item names ({name}, {item_id})
    """

    def __init__(
        self,
        state: CollectionState,
        blob_store: BlobStore,
        entropy: EntropySource | None = None,
        canvas: tuple[int, int] = (1200, 1200),
        name_template: str = "{name} #{item_id}",
    ) -> None:
        self.state = state
        self.blob_store = blob_store
        self.entropy = entropy or EnvironmentEntropy()
        self.canvas = canvas
        self.name_template = name_template

        self.pool = AllocationPool(state.pool)
        self.catalog = Catalog(state, blob_store)
        self.reveal_controller = RevealController(state, self.catalog, self.entropy)

    @classmethod
    def create(
        cls,
        name: str,
        capacity: int,
        operator: str,
        description: str = "",
        placeholder_image: str = "",
        base_uri: str = "",
        blob_store: BlobStore | None = None,
        entropy: EntropySource | None = None,
        **kwargs,
    ) -> "Collection":
        """Create a new, empty collection.

        Without a placeholder image the collection reveals immediately.
        """
        state = CollectionState(
            settings=CollectionSettings(
                name=name,
                description=description,
                placeholder_image=placeholder_image,
                base_uri=base_uri,
                operator=operator,
            ),
            pool=PoolState.new(capacity),
        )
        if blob_store is None:
            blob_store = MemoryBlobStore()
        collection = cls(state, blob_store, entropy, **kwargs)
        if not placeholder_image:
            collection.reveal_controller.reveal_immediately(collection._context(operator))
        logger.info(f"Created collection '{name}' with capacity {capacity}")
        return collection

    def _context(self, caller: str, fee_hint: int = 0) -> EntropyContext:
        """Entropy context for a state-mutating request; advances the history."""
        context = EntropyContext(
            caller=caller,
            sequence=self.state.sequence,
            previous_digest=self.state.history_digest,
            fee_hint=fee_hint,
        )
        self.state.sequence += 1
        self.state.history_digest = chain_digest(
            self.state.history_digest, context.sequence, caller, context.timestamp_ns
        )
        return context

    def _require_operator(self, caller: str, action: str) -> None:
        if caller != self.state.settings.operator:
            raise NotAuthorizedError(f"Only the operator may {action}")

    # =========================================================================
    # Creation
    # =========================================================================

    def mint(self, caller: str, recipient: str, count: int, fee_hint: int = 0) -> list[int]:
        """Create count items for recipient.

        Identifiers are allocated before any item record is written, so a
        failed allocation leaves no item without an identifier.

        Returns:
            The new item ids

        Raises:
            InvalidInputError: count is not positive or exceeds remaining capacity
        """
        if count <= 0:
            raise InvalidInputError(f"Mint count must be positive, got {count}")
        if count > self.pool.remaining:
            raise InvalidInputError(
                f"Cannot mint {count} items, only {self.pool.remaining} remaining"
            )

        batch_start = self.state.minted
        context = self._context(caller, fee_hint)
        rng = random.Random(self.entropy.allocation_seed(context, batch_start))
        identifiers = self.pool.allocate(count, rng)

        item_ids = []
        for offset, identifier in enumerate(identifiers):
            item_id = batch_start + offset
            self.state.identifiers[item_id] = identifier
            self.state.owners[item_id] = recipient
            item_ids.append(item_id)

        logger.info(f"Minted items {batch_start}..{batch_start + count - 1} to {recipient}")
        if self.pool.exhausted:
            logger.info("Capacity reached; collection is sealed")
        return item_ids

    # =========================================================================
    # Reads
    # =========================================================================

    def is_revealed(self) -> bool:
        return self.state.revealed

    def capacity_reached(self) -> bool:
        return self.state.sealed

    def owner_of(self, item_id: int) -> str:
        self.get_identifier(item_id)
        return self.state.owners[item_id]

    def get_identifier(self, item_id: int) -> int:
        """Identifier allocated to an item.

        Raises:
            InvalidInputError: item_id is outside the collection
            NotYetAvailableError: item_id has not been minted yet
        """
        if not 0 <= item_id < self.state.capacity:
            raise InvalidInputError(
                f"Item {item_id} does not exist (capacity {self.state.capacity})"
            )
        try:
            return self.state.identifiers[item_id]
        except KeyError:
            raise NotYetAvailableError(f"Item {item_id} has not been minted") from None

    def derive_trait_vector(self, identifier: int) -> list[int]:
        """Trait vector for an allocated identifier, using the collection seed."""
        rotated = self.reveal_controller.derivation_identifier(identifier)
        return derive_trait_vector(
            rotated,
            self.state.reveal_seed,
            self.catalog,
            self.state.capacity,
            override=self.state.overrides.get(identifier),
        )

    def trait_vector(self, item_id: int) -> list[int]:
        return self.derive_trait_vector(self.get_identifier(item_id))

    def render_image(self, item_id: int) -> str:
        """SVG data URI for an item; the placeholder verbatim while hidden."""
        identifier = self.get_identifier(item_id)
        if not self.state.revealed:
            return self.state.settings.placeholder_image
        width, height = self.canvas
        return composer.render_image(
            self.derive_trait_vector(identifier), self.catalog, self.blob_store, width, height
        )

    def render_attributes(self, item_id: int) -> list[dict[str, str]]:
        return composer.render_attributes(self.trait_vector(item_id), self.catalog)

    def item_name(self, item_id: int) -> str:
        return self.name_template.format(name=self.state.settings.name, item_id=item_id)

    def metadata(self, item_id: int) -> bytes:
        """Combined metadata JSON (name, description, image, attributes)."""
        identifier = self.get_identifier(item_id)
        settings = self.state.settings
        name = self.item_name(item_id)

        if not self.state.revealed:
            return composer.render_metadata(
                name, settings.description, settings.placeholder_image, None
            )

        vector = self.derive_trait_vector(identifier)
        if self.state.render_off_chain.get(item_id) and settings.base_uri:
            image = f"{settings.base_uri}{item_id}"
        else:
            width, height = self.canvas
            image = composer.render_image(vector, self.catalog, self.blob_store, width, height)
        attributes = composer.render_attributes(vector, self.catalog)
        return composer.render_metadata(name, settings.description, image, attributes)

    def token_uri(self, item_id: int) -> str:
        return composer.metadata_uri(self.metadata(item_id))

    # =========================================================================
    # Owner calls
    # =========================================================================

    def set_render_off_chain(self, caller: str, item_id: int, flag: bool) -> None:
        """Let an item's owner switch its image to base_uri + item_id."""
        owner = self.owner_of(item_id)
        if caller != owner:
            raise NotAuthorizedError(f"Only the owner of item {item_id} may change its rendering")
        self.state.render_off_chain[item_id] = flag

    # =========================================================================
    # Operator calls
    # =========================================================================

    def set_layer(
        self,
        caller: str,
        layer_index: int,
        name: str,
        selection_prime: int,
        traits: list[TraitUpload],
    ) -> Layer:
        self._require_operator(caller, "change layers")
        return self.catalog.set_layer(layer_index, name, selection_prime, traits)

    def set_trait(self, caller: str, layer_index: int, trait_index: int, upload: TraitUpload) -> Trait:
        self._require_operator(caller, "change traits")
        return self.catalog.set_trait(layer_index, trait_index, upload)

    def reuse_trait_data(
        self,
        caller: str,
        layer_index: int,
        trait_index: int,
        name: str,
        weight: int,
        source_layer_index: int,
        source_trait_index: int,
        hidden: bool = False,
    ) -> Trait:
        self._require_operator(caller, "change traits")
        return self.catalog.reuse_trait_data(
            layer_index,
            trait_index,
            name,
            weight,
            source_layer_index,
            source_trait_index,
            hidden=hidden,
        )

    def set_link(
        self,
        caller: str,
        layer_index: int,
        trait_index: int,
        target_layer_index: int,
        forced_trait_index: int,
    ) -> LinkRule:
        self._require_operator(caller, "change links")
        return self.catalog.set_link(layer_index, trait_index, target_layer_index, forced_trait_index)

    def clear_link(self, caller: str, layer_index: int, trait_index: int) -> None:
        self._require_operator(caller, "change links")
        self.catalog.clear_link(layer_index, trait_index)

    def reveal(self, caller: str, fee_hint: int = 0) -> int:
        # Checked here as well so a rejected reveal does not advance the history
        self._require_operator(caller, "reveal")
        if self.state.revealed:
            raise NotAuthorizedError("Collection is already revealed")
        return self.reveal_controller.reveal(caller, self._context(caller, fee_hint))

    def set_override(self, caller: str, identifier: int, vector: Sequence[int]) -> None:
        self.reveal_controller.set_override(caller, identifier, vector)

    def set_placeholder(self, caller: str, placeholder: str) -> None:
        self.reveal_controller.set_placeholder(caller, placeholder)

    def set_description(self, caller: str, description: str) -> None:
        self.reveal_controller.set_description(caller, description)

    def set_base_uri(self, caller: str, base_uri: str) -> None:
        self.reveal_controller.set_base_uri(caller, base_uri)

    def validate(self) -> ValidationResult:
        from ..validation import validate_catalog

        return validate_catalog(self.catalog, self.state.capacity)
