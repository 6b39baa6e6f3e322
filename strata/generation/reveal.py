"""Reveal and override controller.

A collection is Hidden while its reveal seed is 0 and Revealed once the
seed is set; the transition happens once and never reverses. With delayed
reveal the operator triggers it explicitly. With immediate reveal (no
placeholder configured) the seed is drawn when the collection is created.
"""

import logging
from collections.abc import Sequence

from ..core.errors import InvalidInputError, NotAuthorizedError, NotYetAvailableError
from ..core.models import CollectionState
from ..core.randomness import EntropyContext, EntropySource
from ..validation import validate_override_shape
from .catalog import Catalog


logger = logging.getLogger(__name__)


class RevealController:
    def __init__(self, state: CollectionState, catalog: Catalog, entropy: EntropySource) -> None:
        self.state = state
        self.catalog = catalog
        self.entropy = entropy

    @property
    def is_revealed(self) -> bool:
        return self.state.revealed

    def _require_operator(self, caller: str, action: str) -> None:
        if caller != self.state.settings.operator:
            raise NotAuthorizedError(f"Only the operator may {action}")

    def _draw_seed(self, context: EntropyContext) -> int:
        # 0 means "hidden", so a zero draw must not leave the state unchanged
        return self.entropy.reveal_seed(context) or 1

    def reveal_immediately(self, context: EntropyContext) -> int:
        """Set the seed at creation time when no placeholder is configured."""
        if self.state.revealed:
            raise NotAuthorizedError("Collection is already revealed")
        self.state.reveal_seed = self._draw_seed(context)
        self.state.immediate_reveal = True
        logger.info("Collection revealed immediately at creation")
        return self.state.reveal_seed

    def reveal(self, caller: str, context: EntropyContext) -> int:
        """Delayed reveal, triggered by the operator.

        Raises:
            NotAuthorizedError: caller is not the operator, or already revealed
        """
        self._require_operator(caller, "reveal")
        if self.state.revealed:
            raise NotAuthorizedError("Collection is already revealed")
        self.state.reveal_seed = self._draw_seed(context)
        logger.info(f"Collection revealed by {caller} at sequence {context.sequence}")
        return self.state.reveal_seed

    def derivation_identifier(self, identifier: int) -> int:
        """Identifier fed to trait derivation.

        Delayed reveal rotates the allocated identifier by the seed, so the
        item -> traits mapping cannot be known before reveal even though
        allocation happened at creation.

        Raises:
            NotYetAvailableError: collection is still hidden
        """
        if not self.state.revealed:
            raise NotYetAvailableError("Collection is not revealed yet")
        if self.state.immediate_reveal:
            return identifier
        return (identifier + self.state.reveal_seed) % self.state.capacity

    def set_override(self, caller: str, identifier: int, vector: Sequence[int]) -> None:
        """Store an explicit trait vector for one identifier; empty clears it.

        Raises:
            NotAuthorizedError: caller is not the operator
            InvalidInputError: wrong length or a trait index that does not exist
        """
        self._require_operator(caller, "set overrides")
        if not 0 <= identifier < self.state.capacity:
            raise InvalidInputError(
                f"Identifier {identifier} outside 0..{self.state.capacity - 1}"
            )

        if not vector:
            self.state.overrides.pop(identifier, None)
            logger.info(f"Cleared override for identifier {identifier}")
            return

        problem = validate_override_shape(vector, self.catalog.layers)
        if problem is not None:
            raise InvalidInputError(f"Invalid override for identifier {identifier}: {problem}")

        self.state.overrides[identifier] = list(vector)
        logger.info(f"Set override for identifier {identifier}: {list(vector)}")

    def set_placeholder(self, caller: str, placeholder: str) -> None:
        self._require_operator(caller, "change the placeholder")
        if self.state.revealed:
            raise NotAuthorizedError("Placeholder cannot change after reveal")
        self.state.settings.placeholder_image = placeholder

    def set_description(self, caller: str, description: str) -> None:
        self._require_operator(caller, "change the description")
        self.state.settings.description = description

    def set_base_uri(self, caller: str, base_uri: str) -> None:
        self._require_operator(caller, "change the base URI")
        self.state.settings.base_uri = base_uri
