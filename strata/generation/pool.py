"""Drain-only allocation pool.

Identifiers 0..capacity-1 are handed out in a uniformly random order, each
exactly once, without ever building the full permutation. The pool is a
virtual array where slot i holds i unless `displaced` says otherwise; a
draw is one Fisher-Yates step against the live prefix of that array.
"""

import logging
import random

from ..core.errors import InvalidInputError
from ..core.models import PoolState


logger = logging.getLogger(__name__)


class AllocationPool:
    """Sampler over the shared `PoolState`.

    Touches at most O(count) sparse entries per batch regardless of
    capacity. Batches must not interleave: one `allocate` call runs to
    completion before the next starts.
    """

    def __init__(self, state: PoolState) -> None:
        self.state = state

    @property
    def capacity(self) -> int:
        return self.state.capacity

    @property
    def remaining(self) -> int:
        return self.state.remaining

    @property
    def exhausted(self) -> bool:
        return self.state.remaining == 0

    def _slot(self, index: int) -> int:
        return self.state.displaced.get(index, index)

    def allocate(self, count: int, rng: random.Random) -> list[int]:
        """Draw count identifiers not drawn before.

        Args:
            count: Number of identifiers, 1..remaining
            rng: Batch PRNG; each draw uses rng.randrange(live_size)

        Returns:
            Pairwise-distinct identifiers in draw order

        Raises:
            InvalidInputError: count is not positive or exceeds remaining.
                Nothing is drawn in that case.
        """
        remaining = self.state.remaining
        if count <= 0:
            raise InvalidInputError(f"Allocation count must be positive, got {count}")
        if count > remaining:
            raise InvalidInputError(
                f"Cannot allocate {count} identifiers, only {remaining} remaining"
            )

        displaced = self.state.displaced
        drawn = []
        for k in range(count):
            live = remaining - k
            r = rng.randrange(live)
            drawn.append(self._slot(r))

            # Slot `last` leaves the live range; its entry is never read again.
            last = live - 1
            tail = displaced.pop(last, last)
            if r != last:
                if tail == r:
                    displaced.pop(r, None)
                else:
                    displaced[r] = tail

        self.state.remaining = remaining - count
        logger.info(
            f"Allocated {count} identifiers, {self.state.remaining}/{self.capacity} remaining, "
            f"{len(displaced)} displaced slots"
        )
        logger.debug(f"Allocated identifiers: {drawn}")
        return drawn
