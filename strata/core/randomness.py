"""Pluggable entropy sources for allocation and reveal.

NOT cryptographically secure. Seeds are mixed from request-time
environment values (caller, request sequence, time, the running history
digest). Anyone able to choose or predict those inputs can bias which
identifiers get allocated or which seed a reveal produces. This is an
accepted trust assumption; callers who need stronger guarantees should
inject their own `EntropySource`.

Do NOT use Python's built-in hash() for mixing - it is salted per process.
"""

import hashlib
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


def stable_u64(*parts) -> int:
    """Stable 64-bit unsigned integer from arbitrary parts (SHA-256, truncated)."""
    s = "|".join(str(p) for p in parts).encode("utf-8")
    return int.from_bytes(hashlib.sha256(s).digest()[:8], "big")


def chain_digest(previous: str, *parts) -> str:
    """Extend a running hex digest with new parts."""
    s = "|".join([previous, *(str(p) for p in parts)]).encode("utf-8")
    return hashlib.sha256(s).hexdigest()


@dataclass
class EntropyContext:
    """Request-time environment values available to an entropy source.

    Attributes:
        caller: Identity making the state-mutating request
        sequence: Number of state-mutating requests processed so far
        previous_digest: Running digest over all earlier requests
        timestamp_ns: Wall-clock time of the request
        fee_hint: Requester-visible fee/priority value, 0 if unused
    """

    caller: str
    sequence: int = 0
    previous_digest: str = ""
    timestamp_ns: int = field(default_factory=time.time_ns)
    fee_hint: int = 0


class EntropySource(ABC):
    """Source of seeds for allocation batches and the reveal."""

    @abstractmethod
    def allocation_seed(self, context: EntropyContext, batch_start: int) -> int:
        """Seed for the PRNG driving one allocation batch.

        Args:
            context: Environment of the creation request
            batch_start: Item id of the first item in the batch
        """
        ...

    @abstractmethod
    def reveal_seed(self, context: EntropyContext) -> int:
        """Collection-wide reveal seed. May return 0; callers remap it."""
        ...


class EnvironmentEntropy(EntropySource):
    """Mixes the request context with process-local values."""

    def allocation_seed(self, context: EntropyContext, batch_start: int) -> int:
        return stable_u64(
            "alloc",
            context.sequence,
            context.timestamp_ns,
            context.previous_digest,
            context.caller,
            context.fee_hint,
            batch_start,
            os.getpid(),
        )

    def reveal_seed(self, context: EntropyContext) -> int:
        return stable_u64(
            "reveal",
            context.fee_hint,
            context.sequence,
            context.timestamp_ns,
            context.previous_digest,
            context.caller,
            os.getpid(),
        )


class FixedEntropy(EntropySource):
    """Deterministic source for tests and reproducible runs.

    Allocation seeds still vary per batch (by batch start) so that
    successive batches do not replay the same draws.
    """

    def __init__(self, seed: int, reveal: int | None = None) -> None:
        self.seed = seed
        self.reveal = reveal

    def allocation_seed(self, context: EntropyContext, batch_start: int) -> int:
        return stable_u64("fixed-alloc", self.seed, batch_start)

    def reveal_seed(self, context: EntropyContext) -> int:
        if self.reveal is not None:
            return self.reveal
        return stable_u64("fixed-reveal", self.seed)
