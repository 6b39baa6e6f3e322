"""Collection state models.

`CollectionState` is the one mutable struct owned by the top-level
`Collection` service. Every component (pool, catalog, resolver, reveal
controller) receives it by reference instead of keeping its own copy.
"""

from pydantic import BaseModel, Field, model_validator

from .catalog import Layer, LinkRule


class CollectionSettings(BaseModel):
    """Operator-editable strings describing the collection."""

    name: str
    description: str = ""
    placeholder_image: str = Field(
        default="",
        description="Image returned for every item until reveal; empty means immediate reveal",
    )
    base_uri: str = Field(default="", description="Prefix for off-chain rendered images")
    operator: str = Field(description="Identity allowed to run operator calls")


class PoolState(BaseModel):
    """Drain-only allocation pool over identifiers 0..capacity-1.

    `displaced` records only slots whose value differs from their own
    index; every other slot virtually holds its index.
    """

    capacity: int = Field(gt=0)
    remaining: int = Field(ge=0)
    displaced: dict[int, int] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _remaining_within_capacity(self) -> "PoolState":
        if self.remaining > self.capacity:
            raise ValueError(
                f"remaining ({self.remaining}) exceeds capacity ({self.capacity})"
            )
        return self

    @classmethod
    def new(cls, capacity: int) -> "PoolState":
        return cls(capacity=capacity, remaining=capacity)


class CollectionState(BaseModel):
    """Everything that describes one collection at a point in time."""

    settings: CollectionSettings
    pool: PoolState
    layers: list[Layer] = Field(default_factory=list)
    links: list[LinkRule] = Field(default_factory=list)

    reveal_seed: int = Field(default=0, ge=0, description="0 until revealed, then immutable")
    immediate_reveal: bool = False

    # item_id -> allocated identifier, set once
    identifiers: dict[int, int] = Field(default_factory=dict)
    owners: dict[int, str] = Field(default_factory=dict)
    render_off_chain: dict[int, bool] = Field(default_factory=dict)
    # identifier -> operator-supplied trait vector
    overrides: dict[int, list[int]] = Field(default_factory=dict)

    catalog_version: int = 0
    # Count of state-mutating requests and a running digest over them, mixed
    # into entropy the way a block height and previous block hash would be
    sequence: int = 0
    history_digest: str = ""

    @property
    def capacity(self) -> int:
        return self.pool.capacity

    @property
    def minted(self) -> int:
        return len(self.identifiers)

    @property
    def sealed(self) -> bool:
        return self.pool.remaining == 0

    @property
    def revealed(self) -> bool:
        return self.reveal_seed != 0
