"""Catalog models: layers, traits and linked-trait rules."""

from pydantic import BaseModel, Field, field_validator


class Trait(BaseModel):
    """One concrete choice within a layer, backed by stored bytes."""

    name: str = Field(description="Display name used in the attribute list")
    mime_type: str = Field(default="image/png", description="MIME type of the blob")
    weight: int = Field(ge=0, description="Width of this trait's lottery interval")
    blob_handle: str = Field(description="Blob Store handle holding the image bytes")
    hidden: bool = Field(
        default=False,
        description="Excluded from the attribute list but still rendered",
    )


class Layer(BaseModel):
    """One axis of the composition with its own weighted trait set."""

    name: str
    selection_prime: int = Field(
        description="Odd scrambling constant, distinct per layer",
    )
    traits: list[Trait] = Field(default_factory=list)

    @field_validator("selection_prime")
    @classmethod
    def _odd_positive(cls, v: int) -> int:
        if v <= 0 or v % 2 == 0:
            raise ValueError(f"selection_prime must be a positive odd integer, got {v}")
        return v

    @property
    def trait_count(self) -> int:
        return len(self.traits)

    @property
    def total_weight(self) -> int:
        return sum(t.weight for t in self.traits)


class LinkRule(BaseModel):
    """Forces a target layer's trait once a source (layer, trait) is selected."""

    layer_index: int = Field(ge=0)
    trait_index: int = Field(ge=0)
    target_layer_index: int = Field(ge=0)
    forced_trait_index: int = Field(ge=0)

    @property
    def key(self) -> tuple[int, int]:
        return (self.layer_index, self.trait_index)
