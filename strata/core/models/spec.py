"""Collection spec: the YAML file an operator writes to build a collection.

Example:

    meta:
      name: Pixel Cats
      capacity: 1000
      operator: studio
      placeholder_image: ipfs://placeholder.png
    layers:
      - name: Background
        selection_prime: 7
        traits:
          - {name: Blue, file: bg/blue.png, weight: 600}
          - {name: Red, file: bg/red.png, weight: 400}
    links:
      - {source: Background/Red, target: Eyes/Laser}
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator


class CollectionMeta(BaseModel):
    name: str
    description: str = ""
    capacity: int = Field(gt=0)
    operator: str
    placeholder_image: str = ""
    base_uri: str = ""


class TraitSpec(BaseModel):
    """A trait entry. Exactly one of `file` or `reuse` must be given."""

    name: str
    weight: int = Field(ge=0)
    file: str | None = Field(default=None, description="Image path relative to the spec")
    mime_type: str | None = Field(default=None, description="Guessed from file if omitted")
    hidden: bool = False
    reuse: str | None = Field(
        default=None,
        description="'Layer/Trait' whose stored bytes this trait shares",
    )

    @model_validator(mode="after")
    def _file_or_reuse(self) -> "TraitSpec":
        if (self.file is None) == (self.reuse is None):
            raise ValueError(f"trait '{self.name}' needs exactly one of 'file' or 'reuse'")
        return self


class LayerSpec(BaseModel):
    name: str
    selection_prime: int
    traits: list[TraitSpec] = Field(default_factory=list)


class LinkSpec(BaseModel):
    """Link by name: 'Layer/Trait' -> 'Layer/Trait'."""

    source: str
    target: str


class CollectionSpec(BaseModel):
    meta: CollectionMeta
    layers: list[LayerSpec] = Field(default_factory=list)
    links: list[LinkSpec] = Field(default_factory=list)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "CollectionSpec":
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    def to_yaml(self, path: Path | str) -> None:
        data: dict[str, Any] = self.model_dump(mode="json", exclude_none=True)
        with open(path, "w") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)

    def resolve_ref(self, ref: str) -> tuple[int, int]:
        """Turn a 'Layer/Trait' reference into (layer_index, trait_index)."""
        layer_name, sep, trait_name = ref.partition("/")
        if not sep:
            raise ValueError(f"Reference '{ref}' must look like 'Layer/Trait'")
        for li, layer in enumerate(self.layers):
            if layer.name != layer_name:
                continue
            for ti, trait in enumerate(layer.traits):
                if trait.name == trait_name:
                    return li, ti
            raise ValueError(f"Layer '{layer_name}' has no trait '{trait_name}'")
        raise ValueError(f"Unknown layer '{layer_name}'")
