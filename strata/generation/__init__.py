"""Collection generation: allocation, catalog, resolution, composition, reveal.

Flow:
    Collection.mint() - AllocationPool issues identifiers for new items
    Collection.derive_trait_vector() - identifier + seed -> trait indices
    Collection.token_uri() - Composer renders image and attributes
"""

from .pool import AllocationPool
from .catalog import Catalog, TraitUpload
from .resolver import scramble, select_trait, derive_trait_vector
from .composer import (
    render_svg,
    render_image,
    render_attributes,
    render_metadata,
    metadata_uri,
)
from .reveal import RevealController
from .collection import Collection
from .store import save_state, load_state
from .builder import build_collection

__all__ = [
    "AllocationPool",
    "Catalog",
    "TraitUpload",
    "scramble",
    "select_trait",
    "derive_trait_vector",
    "render_svg",
    "render_image",
    "render_attributes",
    "render_metadata",
    "metadata_uri",
    "RevealController",
    "Collection",
    "save_state",
    "load_state",
    "build_collection",
]
