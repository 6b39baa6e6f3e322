"""Build a collection from a YAML collection spec.

Images are read relative to the spec file and uploaded through the same
catalog mutation calls an operator would make by hand.
"""

import logging
import mimetypes
from pathlib import Path

from ..core.errors import InvalidInputError
from ..core.models import CollectionSpec, TraitSpec
from ..core.randomness import EntropySource
from ..core.storage import BlobStore
from .catalog import TraitUpload
from .collection import Collection


logger = logging.getLogger(__name__)


def guess_mime_type(path: Path) -> str:
    mime, _ = mimetypes.guess_type(path.name)
    return mime or "application/octet-stream"


def _upload(trait: TraitSpec, base_dir: Path) -> TraitUpload:
    path = base_dir / trait.file
    if not path.exists():
        raise InvalidInputError(f"Image for trait '{trait.name}' not found: {path}")
    with open(path, "rb") as f:
        data = f.read()
    return TraitUpload(
        name=trait.name,
        weight=trait.weight,
        data=data,
        mime_type=trait.mime_type or guess_mime_type(path),
        hidden=trait.hidden,
    )


def build_collection(
    spec: CollectionSpec,
    base_dir: Path | str,
    blob_store: BlobStore,
    entropy: EntropySource | None = None,
    **kwargs,
) -> Collection:
    """Create a collection and configure its catalog from a spec.

    Args:
        spec: Parsed collection spec
        base_dir: Directory trait image paths are relative to
        blob_store: Where image bytes are stored
        entropy: Seed source (EnvironmentEntropy if omitted)
        **kwargs: Passed through to Collection (canvas, name_template)

    Raises:
        InvalidInputError: Missing images, bad references or catalog conflicts
    """
    base_dir = Path(base_dir)
    meta = spec.meta
    collection = Collection.create(
        name=meta.name,
        capacity=meta.capacity,
        operator=meta.operator,
        description=meta.description,
        placeholder_image=meta.placeholder_image,
        base_uri=meta.base_uri,
        blob_store=blob_store,
        entropy=entropy,
        **kwargs,
    )
    operator = meta.operator

    for layer_index, layer in enumerate(spec.layers):
        collection.set_layer(operator, layer_index, layer.name, layer.selection_prime, [])
        for trait_index, trait in enumerate(layer.traits):
            if trait.file is not None:
                collection.set_trait(operator, layer_index, trait_index, _upload(trait, base_dir))
                continue

            try:
                src_layer, src_trait = spec.resolve_ref(trait.reuse)
            except ValueError as e:
                raise InvalidInputError(f"Trait '{trait.name}': {e}") from e
            if (src_layer, src_trait) >= (layer_index, trait_index):
                raise InvalidInputError(
                    f"Trait '{trait.name}' can only reuse data of an earlier trait, "
                    f"not '{trait.reuse}'"
                )
            collection.reuse_trait_data(
                operator,
                layer_index,
                trait_index,
                trait.name,
                trait.weight,
                src_layer,
                src_trait,
                hidden=trait.hidden,
            )

    for link in spec.links:
        try:
            source = spec.resolve_ref(link.source)
            target = spec.resolve_ref(link.target)
        except ValueError as e:
            raise InvalidInputError(f"Link {link.source} -> {link.target}: {e}") from e
        collection.set_link(operator, source[0], source[1], target[0], target[1])

    logger.info(
        f"Built collection '{meta.name}': {len(spec.layers)} layers, {len(spec.links)} links"
    )
    return collection
