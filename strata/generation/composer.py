"""Composition of a trait vector into an image document and attributes.

The image is an SVG whose layers are stacked `<image>` elements, each
carrying its trait's stored bytes as a base64 data URI. Document order is
stacking order: layer 0 is drawn first (bottom-most), the last layer is
top-most. Output is assembled from byte parts and JSON-encoded dicts; no
intermediate document is ever parsed back.
"""

import base64
import json
from collections.abc import Sequence
from typing import Any

from ..core.storage import BlobStore
from .catalog import Catalog


SVG_MIME = "image/svg+xml"
JSON_MIME = "application/json"

# Pixel-art safe rendering: no smoothing when the canvas is scaled.
_CLOSING_STYLE = (
    b"<style>image{image-rendering:-webkit-optimize-contrast;"
    b"-ms-interpolation-mode:nearest-neighbor;"
    b"image-rendering:-moz-crisp-edges;"
    b"image-rendering:pixelated;}</style></svg>"
)


def data_uri(mime_type: str, payload: bytes) -> str:
    """Wrap bytes as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


def render_svg(
    vector: Sequence[int],
    catalog: Catalog,
    blob_store: BlobStore,
    width: int = 1200,
    height: int = 1200,
) -> bytes:
    """Raw SVG bytes for a trait vector."""
    parts = [
        (
            f'<svg xmlns="http://www.w3.org/2000/svg" version="1.2" '
            f'width="{width}" height="{height}" viewBox="0 0 {width} {height}">'
        ).encode("ascii")
    ]
    for layer_index, trait_index in enumerate(vector):
        trait = catalog.trait(layer_index, trait_index)
        blob = blob_store.read(trait.blob_handle)
        parts.append(
            f'<image x="0" y="0" width="{width}" height="{height}" '
            f'preserveAspectRatio="xMidYMid meet" href="'.encode("ascii")
        )
        parts.append(f"data:{trait.mime_type};base64,".encode("ascii"))
        parts.append(base64.b64encode(blob))
        parts.append(b'"/>')
    parts.append(_CLOSING_STYLE)
    return b"".join(parts)


def render_image(
    vector: Sequence[int],
    catalog: Catalog,
    blob_store: BlobStore,
    width: int = 1200,
    height: int = 1200,
) -> str:
    """Self-contained SVG data URI for a trait vector."""
    return data_uri(SVG_MIME, render_svg(vector, catalog, blob_store, width, height))


def render_attributes(vector: Sequence[int], catalog: Catalog) -> list[dict[str, str]]:
    """Ordered (layer name, trait name) pairs, hidden traits skipped."""
    attributes = []
    for layer_index, trait_index in enumerate(vector):
        trait = catalog.trait(layer_index, trait_index)
        if trait.hidden:
            continue
        attributes.append(
            {"trait_type": catalog.layer(layer_index).name, "value": trait.name}
        )
    return attributes


def render_metadata(
    name: str,
    description: str,
    image: str,
    attributes: list[dict[str, str]] | None,
) -> bytes:
    """Combined metadata JSON document.

    `attributes` of None omits the key (used before reveal); an empty list
    is emitted as `[]`.
    """
    document: dict[str, Any] = {
        "name": name,
        "description": description,
        "image": image,
    }
    if attributes is not None:
        document["attributes"] = attributes
    return json.dumps(document, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def metadata_uri(metadata: bytes) -> str:
    return data_uri(JSON_MIME, metadata)
