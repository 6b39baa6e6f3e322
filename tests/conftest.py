"""Global fixtures for Strata tests."""

import pytest

from strata.core.models import CollectionSettings, CollectionState, PoolState
from strata.core.randomness import FixedEntropy
from strata.core.storage import MemoryBlobStore
from strata.generation import Catalog, Collection, TraitUpload


OPERATOR = "studio"


def upload(name, weight, data=None, hidden=False, mime_type="image/png"):
    """Build a TraitUpload with distinct default bytes per trait name."""
    return TraitUpload(
        name=name,
        weight=weight,
        data=data if data is not None else f"png:{name}".encode(),
        mime_type=mime_type,
        hidden=hidden,
    )


def make_state(capacity, placeholder=""):
    return CollectionState(
        settings=CollectionSettings(
            name="Test",
            description="A test collection",
            placeholder_image=placeholder,
            operator=OPERATOR,
        ),
        pool=PoolState.new(capacity),
    )


@pytest.fixture
def blob_store():
    return MemoryBlobStore()


@pytest.fixture
def make_catalog(blob_store):
    """Factory: (capacity) -> Catalog over a fresh state."""

    def _make(capacity=10):
        return Catalog(make_state(capacity), blob_store)

    return _make


@pytest.fixture
def make_collection(blob_store):
    """Factory for collections with deterministic entropy."""

    def _make(capacity=10, placeholder="", seed=42, reveal=None, base_uri=""):
        return Collection.create(
            name="Test",
            capacity=capacity,
            operator=OPERATOR,
            description="A test collection",
            placeholder_image=placeholder,
            base_uri=base_uri,
            blob_store=blob_store,
            entropy=FixedEntropy(seed, reveal=reveal),
        )

    return _make


@pytest.fixture
def sample_collection(make_collection):
    """Revealed collection: capacity 20, two layers, one link.

    Body:  Plain [0,10)  Gold [10,20)  (Gold links Eyes -> Laser)
    Eyes:  Normal [0,20)  Laser weight 0
    """
    collection = make_collection(capacity=20)
    collection.set_layer(
        OPERATOR, 0, "Body", 3, [upload("Plain", 10), upload("Gold", 10)]
    )
    collection.set_layer(
        OPERATOR, 1, "Eyes", 7, [upload("Normal", 20), upload("Laser", 0)]
    )
    collection.set_link(OPERATOR, 0, 1, 1, 1)
    return collection
