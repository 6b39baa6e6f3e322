"""Tests for the top-level Collection service."""

import base64
import json

import pytest

from strata.core.errors import InvalidInputError, NotAuthorizedError, NotYetAvailableError
from strata.core.randomness import FixedEntropy
from strata.core.storage import MemoryBlobStore
from strata.generation import Collection, load_state, save_state, scramble

from conftest import OPERATOR, upload


class TestMint:
    """Tests for the creation boundary."""

    def test_sequential_item_ids(self, sample_collection):
        first = sample_collection.mint("alice", "alice", 3)
        second = sample_collection.mint("bob", "bob", 2)

        assert first == [0, 1, 2]
        assert second == [3, 4]
        assert sample_collection.owner_of(1) == "alice"
        assert sample_collection.owner_of(4) == "bob"

    def test_identifiers_distinct(self, sample_collection):
        sample_collection.mint("alice", "alice", 20)

        identifiers = [sample_collection.get_identifier(i) for i in range(20)]
        assert sorted(identifiers) == list(range(20))
        assert sample_collection.capacity_reached()

    def test_over_mint_changes_nothing(self, make_collection):
        collection = make_collection(capacity=3)
        collection.set_layer(OPERATOR, 0, "Body", 5, [upload("Plain", 3)])
        collection.mint("alice", "alice", 2)
        sequence = collection.state.sequence

        with pytest.raises(InvalidInputError):
            collection.mint("bob", "bob", 2)

        assert collection.state.minted == 2
        assert collection.pool.remaining == 1
        assert collection.state.sequence == sequence
        with pytest.raises(NotYetAvailableError):
            collection.get_identifier(2)

    def test_zero_count_rejected(self, sample_collection):
        with pytest.raises(InvalidInputError):
            sample_collection.mint("alice", "alice", 0)

    def test_fixed_entropy_is_reproducible(self, make_collection):
        a = make_collection(capacity=1000, seed=7)
        b = make_collection(capacity=1000, seed=7)
        a.mint("x", "x", 5)
        b.mint("y", "y", 5)

        assert [a.get_identifier(i) for i in range(5)] == [b.get_identifier(i) for i in range(5)]


class TestReads:
    """Tests for identifier lookup and rendering."""

    def test_unminted_item_not_yet_available(self, sample_collection):
        with pytest.raises(NotYetAvailableError):
            sample_collection.get_identifier(0)

    @pytest.mark.parametrize("item_id", [-1, 20, 1000])
    def test_nonexistent_item_invalid(self, sample_collection, item_id):
        with pytest.raises(InvalidInputError):
            sample_collection.get_identifier(item_id)

    def test_link_holds_for_every_item(self, sample_collection):
        sample_collection.mint("alice", "alice", 20)

        gold = 0
        for item_id in range(20):
            body, eyes = sample_collection.trait_vector(item_id)
            if body == 1:
                gold += 1
                assert eyes == 1
            else:
                assert eyes == 0
        assert gold == 10

    def test_trait_vector_is_stable(self, sample_collection):
        sample_collection.mint("alice", "alice", 5)

        first = [sample_collection.trait_vector(i) for i in range(5)]
        second = [sample_collection.trait_vector(i) for i in range(5)]

        assert first == second

    def test_token_uri(self, sample_collection):
        sample_collection.mint("alice", "alice", 1)

        uri = sample_collection.token_uri(0)
        document = json.loads(base64.b64decode(uri.split(",", 1)[1]))

        assert document["name"] == "Test #0"
        assert document["description"] == "A test collection"
        assert document["image"].startswith("data:image/svg+xml;base64,")
        assert [a["trait_type"] for a in document["attributes"]] == ["Body", "Eyes"]
        assert document["image"] == sample_collection.render_image(0)


class TestThreeItemScenario:
    """Capacity 3, one layer with weights 1 and 2."""

    def test_selection_matches_intervals(self, make_collection):
        collection = make_collection(capacity=3, placeholder="ipfs://p", seed=5, reveal=11)
        collection.set_layer(OPERATOR, 0, "Body", 5, [upload("Thin", 1), upload("Wide", 2)])

        collection.mint("alice", "alice", 3)
        collection.reveal(OPERATOR)

        identifiers = [collection.get_identifier(i) for i in range(3)]
        assert len(set(identifiers)) == 3

        for item_id, identifier in enumerate(identifiers):
            rotated = (identifier + 11) % 3
            value = scramble(rotated, 0, 11, 3, 5)
            expected = 0 if value < 1 else 1
            assert collection.trait_vector(item_id) == [expected]


class TestOffChainRendering:
    def test_owner_switches_image(self, make_collection):
        collection = make_collection(capacity=4, base_uri="https://cdn.example/art/")
        collection.set_layer(OPERATOR, 0, "Body", 5, [upload("Plain", 4)])
        collection.mint("alice", "alice", 2)

        collection.set_render_off_chain("alice", 1, True)

        assert json.loads(collection.metadata(1))["image"] == "https://cdn.example/art/1"
        assert json.loads(collection.metadata(0))["image"].startswith("data:image/svg+xml")

    def test_without_base_uri_stays_inline(self, sample_collection):
        sample_collection.mint("alice", "alice", 1)
        sample_collection.set_render_off_chain("alice", 0, True)

        assert json.loads(sample_collection.metadata(0))["image"].startswith("data:image/svg+xml")

    def test_non_owner_rejected(self, sample_collection):
        sample_collection.mint("alice", "alice", 1)

        with pytest.raises(NotAuthorizedError):
            sample_collection.set_render_off_chain("mallory", 0, True)

    def test_unminted_item_rejected(self, sample_collection):
        with pytest.raises(NotYetAvailableError):
            sample_collection.set_render_off_chain("alice", 0, True)


class TestOperatorGates:
    def test_catalog_calls_require_operator(self, sample_collection):
        with pytest.raises(NotAuthorizedError):
            sample_collection.set_layer("alice", 2, "Hat", 11, [upload("Cap", 20)])
        with pytest.raises(NotAuthorizedError):
            sample_collection.set_trait("alice", 0, 0, upload("Cap", 20))
        with pytest.raises(NotAuthorizedError):
            sample_collection.reuse_trait_data("alice", 0, 2, "Copy", 0, 0, 0)
        with pytest.raises(NotAuthorizedError):
            sample_collection.set_link("alice", 0, 0, 1, 1)
        with pytest.raises(NotAuthorizedError):
            sample_collection.clear_link("alice", 0, 1)

    def test_catalog_sealed_after_capacity(self, sample_collection):
        sample_collection.mint("alice", "alice", 20)

        with pytest.raises(NotAuthorizedError):
            sample_collection.set_trait(OPERATOR, 0, 2, upload("Silver", 0))


class TestPersistence:
    def test_reload_gives_same_traits(self, sample_collection, blob_store, tmp_path):
        sample_collection.mint("alice", "alice", 8)
        sample_collection.set_override(OPERATOR, sample_collection.get_identifier(3), [0, 1])
        path = save_state(sample_collection.state, tmp_path / "state.json")

        reloaded = Collection(load_state(path), blob_store)

        for item_id in range(8):
            assert reloaded.trait_vector(item_id) == sample_collection.trait_vector(item_id)
        assert reloaded.trait_vector(3) == [0, 1]
        assert reloaded.catalog.link(0, 1) is not None
        assert reloaded.pool.remaining == 12
        for item_id in range(8):
            assert reloaded.render_image(item_id) == sample_collection.render_image(item_id)

    def test_empty_store_is_used(self):
        """A caller-supplied store receives the blobs even when it starts empty."""
        store = MemoryBlobStore()
        collection = Collection.create(
            name="Test", capacity=4, operator=OPERATOR, blob_store=store, entropy=FixedEntropy(1)
        )
        collection.set_layer(OPERATOR, 0, "Body", 5, [upload("Plain", 4)])

        assert collection.blob_store is store
        assert len(store) == 1

        reopened = Collection(collection.state, store)
        reopened.mint("alice", "alice", 1)
        assert reopened.render_image(0).startswith("data:image/svg+xml;base64,")

    def test_missing_state_file(self, tmp_path):
        with pytest.raises(InvalidInputError):
            load_state(tmp_path / "nope.json")
