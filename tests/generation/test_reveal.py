"""Tests for reveal and override control."""

import json

import pytest

from strata.core.errors import InvalidInputError, NotAuthorizedError, NotYetAvailableError

from conftest import OPERATOR, upload


PLACEHOLDER = "ipfs://placeholder.png"


@pytest.fixture
def hidden_collection(make_collection):
    """Delayed-reveal collection with 6 items minted."""
    collection = make_collection(capacity=6, placeholder=PLACEHOLDER, reveal=11)
    collection.set_layer(OPERATOR, 0, "Body", 5, [upload("Plain", 3), upload("Gold", 3)])
    collection.mint("buyer", "buyer", 6)
    return collection


class TestImmediateReveal:
    def test_revealed_at_creation_without_placeholder(self, make_collection):
        collection = make_collection(capacity=5)

        assert collection.is_revealed()
        assert collection.state.immediate_reveal
        assert collection.reveal_controller.derivation_identifier(3) == 3

    def test_second_reveal_rejected(self, make_collection):
        collection = make_collection(capacity=5)

        with pytest.raises(NotAuthorizedError):
            collection.reveal(OPERATOR)


class TestDelayedReveal:
    """Tests for the Hidden -> Revealed transition."""

    def test_hidden_until_revealed(self, hidden_collection):
        assert not hidden_collection.is_revealed()
        assert hidden_collection.state.reveal_seed == 0

    def test_placeholder_for_every_item(self, hidden_collection):
        for item_id in range(6):
            assert hidden_collection.render_image(item_id) == PLACEHOLDER

    def test_derivation_refused_while_hidden(self, hidden_collection):
        with pytest.raises(NotYetAvailableError):
            hidden_collection.trait_vector(0)
        with pytest.raises(NotYetAvailableError):
            hidden_collection.render_attributes(0)
        with pytest.raises(NotYetAvailableError):
            hidden_collection.derive_trait_vector(hidden_collection.get_identifier(0))

    def test_hidden_metadata(self, hidden_collection):
        document = json.loads(hidden_collection.metadata(2))

        assert document["image"] == PLACEHOLDER
        assert document["name"] == "Test #2"
        assert "attributes" not in document

    def test_reveal_sets_seed_once(self, hidden_collection):
        seed = hidden_collection.reveal(OPERATOR)

        assert seed == 11
        assert hidden_collection.is_revealed()
        assert not hidden_collection.state.immediate_reveal
        with pytest.raises(NotAuthorizedError):
            hidden_collection.reveal(OPERATOR)
        assert hidden_collection.state.reveal_seed == 11

    def test_reveal_requires_operator(self, hidden_collection):
        with pytest.raises(NotAuthorizedError):
            hidden_collection.reveal("buyer")

        assert not hidden_collection.is_revealed()

    def test_rejected_reveal_leaves_history_untouched(self, hidden_collection):
        sequence = hidden_collection.state.sequence

        with pytest.raises(NotAuthorizedError):
            hidden_collection.reveal("buyer")

        assert hidden_collection.state.sequence == sequence

    def test_zero_seed_still_reveals(self, make_collection):
        collection = make_collection(capacity=4, placeholder=PLACEHOLDER, reveal=0)

        assert collection.reveal(OPERATOR) == 1
        assert collection.is_revealed()

    def test_delayed_reveal_rotates_identifier(self, hidden_collection):
        hidden_collection.reveal(OPERATOR)

        for identifier in range(6):
            rotated = hidden_collection.reveal_controller.derivation_identifier(identifier)
            assert rotated == (identifier + 11) % 6

    def test_revealed_image_is_svg(self, hidden_collection):
        hidden_collection.reveal(OPERATOR)

        assert hidden_collection.render_image(0).startswith("data:image/svg+xml;base64,")


class TestPlaceholderSettings:
    def test_placeholder_change_before_reveal(self, hidden_collection):
        hidden_collection.set_placeholder(OPERATOR, "ipfs://new.png")

        assert hidden_collection.render_image(0) == "ipfs://new.png"

    def test_placeholder_frozen_after_reveal(self, hidden_collection):
        hidden_collection.reveal(OPERATOR)

        with pytest.raises(NotAuthorizedError):
            hidden_collection.set_placeholder(OPERATOR, "ipfs://new.png")

    def test_description_changes_any_time(self, hidden_collection):
        hidden_collection.reveal(OPERATOR)

        hidden_collection.set_description(OPERATOR, "Updated")

        assert json.loads(hidden_collection.metadata(0))["description"] == "Updated"

    def test_settings_require_operator(self, hidden_collection):
        with pytest.raises(NotAuthorizedError):
            hidden_collection.set_placeholder("buyer", "x")
        with pytest.raises(NotAuthorizedError):
            hidden_collection.set_description("buyer", "x")
        with pytest.raises(NotAuthorizedError):
            hidden_collection.set_base_uri("buyer", "x")


class TestOverrides:
    """Tests for per-identifier overrides."""

    def test_override_returned_after_reveal(self, hidden_collection):
        identifier = hidden_collection.get_identifier(0)
        hidden_collection.set_override(OPERATOR, identifier, [1])
        hidden_collection.reveal(OPERATOR)

        assert hidden_collection.derive_trait_vector(identifier) == [1]
        assert hidden_collection.trait_vector(0) == [1]

    def test_override_allowed_after_seal_and_reveal(self, hidden_collection):
        hidden_collection.reveal(OPERATOR)
        assert hidden_collection.capacity_reached()

        hidden_collection.set_override(OPERATOR, 4, [0])

        assert hidden_collection.derive_trait_vector(4) == [0]

    def test_empty_override_clears(self, hidden_collection):
        hidden_collection.set_override(OPERATOR, 2, [1])

        hidden_collection.set_override(OPERATOR, 2, [])

        assert 2 not in hidden_collection.state.overrides

    def test_wrong_length_rejected(self, hidden_collection):
        with pytest.raises(InvalidInputError):
            hidden_collection.set_override(OPERATOR, 2, [0, 1])

    def test_unknown_trait_rejected(self, hidden_collection):
        with pytest.raises(InvalidInputError):
            hidden_collection.set_override(OPERATOR, 2, [5])

    def test_identifier_out_of_range(self, hidden_collection):
        with pytest.raises(InvalidInputError):
            hidden_collection.set_override(OPERATOR, 6, [0])

    def test_requires_operator(self, hidden_collection):
        with pytest.raises(NotAuthorizedError):
            hidden_collection.set_override("buyer", 2, [0])
