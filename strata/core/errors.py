"""Error taxonomy for Strata.

Every failure in the core propagates to the caller as one of four kinds.
None of them is transient, so nothing is retried.
"""


class StrataError(Exception):
    """Base class for all Strata errors."""


class NotYetAvailableError(StrataError):
    """The precondition for this call has not happened yet.

    Raised for queries against unallocated items and for trait derivation
    before the collection is revealed.
    """


class InvalidInputError(StrataError):
    """The caller supplied something malformed or nonexistent."""


class NotAuthorizedError(StrataError):
    """A policy gate rejected the call.

    Raised for catalog mutation after sealing, a second reveal, operator
    calls from a non-operator and owner calls from a non-owner.
    """


class InvalidTraitSelectionError(StrataError):
    """No trait interval in a layer contains the scrambled selection value.

    Means the layer's trait weights sum to less than the collection
    capacity.
    """

    def __init__(self, layer_index: int, layer_name: str, value: int) -> None:
        self.layer_index = layer_index
        self.layer_name = layer_name
        self.value = value
        super().__init__(
            f"No trait in layer {layer_index} ('{layer_name}') covers selection value {value}"
        )
