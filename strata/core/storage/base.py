"""Abstract base class for blob stores."""

import hashlib
from abc import ABC, abstractmethod


def content_handle(data: bytes) -> str:
    """Content address for a byte string."""
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


class BlobStore(ABC):
    """Write-once byte storage addressed by opaque handles.

    Implementations must return exactly the bytes written for a handle,
    with no size limit. Writing the same bytes twice may or may not return
    the same handle; callers must not rely on either.
    """

    @abstractmethod
    def write(self, data: bytes) -> str:
        """Store bytes and return their handle."""
        ...

    @abstractmethod
    def read(self, handle: str) -> bytes:
        """Return the bytes stored under handle.

        Raises:
            InvalidInputError: If the handle is unknown
        """
        ...

    @abstractmethod
    def exists(self, handle: str) -> bool:
        ...
