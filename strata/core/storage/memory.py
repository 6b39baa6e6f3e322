"""In-memory blob store."""

import logging

from ..errors import InvalidInputError
from .base import BlobStore, content_handle


logger = logging.getLogger(__name__)


class MemoryBlobStore(BlobStore):
    """Dict-backed store, content addressed. Lives as long as the process."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    def write(self, data: bytes) -> str:
        handle = content_handle(data)
        if handle not in self._blobs:
            self._blobs[handle] = bytes(data)
            logger.debug(f"[memory] stored {len(data)} bytes as {handle}")
        return handle

    def read(self, handle: str) -> bytes:
        try:
            return self._blobs[handle]
        except KeyError:
            raise InvalidInputError(f"Unknown blob handle: {handle}") from None

    def exists(self, handle: str) -> bool:
        return handle in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)
