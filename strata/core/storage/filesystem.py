"""Filesystem blob store.

Blobs live at `<root>/<first two hex chars>/<hex digest>`. Files are
written once and never rewritten.
"""

import logging
from pathlib import Path

from ..errors import InvalidInputError
from .base import BlobStore, content_handle


logger = logging.getLogger(__name__)

_PREFIX = "sha256:"


class FileBlobStore(BlobStore):
    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, handle: str) -> Path:
        if not handle.startswith(_PREFIX):
            raise InvalidInputError(f"Malformed blob handle: {handle}")
        digest = handle[len(_PREFIX):]
        if len(digest) != 64 or not all(c in "0123456789abcdef" for c in digest):
            raise InvalidInputError(f"Malformed blob handle: {handle}")
        return self.root / digest[:2] / digest

    def write(self, data: bytes) -> str:
        handle = content_handle(data)
        path = self._path(handle)
        if path.exists():
            return handle

        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        with open(tmp, "wb") as f:
            f.write(data)
        tmp.replace(path)
        logger.info(f"[filesystem] stored {len(data)} bytes as {handle}")
        return handle

    def read(self, handle: str) -> bytes:
        path = self._path(handle)
        if not path.exists():
            raise InvalidInputError(f"Unknown blob handle: {handle}")
        with open(path, "rb") as f:
            return f.read()

    def exists(self, handle: str) -> bool:
        try:
            return self._path(handle).exists()
        except InvalidInputError:
            return False
