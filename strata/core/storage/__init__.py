"""Blob storage for trait image bytes.

Providers:
    memory: MemoryBlobStore, process-local
    filesystem: FileBlobStore, content-addressed files under a root dir
"""

from .base import BlobStore, content_handle
from .memory import MemoryBlobStore
from .filesystem import FileBlobStore


def get_blob_store(config=None) -> BlobStore:
    """Build the blob store selected by config.

    Args:
        config: StrataConfig, loaded from disk if omitted

    Returns:
        A BlobStore instance
    """
    if config is None:
        from ...config import load_config

        config = load_config()

    backend = config.storage.backend
    if backend == "memory":
        return MemoryBlobStore()
    if backend == "filesystem":
        return FileBlobStore(config.storage.blob_dir)
    raise ValueError(f"Unknown storage backend: {backend}")


__all__ = [
    "BlobStore",
    "content_handle",
    "MemoryBlobStore",
    "FileBlobStore",
    "get_blob_store",
]
