"""Tests for blob stores."""

import pytest

from strata.config import StorageConfig, StrataConfig
from strata.core.errors import InvalidInputError
from strata.core.storage import FileBlobStore, MemoryBlobStore, get_blob_store


class TestMemoryBlobStore:
    def test_write_read(self):
        store = MemoryBlobStore()

        handle = store.write(b"\x89PNG\r\n")

        assert store.read(handle) == b"\x89PNG\r\n"
        assert store.exists(handle)

    def test_unknown_handle(self):
        with pytest.raises(InvalidInputError):
            MemoryBlobStore().read("sha256:" + "0" * 64)


class TestFileBlobStore:
    def test_write_read(self, tmp_path):
        store = FileBlobStore(tmp_path / "blobs")
        data = bytes(range(256)) * 1000

        handle = store.write(data)

        assert store.read(handle) == data
        assert FileBlobStore(tmp_path / "blobs").read(handle) == data

    def test_write_once(self, tmp_path):
        store = FileBlobStore(tmp_path)
        handle = store.write(b"abc")
        path = tmp_path / handle[7:9] / handle[7:]
        mtime = path.stat().st_mtime_ns

        assert store.write(b"abc") == handle
        assert path.stat().st_mtime_ns == mtime

    def test_malformed_handle(self, tmp_path):
        store = FileBlobStore(tmp_path)

        with pytest.raises(InvalidInputError):
            store.read("../../etc/passwd")
        assert not store.exists("nope")

    def test_unknown_handle(self, tmp_path):
        with pytest.raises(InvalidInputError):
            FileBlobStore(tmp_path).read("sha256:" + "a" * 64)


class TestGetBlobStore:
    def test_memory_backend(self):
        config = StrataConfig(storage=StorageConfig(backend="memory"))

        assert isinstance(get_blob_store(config), MemoryBlobStore)

    def test_filesystem_backend(self, tmp_path):
        config = StrataConfig(storage=StorageConfig(blob_dir=str(tmp_path / "b")))

        store = get_blob_store(config)

        assert isinstance(store, FileBlobStore)
        assert store.root == tmp_path / "b"
