"""Unit tests for LocalBlobStore."""

import pytest

from backend.api.services.blob_store import InvalidBlobPathError, LocalBlobStore


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(root=tmp_path, public_base_url="http://testserver/")


class TestLocalBlobStore:
    """Tests for put() and path resolution."""

    @pytest.mark.asyncio
    async def test_put_writes_file_and_returns_public_url(self, store, tmp_path):
        url = await store.put("story-images/n-1/123-0.png", b"image", "image/png")

        assert url == "http://testserver/blobs/story-images/n-1/123-0.png"
        assert (tmp_path / "story-images" / "n-1" / "123-0.png").read_bytes() == b"image"

    @pytest.mark.asyncio
    async def test_put_overwrites_atomically(self, store, tmp_path):
        await store.put("a/b.png", b"first")
        await store.put("a/b.png", b"second")

        directory = tmp_path / "a"
        assert (directory / "b.png").read_bytes() == b"second"
        # No temp files are left behind
        assert [p.name for p in directory.iterdir()] == ["b.png"]

    @pytest.mark.asyncio
    async def test_random_suffix_keeps_extension(self, store):
        first = await store.put("uploads/u/photo.jpg", b"1", add_random_suffix=True)
        second = await store.put("uploads/u/photo.jpg", b"2", add_random_suffix=True)

        assert first != second
        for url in (first, second):
            name = url.rsplit("/", 1)[1]
            assert name.startswith("photo-")
            assert name.endswith(".jpg")
            assert len(name) == len("photo-12345678.jpg")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["", "/etc/passwd", "../escape.png", "a/../../b.png"])
    async def test_rejects_paths_outside_root(self, store, path):
        with pytest.raises(InvalidBlobPathError):
            await store.put(path, b"x")

    def test_resolve_maps_into_root(self, store, tmp_path):
        assert store.resolve("x/y.png") == tmp_path / "x" / "y.png"
