"""Durable blob storage on the local filesystem.

Blobs live under BLOB_DIR and are served back by the /blobs route, so the
URL returned by put() is stable and publicly fetchable as soon as it returns.
"""

import asyncio
import os
import tempfile
import uuid
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from ..config import BLOB_DIR, BLOB_ROUTE_PREFIX, PUBLIC_BASE_URL


class InvalidBlobPathError(ValueError):
    """Raised when a blob path is absolute or escapes the blob root."""


class LocalBlobStore:
    """
    Store bytes on disk and return their public URL.

    Args:
        root: Directory blobs are written under.
        public_base_url: Externally reachable base URL of the API.
    """

    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        public_base_url: Optional[str] = None,
    ):
        self.root = Path(root) if root is not None else BLOB_DIR
        self.public_base_url = (public_base_url or PUBLIC_BASE_URL).rstrip("/")

    def resolve(self, path: str) -> Path:
        """Map a blob path to its file on disk, rejecting paths outside the root."""
        relative = PurePosixPath(path)
        if not path or relative.is_absolute() or ".." in relative.parts:
            raise InvalidBlobPathError(f"Invalid blob path: {path!r}")
        return self.root.joinpath(*relative.parts)

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}{BLOB_ROUTE_PREFIX}/{path}"

    async def put(
        self,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        add_random_suffix: bool = False,
    ) -> str:
        """
        Write bytes under path and return the public URL.

        The write is atomic: a temp file in the target directory is renamed
        into place. content_type is accepted for interface parity with hosted
        stores; the serving route infers it from the file extension.

        Args:
            path: Relative blob path, e.g. "story-images/<id>/<ts>-0.png"
            data: Payload bytes
            content_type: MIME type of the payload
            add_random_suffix: Append a short random suffix before the extension
        """
        if add_random_suffix:
            original = PurePosixPath(path)
            suffix = uuid.uuid4().hex[:8]
            path = str(original.with_name(f"{original.stem}-{suffix}{original.suffix}"))

        target = self.resolve(path)
        await asyncio.to_thread(self._write_atomic, target, data)
        return self.public_url(path)

    @staticmethod
    def _write_atomic(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, target)
        except BaseException:
            os.unlink(tmp_path)
            raise
