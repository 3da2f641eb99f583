"""Blob storage for uploaded PDF artifacts."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class BlobStoreError(Exception):
    pass


class BlobStore(Protocol):
    def put(self, name: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``name`` and return a retrievable URL."""


class LocalBlobStore:
    """Writes blobs into a directory and serves them under ``base_url``.

    Files are written to a temporary name and renamed into place, so a reader
    never sees a partially written file.
    """

    def __init__(self, directory: str | Path, base_url: str = "/exports"):
        self.directory = Path(directory)
        self.base_url = base_url.rstrip("/")

    def put(self, name: str, data: bytes, content_type: str) -> str:
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise BlobStoreError(f"Invalid blob name: {name!r}")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_path, self.directory / name)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise BlobStoreError(f"Could not store {name}: {exc}") from exc
        logger.info("Stored %s (%d bytes, %s)", name, len(data), content_type)
        return f"{self.base_url}/{name}"
