"""Blob storage for images attached to posts.

The post service only depends on the :class:`ImageStore` protocol: hand over
bytes, get back a URL the browser can load. :class:`LocalImageStore` keeps the
files in a directory that the application serves as static files.
"""
from __future__ import annotations

import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from cityscope.core.errors import StorageError
from cityscope.core.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageUpload:
    """An image received from the client, not yet stored."""

    filename: str | None
    content_type: str | None
    data: bytes


class ImageStore(Protocol):
    """Anything able to persist image bytes and return a retrievable URL."""

    def save(self, upload: ImageUpload) -> str:
        """Persist ``upload`` and return its URL. Raises StorageError on failure."""
        ...

    def discard(self, url: str) -> None:
        """Remove a previously saved image. Unknown URLs are ignored."""
        ...


class LocalImageStore:
    """Stores images on the local filesystem under ``media_dir``."""

    def __init__(self, media_dir: str | Path, base_url: str) -> None:
        self.media_dir = Path(media_dir)
        self.base_url = base_url.rstrip("/")

    def _suffix(self, upload: ImageUpload) -> str:
        if upload.filename and Path(upload.filename).suffix:
            return Path(upload.filename).suffix.lower()
        guessed = mimetypes.guess_extension(upload.content_type or "")
        return guessed or ""

    def save(self, upload: ImageUpload) -> str:
        name = f"{uuid.uuid4().hex}{self._suffix(upload)}"
        try:
            self.media_dir.mkdir(parents=True, exist_ok=True)
            (self.media_dir / name).write_bytes(upload.data)
        except OSError as exc:
            logger.error("Failed to store image %s: %s", name, exc)
            raise StorageError(f"could not write image {name}") from exc
        logger.info("Stored image %s (%d bytes)", name, len(upload.data))
        return f"{self.base_url}/{name}"

    def discard(self, url: str) -> None:
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return
        name = Path(url[len(prefix):]).name
        try:
            (self.media_dir / name).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"could not remove image {name}") from exc


_image_store: ImageStore | None = None


def get_image_store() -> ImageStore:
    """Return the process-wide image store configured from settings."""
    global _image_store
    if _image_store is None:
        _image_store = LocalImageStore(settings.media_dir, settings.media_url)
    return _image_store
