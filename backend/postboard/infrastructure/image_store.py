"""Image Store — directory-backed storage for uploaded post images.

Invariants:
    - save() persists bytes to disk before returning the public "images/<name>" path
    - Generated names never collide (uuid prefix) and never carry directory parts
    - delete() is best-effort: missing files and OS errors are logged, never raised
    - delete() only accepts paths it could have returned: "<url_prefix>/<name>"

Design Decisions:
    - aiofiles for file IO: keeps the event loop free during writes and unlinks
    - Returned paths are "<url_prefix>/<name>" whatever the root directory is,
      matching the static mount so clients can fetch them directly
"""

import logging
import os
import uuid
from pathlib import Path, PurePosixPath

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)


class LocalImageStore:
    """Stores images under a single directory."""

    def __init__(
        self, root: str | os.PathLike = "images", url_prefix: str = "images",
    ):
        self.root = Path(root)
        self.url_prefix = url_prefix.strip("/")

    def generate_name(self, original_name: str | None) -> str:
        base = Path(original_name or "").name.replace(" ", "-") or "image"
        return f"{uuid.uuid4().hex}-{base}"

    async def save(self, data: bytes, original_name: str | None) -> str:
        await aiofiles.os.makedirs(self.root, exist_ok=True)
        target = self.root / self.generate_name(original_name)
        async with aiofiles.open(target, "wb") as f:
            await f.write(data)
        logger.info(f"Stored image {target} ({len(data)} bytes)")
        return f"{self.url_prefix}/{target.name}"

    def _resolve_inside_root(self, path: str) -> Path | None:
        stored = PurePosixPath(path.lstrip("/"))
        if str(stored.parent) != self.url_prefix or stored.name in ("", ".", ".."):
            return None
        return self.root / stored.name

    async def delete(self, path: str) -> bool:
        """Remove a stored image. Returns True only if a file was removed."""
        target = self._resolve_inside_root(path)
        if target is None:
            logger.warning(f"Refusing to delete image outside storage root: {path}")
            return False
        try:
            await aiofiles.os.remove(target)
        except FileNotFoundError:
            logger.warning(f"Image already gone: {path}")
            return False
        except OSError as e:
            logger.error(f"Failed to delete image {path}: {e}")
            return False
        logger.info(f"Deleted image {path}")
        return True
