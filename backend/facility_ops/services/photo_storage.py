"""
Object storage for work-log photos and employee avatars.

The default backend keeps blobs under ``PHOTO_STORAGE_DIR`` and serves
them from ``PHOTO_BASE_URL``. Keys are caller-chosen relative paths.
"""

import asyncio
import logging
import re
import time
from pathlib import Path

from facility_ops.core.config import settings
from facility_ops.core.exceptions import PhotoTooLargeError, StorageError

logger = logging.getLogger(__name__)

_unsafe_re = re.compile(r"[^A-Za-z0-9._-]+")


def make_key(prefix: str, filename: str | None) -> str:
    """``<prefix>/<epoch_ms>_<sanitised filename>``"""
    name = _unsafe_re.sub("_", Path(filename or "upload").name).strip("._") or "upload"
    return f"{prefix}/{int(time.time() * 1000)}_{name}"


class LocalPhotoStorage:
    def __init__(self, base_dir: str | Path, base_url: str):
        self.base_dir = Path(base_dir)
        self.base_url = base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        if self.base_dir.resolve() not in path.parents:
            raise StorageError(f"Invalid storage key '{key}'")
        return path

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    async def put(self, key: str, data: bytes) -> str:
        """Store ``data`` under ``key`` and return its public URL."""
        if len(data) > settings.PHOTO_MAX_BYTES:
            raise PhotoTooLargeError(
                f"File is {len(data)} bytes, limit is {settings.PHOTO_MAX_BYTES}"
            )
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as exc:
            logger.error("Photo upload failed for key '%s': %s", key, exc)
            raise StorageError("Photo upload failed") from exc
        logger.info("Stored %d bytes at '%s'", len(data), key)
        return self.url_for(key)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


storage = LocalPhotoStorage(settings.PHOTO_STORAGE_DIR, settings.PHOTO_BASE_URL)


def get_storage() -> LocalPhotoStorage:
    return storage
