"""Filesystem storage for raw audio bytes."""

import logging
from pathlib import Path

from app.config import get_settings
from app.errors import StorageError

logger = logging.getLogger("voz_social")


class AudioStore:
    """Stores audio files below ``base_dir`` as ``<owner_id>/<name>``.

    The returned storage reference is opaque to callers; only this class
    knows how it maps to a path.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def _resolve(self, storage_ref: str) -> Path:
        base = self.base_dir.resolve()
        path = (base / storage_ref).resolve()
        if not storage_ref or base not in path.parents:
            raise StorageError(f"Invalid storage reference '{storage_ref}'")
        return path

    def save(self, data: bytes, name: str, owner_id: int) -> str:
        """Write bytes under a unique name. Returns the storage reference."""
        storage_ref = f"{owner_id}/{name}"
        path = self._resolve(storage_ref)

        try:
            # exist_ok keeps concurrent first uploads for the same owner from failing
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Could not create audio directory %s: %s", path.parent, e)
            raise StorageError("Could not create audio storage directory") from e

        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.error("Could not write audio file %s: %s", storage_ref, e)
            path.unlink(missing_ok=True)
            raise StorageError("Could not save audio file") from e

        logger.debug("Stored audio %s (%d bytes)", storage_ref, len(data))
        return storage_ref

    def read(self, storage_ref: str) -> bytes:
        """Return the stored bytes. Raises StorageError if missing or unreadable."""
        path = self._resolve(storage_ref)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"Could not read audio file '{storage_ref}'") from e

    def delete(self, storage_ref: str) -> None:
        """Best-effort delete. A missing file counts as deleted; other failures are only logged."""
        try:
            path = self._resolve(storage_ref)
            path.unlink(missing_ok=True)
        except StorageError as e:
            logger.warning("Skipping audio delete: %s", e)
        except OSError as e:
            logger.warning("Could not delete audio file %s: %s", storage_ref, e)
        else:
            logger.debug("Deleted audio %s", storage_ref)


_audio_store: AudioStore | None = None


def get_audio_store() -> AudioStore:
    """Get singleton audio store instance."""
    global _audio_store
    if _audio_store is None:
        _audio_store = AudioStore(get_settings().AUDIO_STORAGE_DIR)
    return _audio_store
