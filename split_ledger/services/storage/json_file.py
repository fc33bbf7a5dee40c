"""
JSON File Storage Implementation

DESIGN DECISION: Local files are the durable backend because:
1. The ledger is a single-user, single-session tool
2. No database setup required
3. Records stay human-readable and easy to back up

Each key is stored in its own `<key>.json` file inside the storage
directory, so the participant and bill records can be read, written and
corrupted independently, the same way two local-storage keys can.

Writes go to a temporary file first and are then moved into place, so a
crash mid-write leaves the previous record intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from split_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)


# Transient OS errors (locked file, busy network share) are retried.
_transient_io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


class JsonFileStorage(KeyValueStorageInterface):
    """
    File-per-key storage in a local directory.

    The directory is created on the first write.
    """

    def __init__(self, directory: Path):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        """Map a storage key to its file, refusing keys that escape the directory."""
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    @_transient_io_retry
    def _read_file(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @_transient_io_retry
    def _write_file(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            # Don't leave half-written temp files behind
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    @_transient_io_retry
    def _delete_file(self, path: Path) -> None:
        path.unlink(missing_ok=True)

    def get_item(self, key: str) -> Optional[str]:
        """Read the record stored under a key."""
        path = self._path_for(key)
        try:
            return self._read_file(path)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read '{key}': {e}")

    def set_item(self, key: str, value: str) -> None:
        """Atomically replace the record stored under a key."""
        path = self._path_for(key)
        try:
            self._write_file(path, value)
        except OSError as e:
            raise StorageError(f"Failed to write '{key}': {e}")

    def remove_item(self, key: str) -> None:
        """Delete the record stored under a key, if any."""
        path = self._path_for(key)
        try:
            self._delete_file(path)
        except OSError as e:
            raise StorageError(f"Failed to delete '{key}': {e}")
