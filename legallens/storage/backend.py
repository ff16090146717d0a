import errno
import os
import re
import threading
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from legallens.storage.exceptions import (
    StorageCorruptionError,
    StorageError,
    StorageQuotaExceededError,
)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStore:
    """Key-value store of JSON blobs sharing one byte quota.

    Every key maps to ``<root>/<key>.json``. Writes go through a temporary file
    and an atomic rename, so a failed write leaves the previous blob intact.
    """

    SUFFIX = ".json"

    def __init__(self, root: Path, quota_bytes: int) -> None:
        self._root = root
        self._quota_bytes = quota_bytes
        self._lock = threading.RLock()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def quota_bytes(self) -> int:
        return self._quota_bytes

    @contextmanager
    def transaction(self) -> Generator["LocalStore", None, None]:
        """Hold the store lock for a read-modify-write sequence on one table."""
        with self._lock:
            yield self

    def get_item(self, key: str) -> str | None:
        """Return the raw blob for key, or None when it was never written.

        Raises:
            StorageCorruptionError: if the blob exists but cannot be read.
        """
        path = self._path(key)
        with self._lock:
            try:
                return path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None
            except (OSError, UnicodeDecodeError) as exc:
                raise StorageCorruptionError(f"Failed to read '{key}': {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        """Replace the blob for key.

        Raises:
            StorageQuotaExceededError: if the store would grow past its quota.
            StorageError: on any other filesystem failure.
        """
        path = self._path(key)
        encoded = value.encode("utf-8")
        with self._lock:
            used = self._used_bytes(excluding=path)
            if used + len(encoded) > self._quota_bytes:
                raise StorageQuotaExceededError(
                    f"Writing {len(encoded)} bytes to '{key}' exceeds the "
                    f"{self._quota_bytes} byte quota ({used} bytes in use)"
                )
            tmp_path = path.with_name(path.name + ".tmp")
            try:
                tmp_path.write_bytes(encoded)
                os.replace(tmp_path, path)
            except OSError as exc:
                tmp_path.unlink(missing_ok=True)
                if exc.errno in (errno.ENOSPC, errno.EDQUOT):
                    raise StorageQuotaExceededError(
                        f"No space left to write '{key}': {exc}"
                    ) from exc
                raise StorageError(f"Failed to write '{key}': {exc}") from exc

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise StorageError(f"Failed to remove '{key}': {exc}") from exc

    def _used_bytes(self, excluding: Path | None = None) -> int:
        total = 0
        for blob in self._root.glob(f"*{self.SUFFIX}"):
            if blob == excluding:
                continue
            try:
                total += blob.stat().st_size
            except FileNotFoundError:
                continue
        return total

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}{self.SUFFIX}"
