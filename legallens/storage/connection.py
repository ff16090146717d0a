from pathlib import Path

from legallens.config.settings import Settings
from legallens.storage.backend import LocalStore

_store: LocalStore | None = None


def init_store(settings: Settings) -> LocalStore:
    """Initialize the process-wide local store from settings."""
    global _store  # noqa: PLW0603
    _store = LocalStore(Path(settings.storage_dir), settings.storage_quota_bytes)
    return _store


def close_store() -> None:
    """Forget the process-wide local store."""
    global _store  # noqa: PLW0603
    _store = None


def get_store() -> LocalStore:
    """Return the process-wide store. Call init_store() first."""
    if _store is None:
        raise RuntimeError("Local store not initialized. Call init_store() first.")
    return _store
