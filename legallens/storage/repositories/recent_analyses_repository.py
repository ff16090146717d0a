from legallens.logging.logger import Log
from legallens.storage import tables
from legallens.storage.backend import LocalStore
from legallens.storage.exceptions import StorageCorruptionError
from legallens.storage.models import RecentAnalysisEntry
from legallens.storage.serializers import recent_entry_from_dict, recent_entry_to_dict

MAX_RECENT_ANALYSES = 10


class RecentAnalysesRepository:
    """Bounded most-recent-first cache of analysis projections."""

    def __init__(self, store: LocalStore, limit: int = MAX_RECENT_ANALYSES) -> None:
        self._store = store
        self._limit = limit

    def find_all(self) -> list[RecentAnalysisEntry]:
        """Cached entries, most recent first. Empty on corruption."""
        try:
            rows = tables.load_rows(self._store, tables.RECENT_ANALYSES)
            return [recent_entry_from_dict(row) for row in rows]
        except (StorageCorruptionError, KeyError, TypeError, ValueError) as exc:
            Log.error(f"Failed to read recent analyses, returning no results: {exc}")
            return []

    def upsert(self, entry: RecentAnalysisEntry) -> None:
        """Move or insert entry at the front and evict anything past the limit.

        Raises:
            StorageCorruptionError: if the existing cache cannot be parsed.
            StorageQuotaExceededError: if the cache does not fit; entries are
                never degraded.
        """
        with self._store.transaction() as store:
            rows = tables.load_rows(store, tables.RECENT_ANALYSES)
            kept = [row for row in rows if row.get("id") != entry.id]
            rows = [recent_entry_to_dict(entry), *kept][: self._limit]
            store.set_item(tables.RECENT_ANALYSES, tables.dump_rows(rows))

    def clear(self) -> None:
        self._store.remove_item(tables.RECENT_ANALYSES)
