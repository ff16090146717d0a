"""Fixed table keys and helpers for the list-of-rows JSON blobs."""

import json
from typing import Any

from legallens.storage.backend import LocalStore
from legallens.storage.exceptions import StorageCorruptionError

USERS = "legallens_users"
DOCUMENTS = "legallens_documents"
CURRENT_USER = "legallens_current_user"
RECENT_ANALYSES = "legallens_recent_analyses"


def load_rows(store: LocalStore, key: str) -> list[dict[str, Any]]:
    """Read a table blob as a list of row dicts. A missing table is empty.

    Raises:
        StorageCorruptionError: if the blob is not a JSON list of objects.
    """
    raw = store.get_item(key)
    if raw is None:
        return []
    try:
        rows = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageCorruptionError(f"Table '{key}' is not valid JSON: {exc}") from exc
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise StorageCorruptionError(f"Table '{key}' must be a list of objects")
    return rows


def dump_rows(rows: list[dict[str, Any]]) -> str:
    return json.dumps(rows, ensure_ascii=False, separators=(",", ":"))
