import json

from legallens.logging.logger import Log
from legallens.storage import tables
from legallens.storage.backend import LocalStore
from legallens.storage.exceptions import StorageCorruptionError
from legallens.storage.models import UserRecord
from legallens.storage.serializers import user_from_dict, user_to_dict


class UsersRepository:
    """Operations on the users table and the current-session user pointer."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def list_users(self) -> list[UserRecord]:
        try:
            rows = tables.load_rows(self._store, tables.USERS)
            return [user_from_dict(row) for row in rows]
        except (StorageCorruptionError, KeyError, TypeError) as exc:
            Log.error(f"Failed to read users, returning no results: {exc}")
            return []

    def save(self, user: UserRecord) -> UserRecord:
        """Insert the user or merge it into the existing record with the same id.

        Empty fields on the incoming record keep the stored values.
        """
        with self._store.transaction() as store:
            rows = tables.load_rows(store, tables.USERS)
            index = next(
                (i for i, row in enumerate(rows) if row.get("id") == user.id), None
            )
            if index is None:
                merged = user
                rows.append(user_to_dict(user))
            else:
                existing = user_from_dict(rows[index])
                merged = UserRecord(
                    id=user.id,
                    email=user.email or existing.email,
                    name=user.name or existing.name,
                )
                rows[index] = user_to_dict(merged)
            store.set_item(tables.USERS, tables.dump_rows(rows))
        return merged

    def get_current_user(self) -> UserRecord | None:
        try:
            raw = self._store.get_item(tables.CURRENT_USER)
            if raw is None:
                return None
            return user_from_dict(json.loads(raw))
        except (StorageCorruptionError, json.JSONDecodeError, KeyError, TypeError) as exc:
            Log.error(f"Failed to read current user: {exc}")
            return None

    def set_current_user(self, user: UserRecord | None) -> None:
        """Point the session at user, or clear the pointer when user is None."""
        if user is None:
            self._store.remove_item(tables.CURRENT_USER)
            return
        self._store.set_item(tables.CURRENT_USER, json.dumps(user_to_dict(user)))
