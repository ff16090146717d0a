from legallens.logging.logger import Log
from legallens.storage import tables
from legallens.storage.backend import LocalStore
from legallens.storage.degrade import write_with_degrade
from legallens.storage.exceptions import StorageCorruptionError
from legallens.storage.models import Document
from legallens.storage.serializers import document_from_dict, document_to_dict


class DocumentsRepository:
    """Operations on the documents table."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def save(self, document: Document) -> Document:
        """Upsert a document by id, degrading to a copy without file data on quota.

        Returns:
            The document as passed in, with its file data, even when only the
            light copy could be stored.

        Raises:
            StorageQuotaExceededError: if the light copy does not fit either.
            StorageCorruptionError: if the existing table cannot be parsed.
        """
        return write_with_degrade(
            self._upsert,
            document,
            Document.without_file_data,
            label=f"document {document.id}",
        )

    def find_by_user(self, user_id: str) -> list[Document]:
        """All documents owned by user_id, newest upload first. Empty on corruption."""
        documents = [d for d in self._read_all() if d.user_id == user_id]
        return sorted(documents, key=lambda d: d.upload_date, reverse=True)

    def find_by_id(self, document_id: str) -> Document | None:
        """Return the document with this id, or None. Never raises on a missing key."""
        return next((d for d in self._read_all() if d.id == document_id), None)

    def _upsert(self, document: Document) -> None:
        row = document_to_dict(document)
        with self._store.transaction() as store:
            rows = tables.load_rows(store, tables.DOCUMENTS)
            index = next(
                (i for i, existing in enumerate(rows) if existing.get("id") == document.id),
                None,
            )
            if index is None:
                rows.append(row)
            else:
                rows[index] = row
            store.set_item(tables.DOCUMENTS, tables.dump_rows(rows))

    def _read_all(self) -> list[Document]:
        try:
            rows = tables.load_rows(self._store, tables.DOCUMENTS)
            return [document_from_dict(row) for row in rows]
        except (StorageCorruptionError, KeyError, TypeError, ValueError) as exc:
            Log.error(f"Failed to read documents, returning no results: {exc}")
            return []
