from datetime import datetime, timezone

import pytest

from legallens.analysis.models import Analysis, RiskLevel
from legallens.storage import tables
from legallens.storage.backend import LocalStore
from legallens.storage.exceptions import StorageCorruptionError
from legallens.storage.models import Document, RecentAnalysisEntry
from legallens.storage.repositories.recent_analyses_repository import (
    MAX_RECENT_ANALYSES,
    RecentAnalysesRepository,
)


def _make_entry(entry_id: str, risk_score: int = 10) -> RecentAnalysisEntry:
    return RecentAnalysisEntry(
        id=entry_id,
        name=f"{entry_id}.pdf",
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        risk_score=risk_score,
        risk_summary=RiskLevel.LOW,
        file_name=f"{entry_id}.pdf",
    )


class TestUpsert:
    def test_newest_entry_first(self, store: LocalStore) -> None:
        repo = RecentAnalysesRepository(store)
        repo.upsert(_make_entry("a"))
        repo.upsert(_make_entry("b"))
        assert [e.id for e in repo.find_all()] == ["b", "a"]

    def test_keeps_only_ten_most_recent(self, store: LocalStore) -> None:
        repo = RecentAnalysesRepository(store)
        for i in range(13):
            repo.upsert(_make_entry(f"e{i}"))

        entries = repo.find_all()

        assert len(entries) == MAX_RECENT_ANALYSES == 10
        assert [e.id for e in entries] == [f"e{i}" for i in range(12, 2, -1)]

    def test_reinsert_moves_to_front_without_duplicates(self, store: LocalStore) -> None:
        repo = RecentAnalysesRepository(store)
        for entry_id in ("a", "b", "c"):
            repo.upsert(_make_entry(entry_id))

        repo.upsert(_make_entry("a", risk_score=80))

        entries = repo.find_all()
        assert [e.id for e in entries] == ["a", "c", "b"]
        assert entries[0].risk_score == 80

    def test_unreadable_cache_fails_the_write(self, store: LocalStore) -> None:
        store.set_item(tables.RECENT_ANALYSES, "garbage")
        repo = RecentAnalysesRepository(store)

        with pytest.raises(StorageCorruptionError):
            repo.upsert(_make_entry("a"))

        assert store.get_item(tables.RECENT_ANALYSES) == "garbage"


class TestReadAndClear:
    def test_empty_cache(self, store: LocalStore) -> None:
        assert RecentAnalysesRepository(store).find_all() == []

    def test_corrupted_cache_reads_as_empty(self, store: LocalStore) -> None:
        store.set_item(tables.RECENT_ANALYSES, "[{")
        assert RecentAnalysesRepository(store).find_all() == []

    def test_clear_empties_cache(self, store: LocalStore) -> None:
        repo = RecentAnalysesRepository(store)
        repo.upsert(_make_entry("a"))
        repo.clear()
        assert repo.find_all() == []


class TestFromDocument:
    def test_projects_document_analysis(self) -> None:
        document = Document(
            id="doc-9",
            user_id="ann@example.com",
            file_name="lease.pdf",
            upload_date=datetime(2025, 2, 2, tzinfo=timezone.utc),
            mime_type="application/pdf",
            analysis=Analysis(
                summary="Lease summary",
                overall_risk=RiskLevel.HIGH,
                risk_score=85,
                full_text="full text",
            ),
        )

        entry = RecentAnalysisEntry.from_document(document)

        assert entry.id == "doc-9"
        assert entry.name == "lease.pdf"
        assert entry.created_at == document.upload_date
        assert entry.source_type == "file"
        assert entry.raw_text == "full text"
        assert entry.risk_score == 85
        assert entry.risk_summary is RiskLevel.HIGH
        assert entry.summary == ["Lease summary"]
