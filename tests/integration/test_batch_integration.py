"""End-to-end batch runs against a real local store and the offline example provider."""

import asyncio
from pathlib import Path

from legallens.analysis.analyzer import DocumentAnalyzer
from legallens.analysis.example_client_adapter import ExampleClientAdapter
from legallens.ingestion.batch import build_upload_batch
from legallens.ingestion.file_loader import FileLoader
from legallens.ingestion.models import CandidateFile, UploadStatus
from legallens.storage.backend import LocalStore
from legallens.storage.repositories.documents_repository import DocumentsRepository
from legallens.storage.repositories.recent_analyses_repository import (
    RecentAnalysesRepository,
)

_USER = "ann@example.com"


def _analyzer() -> DocumentAnalyzer:
    return DocumentAnalyzer(client=ExampleClientAdapter(), model="example")


class TestBatchIntegration:
    def test_mixed_submission_persists_valid_files(
        self, tmp_path: Path, sample_pdf_bytes: bytes, store: LocalStore
    ) -> None:
        pdf_path = tmp_path / "service_agreement.pdf"
        pdf_path.write_bytes(sample_pdf_bytes)
        loader = FileLoader()
        batch = build_upload_batch(_analyzer(), store, _USER)

        submitted = batch.submit([
            loader.load(pdf_path),
            CandidateFile(name="scan.png", media_type="image/png", content=b"\x89PNG\r\n"),
            CandidateFile(name="notes.txt", media_type="text/plain", content=b"hello"),
        ])
        settled = asyncio.run(batch.analyze_all())

        assert [r.file_name for r in submitted.rejected] == ["notes.txt"]
        assert settled is not None
        assert [i.status for i in settled.items] == [UploadStatus.SUCCESS] * 2
        assert settled.navigate_to is None

        documents = DocumentsRepository(store).find_by_user(_USER)
        assert {d.file_name for d in documents} == {"service_agreement.pdf", "scan.png"}
        assert all(d.file_data for d in documents)
        assert all(d.analysis.overall_risk.value == "Low" for d in documents)
        recent_ids = {e.id for e in RecentAnalysesRepository(store).find_all()}
        assert recent_ids == {d.id for d in documents}

    def test_single_file_navigates_to_saved_document(
        self, sample_pdf_bytes: bytes, store: LocalStore
    ) -> None:
        batch = build_upload_batch(_analyzer(), store, _USER)
        batch.submit([CandidateFile("lease.pdf", "application/pdf", sample_pdf_bytes)])

        settled = asyncio.run(batch.analyze_all())

        assert settled is not None and settled.navigate_to is not None
        stored = DocumentsRepository(store).find_by_id(settled.navigate_to.id)
        assert stored == settled.navigate_to

    def test_empty_file_fails_alone(self, sample_pdf_bytes: bytes, store: LocalStore) -> None:
        batch = build_upload_batch(_analyzer(), store, _USER)
        batch.submit([
            CandidateFile("a.pdf", "application/pdf", sample_pdf_bytes),
            CandidateFile("b.pdf", "application/pdf", b""),
        ])

        asyncio.run(batch.analyze_all())

        by_name = {i.name: i for i in batch.items}
        assert by_name["a.pdf"].status is UploadStatus.SUCCESS
        assert by_name["b.pdf"].status is UploadStatus.ERROR
        assert by_name["b.pdf"].error == "Could not read file: File is empty"
        assert [d.file_name for d in DocumentsRepository(store).find_by_user(_USER)] == ["a.pdf"]


class TestQuotaIntegration:
    def test_large_file_is_stored_without_file_data(self, tmp_path: Path) -> None:
        store = LocalStore(tmp_path / "small", quota_bytes=3000)
        batch = build_upload_batch(_analyzer(), store, _USER)
        batch.submit([CandidateFile("big.pdf", "application/pdf", b"%PDF-1.4" + b"0" * 4000)])

        settled = asyncio.run(batch.analyze_all())

        assert settled is not None and settled.navigate_to is not None
        assert settled.navigate_to.file_data is not None
        stored = DocumentsRepository(store).find_by_id(settled.navigate_to.id)
        assert stored is not None
        assert stored.file_data is None
        assert stored.analysis == settled.navigate_to.analysis

    def test_full_store_fails_item(self, tmp_path: Path, sample_pdf_bytes: bytes) -> None:
        store = LocalStore(tmp_path / "tiny", quota_bytes=100)
        batch = build_upload_batch(_analyzer(), store, _USER)
        batch.submit([CandidateFile("a.pdf", "application/pdf", sample_pdf_bytes)])

        settled = asyncio.run(batch.analyze_all())

        assert settled is not None
        (item,) = settled.items
        assert item.status is UploadStatus.ERROR
        assert item.error == "Storage is full, the analysis could not be saved"
        assert settled.navigate_to is None
