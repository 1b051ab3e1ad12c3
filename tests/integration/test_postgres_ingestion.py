import threading
from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest

from docvault.classification.classifier import Classifier
from docvault.classification.example_client_adapter import ExampleClientAdapter
from docvault.database.connection import Database
from docvault.database.repositories.audit_repository import AuditRepository
from docvault.database.repositories.document_repository import DocumentRepository
from docvault.database.repositories.quota_repository import QuotaRepository
from docvault.extraction.extractor import TextExtractor
from docvault.fingerprint.fingerprinter import ContentFingerprinter
from docvault.imaging.optimizer import BinaryOptimizer
from docvault.ingestion.exceptions import DuplicateContentError, QuotaExceededError
from docvault.ingestion.models import DocumentMetadata, IngestionRequest
from docvault.ingestion.orchestrator import IngestionOrchestrator
from docvault.ocr.tesseract_adapter import TesseractAdapter
from docvault.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docvault.quota.ledger import QuotaLedger
from docvault.renewal.models import RenewalPolicy
from docvault.renewal.scheduler import RenewalScheduler
from docvault.storage.local_adapter import LocalObjectStore


def _orchestrator(database: Database, root: Path) -> IngestionOrchestrator:
    accounts = QuotaRepository(database)
    return IngestionOrchestrator(
        fingerprinter=ContentFingerprinter(),
        optimizer=BinaryOptimizer(),
        extractor=TextExtractor.build(PdfPlumberAdapter(), TesseractAdapter()),
        classifier=Classifier(client=ExampleClientAdapter(), model="example"),
        quota=QuotaLedger(accounts, default_limit_bytes=10_000_000),
        store=LocalObjectStore(root=root),
        documents=DocumentRepository(database),
        accounts=accounts,
        audit=AuditRepository(database),
        today=lambda: date(2025, 1, 1),
    )


def _request(owner_id: str, data: bytes, filename: str = "acta.pdf") -> IngestionRequest:
    return IngestionRequest(
        owner_id=owner_id,
        file_bytes=data,
        filename=filename,
        mime_type="application/pdf",
        metadata=DocumentMetadata(
            title="Acta",
            type_policy=RenewalPolicy(has_expiration=True, renewal_period=6),
        ),
    )


class TestIngestionAgainstPostgres:
    def test_ingest_then_delete(
        self, database: Database, owner_id: str, tmp_path: Path, sample_pdf_bytes: bytes
    ) -> None:
        orchestrator = _orchestrator(database, tmp_path)
        try:
            record = orchestrator.ingest(_request(owner_id, sample_pdf_bytes))
            assert record.id is not None
            assert "Hello PDF World" in record.extracted_text
            assert record.expiration_date == date(2025, 7, 1)
            assert (tmp_path / record.storage_path).exists()

            account = QuotaRepository(database).get_account(owner_id)
            assert account is not None
            assert account.used_bytes == len(sample_pdf_bytes)
            assert account.document_count == 1

            with pytest.raises(DuplicateContentError):
                orchestrator.ingest(_request(owner_id, sample_pdf_bytes))

            orchestrator.delete_document(owner_id, record.id)
            account = QuotaRepository(database).get_account(owner_id)
            assert account is not None
            assert account.used_bytes == 0
            assert not (tmp_path / record.storage_path).exists()
        finally:
            orchestrator.close()

    def test_concurrent_uploads_respect_quota(
        self,
        database: Database,
        owner_id: str,
        tmp_path: Path,
        multi_page_pdf_bytes: bytes,
        sample_pdf_bytes: bytes,
        set_limit: Callable[..., None],
    ) -> None:
        set_limit(owner_id, max(len(multi_page_pdf_bytes), len(sample_pdf_bytes)) + 10)
        orchestrator = _orchestrator(database, tmp_path)
        errors: list[Exception] = []

        def upload(data: bytes, name: str) -> None:
            try:
                orchestrator.ingest(_request(owner_id, data, name))
            except QuotaExceededError as exc:
                errors.append(exc)

        threads = [
            threading.Thread(target=upload, args=(sample_pdf_bytes, "a.pdf")),
            threading.Thread(target=upload, args=(multi_page_pdf_bytes, "b.pdf")),
        ]
        try:
            for t in threads:
                t.start()
            for t in threads:
                t.join(30)
        finally:
            orchestrator.close()

        assert len(errors) == 1
        account = QuotaRepository(database).get_account(owner_id)
        assert account is not None
        assert account.used_bytes <= account.limit_bytes

    def test_scheduler_reads_ingested_documents(
        self, database: Database, owner_id: str, tmp_path: Path, sample_pdf_bytes: bytes
    ) -> None:
        orchestrator = _orchestrator(database, tmp_path)
        try:
            orchestrator.ingest(_request(owner_id, sample_pdf_bytes))
        finally:
            orchestrator.close()

        scheduler = RenewalScheduler(DocumentRepository(database), today=lambda: date(2025, 6, 26))
        expiring = scheduler.expiring_within(7, owner_id=owner_id)
        assert [e.days_until_expiration for e in expiring] == [5]
        assert scheduler.renewal_summary(owner_id).expiring_in_7_days == 1
