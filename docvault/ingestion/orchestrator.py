"""Ingestion pipeline and document lifecycle operations.

Write order for a new document: quota check, object upload, row insert,
quota commit. All four run under the owner's lock so that two uploads
by the same owner cannot both pass the quota check. A failed or
interrupted insert deletes the object that was just uploaded.
"""

import concurrent.futures
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import date

import psycopg

from docvault.classification.base import BaseClassifier
from docvault.classification.factory import ClassifierFactory
from docvault.classification.models import ClassificationResult
from docvault.classification.validator import fallback_classification
from docvault.config.settings import Settings
from docvault.database.connection import Database
from docvault.database.models import AuditEntry, DocumentClass, DocumentRecord, DocumentStatus
from docvault.database.repositories.audit_repository import AuditRepository
from docvault.database.repositories.document_repository import DocumentRepository
from docvault.database.repositories.quota_repository import QuotaRepository
from docvault.extraction.extractor import TextExtractor
from docvault.extraction.models import ExtractionOutcome
from docvault.fingerprint.fingerprinter import ContentFingerprinter
from docvault.imaging.optimizer import BinaryOptimizer
from docvault.ingestion.exceptions import (
    AuditWarning,
    CounterUpdateWarning,
    DocumentNotFoundError,
    DuplicateContentError,
    InvalidStatusTransitionError,
    PersistenceError,
    QuotaDriftWarning,
    QuotaExceededError,
    StorageError,
    ValidationError,
)
from docvault.ingestion.locks import OwnerLocks
from docvault.ingestion.mime import is_allowed, normalize_mime
from docvault.ingestion.models import IngestionOutcome, IngestionRequest
from docvault.logging.logger import Log
from docvault.ocr.progress import OcrProgress
from docvault.ocr.tesseract_adapter import TesseractAdapter
from docvault.pdf.factory import PdfExtractorFactory
from docvault.quota.ledger import QuotaLedger
from docvault.renewal.models import RenewalUnit
from docvault.renewal.scheduler import calculate_expiration
from docvault.storage.base import BaseObjectStore
from docvault.storage.exceptions import ObjectNotFoundError, ObjectStoreError
from docvault.storage.factory import ObjectStoreFactory
from docvault.storage.paths import object_path

ALLOWED_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.DRAFT: frozenset({
        DocumentStatus.PENDING,
        DocumentStatus.APPROVED,
        DocumentStatus.REJECTED,
    }),
    DocumentStatus.PENDING: frozenset({DocumentStatus.APPROVED, DocumentStatus.REJECTED}),
    DocumentStatus.APPROVED: frozenset({DocumentStatus.ARCHIVED}),
    DocumentStatus.REJECTED: frozenset({DocumentStatus.ARCHIVED}),
    DocumentStatus.ARCHIVED: frozenset(),
}

COMPENSATION_ATTEMPTS = 2


class IngestionOrchestrator:
    """Turns an upload into a persisted, quota-accounted DocumentRecord."""

    def __init__(
        self,
        *,
        fingerprinter: ContentFingerprinter,
        optimizer: BinaryOptimizer,
        extractor: TextExtractor,
        classifier: BaseClassifier,
        quota: QuotaLedger,
        store: BaseObjectStore,
        documents: DocumentRepository,
        accounts: QuotaRepository,
        audit: AuditRepository,
        processing_timeout_seconds: float = 90,
        signed_url_ttl_seconds: int = 3600,
        today: Callable[[], date] = date.today,
        locks: OwnerLocks | None = None,
        max_workers: int = 4,
    ) -> None:
        self._fingerprinter = fingerprinter
        self._optimizer = optimizer
        self._extractor = extractor
        self._classifier = classifier
        self._quota = quota
        self._store = store
        self._documents = documents
        self._accounts = accounts
        self._audit = audit
        self._timeout = processing_timeout_seconds
        self._signed_url_ttl = signed_url_ttl_seconds
        self._today = today
        self._locks = locks or OwnerLocks()
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="docvault-analysis"
        )

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def ingest(self, request: IngestionRequest) -> DocumentRecord:
        """Run the full ingestion pipeline.

        Raises:
            ValidationError: unsupported MIME type, empty file or missing entity.
            DuplicateContentError: the owner already stores these bytes.
            QuotaExceededError: the optimized file does not fit; nothing written.
            StorageError: the object store rejected the upload; nothing persisted.
            PersistenceError: the row could not be written; the upload was removed.
        """
        self._validate(request)
        request = replace(request, mime_type=normalize_mime(request.mime_type))
        content_hash = self._fingerprinter.fingerprint(request.file_bytes)
        self._reject_duplicate(request, content_hash)

        outcome = self._analyze(request, content_hash)
        owner_id = request.owner_id

        path = object_path(
            owner_id,
            request.filename,
            outcome.mime_type,
            request.metadata.folder,
            from_mime=outcome.mime_type != request.mime_type,
        )
        record = self._build_record(request, outcome, path)

        with self._locks.hold(owner_id):
            # Same bytes may have been committed while this upload was being analyzed.
            self._reject_duplicate(request, content_hash)
            self._enforce_quota(owner_id, outcome.processed_size)
            self._upload(path, outcome.processed_bytes, outcome.mime_type)
            record = self._insert_or_compensate(record)
            self._commit_quota(owner_id, record.stored_size_bytes)

        self._adjust_counter(owner_id, 1)
        self._write_audit(
            "DOCUMENT_UPLOADED",
            record,
            {
                "file_name": record.file_name,
                "stored_size_bytes": record.stored_size_bytes,
                "compression_ratio": outcome.compression_ratio,
                "category": outcome.classification.category,
                "degraded": outcome.degraded,
            },
        )
        Log.info(
            f"Ingested '{request.filename}' as document {record.id} for owner {owner_id} "
            f"({outcome.original_size} -> {outcome.processed_size} bytes)"
        )
        return record

    def delete_document(self, owner_id: str, document_id: str) -> DocumentRecord:
        """Remove a document, its stored bytes and its quota share.

        The row goes first: if that fails the stored bytes are left intact.

        Raises:
            DocumentNotFoundError: if the document does not exist or belongs to someone else.
            PersistenceError: the row could not be deleted; nothing was changed.
        """
        record = self._documents.find_by_id(document_id)
        if record.owner_id != owner_id:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        try:
            self._documents.delete(document_id)
        except psycopg.Error as exc:
            raise PersistenceError(f"Could not delete document {document_id}: {exc}") from exc

        try:
            if not self._store.delete(record.storage_path):
                Log.warning(f"Stored object {record.storage_path} was already gone")
        except ObjectStoreError as exc:
            Log.error(f"Could not delete stored object {record.storage_path}: {exc}")

        with self._locks.hold(owner_id):
            try:
                self._quota.release(owner_id, record.stored_size_bytes)
            except psycopg.Error as exc:
                Log.degraded(
                    QuotaDriftWarning,
                    f"Released document {document_id} but quota was not updated "
                    f"for owner {owner_id}: {exc}",
                )

        self._adjust_counter(owner_id, -1)
        self._write_audit(
            "DOCUMENT_DELETED",
            record,
            {"file_name": record.file_name, "stored_size_bytes": record.stored_size_bytes},
        )
        Log.info(f"Deleted document {document_id} for owner {owner_id}")
        return record

    def transition_status(self, document_id: str, new_status: DocumentStatus) -> DocumentRecord:
        """Move a document forward in its lifecycle.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
            InvalidStatusTransitionError: if the move is not a forward step.
        """
        record = self._documents.find_by_id(document_id)
        if new_status not in ALLOWED_TRANSITIONS[record.status]:
            raise InvalidStatusTransitionError(
                f"Document {document_id} cannot move from "
                f"{record.status.value} to {new_status.value}"
            )
        self._documents.update_status(document_id, new_status)
        previous = record.status
        record.status = new_status
        self._write_audit(
            "DOCUMENT_STATUS_CHANGED",
            record,
            {"from": previous.value, "to": new_status.value},
        )
        return record

    def download_url(self, document_id: str, ttl_seconds: int | None = None) -> str:
        """Return a time-limited URL for the stored object.

        Raises:
            DocumentNotFoundError: if the document or its stored object is missing.
        """
        record = self._documents.find_by_id(document_id)
        try:
            return self._store.signed_url(
                record.storage_path, ttl_seconds or self._signed_url_ttl
            )
        except ObjectNotFoundError as exc:
            raise DocumentNotFoundError(
                f"Stored object for document {document_id} not found"
            ) from exc

    def _validate(self, request: IngestionRequest) -> None:
        if not request.owner_id:
            raise ValidationError("owner_id is required")
        if not request.file_bytes:
            raise ValidationError(f"File '{request.filename}' is empty")
        if not is_allowed(request.mime_type):
            raise ValidationError(f"File type not allowed: {request.mime_type}")
        metadata = request.metadata
        if metadata.document_class is DocumentClass.ENTITY_SCOPED and not metadata.entity_id:
            raise ValidationError("entity_id is required for entity-scoped documents")

    def _reject_duplicate(self, request: IngestionRequest, content_hash: str) -> None:
        if request.metadata.document_class is DocumentClass.ENTITY_SCOPED:
            return
        try:
            existing = self._documents.find_by_hash(request.owner_id, content_hash)
        except psycopg.Error as exc:
            raise PersistenceError(f"Duplicate lookup failed: {exc}") from exc
        if existing is not None and existing.id is not None:
            raise DuplicateContentError(existing.id)

    def _analyze(self, request: IngestionRequest, content_hash: str) -> IngestionOutcome:
        """Extract, classify and optimize within one processing deadline.

        Classification needs the extracted text, so the extract-then-classify
        chain runs on the worker pool while this thread optimizes the bytes.
        """
        deadline = time.monotonic() + self._timeout
        progress = OcrProgress()
        extraction_future = self._executor.submit(
            self._extractor.extract,
            request.file_bytes,
            request.filename,
            request.mime_type,
            progress,
        )
        processed = self._optimizer.optimize(request.file_bytes, request.mime_type)
        reencoded = processed is not request.file_bytes

        extraction = self._await_extraction(extraction_future, deadline, request.filename, progress)
        classification = self._await_classification(extraction.text, request.filename, deadline)

        return IngestionOutcome(
            content_hash=content_hash,
            extraction=extraction,
            classification=classification,
            processed_bytes=processed,
            original_size=len(request.file_bytes),
            mime_type=self._optimizer.OUTPUT_MIME_TYPE if reencoded else request.mime_type,
        )

    def _await_extraction(
        self,
        future: concurrent.futures.Future[ExtractionOutcome],
        deadline: float,
        filename: str,
        progress: OcrProgress,
    ) -> ExtractionOutcome:
        try:
            return future.result(timeout=_remaining(deadline))
        except concurrent.futures.TimeoutError:
            future.cancel()
            status, fraction = progress.snapshot()
            Log.warning(
                f"Extraction of '{filename}' timed out after {self._timeout}s "
                f"(last status: {status}, {fraction:.0%})"
            )
            return ExtractionOutcome(
                text="", method="timeout", degraded=True, warning="extraction timed out"
            )

    def _await_classification(
        self, text: str, filename: str, deadline: float
    ) -> ClassificationResult:
        future = self._executor.submit(self._classifier.classify, text, filename)
        try:
            return future.result(timeout=_remaining(deadline))
        except concurrent.futures.TimeoutError:
            future.cancel()
            Log.warning(f"Classification of '{filename}' timed out, using fallback")
            return fallback_classification()
        except Exception as exc:
            Log.error(f"Classification of '{filename}' failed, using fallback: {exc}")
            return fallback_classification()

    def _enforce_quota(self, owner_id: str, incoming_bytes: int) -> None:
        try:
            check = self._quota.check_quota(owner_id, incoming_bytes)
        except psycopg.Error as exc:
            raise PersistenceError(f"Quota lookup failed for owner {owner_id}: {exc}") from exc
        if not check.has_space:
            raise QuotaExceededError(
                used=check.used,
                limit=check.limit,
                available=check.available,
                requested=incoming_bytes,
            )

    def _upload(self, path: str, data: bytes, content_type: str) -> None:
        try:
            self._store.put(path, data, content_type)
        except ObjectStoreError as exc:
            raise StorageError(f"Upload to {path} failed: {exc}") from exc

    def _insert_or_compensate(self, record: DocumentRecord) -> DocumentRecord:
        try:
            return self._documents.insert(record)
        except Exception as exc:
            self._compensate(record.storage_path)
            raise PersistenceError(
                f"Could not persist document '{record.file_name}': {exc}"
            ) from exc
        except BaseException:
            self._compensate(record.storage_path)
            raise

    def _compensate(self, path: str) -> None:
        for attempt in range(1, COMPENSATION_ATTEMPTS + 1):
            try:
                self._store.delete(path)
                Log.info(f"Removed orphaned object {path}")
                return
            except Exception as exc:
                Log.error(
                    f"Compensating delete of {path} failed "
                    f"(attempt {attempt}/{COMPENSATION_ATTEMPTS}): {exc}"
                )

    def _commit_quota(self, owner_id: str, stored_bytes: int) -> None:
        try:
            self._quota.commit(owner_id, stored_bytes)
        except psycopg.Error as exc:
            Log.degraded(
                QuotaDriftWarning,
                f"Stored {stored_bytes} bytes for owner {owner_id} "
                f"but quota was not updated: {exc}",
            )

    def _adjust_counter(self, owner_id: str, delta: int) -> None:
        try:
            self._accounts.adjust_document_count(owner_id, delta)
        except psycopg.Error as exc:
            Log.degraded(
                CounterUpdateWarning,
                f"Document counter for owner {owner_id} not updated: {exc}",
            )

    def _write_audit(self, action: str, record: DocumentRecord, details: dict[str, object]) -> None:
        try:
            self._audit.log(
                AuditEntry(
                    action=action,
                    entity_type="document",
                    entity_id=record.id,
                    user_id=record.owner_id,
                    details=details,
                )
            )
        except psycopg.Error as exc:
            Log.degraded(AuditWarning, f"Audit entry {action} for {record.id} not written: {exc}")

    def _build_record(
        self, request: IngestionRequest, outcome: IngestionOutcome, path: str
    ) -> DocumentRecord:
        metadata = request.metadata
        base_date = metadata.effective_date or self._today()
        override = metadata.override
        custom = override is not None and override.has_custom_renewal
        custom_unit = None
        if custom:
            custom_unit = RenewalUnit(override.custom_renewal_unit or RenewalUnit.MONTHS).value
        tags = metadata.tags or frozenset(outcome.classification.tags)

        return DocumentRecord(
            title=metadata.title.strip() or request.filename,
            description=metadata.description,
            owner_id=request.owner_id,
            content_hash=outcome.content_hash,
            mime_type=outcome.mime_type,
            file_name=request.filename,
            storage_path=path,
            original_size_bytes=outcome.original_size,
            stored_size_bytes=outcome.processed_size,
            status=metadata.status,
            document_class=metadata.document_class,
            entity_id=metadata.entity_id,
            category_id=metadata.category_id,
            tags=frozenset(tag.strip().lower() for tag in tags if tag.strip()),
            extracted_text=outcome.extraction.text,
            classification=outcome.classification,
            processing_degraded=outcome.degraded,
            is_public=metadata.is_public,
            effective_date=metadata.effective_date,
            expiration_date=calculate_expiration(base_date, metadata.type_policy, override),
            has_custom_renewal=custom,
            custom_renewal_period=override.custom_renewal_period if custom else None,
            custom_renewal_unit=custom_unit,
        )


def _remaining(deadline: float) -> float:
    return max(0.0, deadline - time.monotonic())


def build_orchestrator(settings: Settings, db: Database) -> IngestionOrchestrator:
    """Build an IngestionOrchestrator with all required adapters."""
    pdf_extractor = PdfExtractorFactory.create(settings)
    ocr_engine = TesseractAdapter(
        language=settings.ocr_language,
        timeout_seconds=settings.ocr_timeout_seconds,
    )
    accounts = QuotaRepository(db)
    return IngestionOrchestrator(
        fingerprinter=ContentFingerprinter(),
        optimizer=BinaryOptimizer(
            max_dimension=settings.image_max_dimension,
            quality=settings.image_quality,
        ),
        extractor=TextExtractor.build(pdf_extractor, ocr_engine),
        classifier=ClassifierFactory.create(settings),
        quota=QuotaLedger(accounts, settings.default_quota_bytes),
        store=ObjectStoreFactory.create(settings),
        documents=DocumentRepository(db),
        accounts=accounts,
        audit=AuditRepository(db),
        processing_timeout_seconds=settings.processing_timeout_seconds,
        signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
    )
