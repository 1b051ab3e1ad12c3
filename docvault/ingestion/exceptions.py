class IngestionError(Exception):
    """Base exception for all document ingestion and lifecycle errors."""


class ValidationError(IngestionError):
    """Raised when an upload is rejected before any processing."""


class DuplicateContentError(IngestionError):
    """Raised when the owner already stores a document with the same bytes."""

    def __init__(self, existing_document_id: str) -> None:
        super().__init__(f"Duplicate content: already stored as document {existing_document_id}")
        self.existing_document_id = existing_document_id


class QuotaExceededError(IngestionError):
    """Raised when an upload does not fit in the owner's remaining quota."""

    def __init__(self, used: int, limit: int, available: int, requested: int) -> None:
        super().__init__(
            f"Storage quota exceeded: requested {requested} bytes, "
            f"{available} of {limit} available ({used} used)"
        )
        self.used = used
        self.limit = limit
        self.available = available
        self.requested = requested


class StorageError(IngestionError):
    """Raised when the object store rejects an upload."""


class PersistenceError(IngestionError):
    """Raised when the document row could not be written."""


class DocumentNotFoundError(IngestionError):
    """Raised when a document does not exist or is not visible to the caller."""


class InvalidStatusTransitionError(IngestionError):
    """Raised when a status change would move a document backwards."""


class CounterUpdateWarning(Warning):
    """Owner document counter could not be updated."""


class AuditWarning(Warning):
    """Audit log entry could not be written."""


class QuotaDriftWarning(Warning):
    """Stored bytes and the quota ledger no longer agree."""
