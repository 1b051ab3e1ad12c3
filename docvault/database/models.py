from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from docvault.classification.models import ClassificationResult


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ARCHIVED = "archived"


class DocumentClass(str, Enum):
    """Whether an upload takes part in per-owner content deduplication.

    ENTITY_SCOPED documents (e.g. one file attached to many employees) may be
    uploaded repeatedly with identical bytes.
    """

    STANDARD = "standard"
    ENTITY_SCOPED = "entity_scoped"


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    title: str
    owner_id: str
    content_hash: str
    mime_type: str
    file_name: str
    storage_path: str
    original_size_bytes: int
    stored_size_bytes: int
    status: DocumentStatus = DocumentStatus.PENDING
    document_class: DocumentClass = DocumentClass.STANDARD
    id: str | None = None
    description: str | None = None
    entity_id: str | None = None
    category_id: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)
    extracted_text: str = ""
    classification: ClassificationResult | None = None
    processing_degraded: bool = False
    is_public: bool = False
    effective_date: date | None = None
    expiration_date: date | None = None
    has_custom_renewal: bool = False
    custom_renewal_period: int | None = None
    custom_renewal_unit: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class QuotaAccount:
    """Represents the storage columns of a row in the accounts table."""

    owner_id: str
    used_bytes: int
    limit_bytes: int
    document_count: int = 0


@dataclass(frozen=True)
class AuditEntry:
    """One row for the audit_logs table."""

    action: str
    entity_type: str
    entity_id: str | None
    user_id: str | None
    details: dict[str, object] = field(default_factory=dict)
