from dataclasses import dataclass, field
from datetime import date

from docvault.classification.models import ClassificationResult
from docvault.database.models import DocumentClass, DocumentStatus
from docvault.extraction.models import ExtractionOutcome
from docvault.renewal.models import RenewalOverride, RenewalPolicy


@dataclass(frozen=True)
class DocumentMetadata:
    """Caller-supplied attributes of an upload."""

    title: str = ""
    description: str | None = None
    category_id: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)
    effective_date: date | None = None
    is_public: bool = False
    status: DocumentStatus = DocumentStatus.PENDING
    document_class: DocumentClass = DocumentClass.STANDARD
    entity_id: str | None = None
    folder: str = "general"
    type_policy: RenewalPolicy | None = None
    override: RenewalOverride | None = None


@dataclass(frozen=True)
class IngestionRequest:
    owner_id: str
    file_bytes: bytes
    filename: str
    mime_type: str
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)


@dataclass(frozen=True)
class IngestionOutcome:
    """Results of the analysis stage, consumed once by the write sequence."""

    content_hash: str
    extraction: ExtractionOutcome
    classification: ClassificationResult
    processed_bytes: bytes
    original_size: int
    mime_type: str

    @property
    def processed_size(self) -> int:
        return len(self.processed_bytes)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return round(self.processed_size / self.original_size, 4)

    @property
    def degraded(self) -> bool:
        return self.extraction.degraded or self.classification.is_fallback
