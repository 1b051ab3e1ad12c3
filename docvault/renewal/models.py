from dataclasses import dataclass, field
from enum import Enum

from docvault.database.models import DocumentRecord


class RenewalUnit(str, Enum):
    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"


class UrgencyLevel(str, Enum):
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class RenewalPolicy:
    """Default renewal rule of a document type."""

    has_expiration: bool = False
    renewal_period: int | None = None
    renewal_unit: RenewalUnit = RenewalUnit.MONTHS


@dataclass(frozen=True)
class RenewalOverride:
    """Per-document renewal rule; wins over the type policy when enabled."""

    has_custom_renewal: bool = False
    custom_renewal_period: int | None = None
    custom_renewal_unit: RenewalUnit | None = None


@dataclass(frozen=True)
class ExpiringDocument:
    document: DocumentRecord
    days_until_expiration: int
    urgency_level: UrgencyLevel


@dataclass(frozen=True)
class ExpiredDocument:
    document: DocumentRecord
    days_expired: int


@dataclass
class RenewalSummary:
    """Renewal overview for one owner."""

    expiring_in_30_days: int = 0
    expiring_in_15_days: int = 0
    expiring_in_7_days: int = 0
    expired: int = 0
    expiring_documents: list[ExpiringDocument] = field(default_factory=list)
    expired_documents: list[ExpiredDocument] = field(default_factory=list)
