"""Expiration-date arithmetic and expiring/expired document queries."""

import calendar
from collections.abc import Callable
from datetime import date, timedelta

from docvault.database.repositories.document_repository import DocumentRepository
from docvault.renewal.models import (
    ExpiredDocument,
    ExpiringDocument,
    RenewalOverride,
    RenewalPolicy,
    RenewalSummary,
    RenewalUnit,
    UrgencyLevel,
)

URGENT_DAYS = 7
HIGH_DAYS = 15
SUMMARY_WINDOW_DAYS = 30


def add_period(base: date, period: int, unit: RenewalUnit | str) -> date:
    """Add ``period`` calendar units to ``base``.

    Months and years move the calendar field; when the target month is
    shorter, the day is clamped to its last day (Jan 31 + 1 month -> Feb 28).
    """
    unit = RenewalUnit(unit)
    if unit is RenewalUnit.DAYS:
        return base + timedelta(days=period)

    months = period * 12 if unit is RenewalUnit.YEARS else period
    total = base.month - 1 + months
    year = base.year + total // 12
    month = total % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def calculate_expiration(
    base_date: date,
    type_policy: RenewalPolicy | None,
    override: RenewalOverride | None = None,
) -> date | None:
    """Compute the expiration date, or None when the document never expires.

    An enabled override wins over the type policy.
    """
    if override is not None and override.has_custom_renewal:
        period = override.custom_renewal_period
        unit = override.custom_renewal_unit
    elif type_policy is not None and type_policy.has_expiration:
        period = type_policy.renewal_period
        unit = type_policy.renewal_unit
    else:
        return None

    if not period or period <= 0:
        return None
    return add_period(base_date, period, unit or RenewalUnit.MONTHS)


def urgency_for(days_remaining: int) -> UrgencyLevel:
    if days_remaining <= URGENT_DAYS:
        return UrgencyLevel.URGENT
    if days_remaining <= HIGH_DAYS:
        return UrgencyLevel.HIGH
    return UrgencyLevel.MEDIUM


class RenewalScheduler:
    """Finds documents approaching or past their expiration date."""

    def __init__(
        self,
        repository: DocumentRepository,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._repository = repository
        self._today = today

    def expiring_within(self, days: int, owner_id: str | None = None) -> list[ExpiringDocument]:
        today = self._today()
        records = self._repository.find_expiring_between(
            today, today + timedelta(days=days), owner_id=owner_id
        )
        annotated = []
        for record in records:
            if record.expiration_date is None:
                continue
            remaining = (record.expiration_date - today).days
            annotated.append(
                ExpiringDocument(
                    document=record,
                    days_until_expiration=remaining,
                    urgency_level=urgency_for(remaining),
                )
            )
        annotated.sort(key=lambda item: item.days_until_expiration)
        return annotated

    def expired(self, owner_id: str | None = None) -> list[ExpiredDocument]:
        today = self._today()
        records = self._repository.find_expired_before(today, owner_id=owner_id)
        annotated = [
            ExpiredDocument(document=record, days_expired=(today - record.expiration_date).days)
            for record in records
            if record.expiration_date is not None
        ]
        annotated.sort(key=lambda item: item.days_expired, reverse=True)
        return annotated

    def renewal_summary(self, owner_id: str) -> RenewalSummary:
        expiring = self.expiring_within(SUMMARY_WINDOW_DAYS, owner_id=owner_id)
        expired = self.expired(owner_id=owner_id)
        return RenewalSummary(
            expiring_in_30_days=len(expiring),
            expiring_in_15_days=sum(1 for e in expiring if e.days_until_expiration <= HIGH_DAYS),
            expiring_in_7_days=sum(1 for e in expiring if e.days_until_expiration <= URGENT_DAYS),
            expired=len(expired),
            expiring_documents=expiring,
            expired_documents=expired,
        )
