from datetime import date
from unittest.mock import MagicMock

import pytest

from docvault.database.models import DocumentRecord
from docvault.renewal.models import RenewalOverride, RenewalPolicy, RenewalUnit, UrgencyLevel
from docvault.renewal.scheduler import RenewalScheduler, add_period, calculate_expiration

BASE = date(2025, 1, 1)
TODAY = date(2025, 3, 10)


def _record(expiration: date, doc_id: str = "d") -> DocumentRecord:
    return DocumentRecord(
        id=doc_id,
        title=doc_id,
        owner_id="o",
        content_hash="h",
        mime_type="application/pdf",
        file_name=f"{doc_id}.pdf",
        storage_path=f"general/o/{doc_id}.pdf",
        original_size_bytes=1,
        stored_size_bytes=1,
        expiration_date=expiration,
    )


def _scheduler(
    expiring: list[DocumentRecord] | None = None,
    expired: list[DocumentRecord] | None = None,
) -> tuple[RenewalScheduler, MagicMock]:
    repo = MagicMock()
    repo.find_expiring_between.return_value = expiring or []
    repo.find_expired_before.return_value = expired or []
    return RenewalScheduler(repo, today=lambda: TODAY), repo


class TestCalculateExpiration:
    def test_six_months(self) -> None:
        policy = RenewalPolicy(has_expiration=True, renewal_period=6, renewal_unit=RenewalUnit.MONTHS)
        assert calculate_expiration(BASE, policy) == date(2025, 7, 1)

    def test_thirty_days(self) -> None:
        policy = RenewalPolicy(has_expiration=True, renewal_period=30, renewal_unit=RenewalUnit.DAYS)
        assert calculate_expiration(BASE, policy) == date(2025, 1, 31)

    def test_two_years(self) -> None:
        policy = RenewalPolicy(has_expiration=True, renewal_period=2, renewal_unit=RenewalUnit.YEARS)
        assert calculate_expiration(BASE, policy) == date(2027, 1, 1)

    def test_no_expiration(self) -> None:
        assert calculate_expiration(BASE, RenewalPolicy(has_expiration=False, renewal_period=6)) is None

    def test_no_policy(self) -> None:
        assert calculate_expiration(BASE, None) is None

    def test_override_wins(self) -> None:
        policy = RenewalPolicy(has_expiration=True, renewal_period=6)
        override = RenewalOverride(
            has_custom_renewal=True, custom_renewal_period=10, custom_renewal_unit=RenewalUnit.DAYS
        )
        assert calculate_expiration(BASE, policy, override) == date(2025, 1, 11)

    def test_override_applies_without_type_expiration(self) -> None:
        override = RenewalOverride(has_custom_renewal=True, custom_renewal_period=1)
        assert calculate_expiration(BASE, RenewalPolicy(), override) == date(2025, 2, 1)

    def test_disabled_override_is_ignored(self) -> None:
        policy = RenewalPolicy(has_expiration=True, renewal_period=6)
        override = RenewalOverride(has_custom_renewal=False, custom_renewal_period=1)
        assert calculate_expiration(BASE, policy, override) == date(2025, 7, 1)

    @pytest.mark.parametrize("period", [None, 0, -3])
    def test_missing_or_non_positive_period(self, period: int | None) -> None:
        policy = RenewalPolicy(has_expiration=True, renewal_period=period)
        assert calculate_expiration(BASE, policy) is None

    def test_string_unit_accepted(self) -> None:
        policy = RenewalPolicy(has_expiration=True, renewal_period=1, renewal_unit="years")  # type: ignore[arg-type]
        assert calculate_expiration(BASE, policy) == date(2026, 1, 1)


class TestAddPeriod:
    @pytest.mark.parametrize(
        ("base", "period", "unit", "expected"),
        [
            (date(2025, 1, 31), 1, "months", date(2025, 2, 28)),
            (date(2024, 1, 31), 1, "months", date(2024, 2, 29)),
            (date(2025, 8, 31), 1, "months", date(2025, 9, 30)),
            (date(2025, 11, 15), 3, "months", date(2026, 2, 15)),
            (date(2024, 2, 29), 1, "years", date(2025, 2, 28)),
            (date(2025, 12, 31), 1, "days", date(2026, 1, 1)),
        ],
    )
    def test_calendar_safe(self, base: date, period: int, unit: str, expected: date) -> None:
        assert add_period(base, period, unit) == expected

    def test_unknown_unit_raises(self) -> None:
        with pytest.raises(ValueError):
            add_period(BASE, 1, "weeks")


class TestExpiringWithin:
    def test_annotates_and_sorts_soonest_first(self) -> None:
        scheduler, repo = _scheduler(expiring=[
            _record(date(2025, 4, 1), "medium"),
            _record(date(2025, 3, 10), "today"),
            _record(date(2025, 3, 22), "high"),
        ])
        result = scheduler.expiring_within(30)

        repo.find_expiring_between.assert_called_once_with(TODAY, date(2025, 4, 9), owner_id=None)
        assert [r.document.id for r in result] == ["today", "high", "medium"]
        assert [r.days_until_expiration for r in result] == [0, 12, 22]
        assert [r.urgency_level for r in result] == [
            UrgencyLevel.URGENT,
            UrgencyLevel.HIGH,
            UrgencyLevel.MEDIUM,
        ]

    @pytest.mark.parametrize(("days", "level"), [(7, "urgent"), (8, "high"), (15, "high"), (16, "medium")])
    def test_urgency_boundaries(self, days: int, level: str) -> None:
        scheduler, _repo = _scheduler(expiring=[_record(date.fromordinal(TODAY.toordinal() + days))])
        assert scheduler.expiring_within(30)[0].urgency_level.value == level


class TestExpired:
    def test_sorted_most_overdue_first(self) -> None:
        scheduler, repo = _scheduler(expired=[
            _record(date(2025, 3, 9), "yesterday"),
            _record(date(2024, 12, 31), "old"),
        ])
        result = scheduler.expired()
        repo.find_expired_before.assert_called_once_with(TODAY, owner_id=None)
        assert [(r.document.id, r.days_expired) for r in result] == [("old", 69), ("yesterday", 1)]


class TestRenewalSummary:
    def test_counts_per_window(self) -> None:
        scheduler, repo = _scheduler(
            expiring=[
                _record(date(2025, 3, 12), "a"),
                _record(date(2025, 3, 20), "b"),
                _record(date(2025, 4, 5), "c"),
            ],
            expired=[_record(date(2025, 1, 1), "x")],
        )
        summary = scheduler.renewal_summary("owner-1")
        assert summary.expiring_in_30_days == 3
        assert summary.expiring_in_15_days == 2
        assert summary.expiring_in_7_days == 1
        assert summary.expired == 1
        assert repo.find_expiring_between.call_args.kwargs["owner_id"] == "owner-1"
