import psycopg

from docvault.database.models import QuotaAccount
from docvault.database.repositories.quota_repository import QuotaRepository
from docvault.logging.logger import Log
from docvault.quota.exceptions import QuotaFallbackWarning
from docvault.quota.models import QuotaCheck


class QuotaLedger:
    """Tracks per-owner stored bytes against a storage limit.

    Updates go through the store's atomic ``update_user_storage`` function
    first. When that is unavailable, a read-then-write fallback runs and is
    logged every time, since concurrent writers can lose updates on that path.
    """

    def __init__(self, repository: QuotaRepository, default_limit_bytes: int) -> None:
        self._repository = repository
        self._default_limit = default_limit_bytes

    def account(self, owner_id: str) -> QuotaAccount:
        account = self._repository.get_account(owner_id)
        if account is None:
            return QuotaAccount(owner_id=owner_id, used_bytes=0, limit_bytes=self._default_limit)
        if account.limit_bytes <= 0:
            account.limit_bytes = self._default_limit
        return account

    def check_quota(self, owner_id: str, incoming_bytes: int) -> QuotaCheck:
        account = self.account(owner_id)
        available = max(0, account.limit_bytes - account.used_bytes)
        return QuotaCheck(
            has_space=available >= incoming_bytes,
            used=account.used_bytes,
            limit=account.limit_bytes,
            available=available,
        )

    def commit(self, owner_id: str, delta: int) -> None:
        """Add ``delta`` bytes (negative to release) to the owner's usage."""
        if delta == 0:
            return
        try:
            self._repository.atomic_add(owner_id, delta)
            return
        except psycopg.Error as exc:
            Log.degraded(
                QuotaFallbackWarning,
                f"Atomic quota update failed for owner {owner_id}, "
                f"falling back to read-then-write: {exc}",
            )

        account = self.account(owner_id)
        self._repository.set_used(owner_id, max(0, account.used_bytes + delta))

    def release(self, owner_id: str, size: int) -> None:
        self.commit(owner_id, -size)
