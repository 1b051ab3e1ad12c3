from dataclasses import dataclass


@dataclass(frozen=True)
class QuotaCheck:
    """Snapshot of an owner's quota against one incoming upload."""

    has_space: bool
    used: int
    limit: int
    available: int
