class QuotaFallbackWarning(Warning):
    """Quota was updated with a non-atomic read-then-write."""
