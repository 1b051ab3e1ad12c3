import hashlib


class ContentFingerprinter:
    """SHA-256 content hash used as the deduplication key."""

    def fingerprint(self, data: bytes) -> str:
        """Return the hex digest of the exact bytes given (pre-optimization)."""
        return hashlib.sha256(data).hexdigest()
