class ObjectStoreError(Exception):
    """Raised by an object store adapter when an operation fails."""


class ObjectNotFoundError(ObjectStoreError):
    """Raised when the requested object does not exist."""


class ObjectPathError(ObjectStoreError):
    """Raised when a path escapes the store root or is malformed."""
