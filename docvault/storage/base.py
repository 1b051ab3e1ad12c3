from abc import ABC, abstractmethod


class BaseObjectStore(ABC):
    """Contract for binary object storage backends."""

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: str) -> str:
        """Store bytes at path and return the stored path.

        Raises:
            ObjectStoreError: if the write fails.
        """

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Remove the object. Returns False if it did not exist.

        Raises:
            ObjectStoreError: if the backend refuses the delete.
        """

    @abstractmethod
    def signed_url(self, path: str, ttl_seconds: int) -> str:
        """Return a time-limited download URL.

        Raises:
            ObjectNotFoundError: if no object exists at path.
        """
