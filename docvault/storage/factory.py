from pathlib import Path

from docvault.config.settings import Settings
from docvault.storage.base import BaseObjectStore
from docvault.storage.local_adapter import LocalObjectStore
from docvault.storage.s3_adapter import S3ObjectStore


class ObjectStoreFactory:
    """Creates the object store named by settings.storage_backend."""

    @classmethod
    def create(cls, settings: Settings) -> BaseObjectStore:
        backend = settings.storage_backend.lower()
        if backend == "local":
            if not settings.storage_root:
                raise ValueError("storage_root is required for the local backend")
            return LocalObjectStore(
                root=Path(settings.storage_root),
                base_url=settings.storage_base_url,
                signing_secret=settings.storage_signing_secret,
            )
        if backend == "s3":
            if not settings.s3_bucket:
                raise ValueError("s3_bucket is required for the s3 backend")
            return S3ObjectStore(
                bucket=settings.s3_bucket,
                region=settings.s3_region,
                endpoint_url=settings.s3_endpoint_url,
                access_key=settings.s3_access_key,
                secret_key=settings.s3_secret_key,
                timeout_seconds=settings.storage_timeout_seconds,
            )
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: ['local', 's3']"
        )
