import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from docvault.storage.base import BaseObjectStore
from docvault.storage.exceptions import ObjectNotFoundError, ObjectStoreError


class S3ObjectStore(BaseObjectStore):
    """S3-compatible object store (AWS S3, MinIO, Supabase storage S3 API)."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        timeout_seconds: int = 30,
    ) -> None:
        self._bucket = bucket
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 2},
            ),
            **extra,
        )

    def put(self, path: str, data: bytes, content_type: str) -> str:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
                CacheControl="max-age=3600",
            )
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(f"Failed to upload {path}: {exc}") from exc
        return path

    def delete(self, path: str) -> bool:
        try:
            self._client.head_object(Bucket=self._bucket, Key=path)
        except ClientError as exc:
            if exc.response["Error"]["Code"] in ("404", "NoSuchKey"):
                return False
            raise ObjectStoreError(f"Failed to delete {path}: {exc}") from exc
        except BotoCoreError as exc:
            raise ObjectStoreError(f"Failed to delete {path}: {exc}") from exc
        try:
            self._client.delete_object(Bucket=self._bucket, Key=path)
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(f"Failed to delete {path}: {exc}") from exc
        return True

    def signed_url(self, path: str, ttl_seconds: int) -> str:
        try:
            self._client.head_object(Bucket=self._bucket, Key=path)
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": path},
                ExpiresIn=ttl_seconds,
            )
        except ClientError as exc:
            if exc.response["Error"]["Code"] in ("404", "NoSuchKey"):
                raise ObjectNotFoundError(f"File not found: {path}") from exc
            raise ObjectStoreError(f"Failed to sign URL for {path}: {exc}") from exc
        except BotoCoreError as exc:
            raise ObjectStoreError(f"Failed to sign URL for {path}: {exc}") from exc
