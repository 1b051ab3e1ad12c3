"""Filesystem object store with traversal protection and HMAC-signed URLs."""

import hashlib
import hmac
import os
import tempfile
import time
from pathlib import Path
from urllib.parse import quote

from docvault.storage.base import BaseObjectStore
from docvault.storage.exceptions import (
    ObjectNotFoundError,
    ObjectPathError,
    ObjectStoreError,
)


class LocalObjectStore(BaseObjectStore):
    """Stores objects under a root directory; writes are temp file + rename."""

    def __init__(
        self,
        root: Path,
        base_url: str | None = None,
        signing_secret: str = "",
    ) -> None:
        self._root = Path(root).resolve()
        self._base_url = (base_url or "file://").rstrip("/")
        self._signing_secret = signing_secret.encode("utf-8")
        self._root.mkdir(parents=True, exist_ok=True)

    def put(self, path: str, data: bytes, content_type: str) -> str:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise ObjectStoreError(f"Failed to write {path}: {exc}") from exc
        return path

    def delete(self, path: str) -> bool:
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise ObjectStoreError(f"Failed to delete {path}: {exc}") from exc
        return True

    def read(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.exists():
            raise ObjectNotFoundError(f"File not found: {path}")
        return target.read_bytes()

    def signed_url(self, path: str, ttl_seconds: int) -> str:
        if not self._resolve(path).exists():
            raise ObjectNotFoundError(f"File not found: {path}")
        expires = int(time.time()) + ttl_seconds
        signature = self._sign(path, expires)
        return f"{self._base_url}/{quote(path)}?expires={expires}&signature={signature}"

    def verify_signature(self, path: str, expires: int, signature: str) -> bool:
        if expires < int(time.time()):
            return False
        return hmac.compare_digest(self._sign(path, expires), signature)

    def _sign(self, path: str, expires: int) -> str:
        message = f"{path}:{expires}".encode("utf-8")
        return hmac.new(self._signing_secret, message, hashlib.sha256).hexdigest()

    def _resolve(self, path: str) -> Path:
        full_path = (self._root / path).resolve()
        try:
            full_path.relative_to(self._root)
        except ValueError as exc:
            raise ObjectPathError(f"Path escapes storage root: {path}") from exc
        return full_path
