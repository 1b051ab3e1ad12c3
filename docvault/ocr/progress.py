"""Pollable OCR status, replacing per-call logging callbacks."""

import threading
from dataclasses import dataclass, field


@dataclass
class OcrProgress:
    """Latest known state of one OCR run.

    The engine writes, anyone holding the object may poll ``snapshot()``
    from another thread.
    """

    status: str = "pending"
    progress: float = 0.0
    error: str | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def update(self, status: str, progress: float) -> None:
        with self._lock:
            self.status = status
            self.progress = max(0.0, min(1.0, progress))

    def fail(self, error: str) -> None:
        with self._lock:
            self.status = "failed"
            self.error = error

    def snapshot(self) -> tuple[str, float]:
        with self._lock:
            return self.status, self.progress
