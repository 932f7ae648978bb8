"""Process-wide upload progress registry.

Lifecycle of an entry: ``register`` (uploading, 0%) -> ``update`` ->
``complete`` or ``fail`` -> ``release``. Finished entries are released when
the progress endpoint reads them, or evicted ``ttl`` seconds after they
finished if nobody asks. All access goes through one lock.
"""

import logging
import threading
import time
import uuid
from dataclasses import dataclass, replace
from typing import Dict, Optional

from ..core.config import settings
from ..exceptions import UploadNotFoundError

logger = logging.getLogger(__name__)

UPLOADING = "uploading"
COMPLETED = "completed"
FAILED = "failed"


@dataclass(frozen=True)
class UploadStatus:
    upload_id: str
    status: str = UPLOADING
    progress: int = 0
    file_id: Optional[str] = None
    error: Optional[str] = None
    finished_at: Optional[float] = None

    @property
    def is_finished(self) -> bool:
        return self.status in (COMPLETED, FAILED)

    def to_dict(self) -> dict:
        return {
            "upload_id": self.upload_id,
            "status": self.status,
            "progress": self.progress,
            "file_id": self.file_id,
            "error": self.error,
        }


class UploadRegistry:
    """Thread-safe map of upload id to UploadStatus."""

    def __init__(self, ttl: float = 300.0):
        self.ttl = ttl
        self._entries: Dict[str, UploadStatus] = {}
        self._lock = threading.Lock()

    def register(self, upload_id: Optional[str] = None) -> str:
        upload_id = upload_id or uuid.uuid4().hex
        with self._lock:
            self._evict_expired(time.monotonic())
            self._entries[upload_id] = UploadStatus(upload_id=upload_id)
        return upload_id

    def update(self, upload_id: str, progress: int) -> None:
        """Record progress (clamped to 0-99; only complete() reports 100)."""
        progress = max(0, min(99, int(progress)))
        with self._lock:
            entry = self._entries.get(upload_id)
            if entry is None or entry.is_finished:
                return
            if progress > entry.progress:
                self._entries[upload_id] = replace(entry, progress=progress)

    def complete(self, upload_id: str, file_id: str, now: Optional[float] = None) -> None:
        with self._lock:
            entry = self._entries.get(upload_id, UploadStatus(upload_id=upload_id))
            self._entries[upload_id] = replace(
                entry,
                status=COMPLETED,
                progress=100,
                file_id=file_id,
                finished_at=now if now is not None else time.monotonic(),
            )

    def fail(self, upload_id: str, message: str, now: Optional[float] = None) -> None:
        with self._lock:
            entry = self._entries.get(upload_id, UploadStatus(upload_id=upload_id))
            self._entries[upload_id] = replace(
                entry,
                status=FAILED,
                progress=0,
                error=message,
                finished_at=now if now is not None else time.monotonic(),
            )
        logger.warning("Upload failed", extra={"upload_id": upload_id, "reason": message})

    def get(self, upload_id: str, now: Optional[float] = None) -> UploadStatus:
        """Current status. Raises UploadNotFoundError for unknown or evicted ids."""
        with self._lock:
            self._evict_expired(now if now is not None else time.monotonic())
            entry = self._entries.get(upload_id)
        if entry is None:
            raise UploadNotFoundError(upload_id)
        return entry

    def release(self, upload_id: str) -> None:
        with self._lock:
            self._entries.pop(upload_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict_expired(self, now: float) -> None:
        # Caller holds the lock.
        cutoff = now - self.ttl
        stale = [
            key for key, entry in self._entries.items()
            if entry.finished_at is not None and entry.finished_at < cutoff
        ]
        for key in stale:
            del self._entries[key]


upload_registry = UploadRegistry(ttl=settings.upload_status_ttl)
