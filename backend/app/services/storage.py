"""Local filesystem storage for uploaded payloads."""

import logging
import os
import uuid
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Tuple

from ..core.config import settings
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[int], None]


class LocalStorage:
    """Writes payloads to ``<root>/<uuid hex><ext>`` and removes them on delete."""

    def __init__(self, root: Optional[str] = None, max_bytes: Optional[int] = None):
        self.root = Path(root or settings.upload_dir)
        self.max_bytes = max_bytes or settings.max_upload_bytes

    def _generate_path(self, extension: str) -> Path:
        return self.root / f"{uuid.uuid4().hex}.{extension}"

    def save(
        self,
        stream: BinaryIO,
        extension: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Tuple[str, int]:
        """Copy *stream* to a new payload file and return ``(path, size)``.

        *on_progress* receives the running byte count after every chunk.
        Raises ValidationError (and removes the partial file) when the
        payload is empty or larger than ``max_bytes``.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        target = self._generate_path(extension)
        written = 0
        try:
            with open(target, "wb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise ValidationError(
                            f"File exceeds the maximum upload size of {self.max_bytes} bytes",
                            field="file",
                        )
                    out.write(chunk)
                    if on_progress is not None:
                        on_progress(written)
            if written == 0:
                raise ValidationError("Uploaded file is empty", field="file")
        except Exception:
            target.unlink(missing_ok=True)
            raise

        logger.debug("Stored payload", extra={"path": str(target), "size": written})
        return str(target), written

    def remove(self, path: str) -> bool:
        """Delete a stored payload. Returns False when it was already gone.

        OS errors are logged rather than raised: the metadata row is already
        deleted and an orphaned payload must not fail the request.
        """
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            logger.warning("Payload already missing", extra={"path": path})
            return False
        except OSError as e:
            logger.error(f"Failed to remove payload: {e}", extra={"path": path})
            return False
