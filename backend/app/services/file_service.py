"""File operations: upload, read, metadata update, delete, upload progress."""

import logging
import os
import uuid
from typing import BinaryIO, Optional, Tuple

from sqlalchemy.orm import Session

from ..exceptions import ValidationError
from ..models import FILE_TYPES, FileRecord
from ..repositories import FileRepository, FolderRepository
from ..schemas.file import FileUpdate
from ..schemas.folder import MAX_NAME_LENGTH
from .storage import LocalStorage
from .upload_registry import UploadRegistry, UploadStatus, upload_registry

logger = logging.getLogger(__name__)


def file_type_from_name(filename: Optional[str]) -> str:
    """Lower-cased extension of *filename*. Raises ValidationError when unsupported."""
    _, ext = os.path.splitext(filename or "")
    ext = ext.lstrip(".").lower()
    if ext == "jpeg":
        ext = "jpg"
    if ext not in FILE_TYPES:
        raise ValidationError(
            f"Unsupported file type. Allowed: {', '.join(FILE_TYPES)}",
            field="file",
        )
    return ext


class FileService:
    """File metadata plus the payload stored on disk."""

    def __init__(
        self,
        db: Session,
        storage: Optional[LocalStorage] = None,
        registry: Optional[UploadRegistry] = None,
    ):
        self.db = db
        self.file_repo = FileRepository(db)
        self.folder_repo = FolderRepository(db)
        self.storage = storage or LocalStorage()
        self.registry = registry or upload_registry

    def upload_file(
        self,
        stream: BinaryIO,
        filename: Optional[str],
        folder_id: Optional[str] = None,
        description: Optional[str] = None,
        size_hint: Optional[int] = None,
    ) -> Tuple[str, FileRecord]:
        """Store *stream* and create its metadata row.

        Returns ``(upload_id, record)``. The upload id stays queryable through
        ``get_upload_status`` until read or expired.
        """
        file_type = file_type_from_name(filename)
        name = os.path.basename((filename or "").replace("\\", "/")).strip()
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"File name must be between 1 and {MAX_NAME_LENGTH} characters", field="file"
            )
        if description is not None and not description.strip():
            description = None

        if folder_id:
            # Raises FolderNotFoundError
            self.folder_repo.get_by_id(folder_id)
        else:
            folder_id = None

        upload_id = self.registry.register()

        def on_progress(written: int) -> None:
            if size_hint:
                self.registry.update(upload_id, written * 100 // size_hint)

        file_path = None
        try:
            file_path, size = self.storage.save(stream, file_type, on_progress=on_progress)
            record = self.file_repo.create(
                self._generate_file_id(),
                name=name,
                file_type=file_type,
                file_path=file_path,
                size=size,
                folder_id=folder_id,
                description=description,
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            if file_path is not None:
                self.storage.remove(file_path)
            self.registry.fail(upload_id, getattr(e, "message", None) or "Upload failed")
            raise

        self.registry.complete(upload_id, record.id)
        logger.info(
            "File uploaded",
            extra={"file_id": record.id, "folder_id": folder_id, "size": record.size, "type": file_type},
        )
        return upload_id, record

    def get_upload_status(self, upload_id: str) -> UploadStatus:
        """Current progress. Finished entries are released once reported."""
        status = self.registry.get(upload_id)
        if status.is_finished:
            self.registry.release(upload_id)
        return status

    def get_file(self, file_id: str) -> FileRecord:
        return self.file_repo.get_by_id(file_id)

    def update_file(self, file_id: str, data: FileUpdate) -> FileRecord:
        record = self.file_repo.get_by_id(file_id)
        record = self.file_repo.update_fields(record, data.name, data.description)
        self.db.commit()
        logger.info("File updated", extra={"file_id": file_id})
        return record

    def delete_file(self, file_id: str) -> None:
        record = self.file_repo.get_by_id(file_id)
        payload = record.file_path
        self.file_repo.delete(record)
        self.db.commit()
        self.storage.remove(payload)
        logger.info("File deleted", extra={"file_id": file_id})

    @staticmethod
    def _generate_file_id() -> str:
        return f"file-{uuid.uuid4().hex[:16]}"
