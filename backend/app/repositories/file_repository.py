"""Repository for file metadata operations."""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import func

from ..exceptions import FileRecordNotFoundError
from ..models.file_record import FileRecord
from ..models.folder import utcnow
from .base import BaseRepository, chunked


class FileRepository(BaseRepository[FileRecord]):
    """Data access layer for file records."""

    model_class = FileRecord
    not_found_error = FileRecordNotFoundError

    def create(
        self,
        file_id: str,
        name: str,
        file_type: str,
        file_path: str,
        size: int,
        folder_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> FileRecord:
        record = FileRecord(
            id=file_id,
            name=name,
            type=file_type,
            file_path=file_path,
            size=size,
            folder_id=folder_id,
            description=description,
        )
        self.db.add(record)
        self.db.flush()
        self.db.refresh(record)
        return record

    def get_in_folders(self, folder_ids: Iterable[str]) -> List[FileRecord]:
        """Files directly inside any of *folder_ids*."""
        found: List[FileRecord] = []
        for batch in chunked(folder_ids):
            found.extend(
                self._base_query().filter(FileRecord.folder_id.in_(batch)).all()
            )
        return found

    def count_files_by_folder(self) -> Dict[str, int]:
        """Direct file count per folder ID. Root-level files are not counted anywhere."""
        rows = (
            self.db.query(FileRecord.folder_id, func.count(FileRecord.id))
            .filter(FileRecord.folder_id.isnot(None))
            .group_by(FileRecord.folder_id)
            .all()
        )
        return {folder_id: count for folder_id, count in rows}

    def update_fields(
        self, record: FileRecord, name: Optional[str] = None, description: Optional[str] = None
    ) -> FileRecord:
        if name is not None:
            record.name = name
        if description is not None:
            record.description = description
        record.updated_at = utcnow()
        self.db.flush()
        self.db.refresh(record)
        return record

    def delete(self, record: FileRecord) -> None:
        self.db.delete(record)
        self.db.flush()

    def delete_in_folders(self, folder_ids: Iterable[str]) -> int:
        deleted = 0
        for batch in chunked(folder_ids):
            deleted += (
                self.db.query(FileRecord)
                .filter(FileRecord.folder_id.in_(batch))
                .delete(synchronize_session=False)
            )
        return deleted
