"""Repository for folder database operations.

Descendant lookups go through the materialized ``hierarchy_path`` column: a
folder lies below R iff its encoded path starts with R's path plus the
separator. No recursive SQL is needed, so any backend with prefix matching
can serve the queries.
"""

from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, or_

from ..exceptions import FolderNotFoundError
from ..models.folder import Folder, utcnow
from ..core.hierarchy_path import descendant_prefix, encode_path
from .base import BaseRepository, chunked


class FolderRepository(BaseRepository[Folder]):
    """Data access layer for folders."""

    model_class = Folder
    not_found_error = FolderNotFoundError

    def create(
        self,
        folder_id: str,
        name: str,
        description: Optional[str],
        parent_id: Optional[str],
        path: Sequence[str],
        level: int,
    ) -> Folder:
        """Insert a folder and return the refreshed row."""
        folder = Folder(
            id=folder_id,
            name=name,
            description=description,
            parent_id=parent_id,
            hierarchy_path=encode_path(path),
            hierarchy_level=level,
        )
        self.db.add(folder)
        self.db.flush()
        self.db.refresh(folder)
        return folder

    def find_sibling_by_name(
        self, name: str, parent_id: Optional[str], exclude_id: Optional[str] = None
    ) -> Optional[Folder]:
        """Folder named *name* directly under *parent_id* (NULL = root level)."""
        query = self._base_query().filter(Folder.name == name)
        if parent_id is None:
            query = query.filter(Folder.parent_id.is_(None))
        else:
            query = query.filter(Folder.parent_id == parent_id)
        if exclude_id is not None:
            query = query.filter(Folder.id != exclude_id)
        return query.first()

    def get_descendants(self, paths: Iterable[Sequence[str]], max_level: Optional[int] = None) -> List[Folder]:
        """All folders strictly below any of *paths*, shallowest first.

        *max_level* caps ``hierarchy_level`` of returned rows.
        """
        prefixes = [descendant_prefix(p) for p in paths]
        if not prefixes:
            return []

        found: Dict[str, Folder] = {}
        for batch in chunked(prefixes):
            query = self._base_query().filter(
                or_(*[Folder.hierarchy_path.startswith(p, autoescape=True) for p in batch])
            )
            if max_level is not None:
                query = query.filter(Folder.hierarchy_level <= max_level)
            for folder in query.all():
                found[folder.id] = folder

        return sorted(found.values(), key=lambda f: (f.hierarchy_level, f.hierarchy_path))

    def get_subtree(self, folder: Folder) -> List[Folder]:
        """*folder* followed by every descendant, shallowest first."""
        return [folder] + self.get_descendants([folder.path_ids])

    def count_subfolders_by_parent(self) -> Dict[str, int]:
        """Direct subfolder count per parent ID. Root folders are not counted anywhere."""
        rows = (
            self.db.query(Folder.parent_id, func.count(Folder.id))
            .filter(Folder.parent_id.isnot(None))
            .group_by(Folder.parent_id)
            .all()
        )
        return {parent_id: count for parent_id, count in rows}

    def update_fields(
        self, folder: Folder, name: Optional[str] = None, description: Optional[str] = None
    ) -> Folder:
        if name is not None:
            folder.name = name
        if description is not None:
            folder.description = description
        folder.updated_at = utcnow()
        self.db.flush()
        self.db.refresh(folder)
        return folder

    def set_placement(
        self,
        folder: Folder,
        parent_id: Optional[str],
        path: Sequence[str],
        level: int,
        name: Optional[str] = None,
    ) -> None:
        """Write parent, path and level without flushing; callers flush once per move.

        *name* is written in the same flush so the sibling constraint only
        ever sees the final (parent, name) pair.
        """
        if name is not None:
            folder.name = name
        folder.parent_id = parent_id
        folder.hierarchy_path = encode_path(path)
        folder.hierarchy_level = level
        folder.updated_at = utcnow()

    def delete_many(self, folder_ids: Sequence[str]) -> int:
        """Delete folders by ID.

        Pass IDs deepest first. Rows removed by ON DELETE CASCADE are not
        included in the returned count.
        """
        deleted = 0
        for batch in chunked(folder_ids):
            deleted += (
                self.db.query(Folder)
                .filter(Folder.id.in_(batch))
                .delete(synchronize_session=False)
            )
        return deleted
