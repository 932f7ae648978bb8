"""Root-level selection across folders and files.

Root folders (``parent_id IS NULL``) and root files (``folder_id IS NULL``)
are combined with UNION ALL so filtering, ordering and OFFSET/LIMIT all run
in one SQL statement over the mixed set.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, literal_column, select, union_all
from sqlalchemy.orm import Session

from ..models import FileRecord, Folder

SORTABLE_COLUMNS = ("name", "created_at", "updated_at")


def _root_select(model, kind: str, parent_column, name, description, updated_since):
    stmt = select(
        literal_column(f"'{kind}'").label("type"),
        model.id.label("id"),
        model.name.label("name"),
        model.created_at.label("created_at"),
        model.updated_at.label("updated_at"),
    ).where(parent_column.is_(None))

    if name:
        stmt = stmt.where(model.name.icontains(name, autoescape=True))
    if description:
        stmt = stmt.where(model.description.icontains(description, autoescape=True))
    if updated_since is not None:
        stmt = stmt.where(model.updated_at >= updated_since)
    return stmt


class HierarchyRepository:
    """Read-only queries over the root level of the forest."""

    def __init__(self, db: Session):
        self.db = db

    def select_roots(
        self,
        sort_by: str,
        sort_order: str,
        offset: int,
        limit: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        updated_since: Optional[datetime] = None,
    ) -> Tuple[List[Tuple[str, str]], int]:
        """Return ``([(type, id), ...], total)`` for one page of root items.

        Ties on the sort key fall back to ``created_at`` then ``id`` so the
        ordering is total and pages never overlap.
        """
        if sort_by not in SORTABLE_COLUMNS:
            raise ValueError(f"Unsupported sort column: {sort_by}")

        roots = union_all(
            _root_select(Folder, "folder", Folder.parent_id, name, description, updated_since),
            _root_select(FileRecord, "file", FileRecord.folder_id, name, description, updated_since),
        ).subquery("roots")

        total = self.db.execute(select(func.count()).select_from(roots)).scalar_one()
        if total == 0 or offset >= total:
            return [], total

        key = roots.c[sort_by]
        primary = key.desc() if sort_order == "desc" else key.asc()
        rows = self.db.execute(
            select(roots.c.type, roots.c.id)
            .order_by(primary, roots.c.created_at.asc(), roots.c.id.asc())
            .offset(offset)
            .limit(limit)
        ).all()
        return [(row.type, row.id) for row in rows], total
