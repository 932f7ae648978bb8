"""Folder model."""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text, DateTime, UniqueConstraint
from ..core.hierarchy_path import decode_path
from ..database import Base


def utcnow() -> datetime:
    """Timestamp default with microsecond precision (keeps insertion order sortable)."""
    return datetime.now(timezone.utc)


class Folder(Base):
    """A node of the folder forest."""

    __tablename__ = "folders"
    __table_args__ = (
        UniqueConstraint("parent_id", "name", name="uq_folders_parent_name"),
        Index("ix_folders_parent_id", "parent_id"),
        Index("ix_folders_hierarchy_path", "hierarchy_path"),
        Index("ix_folders_updated_at", "updated_at"),
    )

    # Primary key
    id = Column(String(50), primary_key=True)  # folder-{uuid hex}

    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)

    # NULL parent = root folder
    parent_id = Column(String(50), ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)

    # Materialized ancestor chain, root first, self last: "folder-a/folder-b"
    hierarchy_path = Column(Text, nullable=False)
    hierarchy_level = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def path_ids(self) -> List[str]:
        """hierarchy_path as an ordered list of folder IDs."""
        return decode_path(self.hierarchy_path)

    def __repr__(self) -> str:
        return f"<Folder {self.id} {self.name!r} level={self.hierarchy_level}>"
