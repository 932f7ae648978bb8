"""Data access repositories."""

from .base import BaseRepository
from .folder_repository import FolderRepository
from .file_repository import FileRepository
from .hierarchy_repository import HierarchyRepository

__all__ = [
    "BaseRepository",
    "FolderRepository",
    "FileRepository",
    "HierarchyRepository",
]
