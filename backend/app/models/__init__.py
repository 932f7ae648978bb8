"""Database models."""

from .folder import Folder
from .file_record import FileRecord, FILE_TYPES

__all__ = ["Folder", "FileRecord", "FILE_TYPES"]
