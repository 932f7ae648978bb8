"""Pydantic schemas for API validation."""

from .folder import (
    FolderCreate,
    FolderUpdate,
    FolderResponse,
    FolderDeleteResponse,
    HierarchyNode,
    HierarchyResponse,
)
from .file import (
    FileUpdate,
    FileResponse,
    FileDeleteResponse,
    UploadResponse,
    UploadStatusResponse,
)

__all__ = [
    "FolderCreate",
    "FolderUpdate",
    "FolderResponse",
    "FolderDeleteResponse",
    "HierarchyNode",
    "HierarchyResponse",
    "FileUpdate",
    "FileResponse",
    "FileDeleteResponse",
    "UploadResponse",
    "UploadStatusResponse",
]
