"""Folder and hierarchy schemas."""

import re
from datetime import datetime
from typing import Optional, List, Literal

from pydantic import BaseModel, Field, field_validator

from ..core.hierarchy_path import decode_path

# Letters, digits, spaces and - _ .
FOLDER_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-_.]+$")
MAX_NAME_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 1000


def _validate_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Folder name is required")
    if len(v) > MAX_NAME_LENGTH:
        raise ValueError(f"Folder name must be between 1 and {MAX_NAME_LENGTH} characters")
    if not FOLDER_NAME_PATTERN.match(v):
        raise ValueError(
            "Folder name can only contain letters, numbers, spaces, "
            "and the following special characters: - _ ."
        )
    return v


def _validate_description(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Description cannot be empty")
    if len(v) > MAX_DESCRIPTION_LENGTH:
        raise ValueError(f"Description must not exceed {MAX_DESCRIPTION_LENGTH} characters")
    return v


def _normalize_parent_id(v: Optional[str]) -> Optional[str]:
    """Blank parent IDs mean "no parent"."""
    if v is None:
        return v
    v = v.strip()
    return v or None


def _split_path(v):
    if isinstance(v, str):
        return decode_path(v)
    return v


class FolderCreate(BaseModel):
    """Schema for creating a folder."""
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _validate_description(v)

    @field_validator("parent_id")
    @classmethod
    def normalize_parent_id(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_parent_id(v)

    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Docs", "description": "Project documents", "parent_id": None}]
        }
    }


class FolderUpdate(BaseModel):
    """Schema for updating a folder.

    ``parent_id`` is only acted upon when present in the payload; an explicit
    ``null`` (or a blank string) moves the folder to the root level.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _validate_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _validate_description(v)

    @field_validator("parent_id")
    @classmethod
    def normalize_parent_id(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_parent_id(v)

    @property
    def reparent_requested(self) -> bool:
        return "parent_id" in self.model_fields_set


class FolderResponse(BaseModel):
    """Schema for folder response."""
    id: str
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    hierarchy_path: List[str]
    hierarchy_level: int
    subfolder_count: Optional[int] = None
    file_count: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("hierarchy_path", mode="before")
    @classmethod
    def split_hierarchy_path(cls, v):
        return _split_path(v)

    class Config:
        from_attributes = True


class FolderDeleteResponse(BaseModel):
    """Result of a cascading folder delete."""
    success: bool = True
    folder_id: str
    deleted_folders: int
    deleted_files: int


class HierarchyNode(BaseModel):
    """One folder or file in the nested hierarchy view."""
    id: str
    name: str
    type: Literal["folder", "file"]
    description: Optional[str] = None
    parent_id: Optional[str] = None
    hierarchy_path: Optional[List[str]] = None
    hierarchy_level: Optional[int] = None
    file_type: Optional[str] = None
    size: Optional[int] = None
    subfolder_count: int = 0
    file_count: int = 0
    created_at: datetime
    updated_at: datetime
    children: List["HierarchyNode"] = Field(default_factory=list)


class PaginationMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class HierarchyCounts(BaseModel):
    total_folders: int
    total_files: int


class HierarchyResponse(BaseModel):
    """Envelope returned by GET /api/folders."""
    success: bool = True
    data: List[HierarchyNode]
    pagination: PaginationMeta
    counts: HierarchyCounts
