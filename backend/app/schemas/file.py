"""File and upload schemas."""

from datetime import datetime
from typing import Optional, Literal

from pydantic import BaseModel, Field, field_validator

from .folder import MAX_NAME_LENGTH, _validate_description


class FileUpdate(BaseModel):
    """Schema for updating file metadata (name / description only)."""
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v or len(v) > MAX_NAME_LENGTH:
            raise ValueError(f"File name must be between 1 and {MAX_NAME_LENGTH} characters")
        if "/" in v or "\\" in v:
            raise ValueError("File name cannot contain path separators")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _validate_description(v)


class FileResponse(BaseModel):
    """Schema for file metadata response."""
    id: str
    name: str
    description: Optional[str] = None
    type: str
    size: int
    folder_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UploadResponse(BaseModel):
    """Returned once an upload has been stored and registered."""
    upload_id: str
    file: FileResponse


class UploadStatusResponse(BaseModel):
    upload_id: str
    status: Literal["uploading", "completed", "failed"]
    progress: int = Field(ge=0, le=100)
    file_id: Optional[str] = None
    error: Optional[str] = None


class FileDeleteResponse(BaseModel):
    success: bool = True
    file_id: str
