"""File API: multipart upload, upload progress, metadata read/update, delete."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.file import (
    FileDeleteResponse,
    FileResponse,
    FileUpdate,
    UploadResponse,
    UploadStatusResponse,
)
from ..services.file_service import FileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/files", tags=["files"])


@router.post("/upload", response_model=UploadResponse, status_code=201)
def upload_file(
    file: UploadFile = File(...),
    folder_id: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Upload a file into a folder, or to the root level when ``folder_id`` is omitted."""
    try:
        upload_id, record = FileService(db).upload_file(
            file.file,
            file.filename,
            folder_id=folder_id,
            description=description,
            size_hint=getattr(file, "size", None),
        )
    finally:
        file.file.close()
    return UploadResponse(upload_id=upload_id, file=FileResponse.model_validate(record))


@router.get("/uploads/{upload_id}", response_model=UploadStatusResponse)
def get_upload_progress(upload_id: str, db: Session = Depends(get_db)):
    status = FileService(db).get_upload_status(upload_id)
    return UploadStatusResponse(**status.to_dict())


@router.get("/{file_id}", response_model=FileResponse)
def get_file(file_id: str, db: Session = Depends(get_db)):
    return FileService(db).get_file(file_id)


@router.put("/{file_id}", response_model=FileResponse)
def update_file(
    file_id: str,
    data: FileUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Rename or re-describe a file. The stored payload is untouched."""
    return FileService(db).update_file(file_id, data)


@router.delete("/{file_id}", response_model=FileDeleteResponse)
def delete_file(
    file_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    FileService(db).delete_file(file_id)
    return FileDeleteResponse(file_id=file_id)
