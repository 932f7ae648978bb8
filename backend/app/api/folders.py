"""Folder API: CRUD, move and the paginated hierarchy view.

Single router for all folder operations. Delegates to FolderService (deep module).
Reads are open; writes go through ``require_auth``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.folder import (
    FolderCreate,
    FolderDeleteResponse,
    FolderResponse,
    FolderUpdate,
    HierarchyResponse,
)
from ..services.folder_service import FolderService
from ..services.root_selector import DEFAULT_PAGE_LIMIT, build_hierarchy_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/folders", tags=["folders"])


# -- Hierarchy ------------------------------------------------------------

@router.get("", response_model=HierarchyResponse)
def get_folder_hierarchy(
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(DEFAULT_PAGE_LIMIT, description="Root items per page (1-100)"),
    name: Optional[str] = Query(None, description="Case-insensitive substring of a root item's name"),
    description: Optional[str] = Query(None, description="Case-insensitive substring of a root item's description"),
    date: Optional[str] = Query(None, description="Only roots updated on or after this day (YYYY-MM-DD, UTC)"),
    sort_by: Optional[str] = Query(None, description="name, created_at or updated_at"),
    sort_order: Optional[str] = Query(None, description="asc or desc"),
    db: Session = Depends(get_db),
):
    """Page of root folders and files, each root folder with its full subtree."""
    params = build_hierarchy_params(
        page=page,
        limit=limit,
        name=name,
        description=description,
        date_filter=date,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return FolderService(db).get_folder_hierarchy(params)


# -- Folder CRUD ----------------------------------------------------------

@router.post("", response_model=FolderResponse, status_code=201)
def create_folder(
    data: FolderCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return FolderService(db).create_folder(data)


@router.get("/{folder_id}", response_model=FolderResponse)
def get_folder(folder_id: str, db: Session = Depends(get_db)):
    """Folder metadata with direct subfolder and file counts."""
    return FolderService(db).get_folder(folder_id)


@router.put("/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: str,
    data: FolderUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Rename, re-describe or move a folder. Send ``parent_id: null`` to move it to the root."""
    return FolderService(db).update_folder(folder_id, data)


@router.delete("/{folder_id}", response_model=FolderDeleteResponse)
def delete_folder(
    folder_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Delete a folder with all descendant folders, their files and payloads."""
    return FolderService(db).delete_folder(folder_id)
