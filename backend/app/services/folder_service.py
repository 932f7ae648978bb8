"""Deep module for all folder operations: create, read, update/move, delete, hierarchy.

Callers never touch hierarchy paths, levels or cascade bookkeeping; those are
maintained here on every mutation. The hierarchy read is a pipeline:

    root selection -> descendant expansion -> aggregate counts -> assembly
"""

import logging
import math
import uuid
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.hierarchy_path import compute_path, is_ancestor, rebase_path
from ..exceptions import (
    CircularHierarchyError,
    DuplicateFolderNameError,
    ParentFolderNotFoundError,
)
from ..models import Folder
from ..repositories import FileRepository, FolderRepository, HierarchyRepository
from ..schemas.folder import (
    FolderCreate,
    FolderDeleteResponse,
    FolderResponse,
    FolderUpdate,
    HierarchyCounts,
    HierarchyResponse,
    PaginationMeta,
)
from .descendant_expander import expand_descendants
from .hierarchy_assembler import assemble_hierarchy
from .root_selector import HierarchyParams, select_root_page
from .storage import LocalStorage

logger = logging.getLogger(__name__)


class FolderService:
    """All folder and hierarchy operations behind a simple interface.

    Public methods:
        create_folder          -- validates parent and sibling name, computes path
        get_folder             -- lookup by id, with direct child counts
        get_folder_hierarchy   -- paginated forest of root items with full subtrees
        update_folder          -- name / description; moves subtree when parent_id given
        delete_folder          -- removes subtree, contained files and their payloads
    """

    def __init__(self, db: Session, storage: Optional[LocalStorage] = None):
        self.db = db
        self.folder_repo = FolderRepository(db)
        self.file_repo = FileRepository(db)
        self.hierarchy_repo = HierarchyRepository(db)
        self.storage = storage or LocalStorage()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_folder(self, data: FolderCreate) -> Folder:
        """Create a folder under ``data.parent_id`` (or at the root)."""
        parent = None
        if data.parent_id:
            parent = self.folder_repo.get_by_id_optional(data.parent_id)
            if parent is None:
                raise ParentFolderNotFoundError(data.parent_id)

        parent_id = parent.id if parent else None
        if self.folder_repo.find_sibling_by_name(data.name, parent_id):
            raise DuplicateFolderNameError(data.name, parent_id)

        folder_id = self._generate_folder_id()
        path, level = compute_path(parent, folder_id)

        try:
            folder = self.folder_repo.create(
                folder_id, data.name, data.description, parent_id, path, level
            )
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent create of the same sibling name.
            self.db.rollback()
            raise DuplicateFolderNameError(data.name, parent_id)

        logger.info(
            "Folder created",
            extra={"folder_id": folder.id, "parent_id": parent_id, "level": level},
        )
        return folder

    def get_folder(self, folder_id: str) -> FolderResponse:
        folder = self.folder_repo.get_by_id(folder_id)
        response = FolderResponse.model_validate(folder)
        response.subfolder_count = self.folder_repo.count_subfolders_by_parent().get(folder.id, 0)
        response.file_count = self.file_repo.count_files_by_folder().get(folder.id, 0)
        return response

    def get_folder_hierarchy(self, params: HierarchyParams) -> HierarchyResponse:
        """Page of root items, each expanded to its complete subtree.

        Filters select roots only; every descendant of a selected root folder
        is returned whether or not it matches them.
        """
        page = select_root_page(params, self.hierarchy_repo, self.folder_repo, self.file_repo)
        descendants = expand_descendants(page.folders, self.folder_repo, self.file_repo)

        data = assemble_hierarchy(
            page.items,
            descendants.folders,
            descendants.files,
            subfolder_counts=self.folder_repo.count_subfolders_by_parent(),
            file_counts=self.file_repo.count_files_by_folder(),
            sort_by=params.sort_by,
            sort_order=params.sort_order,
        )

        logger.debug(
            "Hierarchy assembled",
            extra={
                "roots": len(data),
                "total_roots": page.total,
                "descendant_folders": len(descendants.folders),
                "descendant_files": len(descendants.files),
            },
        )

        return HierarchyResponse(
            data=data,
            pagination=PaginationMeta(
                total=page.total,
                page=params.page,
                limit=params.limit,
                total_pages=math.ceil(page.total / params.limit),
            ),
            counts=HierarchyCounts(
                total_folders=page.total_folders,
                total_files=page.total_files,
            ),
        )

    def update_folder(self, folder_id: str, data: FolderUpdate) -> Folder:
        """Rename / describe a folder; move it (and its subtree) when parent_id is sent."""
        folder = self.folder_repo.get_by_id(folder_id)

        target_parent_id = data.parent_id if data.reparent_requested else folder.parent_id
        moving = data.reparent_requested and target_parent_id != folder.parent_id

        new_parent = None
        if target_parent_id is not None:
            new_parent = self.folder_repo.get_by_id_optional(target_parent_id)
            if new_parent is None:
                raise ParentFolderNotFoundError(target_parent_id)
            if moving and (
                new_parent.id == folder.id or is_ancestor(folder.path_ids, new_parent.path_ids)
            ):
                raise CircularHierarchyError(folder.id, new_parent.id)

        new_name = data.name if data.name is not None else folder.name
        if new_name != folder.name or moving:
            if self.folder_repo.find_sibling_by_name(new_name, target_parent_id, exclude_id=folder.id):
                raise DuplicateFolderNameError(new_name, target_parent_id)

        try:
            if moving:
                moved = self._move_subtree(folder, new_parent, new_name)
                logger.info(
                    "Folder moved",
                    extra={"folder_id": folder.id, "parent_id": target_parent_id, "descendants": moved},
                )
            folder = self.folder_repo.update_fields(folder, data.name, data.description)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateFolderNameError(new_name, target_parent_id)

        logger.info("Folder updated", extra={"folder_id": folder.id})
        return folder

    def delete_folder(self, folder_id: str) -> FolderDeleteResponse:
        """Delete a folder, all descendant folders, their files and stored payloads."""
        folder = self.folder_repo.get_by_id(folder_id)
        subtree = self.folder_repo.get_subtree(folder)
        subtree_ids = [f.id for f in subtree]

        files = self.file_repo.get_in_folders(subtree_ids)
        payloads = [f.file_path for f in files]

        self.file_repo.delete_in_folders(subtree_ids)
        self.folder_repo.delete_many(list(reversed(subtree_ids)))
        self.db.commit()

        for path in payloads:
            self.storage.remove(path)

        logger.info(
            "Folder deleted",
            extra={"folder_id": folder_id, "folders": len(subtree_ids), "files": len(files)},
        )
        return FolderDeleteResponse(
            folder_id=folder_id,
            deleted_folders=len(subtree_ids),
            deleted_files=len(files),
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _generate_folder_id() -> str:
        return f"folder-{uuid.uuid4().hex[:16]}"

    def _move_subtree(self, folder: Folder, new_parent: Optional[Folder], name: str) -> int:
        """Re-home *folder* under *new_parent* as *name* and rewrite every descendant's path.

        Returns the number of descendants rewritten.
        """
        old_path = folder.path_ids
        descendants: List[Folder] = self.folder_repo.get_descendants([old_path])

        new_path, new_level = compute_path(new_parent, folder.id)
        level_shift = new_level - folder.hierarchy_level

        self.folder_repo.set_placement(
            folder, new_parent.id if new_parent else None, new_path, new_level, name=name
        )
        for child in descendants:
            self.folder_repo.set_placement(
                child,
                child.parent_id,
                rebase_path(child.path_ids, old_path, new_path),
                child.hierarchy_level + level_shift,
            )
        self.db.flush()
        return len(descendants)
