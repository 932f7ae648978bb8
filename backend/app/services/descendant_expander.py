"""Expansion of selected root folders into their full subtrees."""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from ..models import FileRecord, Folder
from ..repositories import FileRepository, FolderRepository

logger = logging.getLogger(__name__)

# Levels below a root that are expanded. Guards against corrupt paths; real
# trees are far shallower.
MAX_HIERARCHY_DEPTH = 64


@dataclass
class Descendants:
    folders: List[Folder] = field(default_factory=list)
    files: List[FileRecord] = field(default_factory=list)


def expand_descendants(
    roots: Sequence[Folder],
    folder_repo: FolderRepository,
    file_repo: FileRepository,
    max_depth: int = MAX_HIERARCHY_DEPTH,
) -> Descendants:
    """Every folder and file below *roots*, regardless of root-level filters.

    A folder is included iff some root's path is a proper prefix of its own
    path and it sits at most *max_depth* levels below that root. Files are
    included when their folder is one of the roots or an included folder.
    """
    if not roots:
        return Descendants()

    # One level past the cap so a cut subtree shows up as a dropped row.
    max_level = max(root.hierarchy_level for root in roots) + max_depth + 1
    folders = folder_repo.get_descendants([root.path_ids for root in roots], max_level=max_level)

    root_levels = {root.id: root.hierarchy_level for root in roots}
    kept: List[Folder] = []
    for folder in folders:
        path = folder.path_ids
        owner = next((fid for fid in path[:-1] if fid in root_levels), None)
        if owner is None:
            continue
        if folder.hierarchy_level - root_levels[owner] > max_depth:
            continue
        kept.append(folder)

    if len(kept) < len(folders):
        logger.warning(
            "Descendant expansion truncated",
            extra={"dropped": len(folders) - len(kept), "max_depth": max_depth},
        )

    container_ids = list(root_levels) + [folder.id for folder in kept]
    files = file_repo.get_in_folders(container_ids)

    logger.debug(
        "Expanded descendants",
        extra={"roots": len(roots), "folders": len(kept), "files": len(files)},
    )
    return Descendants(folders=kept, files=files)
