"""Materialized ancestor paths for folders.

Every folder stores ``hierarchy_path`` (ancestor IDs from the root down to the
folder itself) and ``hierarchy_level`` (0 for roots). These helpers are pure so
the create and move code paths in FolderService share one definition of what a
correct path is.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from ..models.folder import Folder

# Separator for the stored hierarchy_path. Folder IDs never contain it.
PATH_SEPARATOR = "/"


def compute_path(parent: Optional["Folder"], folder_id: str) -> Tuple[List[str], int]:
    """Return ``(path, level)`` for a folder placed under *parent* (or at root)."""
    if parent is None:
        return [folder_id], 0
    return parent.path_ids + [folder_id], parent.hierarchy_level + 1


def encode_path(path: Sequence[str]) -> str:
    for folder_id in path:
        if not folder_id or PATH_SEPARATOR in folder_id:
            raise ValueError(f"Invalid folder id in hierarchy path: {folder_id!r}")
    return PATH_SEPARATOR.join(path)


def decode_path(value: Optional[str]) -> List[str]:
    return value.split(PATH_SEPARATOR) if value else []


def descendant_prefix(path: Sequence[str]) -> str:
    """LIKE-style prefix every strict descendant's encoded path starts with."""
    return encode_path(path) + PATH_SEPARATOR


def is_ancestor(ancestor_path: Sequence[str], path: Sequence[str]) -> bool:
    """True iff *ancestor_path* is a proper prefix of *path*."""
    return len(ancestor_path) < len(path) and list(path[:len(ancestor_path)]) == list(ancestor_path)


def rebase_path(path: Sequence[str], old_prefix: Sequence[str], new_prefix: Sequence[str]) -> List[str]:
    """Re-root *path* after the folder at *old_prefix* moved to *new_prefix*.

    *old_prefix* and *new_prefix* both end with the moved folder's own ID.
    """
    if list(path[:len(old_prefix)]) != list(old_prefix):
        raise ValueError("Path is not inside the moved subtree")
    return list(new_prefix) + list(path[len(old_prefix):])
