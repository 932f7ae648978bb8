"""Assembly of root items and their descendants into a nested tree.

Pure: no database access. Children are attached with an explicit stack, so
depth is not limited by the interpreter's recursion limit, and each folder is
expanded at most once even if the input were to contain a cycle.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..models import FileRecord, Folder
from ..schemas.folder import HierarchyNode

Item = Union[Folder, FileRecord]


def sort_items(items: List[Item], sort_by: str = "name", sort_order: str = "asc") -> List[Item]:
    """Sort in place by *sort_by*; ties keep insertion order (created_at, then id)."""
    items.sort(key=lambda item: (item.created_at, item.id))
    items.sort(key=lambda item: getattr(item, sort_by), reverse=(sort_order == "desc"))
    return items


def _parent_of(item: Item) -> Optional[str]:
    return item.folder_id if isinstance(item, FileRecord) else item.parent_id


def _to_node(
    item: Item,
    subfolder_counts: Mapping[str, int],
    file_counts: Mapping[str, int],
) -> HierarchyNode:
    if isinstance(item, FileRecord):
        return HierarchyNode(
            id=item.id,
            name=item.name,
            type="file",
            description=item.description,
            parent_id=item.folder_id,
            file_type=item.type,
            size=item.size,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
    return HierarchyNode(
        id=item.id,
        name=item.name,
        type="folder",
        description=item.description,
        parent_id=item.parent_id,
        hierarchy_path=item.path_ids,
        hierarchy_level=item.hierarchy_level,
        subfolder_count=subfolder_counts.get(item.id, 0),
        file_count=file_counts.get(item.id, 0),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def group_by_parent(items: Iterable[Item]) -> Dict[Optional[str], List[Item]]:
    grouped: Dict[Optional[str], List[Item]] = {}
    for item in items:
        grouped.setdefault(_parent_of(item), []).append(item)
    return grouped


def assemble_hierarchy(
    roots: Sequence[Item],
    descendant_folders: Iterable[Folder],
    descendant_files: Iterable[FileRecord],
    subfolder_counts: Mapping[str, int],
    file_counts: Mapping[str, int],
    sort_by: str = "name",
    sort_order: str = "asc",
) -> List[HierarchyNode]:
    """Build the nested tree for *roots* in their given order.

    Descendants whose parent is not part of the tree are dropped.
    """
    children = group_by_parent(list(descendant_folders) + list(descendant_files))
    for siblings in children.values():
        sort_items(siblings, sort_by, sort_order)

    visited = set()
    result: List[HierarchyNode] = []
    stack: List[HierarchyNode] = []

    for root in roots:
        node = _to_node(root, subfolder_counts, file_counts)
        result.append(node)
        if node.type == "folder":
            stack.append(node)

    while stack:
        node = stack.pop()
        if node.id in visited:
            continue
        visited.add(node.id)
        for child in children.get(node.id, []):
            if child.id in visited:
                continue
            child_node = _to_node(child, subfolder_counts, file_counts)
            node.children.append(child_node)
            if child_node.type == "folder":
                stack.append(child_node)

    return result
