"""Tests for tree assembly (no database)."""

from datetime import datetime, timedelta, timezone

from app.models import FileRecord, Folder
from app.services.hierarchy_assembler import assemble_hierarchy, sort_items

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def folder(folder_id, name, parent=None, minutes=0):
    path = (parent.hierarchy_path + "/" if parent else "") + folder_id
    level = parent.hierarchy_level + 1 if parent else 0
    ts = T0 + timedelta(minutes=minutes)
    return Folder(
        id=folder_id,
        name=name,
        parent_id=parent.id if parent else None,
        hierarchy_path=path,
        hierarchy_level=level,
        created_at=ts,
        updated_at=ts,
    )


def file(file_id, name, parent=None, minutes=0):
    ts = T0 + timedelta(minutes=minutes)
    return FileRecord(
        id=file_id,
        name=name,
        type="txt",
        file_path=f"/tmp/{file_id}",
        size=3,
        folder_id=parent.id if parent else None,
        created_at=ts,
        updated_at=ts,
    )


class TestSortItems:

    def test_ties_fall_back_to_creation_order(self):
        a = folder("folder-b", "Same", minutes=1)
        b = folder("folder-a", "Same", minutes=2)
        assert [i.id for i in sort_items([b, a])] == ["folder-b", "folder-a"]

    def test_desc_keeps_tie_break_ascending(self):
        a = folder("folder-1", "Same", minutes=1)
        b = folder("folder-2", "Same", minutes=2)
        c = folder("folder-3", "Zed", minutes=3)
        ordered = sort_items([b, c, a], "name", "desc")
        assert [i.id for i in ordered] == ["folder-3", "folder-1", "folder-2"]

    def test_sort_by_created_at(self):
        a = folder("folder-1", "B", minutes=5)
        b = folder("folder-2", "A", minutes=1)
        assert [i.id for i in sort_items([a, b], "created_at")] == ["folder-2", "folder-1"]


class TestAssembleHierarchy:

    def test_nests_children_under_parents(self):
        root = folder("folder-r", "Docs")
        child = folder("folder-c", "2024", parent=root)
        grandchild = folder("folder-g", "Q1", parent=child)
        f = file("file-1", "notes.txt", parent=child)

        tree = assemble_hierarchy(
            [root], [child, grandchild], [f],
            subfolder_counts={"folder-r": 1, "folder-c": 1},
            file_counts={"folder-c": 1},
        )

        assert len(tree) == 1
        assert tree[0].id == "folder-r"
        assert tree[0].subfolder_count == 1
        assert tree[0].file_count == 0
        (child_node,) = tree[0].children
        assert child_node.id == "folder-c"
        assert child_node.file_count == 1
        assert [n.id for n in child_node.children] == ["folder-g", "file-1"]

    def test_root_order_is_preserved(self):
        a = folder("folder-a", "Zeta")
        b = file("file-b", "alpha.txt")
        c = folder("folder-c", "Alpha")
        tree = assemble_hierarchy([a, b, c], [], [], {}, {})
        assert [n.id for n in tree] == ["folder-a", "file-b", "folder-c"]

    def test_file_nodes_have_no_children(self):
        root_file = file("file-r", "top.pdf")
        tree = assemble_hierarchy([root_file], [], [], {}, {})
        assert tree[0].type == "file"
        assert tree[0].children == []
        assert tree[0].file_type == "txt"
        assert tree[0].subfolder_count == 0

    def test_children_follow_requested_sort(self):
        root = folder("folder-r", "Root")
        c1 = folder("folder-1", "apple", parent=root, minutes=3)
        c2 = folder("folder-2", "banana", parent=root, minutes=1)
        tree = assemble_hierarchy([root], [c1, c2], [], {}, {}, sort_by="name", sort_order="desc")
        assert [n.name for n in tree[0].children] == ["banana", "apple"]

    def test_orphans_are_dropped(self):
        root = folder("folder-r", "Root")
        other = folder("folder-x", "Other")
        stray = folder("folder-s", "Stray", parent=other)
        tree = assemble_hierarchy([root], [stray], [], {}, {})
        assert tree[0].children == []

    def test_deep_chain_does_not_recurse(self):
        parent = folder("folder-0", "level 0")
        chain = []
        for i in range(1, 2000):
            parent = folder(f"folder-{i}", f"level {i}", parent=parent)
            chain.append(parent)
        root = folder("folder-0", "level 0")
        tree = assemble_hierarchy([root], chain, [], {}, {})

        depth = 0
        node = tree[0]
        while node.children:
            node = node.children[0]
            depth += 1
        assert depth == 1999
