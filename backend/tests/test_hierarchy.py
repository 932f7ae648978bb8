"""Tests for the paginated hierarchy view (GET /api/folders)."""

from datetime import date, timedelta

import pytest

from tests.conftest import make_folder, upload


def _walk_ids(nodes):
    for node in nodes:
        yield node["id"]
        yield from _walk_ids(node["children"])


class TestHierarchyScenarios:

    def test_root_with_child(self, client):
        a = make_folder(client, "Docs", description="d")
        b = make_folder(client, "2024", parent_id=a["id"], description="y")

        resp = client.get("/api/folders", params={"page": 1, "limit": 10, "sort_by": "name", "sort_order": "asc"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert [n["id"] for n in body["data"]] == [a["id"]]

        root = body["data"][0]
        assert root["type"] == "folder"
        assert root["subfolder_count"] == 1
        assert root["file_count"] == 0
        assert [c["id"] for c in root["children"]] == [b["id"]]
        assert root["children"][0]["hierarchy_path"] == [a["id"], b["id"]]
        assert root["children"][0]["hierarchy_level"] == 1

        assert body["pagination"] == {"total": 1, "page": 1, "limit": 10, "total_pages": 1}
        assert body["counts"] == {"total_folders": 2, "total_files": 0}

    def test_empty_store_returns_empty_tree(self, client):
        body = client.get("/api/folders").json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 0
        assert body["pagination"]["total_pages"] == 0
        assert body["counts"] == {"total_folders": 0, "total_files": 0}

    def test_root_files_are_mixed_with_root_folders(self, client):
        make_folder(client, "Beta")
        assert upload(client, "alpha.txt").status_code == 201
        make_folder(client, "Gamma")

        body = client.get("/api/folders").json()
        assert [(n["type"], n["name"]) for n in body["data"]] == [
            ("folder", "Beta"),
            ("folder", "Gamma"),
            ("file", "alpha.txt"),
        ]
        file_node = body["data"][2]
        assert file_node["children"] == []
        assert file_node["file_type"] == "txt"
        assert body["counts"] == {"total_folders": 2, "total_files": 1}

    def test_files_appear_inside_their_folders(self, client):
        root = make_folder(client, "Root")
        sub = make_folder(client, "Sub", parent_id=root["id"])
        f = upload(client, "report.pdf", content=b"%PDF-1.4", folder_id=sub["id"]).json()["file"]

        body = client.get("/api/folders").json()
        (root_node,) = body["data"]
        (sub_node,) = root_node["children"]
        assert sub_node["file_count"] == 1
        assert [c["id"] for c in sub_node["children"]] == [f["id"]]
        assert sub_node["children"][0]["type"] == "file"

    def test_deep_nesting_is_fully_expanded(self, client):
        parent = make_folder(client, "L0")
        created = [parent]
        for i in range(1, 8):
            parent = make_folder(client, f"L{i}", parent_id=parent["id"])
            created.append(parent)

        body = client.get("/api/folders").json()
        assert list(_walk_ids(body["data"])) == [f["id"] for f in created]

    def test_delete_removes_subtree_from_hierarchy(self, client):
        keep = make_folder(client, "Keep")
        root = make_folder(client, "Gone")
        child = make_folder(client, "Child", parent_id=root["id"])
        grandchild = make_folder(client, "Grandchild", parent_id=child["id"])
        upload(client, "a.txt", folder_id=child["id"])
        upload(client, "b.txt", folder_id=grandchild["id"])

        before = client.get("/api/folders").json()
        assert before["counts"] == {"total_folders": 4, "total_files": 2}

        client.delete(f"/api/folders/{root['id']}")
        after = client.get("/api/folders").json()
        ids = set(_walk_ids(after["data"]))
        assert ids == {keep["id"]}
        assert after["counts"] == {"total_folders": 1, "total_files": 0}


class TestOrdering:

    def test_sort_by_name_desc(self, client):
        for name in ("b", "c", "a"):
            make_folder(client, name)
        body = client.get("/api/folders", params={"sort_order": "desc"}).json()
        assert [n["name"] for n in body["data"]] == ["c", "b", "a"]

    def test_sort_by_created_at(self, client):
        for name in ("z", "y", "x"):
            make_folder(client, name)
        body = client.get("/api/folders", params={"sort_by": "created_at"}).json()
        assert [n["name"] for n in body["data"]] == ["z", "y", "x"]

    def test_sort_by_updated_at_desc(self, client):
        first = make_folder(client, "first")
        make_folder(client, "second")
        client.put(f"/api/folders/{first['id']}", json={"description": "touched"})
        body = client.get("/api/folders", params={"sort_by": "updated_at", "sort_order": "desc"}).json()
        assert [n["name"] for n in body["data"]] == ["first", "second"]

    def test_children_follow_root_sort(self, client):
        root = make_folder(client, "Root")
        for name in ("m", "z", "a"):
            make_folder(client, name, parent_id=root["id"])
        body = client.get("/api/folders", params={"sort_order": "desc"}).json()
        assert [c["name"] for c in body["data"][0]["children"]] == ["z", "m", "a"]


class TestPagination:

    def test_pages_partition_the_root_set(self, client):
        names = [f"folder {i:02d}" for i in range(7)]
        for name in reversed(names[:4]):
            make_folder(client, name)
        for name in names[4:6]:
            upload(client, f"{name}.txt")
        make_folder(client, names[6])

        seen = []
        first = client.get("/api/folders", params={"limit": 3}).json()
        assert first["pagination"]["total"] == 7
        assert first["pagination"]["total_pages"] == 3
        for page in range(1, first["pagination"]["total_pages"] + 1):
            body = client.get("/api/folders", params={"limit": 3, "page": page}).json()
            assert len(body["data"]) <= 3
            seen.extend(n["name"] for n in body["data"])

        expected = sorted(names[:4] + [f"{n}.txt" for n in names[4:6]] + [names[6]])
        assert seen == expected
        assert len(set(seen)) == len(seen)

    def test_page_past_end_is_empty(self, client):
        make_folder(client, "Only")
        body = client.get("/api/folders", params={"page": 5}).json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 1

    def test_ties_paginate_without_overlap(self, client):
        parents = [make_folder(client, f"P{i}") for i in range(5)]
        for p in parents:
            upload(client, "same.txt")
            make_folder(client, "same", parent_id=p["id"])

        ids = []
        for page in (1, 2, 3):
            body = client.get("/api/folders", params={"limit": 4, "page": page}).json()
            ids.extend(n["id"] for n in body["data"])
        assert len(ids) == 10
        assert len(set(ids)) == 10

    def test_idempotent(self, client):
        root = make_folder(client, "Root")
        make_folder(client, "Child", parent_id=root["id"])
        upload(client, "top.txt")
        params = {"limit": 5, "sort_by": "updated_at"}
        first = client.get("/api/folders", params=params).content
        second = client.get("/api/folders", params=params).content
        assert first == second


class TestFilters:

    def test_name_filter_is_case_insensitive_substring(self, client):
        make_folder(client, "Project Alpha")
        make_folder(client, "project beta")
        make_folder(client, "Other")
        body = client.get("/api/folders", params={"name": "PROJECT"}).json()
        assert sorted(n["name"] for n in body["data"]) == ["Project Alpha", "project beta"]
        assert body["pagination"]["total"] == 2
        assert body["counts"]["total_folders"] == 3

    def test_filter_selects_roots_but_returns_full_subtree(self, client):
        root = make_folder(client, "Match me")
        child = make_folder(client, "unrelated", parent_id=root["id"])
        make_folder(client, "Nope")
        body = client.get("/api/folders", params={"name": "match"}).json()
        assert [n["id"] for n in body["data"]] == [root["id"]]
        assert [c["id"] for c in body["data"][0]["children"]] == [child["id"]]

    def test_filter_does_not_match_descendants_directly(self, client):
        root = make_folder(client, "Root")
        make_folder(client, "needle", parent_id=root["id"])
        body = client.get("/api/folders", params={"name": "needle"}).json()
        assert body["data"] == []

    def test_description_filter(self, client):
        make_folder(client, "A", description="Quarterly reports")
        make_folder(client, "B", description="Photos")
        make_folder(client, "C")
        body = client.get("/api/folders", params={"description": "report"}).json()
        assert [n["name"] for n in body["data"]] == ["A"]

    def test_wildcards_are_matched_literally(self, client):
        make_folder(client, "100_percent")
        make_folder(client, "100Xpercent")
        body = client.get("/api/folders", params={"name": "0_p"}).json()
        assert [n["name"] for n in body["data"]] == ["100_percent"]

    def test_date_filter(self, client):
        make_folder(client, "Today")
        today = date.today()
        tomorrow = today + timedelta(days=2)
        assert client.get("/api/folders", params={"date": (today - timedelta(days=1)).isoformat()}).json()["pagination"]["total"] == 1
        assert client.get("/api/folders", params={"date": tomorrow.isoformat()}).json()["pagination"]["total"] == 0

    def test_blank_filters_are_ignored(self, client):
        make_folder(client, "Any")
        body = client.get("/api/folders", params={"name": "  ", "description": ""}).json()
        assert body["pagination"]["total"] == 1


class TestValidation:

    @pytest.mark.parametrize("params, field", [
        ({"page": 0}, "page"),
        ({"limit": 0}, "limit"),
        ({"limit": 101}, "limit"),
    ])
    def test_invalid_pagination(self, client, params, field):
        resp = client.get("/api/folders", params=params)
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "INVALID_PAGINATION"
        assert body["details"]["field"] == field

    @pytest.mark.parametrize("params", [
        {"sort_by": "size"},
        {"sort_order": "sideways"},
    ])
    def test_invalid_sort(self, client, params):
        resp = client.get("/api/folders", params=params)
        assert resp.status_code == 400
        assert resp.json()["error"] == "INVALID_SORT"

    def test_invalid_date(self, client):
        resp = client.get("/api/folders", params={"date": "31-12-2024"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"

    def test_non_integer_page(self, client):
        resp = client.get("/api/folders", params={"page": "two"})
        assert resp.status_code == 400
