"""
Tests for the category hierarchy: drop classification, re-parenting moves and forced deletion
"""

import itertools

import pytest
from fastapi import HTTPException

from app.modules.categories.hierarchy import (
    ROOT, DROP_CASES, HierarchyMove, classify_drop,
    DEMOTE_CATEGORY, PROMOTE_SUBCATEGORY, DEMOTE_SUBCATEGORY,
    PROMOTE_SUB_SUBCATEGORY, MOVE_SUB_SUBCATEGORY,
)
from app.modules.categories.service import CategoryService, CATEGORY, SUBCATEGORY, SUB_SUBCATEGORY
from tests.fakes import FakeSupabase

NODE_TYPES = [CATEGORY, SUBCATEGORY, SUB_SUBCATEGORY, ROOT]


@pytest.fixture
def tree():
    """
    Video (c1)
      Intros (s1)
        Logo (ss1)
      Outros (s2)
    Audio (c2)
      Music (s3)
    """
    db = FakeSupabase()
    db.seed("categories",
            {"id": "c1", "name": "Video", "slug": "video", "icon": "Film"},
            {"id": "c2", "name": "Audio", "slug": "audio"})
    db.seed("subcategories",
            {"id": "s1", "category_id": "c1", "name": "Intros", "slug": "intros"},
            {"id": "s2", "category_id": "c1", "name": "Outros", "slug": "outros"},
            {"id": "s3", "category_id": "c2", "name": "Music", "slug": "music"})
    db.seed("sub_subcategories",
            {"id": "ss1", "subcategory_id": "s1", "name": "Logo", "slug": "logo"})
    db.seed("templates",
            {"slug": "t-video", "category_id": "c1", "subcategory_id": None, "sub_subcategory_id": None},
            {"slug": "t-intro", "category_id": "c1", "subcategory_id": "s1", "sub_subcategory_id": None},
            {"slug": "t-logo", "category_id": "c1", "subcategory_id": "s1", "sub_subcategory_id": "ss1"},
            {"slug": "t-outro", "category_id": "c1", "subcategory_id": "s2", "sub_subcategory_id": None},
            {"slug": "t-music", "category_id": "c2", "subcategory_id": "s3", "sub_subcategory_id": None})
    return db


def _template(db, slug):
    return next(t for t in db.rows("templates") if t["slug"] == slug)


def _ids(db, table):
    return {row["id"] for row in db.rows(table)}


def _assert_no_dangling_references(db):
    categories = _ids(db, "categories")
    subcategories = _ids(db, "subcategories")
    sub_subcategories = _ids(db, "sub_subcategories")
    for row in db.rows("subcategories"):
        assert row["category_id"] in categories
    for row in db.rows("sub_subcategories"):
        assert row["subcategory_id"] in subcategories
    for t in db.rows("templates"):
        assert t.get("category_id") is None or t["category_id"] in categories
        assert t.get("subcategory_id") is None or t["subcategory_id"] in subcategories
        assert t.get("sub_subcategory_id") is None or t["sub_subcategory_id"] in sub_subcategories


class TestClassifyDrop:
    def test_every_pair_maps_to_a_case_or_is_rejected(self):
        cases = set()
        for source, target in itertools.product(NODE_TYPES, NODE_TYPES):
            case = classify_drop(source, target)
            if (source, target) in DROP_CASES:
                assert case == DROP_CASES[(source, target)]
                cases.add(case)
            else:
                assert case is None
        assert cases == {
            DEMOTE_CATEGORY, PROMOTE_SUBCATEGORY, DEMOTE_SUBCATEGORY,
            PROMOTE_SUB_SUBCATEGORY, MOVE_SUB_SUBCATEGORY,
        }

    def test_rejected_pair_raises(self, tree):
        with pytest.raises(HTTPException) as exc:
            HierarchyMove(CategoryService(tree), CATEGORY, "c1", SUB_SUBCATEGORY, "ss1")
        assert exc.value.status_code == 400

    def test_drop_onto_itself(self, tree):
        with pytest.raises(HTTPException) as exc:
            HierarchyMove(CategoryService(tree), CATEGORY, "c2", CATEGORY, "c2")
        assert exc.value.status_code == 400

    def test_drop_onto_current_parent(self, tree):
        with pytest.raises(HTTPException) as exc:
            HierarchyMove(CategoryService(tree), SUB_SUBCATEGORY, "ss1", SUBCATEGORY, "s1")
        assert "already under" in exc.value.detail

    def test_demotion_that_would_create_a_fourth_level(self, tree):
        with pytest.raises(HTTPException) as exc:
            HierarchyMove(CategoryService(tree), CATEGORY, "c1", CATEGORY, "c2")
        assert exc.value.status_code == 400
        with pytest.raises(HTTPException):
            HierarchyMove(CategoryService(tree), SUBCATEGORY, "s1", SUBCATEGORY, "s3")


class TestMoves:
    def test_demote_category(self, tree):
        move = HierarchyMove(CategoryService(tree), CATEGORY, "c2", CATEGORY, "c1")
        steps = move.apply()
        assert steps
        assert "c2" not in _ids(tree, "categories")
        new_sub = next(s for s in tree.rows("subcategories") if s["slug"] == "audio")
        assert new_sub["category_id"] == "c1"
        new_ss = next(s for s in tree.rows("sub_subcategories") if s["slug"] == "music")
        assert new_ss["subcategory_id"] == new_sub["id"]
        music = _template(tree, "t-music")
        assert (music["category_id"], music["subcategory_id"], music["sub_subcategory_id"]) == \
            ("c1", new_sub["id"], new_ss["id"])
        _assert_no_dangling_references(tree)

    def test_promote_subcategory(self, tree):
        HierarchyMove(CategoryService(tree), SUBCATEGORY, "s1", ROOT).apply()
        new_category = next(c for c in tree.rows("categories") if c["slug"] == "intros")
        promoted_ss = next(s for s in tree.rows("subcategories") if s["slug"] == "logo")
        assert promoted_ss["category_id"] == new_category["id"]
        assert "s1" not in _ids(tree, "subcategories")
        assert "ss1" not in _ids(tree, "sub_subcategories")
        intro = _template(tree, "t-intro")
        assert (intro["category_id"], intro["subcategory_id"]) == (new_category["id"], None)
        logo = _template(tree, "t-logo")
        assert (logo["category_id"], logo["subcategory_id"], logo["sub_subcategory_id"]) == \
            (new_category["id"], promoted_ss["id"], None)
        _assert_no_dangling_references(tree)

    def test_demote_subcategory(self, tree):
        HierarchyMove(CategoryService(tree), SUBCATEGORY, "s2", SUBCATEGORY, "s3").apply()
        new_ss = next(s for s in tree.rows("sub_subcategories") if s["slug"] == "outros")
        assert new_ss["subcategory_id"] == "s3"
        outro = _template(tree, "t-outro")
        assert (outro["category_id"], outro["subcategory_id"], outro["sub_subcategory_id"]) == \
            ("c2", "s3", new_ss["id"])
        _assert_no_dangling_references(tree)

    def test_promote_sub_subcategory(self, tree):
        HierarchyMove(CategoryService(tree), SUB_SUBCATEGORY, "ss1", CATEGORY, "c2").apply()
        new_sub = next(s for s in tree.rows("subcategories") if s["slug"] == "logo")
        assert new_sub["category_id"] == "c2"
        logo = _template(tree, "t-logo")
        assert (logo["category_id"], logo["subcategory_id"], logo["sub_subcategory_id"]) == \
            ("c2", new_sub["id"], None)
        _assert_no_dangling_references(tree)

    def test_move_sub_subcategory(self, tree):
        HierarchyMove(CategoryService(tree), SUB_SUBCATEGORY, "ss1", SUBCATEGORY, "s3").apply()
        ss = next(s for s in tree.rows("sub_subcategories") if s["id"] == "ss1")
        assert ss["subcategory_id"] == "s3"
        logo = _template(tree, "t-logo")
        assert (logo["category_id"], logo["subcategory_id"], logo["sub_subcategory_id"]) == ("c2", "s3", "ss1")
        _assert_no_dangling_references(tree)

    def test_failure_part_way_reports_completed_steps(self, tree):
        tree.fail("sub_subcategories", "delete")
        move = HierarchyMove(CategoryService(tree), SUBCATEGORY, "s1", ROOT)
        with pytest.raises(HTTPException) as exc:
            move.apply()
        assert exc.value.status_code == 500
        assert exc.value.detail.startswith(f"Move failed after {len(move.completed)} step(s)")
        assert len(move.completed) >= 2


class TestDeleteNode:
    def test_refused_while_children_exist(self, tree):
        with pytest.raises(HTTPException) as exc:
            CategoryService(tree).delete_node(CATEGORY, "c1")
        assert exc.value.status_code == 409
        assert "c1" in _ids(tree, "categories")

    def test_refused_while_templates_point_at_leaf(self, tree):
        with pytest.raises(HTTPException) as exc:
            CategoryService(tree).delete_node(SUB_SUBCATEGORY, "ss1")
        assert exc.value.status_code == 409

    def test_forced_delete_leaves_no_dangling_references(self, tree):
        removed = CategoryService(tree).delete_node(CATEGORY, "c1", force=True)
        assert removed == {"nodes": 4}
        assert _ids(tree, "categories") == {"c2"}
        assert _ids(tree, "subcategories") == {"s3"}
        assert _ids(tree, "sub_subcategories") == set()
        for slug in ("t-video", "t-intro", "t-logo", "t-outro"):
            t = _template(tree, slug)
            assert (t["category_id"], t["subcategory_id"], t["sub_subcategory_id"]) == (None, None, None)
        assert _template(tree, "t-music")["category_id"] == "c2"
        _assert_no_dangling_references(tree)

    def test_empty_node_deletes_without_force(self):
        db = FakeSupabase()
        db.seed("categories", {"id": "c9", "name": "Empty", "slug": "empty"})
        assert CategoryService(db).delete_node(CATEGORY, "c9") == {"nodes": 1}

    def test_missing_id_and_unknown_node(self, tree):
        service = CategoryService(tree)
        with pytest.raises(HTTPException) as exc:
            service.delete_node(CATEGORY, "")
        assert exc.value.status_code == 400
        with pytest.raises(HTTPException) as exc:
            service.delete_node(CATEGORY, "nope")
        assert exc.value.status_code == 404


class TestCategoryRoutes:
    def test_tree_is_public(self, client, supabase):
        supabase.seed("categories", {"id": "c1", "name": "Video", "slug": "video"})
        supabase.seed("subcategories", {"id": "s1", "category_id": "c1", "name": "Intros", "slug": "intros"})
        response = client.get("/api/categories/tree")
        assert response.status_code == 200
        data = response.json()
        assert data["categories"][0]["subcategories"][0]["slug"] == "intros"

    def test_admin_only(self, client, user_headers):
        response = client.get("/api/admin/categories", headers=user_headers)
        assert response.status_code == 403
        assert response.json() == {"ok": False, "error": "Forbidden"}

    def test_create_requires_name_and_slug(self, client, admin_headers):
        response = client.post("/api/admin/categories", json={"name": "  "}, headers=admin_headers)
        assert response.status_code == 400

    def test_create_and_delete(self, client, supabase, admin_headers):
        response = client.post(
            "/api/admin/categories",
            json={"name": " Audio ", "slug": "audio", "description": ""},
            headers=admin_headers,
        )
        assert response.status_code == 200
        category = response.json()["category"]
        assert category["name"] == "Audio"
        assert category["description"] is None

        response = client.delete(f"/api/admin/categories?id={category['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"ok": True, "nodes": 1}

    def test_move_preview_then_confirm(self, client, supabase, admin_headers):
        supabase.seed("categories",
                      {"id": "c1", "name": "Video", "slug": "video"},
                      {"id": "c2", "name": "Audio", "slug": "audio"})
        body = {"source": {"type": "category", "id": "c2"}, "target": {"type": "category", "id": "c1"}}

        preview = client.post("/api/admin/categories/move", json=body, headers=admin_headers)
        assert preview.status_code == 200
        assert preview.json()["applied"] is False
        assert preview.json()["case"] == DEMOTE_CATEGORY
        assert "c2" in _ids(supabase, "categories")

        applied = client.post("/api/admin/categories/move", json=dict(body, confirm=True), headers=admin_headers)
        assert applied.status_code == 200
        assert applied.json()["applied"] is True
        assert "c2" not in _ids(supabase, "categories")
