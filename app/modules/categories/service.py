from supabase import Client
from app.core.utils import clean_optional, utcnow
from typing import Dict, Any, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

CATEGORY = "category"
SUBCATEGORY = "subcategory"
SUB_SUBCATEGORY = "sub_subcategory"


class Level:
    def __init__(self, name: str, table: str, parent_column: Optional[str], template_column: str, child: Optional[str]):
        self.name = name
        self.table = table
        self.parent_column = parent_column
        self.template_column = template_column
        self.child = child


LEVELS = {
    CATEGORY: Level(CATEGORY, "categories", None, "category_id", SUBCATEGORY),
    SUBCATEGORY: Level(SUBCATEGORY, "subcategories", "category_id", "subcategory_id", SUB_SUBCATEGORY),
    SUB_SUBCATEGORY: Level(SUB_SUBCATEGORY, "sub_subcategories", "subcategory_id", "sub_subcategory_id", None),
}

LEVEL_LABELS = {
    CATEGORY: "Category",
    SUBCATEGORY: "Subcategory",
    SUB_SUBCATEGORY: "Sub-subcategory",
}


class CategoryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_nodes(self, level: str, parent_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Nodes of one level ordered by name, optionally only those under parent_id"""
        spec = LEVELS[level]
        try:
            query = self.supabase.table(spec.table).select("*")
            if parent_id and spec.parent_column:
                query = query.eq(spec.parent_column, parent_id)
            result = query.order("name").execute()
            return result.data or []
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_node(self, level: str, node_id: str) -> Dict[str, Any]:
        spec = LEVELS[level]
        try:
            result = self.supabase.table(spec.table)\
                .select("*")\
                .eq("id", node_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            raise HTTPException(status_code=404, detail=f"{LEVEL_LABELS[level]} not found")
        return result.data

    def save_node(self, level: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a node, or update it when data carries an id"""
        spec = LEVELS[level]
        name = (data.get("name") or "").strip()
        slug = (data.get("slug") or "").strip()
        parent_id = data.get(spec.parent_column) if spec.parent_column else None
        if spec.parent_column and not parent_id:
            raise HTTPException(status_code=400, detail=f"{spec.parent_column}, name, and slug are required")
        if not name or not slug:
            raise HTTPException(status_code=400, detail="Name and slug are required")

        row = {
            "name": name,
            "slug": slug,
            "description": clean_optional(data.get("description")),
        }
        if spec.parent_column:
            row[spec.parent_column] = parent_id
        if level == CATEGORY:
            row["icon"] = clean_optional(data.get("icon"))

        try:
            if data.get("id"):
                row["updated_at"] = utcnow().isoformat()
                result = self.supabase.table(spec.table)\
                    .update(row)\
                    .eq("id", data["id"])\
                    .execute()
                if not result.data:
                    raise HTTPException(status_code=404, detail=f"{LEVEL_LABELS[level]} not found")
            else:
                result = self.supabase.table(spec.table).insert(row).execute()
                if not result.data:
                    raise HTTPException(status_code=500, detail=f"Failed to create {level}")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_node(self, level: str, name: str, slug: str, description: Optional[str] = None,
                    parent_id: Optional[str] = None, icon: Optional[str] = None) -> Dict[str, Any]:
        spec = LEVELS[level]
        data = {"name": name, "slug": slug, "description": description, "icon": icon}
        if spec.parent_column:
            data[spec.parent_column] = parent_id
        return self.save_node(level, data)

    def update_parent(self, level: str, node_id: str, parent_id: str) -> None:
        spec = LEVELS[level]
        self.supabase.table(spec.table)\
            .update({spec.parent_column: parent_id, "updated_at": utcnow().isoformat()})\
            .eq("id", node_id)\
            .execute()

    def delete_row(self, level: str, node_id: str) -> None:
        self.supabase.table(LEVELS[level].table)\
            .delete()\
            .eq("id", node_id)\
            .execute()

    def repoint_templates(self, level: str, node_id: str, values: Dict[str, Any]) -> None:
        """Rewrite the hierarchy columns of every template attached to node_id at this level"""
        self.supabase.table("templates")\
            .update(values)\
            .eq(LEVELS[level].template_column, node_id)\
            .execute()

    def count_children(self, level: str, node_id: str) -> int:
        spec = LEVELS[level]
        if not spec.child:
            return 0
        child = LEVELS[spec.child]
        result = self.supabase.table(child.table)\
            .select("id", count="exact")\
            .eq(child.parent_column, node_id)\
            .execute()
        return result.count if result.count is not None else len(result.data or [])

    def count_templates(self, level: str, node_id: str) -> int:
        result = self.supabase.table("templates")\
            .select("slug", count="exact")\
            .eq(LEVELS[level].template_column, node_id)\
            .execute()
        return result.count if result.count is not None else len(result.data or [])

    def delete_node(self, level: str, node_id: str, force: bool = False) -> Dict[str, int]:
        """Delete a node. Refused with 409 while children or templates still point at it,
        unless force, which removes descendants bottom-up and nulls template references first."""
        if not node_id:
            raise HTTPException(status_code=400, detail=f"{LEVEL_LABELS[level]} ID is required")
        try:
            self.get_node(level, node_id)
            children = self.count_children(level, node_id)
            templates = self.count_templates(level, node_id)
            if (children or templates) and not force:
                raise HTTPException(
                    status_code=409,
                    detail=f"{LEVEL_LABELS[level]} still has {children} child node(s) and {templates} template(s); pass force=true to delete them",
                )
            removed = {"nodes": 0}
            self._delete_branch(level, node_id, removed)
            logger.info(f"Deleted {level} {node_id} ({removed['nodes']} node(s) removed)")
            return removed
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting {level} {node_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def _delete_branch(self, level: str, node_id: str, removed: Dict[str, int]) -> None:
        spec = LEVELS[level]
        if spec.child:
            child = LEVELS[spec.child]
            for row in self.list_nodes(spec.child, parent_id=node_id):
                self._delete_branch(child.name, row["id"], removed)
        self.repoint_templates(level, node_id, {spec.template_column: None})
        self.delete_row(level, node_id)
        removed["nodes"] += 1

    def get_tree(self) -> List[Dict[str, Any]]:
        """All three levels nested: categories -> subcategories -> sub_subcategories"""
        categories = self.list_nodes(CATEGORY)
        subcategories = self.list_nodes(SUBCATEGORY)
        sub_subcategories = self.list_nodes(SUB_SUBCATEGORY)

        by_subcategory: Dict[str, List[Dict[str, Any]]] = {}
        for row in sub_subcategories:
            by_subcategory.setdefault(row.get("subcategory_id"), []).append(row)

        by_category: Dict[str, List[Dict[str, Any]]] = {}
        for row in subcategories:
            node = dict(row)
            node["sub_subcategories"] = by_subcategory.get(row["id"], [])
            by_category.setdefault(row.get("category_id"), []).append(node)

        tree = []
        for row in categories:
            node = dict(row)
            node["subcategories"] = by_category.get(row["id"], [])
            tree.append(node)
        return tree
