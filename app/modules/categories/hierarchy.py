"""Drag-and-drop re-parenting for the category hierarchy.

A drop of one node onto another is read as one of five moves, keyed on
(source level, target level):

    category        -> category         DEMOTE_CATEGORY
    subcategory     -> root             PROMOTE_SUBCATEGORY
    subcategory     -> subcategory      DEMOTE_SUBCATEGORY
    sub_subcategory -> category         PROMOTE_SUB_SUBCATEGORY
    sub_subcategory -> subcategory      MOVE_SUB_SUBCATEGORY

Every other pair is rejected. Each move is a fixed sequence of create,
update and delete calls issued one after another; there is no transaction,
so a failure part way through leaves the completed steps in place.
"""
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from app.modules.categories.service import (
    CATEGORY, SUBCATEGORY, SUB_SUBCATEGORY, LEVELS, LEVEL_LABELS, CategoryService
)
import logging

logger = logging.getLogger(__name__)

ROOT = "root"

DEMOTE_CATEGORY = "demote_category"
PROMOTE_SUBCATEGORY = "promote_subcategory"
DEMOTE_SUBCATEGORY = "demote_subcategory"
PROMOTE_SUB_SUBCATEGORY = "promote_sub_subcategory"
MOVE_SUB_SUBCATEGORY = "move_sub_subcategory"

DROP_CASES = {
    (CATEGORY, CATEGORY): DEMOTE_CATEGORY,
    (SUBCATEGORY, ROOT): PROMOTE_SUBCATEGORY,
    (SUBCATEGORY, SUBCATEGORY): DEMOTE_SUBCATEGORY,
    (SUB_SUBCATEGORY, CATEGORY): PROMOTE_SUB_SUBCATEGORY,
    (SUB_SUBCATEGORY, SUBCATEGORY): MOVE_SUB_SUBCATEGORY,
}


def classify_drop(source_type: str, target_type: str) -> Optional[str]:
    """The move for a (source, target) pair, or None when the drop is not allowed"""
    return DROP_CASES.get((source_type, target_type))


class HierarchyMove:
    def __init__(self, service: CategoryService, source_type: str, source_id: str,
                 target_type: str, target_id: Optional[str] = None):
        self.service = service
        self.case = classify_drop(source_type, target_type)
        if self.case is None:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot drop a {source_type} onto a {target_type}",
            )
        if not source_id or (target_type != ROOT and not target_id):
            raise HTTPException(status_code=400, detail="Source and target ids are required")
        if source_type == target_type and source_id == target_id:
            raise HTTPException(status_code=400, detail="Cannot drop a node onto itself")

        self.source_type = source_type
        self.target_type = target_type
        self.source = service.get_node(source_type, source_id)
        self.target = service.get_node(target_type, target_id) if target_type != ROOT else None

        source_parent = LEVELS[source_type].parent_column
        if self.target and source_parent and self.source.get(source_parent) == self.target["id"]:
            raise HTTPException(
                status_code=400,
                detail=f"{self.source['name']} is already under {self.target['name']}",
            )
        self._check_depth()
        self.completed: List[str] = []

    def _check_depth(self) -> None:
        """A demotion must not push any grandchild down to a fourth level"""
        if self.case == DEMOTE_CATEGORY:
            for sub in self.service.list_nodes(SUBCATEGORY, parent_id=self.source["id"]):
                if self.service.count_children(SUBCATEGORY, sub["id"]):
                    raise HTTPException(
                        status_code=400,
                        detail=f"Cannot demote {self.source['name']}: subcategory {sub['name']} has sub-subcategories",
                    )
        elif self.case == DEMOTE_SUBCATEGORY:
            if self.service.count_children(SUBCATEGORY, self.source["id"]):
                raise HTTPException(
                    status_code=400,
                    detail=f"Cannot demote {self.source['name']}: it has sub-subcategories",
                )

    @property
    def summary(self) -> str:
        name = self.source["name"]
        target = self.target["name"] if self.target else None
        if self.case == DEMOTE_CATEGORY:
            return f"Category '{name}' becomes a subcategory of '{target}'; its subcategories become sub-subcategories."
        if self.case == PROMOTE_SUBCATEGORY:
            return f"Subcategory '{name}' becomes a top-level category; its sub-subcategories become subcategories."
        if self.case == DEMOTE_SUBCATEGORY:
            return f"Subcategory '{name}' becomes a sub-subcategory of '{target}'."
        if self.case == PROMOTE_SUB_SUBCATEGORY:
            return f"Sub-subcategory '{name}' becomes a subcategory of '{target}'."
        return f"Sub-subcategory '{name}' moves under subcategory '{target}'."

    def _step(self, description: str) -> None:
        self.completed.append(description)
        logger.info(f"Hierarchy move {self.case}: {description}")

    def _create(self, level: str, node: Dict[str, Any], parent_id: Optional[str] = None) -> Dict[str, Any]:
        created = self.service.create_node(
            level,
            name=node["name"],
            slug=node["slug"],
            description=node.get("description"),
            parent_id=parent_id,
            icon=node.get("icon"),
        )
        self._step(f"created {LEVEL_LABELS[level].lower()} {created['id']} from {node['id']}")
        return created

    def _repoint(self, level: str, node_id: str, values: Dict[str, Any]) -> None:
        self.service.repoint_templates(level, node_id, values)
        self._step(f"re-pointed templates of {level} {node_id}")

    def _delete(self, level: str, node_id: str) -> None:
        self.service.delete_row(level, node_id)
        self._step(f"deleted {level} {node_id}")

    def apply(self) -> List[str]:
        """Run the steps in order; returns the completed step descriptions"""
        try:
            getattr(self, f"_apply_{self.case}")()
        except Exception as e:
            logger.error(
                f"Hierarchy move {self.case} failed after {len(self.completed)} step(s) "
                f"{self.completed}: {e}"
            )
            detail = e.detail if isinstance(e, HTTPException) else str(e)
            raise HTTPException(
                status_code=500,
                detail=f"Move failed after {len(self.completed)} step(s): {detail}",
            )
        return self.completed

    def _apply_demote_category(self) -> None:
        category_id = self.target["id"]
        new_sub = self._create(SUBCATEGORY, self.source, parent_id=category_id)
        for sub in self.service.list_nodes(SUBCATEGORY, parent_id=self.source["id"]):
            new_ss = self._create(SUB_SUBCATEGORY, sub, parent_id=new_sub["id"])
            self._repoint(SUBCATEGORY, sub["id"], {
                "category_id": category_id,
                "subcategory_id": new_sub["id"],
                "sub_subcategory_id": new_ss["id"],
            })
            self._delete(SUBCATEGORY, sub["id"])
        self._repoint(CATEGORY, self.source["id"], {
            "category_id": category_id,
            "subcategory_id": new_sub["id"],
        })
        self._delete(CATEGORY, self.source["id"])

    def _apply_promote_subcategory(self) -> None:
        new_category = self._create(CATEGORY, self.source)
        for ss in self.service.list_nodes(SUB_SUBCATEGORY, parent_id=self.source["id"]):
            new_sub = self._create(SUBCATEGORY, ss, parent_id=new_category["id"])
            self._repoint(SUB_SUBCATEGORY, ss["id"], {
                "category_id": new_category["id"],
                "subcategory_id": new_sub["id"],
                "sub_subcategory_id": None,
            })
            self._delete(SUB_SUBCATEGORY, ss["id"])
        self._repoint(SUBCATEGORY, self.source["id"], {
            "category_id": new_category["id"],
            "subcategory_id": None,
        })
        self._delete(SUBCATEGORY, self.source["id"])

    def _apply_demote_subcategory(self) -> None:
        new_ss = self._create(SUB_SUBCATEGORY, self.source, parent_id=self.target["id"])
        self._repoint(SUBCATEGORY, self.source["id"], {
            "category_id": self.target.get("category_id"),
            "subcategory_id": self.target["id"],
            "sub_subcategory_id": new_ss["id"],
        })
        self._delete(SUBCATEGORY, self.source["id"])

    def _apply_promote_sub_subcategory(self) -> None:
        new_sub = self._create(SUBCATEGORY, self.source, parent_id=self.target["id"])
        self._repoint(SUB_SUBCATEGORY, self.source["id"], {
            "category_id": self.target["id"],
            "subcategory_id": new_sub["id"],
            "sub_subcategory_id": None,
        })
        self._delete(SUB_SUBCATEGORY, self.source["id"])

    def _apply_move_sub_subcategory(self) -> None:
        self.service.update_parent(SUB_SUBCATEGORY, self.source["id"], self.target["id"])
        self._step(f"moved sub_subcategory {self.source['id']} under {self.target['id']}")
        self._repoint(SUB_SUBCATEGORY, self.source["id"], {
            "category_id": self.target.get("category_id"),
            "subcategory_id": self.target["id"],
        })
