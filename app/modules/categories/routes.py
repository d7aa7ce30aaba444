from fastapi import APIRouter, Depends, HTTPException, status
from app.database.supabase_client import get_supabase
from app.modules.categories.schemas import (
    CategorySave, SubcategorySave, SubSubcategorySave,
    CategoryTreeResponse, MoveRequest, MoveResponse
)
from app.modules.categories.service import CategoryService, CATEGORY, SUBCATEGORY, SUB_SUBCATEGORY
from app.modules.categories.hierarchy import HierarchyMove
from app.core.dependencies import require_admin
from supabase import Client
from typing import Dict, Optional

router = APIRouter(tags=["categories"])


def get_category_service(supabase: Client = Depends(get_supabase)) -> CategoryService:
    return CategoryService(supabase)


@router.get("/categories/tree", response_model=CategoryTreeResponse)
async def category_tree(service: CategoryService = Depends(get_category_service)):
    """Public navigation tree of all three levels"""
    return CategoryTreeResponse(categories=service.get_tree())


# Categories

@router.get("/admin/categories")
async def list_categories(
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return {"ok": True, "categories": service.list_nodes(CATEGORY)}


@router.post("/admin/categories")
async def save_category(
    body: CategorySave,
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    """Create a category, or update it when id is given"""
    return {"ok": True, "category": service.save_node(CATEGORY, body.model_dump())}


@router.delete("/admin/categories")
async def delete_category(
    id: Optional[str] = None,
    force: bool = False,
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    removed = service.delete_node(CATEGORY, id, force=force)
    return {"ok": True, **removed}


@router.post("/admin/categories/move", response_model=MoveResponse)
async def move_node(
    body: MoveRequest,
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    """Re-parent a node by drag and drop; nothing changes until confirm is true"""
    if body.source.type == "root":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot move the root")
    move = HierarchyMove(service, body.source.type, body.source.id, body.target.type, body.target.id)
    if not body.confirm:
        return MoveResponse(applied=False, case=move.case, summary=move.summary)
    steps = move.apply()
    return MoveResponse(applied=True, case=move.case, summary=move.summary, steps=steps)


# Subcategories

@router.get("/admin/subcategories")
async def list_subcategories(
    category_id: Optional[str] = None,
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return {"ok": True, "subcategories": service.list_nodes(SUBCATEGORY, parent_id=category_id)}


@router.post("/admin/subcategories")
async def save_subcategory(
    body: SubcategorySave,
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    """Create or update a subcategory; changing category_id moves it to another category"""
    return {"ok": True, "subcategory": service.save_node(SUBCATEGORY, body.model_dump())}


@router.delete("/admin/subcategories")
async def delete_subcategory(
    id: Optional[str] = None,
    force: bool = False,
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    removed = service.delete_node(SUBCATEGORY, id, force=force)
    return {"ok": True, **removed}


# Sub-subcategories

@router.get("/admin/sub-subcategories")
async def list_sub_subcategories(
    subcategory_id: Optional[str] = None,
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return {"ok": True, "sub_subcategories": service.list_nodes(SUB_SUBCATEGORY, parent_id=subcategory_id)}


@router.post("/admin/sub-subcategories")
async def save_sub_subcategory(
    body: SubSubcategorySave,
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return {"ok": True, "sub_subcategory": service.save_node(SUB_SUBCATEGORY, body.model_dump())}


@router.delete("/admin/sub-subcategories")
async def delete_sub_subcategory(
    id: Optional[str] = None,
    force: bool = False,
    user_data: Dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    removed = service.delete_node(SUB_SUBCATEGORY, id, force=force)
    return {"ok": True, **removed}
