from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.creators.schemas import (
    CreatorShopListResponse, DirectUploadToggle, CreatorTemplateSave,
    CreatorTemplateSlug, CreatorTemplatesResponse, FollowersResponse
)
from app.modules.creators.service import CreatorService
from app.core.dependencies import require_admin, get_current_user, get_optional_user, get_creator_shop
from supabase import Client
from typing import Dict, Optional

router = APIRouter(tags=["creators"])


def get_creator_service(supabase: Client = Depends(get_supabase)) -> CreatorService:
    return CreatorService(supabase)


@router.get("/admin/creator-shops", response_model=CreatorShopListResponse)
async def list_creator_shops(
    user_data: Dict = Depends(require_admin),
    service: CreatorService = Depends(get_creator_service),
):
    return CreatorShopListResponse(shops=service.list_shops())


@router.patch("/admin/creator-shops")
async def toggle_direct_upload(
    body: DirectUploadToggle,
    user_data: Dict = Depends(require_admin),
    service: CreatorService = Depends(get_creator_service),
):
    """Allow or stop a creator publishing without review"""
    return {"ok": True, "shop": service.set_direct_upload(body.shop_id, body.direct_upload_enabled)}


@router.get("/creator/templates", response_model=CreatorTemplatesResponse)
async def list_creator_templates(
    shop: Dict = Depends(get_creator_shop),
    service: CreatorService = Depends(get_creator_service),
):
    """The caller's shop templates and earnings stats"""
    return CreatorTemplatesResponse(**service.list_own_templates(shop))


@router.post("/creator/templates")
async def save_creator_template(
    body: CreatorTemplateSave,
    shop: Dict = Depends(get_creator_shop),
    service: CreatorService = Depends(get_creator_service),
):
    """Submit a template for review"""
    return {"ok": True, "slug": service.save_template(shop, body.template)}


@router.delete("/creator/templates")
async def delete_creator_template(
    body: CreatorTemplateSlug,
    shop: Dict = Depends(get_creator_shop),
    service: CreatorService = Depends(get_creator_service),
):
    service.delete_template(shop, body.slug)
    return {"ok": True}


@router.post("/creators/{shop_id}/follow")
async def follow_creator(
    shop_id: str,
    current_user: Dict = Depends(get_current_user),
    service: CreatorService = Depends(get_creator_service),
):
    service.follow(shop_id, current_user["id"])
    return {"ok": True, **service.followers(shop_id, current_user["id"])}


@router.delete("/creators/{shop_id}/follow")
async def unfollow_creator(
    shop_id: str,
    current_user: Dict = Depends(get_current_user),
    service: CreatorService = Depends(get_creator_service),
):
    service.unfollow(shop_id, current_user["id"])
    return {"ok": True, **service.followers(shop_id, current_user["id"])}


@router.get("/creators/{shop_id}/followers", response_model=FollowersResponse)
async def creator_followers(
    shop_id: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: CreatorService = Depends(get_creator_service),
):
    """Follower count; is_following is only set for signed-in callers"""
    user_id = current_user["id"] if current_user else None
    return FollowersResponse(**service.followers(shop_id, user_id))
