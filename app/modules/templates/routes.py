from fastapi import APIRouter, Depends, HTTPException, status, Query
from app.database.supabase_client import get_supabase
from app.modules.templates.schemas import (
    TemplateSave, TemplateSeedRequest, TemplateSlug, TemplateReview,
    TemplateListResponse, TemplateDetailResponse, SeedResponse
)
from app.modules.templates.service import TemplateService
from app.core.dependencies import require_admin
from supabase import Client
from typing import Dict, Optional

router = APIRouter(tags=["templates"])


def get_template_service(supabase: Client = Depends(get_supabase)) -> TemplateService:
    return TemplateService(supabase)


@router.get("/templates", response_model=TemplateListResponse)
async def list_templates(
    category_id: Optional[str] = None,
    subcategory_id: Optional[str] = None,
    sub_subcategory_id: Optional[str] = None,
    creator_shop_id: Optional[str] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    limit: int = Query(24, ge=1, le=200),
    offset: int = Query(0, ge=0),
    service: TemplateService = Depends(get_template_service),
):
    """Browse approved templates"""
    result = service.list_public_templates(
        category_id=category_id,
        subcategory_id=subcategory_id,
        sub_subcategory_id=sub_subcategory_id,
        creator_shop_id=creator_shop_id,
        featured=featured,
        search=search,
        limit=limit,
        offset=offset,
    )
    return TemplateListResponse(**result)


@router.get("/templates/{slug}", response_model=TemplateDetailResponse)
async def get_template(slug: str, service: TemplateService = Depends(get_template_service)):
    return TemplateDetailResponse(template=service.get_public_template(slug))


@router.get("/admin/templates", response_model=TemplateListResponse)
async def list_admin_templates(
    status: Optional[str] = None,
    user_data: Dict = Depends(require_admin),
    service: TemplateService = Depends(get_template_service),
):
    """All templates for the products and vendor-approval panels"""
    templates = service.list_admin_templates(status)
    return TemplateListResponse(templates=templates, total=len(templates))


@router.post("/admin/templates", response_model=SeedResponse)
async def save_template(
    body: TemplateSave,
    user_data: Dict = Depends(require_admin),
    service: TemplateService = Depends(get_template_service),
):
    """Create or update one template by slug"""
    return SeedResponse(count=service.upsert_templates([body]))


@router.post("/admin/seed-templates", response_model=SeedResponse)
async def seed_templates(
    body: TemplateSeedRequest,
    user_data: Dict = Depends(require_admin),
    service: TemplateService = Depends(get_template_service),
):
    """Bulk upsert templates on slug"""
    if body.templates is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Provide { templates: [...] } in request body")
    return SeedResponse(count=service.upsert_templates(body.templates))


@router.post("/admin/templates/delete")
async def delete_template(
    body: TemplateSlug,
    user_data: Dict = Depends(require_admin),
    service: TemplateService = Depends(get_template_service),
):
    """Delete a template and its stored files"""
    service.delete_template(body.slug)
    return {"ok": True}


@router.post("/admin/templates/review")
async def review_template(
    body: TemplateReview,
    user_data: Dict = Depends(require_admin),
    service: TemplateService = Depends(get_template_service),
):
    service.review_template(body.slug, body.status, body.review_note)
    return {"ok": True}
