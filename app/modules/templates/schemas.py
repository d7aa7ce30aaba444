from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class TemplateFields(BaseModel):
    name: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    img: Optional[str] = None
    video: Optional[str] = None
    video_path: Optional[str] = None
    thumbnail_path: Optional[str] = None
    audio_preview_path: Optional[str] = None
    model_3d_path: Optional[str] = None
    source_path: Optional[str] = None
    preview_path: Optional[str] = None
    features: Optional[List[str]] = None
    software: Optional[List[str]] = None
    plugins: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    is_limited_offer: Optional[bool] = None
    limited_offer_duration_days: Optional[int] = None
    limited_offer_start_date: Optional[datetime] = None
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    sub_subcategory_id: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class TemplateSave(TemplateFields):
    slug: str
    desc: Optional[str] = None
    creator_shop_id: Optional[str] = None
    vendor_name: Optional[str] = None
    status: Optional[str] = None


class TemplateSeedRequest(BaseModel):
    templates: Optional[List[TemplateSave]] = None


class TemplateSlug(BaseModel):
    slug: Optional[str] = None


class TemplateReview(BaseModel):
    slug: Optional[str] = None
    status: Optional[str] = None
    review_note: Optional[str] = None


class TemplateResponse(TemplateFields):
    slug: str
    creator_shop_id: Optional[str] = None
    vendor_name: Optional[str] = None
    status: Optional[str] = None
    review_note: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    has_active_limited_offer: bool = False
    days_remaining: Optional[int] = None

    class Config:
        from_attributes = True


class TemplateListResponse(BaseModel):
    ok: bool = True
    templates: List[TemplateResponse]
    total: Optional[int] = None


class TemplateDetailResponse(BaseModel):
    ok: bool = True
    template: TemplateResponse


class SeedResponse(BaseModel):
    ok: bool = True
    count: int = 0

