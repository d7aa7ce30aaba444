from pydantic import BaseModel
from app.modules.templates.schemas import TemplateFields
from typing import Optional, List, Dict, Any
from datetime import datetime


class CreatorShopResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    slug: str
    name: str
    description: Optional[str] = None
    direct_upload_enabled: Optional[bool] = False
    created_at: Optional[datetime] = None
    user_email: Optional[str] = None

    class Config:
        from_attributes = True


class CreatorShopListResponse(BaseModel):
    ok: bool = True
    shops: List[CreatorShopResponse]


class DirectUploadToggle(BaseModel):
    shop_id: Optional[str] = None
    direct_upload_enabled: Optional[bool] = None


class CreatorTemplateInput(TemplateFields):
    slug: Optional[str] = None


class CreatorTemplateSave(BaseModel):
    template: Optional[CreatorTemplateInput] = None


class CreatorTemplateSlug(BaseModel):
    slug: Optional[str] = None


class CreatorStats(BaseModel):
    totalDownloads: int
    uniqueUserPeriods: int
    revenue: float


class CreatorTemplatesResponse(BaseModel):
    ok: bool = True
    shop: Dict[str, Any]
    templates: List[Dict[str, Any]]
    stats: CreatorStats


class FollowersResponse(BaseModel):
    ok: bool = True
    followers: int
    is_following: bool = False
