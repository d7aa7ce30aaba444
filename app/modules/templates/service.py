from supabase import Client
from app.config import settings
from app.modules.templates.schemas import TemplateSave
from app.modules.templates.offers import with_offer
from app.modules.templates.storage_paths import to_template_object_path, to_r2_preview_key
from app.modules.templates.r2_storage import R2Storage
from app.core.utils import clean_optional, utcnow
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

REVIEW_STATUSES = ("approved", "pending", "rejected")
DEFAULT_PAGE_SIZE = 24
# Nullable text columns where an empty string means "unset"
NULLABLE_COLUMNS = (
    "video_path", "thumbnail_path", "audio_preview_path", "model_3d_path", "source_path",
    "preview_path", "category_id", "subcategory_id", "sub_subcategory_id",
    "meta_title", "meta_description", "creator_shop_id", "vendor_name",
)


def template_row(template: TemplateSave) -> Dict[str, Any]:
    """Row for an upsert on slug. Only fields the caller sent are written; desc is an alias of description."""
    row = template.model_dump(exclude_unset=True, mode="json")
    desc = row.pop("desc", None)
    if "description" not in row and desc is not None:
        row["description"] = desc
    for column in NULLABLE_COLUMNS:
        if column in row:
            row[column] = clean_optional(row[column])
    if "tags" in row and row["tags"] is None:
        row["tags"] = []
    return row


class TemplateService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.r2_storage = None
        if settings.r2_configured:
            try:
                self.r2_storage = R2Storage()
            except Exception as e:
                logger.warning(f"R2 storage initialization failed ({str(e)}), R2 previews will not be removed")

    def list_public_templates(
        self,
        category_id: Optional[str] = None,
        subcategory_id: Optional[str] = None,
        sub_subcategory_id: Optional[str] = None,
        creator_shop_id: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """Approved templates, newest first, with the limited-offer window attached"""
        try:
            query = self.supabase.table("templates")\
                .select("*", count="exact")\
                .eq("status", "approved")
            if category_id:
                query = query.eq("category_id", category_id)
            if subcategory_id:
                query = query.eq("subcategory_id", subcategory_id)
            if sub_subcategory_id:
                query = query.eq("sub_subcategory_id", sub_subcategory_id)
            if creator_shop_id:
                query = query.eq("creator_shop_id", creator_shop_id)
            if featured is not None:
                query = query.eq("is_featured", featured)
            if search:
                query = query.ilike("name", f"%{search.strip()}%")
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            now = utcnow()
            return {
                "templates": [with_offer(row, now) for row in (result.data or [])],
                "total": result.count,
            }
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_public_template(self, slug: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("templates")\
                .select("*")\
                .eq("slug", slug)\
                .eq("status", "approved")\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Template not found")
        return with_offer(result.data)

    def list_admin_templates(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """Every template regardless of review status"""
        try:
            query = self.supabase.table("templates").select("*")
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True).execute()
            now = utcnow()
            return [with_offer(row, now) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def upsert_templates(self, templates: List[TemplateSave]) -> int:
        """Insert or update templates keyed on slug; returns the number of rows written"""
        rows = [template_row(t) for t in templates]
        if not rows:
            return 0
        try:
            result = self.supabase.table("templates")\
                .upsert(rows, on_conflict="slug")\
                .execute()
            count = len(result.data or [])
            logger.info(f"Upserted {count} template(s)")
            return count
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_template(self, slug: str) -> None:
        """Remove the template's stored files (best effort), then the row"""
        if not slug:
            raise HTTPException(status_code=400, detail="Missing slug")
        try:
            result = self.supabase.table("templates")\
                .select("img, video, source_path")\
                .eq("slug", slug)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        row = (result.data if result else None) or {}

        self._remove_assets(row)

        try:
            self.supabase.table("templates").delete().eq("slug", slug).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"Deleted template {slug}")

    def _remove_assets(self, row: Dict[str, Any]) -> None:
        template_paths = []
        r2_keys = []
        for url in (row.get("img"), row.get("video")):
            path = to_template_object_path(url, settings.supabase_url, settings.templates_bucket)
            if path:
                template_paths.append(path)
                continue
            key = to_r2_preview_key(url, settings.r2_previews_domain)
            if key:
                r2_keys.append(key)

        if template_paths:
            try:
                self.supabase.storage.from_(settings.templates_bucket).remove(template_paths)
            except Exception as e:
                logger.warning(f"Failed to remove template previews {template_paths}: {e}")
        source_path = row.get("source_path")
        if source_path:
            try:
                self.supabase.storage.from_(settings.template_source_bucket).remove([source_path])
            except Exception as e:
                logger.warning(f"Failed to remove template source {source_path}: {e}")
        if r2_keys and self.r2_storage:
            for key in r2_keys:
                self.r2_storage.delete_preview(key)

    def review_template(self, slug: Optional[str], status: Optional[str], review_note: Optional[str]) -> None:
        """Approve, reject or send back to pending"""
        slug = (slug or "").strip()
        status = (status or "").strip().lower()
        if not slug:
            raise HTTPException(status_code=400, detail="Missing slug")
        if status not in REVIEW_STATUSES:
            raise HTTPException(status_code=400, detail="Invalid status")
        try:
            self.supabase.table("templates")\
                .update({
                    "status": status,
                    "review_note": clean_optional(review_note),
                    "reviewed_at": utcnow().isoformat(),
                })\
                .eq("slug", slug)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"Template {slug} marked {status}")
