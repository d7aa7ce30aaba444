from supabase import Client
from app.modules.creators.schemas import CreatorTemplateInput, CreatorShopResponse
from app.modules.analytics.aggregation import count_unique_user_periods, creator_revenue_estimate, download_counts
from app.core.utils import slugify, clean_optional
from typing import Dict, Any, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 100
TEXT_FIELDS = (
    "subtitle", "description", "video_path", "thumbnail_path", "audio_preview_path",
    "model_3d_path", "source_path", "preview_path", "meta_title", "meta_description",
)
LIST_FIELDS = ("features", "software", "plugins", "tags")


class CreatorService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Admin

    def list_shops(self) -> List[CreatorShopResponse]:
        """All creator shops, newest first, with the owner's email when available"""
        try:
            shops = self.supabase.table("creator_shops")\
                .select("id, slug, name, description, direct_upload_enabled, created_at, user_id")\
                .order("created_at", desc=True)\
                .execute().data or []
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        emails = {}
        if shops:
            try:
                users = self.supabase.auth.admin.list_users(page=1, per_page=1000) or []
                emails = {str(u.id): u.email for u in users}
            except Exception as e:
                logger.warning(f"Could not fetch creator emails: {e}")
        return [CreatorShopResponse(**shop, user_email=emails.get(shop.get("user_id"))) for shop in shops]

    def set_direct_upload(self, shop_id: Optional[str], enabled: Optional[bool]) -> Dict[str, Any]:
        if not shop_id or not isinstance(enabled, bool):
            raise HTTPException(status_code=400, detail="Missing shop_id or direct_upload_enabled")
        try:
            result = self.supabase.table("creator_shops")\
                .update({"direct_upload_enabled": enabled})\
                .eq("id", shop_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Creator shop not found")
        logger.info(f"Creator shop {shop_id} direct upload set to {enabled}")
        return result.data[0]

    # Creator dashboard

    def list_own_templates(self, shop: Dict[str, Any]) -> Dict[str, Any]:
        """Shop templates with per-template download counts and earnings estimate"""
        try:
            templates = self.supabase.table("templates")\
                .select("slug,name,subtitle,video,img,created_at,creator_shop_id,status,review_note")\
                .eq("creator_shop_id", shop["id"])\
                .order("created_at", desc=True)\
                .execute().data or []
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        downloads = []
        slugs = [t["slug"] for t in templates if t.get("slug")]
        if slugs:
            try:
                downloads = self.supabase.table("downloads")\
                    .select("template_slug, user_id, downloaded_at")\
                    .in_("template_slug", slugs)\
                    .order("downloaded_at")\
                    .execute().data or []
            except Exception as e:
                logger.error(f"Failed to load downloads for creator shop {shop['id']}: {e}")

        counts = download_counts(downloads)
        results = [dict(t, downloadCount=counts.get(t["slug"], 0)) for t in templates]
        periods = count_unique_user_periods(downloads)
        return {
            "shop": shop,
            "templates": results,
            "stats": {
                "totalDownloads": sum(t["downloadCount"] for t in results),
                "uniqueUserPeriods": periods,
                "revenue": creator_revenue_estimate(periods),
            },
        }

    def _template_owner(self, slug: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("templates")\
            .select("slug, creator_shop_id")\
            .eq("slug", slug)\
            .maybe_single()\
            .execute()
        return result.data if result and result.data else None

    def unique_slug(self, base_slug: str, shop_id: str) -> str:
        """base_slug, or base_slug-1..-100 when another shop already owns it"""
        candidate = base_slug
        for attempt in range(1, MAX_SLUG_ATTEMPTS + 1):
            existing = self._template_owner(candidate)
            if not existing or existing.get("creator_shop_id") == shop_id:
                return candidate
            candidate = f"{base_slug}-{attempt}"
        raise HTTPException(status_code=500, detail="Unable to generate unique slug. Please try a different name.")

    def save_template(self, shop: Dict[str, Any], data: Optional[CreatorTemplateInput]) -> str:
        """Create or update a shop template; every creator change goes back to pending review"""
        if data is None:
            raise HTTPException(status_code=400, detail="Provide { template: { ... } } in request body")
        name = (data.name or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Template name is required")
        base_slug = (data.slug or "").strip().lower() or slugify(name)
        if not base_slug:
            raise HTTPException(status_code=400, detail="Invalid slug generated. Please provide a valid slug.")

        try:
            slug = self.unique_slug(base_slug, shop["id"])
            row = {
                "slug": slug,
                "name": name,
                "img": None,
                "category_id": data.category_id or None,
                "subcategory_id": data.subcategory_id or None,
                "sub_subcategory_id": data.sub_subcategory_id or None,
                "creator_shop_id": shop["id"],
                "vendor_name": shop.get("name"),
                "status": "pending",
            }
            for field in TEXT_FIELDS:
                row[field] = clean_optional(getattr(data, field))
            for field in LIST_FIELDS:
                row[field] = getattr(data, field) or []

            result = self.supabase.table("templates")\
                .upsert(row, on_conflict="slug")\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save template")
            logger.info(f"Creator shop {shop['id']} saved template {slug} for review")
            return result.data[0]["slug"]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_template(self, shop: Dict[str, Any], slug: Optional[str]) -> None:
        slug = (slug or "").strip()
        if not slug:
            raise HTTPException(status_code=400, detail="Missing slug")
        try:
            existing = self._template_owner(slug)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not existing:
            raise HTTPException(status_code=404, detail="Template not found")
        if existing.get("creator_shop_id") != shop["id"]:
            raise HTTPException(status_code=403, detail="You can only delete your own templates")
        try:
            self.supabase.table("templates").delete().eq("slug", slug).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"Creator shop {shop['id']} deleted template {slug}")

    # Followers

    def _shop(self, shop_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("creator_shops")\
                .select("id, user_id")\
                .eq("id", shop_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Creator shop not found")
        return result.data

    def _is_following(self, shop_id: str, user_id: str) -> bool:
        result = self.supabase.table("creator_followers")\
            .select("id")\
            .eq("creator_shop_id", shop_id)\
            .eq("user_id", user_id)\
            .maybe_single()\
            .execute()
        return bool(result and result.data)

    def follow(self, shop_id: str, user_id: str) -> None:
        shop = self._shop(shop_id)
        if shop.get("user_id") == user_id:
            raise HTTPException(status_code=400, detail="You cannot follow your own shop")
        try:
            if self._is_following(shop_id, user_id):
                return None
            self.supabase.table("creator_followers").insert({
                "creator_shop_id": shop_id,
                "user_id": user_id,
            }).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def unfollow(self, shop_id: str, user_id: str) -> None:
        try:
            self.supabase.table("creator_followers")\
                .delete()\
                .eq("creator_shop_id", shop_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def followers(self, shop_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Follower count plus whether user_id follows the shop"""
        self._shop(shop_id)
        try:
            result = self.supabase.table("creator_followers")\
                .select("id", count="exact", head=True)\
                .eq("creator_shop_id", shop_id)\
                .execute()
            following = self._is_following(shop_id, user_id) if user_id else False
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return {"followers": result.count or 0, "is_following": following}
