from supabase import Client
from app.config import settings
from app.modules.subscriptions.status import derive_status, ACTIVE
from app.core.utils import utcnow
from typing import Dict, Any, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class DownloadService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _subscription(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("subscriptions")\
                .select("*")\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return result.data if result and result.data else None

    def signed_source_url(self, path: str) -> str:
        """Time-limited URL for an object in the private source bucket"""
        try:
            signed = self.supabase.storage\
                .from_(settings.template_source_bucket)\
                .create_signed_url(path, settings.signed_url_ttl_seconds)
        except Exception as e:
            logger.error(f"Failed to sign {path}: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        url = (signed or {}).get("signedURL") or (signed or {}).get("signedUrl")
        if not url:
            raise HTTPException(status_code=400, detail="Could not create download link")
        return url

    def _template_by(self, column: str, value: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("templates")\
                .select("slug, name, price, source_path")\
                .eq(column, value)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.warning(f"Template lookup by {column} failed: {e}")
            return None
        return result.data if result and result.data else None

    def _record(self, table: str, row: Dict[str, Any]) -> None:
        """Download logging never blocks the download itself"""
        now = utcnow().isoformat()
        row = dict(row, downloaded_at=now, created_at=now)
        try:
            self.supabase.table(table).insert(row).execute()
            logger.info(f"Recorded {table} event for user {row['user_id']}, template {row.get('template_slug')}")
        except Exception as e:
            logger.error(f"Failed to record {table} event {row}: {e}")

    def subscriber_download(self, user_id: str, file_name: Optional[str], template_slug: Optional[str] = None) -> str:
        """Signed source URL for an active subscriber; the event goes to downloads"""
        if not file_name:
            raise HTTPException(status_code=400, detail="Missing fileName")
        subscription = self._subscription(user_id)
        if derive_status(subscription) != ACTIVE:
            raise HTTPException(status_code=403, detail="Access denied")

        url = self.signed_source_url(file_name)

        if not template_slug:
            template = self._template_by("source_path", file_name)
            template_slug = template["slug"] if template else None
        if template_slug:
            row = {"user_id": user_id, "template_slug": template_slug}
            if subscription.get("id"):
                row["subscription_id"] = subscription["id"]
            self._record("downloads", row)
        return url

    def free_download(self, user_id: str, template_slug: Optional[str]) -> Optional[str]:
        """Free templates need no subscription; the event goes to free_downloads"""
        if not template_slug:
            raise HTTPException(status_code=400, detail="Missing template_slug")
        template = self._template_by("slug", template_slug)
        if not template:
            raise HTTPException(status_code=404, detail="Template not found")
        if float(template.get("price") or 0) != 0:
            raise HTTPException(status_code=403, detail="Template is not free")

        url = self.signed_source_url(template["source_path"]) if template.get("source_path") else None
        self._record("free_downloads", {"user_id": user_id, "template_slug": template_slug})
        return url
