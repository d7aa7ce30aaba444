from supabase import Client
from app.modules.settings.pricing import plan_prices
from typing import Dict, Optional, Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

MAINTENANCE_ON_VALUES = ("on", "true", "1")
UNDEFINED_TABLE = "42P01"


def _is_missing_table(error: Exception) -> bool:
    return UNDEFINED_TABLE in str(error) or getattr(error, "code", None) == UNDEFINED_TABLE


class SettingsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_settings(self) -> Dict[str, Optional[str]]:
        """All settings rows as a key -> value map; a missing table reads as empty"""
        try:
            result = self.supabase.table("settings").select("key,value").execute()
            return {row["key"]: row.get("value") for row in (result.data or [])}
        except Exception as e:
            if _is_missing_table(e):
                return {}
            raise HTTPException(status_code=500, detail=str(e))

    def update_settings(self, values: Dict[str, Optional[str]]) -> None:
        """Upsert each key/value pair"""
        if not values:
            return None
        rows = [{"key": key, "value": value} for key, value in values.items()]
        try:
            self.supabase.table("settings").upsert(rows, on_conflict="key").execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_setting(self, key: str) -> Optional[str]:
        result = self.supabase.table("settings")\
            .select("key,value")\
            .eq("key", key)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            return None
        return result.data.get("value")

    def is_maintenance_mode(self) -> bool:
        """Fail open: the storefront stays up when the flag cannot be read"""
        try:
            raw = self.get_setting("MAINTENANCE_MODE")
        except Exception as e:
            logger.error(f"Maintenance settings error: {e}")
            return False
        return (raw or "").strip().lower() in MAINTENANCE_ON_VALUES

    def get_plan_prices(self) -> Tuple[float, float]:
        """(monthly, yearly) in rupees; defaults when settings cannot be read"""
        try:
            return plan_prices(self.get_settings())
        except HTTPException as e:
            logger.warning(f"Could not fetch prices from settings, using defaults: {e.detail}")
            return plan_prices({})
