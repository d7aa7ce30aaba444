from supabase import Client
from app.core.utils import clean_optional
from typing import Dict, Any, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def update_names(self, user: Dict[str, Any], first_name: Optional[str], last_name: Optional[str]) -> Dict[str, Any]:
        """Merge first/last name into the user's metadata; blank clears the field"""
        metadata = dict(user.get("user_metadata") or {})
        metadata["first_name"] = clean_optional(first_name)
        metadata["last_name"] = clean_optional(last_name)
        try:
            self.supabase.auth.admin.update_user_by_id(user["id"], {"user_metadata": metadata})
        except Exception as e:
            logger.error(f"Error updating profile for {user['id']}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return metadata

    def update_password(self, user_id: str, new_password: Optional[str]) -> None:
        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(status_code=400, detail="Password must be at least 6 characters")
        try:
            self.supabase.auth.admin.update_user_by_id(user_id, {"password": new_password})
        except Exception as e:
            logger.error(f"Error updating password for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
