from supabase import Client
from app.modules.users.schemas import AdminUserResponse
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

USERS_PAGE_SIZE = 1000


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_users(self) -> List[AdminUserResponse]:
        """All auth users with their names from user_metadata"""
        try:
            users = self.supabase.auth.admin.list_users(page=1, per_page=USERS_PAGE_SIZE) or []
        except Exception as e:
            logger.error(f"Error listing auth users: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        result = []
        for user in users:
            metadata = getattr(user, "user_metadata", None) or {}
            result.append(AdminUserResponse(
                id=str(user.id),
                email=getattr(user, "email", None),
                first_name=metadata.get("first_name"),
                last_name=metadata.get("last_name"),
                created_at=getattr(user, "created_at", None),
            ))
        return result

    def delete_user(self, user_id: str) -> None:
        """Delete an auth user"""
        try:
            self.supabase.auth.admin.delete_user(user_id)
            logger.info(f"Deleted auth user {user_id}")
        except Exception as e:
            logger.error(f"Error deleting auth user {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
