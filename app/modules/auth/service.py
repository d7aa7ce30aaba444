import hashlib
import time
from supabase import Client
from fastapi import HTTPException
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (admin panels fire many parallel requests with one token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from a Supabase access token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid session")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            logger.info(f"Token rejected by Supabase Auth: {e}")
            raise HTTPException(status_code=401, detail="Invalid session")

    def is_admin(self, user_id: str) -> bool:
        """True when the user id is on the admins allow-list"""
        try:
            result = self.supabase.table("admins")\
                .select("user_id")\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
            return bool(result and result.data)
        except Exception as e:
            logger.error(f"Error checking admin membership for {user_id}: {e}")
            return False
