"""
Core dependencies for route protection: bearer token, admin allow-list, creator shop ownership, cron secret
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> str:
    """Extract the access token from Authorization: Bearer <token>"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Resolve the token to a Supabase Auth user"""
    return auth_service.get_current_user(token)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[Dict[str, Any]]:
    """Like get_current_user but anonymous callers get None instead of a 401"""
    if credentials is None or not credentials.credentials:
        return None
    return auth_service.get_current_user(credentials.credentials)


def require_admin(
    user_data: Dict[str, Any] = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Dependency: caller must be on the admins allow-list"""
    if not auth_service.is_admin(user_data["id"]):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user_data


def get_creator_shop(
    user_data: Dict[str, Any] = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
) -> Dict[str, Any]:
    """Dependency: the creator shop owned by the caller"""
    try:
        result = supabase.table("creator_shops")\
            .select("id, slug, name, description, direct_upload_enabled, user_id")\
            .eq("user_id", user_data["id"])\
            .maybe_single()\
            .execute()
    except Exception as e:
        logger.error(f"Error loading creator shop for {user_data['id']}: {e}")
        result = None
    if not result or not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No creator shop found for this user")
    return result.data


def verify_cron_secret(request: Request) -> None:
    """Cron endpoints are open when no secret is configured, otherwise require Bearer <CRON_SECRET>"""
    if not settings.cron_secret:
        return None
    if request.headers.get("authorization") != f"Bearer {settings.cron_secret}":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return None
