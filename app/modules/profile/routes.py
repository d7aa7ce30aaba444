from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.profile.schemas import ProfileUpdate, PasswordUpdate
from app.modules.profile.service import ProfileService
from app.core.dependencies import get_current_user
from app.modules.auth.service import clear_auth_cache
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.post("/update")
async def update_profile(
    body: ProfileUpdate,
    current_user: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Update the caller's first and last name"""
    metadata = service.update_names(current_user, body.first_name, body.last_name)
    clear_auth_cache()
    return {"ok": True, "user_metadata": metadata}


@router.post("/password")
async def update_password(
    body: PasswordUpdate,
    current_user: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Change the caller's password"""
    service.update_password(current_user["id"], body.new_password)
    return {"ok": True}
