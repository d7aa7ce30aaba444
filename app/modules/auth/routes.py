from fastapi import APIRouter, Depends
from app.modules.auth.schemas import MeResponse, CurrentUser
from app.modules.auth.service import AuthService
from app.core.dependencies import get_current_user, get_auth_service
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=MeResponse)
async def me(
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Current user plus whether the admin panel should be offered"""
    return MeResponse(
        user=CurrentUser(**current_user),
        is_admin=service.is_admin(current_user["id"]),
    )
