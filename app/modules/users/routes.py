from fastapi import APIRouter, Depends, HTTPException, status
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import AdminUserListResponse, AdminUserDelete
from app.modules.users.service import UserService
from app.core.dependencies import require_admin
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/admin/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("", response_model=AdminUserListResponse)
async def list_users(
    user_data: Dict = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """List all registered users"""
    return AdminUserListResponse(users=service.list_users())


@router.post("/delete")
async def delete_user(
    body: AdminUserDelete,
    user_data: Dict = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Delete a user from Supabase Auth"""
    if not body.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing user id")
    service.delete_user(body.id)
    return {"ok": True}
