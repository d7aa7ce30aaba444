from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.settings.schemas import SettingsUpdate, SettingsResponse, MaintenanceResponse, PublicConfigResponse
from app.modules.settings.service import SettingsService
from app.core.dependencies import require_admin
from app.config import settings
from supabase import Client
from typing import Dict

router = APIRouter(tags=["settings"])


def get_settings_service(supabase: Client = Depends(get_supabase)) -> SettingsService:
    return SettingsService(supabase)


@router.get("/admin/settings", response_model=SettingsResponse)
async def get_settings(
    user_data: Dict = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
):
    """All settings as a key/value map"""
    return SettingsResponse(settings=service.get_settings())


@router.post("/admin/settings")
async def update_settings(
    body: SettingsUpdate,
    user_data: Dict = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
):
    """Upsert settings by key"""
    if body.settings is None:
        raise HTTPException(status_code=400, detail="Missing settings")
    service.update_settings(body.settings)
    return {"ok": True}


@router.get("/maintenance", response_model=MaintenanceResponse)
async def maintenance(service: SettingsService = Depends(get_settings_service)):
    """Public maintenance flag polled by the storefront layout"""
    return MaintenanceResponse(maintenance=service.is_maintenance_mode())


@router.get("/public-config", response_model=PublicConfigResponse)
async def public_config():
    """Client-side values the storefront needs at runtime"""
    return PublicConfigResponse(ga_measurement_id=settings.ga_measurement_id)
