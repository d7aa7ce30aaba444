from pydantic import BaseModel
from typing import Dict, Optional


class SettingsUpdate(BaseModel):
    settings: Optional[Dict[str, Optional[str]]] = None


class SettingsResponse(BaseModel):
    ok: bool = True
    settings: Dict[str, Optional[str]]


class MaintenanceResponse(BaseModel):
    ok: bool = True
    maintenance: bool


class PublicConfigResponse(BaseModel):
    ok: bool = True
    ga_measurement_id: Optional[str] = None
