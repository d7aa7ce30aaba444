from pydantic import BaseModel
from typing import Optional, Dict, Any


class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}
    app_metadata: Dict[str, Any] = {}
    created_at: Optional[Any] = None


class MeResponse(BaseModel):
    ok: bool = True
    user: CurrentUser
    is_admin: bool
