from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class AdminUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminUserListResponse(BaseModel):
    ok: bool = True
    users: List[AdminUserResponse]


class AdminUserDelete(BaseModel):
    id: Optional[str] = None
