from pydantic import BaseModel, Field
from typing import Optional


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class PasswordUpdate(BaseModel):
    new_password: Optional[str] = Field(default=None, alias="newPassword")

    class Config:
        populate_by_name = True
