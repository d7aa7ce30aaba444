from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SubscriptionResponse(BaseModel):
    user_id: str
    plan: Optional[str] = None
    is_active: bool = False
    valid_until: Optional[datetime] = None
    autopay_enabled: Optional[bool] = None
    razorpay_subscription_id: Optional[str] = None
    expiry_email_sent: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubscriptionStatusResponse(BaseModel):
    ok: bool = True
    status: str
    days_remaining: Optional[int] = None
    subscription: Optional[SubscriptionResponse] = None


class SubscriptionActivate(BaseModel):
    plan: Optional[str] = None


class SubscriptionWindowResponse(BaseModel):
    ok: bool = True
    plan: str
    valid_until: datetime
    message: Optional[str] = None


class ExpiryCheckResponse(BaseModel):
    ok: bool = True
    message: str
    count: int = 0
    successCount: int = 0
    failCount: int = 0
