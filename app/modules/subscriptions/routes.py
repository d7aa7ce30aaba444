from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.subscriptions.schemas import (
    SubscriptionStatusResponse, SubscriptionActivate,
    SubscriptionWindowResponse, ExpiryCheckResponse
)
from app.modules.subscriptions.service import SubscriptionService
from app.modules.payments.razorpay import RazorpayClient, resolve_credentials
from app.modules.settings.service import SettingsService
from app.core.dependencies import get_current_user, verify_cron_secret
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/subscription", tags=["subscriptions"])


def get_subscription_service(supabase: Client = Depends(get_supabase)) -> SubscriptionService:
    def razorpay_factory() -> RazorpayClient:
        return RazorpayClient(resolve_credentials(SettingsService(supabase).get_settings()))
    return SubscriptionService(supabase, razorpay_factory=razorpay_factory)


@router.get("/status", response_model=SubscriptionStatusResponse)
async def subscription_status(
    current_user: Dict = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Caller's subscription and its derived status"""
    return SubscriptionStatusResponse(**service.get_status(current_user["id"]))


@router.post("/activate", response_model=SubscriptionWindowResponse)
async def activate_subscription(
    body: Optional[SubscriptionActivate] = None,
    current_user: Dict = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Activate a monthly (default) or yearly subscription"""
    plan = body.plan if body else None
    return SubscriptionWindowResponse(**service.activate(current_user["id"], plan))


@router.post("/cancel")
async def cancel_subscription(
    current_user: Dict = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Turn off the caller's subscription"""
    service.cancel(current_user["id"])
    return {"ok": True}


@router.post("/renew", response_model=SubscriptionWindowResponse)
async def renew_subscription(
    current_user: Dict = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Renew on the existing plan"""
    result = service.renew(current_user["id"])
    return SubscriptionWindowResponse(message="Subscription renewed successfully", **result)


@router.post("/check-expiry", response_model=ExpiryCheckResponse, dependencies=[Depends(verify_cron_secret)])
async def check_expiry(service: SubscriptionService = Depends(get_subscription_service)):
    """Cron: email users whose subscription expires in about 3 days"""
    return ExpiryCheckResponse(**service.send_expiry_reminders())
