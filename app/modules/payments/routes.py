from fastapi import APIRouter, Depends, HTTPException, Request
from app.database.supabase_client import get_supabase
from app.modules.payments.schemas import (
    OrderCreate, OrderCreateResponse, PaymentVerify, PaymentVerifyResponse,
    SubscriptionCreate, SubscriptionCreateResponse, WebhookResponse
)
from app.modules.payments.service import PaymentService
from app.modules.payments.razorpay import (
    RazorpayClient, resolve_credentials, resolve_webhook_secret, verify_webhook_signature
)
from app.modules.settings.service import SettingsService
from app.modules.subscriptions.routes import get_subscription_service
from app.modules.subscriptions.service import SubscriptionService
from app.core.dependencies import get_optional_user
from supabase import Client
from typing import Dict, Optional
import json
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments/razorpay", tags=["payments"])
webhook_router = APIRouter(prefix="/razorpay", tags=["payments"])


def get_razorpay_client(supabase: Client = Depends(get_supabase)) -> RazorpayClient:
    return RazorpayClient(resolve_credentials(SettingsService(supabase).get_settings()))


def get_payment_service(
    supabase: Client = Depends(get_supabase),
    razorpay: RazorpayClient = Depends(get_razorpay_client),
) -> PaymentService:
    return PaymentService(supabase, razorpay)


def get_webhook_secret(supabase: Client = Depends(get_supabase)) -> Optional[str]:
    """settings table first; the environment value when the table cannot be read"""
    try:
        settings_map = SettingsService(supabase).get_settings()
    except HTTPException as e:
        logger.warning(f"Could not read webhook secret from settings, using environment: {e.detail}")
        settings_map = {}
    return resolve_webhook_secret(settings_map)


@router.post("/order", response_model=OrderCreateResponse)
async def create_order(
    body: OrderCreate,
    user: Optional[Dict] = Depends(get_optional_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Create a Razorpay order for checkout"""
    order = service.create_order(body, user)
    return OrderCreateResponse(key=service.razorpay.credentials.key_id, order=order)


@router.post("/verify", response_model=PaymentVerifyResponse)
async def verify_payment(
    body: PaymentVerify,
    user: Optional[Dict] = Depends(get_optional_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Verify the checkout signature and record the paid order"""
    return PaymentVerifyResponse(**service.verify_payment(body, user))


@router.post("/subscription", response_model=SubscriptionCreateResponse)
async def create_subscription(
    body: SubscriptionCreate,
    user: Optional[Dict] = Depends(get_optional_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Create a monthly or yearly autopay subscription for checkout"""
    return SubscriptionCreateResponse(subscription=service.create_subscription(body, user))


@webhook_router.post("/webhook", response_model=WebhookResponse, response_model_exclude_none=True)
async def razorpay_webhook(
    request: Request,
    secret: Optional[str] = Depends(get_webhook_secret),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Subscription lifecycle events from Razorpay, signed over the raw body"""
    body = await request.body()
    signature = request.headers.get("x-razorpay-signature")
    if not signature or not secret:
        raise HTTPException(status_code=400, detail="Missing signature or secret")
    if not verify_webhook_signature(body, signature, secret):
        logger.warning("Rejected Razorpay webhook with invalid signature")
        raise HTTPException(status_code=400, detail="Invalid signature")

    try:
        event = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    if not isinstance(event, dict):
        raise HTTPException(status_code=400, detail="Invalid payload")

    logger.info(f"Razorpay webhook: {event.get('event')}")
    return WebhookResponse(**service.handle_razorpay_event(event.get("event"), event.get("payload") or {}))
