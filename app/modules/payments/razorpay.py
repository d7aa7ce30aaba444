"""Minimal Razorpay REST client (orders, customers, plans, subscriptions) and signature checks."""
import hashlib
import hmac
from typing import Any, Dict, Optional

import requests
from fastapi import HTTPException

from app.config import settings
from app.modules.settings.pricing import plan_amounts_paise
import logging

logger = logging.getLogger(__name__)

RAZORPAY_API_BASE = "https://api.razorpay.com/v1"
REQUEST_TIMEOUT = 20


class RazorpayError(Exception):
    """Non-2xx response from the Razorpay API"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class RazorpayCredentials:
    def __init__(self, key_id: str, key_secret: str, currency: str, monthly_amount: int, yearly_amount: int):
        self.key_id = key_id
        self.key_secret = key_secret
        self.currency = currency
        self.monthly_amount = monthly_amount
        self.yearly_amount = yearly_amount


def resolve_credentials(settings_map: Optional[Dict[str, str]]) -> RazorpayCredentials:
    """settings table first, then environment; amounts normalised to paise"""
    settings_map = settings_map or {}
    key_id = settings_map.get("RAZORPAY_KEY_ID") or settings.razorpay_key_id or ""
    key_secret = settings_map.get("RAZORPAY_KEY_SECRET") or settings.razorpay_key_secret or ""
    currency = settings_map.get("RAZORPAY_CURRENCY") or settings.razorpay_currency or "INR"
    monthly, yearly = plan_amounts_paise(
        settings_map.get("RAZORPAY_MONTHLY_AMOUNT") or settings.razorpay_monthly_amount,
        settings_map.get("RAZORPAY_YEARLY_AMOUNT") or settings.razorpay_yearly_amount,
    )
    if not key_id or not key_secret:
        raise HTTPException(status_code=500, detail="Missing Razorpay credentials")
    return RazorpayCredentials(key_id, key_secret, currency, monthly, yearly)


def verify_payment_signature(order_id: str, payment_id: str, signature: str, key_secret: str) -> bool:
    """Checkout signature is HMAC-SHA256 of 'order_id|payment_id' keyed with the secret"""
    body = f"{order_id}|{payment_id}".encode()
    computed = hmac.new(key_secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(computed, signature or "")


def resolve_webhook_secret(settings_map: Optional[Dict[str, str]]) -> Optional[str]:
    return (settings_map or {}).get("RAZORPAY_WEBHOOK_SECRET") or settings.razorpay_webhook_secret


def verify_webhook_signature(body: bytes, signature: Optional[str], secret: Optional[str]) -> bool:
    """Webhook signature is HMAC-SHA256 of the raw request body keyed with the webhook secret"""
    if not secret or not signature:
        return False
    computed = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(computed, signature)


class RazorpayClient:
    def __init__(self, credentials: RazorpayCredentials, session: Optional[requests.Session] = None):
        self.credentials = credentials
        self.session = session or requests.Session()

    def request(self, path: str, method: str = "GET", body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        resp = self.session.request(
            method,
            f"{RAZORPAY_API_BASE}{path}",
            auth=(self.credentials.key_id, self.credentials.key_secret),
            json=body,
            timeout=REQUEST_TIMEOUT,
        )
        if not resp.ok:
            raise RazorpayError(resp.status_code, resp.text)
        return resp.json()

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("/orders", method="POST", body=payload)

    def fetch_order(self, order_id: str) -> Dict[str, Any]:
        return self.request(f"/orders/{order_id}")

    def create_customer(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("/customers", method="POST", body=payload)

    def create_plan(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("/plans", method="POST", body=payload)

    def create_subscription(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("/subscriptions", method="POST", body=payload)

    def cancel_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """Cancel immediately rather than at cycle end"""
        logger.info(f"Cancelling Razorpay subscription: {subscription_id}")
        return self.request(
            f"/subscriptions/{subscription_id}/cancel",
            method="POST",
            body={"cancel_at_cycle_end": 0},
        )
