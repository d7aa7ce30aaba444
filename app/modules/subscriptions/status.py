"""Subscription status derived from the (is_active, valid_until) pair.

    no row                                  -> free
    is_active false                         -> expired
    is_active true, valid_until in the past -> paused
    is_active true, no/future valid_until   -> active
"""
from datetime import datetime
from typing import Any, Dict, Optional

from app.core.utils import days_until, parse_timestamp, utcnow

ACTIVE = "active"
PAUSED = "paused"
EXPIRED = "expired"
FREE = "free"


def derive_status(subscription: Optional[Dict[str, Any]], now: Optional[datetime] = None) -> str:
    if not subscription:
        return FREE
    if not subscription.get("is_active"):
        return EXPIRED
    valid_until = parse_timestamp(subscription.get("valid_until"))
    if valid_until is None:
        return ACTIVE
    now = now or utcnow()
    return ACTIVE if valid_until > now else PAUSED


def is_actually_active(subscription: Optional[Dict[str, Any]], now: Optional[datetime] = None) -> bool:
    return derive_status(subscription, now) == ACTIVE


def days_remaining(subscription: Optional[Dict[str, Any]], now: Optional[datetime] = None) -> Optional[int]:
    """Days left in the paid window, never negative; None without a valid_until"""
    if not subscription:
        return None
    days = days_until(subscription.get("valid_until"), now)
    if days is None:
        return None
    return max(days, 0)


def normalize_plan(plan: Optional[str]) -> Optional[str]:
    """Legacy weekly plans count as monthly"""
    if plan == "weekly":
        return "monthly"
    return plan
