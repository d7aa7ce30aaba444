"""Subscription plan prices as stored in the settings table.

Amounts may be entered either in rupees or in paise. Monthly values of 10000
and above and yearly values of 100000 and above are paise.
"""
from typing import Dict, Optional, Tuple

DEFAULT_MONTHLY_PAISE = 79900
DEFAULT_YEARLY_PAISE = 549900
MONTHLY_PAISE_THRESHOLD = 10000
YEARLY_PAISE_THRESHOLD = 100000


def _to_number(value, default: int) -> float:
    if value is None or value == "":
        return float(default)
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(default)


def plan_prices(settings_map: Optional[Dict[str, str]]) -> Tuple[float, float]:
    """Return (monthly, yearly) prices in rupees."""
    settings_map = settings_map or {}
    monthly = _to_number(settings_map.get("RAZORPAY_MONTHLY_AMOUNT"), DEFAULT_MONTHLY_PAISE)
    yearly = _to_number(settings_map.get("RAZORPAY_YEARLY_AMOUNT"), DEFAULT_YEARLY_PAISE)
    if monthly >= MONTHLY_PAISE_THRESHOLD:
        monthly = monthly / 100
    if yearly >= YEARLY_PAISE_THRESHOLD:
        yearly = yearly / 100
    return monthly, yearly


def plan_amounts_paise(monthly, yearly) -> Tuple[int, int]:
    """Razorpay wants paise; rupee entries below the thresholds are scaled up."""
    monthly = _to_number(monthly, DEFAULT_MONTHLY_PAISE)
    yearly = _to_number(yearly, DEFAULT_YEARLY_PAISE)
    if monthly < MONTHLY_PAISE_THRESHOLD:
        monthly = monthly * 100
    if yearly < YEARLY_PAISE_THRESHOLD:
        yearly = yearly * 100
    return int(round(monthly)), int(round(yearly))
