"""Limited-time offer window for a template row."""
import math
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from app.core.utils import SECONDS_PER_DAY, parse_timestamp, utcnow


def limited_offer_window(template: Dict[str, Any], now: Optional[datetime] = None) -> Tuple[bool, Optional[int]]:
    """(active, days_remaining). The offer runs for limited_offer_duration_days from its start date."""
    if not template.get("is_limited_offer"):
        return False, None
    start = parse_timestamp(template.get("limited_offer_start_date"))
    try:
        duration = int(template.get("limited_offer_duration_days") or 0)
    except (TypeError, ValueError):
        duration = 0
    if start is None or duration <= 0:
        return False, None
    now = now or utcnow()
    end = start + timedelta(days=duration)
    if end <= now:
        return False, 0
    return True, max(0, math.ceil((end - now).total_seconds() / SECONDS_PER_DAY))


def with_offer(template: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    active, days = limited_offer_window(template, now)
    row = dict(template)
    row["has_active_limited_offer"] = active
    row["days_remaining"] = days if active else None
    return row
