"""Small helpers shared by the service modules: slugs and Supabase timestamps."""
import math
import re
from datetime import datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser

SECONDS_PER_DAY = 24 * 60 * 60


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def slugify(value: str) -> str:
    """'Fast Whoosh  Sound!' -> 'fast-whoosh-sound'"""
    slug = (value or "").lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse a Postgres/ISO timestamp; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = date_parser.isoparse(str(value))
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_until(value: Union[str, datetime, None], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days (rounded up) from now until value; negative once passed. None when value is empty."""
    target = parse_timestamp(value)
    if target is None:
        return None
    now = now or utcnow()
    return math.ceil((target - now).total_seconds() / SECONDS_PER_DAY)


def clean_optional(value) -> Optional[str]:
    """Trim a free-text field; blank becomes None"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
