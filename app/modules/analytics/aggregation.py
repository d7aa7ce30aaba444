"""Reporting over already-fetched rows: subscription counts, revenue, downloads.

All functions are pure; callers pass ``now`` so results are reproducible.
"""
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from app.core.utils import parse_timestamp, utcnow
from app.modules.subscriptions.status import derive_status, ACTIVE, PAUSED, EXPIRED

VENDOR_SHARE = 0.4
PLATFORM_SHARE = 0.6
MAX_DOWNLOAD_ROWS = 500
USER_PERIOD_DAYS = 30
REVENUE_PER_USER_PERIOD = 40
DEFAULT_TOP_WINDOW_DAYS = 30
DEFAULT_TOP_LIMIT = 10


def summarize_subscriptions(subscriptions: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> Dict[str, int]:
    """Counts by derived status; plan and autopay counts are over active subscriptions only"""
    now = now or utcnow()
    summary = {
        "totalSubscriptions": 0,
        "activeSubscribers": 0,
        "activeMonthly": 0,
        "activeYearly": 0,
        "pausedSubscribers": 0,
        "expiredSubscribers": 0,
        "autopayEnabled": 0,
        "autopayDisabled": 0,
    }
    for sub in subscriptions:
        summary["totalSubscriptions"] += 1
        status = derive_status(sub, now)
        if status == PAUSED:
            summary["pausedSubscribers"] += 1
        elif status == EXPIRED:
            summary["expiredSubscribers"] += 1
        elif status == ACTIVE:
            summary["activeSubscribers"] += 1
            # legacy weekly plans are billed as monthly
            if sub.get("plan") in ("monthly", "weekly"):
                summary["activeMonthly"] += 1
            elif sub.get("plan") == "yearly":
                summary["activeYearly"] += 1
            if sub.get("autopay_enabled") is True:
                summary["autopayEnabled"] += 1
            elif sub.get("autopay_enabled") is False:
                summary["autopayDisabled"] += 1
    return summary


def revenue_split(total: float) -> Dict[str, float]:
    """40% vendor pool, 60% platform, rounded to 2 decimals"""
    return {
        "vendorPoolAmount": round(total * VENDOR_SHARE, 2),
        "celiteAmount": round(total * PLATFORM_SHARE, 2),
    }


def subscription_revenue(active_monthly: int, active_yearly: int, monthly_price: float, yearly_price: float) -> Dict[str, float]:
    """MRR and full-period revenue of the active subscriber base"""
    mrr = active_monthly * monthly_price + active_yearly * (yearly_price / 12)
    total = active_monthly * monthly_price + active_yearly * yearly_price
    result = {
        "subscriptionRevenue": round(mrr, 2),
        "totalSubscriptionRevenue": round(total, 2),
        "monthlyPrice": monthly_price,
        "yearlyPrice": yearly_price,
    }
    result.update(revenue_split(total))
    return result


def _sort_key(row: Dict[str, Any]) -> datetime:
    return parse_timestamp(row.get("downloaded_at")) or datetime.min.replace(tzinfo=timezone.utc)


def merge_downloads(paid: Iterable[Dict[str, Any]], free: Iterable[Dict[str, Any]],
                    limit: int = MAX_DOWNLOAD_ROWS) -> List[Dict[str, Any]]:
    """Paid and free download events in one list, newest first, capped at limit"""
    rows = [dict(d, is_free=False) for d in paid]
    rows.extend(dict(d, subscription_id=None, is_free=True) for d in free)
    rows.sort(key=_sort_key, reverse=True)
    return rows[:limit]


def download_totals(downloads: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        "totalDownloads": len(downloads),
        "uniqueDownloadUsers": len({d.get("user_id") for d in downloads}),
        "uniqueDownloadedTemplates": len({d.get("template_slug") for d in downloads}),
    }


def top_templates(downloads: Iterable[Dict[str, Any]], now: Optional[datetime] = None,
                  window_days: int = DEFAULT_TOP_WINDOW_DAYS, limit: int = DEFAULT_TOP_LIMIT) -> List[Dict[str, Any]]:
    """Most downloaded template slugs within the last window_days.

    The window boundary is inclusive: an event exactly window_days old counts.
    Ties are broken by slug so the ordering is stable.
    """
    now = now or utcnow()
    cutoff = now - timedelta(days=window_days)
    counts = Counter()
    for d in downloads:
        at = parse_timestamp(d.get("downloaded_at"))
        slug = d.get("template_slug")
        if at is None or not slug:
            continue
        if cutoff <= at <= now:
            counts[slug] += 1
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [{"template_slug": slug, "downloads": count} for slug, count in ranked[:limit]]


def count_unique_user_periods(downloads: Iterable[Dict[str, Any]], period_days: int = USER_PERIOD_DAYS) -> int:
    """Per user, a download opens a new period when it is more than period_days after the last counted one"""
    by_user: Dict[str, List[datetime]] = {}
    for d in downloads:
        at = parse_timestamp(d.get("downloaded_at"))
        if not d.get("user_id") or at is None:
            continue
        by_user.setdefault(d["user_id"], []).append(at)

    period = timedelta(days=period_days)
    periods = 0
    for dates in by_user.values():
        dates.sort()
        last_counted = None
        for at in dates:
            if last_counted is None or at - last_counted > period:
                periods += 1
                last_counted = at
    return periods


def creator_revenue_estimate(unique_user_periods: int) -> int:
    return unique_user_periods * REVENUE_PER_USER_PERIOD


def download_counts(downloads: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    return dict(Counter(d.get("template_slug") for d in downloads if d.get("template_slug")))
