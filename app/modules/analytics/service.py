from supabase import Client
from app.modules.analytics import aggregation
from app.modules.settings.service import SettingsService
from app.modules.subscriptions.status import is_actually_active
from app.core.utils import days_until, utcnow
from typing import Dict, Any, List, Optional, Set
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

RECENT_ORDERS_LIMIT = 200
SUBSCRIPTION_COLUMNS = "id,user_id,is_active,plan,valid_until,created_at,updated_at,razorpay_subscription_id,autopay_enabled"
PLAN_FILTERS = ("monthly", "yearly")


class AnalyticsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.settings_service = SettingsService(supabase)

    def _recent_orders(self) -> Dict[str, List[Dict[str, Any]]]:
        """Latest orders and their items; an absent orders table reads as empty"""
        try:
            orders = self.supabase.table("orders")\
                .select("id,user_id,created_at,total,status")\
                .order("created_at", desc=True)\
                .limit(RECENT_ORDERS_LIMIT)\
                .execute().data or []
        except Exception as e:
            logger.warning(f"Orders not available, skipping order data: {e}")
            return {"orders": [], "items": []}
        items = []
        order_ids = [o["id"] for o in orders]
        if order_ids:
            try:
                items = self.supabase.table("order_items")\
                    .select("order_id,name,quantity,price")\
                    .in_("order_id", order_ids)\
                    .execute().data or []
            except Exception as e:
                logger.warning(f"Order items not available: {e}")
        return {"orders": orders, "items": items}

    def _download_table(self, table: str, columns: str) -> List[Dict[str, Any]]:
        try:
            return self.supabase.table(table)\
                .select(columns)\
                .order("downloaded_at", desc=True)\
                .limit(aggregation.MAX_DOWNLOAD_ROWS)\
                .execute().data or []
        except Exception as e:
            logger.warning(f"{table} not available: {e}")
            return []

    def _recent_downloads(self) -> List[Dict[str, Any]]:
        paid = self._download_table("downloads", "id,user_id,template_slug,subscription_id,downloaded_at")
        free = self._download_table("free_downloads", "id,user_id,template_slug,downloaded_at")
        return aggregation.merge_downloads(paid, free)

    def _user_emails(self, user_ids: Set[str]) -> Dict[str, str]:
        if not user_ids:
            return {}
        try:
            users = self.supabase.auth.admin.list_users(page=1, per_page=1000) or []
        except Exception as e:
            logger.warning(f"Could not fetch user emails: {e}")
            return {}
        return {str(u.id): u.email for u in users if str(u.id) in user_ids and getattr(u, "email", None)}

    def _template_names(self, slugs: List[str]) -> Dict[str, Optional[str]]:
        if not slugs:
            return {}
        try:
            rows = self.supabase.table("templates")\
                .select("slug,name")\
                .in_("slug", slugs)\
                .execute().data or []
        except Exception as e:
            logger.warning(f"Could not fetch template names for downloads: {e}")
            return {}
        return {row["slug"]: row.get("name") for row in rows}

    def _subscription_page_query(self, query, plan: Optional[str], status: Optional[str], autopay: Optional[str]):
        if plan in PLAN_FILTERS:
            query = query.eq("plan", plan)
        if status == "active":
            query = query.eq("is_active", True)
        elif status in ("expired", "cancelled"):
            query = query.eq("is_active", False)
        if autopay == "true":
            query = query.eq("autopay_enabled", True)
        elif autopay == "false":
            query = query.eq("autopay_enabled", False)
        return query

    def get_analytics(
        self,
        plan: Optional[str] = None,
        status: Optional[str] = None,
        autopay: Optional[str] = None,
        limit: int = 1000,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """Admin analytics panel payload"""
        now = utcnow()
        recent = self._recent_orders()

        try:
            page = self._subscription_page_query(
                self.supabase.table("subscriptions").select(SUBSCRIPTION_COLUMNS),
                plan, status, autopay,
            ).order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute().data or []
            count_result = self._subscription_page_query(
                self.supabase.table("subscriptions").select("*", count="exact", head=True),
                plan, status, autopay,
            ).execute()
            total_count = count_result.count or 0
            all_subs = self.supabase.table("subscriptions")\
                .select("id,user_id,is_active,plan,valid_until,autopay_enabled")\
                .order("created_at", desc=True)\
                .execute().data or []
        except Exception as e:
            logger.error(f"Analytics subscription query failed: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        summary = aggregation.summarize_subscriptions(all_subs, now)
        monthly_price, yearly_price = self.settings_service.get_plan_prices()
        revenue = aggregation.subscription_revenue(
            summary["activeMonthly"], summary["activeYearly"], monthly_price, yearly_price
        )

        downloads = self._recent_downloads()
        user_ids = {s["user_id"] for s in page} | {d["user_id"] for d in downloads if d.get("user_id")}
        emails = self._user_emails(user_ids)
        names = self._template_names(sorted({d["template_slug"] for d in downloads if d.get("template_slug")}))
        subs_by_id = {s["id"]: s for s in all_subs if s.get("id")}

        subscriptions = [dict(
            s,
            user_email=emails.get(s["user_id"]),
            is_actually_active=is_actually_active(s, now),
            days_remaining=days_until(s.get("valid_until"), now),
        ) for s in page]

        enriched_downloads = []
        for d in downloads:
            sub = subs_by_id.get(d.get("subscription_id")) if d.get("subscription_id") else None
            enriched_downloads.append({
                "id": d.get("id"),
                "user_id": d.get("user_id"),
                "user_email": emails.get(d.get("user_id")),
                "template_slug": d.get("template_slug"),
                "template_name": names.get(d.get("template_slug")),
                "subscription_id": d.get("subscription_id"),
                "subscription_plan": "FREE" if d["is_free"] else (sub or {}).get("plan"),
                "downloaded_at": d.get("downloaded_at"),
                "is_free": d["is_free"],
            })

        top = aggregation.top_templates(downloads, now)
        for row in top:
            row["template_name"] = names.get(row["template_slug"])

        orders = recent["orders"]
        totals = {
            "orderRevenue": sum(float(o.get("total") or 0) for o in orders),
            "orders": len(orders),
        }
        totals.update(summary)
        totals.update(revenue)
        totals.update(aggregation.download_totals(downloads))

        return {
            "totals": totals,
            "orders": orders,
            "order_items": recent["items"],
            "subscriptions": subscriptions,
            "downloads": enriched_downloads,
            "top_templates": top,
            "pagination": {
                "total": total_count,
                "limit": limit,
                "offset": offset,
                "has_more": offset + limit < total_count,
            },
        }

    def get_stats(self) -> Dict[str, Any]:
        """Overview panel: catalogue size, order revenue and subscription revenue split"""
        try:
            templates = self.supabase.table("templates")\
                .select("*", count="exact", head=True)\
                .execute()
            orders = self.supabase.table("orders").select("total").execute().data or []
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        total_subscription_revenue = 0.0
        try:
            monthly_price, yearly_price = self.settings_service.get_plan_prices()
            active = self.supabase.table("subscriptions")\
                .select("plan, is_active, valid_until")\
                .eq("is_active", True)\
                .execute().data or []
            summary = aggregation.summarize_subscriptions(active)
            total_subscription_revenue = aggregation.subscription_revenue(
                summary["activeMonthly"], summary["activeYearly"], monthly_price, yearly_price
            )["totalSubscriptionRevenue"]
        except Exception as e:
            logger.warning(f"Could not calculate subscription revenue distribution: {e}")

        stats = {
            "templates": templates.count or 0,
            "orders": len(orders),
            "revenue": sum(float(o.get("total") or 0) for o in orders),
            "totalSubscriptionRevenue": total_subscription_revenue,
        }
        stats.update(aggregation.revenue_split(total_subscription_revenue))
        return stats
