from supabase import Client
from app.modules.subscriptions.status import derive_status, days_remaining, normalize_plan
from app.modules.subscriptions.schemas import SubscriptionResponse
from app.modules.payments.razorpay import RazorpayClient, RazorpayError
from app.modules.settings.service import SettingsService
from app.core.email import send_email, subscription_expiring_email, subscription_payment_email
from app.core.utils import utcnow
from typing import Dict, Any, Optional, Callable, Tuple
from datetime import datetime, timedelta, timezone
from dateutil.relativedelta import relativedelta
from fastapi import HTTPException
import requests
import logging

logger = logging.getLogger(__name__)

PLAN_DAYS = {"monthly": 30, "yearly": 365}
REMINDER_WINDOW_START_DAYS = 2
REMINDER_WINDOW_END_DAYS = 3

PAYMENT_EVENTS = ("subscription.activated", "invoice.paid", "invoice.payment_succeeded")
MANDATE_CANCELLED_EVENT = "subscription.cancelled"
PAYMENT_FAILED_EVENTS = ("payment.failed", "invoice.payment_failed")


def _entity(payload: Optional[Dict[str, Any]], name: str) -> Dict[str, Any]:
    return ((payload or {}).get(name) or {}).get("entity") or {}


def _notes(entity: Dict[str, Any]) -> Dict[str, Any]:
    # Razorpay sends an empty list when an entity has no notes
    notes = entity.get("notes")
    return notes if isinstance(notes, dict) else {}


class SubscriptionService:
    def __init__(
        self,
        supabase: Client,
        razorpay_factory: Optional[Callable[[], RazorpayClient]] = None,
        email_sender: Callable[[str, str, str], bool] = send_email,
    ):
        self.supabase = supabase
        self.razorpay_factory = razorpay_factory
        self.email_sender = email_sender

    def get_subscription(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("subscriptions")\
                .select("*")\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                return None
            return result.data
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_status(self, user_id: str) -> Dict[str, Any]:
        """Caller's subscription with derived status and days left"""
        subscription = self.get_subscription(user_id)
        return {
            "status": derive_status(subscription),
            "days_remaining": days_remaining(subscription),
            "subscription": SubscriptionResponse(**subscription) if subscription else None,
        }

    def activate(self, user_id: str, plan: Optional[str] = None) -> Dict[str, Any]:
        """Start (or restart) a paid window; anything but 'yearly' is monthly"""
        plan = plan if plan in PLAN_DAYS else "monthly"
        valid_until = utcnow() + timedelta(days=PLAN_DAYS[plan])
        try:
            self.supabase.table("subscriptions").upsert({
                "user_id": user_id,
                "is_active": True,
                "plan": plan,
                "valid_until": valid_until.isoformat(),
            }, on_conflict="user_id").execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"Activated {plan} subscription for {user_id} until {valid_until.isoformat()}")
        return {"plan": plan, "valid_until": valid_until}

    def cancel(self, user_id: str) -> None:
        try:
            self.supabase.table("subscriptions")\
                .update({"is_active": False})\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))
        logger.info(f"Cancelled subscription for {user_id}")

    def renew(self, user_id: str) -> Dict[str, Any]:
        """Renew on the existing plan; a linked Razorpay subscription is cancelled first"""
        existing = self.get_subscription(user_id)
        if not existing or not existing.get("plan"):
            raise HTTPException(status_code=400, detail="No existing subscription found to renew")

        razorpay_subscription_id = existing.get("razorpay_subscription_id")
        if razorpay_subscription_id:
            self._cancel_razorpay_subscription(razorpay_subscription_id)

        plan = normalize_plan(existing["plan"])
        if plan not in PLAN_DAYS:
            plan = "monthly"
        valid_until = utcnow() + timedelta(days=PLAN_DAYS[plan])
        try:
            self.supabase.table("subscriptions")\
                .update({
                    "user_id": user_id,
                    "is_active": True,
                    "plan": plan,
                    "valid_until": valid_until.isoformat(),
                    "razorpay_subscription_id": None,
                })\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"Renewed {plan} subscription for {user_id} until {valid_until.isoformat()}")
        return {"plan": plan, "valid_until": valid_until}

    def _cancel_razorpay_subscription(self, subscription_id: str) -> None:
        """Renewal proceeds even when the gateway cancel fails"""
        if self.razorpay_factory is None:
            logger.warning(f"No Razorpay client available to cancel {subscription_id}")
            return None
        try:
            self.razorpay_factory().cancel_subscription(subscription_id)
            logger.info(f"Old Razorpay subscription {subscription_id} cancelled")
        except (RazorpayError, HTTPException, requests.RequestException) as e:
            logger.error(f"Error cancelling old Razorpay subscription {subscription_id}: {e}")

    def _find_by_razorpay_id(self, razorpay_subscription_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("subscriptions")\
                .select("*")\
                .eq("razorpay_subscription_id", razorpay_subscription_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                return None
            return result.data
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def resolve_razorpay_identifiers(self, payload: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
        """(user_id, razorpay_subscription_id) from entity notes, falling back to the linked row"""
        subscription = _entity(payload, "subscription")
        invoice = _entity(payload, "invoice")
        payment = _entity(payload, "payment")

        user_id = _notes(subscription).get("user_id") \
            or _notes(invoice).get("user_id") \
            or _notes(payment).get("user_id") \
            or None
        razorpay_subscription_id = subscription.get("id") \
            or invoice.get("subscription_id") \
            or payment.get("subscription_id") \
            or None

        if not user_id and razorpay_subscription_id:
            linked = self._find_by_razorpay_id(razorpay_subscription_id)
            if linked:
                user_id = linked.get("user_id")
        return user_id, razorpay_subscription_id

    def handle_razorpay_event(self, event: Optional[str], payload: Dict[str, Any]) -> Dict[str, str]:
        """Apply a verified Razorpay webhook event to the subscriptions table"""
        if event in PAYMENT_EVENTS:
            return self.apply_subscription_payment(event, payload)
        if event == MANDATE_CANCELLED_EVENT:
            return self.disable_autopay(payload)
        if event in PAYMENT_FAILED_EVENTS:
            return self.apply_payment_failure(event, payload)
        logger.info(f"Ignoring Razorpay webhook event {event}")
        return {"status": "ok"}

    def apply_subscription_payment(self, event: str, payload: Dict[str, Any]) -> Dict[str, str]:
        """Extend the window for a charged cycle; a cancelled row is never reactivated"""
        user_id, razorpay_subscription_id = self.resolve_razorpay_identifiers(payload)
        if not user_id and not razorpay_subscription_id:
            logger.warning(f"{event}: no user_id or subscription id in payload")
            return {"status": "ok", "message": "No matching subscription found for payment event"}

        existing = self.get_subscription(user_id) if user_id else None
        if not existing and razorpay_subscription_id:
            existing = self._find_by_razorpay_id(razorpay_subscription_id)
            if existing:
                user_id = existing.get("user_id")
        if not user_id:
            logger.warning(f"{event}: subscription {razorpay_subscription_id} is not linked to a user")
            return {"status": "ok", "message": "No matching subscription found for payment event"}

        if existing and not existing.get("is_active"):
            logger.info(f"{event}: subscription for {user_id} is cancelled, not reactivating")
            return {"status": "ok", "message": "Subscription is cancelled, not reactivating"}

        subscription = _entity(payload, "subscription")
        invoice = _entity(payload, "invoice")
        plan = normalize_plan(existing.get("plan")) if existing and existing.get("plan") else None
        if plan not in PLAN_DAYS:
            plan = self._plan_from_entities(subscription, invoice)

        cycle_end = subscription.get("current_end") or invoice.get("period_end")
        if cycle_end:
            valid_until = datetime.fromtimestamp(int(cycle_end), tz=timezone.utc)
        else:
            valid_until = utcnow() + (relativedelta(years=1) if plan == "yearly" else relativedelta(months=1))

        values = {
            "is_active": True,
            "plan": plan,
            "valid_until": valid_until.isoformat(),
            "razorpay_subscription_id": razorpay_subscription_id or (existing or {}).get("razorpay_subscription_id"),
            "autopay_enabled": True,
            "updated_at": utcnow().isoformat(),
        }
        try:
            if existing:
                self.supabase.table("subscriptions")\
                    .update(values)\
                    .eq("user_id", user_id)\
                    .eq("is_active", True)\
                    .execute()
            else:
                self.supabase.table("subscriptions").insert(dict(values, user_id=user_id)).execute()
        except Exception as e:
            logger.error(f"{event}: failed to update subscription for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        logger.info(f"{event}: {plan} subscription for {user_id} valid until {valid_until.isoformat()}")
        if existing and event == "invoice.paid":
            self._send_payment_email(user_id, plan, invoice, valid_until)
            return {"status": "ok", "message": "Subscription renewed"}
        return {"status": "ok", "message": "Subscription activated"}

    def disable_autopay(self, payload: Dict[str, Any]) -> Dict[str, str]:
        """Mandate cancelled: the paid window keeps running without autopay"""
        user_id, razorpay_subscription_id = self.resolve_razorpay_identifiers(payload)
        if not user_id and not razorpay_subscription_id:
            return {"status": "ok", "message": "No matching subscription found for cancellation"}
        try:
            query = self.supabase.table("subscriptions")\
                .update({"autopay_enabled": False, "updated_at": utcnow().isoformat()})
            if user_id:
                query = query.eq("user_id", user_id)
            else:
                query = query.eq("razorpay_subscription_id", razorpay_subscription_id)
            query.execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"Autopay disabled for {user_id or razorpay_subscription_id}")
        return {"status": "ok", "message": "Autopay disabled; subscription remains active"}

    def apply_payment_failure(self, event: str, payload: Dict[str, Any]) -> Dict[str, str]:
        """A failed subscription charge ends access and autopay; one-time payment failures are ignored"""
        subscription = _entity(payload, "subscription")
        invoice = _entity(payload, "invoice")
        payment = _entity(payload, "payment")
        if not (subscription.get("id") or invoice.get("subscription_id") or payment.get("invoice_id")
                or event == "invoice.payment_failed"):
            return {"status": "ok", "message": "Not a subscription payment"}

        user_id, razorpay_subscription_id = self.resolve_razorpay_identifiers(payload)
        if not user_id:
            logger.warning(f"{event}: no subscription found for {razorpay_subscription_id}")
            return {"status": "ok", "message": "No matching subscription found for payment failure"}

        existing = self.get_subscription(user_id)
        values = {"is_active": False, "autopay_enabled": False, "updated_at": utcnow().isoformat()}
        if not existing or not existing.get("plan"):
            values["plan"] = self._plan_from_entities(subscription, invoice)
        try:
            self.supabase.table("subscriptions")\
                .update(values)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"{event}: subscription for {user_id} deactivated after failed payment")
        return {"status": "ok", "message": "Subscription deactivated after payment failure"}

    @staticmethod
    def _plan_from_entities(subscription: Dict[str, Any], invoice: Dict[str, Any]) -> str:
        plan = _notes(subscription).get("plan") or _notes(invoice).get("plan")
        if plan in PLAN_DAYS:
            return plan
        plan_id = subscription.get("plan_id") or invoice.get("plan_id") or ""
        return "yearly" if "yearly" in plan_id.lower() else "monthly"

    def _send_payment_email(self, user_id: str, plan: str, invoice: Dict[str, Any], next_billing: datetime) -> None:
        """Receipt for an autopay renewal; a failure is logged only"""
        try:
            response = self.supabase.auth.admin.get_user_by_id(user_id)
            user = getattr(response, "user", None)
            email = getattr(user, "email", None) if user else None
            if not email:
                logger.warning(f"No email for user {user_id}, skipping payment receipt")
                return None
            if invoice.get("amount_paid"):
                amount = invoice["amount_paid"] / 100
            else:
                monthly, yearly = SettingsService(self.supabase).get_plan_prices()
                amount = yearly if plan == "yearly" else monthly
            metadata = getattr(user, "user_metadata", None) or {}
            subject, html = subscription_payment_email(
                metadata.get("first_name") or email.split("@")[0],
                plan,
                amount,
                next_billing.isoformat(),
            )
            self.email_sender(email, subject, html)
        except Exception as e:
            logger.error(f"Failed to send payment receipt to user {user_id}: {e}")

    def get_expiring_subscriptions(self):
        """Active subscriptions ending 2-3 days from now that have not been reminded yet"""
        now = utcnow()
        window_start = (now + timedelta(days=REMINDER_WINDOW_START_DAYS)).isoformat()
        window_end = (now + timedelta(days=REMINDER_WINDOW_END_DAYS)).isoformat()
        try:
            result = self.supabase.table("subscriptions")\
                .select("user_id, plan, valid_until, expiry_email_sent")\
                .eq("is_active", True)\
                .gte("valid_until", window_start)\
                .lte("valid_until", window_end)\
                .is_("expiry_email_sent", "null")\
                .execute()
            return result.data or []
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def send_expiry_reminders(self) -> Dict[str, Any]:
        """Email each expiring subscriber once and stamp expiry_email_sent"""
        expiring = self.get_expiring_subscriptions()
        if not expiring:
            return {"message": "No subscriptions expiring in 3 days", "count": 0}

        success_count = 0
        fail_count = 0
        for subscription in expiring:
            user_id = subscription["user_id"]
            try:
                response = self.supabase.auth.admin.get_user_by_id(user_id)
                user = getattr(response, "user", None)
                email = getattr(user, "email", None) if user else None
                if not email or not subscription.get("valid_until"):
                    logger.error(f"User data not found for user {user_id}")
                    fail_count += 1
                    continue

                subject, html = subscription_expiring_email(
                    email.split("@")[0],
                    normalize_plan(subscription.get("plan")) or "monthly",
                    subscription["valid_until"],
                )
                if not self.email_sender(email, subject, html):
                    fail_count += 1
                    continue

                self.supabase.table("subscriptions")\
                    .update({"expiry_email_sent": utcnow().isoformat()})\
                    .eq("user_id", user_id)\
                    .execute()
                success_count += 1
            except Exception as e:
                logger.error(f"Failed to send expiry email to user {user_id}: {e}")
                fail_count += 1

        logger.info(f"Expiry reminders: {success_count} sent, {fail_count} failed")
        return {
            "message": f"Processed {len(expiring)} expiring subscriptions",
            "count": len(expiring),
            "successCount": success_count,
            "failCount": fail_count,
        }
