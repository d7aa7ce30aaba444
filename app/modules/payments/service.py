from supabase import Client
from app.modules.payments.razorpay import RazorpayClient, RazorpayError, verify_payment_signature
from app.modules.payments.schemas import OrderCreate, PaymentVerify, SubscriptionCreate, VerifiedItem
from typing import Dict, Any, Optional, List
from fastapi import HTTPException
import logging
import re
import time

logger = logging.getLogger(__name__)

RECEIPT_MAX_LENGTH = 40
# billing cycles Razorpay runs before the subscription completes
SUBSCRIPTION_TOTAL_COUNT = {"monthly": 120, "yearly": 10}


def build_receipt(slug: str, timestamp_ms: Optional[int] = None) -> str:
    """rcpt_<slug[:20]>_<last 8 digits of ms timestamp>, at most 40 chars"""
    short_slug = re.sub(r"[^a-zA-Z0-9\-_.]", "", slug or "")[:20]
    ts = str(timestamp_ms if timestamp_ms is not None else int(time.time() * 1000))[-8:]
    return f"rcpt_{short_slug}_{ts}"[:RECEIPT_MAX_LENGTH]


def _display_name(user: Optional[Dict[str, Any]]) -> str:
    if not user:
        return ""
    metadata = user.get("user_metadata") or {}
    first = metadata.get("first_name")
    last = metadata.get("last_name")
    if first and last:
        return f"{first} {last}".strip()
    if first:
        return first
    return (user.get("email") or "").split("@")[0]


class PaymentService:
    def __init__(self, supabase: Client, razorpay: RazorpayClient):
        self.supabase = supabase
        self.razorpay = razorpay

    def create_order(self, body: OrderCreate, user: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Create a Razorpay order; product and billing details travel in the order notes"""
        if not body.amount or not body.product or not body.product.slug:
            raise HTTPException(status_code=400, detail="Missing amount or product")

        product = body.product
        billing = body.billing
        billing_name = (billing.name if billing else None) or _display_name(user)
        billing_email = (billing.email if billing else None) or (user or {}).get("email") or ""
        billing_mobile = (billing.mobile if billing else None) or ""

        payload = {
            "amount": int(round(float(body.amount))),  # paise
            "currency": self.razorpay.credentials.currency,
            "receipt": build_receipt(product.slug),
            "notes": {
                "slug": product.slug,
                "name": product.name or "",
                "price": "" if product.price is None else str(product.price),
                "img": product.img or "",
                "user_id": (user or {}).get("id") or "",
                "customer_email": billing_email,
                "customer_name": billing_name,
                "customer_mobile": billing_mobile,
                "billing_name": billing_name,
                "billing_email": billing_email,
                "billing_mobile": billing_mobile,
                "billing_company": (billing.company if billing else None) or "",
            },
        }
        try:
            return self.razorpay.create_order(payload)
        except RazorpayError as e:
            logger.error(f"Razorpay order creation failed: {e}")
            raise HTTPException(status_code=502, detail=str(e))

    def create_subscription(self, body: SubscriptionCreate, user: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Create a plan at the configured amount and an autopay subscription on it"""
        plan = body.plan
        if plan not in SUBSCRIPTION_TOTAL_COUNT:
            raise HTTPException(status_code=400, detail='Invalid plan. Must be "monthly" or "yearly"')

        credentials = self.razorpay.credentials
        billing = body.billing
        user_id = (user or {}).get("id")
        email = (billing.email if billing else None) or (user or {}).get("email")
        name = (billing.name if billing else None) or _display_name(user) or None

        customer_id = None
        if email or name:
            customer = {key: value for key, value in (("email", email), ("name", name)) if value}
            if user_id:
                customer["notes"] = {"user_id": user_id}
            try:
                customer_id = self.razorpay.create_customer(customer).get("id")
            except RazorpayError as e:
                logger.warning(f"Razorpay customer creation failed, continuing without customer: {e}")

        notes = {"user_id": user_id or "", "plan": plan}
        if email:
            notes["customer_email"] = email
        if name:
            notes["customer_name"] = name
        if billing:
            notes.update({
                "billing_name": billing.name or "",
                "billing_email": billing.email or "",
                "billing_mobile": billing.mobile or "",
                "billing_company": billing.company or "",
            })

        amount = credentials.yearly_amount if plan == "yearly" else credentials.monthly_amount
        try:
            razorpay_plan = self.razorpay.create_plan({
                "period": plan,
                "interval": 1,
                "item": {
                    "name": f"Celite {plan} Plan",
                    "amount": amount,
                    "currency": credentials.currency,
                },
            })
            payload = {
                "plan_id": razorpay_plan["id"],
                "total_count": SUBSCRIPTION_TOTAL_COUNT[plan],
                "customer_notify": 1,
                "notes": notes,
            }
            if customer_id:
                payload["customer_id"] = customer_id
            subscription = self.razorpay.create_subscription(payload)
        except RazorpayError as e:
            logger.error(f"Razorpay {plan} subscription creation failed: {e}")
            raise HTTPException(status_code=502, detail=str(e))

        logger.info(f"Created Razorpay {plan} subscription {subscription.get('id')} for user {user_id or 'anonymous'}")
        return dict(subscription, razorpay_key=credentials.key_id)

    def verify_payment(self, body: PaymentVerify, user: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Check the checkout signature, then record the order and its items"""
        if not body.razorpay_order_id or not body.razorpay_payment_id or not body.razorpay_signature:
            raise HTTPException(status_code=400, detail="Missing params")
        if not verify_payment_signature(
            body.razorpay_order_id,
            body.razorpay_payment_id,
            body.razorpay_signature,
            self.razorpay.credentials.key_secret,
        ):
            raise HTTPException(status_code=400, detail="Signature mismatch")

        try:
            order = self.razorpay.fetch_order(body.razorpay_order_id)
        except RazorpayError as e:
            logger.error(f"Razorpay order lookup failed for {body.razorpay_order_id}: {e}")
            raise HTTPException(status_code=502, detail=str(e))
        notes = order.get("notes") or {}

        user_id = notes.get("user_id") or (user or {}).get("id")
        if not user_id:
            raise HTTPException(status_code=401, detail="Unable to identify user")

        cart_items = body.cartItems or []
        if cart_items:
            total = sum((item.price or 0) * (item.quantity or 1) for item in cart_items)
        else:
            total = float(notes.get("price") or 0)

        billing = body.billing
        try:
            result = self.supabase.table("orders").insert({
                "user_id": user_id,
                "total": total,
                "status": "paid",
                "billing_name": (billing.name if billing else None) or notes.get("billing_name") or notes.get("customer_name") or None,
                "billing_email": (billing.email if billing else None) or notes.get("billing_email") or notes.get("customer_email") or None,
                "billing_mobile": (billing.mobile if billing else None) or notes.get("billing_mobile") or notes.get("customer_mobile") or None,
                "billing_company": (billing.company if billing else None) or notes.get("billing_company") or None,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to record order")
            order_id = result.data[0]["id"]

            items: List[VerifiedItem] = []
            if cart_items:
                rows = [{
                    "order_id": order_id,
                    "slug": item.slug,
                    "name": item.name,
                    "price": item.price or 0,
                    "quantity": 1,
                    "img": item.img or "",
                } for item in cart_items]
                self.supabase.table("order_items").insert(rows).execute()
                items = [VerifiedItem(item_id=item.slug, item_name=item.name, price=item.price or 0) for item in cart_items]
            elif notes.get("slug") and notes.get("name"):
                self.supabase.table("order_items").insert({
                    "order_id": order_id,
                    "slug": notes["slug"],
                    "name": notes["name"],
                    "price": total,
                    "quantity": 1,
                    "img": notes.get("img") or "",
                }).execute()
                items = [VerifiedItem(item_id=notes["slug"], item_name=notes["name"], price=total)]

            logger.info(f"Recorded paid order {order_id} for user {user_id} ({len(items)} item(s))")
            return {"order_id": str(order_id), "total": total, "items": items}
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error recording order {body.razorpay_order_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
