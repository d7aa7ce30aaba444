"""
Tests for Razorpay autopay: subscription checkout and the webhook lifecycle
"""

import hashlib
import hmac
import json
from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from app.config import settings
from app.main import app
from app.modules.payments.razorpay import RazorpayError, verify_webhook_signature
from app.modules.payments.schemas import OrderCreate, SubscriptionCreate
from app.modules.payments.service import PaymentService
from app.modules.subscriptions.routes import get_subscription_service
from app.modules.subscriptions.service import SubscriptionService
from tests.conftest import FakeRazorpay, USER_ID
from tests.fakes import FakeSupabase, iso_in

CYCLE_END = 1893456000  # 2030-01-01T00:00:00Z
CYCLE_END_ISO = datetime.fromtimestamp(CYCLE_END, tz=timezone.utc).isoformat()


def _webhook(client, event, payload, secret="whsec_test", signature=None):
    body = json.dumps({"event": event, "payload": payload}).encode()
    if signature is None:
        signature = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    headers = {"Content-Type": "application/json", "x-razorpay-signature": signature}
    return client.post("/api/razorpay/webhook", content=body, headers=headers)


class TestSubscriptionCheckout:
    def test_monthly_for_signed_in_user(self, client, razorpay, user_headers):
        response = client.post("/api/payments/razorpay/subscription", json={"plan": "monthly"}, headers=user_headers)
        assert response.status_code == 200
        subscription = response.json()["subscription"]
        assert subscription["id"] == "sub_1"
        assert subscription["razorpay_key"] == "rzp_test_key"

        assert razorpay.customers[0]["email"] == "user@example.com"
        assert razorpay.customers[0]["notes"] == {"user_id": USER_ID}
        plan = razorpay.plans[0]
        assert plan["period"] == "monthly"
        assert plan["interval"] == 1
        assert plan["item"] == {"name": "Celite monthly Plan", "amount": 79900, "currency": "INR"}

        created = razorpay.subscriptions[0]
        assert created["plan_id"] == "plan_1"
        assert created["total_count"] == 120
        assert created["customer_notify"] == 1
        assert created["customer_id"] == "cust_1"
        assert created["notes"]["user_id"] == USER_ID
        assert created["notes"]["customer_name"] == "Uma User"

    def test_yearly_with_billing_details(self, client, razorpay):
        response = client.post("/api/payments/razorpay/subscription", json={
            "plan": "yearly",
            "billing": {"name": "Guest Buyer", "email": "guest@example.com", "mobile": "9000000000"},
        })
        assert response.status_code == 200
        assert razorpay.plans[0]["item"]["amount"] == 549900
        created = razorpay.subscriptions[0]
        assert created["total_count"] == 10
        assert created["notes"]["billing_mobile"] == "9000000000"
        assert created["notes"]["user_id"] == ""

    def test_invalid_plan(self, client, razorpay):
        response = client.post("/api/payments/razorpay/subscription", json={"plan": "weekly"})
        assert response.status_code == 400
        assert response.json()["error"] == 'Invalid plan. Must be "monthly" or "yearly"'
        assert razorpay.plans == []

    def test_currency_comes_from_credentials(self):
        razorpay = FakeRazorpay(currency="USD")
        service = PaymentService(FakeSupabase(), razorpay)
        service.create_subscription(SubscriptionCreate(plan="monthly"), None)
        assert razorpay.plans[0]["item"]["currency"] == "USD"

        order = service.create_order(OrderCreate(amount=1000, product={"slug": "a"}), None)
        assert order["currency"] == "USD"

    def test_customer_failure_is_not_fatal(self):
        class NoCustomers(FakeRazorpay):
            def create_customer(self, payload):
                raise RazorpayError(400, "customer exists")

        razorpay = NoCustomers()
        subscription = PaymentService(FakeSupabase(), razorpay).create_subscription(
            SubscriptionCreate(plan="monthly", billing={"email": "guest@example.com"}), None
        )
        assert subscription["id"] == "sub_1"
        assert "customer_id" not in razorpay.subscriptions[0]

    def test_gateway_error_is_502(self):
        class NoPlans(FakeRazorpay):
            def create_plan(self, payload):
                raise RazorpayError(401, "Authentication failed")

        with pytest.raises(HTTPException) as exc:
            PaymentService(FakeSupabase(), NoPlans()).create_subscription(SubscriptionCreate(plan="yearly"), None)
        assert exc.value.status_code == 502


class TestWebhookSignature:
    def test_verify_webhook_signature(self):
        body = b'{"event":"invoice.paid"}'
        signature = hmac.new(b"whsec_test", body, hashlib.sha256).hexdigest()
        assert verify_webhook_signature(body, signature, "whsec_test")
        assert not verify_webhook_signature(body + b" ", signature, "whsec_test")
        assert not verify_webhook_signature(body, signature, None)
        assert not verify_webhook_signature(body, None, "whsec_test")

    def test_missing_signature(self, client):
        response = client.post("/api/razorpay/webhook", json={"event": "subscription.activated"})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing signature or secret"

    def test_missing_secret(self, client, monkeypatch):
        monkeypatch.setattr(settings, "razorpay_webhook_secret", None)
        response = _webhook(client, "subscription.activated", {})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing signature or secret"

    def test_invalid_signature(self, client, supabase):
        response = _webhook(client, "subscription.activated", {}, signature="0" * 64)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid signature"
        assert supabase.rows("subscriptions") == []

    def test_settings_table_secret_wins(self, client, supabase):
        supabase.seed("settings", {"key": "RAZORPAY_WEBHOOK_SECRET", "value": "whsec_table"})
        assert _webhook(client, "order.paid", {}).status_code == 400
        response = _webhook(client, "order.paid", {}, secret="whsec_table")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_unreadable_settings_fall_back_to_environment(self, client, supabase):
        supabase.fail("settings", "select", Exception("connection reset"))
        assert _webhook(client, "order.paid", {}).status_code == 200


class TestWebhookEvents:
    @pytest.fixture
    def sent(self, supabase):
        emails = []
        app.dependency_overrides[get_subscription_service] = lambda: SubscriptionService(
            supabase, email_sender=lambda to, subject, html: emails.append((to, subject)) or True
        )
        return emails

    def test_activated_creates_subscription(self, client, supabase, sent):
        response = _webhook(client, "subscription.activated", {
            "subscription": {"entity": {
                "id": "sub_1", "plan_id": "plan_abc", "current_end": CYCLE_END,
                "notes": {"user_id": USER_ID, "plan": "yearly"},
            }},
        })
        assert response.status_code == 200
        assert response.json()["message"] == "Subscription activated"
        row = supabase.rows("subscriptions")[0]
        assert row["user_id"] == USER_ID
        assert row["is_active"] is True
        assert row["autopay_enabled"] is True
        assert row["plan"] == "yearly"
        assert row["razorpay_subscription_id"] == "sub_1"
        assert row["valid_until"] == CYCLE_END_ISO
        assert sent == []

    def test_activated_without_cycle_end_uses_plan_length(self, client, supabase, sent):
        _webhook(client, "subscription.activated", {
            "subscription": {"entity": {"id": "sub_2", "notes": {"user_id": USER_ID}}},
        })
        row = supabase.rows("subscriptions")[0]
        assert row["plan"] == "monthly"
        status = client.get("/api/subscription/status", headers={"Authorization": "Bearer user-token"}).json()
        assert status["status"] == "active"
        assert 28 <= status["days_remaining"] <= 31

    def test_invoice_paid_renews_linked_subscription(self, client, supabase, sent):
        supabase.seed("subscriptions", {
            "user_id": USER_ID, "is_active": True, "plan": "monthly", "valid_until": iso_in(1),
            "autopay_enabled": True, "razorpay_subscription_id": "sub_1",
        })
        response = _webhook(client, "invoice.paid", {
            "invoice": {"entity": {"subscription_id": "sub_1", "period_end": CYCLE_END, "amount_paid": 79900}},
        })
        assert response.json()["message"] == "Subscription renewed"
        row = supabase.rows("subscriptions")[0]
        assert row["valid_until"] == CYCLE_END_ISO
        assert row["plan"] == "monthly"
        assert len(supabase.rows("subscriptions")) == 1
        assert sent == [("user@example.com", "Payment Received - Celite Subscription")]

    def test_payment_does_not_reactivate_cancelled_subscription(self, client, supabase, sent):
        supabase.seed("subscriptions", {
            "user_id": USER_ID, "is_active": False, "plan": "monthly", "valid_until": iso_in(-2),
            "razorpay_subscription_id": "sub_1",
        })
        response = _webhook(client, "invoice.paid", {
            "invoice": {"entity": {"subscription_id": "sub_1", "period_end": CYCLE_END}},
        })
        assert response.json()["message"] == "Subscription is cancelled, not reactivating"
        assert supabase.rows("subscriptions")[0]["is_active"] is False
        assert sent == []

    def test_payment_without_identifiers(self, client, supabase, sent):
        response = _webhook(client, "invoice.paid", {"invoice": {"entity": {"id": "inv_1"}}})
        assert response.json()["message"] == "No matching subscription found for payment event"
        assert supabase.rows("subscriptions") == []

    def test_cancelled_mandate_keeps_access(self, client, supabase, sent):
        supabase.seed("subscriptions", {
            "user_id": USER_ID, "is_active": True, "plan": "yearly", "valid_until": iso_in(100),
            "autopay_enabled": True, "razorpay_subscription_id": "sub_1",
        })
        response = _webhook(client, "subscription.cancelled", {
            "subscription": {"entity": {"id": "sub_1", "notes": []}},
        })
        assert response.json()["message"] == "Autopay disabled; subscription remains active"
        row = supabase.rows("subscriptions")[0]
        assert row["autopay_enabled"] is False
        assert row["is_active"] is True

    def test_failed_invoice_deactivates(self, client, supabase, sent):
        supabase.seed("subscriptions", {
            "user_id": USER_ID, "is_active": True, "plan": "yearly", "valid_until": iso_in(3),
            "autopay_enabled": True, "razorpay_subscription_id": "sub_1",
        })
        response = _webhook(client, "invoice.payment_failed", {
            "invoice": {"entity": {"subscription_id": "sub_1"}},
        })
        assert response.status_code == 200
        row = supabase.rows("subscriptions")[0]
        assert row["is_active"] is False
        assert row["autopay_enabled"] is False
        assert row["plan"] == "yearly"
        status = client.get("/api/subscription/status", headers={"Authorization": "Bearer user-token"}).json()
        assert status["status"] == "expired"

    def test_failed_one_time_payment_is_ignored(self, client, supabase, sent):
        supabase.seed("subscriptions", {"user_id": USER_ID, "is_active": True, "plan": "monthly",
                                        "valid_until": iso_in(10)})
        response = _webhook(client, "payment.failed", {
            "payment": {"entity": {"id": "pay_1", "order_id": "order_1", "notes": {"user_id": USER_ID}}},
        })
        assert response.json()["message"] == "Not a subscription payment"
        assert supabase.rows("subscriptions")[0]["is_active"] is True

    def test_unhandled_event(self, client, supabase, sent):
        response = _webhook(client, "payment.captured", {"payment": {"entity": {"id": "pay_1"}}})
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert supabase.rows("subscriptions") == []

    def test_invalid_json(self, client):
        body = b"not json"
        signature = hmac.new(b"whsec_test", body, hashlib.sha256).hexdigest()
        response = client.post("/api/razorpay/webhook", content=body, headers={"x-razorpay-signature": signature})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid payload"
