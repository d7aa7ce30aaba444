"""
Tests for subscriptions, downloads and Razorpay checkout
"""

import hashlib
import hmac

import pytest
from fastapi import HTTPException

from app.modules.payments.razorpay import RazorpayError, verify_payment_signature
from app.modules.payments.service import build_receipt
from app.modules.subscriptions.service import SubscriptionService
from tests.conftest import FakeRazorpay, USER_ID
from tests.fakes import FakeSupabase, iso_in


def _sign(order_id, payment_id, secret="rzp_test_secret"):
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


class TestSubscriptionEndpoints:
    def test_free_without_row(self, client, user_headers):
        data = client.get("/api/subscription/status", headers=user_headers).json()
        assert data["status"] == "free"
        assert data["subscription"] is None

    def test_paused_when_window_has_passed(self, client, supabase, user_headers):
        supabase.seed("subscriptions", {"user_id": USER_ID, "is_active": True, "plan": "monthly", "valid_until": iso_in(-1)})
        data = client.get("/api/subscription/status", headers=user_headers).json()
        assert data["status"] == "paused"
        assert data["days_remaining"] == 0

    def test_activate_defaults_to_monthly(self, client, supabase, user_headers):
        response = client.post("/api/subscription/activate", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["plan"] == "monthly"
        row = supabase.rows("subscriptions")[0]
        assert row["is_active"] is True
        assert client.get("/api/subscription/status", headers=user_headers).json()["days_remaining"] == 30

    def test_activate_yearly_then_cancel(self, client, supabase, user_headers):
        client.post("/api/subscription/activate", json={"plan": "yearly"}, headers=user_headers)
        assert len(supabase.rows("subscriptions")) == 1
        assert client.post("/api/subscription/cancel", headers=user_headers).json() == {"ok": True}
        assert client.get("/api/subscription/status", headers=user_headers).json()["status"] == "expired"

    def test_renew_without_subscription(self, client, user_headers):
        response = client.post("/api/subscription/renew", headers=user_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "No existing subscription found to renew"

    def test_renew_weekly_plan_as_monthly(self, client, supabase, user_headers):
        supabase.seed("subscriptions", {"user_id": USER_ID, "is_active": False, "plan": "weekly", "valid_until": iso_in(-3)})
        response = client.post("/api/subscription/renew", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["plan"] == "monthly"
        assert response.json()["message"] == "Subscription renewed successfully"
        assert supabase.rows("subscriptions")[0]["is_active"] is True

    def test_check_expiry_requires_cron_secret(self, client):
        response = client.post("/api/subscription/check-expiry")
        assert response.status_code == 401

    def test_check_expiry_without_smtp_counts_failures(self, client, supabase):
        supabase.seed("subscriptions", {"user_id": USER_ID, "is_active": True, "plan": "monthly",
                                        "valid_until": iso_in(2.5), "expiry_email_sent": None})
        response = client.post("/api/subscription/check-expiry", headers={"Authorization": "Bearer cron-secret"})
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["failCount"] == 1
        assert supabase.rows("subscriptions")[0]["expiry_email_sent"] is None


class TestSubscriptionService:
    def test_reminders_only_inside_window_and_once(self, supabase):
        sent = []
        supabase.seed(
            "subscriptions",
            {"user_id": USER_ID, "is_active": True, "plan": "weekly", "valid_until": iso_in(2.5), "expiry_email_sent": None},
            {"user_id": "u-late", "is_active": True, "plan": "monthly", "valid_until": iso_in(10), "expiry_email_sent": None},
            {"user_id": "u-done", "is_active": True, "plan": "monthly", "valid_until": iso_in(2.5), "expiry_email_sent": iso_in(-1)},
        )
        service = SubscriptionService(supabase, email_sender=lambda to, subject, html: sent.append((to, subject)) or True)

        result = service.send_expiry_reminders()
        assert result["count"] == 1
        assert result["successCount"] == 1
        assert sent == [("user@example.com", "Your Celite Subscription is Ending Soon")]
        assert supabase.rows("subscriptions")[0]["expiry_email_sent"] is not None

        assert service.send_expiry_reminders()["count"] == 0

    def test_renew_cancels_linked_razorpay_subscription(self, supabase):
        razorpay = FakeRazorpay()
        supabase.seed("subscriptions", {"user_id": USER_ID, "is_active": True, "plan": "yearly",
                                        "valid_until": iso_in(1), "razorpay_subscription_id": "sub_123"})
        result = SubscriptionService(supabase, razorpay_factory=lambda: razorpay).renew(USER_ID)
        assert result["plan"] == "yearly"
        assert razorpay.cancelled == ["sub_123"]
        assert supabase.rows("subscriptions")[0]["razorpay_subscription_id"] is None

    def test_renew_survives_gateway_failure(self, supabase):
        class BrokenRazorpay(FakeRazorpay):
            def cancel_subscription(self, subscription_id):
                raise RazorpayError(400, "already cancelled")

        supabase.seed("subscriptions", {"user_id": USER_ID, "is_active": True, "plan": "monthly",
                                        "valid_until": iso_in(1), "razorpay_subscription_id": "sub_9"})
        result = SubscriptionService(supabase, razorpay_factory=BrokenRazorpay).renew(USER_ID)
        assert result["plan"] == "monthly"


class TestDownloads:
    def test_subscriber_download_requires_active_subscription(self, client, supabase, user_headers):
        supabase.seed("subscriptions", {"user_id": USER_ID, "is_active": True, "valid_until": iso_in(-1)})
        response = client.post("/api/download", json={"fileName": "video/intro.zip"}, headers=user_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "Access denied"

    def test_missing_file_name(self, client, user_headers):
        response = client.post("/api/download", json={}, headers=user_headers)
        assert response.status_code == 400

    def test_subscriber_download_is_recorded(self, client, supabase, user_headers):
        sub = supabase.seed("subscriptions", {"user_id": USER_ID, "is_active": True, "plan": "monthly",
                                              "valid_until": iso_in(5)})[0]
        supabase.seed("templates", {"slug": "intro", "name": "Intro", "price": 499, "source_path": "video/intro.zip"})
        response = client.post("/api/download", json={"fileName": "video/intro.zip"}, headers=user_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["url"].startswith("https://storage.test/templatesource/video/intro.zip")
        assert data["expires_in"] == 3600
        event = supabase.rows("downloads")[0]
        assert event["template_slug"] == "intro"
        assert event["subscription_id"] == sub["id"]

    def test_free_download(self, client, supabase, user_headers):
        supabase.seed("templates",
                      {"slug": "freebie", "name": "Freebie", "price": 0, "source_path": "free/freebie.zip"},
                      {"slug": "paid", "name": "Paid", "price": 99})
        ok = client.post("/api/download/free", json={"template_slug": "freebie"}, headers=user_headers)
        assert ok.status_code == 200
        assert supabase.rows("free_downloads")[0]["template_slug"] == "freebie"

        denied = client.post("/api/download/free", json={"template_slug": "paid"}, headers=user_headers)
        assert denied.status_code == 403
        missing = client.post("/api/download/free", json={"template_slug": "nope"}, headers=user_headers)
        assert missing.status_code == 404

    def test_download_requires_login(self, client):
        assert client.post("/api/download/free", json={"template_slug": "x"}).status_code == 401


class TestRazorpay:
    def test_receipt(self):
        assert build_receipt("my template!", 1700000123456) == "rcpt_mytemplate_00123456"
        assert len(build_receipt("x" * 60, 1)) <= 40

    def test_signature(self):
        assert verify_payment_signature("order_1", "pay_1", _sign("order_1", "pay_1"), "rzp_test_secret")
        assert not verify_payment_signature("order_1", "pay_1", _sign("order_1", "pay_2"), "rzp_test_secret")
        assert not verify_payment_signature("order_1", "pay_1", None, "rzp_test_secret")

    def test_create_order_needs_amount_and_product(self, client):
        response = client.post("/api/payments/razorpay/order", json={"amount": 100})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing amount or product"

    def test_create_order(self, client, razorpay, user_headers):
        response = client.post(
            "/api/payments/razorpay/order",
            json={"amount": 49900, "product": {"slug": "intro", "name": "Intro", "price": 499}},
            headers=user_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["key"] == "rzp_test_key"
        notes = data["order"]["notes"]
        assert notes["user_id"] == USER_ID
        assert notes["customer_name"] == "Uma User"
        assert data["order"]["amount"] == 49900

    def test_verify_rejects_bad_signature(self, client):
        response = client.post("/api/payments/razorpay/verify", json={
            "razorpay_order_id": "order_1", "razorpay_payment_id": "pay_1", "razorpay_signature": "bad",
        })
        assert response.status_code == 400
        assert response.json()["error"] == "Signature mismatch"

    def test_verify_missing_params(self, client):
        response = client.post("/api/payments/razorpay/verify", json={"razorpay_order_id": "order_1"})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing params"

    def test_verify_records_order_from_notes(self, client, supabase, razorpay, user_headers):
        order = client.post(
            "/api/payments/razorpay/order",
            json={"amount": 49900, "product": {"slug": "intro", "name": "Intro", "price": 499}},
            headers=user_headers,
        ).json()["order"]
        response = client.post("/api/payments/razorpay/verify", json={
            "razorpay_order_id": order["id"],
            "razorpay_payment_id": "pay_1",
            "razorpay_signature": _sign(order["id"], "pay_1"),
        })
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 499
        assert data["items"][0]["item_id"] == "intro"
        recorded = supabase.rows("orders")[0]
        assert (recorded["user_id"], recorded["status"]) == (USER_ID, "paid")
        assert supabase.rows("order_items")[0]["order_id"] == recorded["id"]

    def test_verify_with_cart_items(self, client, supabase, user_headers):
        response = client.post("/api/payments/razorpay/verify", json={
            "razorpay_order_id": "order_x",
            "razorpay_payment_id": "pay_x",
            "razorpay_signature": _sign("order_x", "pay_x"),
            "cartItems": [{"slug": "a", "name": "A", "price": 100}, {"slug": "b", "name": "B", "price": 50}],
        }, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 150
        assert len(supabase.rows("order_items")) == 2

    def test_verify_anonymous_without_user_in_notes(self, client):
        response = client.post("/api/payments/razorpay/verify", json={
            "razorpay_order_id": "order_y",
            "razorpay_payment_id": "pay_y",
            "razorpay_signature": _sign("order_y", "pay_y"),
        })
        assert response.status_code == 401


def test_create_order_gateway_error_is_502():
    from app.modules.payments.schemas import OrderCreate
    from app.modules.payments.service import PaymentService

    class FailingRazorpay(FakeRazorpay):
        def create_order(self, payload):
            raise RazorpayError(401, "Authentication failed")

    service = PaymentService(FakeSupabase(), FailingRazorpay())
    with pytest.raises(HTTPException) as exc:
        service.create_order(OrderCreate(amount=100, product={"slug": "a"}), None)
    assert exc.value.status_code == 502
