"""
Pytest configuration and fixtures
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
os.environ.setdefault("RATE_LIMIT", "10000/minute")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("CRON_SECRET", "cron-secret")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "rzp_test_secret")
os.environ.setdefault("RAZORPAY_WEBHOOK_SECRET", "whsec_test")

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.database.supabase_client import get_supabase
from app.modules.auth.service import clear_auth_cache
from app.modules.payments.razorpay import RazorpayCredentials
from app.modules.payments.routes import get_razorpay_client
from tests.fakes import FakeSupabase

ADMIN_ID = "00000000-0000-0000-0000-00000000a001"
USER_ID = "00000000-0000-0000-0000-00000000b001"
ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"


class FakeRazorpay:
    """Records calls instead of talking to api.razorpay.com"""

    def __init__(self, currency="INR"):
        self.credentials = RazorpayCredentials("rzp_test_key", "rzp_test_secret", currency, 79900, 549900)
        self.orders = {}
        self.cancelled = []
        self.customers = []
        self.plans = []
        self.subscriptions = []

    def create_order(self, payload):
        order = dict(payload, id=f"order_{len(self.orders) + 1}", status="created")
        self.orders[order["id"]] = order
        return order

    def fetch_order(self, order_id):
        return self.orders.get(order_id, {"id": order_id, "notes": {}})

    def cancel_subscription(self, subscription_id):
        self.cancelled.append(subscription_id)
        return {"id": subscription_id, "status": "cancelled"}

    def create_customer(self, payload):
        customer = dict(payload, id=f"cust_{len(self.customers) + 1}")
        self.customers.append(customer)
        return customer

    def create_plan(self, payload):
        plan = dict(payload, id=f"plan_{len(self.plans) + 1}")
        self.plans.append(plan)
        return plan

    def create_subscription(self, payload):
        subscription = dict(payload, id=f"sub_{len(self.subscriptions) + 1}", status="created")
        self.subscriptions.append(subscription)
        return subscription


@pytest.fixture
def supabase() -> FakeSupabase:
    fake = FakeSupabase()
    fake.auth.add_user(ADMIN_ID, "admin@example.com", token=ADMIN_TOKEN, first_name="Ada", last_name="Admin")
    fake.auth.add_user(USER_ID, "user@example.com", token=USER_TOKEN, first_name="Uma", last_name="User")
    fake.seed("admins", {"id": "adm-1", "user_id": ADMIN_ID})
    return fake


@pytest.fixture
def razorpay() -> FakeRazorpay:
    return FakeRazorpay()


@pytest.fixture
def client(supabase, razorpay) -> Generator[TestClient, None, None]:
    """Test client wired to the in-memory Supabase fake"""
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_razorpay_client] = lambda: razorpay
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    clear_auth_cache()


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def user_headers() -> dict:
    return {"Authorization": f"Bearer {USER_TOKEN}"}
