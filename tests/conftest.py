import os

# przed importem storefront: baza w pamieci, bez sekretow z .env
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STRIPE_SECRET_KEY"] = ""
os.environ["STRIPE_WEBHOOK_SECRET"] = ""

import hashlib
import hmac
import time
from datetime import datetime, timezone

import pytest
import stripe
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api.deps import (
    get_auth_client,
    get_cart_storage_factory,
    get_gateway,
    get_notifier,
)
from storefront.data.database import Base, get_db
from storefront.data.models import OrderModel, ProductModel, UserRoleModel
from storefront.services.payment_gateway import StripeGateway

WEBHOOK_SECRET = "whsec_test"

USER_ID = "11111111-1111-1111-1111-111111111111"
ADMIN_ID = "22222222-2222-2222-2222-222222222222"

PRO_ID = "c3b9b190-2c40-4585-9df4-3951a73da274"
MINI_ID = "9b88372b-d53e-47e6-8a4f-c00c7551873c"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ---------------------------------------------------------------- fakes

class FakeGateway(StripeGateway):
    """Prawdziwa weryfikacja podpisu, reszta Stripe w pamieci."""

    def __init__(self, webhook_secret: str = WEBHOOK_SECRET):
        super().__init__(api_key="", webhook_secret=webhook_secret)
        self.sessions = {}
        self.line_items = {}
        self.retrieve_calls = []
        self.created_sessions = []
        self.customers = {}
        self.created_customers = []
        self.updated_customers = []
        self.fail_create = False

    def retrieve_session(self, session_id):
        self.retrieve_calls.append(session_id)
        if session_id not in self.sessions:
            raise stripe.APIConnectionError(f"No such checkout session: {session_id}")
        return self.sessions[session_id]

    def list_line_items(self, session_id):
        return self.line_items.get(session_id, [])

    def create_checkout_session(self, **params):
        if self.fail_create:
            raise stripe.APIConnectionError("stripe is down")
        self.created_sessions.append(params)
        session_id = f"cs_test_{len(self.created_sessions)}"
        return {"id": session_id, "url": f"https://checkout.stripe.test/{session_id}"}

    def find_customer(self, email):
        return self.customers.get(email)

    def create_customer(self, **params):
        self.created_customers.append(params)
        return {"id": f"cus_{len(self.created_customers)}"}

    def update_customer(self, customer_id, **params):
        self.updated_customers.append((customer_id, params))
        return {"id": customer_id}


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.confirmations = []
        self.statuses = []
        self.contacts = []

    def send_order_confirmation(self, order):
        if self.fail:
            raise ConnectionError("broker unreachable")
        self.confirmations.append(order.id)

    def send_order_status(self, customer_email, customer_name, order_id, status, items, tracking_number=None):
        if self.fail:
            raise ConnectionError("broker unreachable")
        self.statuses.append(
            {"email": customer_email, "order_id": order_id, "status": status, "tracking_number": tracking_number}
        )

    def send_contact_emails(self, admin_email, name, email, message):
        if self.fail:
            raise ConnectionError("broker unreachable")
        self.contacts.append({"admin_email": admin_email, "name": name, "email": email})


class FakeAuthClient:
    def __init__(self):
        self.tokens = {
            "user-token": {"id": USER_ID, "email": "jane@example.com"},
            "admin-token": {"id": ADMIN_ID, "email": "admin@example.com"},
        }
        self.users = [
            {"id": USER_ID, "email": "jane@example.com", "email_confirmed_at": "2026-01-01T00:00:00Z"},
            {"id": ADMIN_ID, "email": "admin@example.com", "email_confirmed_at": None},
        ]
        self.banned = []
        self.deleted = []
        self.resent = []

    def get_user(self, token):
        return self.tokens.get(token)

    def list_users(self, per_page=1000):
        return self.users

    def ban_user(self, user_id):
        self.banned.append(user_id)

    def delete_user(self, user_id):
        self.deleted.append(user_id)

    def resend_verification(self, email):
        self.resent.append(email)


class MemoryCartStorage:
    def __init__(self, carts: dict, cart_key: str):
        self.carts = carts
        self.cart_key = cart_key

    def load(self):
        return list(self.carts.get(self.cart_key, []))

    def save(self, lines):
        if lines:
            self.carts[self.cart_key] = list(lines)
        else:
            self.carts.pop(self.cart_key, None)


# ---------------------------------------------------------------- helpers

def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode()
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def paid_session(session_id: str = "cs_test_paid", **overrides) -> dict:
    session = {
        "id": session_id,
        "object": "checkout.session",
        "payment_status": "paid",
        "payment_intent": "pi_123",
        "amount_subtotal": 4999,
        "amount_total": 5998,
        "currency": "usd",
        "shipping_cost": {"amount_total": 999},
        "client_reference_id": None,
        "customer_details": {
            "email": "jane@example.com",
            "name": "Jane Doe",
            "address": {"line1": "9 Billing Rd", "city": "Austin", "country": "US"},
        },
        "collected_information": {
            "shipping_details": {
                "name": "Jane Doe",
                "address": {
                    "line1": "1 Main St",
                    "line2": None,
                    "city": "Springfield",
                    "state": "IL",
                    "postal_code": "62701",
                    "country": "US",
                },
            }
        },
    }
    session.update(overrides)
    return session


LINE_ITEMS = [{"description": "iTag Pro", "quantity": 1, "amount_total": 4999}]


def make_order(db, **fields) -> OrderModel:
    data = {
        "stripe_session_id": f"cs_{len(db.query(OrderModel).all())}_{time.time_ns()}",
        "customer_email": "jane@example.com",
        "customer_name": "Jane Doe",
        "items": [{"name": "iTag Pro", "quantity": 1, "price": 4999}],
        "subtotal": 4999,
        "shipping": 999,
        "total": 5998,
        "currency": "usd",
        "status": "completed",
    }
    data.update(fields)
    order = OrderModel(**data)
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def make_product(db, **fields) -> ProductModel:
    data = {
        "id": PRO_ID,
        "name": "iTag Pro",
        "description": "Precision finder",
        "price": 49.99,
        "category": "premium",
        "colors": ["Black", "White"],
        "in_stock": True,
        "featured": True,
        "rating": 4.8,
        "reviews_count": 10,
    }
    data.update(fields)
    product = ProductModel(**data)
    db.add(product)
    db.commit()
    return product


def utc(year, month, day=15) -> datetime:
    return datetime(year, month, day, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------- fixtures

@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def auth_client():
    return FakeAuthClient()


@pytest.fixture
def carts():
    return {}


@pytest.fixture
def client(db, gateway, notifier, auth_client, carts):
    from storefront.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    app.dependency_overrides[get_cart_storage_factory] = lambda: (lambda key: MemoryCartStorage(carts, key))

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def user_headers():
    return {"Authorization": "Bearer user-token"}


@pytest.fixture
def admin_headers(db):
    db.add(UserRoleModel(user_id=ADMIN_ID, role="admin"))
    db.commit()
    return {"Authorization": "Bearer admin-token"}
