"""
Test configuration.

Every test runs against its own freshly created tables in a throwaway SQLite
file. The environment is set before any application module is imported so
that ``config.settings`` and the engine pick it up.
"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="restaurant-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
import models  # noqa: F401
from models.menu import Category, MenuItem
from models.users import User
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token

ADMIN_EMAIL = "admin@restaurant.io"
ADMIN_PASSWORD = "secret-pass"


@pytest.fixture(autouse=True)
def fresh_tables():
    """Recreate the schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def webhook_calls(monkeypatch):
    """Replaces the outbound order webhook with a recorder."""
    from services.webhook import order_webhook

    calls = []

    async def _fake_deliver(url, payload):
        calls.append((url, payload))
        return True

    monkeypatch.setattr(order_webhook, "deliver_order", _fake_deliver)
    return calls


@pytest.fixture
def client(webhook_calls):
    from main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_user(db):
    user = User(email=ADMIN_EMAIL, password_hash=get_password_hash(ADMIN_PASSWORD),
                role="admin", first_name="Test", last_name="Admin")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token({"sub": admin_user.email, "role": admin_user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def cart_headers():
    return {"X-Cart-Session": "session-a"}


@pytest.fixture
def menu(db):
    """A burger with variants and add-ons, a side without options, an out-of-stock dessert."""
    db.add_all([
        Category(name="Burgers", slug="burgers", display_order=1),
        Category(name="Sides", slug="sides", display_order=2),
    ])
    burger = MenuItem(
        name="The Smoky Texas Stack",
        price=16.50,
        category="burgers",
        popular=True,
        variants=[
            {"id": "single", "name": "Single Patty", "price": 14.50},
            {"id": "double", "name": "Double Patty", "price": 16.50},
        ],
        addons=[
            {"id": "cheese", "name": "Extra Cheese", "price": 1.50},
            {"id": "bacon", "name": "Bacon", "price": 2.00},
        ],
    )
    fries = MenuItem(name="Loaded Fries", price=6.50, category="sides")
    brownie = MenuItem(name="Chocolate Brownie", price=5.50, category="desserts", in_stock=False)
    db.add_all([burger, fries, brownie])
    db.commit()
    return {"burger": burger.id, "fries": fries.id, "brownie": brownie.id}


CHECKOUT_PICKUP = {
    "customer_name": "Jane Doe",
    "customer_phone": "+230 5 555 1234",
    "service_option": "pickup",
    "payment_method": "cash",
}

CHECKOUT_DELIVERY = {
    "customer_name": "Jane Doe",
    "customer_phone": "+230 5 555 1234",
    "service_option": "delivery",
    "delivery_address": "12 Royal Road, Port Louis",
    "payment_method": "card",
}


@pytest.fixture
def place_order(client, menu):
    """Adds one burger line for a new cart session and checks out; returns the order JSON."""
    counter = {"n": 0}

    def _place(payload=None, quantity=2, session=None):
        counter["n"] += 1
        headers = {"X-Cart-Session": session or f"order-session-{counter['n']}"}
        r = client.post("/cart/items", headers=headers, json={
            "menu_item_id": menu["burger"], "quantity": quantity,
            "variant_id": "double", "addon_ids": ["bacon"],
        })
        assert r.status_code == 201, r.text
        r = client.post("/orders/checkout", headers=headers, json=payload or CHECKOUT_PICKUP)
        assert r.status_code == 201, r.text
        return r.json()["order"]

    return _place
