import os
import tempfile
from types import SimpleNamespace

# must be set before storefront.config is imported
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(
    tempfile.gettempdir(), "storefront_test.db"
)
os.environ["SEED_CATALOG"] = "0"
os.environ["PAYMENT_GATEWAY"] = "mock"
os.environ["PAYMENT_MOCK_DELAY_MS"] = "0"

import pytest
from fastapi.testclient import TestClient

from storefront.adapters.mock_payment import MockPaymentAdapter
from storefront.api.deps import get_payment_adapter
from storefront.db import SessionLocal, init_db
from storefront.main import app
from storefront.models.category import Category
from storefront.models.product import Product

AUTH = {"X-Authenticated-User": "u1"}

RECIPIENT = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "address": "12 Crag Road",
    "city": "Barrie",
    "province": "ON",
    "postal_code": "L4M 3X9",
    "phone": "705-555-0199",
}


@pytest.fixture(autouse=True)
def fresh_db():
    # Recreate DB fresh for every test
    init_db(reset=True)
    yield


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def products(db):
    """Product A at 10.00, product B at 5.00 and a chalk bag in another category."""
    gear = Category(name="Gear")
    chalk = Category(name="Chalk")
    db.add_all([gear, chalk])
    db.flush()
    a = Product(name="Product A", price_cents=1000, category_id=gear.id)
    b = Product(name="Product B", price_cents=500, category_id=gear.id)
    c = Product(name="Chalk Bag", price_cents=2499, category_id=chalk.id)
    db.add_all([a, b, c])
    db.commit()
    return SimpleNamespace(a=a.id, b=b.id, c=c.id)


@pytest.fixture
def gateway():
    return MockPaymentAdapter(delay_ms=0)


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_payment_adapter] = lambda: gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    return dict(AUTH)


@pytest.fixture
def recipient():
    return dict(RECIPIENT)
