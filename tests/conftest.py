import os
import shutil
import tempfile
import uuid
from datetime import datetime

# Storage must point at a scratch directory before any application module is imported
_SCRATCH = tempfile.mkdtemp(prefix="abc-retail-tests-")
BLOB_ROOT = os.path.join(_SCRATCH, "blobs")
FILE_ROOT = os.path.join(_SCRATCH, "files")
os.environ["TABLE_STORAGE_URL"] = f"sqlite:///{os.path.join(_SCRATCH, 'tables.db')}"
os.environ["BLOB_STORAGE_ROOT"] = BLOB_ROOT
os.environ["FILE_SHARE_ROOT"] = FILE_ROOT
os.environ["BLOB_PUBLIC_URL"] = "http://testserver/blobs"

import httpx
import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine, init_db
from models.customer import CustomerProfile, CUSTOMERS_PARTITION, ROLE_ADMIN, ROLE_CUSTOMER
from models.product import Product, PRODUCTS_PARTITION
from models.session import ShopperSession
from utils.functions_client import functions_client
from utils.hashing import get_password_hash


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_SCRATCH, ignore_errors=True)


@pytest.fixture(autouse=True)
def clean_storage():
    """Fresh tables, blob containers and file shares for every test."""
    init_db()
    for root in (BLOB_ROOT, FILE_ROOT):
        os.makedirs(root, exist_ok=True)

    yield

    Base.metadata.drop_all(bind=engine)
    for root in (BLOB_ROOT, FILE_ROOT):
        shutil.rmtree(root, ignore_errors=True)
        os.makedirs(root, exist_ok=True)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_product(db):
    def _make(name="Denim Jacket", price=10.0, quantity=5, image_url=""):
        product = Product(
            partition_key=PRODUCTS_PARTITION,
            row_key=str(uuid.uuid4()),
            product_name=name,
            price=price,
            quantity=quantity,
            image_url=image_url,
            created_date=datetime.utcnow(),
        )
        db.add(product)
        db.commit()
        return product
    return _make


@pytest.fixture
def make_customer(db):
    def _make(email="jane@example.com", password="secret", role=ROLE_CUSTOMER,
              name="Jane", surname="Doe", phone_number="0123456789"):
        profile = CustomerProfile(
            partition_key=CUSTOMERS_PARTITION,
            row_key=email,
            name=name,
            surname=surname,
            email=email,
            phone_number=phone_number,
            password_hash=get_password_hash(password),
            role=role,
            created_date=datetime.utcnow(),
        )
        db.add(profile)
        db.commit()
        return profile
    return _make


@pytest.fixture
def make_shopper(db):
    def _make(email="jane@example.com", role=ROLE_CUSTOMER, cart=None):
        shopper = ShopperSession(
            id=str(uuid.uuid4()),
            customer_email=email,
            customer_name="Jane Doe",
            role=role,
            login_time=datetime.utcnow(),
            cart=cart or [],
            cart_count=sum(line["quantity"] for line in (cart or [])),
        )
        db.add(shopper)
        db.commit()
        return shopper
    return _make


@pytest.fixture
def functions_api():
    from functions.app import app as functions_app
    return TestClient(functions_app)


@pytest.fixture
def client(monkeypatch):
    """Web app client whose ingest calls land in the functions app in-process."""
    from functions.app import app as functions_app
    from main import app as web_app

    monkeypatch.setattr(functions_client, "transport", httpx.ASGITransport(app=functions_app))
    return TestClient(web_app)


@pytest.fixture
def login(client):
    def _login(email="jane@example.com", password="secret"):
        response = client.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _login


@pytest.fixture
def admin_headers(make_customer, login):
    make_customer(email="admin@example.com", password="admin-pass", role=ROLE_ADMIN,
                  name="Store", surname="Admin")
    return login("admin@example.com", "admin-pass")
