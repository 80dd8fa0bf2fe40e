"""
Pytest configuration for storefront tests.

Points the store at a throwaway data directory with persistence off, and
resets it before every test.
"""
import os
import tempfile

os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="storefront-test-")
os.environ["PERSIST_DATA"] = "false"
os.environ["DATABASE_URL"] = ""
os.environ["SEED_DEMO"] = "false"
os.environ["RESET_ON_START"] = "false"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-at-least-32-bytes"
os.environ["PAYMENT_GATEWAY"] = "sandbox"

import pytest
from fastapi.testclient import TestClient

from storefront.auth import hash_password, create_jwt
from storefront.db import get_db, save_db, reset_db, new_id, now_iso
from storefront.server import app


@pytest.fixture(autouse=True)
def clean_store():
    reset_db()
    yield
    reset_db()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    return get_db()


def make_user(email="test@example.com", password="password123", role=0, **extra):
    db = get_db()
    now = now_iso()
    user = {
        "_id": new_id(), "name": extra.get("name", "Test User"), "email": email,
        "password": hash_password(password), "phone": extra.get("phone", "1234567890"),
        "address": extra.get("address", "123 Test St"), "answer": extra.get("answer", "test sport"),
        "role": role, "createdAt": now, "updatedAt": now,
    }
    db["users"].append(user)
    save_db(db)
    return user


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def admin():
    return make_user(email="admin@example.com", password="Test123", role=1, name="Admin")


@pytest.fixture
def user_headers(user):
    return {"Authorization": create_jwt(user)}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": create_jwt(admin)}


@pytest.fixture
def category(client, admin_headers):
    r = client.post("/api/v1/category/create-category", json={"name": "Electronics"},
                    headers=admin_headers)
    return r.json()["category"]


@pytest.fixture
def add_product(client, admin_headers, category):
    """Factory: create a product through the API and return its view."""
    def _add(name="New Product", price=100, category_id=None, description="Product Description",
             quantity=10, shipping="1", photo=None):
        data = {"name": name, "description": description, "price": str(price),
                "category": category_id or category["_id"], "quantity": str(quantity),
                "shipping": shipping}
        files = {"photo": photo} if photo else None
        r = client.post("/api/v1/product/create-product", data=data, files=files,
                        headers=admin_headers)
        assert r.status_code == 201, r.text
        return r.json()["products"]
    return _add
