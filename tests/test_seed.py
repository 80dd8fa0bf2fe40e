"""Demo data and the health endpoint."""
from storefront.auth import compare_password
from storefront.accounts import find_user_by_email
from storefront.config import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_ROLE
from storefront.seed import seed_demo, DEMO_CATALOG


def test_seed_demo_is_idempotent(db):
    first = seed_demo(db)
    assert first["users"] == 1
    assert first["categories"] == len(DEMO_CATALOG)
    assert first["products"] == sum(len(items) for items in DEMO_CATALOG.values())

    again = seed_demo(db)
    assert again == {"users": 0, "categories": 0, "products": 0}
    assert len(db["products"]) == first["products"]


def test_seeded_admin_can_sign_in(db):
    seed_demo(db)
    admin = find_user_by_email(db, ADMIN_EMAIL)
    assert admin["role"] == ADMIN_ROLE
    assert compare_password(ADMIN_PASSWORD, admin["password"])


def test_seeded_products_are_listed(client, db):
    seed_demo(db)
    body = client.get("/api/v1/product/get-product").json()
    assert body["countTotal"] == len(db["products"])
    assert all(p["category"] is not None for p in body["products"])


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["storage"] == "file"
    assert body["payments"] == "sandbox"
