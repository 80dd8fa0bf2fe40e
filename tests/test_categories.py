"""Slugs and category CRUD."""
import pytest

from storefront.catalog import slugify

BASE = "/api/v1/category"


@pytest.mark.parametrize("text,expected", [
    ("Updated Product", "Updated-Product"),
    ("  Kids' Toys & Games ", "Kids-Toys-Games"),
    ("Café Crème", "Cafe-Creme"),
    ("", ""),
])
def test_slugify(text, expected):
    assert slugify(text) == expected


def test_slugify_lowercase():
    assert slugify("Home Appliances", lower=True) == "home-appliances"


class TestCreate:
    def test_create(self, client, admin_headers):
        r = client.post(f"{BASE}/create-category", json={"name": "Home Appliances"},
                        headers=admin_headers)
        assert r.status_code == 201
        body = r.json()
        assert body["success"] is True
        assert body["message"] == "new category created"
        assert body["category"]["name"] == "Home Appliances"
        assert body["category"]["slug"] == "home-appliances"
        assert len(body["category"]["_id"]) == 24

    def test_name_required(self, client, admin_headers):
        r = client.post(f"{BASE}/create-category", json={"name": "  "}, headers=admin_headers)
        assert r.status_code == 400
        assert r.json()["message"] == "Name is required"

    def test_existing_name(self, client, admin_headers, category):
        r = client.post(f"{BASE}/create-category", json={"name": "electronics"},
                        headers=admin_headers)
        assert r.status_code == 200
        assert r.json() == {"success": True, "message": "Category Already Exisits"}
        assert len(client.get(f"{BASE}/get-category").json()["category"]) == 1

    def test_requires_admin(self, client, user_headers):
        r = client.post(f"{BASE}/create-category", json={"name": "Books"}, headers=user_headers)
        assert r.status_code == 403


class TestUpdate:
    def test_rename_updates_slug(self, client, admin_headers, category):
        r = client.put(f"{BASE}/update-category/{category['_id']}", json={"name": "Gadgets and Gear"},
                       headers=admin_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["message"] == "Category Updated Successfully"
        assert body["category"]["slug"] == "gadgets-and-gear"
        assert body["category"]["_id"] == category["_id"]

    def test_unknown_id(self, client, admin_headers):
        r = client.put(f"{BASE}/update-category/{'0' * 24}", json={"name": "x"},
                       headers=admin_headers)
        assert r.status_code == 404

    def test_name_taken_by_other(self, client, admin_headers, category):
        other = client.post(f"{BASE}/create-category", json={"name": "Books"},
                            headers=admin_headers).json()["category"]
        r = client.put(f"{BASE}/update-category/{other['_id']}", json={"name": "Electronics"},
                       headers=admin_headers)
        assert r.status_code == 409

    def test_same_name_different_case_is_allowed(self, client, admin_headers, category):
        r = client.put(f"{BASE}/update-category/{category['_id']}", json={"name": "ELECTRONICS"},
                       headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["category"]["name"] == "ELECTRONICS"


class TestRead:
    def test_list_is_public(self, client, category):
        r = client.get(f"{BASE}/get-category")
        assert r.status_code == 200
        body = r.json()
        assert body["message"] == "All Categories List"
        assert [c["_id"] for c in body["category"]] == [category["_id"]]

    def test_single_by_slug(self, client, category):
        r = client.get(f"{BASE}/single-category/electronics")
        assert r.status_code == 200
        assert r.json()["message"] == "Get SIngle Category SUccessfully"
        assert r.json()["category"]["_id"] == category["_id"]

    def test_single_unknown_slug(self, client):
        assert client.get(f"{BASE}/single-category/nothing-here").status_code == 404


class TestDelete:
    def test_delete(self, client, admin_headers, category):
        r = client.delete(f"{BASE}/delete-category/{category['_id']}", headers=admin_headers)
        assert r.status_code == 200
        assert r.json() == {"success": True, "message": "Categry Deleted Successfully"}
        assert client.get(f"{BASE}/get-category").json()["category"] == []

    def test_products_keep_dangling_reference(self, client, admin_headers, category, add_product):
        product = add_product(name="Orphan")
        client.delete(f"{BASE}/delete-category/{category['_id']}", headers=admin_headers)
        r = client.get(f"/api/v1/product/get-product/{product['slug']}")
        assert r.status_code == 200
        assert r.json()["product"]["category"] is None

    def test_delete_unknown(self, client, admin_headers):
        r = client.delete(f"{BASE}/delete-category/{'0' * 24}", headers=admin_headers)
        assert r.status_code == 404

    def test_requires_admin(self, client, user_headers, category):
        r = client.delete(f"{BASE}/delete-category/{category['_id']}", headers=user_headers)
        assert r.status_code == 403
