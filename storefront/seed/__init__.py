"""
Storefront — Demo Data
Admin account, a few categories and products. Safe to run repeatedly.
"""
from storefront.accounts import find_user_by_email
from storefront.auth import hash_password
from storefront.catalog import create_category, find_category_by_name
from storefront.config import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME, ADMIN_ROLE
from storefront.db import new_id, now_iso
from storefront.products import create_product

DEMO_CATALOG = {
    "Electronics": [
        ("Laptop", "A powerful laptop", 1499.99, 30),
        ("Smartphone", "A best selling smartphone", 999.99, 50),
    ],
    "Book": [
        ("Textbook", "A comprehensive textbook", 79.99, 50),
        ("Novel", "A bestselling novel", 14.99, 200),
    ],
    "Clothing": [
        ("NUS T-shirt", "Plain NUS T-shirt for sale", 4.99, 200),
    ],
}


def seed_admin(db: dict) -> bool:
    if find_user_by_email(db, ADMIN_EMAIL):
        return False
    now = now_iso()
    db["users"].append({
        "_id": new_id(), "name": ADMIN_NAME, "email": ADMIN_EMAIL,
        "password": hash_password(ADMIN_PASSWORD), "phone": "", "address": "",
        "answer": "admin", "role": ADMIN_ROLE, "createdAt": now, "updatedAt": now,
    })
    return True


def seed_demo(db: dict) -> dict:
    """Returns counts of what was added."""
    added = {"users": int(seed_admin(db)), "categories": 0, "products": 0}
    for cat_name, items in DEMO_CATALOG.items():
        category = find_category_by_name(db, cat_name)
        if not category:
            category = create_category(db, cat_name)["category"]
            added["categories"] += 1
        for name, description, price, quantity in items:
            if any(p["name"] == name for p in db["products"]):
                continue
            create_product(db, {"name": name, "description": description, "price": price,
                                "category": category["_id"], "quantity": quantity,
                                "shipping": "1"})
            added["products"] += 1
    print(f"[Seed] Added {added['users']} users, {added['categories']} categories, "
          f"{added['products']} products")
    return added
