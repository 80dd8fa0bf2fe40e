"""
Storefront — Catalog: Categories
Slug generation and category CRUD.
"""
import re
import unicodedata

from fastapi import HTTPException

from storefront.db import new_id, now_iso, find_by_id, log_activity

# ============================================================
# SLUGS
# ============================================================
def slugify(text: str, lower: bool = False) -> str:
    """ASCII-fold and hyphenate: 'Café Crème 2' -> 'Cafe-Creme-2'."""
    folded = (unicodedata.normalize("NFKD", text or "")
              .encode("ascii", "ignore")
              .decode("ascii"))
    slug = re.sub(r"[^A-Za-z0-9]+", "-", folded).strip("-")
    return slug.lower() if lower else slug


# ============================================================
# CATEGORY CRUD
# ============================================================
def _clean_name(name) -> str:
    return " ".join(str(name or "").split())

def find_category_by_name(db: dict, name: str, exclude_id: str = None):
    key = _clean_name(name).lower()
    return next((c for c in db["categories"]
                 if c["name"].lower() == key and c["_id"] != exclude_id), None)

def find_category_by_slug(db: dict, slug: str):
    return next((c for c in db["categories"] if c["slug"] == slug.lower()), None)


def create_category(db: dict, name) -> dict:
    name = _clean_name(name)
    if not name:
        raise HTTPException(400, "Name is required")
    if find_category_by_name(db, name):
        return {"success": True, "message": "Category Already Exisits"}

    now = now_iso()
    category = {"_id": new_id(), "name": name, "slug": slugify(name, lower=True),
                "createdAt": now, "updatedAt": now}
    db["categories"].append(category)
    log_activity(db, "category_created", categoryId=category["_id"], name=name)
    return {"success": True, "message": "new category created", "category": category}


def update_category(db: dict, category_id: str, name) -> dict:
    category = find_by_id(db, "categories", category_id)
    if not category:
        raise HTTPException(404, "Category not found")
    name = _clean_name(name)
    if not name:
        raise HTTPException(400, "Name is required")
    if find_category_by_name(db, name, exclude_id=category_id):
        raise HTTPException(409, "Category Already Exisits")

    category["name"] = name
    category["slug"] = slugify(name, lower=True)
    category["updatedAt"] = now_iso()
    return {"success": True, "message": "Category Updated Successfully", "category": category}


def list_categories(db: dict) -> dict:
    return {"success": True, "message": "All Categories List", "category": db["categories"]}


def single_category(db: dict, slug: str) -> dict:
    category = find_category_by_slug(db, slug)
    if not category:
        raise HTTPException(404, "Category not found")
    return {"success": True, "message": "Get SIngle Category SUccessfully", "category": category}


def delete_category(db: dict, category_id: str) -> dict:
    category = find_by_id(db, "categories", category_id)
    if not category:
        raise HTTPException(404, "Category not found")
    # products keep the dangling reference; populate() renders it as null
    db["categories"] = [c for c in db["categories"] if c["_id"] != category_id]
    log_activity(db, "category_deleted", categoryId=category_id, name=category["name"])
    return {"success": True, "message": "Categry Deleted Successfully"}
