"""
Storefront — Products

Product CRUD, photo storage, and the storefront read paths:
  - listing (newest 12) and paginated listing (6 per page)
  - filtering by category ids and an inclusive price range
  - keyword search over name and description
  - related products within a category
  - products by category slug

Photos are stored as files in the upload directory; API views never carry
them. A product's `category` is stored as an id and populated on read.
"""
import math
from pathlib import Path

from fastapi import HTTPException

from storefront.catalog import slugify, find_category_by_slug
from storefront.config import (
    PRODUCTS_PER_PAGE, PRODUCT_LISTING_LIMIT, RELATED_PRODUCTS_LIMIT,
    MAX_PHOTO_BYTES, PHOTO_TYPES,
)
from storefront.db import (
    new_id, now_iso, find_by_id, newest_first, log_activity,
    save_uploaded_file, load_uploaded_file, delete_uploaded_file,
)

REQUIRED_FIELDS = [
    ("name", "Name is Required"),
    ("description", "Description is Required"),
    ("price", "Price is Required"),
    ("category", "Category is Required"),
    ("quantity", "Quantity is Required"),
]
TRUTHY = {"1", "true", "yes", "on"}


# ============================================================
# PARSING
# ============================================================
def parse_price(value) -> float:
    try:
        price = round(float(value), 2)
    except (TypeError, ValueError):
        raise HTTPException(400, "Price must be a non-negative number")
    if not math.isfinite(price) or price < 0:
        raise HTTPException(400, "Price must be a non-negative number")
    return price

def parse_quantity(value) -> int:
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise HTTPException(400, "Quantity must be a non-negative integer")
    if not math.isfinite(as_float) or as_float < 0 or as_float != int(as_float):
        raise HTTPException(400, "Quantity must be a non-negative integer")
    return int(as_float)

def parse_shipping(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY


def _validate(db: dict, fields: dict, photo) -> dict:
    for field, message in REQUIRED_FIELDS:
        value = fields.get(field)
        if value is None or not str(value).strip():
            raise HTTPException(400, message)
    if photo and len(photo["content"]) > MAX_PHOTO_BYTES:
        raise HTTPException(400, "photo is Required and should be less then 1mb")
    if not find_by_id(db, "categories", str(fields["category"])):
        raise HTTPException(404, "Category not found")
    name = " ".join(str(fields["name"]).split())
    return {
        "name": name,
        "slug": slugify(name),
        "description": str(fields["description"]).strip(),
        "price": parse_price(fields["price"]),
        "category": str(fields["category"]),
        "quantity": parse_quantity(fields["quantity"]),
        "shipping": parse_shipping(fields.get("shipping")),
    }


def _store_photo(product: dict, photo: dict):
    ext = next((e for e, t in PHOTO_TYPES.items() if t == photo.get("content_type")), None)
    if not ext:
        ext = Path(photo.get("filename") or "").suffix.lower() or ".bin"
    if product.get("photo"):
        delete_uploaded_file(product["photo"]["file"])
    filename = f"{product['_id']}{ext}"
    save_uploaded_file(filename, photo["content"])
    product["photo"] = {"file": filename,
                        "contentType": photo.get("content_type") or PHOTO_TYPES.get(ext, "application/octet-stream")}


# ============================================================
# VIEWS
# ============================================================
def product_view(db: dict, product: dict) -> dict:
    """Product without photo, category populated (None if deleted)."""
    view = {k: v for k, v in product.items() if k != "photo"}
    view["category"] = find_by_id(db, "categories", product.get("category"))
    return view

def _views(db: dict, products: list) -> list:
    return [product_view(db, p) for p in products]


# ============================================================
# CRUD
# ============================================================
def create_product(db: dict, fields: dict, photo: dict = None) -> dict:
    data = _validate(db, fields, photo)
    now = now_iso()
    product = {"_id": new_id(), **data, "photo": None, "createdAt": now, "updatedAt": now}
    if photo:
        _store_photo(product, photo)
    db["products"].append(product)
    log_activity(db, "product_created", productId=product["_id"], name=product["name"])
    return {"success": True, "message": "Product Created Successfully",
            "products": product_view(db, product)}


def update_product(db: dict, product_id: str, fields: dict, photo: dict = None) -> dict:
    product = find_by_id(db, "products", product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    data = _validate(db, fields, photo)
    product.update(data)
    if photo:
        _store_photo(product, photo)
    product["updatedAt"] = now_iso()
    log_activity(db, "product_updated", productId=product_id, name=product["name"])
    return {"success": True, "message": "Product Updated Successfully",
            "products": product_view(db, product)}


def delete_product(db: dict, product_id: str) -> dict:
    product = find_by_id(db, "products", product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    if product.get("photo"):
        delete_uploaded_file(product["photo"]["file"])
    db["products"] = [p for p in db["products"] if p["_id"] != product_id]
    log_activity(db, "product_deleted", productId=product_id, name=product["name"])
    return {"success": True, "message": "Product Deleted successfully"}


def get_product(db: dict, slug: str) -> dict:
    product = next((p for p in db["products"] if p["slug"] == slug), None)
    if not product:
        raise HTTPException(404, "Product not found")
    return {"success": True, "message": "Single Product Fetched",
            "product": product_view(db, product)}


def product_photo(db: dict, product_id: str) -> tuple:
    """Returns (path, content_type) of the stored photo."""
    product = find_by_id(db, "products", product_id)
    if not product or not product.get("photo"):
        raise HTTPException(404, "Photo not found")
    path, exists = load_uploaded_file(product["photo"]["file"])
    if not exists:
        raise HTTPException(404, "Photo not found")
    return path, product["photo"]["contentType"]


# ============================================================
# STOREFRONT READS
# ============================================================
def list_products(db: dict) -> dict:
    products = newest_first(db["products"])[:PRODUCT_LISTING_LIMIT]
    return {"success": True, "countTotal": len(products), "message": "ALlProducts ",
            "products": _views(db, products)}


def product_count(db: dict) -> dict:
    return {"success": True, "total": len(db["products"])}


def product_list(db: dict, page: int) -> dict:
    page = max(1, page)
    start = (page - 1) * PRODUCTS_PER_PAGE
    products = newest_first(db["products"])[start:start + PRODUCTS_PER_PAGE]
    return {"success": True, "products": _views(db, products)}


def filter_products(db: dict, checked, radio) -> dict:
    checked = [] if checked is None else checked
    radio = [] if radio is None else radio
    if not isinstance(checked, list) or not isinstance(radio, list) or len(radio) not in (0, 2):
        raise HTTPException(400, "Error WHile Filtering Products")
    checked = [str(c) for c in checked]
    try:
        low, high = (float(radio[0]), float(radio[1])) if radio else (None, None)
    except (TypeError, ValueError):
        raise HTTPException(400, "Error WHile Filtering Products")
    if radio and not (math.isfinite(low) and math.isfinite(high)):
        raise HTTPException(400, "Error WHile Filtering Products")

    matches = []
    for p in db["products"]:
        if checked and p.get("category") not in checked:
            continue
        if radio and not (low <= p.get("price", 0) <= high):
            continue
        matches.append(p)
    return {"success": True, "products": _views(db, matches)}


def search_products(db: dict, keyword: str) -> list:
    needle = (keyword or "").strip().lower()
    if not needle:
        return []
    return _views(db, [p for p in db["products"]
                       if needle in p.get("name", "").lower()
                       or needle in p.get("description", "").lower()])


def related_products(db: dict, product_id: str, category_id: str) -> dict:
    related = [p for p in db["products"]
               if p.get("category") == category_id and p["_id"] != product_id]
    return {"success": True, "products": _views(db, related[:RELATED_PRODUCTS_LIMIT])}


def products_by_category(db: dict, slug: str) -> dict:
    category = find_category_by_slug(db, slug)
    if not category:
        raise HTTPException(404, "Category not found")
    products = [p for p in db["products"] if p.get("category") == category["_id"]]
    return {"success": True, "category": category, "products": _views(db, products)}
