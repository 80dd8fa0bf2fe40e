"""
Storefront — Orders

Order Lifecycle:
  Not Process → Processing → Shipped → deliverd
        ↓            ↓           ↓
      cancel ──────────────────────

Admins may set any status from the enum (the admin page is a free select),
so the arrows above describe the usual flow, not a hard constraint.
Every change is written to the activity log.
"""
from fastapi import HTTPException

from storefront.config import ORDER_STATUSES, DEFAULT_ORDER_STATUS
from storefront.db import new_id, now_iso, find_by_id, newest_first, log_activity


def create_order(db: dict, buyer_id: str, product_ids: list, payment: dict) -> dict:
    now = now_iso()
    order = {
        "_id": new_id(),
        "products": list(product_ids),
        "payment": payment,
        "buyer": buyer_id,
        "status": DEFAULT_ORDER_STATUS,
        "createdAt": now, "updatedAt": now,
    }
    db["orders"].append(order)
    log_activity(db, "order_placed", orderId=order["_id"], buyer=buyer_id,
                 amount=(payment.get("transaction") or {}).get("amount"))
    print(f"[Orders] {order['_id']} placed by {buyer_id} ({len(product_ids)} items)")
    return order


def order_view(db: dict, order: dict) -> dict:
    """Products populated without photos; buyer reduced to id and name."""
    products = []
    for pid in order.get("products", []):
        p = find_by_id(db, "products", pid)
        if p:
            products.append({k: v for k, v in p.items() if k != "photo"})
    buyer = find_by_id(db, "users", order.get("buyer"))
    return {**order, "products": products,
            "buyer": {"_id": buyer["_id"], "name": buyer["name"]} if buyer else None}


def get_orders(db: dict, user_id: str) -> list:
    mine = [o for o in db["orders"] if o.get("buyer") == user_id]
    return [order_view(db, o) for o in newest_first(mine)]


def get_all_orders(db: dict) -> list:
    return [order_view(db, o) for o in newest_first(db["orders"])]


def update_order_status(db: dict, order_id: str, status: str, by: str = "system") -> dict:
    if status not in ORDER_STATUSES:
        raise HTTPException(400, f"Invalid status. Must be one of: {', '.join(ORDER_STATUSES)}")
    order = find_by_id(db, "orders", order_id)
    if not order:
        raise HTTPException(404, "Order not found")
    old = order["status"]
    order["status"] = status
    order["updatedAt"] = now_iso()
    log_activity(db, "order_status_changed", orderId=order_id,
                 **{"from": old, "to": status, "by": by})
    return order_view(db, order)
