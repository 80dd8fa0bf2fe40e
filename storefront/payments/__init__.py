"""
Storefront — Payments

Checkout goes through a PaymentGateway: the client asks for a client token,
tokenises the card in its widget, and posts the resulting nonce with the cart.
The server prices the cart from the catalog, charges the nonce, and records
an order on success.

SandboxGateway settles locally and follows the usual sandbox nonce
conventions, so checkout works end to end without gateway credentials.
"""
import uuid

from fastapi import HTTPException

from storefront.config import PAYMENT_GATEWAY, CURRENCY
from storefront.db import find_by_id
from storefront.orders import create_order

DECLINED_PREFIX = "fake-processor-declined"
REJECTED_PREFIX = "fake-gateway-rejected"


# ============================================================
# GATEWAYS
# ============================================================
class PaymentGateway:
    name = "base"

    def generate_client_token(self) -> str:
        raise NotImplementedError

    def sale(self, amount: float, nonce: str) -> dict:
        raise NotImplementedError


class SandboxGateway(PaymentGateway):
    name = "sandbox"

    def generate_client_token(self) -> str:
        return "sandbox_" + uuid.uuid4().hex

    def sale(self, amount: float, nonce: str) -> dict:
        amount = round(amount, 2)
        if nonce.startswith(DECLINED_PREFIX):
            return {"success": False, "message": "Processor Declined"}
        if nonce.startswith(REJECTED_PREFIX):
            return {"success": False, "message": "Gateway Rejected: fraud"}
        return {"success": True,
                "transaction": {"id": uuid.uuid4().hex[:8], "amount": f"{amount:.2f}",
                                "currencyIsoCode": CURRENCY, "status": "submitted_for_settlement"}}


GATEWAYS = {"sandbox": SandboxGateway}
_gateway = None


def get_gateway() -> PaymentGateway:
    global _gateway
    if _gateway is None:
        if PAYMENT_GATEWAY not in GATEWAYS:
            raise ValueError(f"Unknown payment gateway '{PAYMENT_GATEWAY}'. Known: {list(GATEWAYS)}")
        _gateway = GATEWAYS[PAYMENT_GATEWAY]()
        print(f"[Payments] Using {_gateway.name} gateway")
    return _gateway


# ============================================================
# CHECKOUT
# ============================================================
def cart_product_ids(cart) -> list:
    """Cart items are product documents (or bare ids) as the client stores them."""
    ids = []
    for item in cart or []:
        pid = item.get("_id") if isinstance(item, dict) else item
        if pid:
            ids.append(str(pid))
    return ids


def cart_total(db: dict, product_ids: list) -> float:
    total = 0.0
    for pid in product_ids:
        product = find_by_id(db, "products", pid)
        if not product:
            raise HTTPException(404, "Product not found")
        total += product["price"]
    return round(total, 2)


def checkout(db: dict, user: dict, nonce: str, cart, gateway: PaymentGateway = None) -> dict:
    product_ids = cart_product_ids(cart)
    if not product_ids:
        raise HTTPException(400, "Cart is empty")
    if not nonce:
        raise HTTPException(400, "Payment nonce is required")

    amount = cart_total(db, product_ids)
    result = (gateway or get_gateway()).sale(amount, nonce)
    if not result.get("success"):
        print(f"[Payments] Sale of {amount:.2f} for {user['email']} failed: {result.get('message')}")
        raise HTTPException(402, result.get("message") or "Payment failed")

    create_order(db, user["_id"], product_ids, result)
    return {"ok": True}
