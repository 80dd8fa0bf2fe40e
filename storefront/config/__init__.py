"""
Storefront — Configuration & Constants
All environment variables, feature flags, catalog limits, roles and order statuses.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ============================================================
# PATHS
# ============================================================
BASE_DIR = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.environ.get("DATA_DIR", BASE_DIR / "data"))
UPLOAD_DIR = DATA_DIR / "uploads"

for d in (DATA_DIR, UPLOAD_DIR):
    d.mkdir(parents=True, exist_ok=True)

DB_PATH = DATA_DIR / "db.json"
DATABASE_URL = os.environ.get("DATABASE_URL")

# ============================================================
# FEATURE FLAGS
# ============================================================
PERSIST_DATA = os.environ.get("PERSIST_DATA", "true").lower() == "true"
SEED_DEMO = os.environ.get("SEED_DEMO", "false").lower() == "true"
RESET_ON_START = os.environ.get("RESET_ON_START", "false").lower() == "true"

# ============================================================
# SERVER
# ============================================================
PORT = int(os.environ.get("PORT", "8080"))
CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

# ============================================================
# AUTH
# ============================================================
JWT_SECRET = os.environ.get("JWT_SECRET", os.urandom(32).hex())
JWT_ALGORITHM = "HS256"
JWT_EXPIRY_HOURS = int(os.environ.get("JWT_EXPIRY_HOURS", "168"))  # 7 days
MIN_PASSWORD_LENGTH = 6

ROLES = {
    0: {"name": "user", "title": "Customer"},
    1: {"name": "admin", "title": "Administrator"},
}
USER_ROLE = 0
ADMIN_ROLE = 1

# ============================================================
# CATALOG
# ============================================================
PRODUCTS_PER_PAGE = 6
PRODUCT_LISTING_LIMIT = 12
RELATED_PRODUCTS_LIMIT = 3
MAX_PHOTO_BYTES = 1_000_000
PHOTO_TYPES = {".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".png": "image/png",
               ".gif": "image/gif", ".webp": "image/webp"}

# ============================================================
# ORDERS
# ============================================================
ORDER_STATUSES = ["Not Process", "Processing", "Shipped", "deliverd", "cancel"]
DEFAULT_ORDER_STATUS = "Not Process"

# ============================================================
# PAYMENTS
# ============================================================
PAYMENT_GATEWAY = os.environ.get("PAYMENT_GATEWAY", "sandbox").lower()
CURRENCY = os.environ.get("CURRENCY", "USD")

# ============================================================
# SEED
# ============================================================
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@storefront.local").strip().lower()
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")
ADMIN_NAME = os.environ.get("ADMIN_NAME", "Admin")

# ============================================================
# VERSION
# ============================================================
VERSION = "1.0.0"
PRODUCT_NAME = "Storefront"
