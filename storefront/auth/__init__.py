"""
Storefront — Authentication & Access Control
Password hashing, JWT tokens, sign-in and admin guards.
"""
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt as pyjwt
from fastapi import Request, HTTPException, Depends

from storefront.config import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRY_HOURS, ROLES, ADMIN_ROLE
from storefront.db import get_db, find_by_id

# ============================================================
# PASSWORD HASHING
# ============================================================
def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

def compare_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # not a bcrypt hash
        return False

# ============================================================
# JWT
# ============================================================
def create_jwt(user: dict) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user["_id"], "role": user.get("role", 0),
        "exp": now + timedelta(hours=JWT_EXPIRY_HOURS),
        "iat": now,
    }
    return pyjwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

def decode_jwt(token: str) -> dict:
    try:
        return pyjwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except pyjwt.ExpiredSignatureError:
        raise HTTPException(401, "Token expired")
    except pyjwt.InvalidTokenError:
        raise HTTPException(401, "Invalid token")

# ============================================================
# REQUEST HELPERS
# ============================================================
def token_from_request(request: Request) -> str:
    """The client sends the bare token; `Bearer <token>` is accepted too."""
    auth = request.headers.get("Authorization", "").strip()
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return auth

async def require_sign_in(request: Request) -> dict:
    """Dependency: require a valid token for an existing user."""
    token = token_from_request(request)
    if not token:
        raise HTTPException(401, "Authentication required")
    payload = decode_jwt(token)
    user = find_by_id(get_db(), "users", payload.get("sub", ""))
    if not user:
        raise HTTPException(401, "User not found")
    return user

def require_role(min_level: int):
    """Dependency: require minimum role level."""
    async def checker(user: dict = Depends(require_sign_in)):
        if user.get("role", 0) < min_level:
            print(f"[Auth] {user['email']} denied: needs {ROLES[min_level]['name']}")
            raise HTTPException(403, "UnAuthorized Access")
        return user
    return checker

is_admin = require_role(ADMIN_ROLE)
