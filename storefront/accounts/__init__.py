"""
Storefront — Accounts
Registration, login, password reset by security answer, profile updates
and the admin user list.

Soft failures (duplicate registration, wrong password) come back as
``{"success": False, ...}`` payloads with a 200 status, which is what the
client expects; hard failures raise HTTPException.
"""
from fastapi import HTTPException

from storefront.auth import hash_password, compare_password, create_jwt
from storefront.config import MIN_PASSWORD_LENGTH, USER_ROLE
from storefront.db import new_id, now_iso, find_by_id, newest_first, log_activity

PRIVATE_FIELDS = {"password", "answer"}

REGISTER_FIELDS = [
    ("name", "Name is Required"),
    ("email", "Email is Required"),
    ("password", "Password is Required"),
    ("phone", "Phone no is Required"),
    ("address", "Address is Required"),
    ("answer", "Answer is Required"),
]


def public_user(user: dict) -> dict:
    """User document without password hash or security answer."""
    return {k: v for k, v in user.items() if k not in PRIVATE_FIELDS}


def normalize_email(email) -> str:
    return (email or "").strip().lower()


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def find_user_by_email(db: dict, email: str):
    email = normalize_email(email)
    return next((u for u in db["users"] if u["email"] == email), None)


def register_user(db: dict, data: dict) -> dict:
    for field, message in REGISTER_FIELDS:
        if _blank(data.get(field)):
            raise HTTPException(400, message)

    if find_user_by_email(db, data["email"]):
        return {"success": False, "message": "Already Register please login"}

    now = now_iso()
    user = {
        "_id": new_id(),
        "name": data["name"].strip(),
        "email": normalize_email(data["email"]),
        "password": hash_password(data["password"]),
        "phone": str(data["phone"]).strip(),
        "address": data["address"],
        "answer": data["answer"].strip(),
        "role": USER_ROLE,
        "createdAt": now, "updatedAt": now,
    }
    db["users"].append(user)
    log_activity(db, "user_registered", userId=user["_id"], email=user["email"])
    return {"success": True, "message": "User Register Successfully", "user": public_user(user)}


def login_user(db: dict, email: str, password: str) -> dict:
    if _blank(email) or _blank(password):
        raise HTTPException(404, "Invalid email or password")
    user = find_user_by_email(db, email)
    if not user:
        raise HTTPException(404, "Email is not registerd")
    if not compare_password(password, user["password"]):
        return {"success": False, "message": "Invalid Password"}
    return {
        "success": True, "message": "login successfully",
        "user": {k: user.get(k) for k in ("_id", "name", "email", "phone", "address", "role")},
        "token": create_jwt(user),
    }


def reset_password(db: dict, email: str, answer: str, new_password: str) -> dict:
    if _blank(email):
        raise HTTPException(400, "Emai is required")
    if _blank(answer):
        raise HTTPException(400, "answer is required")
    if _blank(new_password):
        raise HTTPException(400, "New Password is required")

    user = find_user_by_email(db, email)
    if not user or user.get("answer", "").strip().lower() != answer.strip().lower():
        raise HTTPException(404, "Wrong Email Or Answer")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(400, f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    user["password"] = hash_password(new_password)
    user["updatedAt"] = now_iso()
    log_activity(db, "password_reset", userId=user["_id"])
    return {"success": True, "message": "Password Reset Successfully"}


def update_profile(db: dict, user_id: str, data: dict) -> dict:
    user = find_by_id(db, "users", user_id)
    if not user:
        raise HTTPException(400, "Error WHile Update profile")

    password = data.get("password")
    if not _blank(password) and len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(400, {"message": "Error WHile Update profile",
                                  "error": "Passsword is required and 6 character long"})

    for field in ("name", "phone", "address"):
        if not _blank(data.get(field)):
            user[field] = data[field]
    if not _blank(password):
        user["password"] = hash_password(password)
    user["updatedAt"] = now_iso()
    log_activity(db, "profile_updated", userId=user["_id"])
    return {"success": True, "message": "Profile Updated SUccessfully",
            "updatedUser": public_user(user)}


def list_users(db: dict) -> dict:
    users = [public_user(u) for u in newest_first(db["users"])]
    return {"success": True, "message": "All Users List", "users": users}
