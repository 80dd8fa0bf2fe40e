"""
Storefront — FastAPI routing layer
Auth, category and product routes under /api/v1, wired to the domain modules.
"""
import functools

from fastapi import FastAPI, Request, HTTPException, Depends, UploadFile, File, Form
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront import accounts, catalog, orders, payments, products
from storefront.auth import require_sign_in, is_admin
from storefront.config import (
    VERSION, PRODUCT_NAME, PORT, CORS_ORIGINS, RESET_ON_START, SEED_DEMO, PAYMENT_GATEWAY,
)
from storefront.db import get_db, save_db, reset_db, STORAGE_BACKEND
from storefront.seed import seed_demo

app = FastAPI(title=PRODUCT_NAME, version=VERSION)
app.add_middleware(CORSMiddleware, allow_origins=CORS_ORIGINS, allow_credentials=True,
                   allow_methods=["*"], allow_headers=["*"])

if RESET_ON_START:
    print("[DB] RESET_ON_START set, wiping store")
    reset_db()
if SEED_DEMO:
    _db = get_db()
    seed_demo(_db)
    save_db(_db)


# ============================================================
# ERROR HANDLING
# ============================================================
@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    payload = {"success": False}
    if isinstance(exc.detail, dict):
        payload.update(exc.detail)
    else:
        payload["message"] = exc.detail
    return JSONResponse(payload, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())[1:])
        problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return JSONResponse({"success": False, "message": "; ".join(problems) or "Invalid request"},
                        status_code=400)


def guarded(message: str):
    """Turn unexpected failures in a route into a logged 500 with `message`."""
    def wrap(fn):
        @functools.wraps(fn)
        async def inner(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except StarletteHTTPException:
                raise
            except Exception as e:
                print(f"[API] {fn.__name__} failed: {type(e).__name__}: {e}")
                raise HTTPException(500, {"message": message, "error": str(e)})
        return inner
    return wrap


async def _body(request: Request) -> dict:
    try:
        data = await request.json()
    except ValueError:
        raise HTTPException(400, "Invalid JSON body")
    if not isinstance(data, dict):
        raise HTTPException(400, "Invalid JSON body")
    return data


async def _photo(photo: UploadFile):
    if photo is None or not photo.filename:
        return None
    return {"filename": photo.filename, "content_type": photo.content_type,
            "content": await photo.read()}


# ============================================================
# HEALTH
# ============================================================
@app.get("/api/health")
async def health():
    return {"status": "ok", "product": PRODUCT_NAME, "version": VERSION,
            "storage": STORAGE_BACKEND, "payments": PAYMENT_GATEWAY}


# ============================================================
# AUTH
# ============================================================
@app.post("/api/v1/auth/register")
@guarded("Error in registration")
async def register(request: Request):
    data = await _body(request)
    db = get_db()
    result = accounts.register_user(db, data)
    if not result["success"]:
        return result
    save_db(db)
    return JSONResponse(result, status_code=201)

@app.post("/api/v1/auth/login")
@guarded("Error in login")
async def login(request: Request):
    data = await _body(request)
    return accounts.login_user(get_db(), data.get("email"), data.get("password"))

@app.post("/api/v1/auth/forgot-password")
@guarded("Something went wrong")
async def forgot_password(request: Request):
    data = await _body(request)
    db = get_db()
    result = accounts.reset_password(db, data.get("email"), data.get("answer"), data.get("newPassword"))
    save_db(db)
    return result

@app.get("/api/v1/auth/test")
async def protected_test(user: dict = Depends(is_admin)):
    return "Protected Routes"

@app.get("/api/v1/auth/user-auth")
async def user_auth(user: dict = Depends(require_sign_in)):
    return {"ok": True}

@app.get("/api/v1/auth/admin-auth")
async def admin_auth(user: dict = Depends(is_admin)):
    return {"ok": True}

@app.put("/api/v1/auth/profile")
@guarded("Error WHile Update profile")
async def profile(request: Request, user: dict = Depends(require_sign_in)):
    data = await _body(request)
    db = get_db()
    result = accounts.update_profile(db, user["_id"], data)
    save_db(db)
    return result

@app.get("/api/v1/auth/all-users")
async def all_users(user: dict = Depends(is_admin)):
    return accounts.list_users(get_db())

@app.get("/api/v1/auth/orders")
@guarded("Error while getting orders")
async def my_orders(user: dict = Depends(require_sign_in)):
    return orders.get_orders(get_db(), user["_id"])

@app.get("/api/v1/auth/all-orders")
@guarded("Error while getting orders")
async def all_orders(user: dict = Depends(is_admin)):
    return orders.get_all_orders(get_db())

@app.put("/api/v1/auth/order-status/{order_id}")
@guarded("Error while updating order")
async def order_status(order_id: str, request: Request, user: dict = Depends(is_admin)):
    data = await _body(request)
    db = get_db()
    result = orders.update_order_status(db, order_id, data.get("status"), by=user["email"])
    save_db(db)
    return result

@app.get("/api/v1/auth/activity")
async def activity(user: dict = Depends(is_admin)):
    log = get_db()["activity_log"]
    return {"success": True,
            "activity": sorted(log, key=lambda x: x.get("timestamp", ""), reverse=True)[:50]}


# ============================================================
# CATEGORIES
# ============================================================
@app.post("/api/v1/category/create-category")
@guarded("Error in category")
async def create_category(request: Request, user: dict = Depends(is_admin)):
    data = await _body(request)
    db = get_db()
    result = catalog.create_category(db, data.get("name"))
    if "category" not in result:
        return result
    save_db(db)
    return JSONResponse(result, status_code=201)

@app.put("/api/v1/category/update-category/{category_id}")
@guarded("Error while updating category")
async def update_category(category_id: str, request: Request, user: dict = Depends(is_admin)):
    data = await _body(request)
    db = get_db()
    result = catalog.update_category(db, category_id, data.get("name"))
    save_db(db)
    return result

@app.get("/api/v1/category/get-category")
@guarded("Error while getting all categories")
async def get_categories():
    return catalog.list_categories(get_db())

@app.get("/api/v1/category/single-category/{slug}")
@guarded("Error while getting single category")
async def single_category(slug: str):
    return catalog.single_category(get_db(), slug)

@app.delete("/api/v1/category/delete-category/{category_id}")
@guarded("Error while deleting category")
async def delete_category(category_id: str, user: dict = Depends(is_admin)):
    db = get_db()
    result = catalog.delete_category(db, category_id)
    save_db(db)
    return result


# ============================================================
# PRODUCTS
# ============================================================
@app.post("/api/v1/product/create-product")
@guarded("Error in creating product")
async def create_product(
    name: str = Form(None), description: str = Form(None), price: str = Form(None),
    category: str = Form(None), quantity: str = Form(None), shipping: str = Form(None),
    photo: UploadFile = File(None), user: dict = Depends(is_admin),
):
    fields = {"name": name, "description": description, "price": price,
              "category": category, "quantity": quantity, "shipping": shipping}
    upload = await _photo(photo)
    # load after the upload is read so no await sits between load and save
    db = get_db()
    result = products.create_product(db, fields, upload)
    save_db(db)
    return JSONResponse(result, status_code=201)

@app.put("/api/v1/product/update-product/{pid}")
@guarded("Error in updating product")
async def update_product(
    pid: str,
    name: str = Form(None), description: str = Form(None), price: str = Form(None),
    category: str = Form(None), quantity: str = Form(None), shipping: str = Form(None),
    photo: UploadFile = File(None), user: dict = Depends(is_admin),
):
    fields = {"name": name, "description": description, "price": price,
              "category": category, "quantity": quantity, "shipping": shipping}
    upload = await _photo(photo)
    db = get_db()
    result = products.update_product(db, pid, fields, upload)
    save_db(db)
    return JSONResponse(result, status_code=201)

@app.get("/api/v1/product/get-product")
@guarded("Error in getting products")
async def get_products():
    return products.list_products(get_db())

@app.get("/api/v1/product/get-product/{slug}")
@guarded("Error while getting single product")
async def get_product(slug: str):
    return products.get_product(get_db(), slug)

@app.get("/api/v1/product/product-photo/{pid}")
@guarded("Error while getting photo")
async def product_photo(pid: str):
    path, content_type = products.product_photo(get_db(), pid)
    return FileResponse(path, media_type=content_type)

@app.delete("/api/v1/product/delete-product/{pid}")
@guarded("Error while deleting product")
async def delete_product(pid: str, user: dict = Depends(is_admin)):
    db = get_db()
    result = products.delete_product(db, pid)
    save_db(db)
    return result

@app.post("/api/v1/product/product-filters")
@guarded("Error WHile Filtering Products")
async def product_filters(request: Request):
    data = await _body(request)
    return products.filter_products(get_db(), data.get("checked"), data.get("radio"))

@app.get("/api/v1/product/product-count")
@guarded("Error in product count")
async def product_count():
    return products.product_count(get_db())

@app.get("/api/v1/product/product-list/{page}")
@guarded("Error while getting product page")
async def product_list(page: int):
    return products.product_list(get_db(), page)

@app.get("/api/v1/product/search/{keyword}")
@guarded("Error in search product API")
async def search(keyword: str):
    return products.search_products(get_db(), keyword)

@app.get("/api/v1/product/related-product/{pid}/{cid}")
@guarded("Error while getting related products")
async def related_products(pid: str, cid: str):
    return products.related_products(get_db(), pid, cid)

@app.get("/api/v1/product/product-category/{slug}")
@guarded("Error while getting category products")
async def product_category(slug: str):
    return products.products_by_category(get_db(), slug)


# ============================================================
# PAYMENTS
# ============================================================
@app.get("/api/v1/product/braintree/token")
@guarded("Error while generating client token")
async def braintree_token():
    return {"clientToken": payments.get_gateway().generate_client_token()}

@app.post("/api/v1/product/braintree/payment")
@guarded("Error while processing payment")
async def braintree_payment(request: Request, user: dict = Depends(require_sign_in)):
    data = await _body(request)
    db = get_db()
    result = payments.checkout(db, user, data.get("nonce"), data.get("cart"))
    save_db(db)
    return result


if __name__ == "__main__":
    import uvicorn
    print(f"Starting {PRODUCT_NAME} v{VERSION} on port {PORT}")
    print(f"Storage: {STORAGE_BACKEND}, payments: {PAYMENT_GATEWAY}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
