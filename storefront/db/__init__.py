"""
Storefront — Database Layer
File-based JSON document store with PostgreSQL upgrade path.
"""
import json
import uuid
from datetime import datetime

from storefront.config import DB_PATH, UPLOAD_DIR, PERSIST_DATA, DATABASE_URL

# ============================================================
# EMPTY DB SCHEMA
# ============================================================
EMPTY_DB = {
    "users": [], "categories": [], "products": [],
    "orders": [], "activity_log": [],
}

def _fresh_db():
    """Return a fresh empty database."""
    return json.loads(json.dumps(EMPTY_DB))

def _backfill(db):
    for k, v in EMPTY_DB.items():
        if k not in db:
            db[k] = type(v)()
    return db

# ============================================================
# FILE BACKEND
# ============================================================
_db_cache = None

def _file_load():
    global _db_cache
    if DB_PATH.exists():
        try:
            with open(DB_PATH) as f:
                _db_cache = _backfill(json.load(f))
        except (json.JSONDecodeError, IOError) as e:
            print(f"[DB] Could not read {DB_PATH.name}: {e}, starting empty")
            _db_cache = _fresh_db()
    else:
        _db_cache = _fresh_db()
    return _db_cache

def _file_save(db):
    global _db_cache
    _db_cache = db
    if PERSIST_DATA:
        tmp = DB_PATH.with_suffix(".tmp")
        with open(tmp, "w") as f:
            json.dump(db, f, indent=2, default=str)
        tmp.replace(DB_PATH)

def _file_get():
    if _db_cache is None:
        return _file_load()
    return _db_cache

# ============================================================
# POSTGRES BACKEND (optional)
# ============================================================
_pg_pool = None

def _pg_connect():
    """Initialize PostgreSQL connection pool."""
    global _pg_pool
    if DATABASE_URL and not _pg_pool:
        import psycopg2.pool
        _pg_pool = psycopg2.pool.SimpleConnectionPool(1, 5, DATABASE_URL)
        _pg_init()
        print("[DB] Connected to PostgreSQL")

def _pg_init():
    """Create the state table if it doesn't exist."""
    conn = _pg_pool.getconn()
    try:
        cur = conn.cursor()
        cur.execute("""
            CREATE TABLE IF NOT EXISTS store_state (
                id TEXT PRIMARY KEY DEFAULT 'main',
                data JSONB NOT NULL DEFAULT '{}',
                updated_at TIMESTAMP DEFAULT NOW()
            )
        """)
        cur.execute("INSERT INTO store_state (id, data) VALUES ('main', %s) ON CONFLICT DO NOTHING",
                    (json.dumps(EMPTY_DB),))
        conn.commit()
    except Exception as e:
        print(f"[DB] pg_init error: {e}")
        conn.rollback()
        raise
    finally:
        _pg_pool.putconn(conn)

def _pg_load():
    conn = _pg_pool.getconn()
    try:
        cur = conn.cursor()
        cur.execute("SELECT data FROM store_state WHERE id='main'")
        row = cur.fetchone()
        return _backfill(row[0]) if row else _fresh_db()
    finally:
        _pg_pool.putconn(conn)

def _pg_save(db):
    conn = _pg_pool.getconn()
    try:
        cur = conn.cursor()
        cur.execute("UPDATE store_state SET data=%s, updated_at=NOW() WHERE id='main'",
                    (json.dumps(db, default=str),))
        conn.commit()
    finally:
        _pg_pool.putconn(conn)

# ============================================================
# PUBLIC API
# ============================================================
if DATABASE_URL:
    print("[DB] Using PostgreSQL backend")
    _pg_connect()
    STORAGE_BACKEND = "postgres"
    load_db = _pg_load
    save_db = _pg_save
    get_db = _pg_load
else:
    print(f"[DB] Using file backend ({DB_PATH.name})")
    STORAGE_BACKEND = "file"
    load_db = _file_load
    save_db = _file_save
    get_db = _file_get


def reset_db():
    """Wipe all collections and uploaded photos."""
    save_db(_fresh_db())
    for fp in UPLOAD_DIR.iterdir():
        if fp.is_file():
            fp.unlink()

# ============================================================
# DOCUMENT HELPERS
# ============================================================
def new_id() -> str:
    """24-hex document id (same width as a Mongo ObjectId)."""
    return uuid.uuid4().hex[:24]

def now_iso() -> str:
    return datetime.now().isoformat()

def find_by_id(db: dict, collection: str, doc_id: str):
    return next((d for d in db[collection] if d["_id"] == doc_id), None)

def newest_first(docs: list) -> list:
    """Sort by createdAt descending; later inserts win ties."""
    indexed = list(enumerate(docs))
    indexed.sort(key=lambda p: (p[1].get("createdAt", ""), p[0]), reverse=True)
    return [d for _, d in indexed]

def log_activity(db: dict, action: str, **details):
    db["activity_log"].append({"id": str(uuid.uuid4())[:8], "action": action,
                               "timestamp": now_iso(), **details})
    if len(db["activity_log"]) > 500:
        db["activity_log"] = db["activity_log"][-500:]

# ============================================================
# FILE STORAGE
# ============================================================
def save_uploaded_file(filename: str, content: bytes) -> None:
    """Save an uploaded file to local filesystem."""
    path = UPLOAD_DIR / filename
    path.write_bytes(content)

def load_uploaded_file(filename: str) -> tuple:
    """Load an uploaded file, return (path, exists)."""
    path = UPLOAD_DIR / filename
    return path, path.is_file()

def delete_uploaded_file(filename: str) -> None:
    path = UPLOAD_DIR / filename
    if path.is_file():
        path.unlink()
