"""
COTRA Authority Database Module
SQLite with WAL mode for concurrent access
Supports both file-based (production) and in-memory (demo/test) modes
"""
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
import threading
import os
from pathlib import Path

from cotra.crypto.encryption import PublicKey, SecretKey
from cotra.protocol.authority import Authority

# ============================================================================
# Environment Detection
# ============================================================================
IN_MEMORY = os.environ.get("COTRA_IN_MEMORY") == "1"

SERVER_DIR = Path(__file__).parent

if IN_MEMORY:
    DB_PATH = ":memory:"
else:
    DB_PATH = os.environ.get("COTRA_DB_PATH", str(SERVER_DIR / "data" / "authority.db"))

SCHEMA = """
CREATE TABLE IF NOT EXISTS authority_key (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    public_key TEXT NOT NULL,
    secret_key TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS infected (
    hashed_id TEXT PRIMARY KEY,
    reported_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS tainted (
    hashed_id TEXT PRIMARY KEY,
    last_contact_at TEXT NOT NULL,
    reported_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS report_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    infected_count INTEGER NOT NULL,
    tainted_count INTEGER NOT NULL,
    reported_at TEXT NOT NULL
);
"""

# Global lock for write operations
db_lock = threading.Lock()

# Singleton connection for in-memory mode (persists across requests)
_memory_connection = None


def get_connection():
    """Create a new database connection with optimized settings"""
    global _memory_connection

    if IN_MEMORY:
        if _memory_connection is None:
            _memory_connection = sqlite3.connect(
                DB_PATH,
                check_same_thread=False,
                timeout=30.0
            )
            _memory_connection.row_factory = sqlite3.Row
        return _memory_connection

    os.makedirs(os.path.dirname(os.path.abspath(DB_PATH)), exist_ok=True)

    conn = sqlite3.connect(
        DB_PATH,
        check_same_thread=False,
        timeout=30.0  # Wait up to 30 seconds for lock
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    return conn


@contextmanager
def get_db():
    """Database connection context manager, commits on success"""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        # Keep the in-memory connection alive
        if not IN_MEMORY:
            conn.close()


@contextmanager
def write_db():
    """Serialized write operations to prevent 'database is locked' errors"""
    with db_lock:
        with get_db() as conn:
            yield conn


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def init_db():
    """Initialize database schema and the authority keypair"""
    with write_db() as conn:
        conn.executescript(SCHEMA)
        row = conn.execute("SELECT id FROM authority_key WHERE id = 1").fetchone()
        if row is None:
            authority = Authority.unique()
            conn.execute(
                "INSERT INTO authority_key (id, public_key, secret_key, created_at) VALUES (1, ?, ?, ?)",
                (str(authority.public_key), str(authority.secret_key), utc_now())
            )
            print(f"[COTRA DB] Created authority keypair, public key {authority.public_key}")
    print(f"[COTRA DB] Database initialized at {DB_PATH}")


def get_authority() -> Authority:
    """Load the authority keypair. init_db() must have run."""
    with get_db() as conn:
        row = conn.execute("SELECT public_key, secret_key FROM authority_key WHERE id = 1").fetchone()
    if row is None:
        raise RuntimeError("Authority keypair missing, database not initialized")
    return Authority(PublicKey.from_string(row['public_key']), SecretKey.from_string(row['secret_key']))


def reset_memory_db():
    """Reset in-memory database (tests and demo reset)"""
    global _memory_connection

    if not IN_MEMORY or _memory_connection is None:
        return False

    _memory_connection.close()
    _memory_connection = None

    init_db()
    return True
