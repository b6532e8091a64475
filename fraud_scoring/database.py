import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from fraud_scoring.config import settings

_connection: Optional[sqlite3.Connection] = None


def connect(path: str) -> sqlite3.Connection:
    """Open a connection in autocommit mode; writes that must be atomic use `transaction()`."""
    conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def get_connection() -> sqlite3.Connection:
    global _connection
    if _connection is None:
        _connection = connect(settings.database_path)
    return _connection


def close_connection() -> None:
    global _connection
    if _connection is not None:
        _connection.close()
        _connection = None


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements as one write transaction.

    Nested use joins the outer transaction, so a caller can group several
    store operations (status change plus ledger upsert) into a single unit.
    """
    if conn.in_transaction:
        yield conn
        return

    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
        conn.commit()
    except BaseException:
        # A failed COMMIT leaves the transaction open
        if conn.in_transaction:
            conn.rollback()
        raise


def to_timestamp(value: datetime) -> str:
    """Serialize a datetime as a fixed-width UTC ISO string so stored values sort lexically."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def init_schema(conn: Optional[sqlite3.Connection] = None) -> None:
    conn = conn or get_connection()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS transactions (
            id TEXT PRIMARY KEY,
            amount REAL NOT NULL,
            currency TEXT NOT NULL,
            customer_email TEXT NOT NULL,
            billing_country TEXT NOT NULL,
            shipping_country TEXT NOT NULL,
            ip_country TEXT NOT NULL,
            ip_address TEXT,
            card_bin TEXT NOT NULL,
            card_last4 TEXT NOT NULL,
            product_category TEXT NOT NULL,
            account_age_days INTEGER NOT NULL,
            fraud_score INTEGER,
            risk_level TEXT,
            score_breakdown TEXT,
            status TEXT NOT NULL DEFAULT 'PENDING',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_transactions_customer_email ON transactions(customer_email);
        CREATE INDEX IF NOT EXISTS idx_transactions_card_bin ON transactions(card_bin);
        CREATE INDEX IF NOT EXISTS idx_transactions_created_at ON transactions(created_at);
        CREATE INDEX IF NOT EXISTS idx_transactions_status ON transactions(status);
        CREATE INDEX IF NOT EXISTS idx_transactions_risk_level ON transactions(risk_level);

        CREATE TABLE IF NOT EXISTS blocked_entities (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            entity_type TEXT NOT NULL,
            entity_value TEXT NOT NULL,
            block_count INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            UNIQUE(entity_type, entity_value)
        );

        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value INTEGER NOT NULL
        );
    """)


def seed_default_settings(conn: Optional[sqlite3.Connection] = None) -> None:
    """Store the configured default thresholds if none exist."""
    conn = conn or get_connection()
    with transaction(conn):
        for key, value in (
            ("auto_approve_below", settings.default_auto_approve_below),
            ("auto_block_above", settings.default_auto_block_above),
        ):
            conn.execute(
                "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)",
                (key, value),
            )


def init_db(conn: Optional[sqlite3.Connection] = None) -> None:
    """Initialize database: create schema and seed default thresholds."""
    conn = conn or get_connection()
    init_schema(conn)
    seed_default_settings(conn)
