"""
Shared test fixtures for the Fraud Scoring API.

Provides:
- async test client (httpx.AsyncClient against the FastAPI app)
- fresh in-memory SQLite connection per test for engine-level tests
- sample transaction payload factories
"""
import os
import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

# Force test database before importing app
os.environ["DATABASE_PATH"] = ":memory:"

from httpx import AsyncClient, ASGITransport


NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Sample data factories
# ---------------------------------------------------------------------------

def make_transaction(**overrides) -> Dict[str, Any]:
    """Build a sample transaction payload with sensible defaults (scores 0)."""
    base = {
        "amount": 100.00,
        "currency": "USD",
        "customer_email": "customer@example.com",
        "billing_country": "US",
        "shipping_country": "US",
        "ip_country": "US",
        "ip_address": "192.168.1.1",
        "card_bin": "411111",
        "card_last4": "1234",
        "product_category": "Home Goods",
        "account_age_days": 365,
    }
    base.update(overrides)
    return base


def make_low_risk_transaction(**overrides) -> Dict[str, Any]:
    """A clearly safe transaction that should score LOW and auto-approve."""
    defaults = dict(
        amount=25.00,
        customer_email="loyal@gmail.com",
        billing_country="SG",
        shipping_country="SG",
        ip_country="SG",
        product_category="Home Goods",
        account_age_days=730,
    )
    defaults.update(overrides)
    return make_transaction(**defaults)


def make_medium_risk_transaction(**overrides) -> Dict[str, Any]:
    """Fashion(5) + 8 days(10) + $501(5) + billing!=IP(15) = 35, left PENDING by default thresholds."""
    defaults = dict(
        product_category="Fashion",
        account_age_days=8,
        amount=501.00,
        ip_country="RU",
    )
    defaults.update(overrides)
    return make_transaction(**defaults)


def make_high_risk_transaction(**overrides) -> Dict[str, Any]:
    """Gift Cards(20) + new account(20) + $2000(15) + all countries differ(30) = 85."""
    defaults = dict(
        amount=2000.00,
        customer_email="suspicious@tempmail.com",
        billing_country="US",
        shipping_country="NG",
        ip_country="RU",
        product_category="Gift Cards",
        account_age_days=0,
    )
    defaults.update(overrides)
    return make_transaction(**defaults)


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def conn():
    """Isolated in-memory database with schema and default thresholds (20/80)."""
    from fraud_scoring import database

    connection = database.connect(":memory:")
    database.init_db(connection)
    yield connection
    connection.close()


@pytest.fixture
def insert_history(conn):
    """Insert a bare prior transaction row with a given creation time."""
    import uuid
    from fraud_scoring.database import to_timestamp

    def _insert(created_at: datetime, status: str = "PENDING", **overrides) -> str:
        data = make_transaction(**overrides)
        txn_id = str(uuid.uuid4())
        ts = to_timestamp(created_at)
        conn.execute(
            """INSERT INTO transactions
               (id, amount, currency, customer_email, billing_country, shipping_country,
                ip_country, ip_address, card_bin, card_last4, product_category,
                account_age_days, fraud_score, risk_level, score_breakdown, status,
                created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, 'LOW', '[]', ?, ?, ?)""",
            (
                txn_id,
                data["amount"],
                data["currency"],
                data["customer_email"],
                data["billing_country"],
                data["shipping_country"],
                data["ip_country"],
                data["ip_address"],
                data["card_bin"],
                data["card_last4"],
                data["product_category"],
                data["account_age_days"],
                status,
                ts,
                ts,
            ),
        )
        return txn_id

    return _insert


@pytest.fixture
def minutes_ago():
    def _at(minutes: float) -> datetime:
        return NOW - timedelta(minutes=minutes)
    return _at


# ---------------------------------------------------------------------------
# App / client fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def client():
    """Async test client that talks to the FastAPI app with a fresh in-memory DB.

    Each test gets an isolated database: we close any existing connection,
    then re-initialize the schema so tables exist in the new :memory: DB.
    """
    from fraud_scoring import database
    from fraud_scoring.main import app

    database.close_connection()
    database.init_db()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    database.close_connection()
