"""Data access layer for transactions and scoring settings"""

import json
import sqlite3
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from fraud_scoring.database import to_timestamp, transaction, utc_now
from fraud_scoring.exceptions import ConflictError, NotFoundError
from fraud_scoring.models.settings import ScoringSettings, ScoringSettingsUpdate
from fraud_scoring.models.transaction import (
    ScoreResult,
    SignalResult,
    Transaction,
    TransactionRequest,
    TransactionStats,
)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

# Columns velocity lookups may filter on
VELOCITY_FIELDS = {"customer_email", "card_bin"}


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    data: Dict[str, Any] = dict(row)
    raw_breakdown = data.pop("score_breakdown")
    breakdown = json.loads(raw_breakdown) if raw_breakdown else []
    return Transaction(
        **data,
        score_breakdown=[SignalResult(**item) for item in breakdown],
    )


class TransactionRepository:
    """Repository for scored transactions"""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create(
        self,
        txn: TransactionRequest,
        scoring: ScoreResult,
        status: str,
        now: Optional[datetime] = None,
    ) -> Transaction:
        """Insert a scored transaction with its initial status in one statement."""
        transaction_id = str(uuid.uuid4())
        ts = to_timestamp(now or utc_now())
        breakdown_json = json.dumps([r.model_dump() for r in scoring.score_breakdown])

        with transaction(self.conn):
            self.conn.execute(
                """INSERT INTO transactions
                   (id, amount, currency, customer_email,
                    billing_country, shipping_country, ip_country, ip_address,
                    card_bin, card_last4, product_category, account_age_days,
                    fraud_score, risk_level, score_breakdown, status,
                    created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    transaction_id,
                    txn.amount,
                    txn.currency,
                    txn.customer_email,
                    txn.billing_country,
                    txn.shipping_country,
                    txn.ip_country,
                    txn.ip_address,
                    txn.card_bin,
                    txn.card_last4,
                    txn.product_category,
                    txn.account_age_days,
                    scoring.fraud_score,
                    scoring.risk_level,
                    breakdown_json,
                    status,
                    ts,
                    ts,
                ),
            )

        return self.find_by_id(transaction_id)

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        row = self.conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (transaction_id,)
        ).fetchone()
        if row is None:
            return None
        return _row_to_transaction(row)

    def find_all(
        self,
        risk_level: Optional[str] = None,
        status: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[Transaction], int, int]:
        """Return (page, total matching, effective limit), newest first."""
        conditions = []
        params: List[Any] = []

        if risk_level:
            conditions.append("risk_level = ?")
            params.append(risk_level)
        if status:
            conditions.append("status = ?")
            params.append(status)
        if created_from:
            conditions.append("created_at >= ?")
            params.append(to_timestamp(created_from))
        if created_to:
            conditions.append("created_at <= ?")
            params.append(to_timestamp(created_to))

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        limit = min(limit or DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)

        total = self.conn.execute(
            f"SELECT COUNT(*) as cnt FROM transactions {where}", params
        ).fetchone()["cnt"]
        rows = self.conn.execute(
            f"SELECT * FROM transactions {where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
            (*params, limit, offset),
        ).fetchall()

        return [_row_to_transaction(row) for row in rows], total, limit

    def update_status(
        self,
        transaction_id: str,
        new_status: str,
        now: Optional[datetime] = None,
    ) -> Transaction:
        """Move a PENDING transaction to `new_status`.

        The status check and the write are one compare-and-swap statement, so
        of two concurrent reviews on the same transaction only one can win.
        """
        ts = to_timestamp(now or utc_now())
        with transaction(self.conn):
            cursor = self.conn.execute(
                "UPDATE transactions SET status = ?, updated_at = ? WHERE id = ? AND status = 'PENDING'",
                (new_status, ts, transaction_id),
            )
            if cursor.rowcount == 0:
                current = self.find_by_id(transaction_id)
                if current is None:
                    raise NotFoundError(transaction_id)
                raise ConflictError(transaction_id, current.status)

        return self.find_by_id(transaction_id)

    def count_since(self, field: str, value: str, since: datetime) -> int:
        """Velocity lookup: stored transactions with `field == value` created after `since`."""
        if field not in VELOCITY_FIELDS:
            raise ValueError(f"Unsupported velocity field: {field}")
        row = self.conn.execute(
            f"SELECT COUNT(*) as cnt FROM transactions WHERE {field} = ? AND created_at > ?",
            (value, to_timestamp(since)),
        ).fetchone()
        return row["cnt"]

    def get_stats(self) -> TransactionStats:
        row = self.conn.execute("""
            SELECT
                COUNT(*) as total_transactions,
                COALESCE(SUM(CASE WHEN status = 'PENDING' THEN 1 ELSE 0 END), 0) as pending,
                COALESCE(SUM(CASE WHEN status = 'APPROVED' THEN 1 ELSE 0 END), 0) as approved,
                COALESCE(SUM(CASE WHEN status = 'BLOCKED' THEN 1 ELSE 0 END), 0) as blocked,
                COALESCE(AVG(fraud_score), 0) as avg_fraud_score,
                COALESCE(SUM(CASE WHEN risk_level = 'HIGH' THEN 1 ELSE 0 END), 0) as high_risk_count,
                COALESCE(SUM(CASE WHEN risk_level = 'MEDIUM' THEN 1 ELSE 0 END), 0) as medium_risk_count,
                COALESCE(SUM(CASE WHEN risk_level = 'LOW' THEN 1 ELSE 0 END), 0) as low_risk_count
            FROM transactions
        """).fetchone()
        stats = dict(row)
        stats["avg_fraud_score"] = round(stats["avg_fraud_score"], 2)
        return TransactionStats(**stats)


class SettingsRepository:
    """Repository for the auto-action thresholds"""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self) -> ScoringSettings:
        rows = self.conn.execute("SELECT key, value FROM settings").fetchall()
        return ScoringSettings(**{row["key"]: row["value"] for row in rows})

    def update(self, updates: ScoringSettingsUpdate) -> ScoringSettings:
        with transaction(self.conn):
            for key, value in updates.model_dump(exclude_none=True).items():
                self.conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, value),
                )
        return self.get()
