"""Manual review state machine: PENDING -> APPROVED | BLOCKED, both terminal."""
import logging
import sqlite3
from datetime import datetime
from typing import Optional

from fraud_scoring.database import transaction, utc_now
from fraud_scoring.exceptions import ConflictError, NotFoundError
from fraud_scoring.models.transaction import Transaction
from fraud_scoring.repositories import TransactionRepository
from fraud_scoring.services.offender_ledger import OffenderLedger

logger = logging.getLogger(__name__)

REVIEW_DECISIONS = ("APPROVED", "BLOCKED")


class TransactionLifecycle:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.transactions = TransactionRepository(conn)
        self.ledger = OffenderLedger(conn)

    def review(
        self,
        transaction_id: str,
        decision: str,
        now: Optional[datetime] = None,
    ) -> Transaction:
        """Apply a manual review decision to a PENDING transaction.

        A block also records the transaction's email and card BIN in the
        offender ledger, in the same database transaction as the status change.
        """
        if decision not in REVIEW_DECISIONS:
            raise ValueError(f"Review decision must be one of {REVIEW_DECISIONS}, got {decision!r}")

        now = now or utc_now()
        try:
            with transaction(self.conn):
                updated = self.transactions.update_status(transaction_id, decision, now=now)
                if decision == "BLOCKED":
                    self.ledger.record_block(updated.customer_email, updated.card_bin, now=now)
        except (NotFoundError, ConflictError) as exc:
            logger.warning(
                "Review rejected",
                extra={"transaction_id": transaction_id, "decision": decision, "reason": str(exc)},
            )
            raise

        logger.info(
            "Manual review applied",
            extra={"transaction_id": transaction_id, "status": decision},
        )
        return updated
