"""Entry points of the scoring core: submit a transaction, review a transaction."""
import logging
import sqlite3
from datetime import datetime
from typing import Optional

from fraud_scoring.database import utc_now
from fraud_scoring.models.transaction import Transaction, TransactionRequest
from fraud_scoring.repositories import SettingsRepository, TransactionRepository
from fraud_scoring.services.decision_policy import decide_status
from fraud_scoring.services.lifecycle import TransactionLifecycle
from fraud_scoring.services.offender_ledger import OffenderLedger
from fraud_scoring.services.scoring_engine import score_transaction

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, conn: sqlite3.Connection):
        self.transactions = TransactionRepository(conn)
        self.settings = SettingsRepository(conn)
        self.ledger = OffenderLedger(conn)
        self.lifecycle = TransactionLifecycle(conn)

    def submit_transaction(self, txn: TransactionRequest, now: Optional[datetime] = None) -> Transaction:
        """Score, auto-decide and persist a new transaction.

        Thresholds are read on every call so operator changes apply to the
        next submission.
        """
        now = now or utc_now()
        scoring = score_transaction(txn, history=self.transactions, ledger=self.ledger, now=now)
        status = decide_status(scoring.fraud_score, self.settings.get())
        created = self.transactions.create(txn, scoring, status, now=now)

        logger.info(
            "Transaction scored",
            extra={
                "transaction_id": created.id,
                "fraud_score": created.fraud_score,
                "risk_level": created.risk_level,
                "status": created.status,
            },
        )
        if status != "PENDING":
            logger.info("Auto-action applied", extra={"transaction_id": created.id, "status": status})
        return created

    def review_transaction(self, transaction_id: str, decision: str, now: Optional[datetime] = None) -> Transaction:
        return self.lifecycle.review(transaction_id, decision, now=now)
