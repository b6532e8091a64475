from datetime import datetime
from typing import Optional

from fraud_scoring.database import utc_now
from fraud_scoring.models.transaction import ScoreResult, TransactionRequest
from fraud_scoring.services.signals import (
    SIGNALS,
    BlockCountLookup,
    HistoryAccessor,
    ScoringContext,
)

MAX_SCORE = 100


def get_risk_level(score: int) -> str:
    """Map a fraud score to its risk tier."""
    if score >= 71:
        return "HIGH"
    if score >= 31:
        return "MEDIUM"
    return "LOW"


def score_transaction(
    txn: TransactionRequest,
    history: HistoryAccessor,
    ledger: BlockCountLookup,
    now: Optional[datetime] = None,
) -> ScoreResult:
    """Run every signal against a transaction and aggregate the result.

    Read-only: signals only query velocity history and the offender ledger.
    The transaction being scored is not yet stored, so velocity counts
    exclude it.
    """
    ctx = ScoringContext(now=now or utc_now(), history=history, ledger=ledger)
    breakdown = [signal(txn, ctx) for signal in SIGNALS]

    fraud_score = min(sum(result.score for result in breakdown), MAX_SCORE)
    return ScoreResult(
        fraud_score=fraud_score,
        risk_level=get_risk_level(fraud_score),
        score_breakdown=breakdown,
    )
