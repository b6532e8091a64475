"""The seven risk signals.

Every signal has the same contract, `(txn, ctx) -> SignalResult`, and always
returns a result: a signal with nothing to flag reports score 0 and severity
"none" instead of being left out of the breakdown.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Protocol, Tuple

from fraud_scoring.models.transaction import SignalResult, TransactionRequest
from fraud_scoring.services.currency import to_usd
from fraud_scoring.services.offender_ledger import ENTITY_CARD_BIN, ENTITY_EMAIL

EMAIL_VELOCITY_WINDOW = timedelta(minutes=10)
CARD_BIN_VELOCITY_WINDOW = timedelta(minutes=30)
KNOWN_PATTERN_MIN_BLOCKS = 3

CATEGORY_SCORES = {
    "Gift Cards": 20,
    "Electronics": 15,
    "Fashion": 5,
    "Home Goods": 0,
}


class HistoryAccessor(Protocol):
    def count_since(self, field: str, value: str, since: datetime) -> int:
        """Count stored transactions with `field == value` created strictly after `since`."""
        ...


class BlockCountLookup(Protocol):
    def get_block_count(self, entity_type: str, entity_value: str) -> int:
        ...


@dataclass(frozen=True)
class ScoringContext:
    now: datetime
    history: HistoryAccessor
    ledger: BlockCountLookup


Signal = Callable[[TransactionRequest, ScoringContext], SignalResult]


def _severity(score: int, high: int, medium: int) -> str:
    if score >= high:
        return "high"
    if score >= medium:
        return "medium"
    if score > 0:
        return "low"
    return "none"


def high_risk_product(txn: TransactionRequest, ctx: ScoringContext) -> SignalResult:
    score = CATEGORY_SCORES.get(txn.product_category, 0)
    if score > 0:
        desc = f'Product category "{txn.product_category}" is high-risk'
    else:
        desc = f'Product category "{txn.product_category}" is low-risk'
    return SignalResult(
        signal="high_risk_product",
        score=score,
        description=desc,
        severity=_severity(score, high=15, medium=5),
    )


def account_age(txn: TransactionRequest, ctx: ScoringContext) -> SignalResult:
    days = txn.account_age_days
    if days == 0:
        score = 20
    elif days <= 7:
        score = 15
    elif days <= 30:
        score = 10
    elif days <= 90:
        score = 5
    else:
        score = 0

    if score > 0:
        desc = f"Account is only {days} days old"
    else:
        desc = f"Account is {days} days old (established)"
    return SignalResult(
        signal="account_age",
        score=score,
        description=desc,
        severity=_severity(score, high=15, medium=5),
    )


def amount_anomaly(txn: TransactionRequest, ctx: ScoringContext) -> SignalResult:
    usd_amount = to_usd(txn.amount, txn.currency)
    if usd_amount > 1500:
        score = 15
    elif usd_amount > 1000:
        score = 10
    elif usd_amount > 500:
        score = 5
    else:
        score = 0

    if score > 0:
        desc = f"Transaction amount ${usd_amount:.2f} USD exceeds threshold"
    else:
        desc = f"Transaction amount ${usd_amount:.2f} USD is within normal range"
    return SignalResult(
        signal="amount_anomaly",
        score=score,
        description=desc,
        severity=_severity(score, high=10, medium=5),
    )


def geo_mismatch(txn: TransactionRequest, ctx: ScoringContext) -> SignalResult:
    billing, shipping, ip = txn.billing_country, txn.shipping_country, txn.ip_country

    # All-distinct first, then billing/IP outranks billing/shipping
    if billing != shipping and billing != ip and shipping != ip:
        score = 30
    elif billing != ip:
        score = 15
    elif billing != shipping:
        score = 10
    else:
        score = 0

    if score > 0:
        desc = f"Geographic mismatch detected (billing: {billing}, shipping: {shipping}, IP: {ip})"
    else:
        desc = "All geographic locations match"
    return SignalResult(
        signal="geo_mismatch",
        score=score,
        description=desc,
        severity=_severity(score, high=20, medium=10),
    )


def email_velocity(txn: TransactionRequest, ctx: ScoringContext) -> SignalResult:
    since = ctx.now - EMAIL_VELOCITY_WINDOW
    count = ctx.history.count_since("customer_email", txn.customer_email, since)
    if count >= 6:
        score = 30
    elif count >= 4:
        score = 25
    elif count >= 2:
        score = 15
    else:
        score = 0

    if score > 0:
        desc = f"{count} transactions from this email in last 10 minutes"
    else:
        desc = "Normal email transaction velocity"
    return SignalResult(
        signal="email_velocity",
        score=score,
        description=desc,
        severity=_severity(score, high=25, medium=10),
    )


def card_bin_velocity(txn: TransactionRequest, ctx: ScoringContext) -> SignalResult:
    since = ctx.now - CARD_BIN_VELOCITY_WINDOW
    count = ctx.history.count_since("card_bin", txn.card_bin, since)
    if count >= 4:
        score = 15
    elif count >= 2:
        score = 10
    else:
        score = 0

    if score > 0:
        desc = f"{count} transactions with this card BIN in last 30 minutes"
    else:
        desc = "Normal card BIN transaction velocity"
    return SignalResult(
        signal="card_bin_velocity",
        score=score,
        description=desc,
        severity=_severity(score, high=15, medium=10),
    )


def known_pattern(txn: TransactionRequest, ctx: ScoringContext) -> SignalResult:
    email_blocks = ctx.ledger.get_block_count(ENTITY_EMAIL, txn.customer_email)
    bin_blocks = ctx.ledger.get_block_count(ENTITY_CARD_BIN, txn.card_bin)
    max_blocks = max(email_blocks, bin_blocks)

    if max_blocks >= KNOWN_PATTERN_MIN_BLOCKS:
        return SignalResult(
            signal="known_pattern",
            score=40,
            description=(
                f"Entity has {max_blocks} prior blocks "
                f"(email: {email_blocks}, card BIN: {bin_blocks})"
            ),
            severity="high",
        )
    return SignalResult(
        signal="known_pattern",
        score=0,
        description="No known fraud patterns",
        severity="none",
    )


# Evaluation order; fixes the order of the stored breakdown
SIGNALS: Tuple[Signal, ...] = (
    high_risk_product,
    account_age,
    amount_anomaly,
    geo_mismatch,
    email_velocity,
    card_bin_velocity,
    known_pattern,
)
