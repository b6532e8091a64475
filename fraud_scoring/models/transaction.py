from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Currency = Literal["USD", "IDR", "VND", "PHP", "SGD"]
ProductCategory = Literal["Gift Cards", "Electronics", "Fashion", "Home Goods"]
RiskLevel = Literal["LOW", "MEDIUM", "HIGH"]
Severity = Literal["none", "low", "medium", "high"]
Status = Literal["PENDING", "APPROVED", "BLOCKED"]
ReviewDecision = Literal["APPROVED", "BLOCKED"]


class TransactionRequest(BaseModel):
    amount: float = Field(gt=0)
    currency: Currency
    customer_email: str = Field(pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    billing_country: str = Field(min_length=2, max_length=2)
    shipping_country: str = Field(min_length=2, max_length=2)
    ip_country: str = Field(min_length=2, max_length=2)
    ip_address: Optional[str] = None
    card_bin: str = Field(pattern=r"^\d{6}$")
    card_last4: str = Field(pattern=r"^\d{4}$")
    product_category: ProductCategory
    account_age_days: int = Field(ge=0)


class SignalResult(BaseModel):
    model_config = {"frozen": True}

    signal: str
    score: int = Field(ge=0)
    description: str
    severity: Severity


class ScoreResult(BaseModel):
    fraud_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    score_breakdown: list[SignalResult]


class Transaction(TransactionRequest):
    id: str
    fraud_score: Optional[int] = Field(default=None, ge=0, le=100)
    risk_level: Optional[RiskLevel] = None
    score_breakdown: list[SignalResult] = Field(default_factory=list)
    status: Status = "PENDING"
    created_at: datetime
    updated_at: datetime


class TransactionList(BaseModel):
    transactions: list[Transaction]
    total: int
    limit: int
    offset: int


class StatusUpdateRequest(BaseModel):
    status: ReviewDecision


class TransactionStats(BaseModel):
    total_transactions: int
    pending: int
    approved: int
    blocked: int
    avg_fraud_score: float
    high_risk_count: int
    medium_risk_count: int
    low_risk_count: int
