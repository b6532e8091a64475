from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from fraud_scoring.exceptions import NotFoundError
from fraud_scoring.models.transaction import (
    RiskLevel,
    Status,
    StatusUpdateRequest,
    Transaction,
    TransactionList,
    TransactionRequest,
)
from fraud_scoring.repositories import TransactionRepository
from fraud_scoring.routers.dependencies import (
    get_transaction_repository,
    get_transaction_service,
)
from fraud_scoring.services.transaction_service import TransactionService

router = APIRouter(tags=["transactions"])


@router.post("/transactions", response_model=Transaction, status_code=201)
async def submit_transaction(
    txn: TransactionRequest,
    service: TransactionService = Depends(get_transaction_service),
) -> Transaction:
    """Score a transaction across 7 risk signals and apply the auto-action thresholds."""
    return service.submit_transaction(txn)


@router.get("/transactions", response_model=TransactionList)
async def list_transactions(
    risk_level: Optional[RiskLevel] = None,
    status: Optional[Status] = None,
    created_from: Optional[datetime] = Query(None, alias="from"),
    created_to: Optional[datetime] = Query(None, alias="to"),
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    repo: TransactionRepository = Depends(get_transaction_repository),
) -> TransactionList:
    transactions, total, effective_limit = repo.find_all(
        risk_level=risk_level,
        status=status,
        created_from=created_from,
        created_to=created_to,
        limit=limit,
        offset=offset,
    )
    return TransactionList(transactions=transactions, total=total, limit=effective_limit, offset=offset)


@router.get("/transactions/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction_id: str,
    repo: TransactionRepository = Depends(get_transaction_repository),
) -> Transaction:
    txn = repo.find_by_id(transaction_id)
    if txn is None:
        raise NotFoundError(transaction_id)
    return txn


@router.patch("/transactions/{transaction_id}/status", response_model=Transaction)
async def review_transaction(
    transaction_id: str,
    request: StatusUpdateRequest,
    service: TransactionService = Depends(get_transaction_service),
) -> Transaction:
    """Manually approve or block a PENDING transaction."""
    return service.review_transaction(transaction_id, request.status)
