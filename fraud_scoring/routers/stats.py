from fastapi import APIRouter, Depends

from fraud_scoring.models.transaction import TransactionStats
from fraud_scoring.repositories import TransactionRepository
from fraud_scoring.routers.dependencies import get_transaction_repository

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=TransactionStats)
async def get_stats(repo: TransactionRepository = Depends(get_transaction_repository)) -> TransactionStats:
    return repo.get_stats()
