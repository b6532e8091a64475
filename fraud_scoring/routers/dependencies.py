"""Dependency injection for FastAPI endpoints"""

from fraud_scoring.database import get_connection
from fraud_scoring.repositories import SettingsRepository, TransactionRepository
from fraud_scoring.services.transaction_service import TransactionService


def get_transaction_service() -> TransactionService:
    return TransactionService(get_connection())


def get_transaction_repository() -> TransactionRepository:
    return TransactionRepository(get_connection())


def get_settings_repository() -> SettingsRepository:
    return SettingsRepository(get_connection())
