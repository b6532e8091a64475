from fraud_scoring.models.transaction import (
    TransactionRequest,
    SignalResult,
    ScoreResult,
    Transaction,
    TransactionList,
    StatusUpdateRequest,
    TransactionStats,
)
from fraud_scoring.models.settings import (
    ScoringSettings,
    ScoringSettingsUpdate,
)
