"""Domain exceptions raised by the scoring engine and review lifecycle"""


class FraudScoringError(Exception):
    """Base exception for the fraud scoring core"""

    pass


class UnsupportedCurrencyError(FraudScoringError):
    """Amount is expressed in a currency missing from the rate table"""

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Unsupported currency: {currency}")


class NotFoundError(FraudScoringError):
    """Review action references a transaction that does not exist"""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")


class ConflictError(FraudScoringError):
    """Review action references a transaction that already left PENDING"""

    def __init__(self, transaction_id: str, current_status: str):
        self.transaction_id = transaction_id
        self.current_status = current_status
        super().__init__(f"Transaction {transaction_id} is already {current_status}")
