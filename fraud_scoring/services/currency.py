from typing import Dict

from fraud_scoring.exceptions import UnsupportedCurrencyError

# Fixed multiplicative rates into USD
RATES_TO_USD: Dict[str, float] = {
    "USD": 1.0,
    "IDR": 0.000063,
    "VND": 0.000040,
    "PHP": 0.018,
    "SGD": 0.74,
}


def to_usd(amount: float, currency: str) -> float:
    """Convert an amount in a supported currency to USD."""
    rate = RATES_TO_USD.get(currency)
    if rate is None:
        raise UnsupportedCurrencyError(currency)
    return amount * rate
