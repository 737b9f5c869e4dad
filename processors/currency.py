"""
Currency Module - Static-rate conversion between supported currencies
"""

# USD-based rates (1 USD = X currency)
USD_RATES = {
    'USD': 1.0,
    'HKD': 7.80,
    'SGD': 1.35,
    'MYR': 4.48,
    'GBP': 0.79,
    'CNY': 7.28,
    'EUR': 0.93,
}


def convert_currency(amount: float, from_currency: str, to_currency: str) -> float:
    """Convert an amount using the static rate table"""
    if from_currency == to_currency:
        return amount
    if from_currency not in USD_RATES or to_currency not in USD_RATES:
        raise ValueError(f"Unsupported currency conversion: {from_currency} -> {to_currency}")
    amount_in_usd = amount / USD_RATES[from_currency]
    return amount_in_usd * USD_RATES[to_currency]
