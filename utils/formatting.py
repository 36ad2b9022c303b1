"""
Formatting utilities.
"""

CRORE = 10_000_000
LAKH = 100_000

SYMBOLS = {
    "BDT": "৳",
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
}


def currency_symbol(currency: str = "BDT") -> str:
    """Symbol for a currency code, or the code followed by a space."""
    return SYMBOLS.get(currency, currency + " ")


def format_currency(amount: int, currency: str = "BDT") -> str:
    """
    Format an integer amount as currency.

    Args:
        amount: The amount in whole units.
        currency: Currency code (default BDT).

    Returns:
        Formatted currency string.
    """
    return f"{currency_symbol(currency)}{amount:,}"


def format_price_compact(amount: int, currency: str = "BDT") -> str:
    """
    Format a price in crore/lakh units.

    12,500,000 -> "৳1.25 Crore", 450,000 -> "৳4.50 Lakh".
    Amounts under one lakh use the full figure.
    """
    symbol = currency_symbol(currency)
    if amount >= CRORE:
        return f"{symbol}{amount / CRORE:.2f} Crore"
    if amount >= LAKH:
        return f"{symbol}{amount / LAKH:.2f} Lakh"
    return f"{symbol}{amount:,}"


def format_percent(value: float, decimals: int = 1, signed: bool = False) -> str:
    """
    Format a number as a percentage.

    Args:
        value: The percentage value.
        decimals: Number of decimal places.
        signed: Prefix positive values with '+'.

    Returns:
        Formatted percentage string.
    """
    sign = "+" if signed and value > 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_area(area_sqft: float) -> str:
    """Format an area in square feet."""
    if float(area_sqft).is_integer():
        return f"{int(area_sqft):,} sq ft"
    return f"{area_sqft:,.1f} sq ft"
