"""
Mortgage calculator for the property details page.

Standard amortising loan:
    payment = P * r * (1 + r)^n / ((1 + r)^n - 1)
with r the monthly rate and n the number of monthly payments.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_DOWN_PAYMENT_PERCENT = 20.0
DEFAULT_ANNUAL_RATE_PERCENT = 9.0
DEFAULT_TERM_YEARS = 20


@dataclass(frozen=True)
class MortgageQuote:
    """Monthly payment and totals for a loan."""

    property_price: float
    down_payment: float
    principal: float
    annual_rate_percent: float
    term_years: int
    monthly_payment: float
    total_payment: float
    total_interest: float

    @property
    def number_of_payments(self) -> int:
        return self.term_years * 12

    def to_dict(self) -> dict:
        return {
            "property_price": self.property_price,
            "down_payment": round(self.down_payment, 2),
            "principal": round(self.principal, 2),
            "annual_rate_percent": self.annual_rate_percent,
            "term_years": self.term_years,
            "number_of_payments": self.number_of_payments,
            "monthly_payment": round(self.monthly_payment, 2),
            "total_payment": round(self.total_payment, 2),
            "total_interest": round(self.total_interest, 2),
        }


def calculate_mortgage(
    property_price: float,
    down_payment_percent: float = DEFAULT_DOWN_PAYMENT_PERCENT,
    annual_rate_percent: float = DEFAULT_ANNUAL_RATE_PERCENT,
    term_years: int = DEFAULT_TERM_YEARS,
) -> MortgageQuote:
    """
    Calculate the monthly payment for a property purchase.

    Args:
        property_price: Purchase price
        down_payment_percent: Deposit as a percentage of price (0-100)
        annual_rate_percent: Nominal annual interest rate
        term_years: Loan term in years

    Returns:
        MortgageQuote

    Raises:
        ValueError: If any argument is out of range
    """
    if property_price is None or property_price <= 0:
        raise ValueError("property_price must be positive")
    if down_payment_percent < 0 or down_payment_percent > 100:
        raise ValueError("down_payment_percent must be between 0 and 100")
    if annual_rate_percent < 0:
        raise ValueError("annual_rate_percent cannot be negative")
    if term_years is None or term_years <= 0:
        raise ValueError("term_years must be positive")

    down_payment = property_price * down_payment_percent / 100
    principal = property_price - down_payment
    monthly_rate = annual_rate_percent / 100 / 12
    payments = term_years * 12

    if principal == 0:
        monthly_payment = 0.0
    elif monthly_rate == 0:
        monthly_payment = principal / payments
    else:
        growth = (1 + monthly_rate) ** payments
        monthly_payment = principal * monthly_rate * growth / (growth - 1)

    total_payment = monthly_payment * payments
    return MortgageQuote(
        property_price=property_price,
        down_payment=down_payment,
        principal=principal,
        annual_rate_percent=annual_rate_percent,
        term_years=term_years,
        monthly_payment=monthly_payment,
        total_payment=total_payment,
        total_interest=total_payment - principal,
    )
