from __future__ import annotations

from typing import Iterable

from .constants import LIABILITY_PRINCIPAL_SHARE
from .inputs import Liability


def annual_mortgage_reduction(outstanding: float, years_remaining: int) -> float:
    """Straight-line principal reduction per year."""
    return outstanding / max(1, years_remaining)


def mortgage_balance_after(outstanding: float, years_remaining: int, years: int) -> float:
    paid_years = min(years, max(0, years_remaining))
    return max(0.0, outstanding - annual_mortgage_reduction(outstanding, years_remaining) * paid_years)


def monthly_liability_payments(liabilities: Iterable[Liability]) -> float:
    return sum(liability.monthly_payment for liability in liabilities)


def annual_principal_reduction(monthly_payments: float) -> float:
    """Portion of a year's repayments assumed to retire principal on non-mortgage debt."""
    return monthly_payments * 12 * LIABILITY_PRINCIPAL_SHARE
