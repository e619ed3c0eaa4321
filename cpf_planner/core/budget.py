from __future__ import annotations

from .constants import DEFAULT_PASSIVE_INCOME_YIELD
from .inputs import ClientProfile


def inflate(today_value: float, inflation_annual: float, years: int) -> float:
    """Compound a value in today's dollars forward by ``years``."""
    return today_value * (1 + inflation_annual) ** years


def present_value(future_value: float, discount_rate: float, years: int) -> float:
    if years <= 0:
        return future_value
    return future_value / (1 + discount_rate) ** years


def annual_expenses(profile: ClientProfile, retired: bool, years_from_now: int, multiplier: float = 1.0) -> float:
    """Pre-retirement lifestyle or post-retirement desired spend, optionally inflated."""
    if retired:
        base = profile.goals.desired_monthly_spending * 12
    else:
        base = profile.expenses.annual_total()
    if profile.macro.use_inflation_adjusted:
        base = inflate(base, profile.macro.inflation_rate, years_from_now)
    return base * multiplier


def desired_monthly_spend(profile: ClientProfile, years_from_now: int) -> float:
    spend = profile.goals.desired_monthly_spending
    if profile.macro.use_inflation_adjusted:
        return inflate(spend, profile.macro.inflation_rate, years_from_now)
    return spend


def passive_income(profile: ClientProfile, liquid_assets: float, cpf_life_monthly: float) -> float:
    """Annual yield on liquid assets plus CPF LIFE, rental and side income."""
    return (
        liquid_assets * DEFAULT_PASSIVE_INCOME_YIELD
        + cpf_life_monthly * 12
        + profile.income.rental_income_annual()
        + profile.income.side_income_annual()
    )


def earned_income(profile: ClientProfile, working: bool) -> tuple[float, float]:
    """Return (monthly gross salary, annual earned income incl. bonus) for the year."""
    if not working:
        return 0.0, 0.0
    # Uncapped: the CPF wage ceiling limits contributions, not income
    monthly = profile.income.monthly_gross_income
    return monthly, monthly * 12 + profile.income.annual_bonus
