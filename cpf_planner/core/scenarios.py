from __future__ import annotations

from datetime import date
from typing import List

from .constants import AssetCategory
from .inputs import (
    Asset,
    ClientProfile,
    CpfInputs,
    ExpenseInputs,
    IncomeInputs,
    InsuranceCoverage,
    Liability,
    LifeEvent,
    MacroAssumptions,
    PropertyInputs,
    RetirementGoals,
    TaxReliefInputs,
)
from .stress_tests import NoStress


def default_macro_assumptions() -> MacroAssumptions:
    return MacroAssumptions(use_inflation_adjusted=True, inflation_rate=0.03, conservative_mode=False)


def default_profile() -> ClientProfile:
    """Provide a reasonable starting point for the UI."""
    return ClientProfile(
        current_age=31,
        gender="Male",
        date_of_birth=date(1995, 1, 1),
        occupation="Private Sector Employee",
        income=IncomeInputs(
            monthly_gross_income=6_000,
            annual_bonus=12_000,
            rental_income_monthly=0,
            side_income_monthly=0,
        ),
        goals=RetirementGoals(
            desired_retirement_age=65,
            desired_monthly_spending=4_000,
            risk_appetite_growth_rate=0.06,
            retirement_sum_tier="FRS",
            cpf_life_plan="standard",
        ),
        cpf=CpfInputs(
            oa_balance=50_000,
            sa_balance=30_000,
            ma_balance=15_000,
            housing_usage_oa_monthly=800,
            shield_plan_premium_ma=600,
        ),
        reliefs=TaxReliefInputs(),
        expenses=ExpenseInputs(monthly_fixed_expenses=2_000, monthly_variable_expenses=1_500),
        macro=default_macro_assumptions(),
        property=PropertyInputs(
            market_value=800_000,
            outstanding_mortgage=400_000,
            cpf_principal_used=100_000,
            appreciation_rate=0.03,
            mortgage_interest_rate=0.035,
            mortgage_years_remaining=20,
        ),
        coverage=InsuranceCoverage(death=500_000, tpd=500_000, early_ci=200_000, late_ci=300_000),
        stress_test=NoStress(),
    )


def default_assets() -> List[Asset]:
    return [
        Asset(id="1", name="Emergency Fund", category=AssetCategory.CASH, current_value=20_000,
              projected_appreciation_rate=0.0025),
        Asset(id="2", name="Stock Portfolio", category=AssetCategory.STOCKS, current_value=50_000,
              projected_appreciation_rate=0.07),
    ]


def default_liabilities() -> List[Liability]:
    return []


def default_life_events() -> List[LifeEvent]:
    return []
