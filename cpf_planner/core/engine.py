from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

import numpy as np

from .budget import annual_expenses, desired_monthly_spend, earned_income, passive_income, present_value
from .constants import (
    CONSERVATIVE_MORTALITY_AGE,
    CPF_LIFE_PAYOUT_START_AGE,
    CPF_RA_CREATION_AGE,
    MORTALITY_AGE,
    project_retirement_sum,
)
from .cpf import (
    CpfBalances,
    PropertySaleProceeds,
    calculate_property_sale_proceeds,
    estimate_cpf_life_monthly_payout,
    project_one_year,
)
from .inputs import Asset, ClientProfile, Liability, LifeEvent
from .mortgage import (
    annual_mortgage_reduction,
    annual_principal_reduction,
    monthly_liability_payments,
    mortgage_balance_after,
)
from .stress_tests import StressState
from .taxes import calculate_annual_tax


@dataclass(frozen=True)
class YearlySnapshot:
    """One simulated year.

    ``living_expenses_today`` is the year's spending in today's dollars;
    ``inflation_adjusted_expenses`` is what is actually deducted that year.
    """

    year: int
    age: int
    gross_income: float
    passive_income: float
    total_income: float
    cpf_oa: float
    cpf_sa: float
    cpf_ma: float
    cpf_total: float
    cpf_contribution_employee: float
    cpf_contribution_employer: float
    cpf_life_monthly_payout: float
    living_expenses_today: float
    inflation_adjusted_expenses: float
    life_event_cost: float
    tax_payable: float
    liability_payments: float
    liquid_assets: float
    fixed_assets: float
    total_assets: float
    total_liabilities: float
    net_worth: float
    liquid_net_worth: float
    monthly_surplus_deficit: float
    cumulative_surplus: float
    is_retired: bool
    income_suspended: bool
    net_worth_pv: float
    liquid_assets_pv: float


@dataclass(frozen=True)
class GapDataPoint:
    age: int
    year: int
    projected_monthly_passive_income: float
    desired_monthly_spend: float  # inflation-adjusted
    gap: float  # positive = surplus, negative = shortfall


@dataclass
class SimulationResult:
    snapshots: List[YearlySnapshot]
    financial_freedom_age: Optional[int]
    projected_shortfall_surplus: float
    mortality_age: int
    retirement_age: int
    gap_analysis: List[GapDataPoint] = field(default_factory=list)
    property_sale_proceeds: Optional[PropertySaleProceeds] = None


def simulation_end_age(profile: ClientProfile) -> int:
    if profile.macro.conservative_mode or profile.stress_test.extends_mortality:
        return CONSERVATIVE_MORTALITY_AGE
    return MORTALITY_AGE[profile.gender]


def _weighted_rate(values: Sequence[float], rates: Sequence[float], fallback: float) -> float:
    """Value-weighted appreciation rate, or ``fallback`` when the group is empty."""
    if len(values) == 0:
        return fallback
    weights = np.asarray(values, dtype=float)
    return float(np.dot(weights, np.asarray(rates, dtype=float)) / max(1.0, weights.sum()))


def run_projection(
    profile: ClientProfile,
    assets: Sequence[Asset],
    liabilities: Sequence[Liability],
    life_events: Sequence[LifeEvent],
    start_year: Optional[int] = None,
) -> SimulationResult:
    """Year-by-year cashflow and net worth from the current age to the mortality age inclusive."""
    start_year = date.today().year if start_year is None else start_year
    mortality_age = simulation_end_age(profile)
    total_years = mortality_age - profile.current_age
    goals = profile.goals
    prop = profile.property
    macro = profile.macro

    liquid = [a for a in assets if a.liquid]
    fixed = [a for a in assets if not a.liquid]

    liquid_assets = sum(a.current_value for a in liquid)
    liquid_rate = _weighted_rate(
        [a.current_value for a in liquid],
        [a.projected_appreciation_rate for a in liquid],
        goals.risk_appetite_growth_rate,
    )

    fixed_values = [a.current_value for a in fixed]
    fixed_rates = [a.projected_appreciation_rate for a in fixed]
    if prop.market_value > 0:
        fixed_values.append(prop.market_value)
        fixed_rates.append(prop.appreciation_rate)
    fixed_assets = sum(fixed_values)
    fixed_rate = _weighted_rate(fixed_values, fixed_rates, prop.appreciation_rate)

    mortgage_balance = prop.outstanding_mortgage
    mortgage_step = annual_mortgage_reduction(prop.outstanding_mortgage, prop.mortgage_years_remaining)
    other_liabilities = sum(l.current_balance for l in liabilities)
    monthly_payments = monthly_liability_payments(liabilities)

    retirement_sum = project_retirement_sum(
        goals.retirement_sum_tier, start_year + (CPF_RA_CREATION_AGE - profile.current_age)
    )

    balances = CpfBalances(profile.cpf.oa_balance, profile.cpf.sa_balance, profile.cpf.ma_balance)
    stress_state = StressState()
    cumulative_surplus = 0.0
    financial_freedom_age: Optional[int] = None

    snapshots: List[YearlySnapshot] = []
    gap_analysis: List[GapDataPoint] = []

    for y in range(total_years + 1):
        age = profile.current_age + y
        year = start_year + y
        retired = age >= goals.desired_retirement_age

        # Stress test activation and ongoing effects
        stress = stress_state.advance(profile.stress_test, age)
        if stress.liquid_loss_fraction:
            liquid_assets *= 1 - stress.liquid_loss_fraction
        liquid_assets += stress.lump_sum

        # Income
        working = not retired and not stress.income_zero
        monthly_gross, earned = earned_income(profile, working)
        gross_income = earned + profile.income.rental_income_annual() + profile.income.side_income_annual()

        cpf_life_monthly = (
            estimate_cpf_life_monthly_payout(balances, age, retirement_sum, goals.cpf_life_plan)
            if age >= CPF_LIFE_PAYOUT_START_AGE
            else 0.0
        )
        passive = passive_income(profile, liquid_assets, cpf_life_monthly)
        total_income = passive if retired else gross_income

        # Expenses
        expenses = annual_expenses(profile, retired, y, stress.expense_multiplier)
        expenses_today = annual_expenses(profile, retired, 0, stress.expense_multiplier)

        # Life events
        life_event_cost = sum(e.cost for e in life_events if e.occurs_in(year, profile.current_age, start_year))

        # CPF
        balances, contributions = project_one_year(
            balances,
            monthly_gross,
            age,
            working,
            0.0 if retired else profile.cpf.housing_usage_oa_monthly,
            profile.cpf.shield_plan_premium_ma,
        )

        # Tax
        reliefs = profile.reliefs
        tax = calculate_annual_tax(
            gross_income,
            monthly_gross,
            age,
            reliefs.annual_srs_contribution,
            reliefs.life_insurance_premium,
            is_working=working,
            has_srs_relief=reliefs.annual_srs_contribution > 0,
            has_life_insurance_relief=reliefs.life_insurance_premium > 0,
            relief_inputs=reliefs,
        )

        # Net cashflow; life events leave liquid assets only through this line
        liability_payments = monthly_payments * 12
        net_cashflow = (
            total_income
            - expenses
            - tax.tax_payable
            - (contributions.employee_total if working else 0.0)
            - life_event_cost
            - liability_payments
        )
        cumulative_surplus += net_cashflow

        # Asset growth
        liquid_assets = (liquid_assets + net_cashflow) * (1 + liquid_rate)
        fixed_assets *= 1 + fixed_rate

        # Liabilities
        if y < prop.mortgage_years_remaining:
            mortgage_balance = max(0.0, mortgage_balance - mortgage_step)
        other_liabilities = max(0.0, other_liabilities - annual_principal_reduction(monthly_payments))
        total_liabilities = mortgage_balance + other_liabilities

        # Totals
        cpf_total = balances.total
        total_assets = liquid_assets + fixed_assets + cpf_total
        net_worth = total_assets - total_liabilities
        liquid_net_worth = liquid_assets + cpf_total - total_liabilities

        if macro.use_inflation_adjusted:
            net_worth_pv = present_value(net_worth, macro.inflation_rate, y)
            liquid_assets_pv = present_value(liquid_assets, macro.inflation_rate, y)
        else:
            net_worth_pv = net_worth
            liquid_assets_pv = liquid_assets

        snapshots.append(
            YearlySnapshot(
                year=year,
                age=age,
                gross_income=gross_income,
                passive_income=passive,
                total_income=total_income,
                cpf_oa=balances.oa,
                cpf_sa=balances.sa,
                cpf_ma=balances.ma,
                cpf_total=cpf_total,
                cpf_contribution_employee=contributions.employee_total,
                cpf_contribution_employer=contributions.employer_total,
                cpf_life_monthly_payout=cpf_life_monthly,
                living_expenses_today=expenses_today,
                inflation_adjusted_expenses=expenses,
                life_event_cost=life_event_cost,
                tax_payable=tax.tax_payable,
                liability_payments=liability_payments,
                liquid_assets=liquid_assets,
                fixed_assets=fixed_assets,
                total_assets=total_assets,
                total_liabilities=total_liabilities,
                net_worth=net_worth,
                liquid_net_worth=liquid_net_worth,
                monthly_surplus_deficit=net_cashflow / 12,
                cumulative_surplus=cumulative_surplus,
                is_retired=retired,
                income_suspended=stress.income_zero,
                net_worth_pv=net_worth_pv,
                liquid_assets_pv=liquid_assets_pv,
            )
        )

        # Gap analysis
        if retired:
            monthly_passive = passive / 12
            desired = desired_monthly_spend(profile, y)
            gap_analysis.append(
                GapDataPoint(
                    age=age,
                    year=year,
                    projected_monthly_passive_income=monthly_passive,
                    desired_monthly_spend=desired,
                    gap=monthly_passive - desired,
                )
            )
            if financial_freedom_age is None and monthly_passive >= desired:
                financial_freedom_age = age

    property_sale_proceeds = None
    if prop.market_value > 0:
        property_sale_proceeds = calculate_property_sale_proceeds(
            prop.market_value * (1 + prop.appreciation_rate) ** total_years,
            mortgage_balance_after(prop.outstanding_mortgage, prop.mortgage_years_remaining, total_years),
            prop.cpf_principal_used,
            total_years,
        )

    return SimulationResult(
        snapshots=snapshots,
        financial_freedom_age=financial_freedom_age,
        projected_shortfall_surplus=snapshots[-1].net_worth if snapshots else 0.0,
        mortality_age=mortality_age,
        retirement_age=goals.desired_retirement_age,
        gap_analysis=gap_analysis,
        property_sale_proceeds=property_sale_proceeds,
    )
