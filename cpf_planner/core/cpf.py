from __future__ import annotations

from dataclasses import dataclass, replace

from .constants import (
    CPF_ALLOCATION_RATES,
    CPF_EXTRA_INTEREST_FIRST_60K,
    CPF_EXTRA_INTEREST_FIRST_TIER,
    CPF_EXTRA_INTEREST_NEXT_30K,
    CPF_EXTRA_INTEREST_SECOND_TIER,
    CPF_LIFE_PAYOUT_START_AGE,
    CPF_LIFE_PLANS,
    CPF_MA_INTEREST_RATE,
    CPF_MONTHLY_SALARY_CEILING,
    CPF_OA_INTEREST_RATE,
    CPF_RA_CREATION_AGE,
    CPF_RA_INTEREST_RATE,
    CPF_SA_INTEREST_RATE,
    CpfRateBracket,
)


@dataclass
class CpfBalances:
    oa: float = 0.0
    sa: float = 0.0
    ma: float = 0.0

    @property
    def total(self) -> float:
        return self.oa + self.sa + self.ma


@dataclass
class CpfContributions:
    employee_total: float = 0.0
    employer_total: float = 0.0
    oa_contribution: float = 0.0
    sa_contribution: float = 0.0
    ma_contribution: float = 0.0


@dataclass
class PropertySaleProceeds:
    market_value: float
    outstanding_loan: float
    cpf_principal_used: float
    cpf_accrued_interest: float
    net_cash_proceeds: float


def get_rate_bracket(age: int) -> CpfRateBracket:
    for bracket in CPF_ALLOCATION_RATES:
        if age <= bracket.max_age:
            return bracket
    return CPF_ALLOCATION_RATES[-1]


def _capped_annual_wage(monthly_gross: float) -> float:
    return min(monthly_gross, CPF_MONTHLY_SALARY_CEILING) * 12


def calculate_annual_contributions(monthly_gross: float, age: int) -> CpfContributions:
    """Annual contributions on ordinary wage, capped at the monthly ceiling."""
    if monthly_gross <= 0:
        return CpfContributions()
    bracket = get_rate_bracket(age)
    annual_wage = _capped_annual_wage(monthly_gross)
    return CpfContributions(
        employee_total=annual_wage * bracket.employee_rate,
        employer_total=annual_wage * bracket.employer_rate,
        oa_contribution=annual_wage * bracket.oa_allocation,
        sa_contribution=annual_wage * bracket.sa_allocation,
        ma_contribution=annual_wage * bracket.ma_allocation,
    )


def _extra_interest(balances: CpfBalances) -> CpfBalances:
    """Extra interest by account.

    The first $60k of combined balances earns +1%, drawn from OA, then SA,
    then MA. The next $30k earns a further +1% but only from SA and MA.
    """
    extra = CpfBalances()

    remaining = CPF_EXTRA_INTEREST_FIRST_TIER
    oa_first = min(remaining, balances.oa)
    remaining -= oa_first
    sa_first = min(remaining, balances.sa)
    remaining -= sa_first
    ma_first = min(remaining, balances.ma)

    extra.oa += oa_first * CPF_EXTRA_INTEREST_FIRST_60K
    extra.sa += sa_first * CPF_EXTRA_INTEREST_FIRST_60K
    extra.ma += ma_first * CPF_EXTRA_INTEREST_FIRST_60K

    remaining = CPF_EXTRA_INTEREST_SECOND_TIER
    sa_second = min(remaining, balances.sa - sa_first)
    remaining -= sa_second
    ma_second = min(remaining, balances.ma - ma_first)

    extra.sa += sa_second * CPF_EXTRA_INTEREST_NEXT_30K
    extra.ma += ma_second * CPF_EXTRA_INTEREST_NEXT_30K
    return extra


def apply_interest(balances: CpfBalances) -> CpfBalances:
    extra = _extra_interest(balances)
    return CpfBalances(
        oa=balances.oa * (1 + CPF_OA_INTEREST_RATE) + extra.oa,
        sa=balances.sa * (1 + CPF_SA_INTEREST_RATE) + extra.sa,
        ma=balances.ma * (1 + CPF_MA_INTEREST_RATE) + extra.ma,
    )


def apply_deductions(balances: CpfBalances, housing_monthly: float, shield_annual: float) -> CpfBalances:
    """Housing instalments come out of OA and shield premiums out of MA."""
    return CpfBalances(
        oa=max(0.0, balances.oa - housing_monthly * 12),
        sa=balances.sa,
        ma=max(0.0, balances.ma - shield_annual),
    )


def project_one_year(
    balances: CpfBalances,
    monthly_gross: float,
    age: int,
    is_working: bool,
    housing_monthly: float,
    shield_annual: float,
) -> tuple[CpfBalances, CpfContributions]:
    """Contributions, then deductions, then interest."""
    contributions = CpfContributions()
    updated = replace(balances)

    if is_working and monthly_gross > 0:
        contributions = calculate_annual_contributions(monthly_gross, age)
        updated.oa += contributions.oa_contribution
        updated.sa += contributions.sa_contribution
        updated.ma += contributions.ma_contribution

    updated = apply_deductions(updated, housing_monthly, shield_annual)
    updated = apply_interest(updated)
    return updated, contributions


def estimate_ra_balance(balances: CpfBalances, current_age: int, retirement_sum: float) -> float:
    """Retirement Account balance expected at the payout start age."""
    years_to_payout = max(0, CPF_LIFE_PAYOUT_START_AGE - max(current_age, CPF_RA_CREATION_AGE))

    if current_age < CPF_RA_CREATION_AGE:
        years_to_creation = CPF_RA_CREATION_AGE - current_age
        sa = balances.sa * (1 + CPF_SA_INTEREST_RATE) ** years_to_creation
        oa = balances.oa * (1 + CPF_OA_INTEREST_RATE) ** years_to_creation
        from_sa = min(sa, retirement_sum)
        from_oa = min(oa, retirement_sum - from_sa)
        ra_at_creation = from_sa + from_oa
    else:
        ra_at_creation = min(balances.sa + balances.oa, retirement_sum)

    return ra_at_creation * (1 + CPF_RA_INTEREST_RATE) ** years_to_payout


def estimate_cpf_life_monthly_payout(
    balances: CpfBalances,
    current_age: int,
    retirement_sum: float,
    plan: str = "standard",
) -> float:
    life_plan = CPF_LIFE_PLANS[plan]
    ra = estimate_ra_balance(balances, current_age, retirement_sum)
    payout = ra * life_plan.payout_per_dollar_ra

    years_paid = max(0, current_age - CPF_LIFE_PAYOUT_START_AGE)
    if life_plan.annual_escalation:
        payout *= (1 + life_plan.annual_escalation) ** years_paid
    return payout


def calculate_cpf_relief(monthly_gross: float, age: int) -> float:
    """Tax relief for the employee's own contribution on capped wage."""
    bracket = get_rate_bracket(age)
    return _capped_annual_wage(max(0.0, monthly_gross)) * bracket.employee_rate


def calculate_property_sale_proceeds(
    market_value: float,
    outstanding_loan: float,
    cpf_principal_used: float,
    years_of_ownership: float,
) -> PropertySaleProceeds:
    """CPF principal plus accrued OA interest is refunded before any cash is released."""
    accrued = cpf_principal_used * ((1 + CPF_OA_INTEREST_RATE) ** years_of_ownership - 1)
    net = market_value - outstanding_loan - cpf_principal_used - accrued
    return PropertySaleProceeds(
        market_value=market_value,
        outstanding_loan=outstanding_loan,
        cpf_principal_used=cpf_principal_used,
        cpf_accrued_interest=accrued,
        net_cash_proceeds=max(0.0, net),
    )
