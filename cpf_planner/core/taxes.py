from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import (
    CPF_TOPUP_RELIEF_CAP,
    EARNED_INCOME_RELIEF_55_TO_59,
    EARNED_INCOME_RELIEF_60_AND_ABOVE,
    EARNED_INCOME_RELIEF_BELOW_55,
    IRAS_TAX_BRACKETS,
    LIFE_INSURANCE_RELIEF_CAP,
    NSMAN_RELIEF,
    PARENT_RELIEF_NOT_SAME_HOUSEHOLD,
    PARENT_RELIEF_NOT_SAME_HOUSEHOLD_HANDICAPPED,
    PARENT_RELIEF_SAME_HOUSEHOLD,
    PARENT_RELIEF_SAME_HOUSEHOLD_HANDICAPPED,
    QUALIFYING_CHILD_RELIEF,
    QUALIFYING_CHILD_RELIEF_DISABLED,
    SRS_RELIEF_CAP,
    TOTAL_PERSONAL_RELIEFS_CAP,
    WORKING_MOTHER_CHILD_RELIEF_1_CHILD,
    WORKING_MOTHER_CHILD_RELIEF_2_CHILDREN,
    WORKING_MOTHER_CHILD_RELIEF_3_PLUS_CHILDREN,
    WORKING_MOTHER_CHILD_RELIEF_CAP,
)
from .cpf import calculate_cpf_relief
from .inputs import TaxReliefInputs


@dataclass
class TaxBreakdown:
    gross_annual_income: float
    cpf_relief: float
    srs_relief: float
    life_insurance_relief: float
    earned_income_relief: float
    qualifying_child_relief: float
    parent_relief: float
    working_mother_relief: float
    nsman_relief: float
    cpf_top_up_relief: float
    total_reliefs: float
    chargeable_income: float
    tax_payable: float
    effective_rate: float
    marginal_rate: float


def earned_income_relief(age: int, has_earned_income: bool) -> float:
    if not has_earned_income:
        return 0.0
    if age >= 60:
        return EARNED_INCOME_RELIEF_60_AND_ABOVE
    if age >= 55:
        return EARNED_INCOME_RELIEF_55_TO_59
    return EARNED_INCOME_RELIEF_BELOW_55


def qualifying_child_relief(num_children: int, num_disabled_children: int) -> float:
    return num_children * QUALIFYING_CHILD_RELIEF + num_disabled_children * QUALIFYING_CHILD_RELIEF_DISABLED


def parent_relief(
    same_household: int,
    not_same_household: int,
    handicapped_same_household: int,
    handicapped_not_same_household: int,
) -> float:
    return (
        same_household * PARENT_RELIEF_SAME_HOUSEHOLD
        + not_same_household * PARENT_RELIEF_NOT_SAME_HOUSEHOLD
        + handicapped_same_household * PARENT_RELIEF_SAME_HOUSEHOLD_HANDICAPPED
        + handicapped_not_same_household * PARENT_RELIEF_NOT_SAME_HOUSEHOLD_HANDICAPPED
    )


def working_mother_relief(
    is_working_mother: bool, num_children: int, num_disabled_children: int, earned_income: float
) -> float:
    """Percentage of the mother's earned income set by the total number of qualifying children."""
    total_children = num_children + num_disabled_children
    if not is_working_mother or total_children <= 0:
        return 0.0
    if total_children >= 3:
        rate = WORKING_MOTHER_CHILD_RELIEF_3_PLUS_CHILDREN
    elif total_children == 2:
        rate = WORKING_MOTHER_CHILD_RELIEF_2_CHILDREN
    else:
        rate = WORKING_MOTHER_CHILD_RELIEF_1_CHILD
    return min(earned_income * rate, WORKING_MOTHER_CHILD_RELIEF_CAP)


def calculate_progressive_tax(chargeable_income: float) -> float:
    if chargeable_income <= 0:
        return 0.0

    tax = 0.0
    remaining = chargeable_income
    prev_bound = 0.0
    for bracket in IRAS_TAX_BRACKETS:
        taxable = min(remaining, bracket.upper_bound - prev_bound)
        if taxable <= 0:
            break
        tax += taxable * bracket.rate
        remaining -= taxable
        prev_bound = bracket.upper_bound
        if remaining <= 0:
            break
    return max(0.0, tax)


def get_marginal_tax_rate(chargeable_income: float) -> float:
    """Rate on the next dollar of chargeable income."""
    if chargeable_income <= 0:
        return 0.0
    for bracket in IRAS_TAX_BRACKETS:
        if chargeable_income <= bracket.upper_bound:
            return bracket.rate
    return IRAS_TAX_BRACKETS[-1].rate


def calculate_annual_tax(
    gross_annual_income: float,
    monthly_gross: float,
    age: int,
    annual_srs_contribution: float = 0.0,
    life_insurance_premium: float = 0.0,
    is_working: bool = True,
    has_srs_relief: bool = False,
    has_life_insurance_relief: bool = False,
    relief_inputs: Optional[TaxReliefInputs] = None,
) -> TaxBreakdown:
    """Resident income tax for one year of assessment.

    Every relief is computed on its own, the sum is capped at the personal
    relief cap, and the progressive brackets are applied to what remains.
    """
    ri = relief_inputs or TaxReliefInputs()

    cpf = calculate_cpf_relief(monthly_gross, age) if is_working else 0.0
    srs = min(annual_srs_contribution, SRS_RELIEF_CAP) if has_srs_relief else 0.0

    # CPF relief crowds out life insurance relief dollar for dollar
    life_insurance = 0.0
    if has_life_insurance_relief and cpf < LIFE_INSURANCE_RELIEF_CAP:
        life_insurance = min(life_insurance_premium, LIFE_INSURANCE_RELIEF_CAP - cpf)

    earned = earned_income_relief(age, is_working)
    qcr = qualifying_child_relief(ri.number_of_children, ri.number_of_disabled_children)
    parents = parent_relief(
        ri.number_of_parents_same_household,
        ri.number_of_parents_not_same_household,
        ri.number_of_handicapped_parents_same_household,
        ri.number_of_handicapped_parents_not_same_household,
    )
    wmcr = (
        working_mother_relief(
            ri.is_working_mother, ri.number_of_children, ri.number_of_disabled_children, gross_annual_income
        )
        if is_working
        else 0.0
    )
    nsman = NSMAN_RELIEF if ri.is_active_nsman else 0.0
    top_up = min(ri.annual_cpf_top_up, CPF_TOPUP_RELIEF_CAP)

    raw_total = cpf + srs + life_insurance + earned + qcr + parents + wmcr + nsman + top_up
    total_reliefs = min(raw_total, TOTAL_PERSONAL_RELIEFS_CAP)

    chargeable = max(0.0, gross_annual_income - total_reliefs)
    tax_payable = calculate_progressive_tax(chargeable)

    return TaxBreakdown(
        gross_annual_income=gross_annual_income,
        cpf_relief=cpf,
        srs_relief=srs,
        life_insurance_relief=life_insurance,
        earned_income_relief=earned,
        qualifying_child_relief=qcr,
        parent_relief=parents,
        working_mother_relief=wmcr,
        nsman_relief=nsman,
        cpf_top_up_relief=top_up,
        total_reliefs=total_reliefs,
        chargeable_income=chargeable,
        tax_payable=tax_payable,
        effective_rate=tax_payable / gross_annual_income if gross_annual_income > 0 else 0.0,
        marginal_rate=get_marginal_tax_rate(chargeable),
    )
