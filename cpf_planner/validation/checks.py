from __future__ import annotations

from typing import Iterable

from cpf_planner.core.constants import CPF_LIFE_PLANS, CPF_RETIREMENT_SUMS, MORTALITY_AGE
from cpf_planner.core.engine import simulation_end_age
from cpf_planner.core.inputs import (
    Asset,
    ClientProfile,
    CpfInputs,
    ExpenseInputs,
    IncomeInputs,
    Liability,
    LifeEvent,
    MacroAssumptions,
    PropertyInputs,
    RetirementGoals,
    TaxReliefInputs,
)
from cpf_planner.core.stress_tests import STRESS_TEST_KINDS, StressTest


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


def validate_income(inputs: IncomeInputs) -> None:
    _require(inputs.monthly_gross_income >= 0, "Monthly gross income cannot be negative.")
    _require(inputs.annual_bonus >= 0, "Annual bonus cannot be negative.")
    _require(inputs.rental_income_monthly >= 0, "Rental income cannot be negative.")
    _require(inputs.side_income_monthly >= 0, "Side income cannot be negative.")


def validate_goals(inputs: RetirementGoals) -> None:
    _require(40 <= inputs.desired_retirement_age <= 100, "Retirement age must be between 40 and 100.")
    _require(inputs.desired_monthly_spending >= 0, "Desired monthly spending cannot be negative.")
    _require(0 <= inputs.risk_appetite_growth_rate <= 0.20, "Growth rate must be between 0% and 20%.")
    _require(inputs.retirement_sum_tier in CPF_RETIREMENT_SUMS, "Retirement sum tier must be BRS, FRS or ERS.")
    _require(inputs.cpf_life_plan in CPF_LIFE_PLANS, "CPF LIFE plan must be standard, basic or escalating.")


def validate_cpf(inputs: CpfInputs) -> None:
    _require(inputs.oa_balance >= 0, "OA balance cannot be negative.")
    _require(inputs.sa_balance >= 0, "SA balance cannot be negative.")
    _require(inputs.ma_balance >= 0, "MA balance cannot be negative.")
    _require(inputs.housing_usage_oa_monthly >= 0, "Housing OA usage cannot be negative.")
    _require(inputs.shield_plan_premium_ma >= 0, "Shield plan premium cannot be negative.")


def validate_reliefs(inputs: TaxReliefInputs) -> None:
    _require(inputs.annual_srs_contribution >= 0, "SRS contribution cannot be negative.")
    _require(inputs.life_insurance_premium >= 0, "Life insurance premium cannot be negative.")
    _require(inputs.annual_cpf_top_up >= 0, "CPF top-up cannot be negative.")
    _require(0 <= inputs.number_of_children <= 20, "Number of children must be between 0 and 20.")
    _require(0 <= inputs.number_of_disabled_children <= 20, "Number of disabled children must be between 0 and 20.")
    for count in (
        inputs.number_of_parents_same_household,
        inputs.number_of_parents_not_same_household,
        inputs.number_of_handicapped_parents_same_household,
        inputs.number_of_handicapped_parents_not_same_household,
    ):
        _require(0 <= count <= 10, "Number of parents must be between 0 and 10.")


def validate_expenses(inputs: ExpenseInputs) -> None:
    _require(inputs.monthly_fixed_expenses >= 0, "Fixed expenses cannot be negative.")
    _require(inputs.monthly_variable_expenses >= 0, "Variable expenses cannot be negative.")


def validate_macro(inputs: MacroAssumptions) -> None:
    _require(0 <= inputs.inflation_rate <= 0.15, "Inflation must be between 0% and 15%.")


def validate_property(inputs: PropertyInputs) -> None:
    _require(inputs.market_value >= 0, "Property value cannot be negative.")
    _require(inputs.outstanding_mortgage >= 0, "Outstanding mortgage cannot be negative.")
    _require(inputs.cpf_principal_used >= 0, "CPF principal used cannot be negative.")
    _require(0 <= inputs.appreciation_rate <= 0.20, "Property appreciation must be between 0% and 20%.")
    _require(0 <= inputs.mortgage_interest_rate <= 0.15, "Mortgage rate must be between 0% and 15%.")
    _require(0 <= inputs.mortgage_years_remaining <= 50, "Mortgage years remaining must be between 0 and 50.")


def validate_stress_test(stress: StressTest) -> None:
    _require(isinstance(stress, StressTest), "Stress test must be a StressTest variant.")
    _require(stress.kind in STRESS_TEST_KINDS, f"Unknown stress test: {stress.kind}")
    if stress.kind == "none":
        return
    if stress.extends_mortality and stress.start_age is None:
        return
    _require(stress.start_age is not None, "Stress test start age is required.")
    _require(18 <= stress.start_age <= 100, "Stress test start age must be between 18 and 100.")
    duration = getattr(stress, "duration_months", None)
    if duration is not None:
        _require(1 <= duration <= 120, "Stress test duration must be between 1 and 120 months.")
    payout = getattr(stress, "payout", 0.0)
    _require(payout >= 0, "Stress test payout cannot be negative.")
    loss = getattr(stress, "loss_fraction", 0.0)
    _require(0 <= loss <= 1, "Market crash loss must be between 0% and 100%.")


def validate_profile(profile: ClientProfile) -> None:
    _require(18 <= profile.current_age <= 100, "Current age must be between 18 and 100.")
    _require(profile.gender in MORTALITY_AGE, "Gender must be 'Male' or 'Female'.")
    validate_income(profile.income)
    validate_goals(profile.goals)
    validate_cpf(profile.cpf)
    validate_reliefs(profile.reliefs)
    validate_expenses(profile.expenses)
    validate_macro(profile.macro)
    validate_property(profile.property)
    validate_stress_test(profile.stress_test)
    end_age = simulation_end_age(profile)
    _require(profile.current_age <= end_age, f"Current age is past the assumed mortality age of {end_age}.")


def validate_asset(asset: Asset) -> None:
    _require(bool(asset.name), "Asset name is required.")
    _require(asset.current_value >= 0, f"Asset '{asset.name}' value cannot be negative.")
    _require(-1 < asset.projected_appreciation_rate <= 1, f"Asset '{asset.name}' growth rate is out of range.")


def validate_liability(liability: Liability) -> None:
    _require(bool(liability.name), "Liability name is required.")
    _require(liability.current_balance >= 0, f"Liability '{liability.name}' balance cannot be negative.")
    _require(liability.monthly_payment >= 0, f"Liability '{liability.name}' payment cannot be negative.")
    _require(liability.years_remaining >= 0, f"Liability '{liability.name}' term cannot be negative.")
    _require(0 <= liability.interest_rate <= 1, f"Liability '{liability.name}' rate is out of range.")


def validate_life_event(event: LifeEvent) -> None:
    _require(bool(event.description), "Life event description is required.")
    _require(2026 <= event.year <= 2150, "Life event year must be between 2026 and 2150.")
    _require(event.trigger_age is None or 18 <= event.trigger_age <= 120, "Trigger age must be between 18 and 120.")
    if event.end_year is not None:
        _require(2026 <= event.end_year <= 2150, "Life event end year must be between 2026 and 2150.")
        _require(event.end_year >= event.year, "Life event end year precedes its start year.")


def validate_inputs(
    profile: ClientProfile,
    assets: Iterable[Asset] = (),
    liabilities: Iterable[Liability] = (),
    life_events: Iterable[LifeEvent] = (),
) -> None:
    validate_profile(profile)
    for asset in assets:
        validate_asset(asset)
    for liability in liabilities:
        validate_liability(liability)
    for event in life_events:
        validate_life_event(event)
