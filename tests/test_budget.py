from dataclasses import replace

import pytest

from cpf_planner.core.budget import (
    annual_expenses,
    desired_monthly_spend,
    earned_income,
    inflate,
    passive_income,
    present_value,
)
from cpf_planner.core.inputs import IncomeInputs
from cpf_planner.core.mortgage import annual_mortgage_reduction, mortgage_balance_after


def test_inflate_and_discount_are_inverse():
    assert inflate(100, 0.03, 10) == pytest.approx(100 * 1.03 ** 10)
    assert present_value(inflate(100, 0.03, 10), 0.03, 10) == pytest.approx(100)
    assert present_value(100, 0.03, 0) == 100


def test_expenses_switch_to_desired_spend_in_retirement(profile):
    assert annual_expenses(profile, False, 0) == pytest.approx(42_000)
    assert annual_expenses(profile, True, 0) == pytest.approx(48_000)
    assert annual_expenses(profile, True, 10) == pytest.approx(48_000 * 1.03 ** 10)
    assert annual_expenses(profile, False, 0, multiplier=1.3) == pytest.approx(42_000 * 1.3)


def test_desired_spend_without_inflation(profile):
    nominal = replace(profile, macro=replace(profile.macro, use_inflation_adjusted=False))
    assert desired_monthly_spend(nominal, 20) == 4_000


def test_earned_income_includes_bonus(profile):
    assert earned_income(profile, True) == (6_000, 84_000)
    assert earned_income(profile, False) == (0.0, 0.0)


def test_earned_income_ignores_cpf_wage_ceiling(profile):
    high = replace(profile, income=IncomeInputs(monthly_gross_income=15_000, annual_bonus=30_000))
    assert earned_income(high, True) == (15_000, 15_000 * 12 + 30_000)


def test_passive_income_sources(profile):
    with_rent = replace(profile, income=IncomeInputs(rental_income_monthly=1_000, side_income_monthly=500))
    assert passive_income(with_rent, 100_000, 1_500) == pytest.approx(4_000 + 18_000 + 12_000 + 6_000)


def test_mortgage_straight_line():
    assert annual_mortgage_reduction(400_000, 20) == 20_000
    assert annual_mortgage_reduction(50_000, 0) == 50_000
    assert mortgage_balance_after(400_000, 20, 5) == 300_000
    assert mortgage_balance_after(400_000, 20, 30) == 0
