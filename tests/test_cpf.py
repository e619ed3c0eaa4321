"""Tests for CPF contributions, interest and CPF LIFE estimates."""

import pytest

from cpf_planner.core.cpf import (
    CpfBalances,
    apply_deductions,
    apply_interest,
    calculate_annual_contributions,
    calculate_cpf_relief,
    calculate_property_sale_proceeds,
    estimate_cpf_life_monthly_payout,
    estimate_ra_balance,
    get_rate_bracket,
    project_one_year,
)


class TestContributions:
    def test_bracket_lookup_is_inclusive(self):
        assert get_rate_bracket(35).max_age == 35
        assert get_rate_bracket(36).max_age == 45
        assert get_rate_bracket(150).max_age == 200

    def test_every_age_has_a_bracket(self):
        assert all(get_rate_bracket(age).max_age >= age for age in range(0, 201))

    def test_contributions_below_ceiling(self):
        c = calculate_annual_contributions(6_000, 31)

        assert c.employee_total == pytest.approx(14_400)
        assert c.employer_total == pytest.approx(12_240)
        assert c.oa_contribution == pytest.approx(72_000 * 0.2308)
        assert c.sa_contribution == pytest.approx(72_000 * 0.0616)
        assert c.ma_contribution == pytest.approx(72_000 * 0.0776)

    def test_contributions_are_capped_at_wage_ceiling(self):
        assert calculate_annual_contributions(20_000, 31).employee_total == pytest.approx(8_000 * 12 * 0.20)

    def test_contributions_never_fall_as_salary_rises(self):
        totals = [calculate_annual_contributions(wage, 40).employee_total for wage in range(0, 20_001, 500)]
        assert totals == sorted(totals)
        assert totals[-1] == totals[-2]

    def test_no_salary_means_no_contributions(self):
        c = calculate_annual_contributions(0, 40)
        assert c.employee_total == 0 and c.employer_total == 0 and c.oa_contribution == 0

    def test_relief_matches_employee_share(self):
        assert calculate_cpf_relief(6_000, 31) == pytest.approx(14_400)
        assert calculate_cpf_relief(0, 31) == 0


class TestInterest:
    def test_oa_only_earns_extra_on_first_tier(self):
        result = apply_interest(CpfBalances(oa=55_000))
        assert result.oa == pytest.approx(55_000 * 1.035)

    def test_second_tier_goes_to_sa(self):
        result = apply_interest(CpfBalances(oa=60_000, sa=10_000))

        assert result.oa == pytest.approx(60_000 * 1.035)
        assert result.sa == pytest.approx(10_000 * 1.05)

    def test_second_tier_exhausted_by_sa(self):
        result = apply_interest(CpfBalances(oa=60_000, sa=30_000, ma=5_000))

        assert result.oa == pytest.approx(60_000 * 1.035)
        assert result.sa == pytest.approx(30_000 * 1.05)
        assert result.ma == pytest.approx(5_000 * 1.04)

    def test_deductions_never_go_negative(self):
        result = apply_deductions(CpfBalances(oa=1_000, sa=5_000, ma=100), housing_monthly=500, shield_annual=600)
        assert result == CpfBalances(oa=0.0, sa=5_000, ma=0.0)


class TestProjectOneYear:
    def test_not_working_skips_contributions(self):
        start = CpfBalances(oa=10_000, sa=10_000, ma=10_000)
        balances, contributions = project_one_year(start, 6_000, 40, False, 0, 0)

        assert contributions.employee_total == 0
        assert balances == apply_interest(start)

    def test_contributions_then_deductions_then_interest(self):
        start = CpfBalances()
        balances, contributions = project_one_year(start, 6_000, 31, True, 100, 200)

        expected = apply_interest(
            CpfBalances(
                oa=contributions.oa_contribution - 1_200,
                sa=contributions.sa_contribution,
                ma=contributions.ma_contribution - 200,
            )
        )
        assert balances.oa == pytest.approx(expected.oa)
        assert balances.sa == pytest.approx(expected.sa)
        assert balances.ma == pytest.approx(expected.ma)

    def test_input_balances_are_not_mutated(self):
        start = CpfBalances(oa=1_000)
        project_one_year(start, 6_000, 31, True, 0, 0)
        assert start.oa == 1_000


class TestCpfLife:
    def test_ra_is_capped_at_retirement_sum(self):
        balances = CpfBalances(oa=500_000, sa=500_000)
        assert estimate_ra_balance(balances, 55, 220_400) == pytest.approx(220_400 * 1.04 ** 10)

    def test_standard_plan_payout(self):
        balances = CpfBalances(oa=500_000, sa=500_000)
        payout = estimate_cpf_life_monthly_payout(balances, 65, 220_400)
        assert payout == pytest.approx(220_400 * 0.0054)

    def test_escalating_plan_rises_each_year(self):
        balances = CpfBalances(oa=500_000, sa=500_000)
        at_65 = estimate_cpf_life_monthly_payout(balances, 65, 220_400, "escalating")
        at_67 = estimate_cpf_life_monthly_payout(balances, 67, 220_400, "escalating")

        assert at_65 == pytest.approx(220_400 * 0.0043)
        assert at_67 == pytest.approx(at_65 * 1.02 ** 2)

    def test_basic_plan_pays_less_than_standard(self):
        balances = CpfBalances(oa=100_000, sa=100_000)
        assert estimate_cpf_life_monthly_payout(balances, 65, 220_400, "basic") < estimate_cpf_life_monthly_payout(
            balances, 65, 220_400, "standard"
        )


class TestPropertySale:
    def test_cpf_is_refunded_with_accrued_interest(self):
        proceeds = calculate_property_sale_proceeds(1_000_000, 300_000, 100_000, 10)

        assert proceeds.cpf_accrued_interest == pytest.approx(100_000 * (1.025 ** 10 - 1))
        assert proceeds.cpf_accrued_interest == pytest.approx(28_008.45, abs=0.01)
        assert proceeds.net_cash_proceeds == pytest.approx(1_000_000 - 300_000 - 100_000 - 28_008.45, abs=0.01)

    def test_net_proceeds_floor_at_zero(self):
        proceeds = calculate_property_sale_proceeds(100_000, 200_000, 0, 5)
        assert proceeds.net_cash_proceeds == 0
