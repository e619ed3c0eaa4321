import pytest

from cpf_planner.core.inputs import TaxReliefInputs
from cpf_planner.core.taxes import (
    calculate_annual_tax,
    calculate_progressive_tax,
    earned_income_relief,
    get_marginal_tax_rate,
    parent_relief,
    qualifying_child_relief,
    working_mother_relief,
)


class TestProgressiveTax:
    @pytest.mark.parametrize(
        "chargeable, expected",
        [(0, 0), (-5_000, 0), (20_000, 0), (30_000, 200), (40_000, 550), (80_000, 3_350), (120_000, 7_950)],
    )
    def test_bracket_totals(self, chargeable, expected):
        assert calculate_progressive_tax(chargeable) == pytest.approx(expected)

    def test_tax_is_monotonic(self):
        taxes = [calculate_progressive_tax(income) for income in range(0, 1_200_001, 5_000)]
        assert taxes == sorted(taxes)

    def test_marginal_rate(self):
        assert get_marginal_tax_rate(0) == 0
        assert get_marginal_tax_rate(20_000) == 0
        assert get_marginal_tax_rate(25_000) == 0.02
        assert get_marginal_tax_rate(10_000_000) == 0.24


class TestReliefs:
    def test_earned_income_relief_by_age(self):
        assert earned_income_relief(54, True) == 1_000
        assert earned_income_relief(55, True) == 6_000
        assert earned_income_relief(60, True) == 8_000
        assert earned_income_relief(40, False) == 0

    def test_child_and_parent_relief(self):
        assert qualifying_child_relief(2, 1) == 2 * 4_000 + 7_500
        assert parent_relief(1, 1, 1, 1) == 9_000 + 5_500 + 14_000 + 10_000

    @pytest.mark.parametrize("children, expected", [(1, 15_000), (2, 20_000), (3, 22_500), (0, 0)])
    def test_working_mother_relief_tiers(self, children, expected):
        assert working_mother_relief(True, children, 0, 100_000) == pytest.approx(expected)

    def test_working_mother_relief_counts_disabled_children(self):
        assert working_mother_relief(True, 1, 1, 100_000) == pytest.approx(20_000)

    def test_working_mother_relief_requires_flag(self):
        assert working_mother_relief(False, 2, 0, 100_000) == 0


class TestAnnualTax:
    def test_typical_employee(self):
        tax = calculate_annual_tax(84_000, 6_000, 31)

        assert tax.cpf_relief == pytest.approx(14_400)
        assert tax.earned_income_relief == 1_000
        assert tax.chargeable_income == pytest.approx(68_600)
        assert tax.tax_payable == pytest.approx(2_552)
        assert tax.marginal_rate == 0.07
        assert tax.effective_rate == pytest.approx(2_552 / 84_000)

    def test_cpf_relief_crowds_out_life_insurance(self):
        high = calculate_annual_tax(84_000, 6_000, 31, life_insurance_premium=3_000, has_life_insurance_relief=True)
        low = calculate_annual_tax(18_000, 1_500, 31, life_insurance_premium=3_000, has_life_insurance_relief=True)

        assert high.life_insurance_relief == 0
        # 5,000 cap less 3,600 CPF relief
        assert low.life_insurance_relief == pytest.approx(1_400)

    def test_srs_relief_capped(self):
        tax = calculate_annual_tax(200_000, 8_000, 40, annual_srs_contribution=20_000, has_srs_relief=True)
        assert tax.srs_relief == 15_300

    def test_srs_ignored_without_flag(self):
        tax = calculate_annual_tax(200_000, 8_000, 40, annual_srs_contribution=20_000)
        assert tax.srs_relief == 0

    def test_total_reliefs_capped(self):
        reliefs = TaxReliefInputs(
            number_of_handicapped_parents_same_household=4,
            number_of_children=3,
            is_active_nsman=True,
            annual_cpf_top_up=8_000,
        )
        tax = calculate_annual_tax(
            500_000,
            8_000,
            40,
            annual_srs_contribution=15_300,
            has_srs_relief=True,
            relief_inputs=reliefs,
        )

        assert tax.total_reliefs == 80_000
        assert tax.chargeable_income == pytest.approx(420_000)

    def test_non_working_year_has_no_employment_reliefs(self):
        reliefs = TaxReliefInputs(is_working_mother=True, number_of_children=2)
        tax = calculate_annual_tax(24_000, 0, 40, is_working=False, relief_inputs=reliefs)

        assert tax.cpf_relief == 0
        assert tax.earned_income_relief == 0
        assert tax.working_mother_relief == 0
        assert tax.qualifying_child_relief == 8_000

    def test_zero_income_has_zero_effective_rate(self):
        tax = calculate_annual_tax(0, 0, 70, is_working=False)
        assert tax.tax_payable == 0
        assert tax.effective_rate == 0
