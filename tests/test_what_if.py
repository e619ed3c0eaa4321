import math
from dataclasses import replace

import pytest

from cpf_planner.core.engine import run_projection
from cpf_planner.core.stress_tests import LateCriticalIllness, LongevityRisk, MarketCrash
from cpf_planner.core.what_if import run_stress_comparison

from conftest import START_YEAR


class TestStressComparison:
    def test_baseline_ignores_profile_stress_test(self, profile, assets):
        stressed_profile = replace(profile, stress_test=MarketCrash(start_age=35))
        comparison = run_stress_comparison(stressed_profile, assets, [], [], MarketCrash(start_age=40), START_YEAR)
        plain = run_projection(profile, assets, [], [], START_YEAR)

        assert comparison.baseline.projected_shortfall_surplus == pytest.approx(plain.projected_shortfall_surplus)

    def test_path_is_aligned_by_age(self, profile, assets):
        comparison = run_stress_comparison(profile, assets, [], [], MarketCrash(start_age=40), START_YEAR)
        path = comparison.path

        assert list(path.index) == list(range(31, 85))
        assert path.loc[39, "net_worth_difference"] == pytest.approx(0)
        assert path.loc[40, "net_worth_difference"] < 0

    def test_summary_difference(self, profile, assets):
        comparison = run_stress_comparison(profile, assets, [], [], MarketCrash(start_age=40), START_YEAR)
        summary = comparison.summary

        assert summary["terminal_difference"] == pytest.approx(
            summary["stressed_terminal_net_worth"] - summary["baseline_terminal_net_worth"]
        )
        assert summary["terminal_difference"] < 0

    def test_longevity_extends_stressed_path_only(self, profile, assets):
        comparison = run_stress_comparison(profile, assets, [], [], LongevityRisk(start_age=40), START_YEAR)
        path = comparison.path

        assert path.index[-1] == 100
        assert math.isnan(path.loc[90, "baseline_net_worth"])
        assert not math.isnan(path.loc[84, "baseline_net_worth"])

    def test_depletion_age_reported(self, profile, assets):
        comparison = run_stress_comparison(profile, assets, [], [], LateCriticalIllness(start_age=35), START_YEAR)
        summary = comparison.summary

        assert summary["min_liquid_assets"] < 0
        assert summary["liquid_assets_depleted_age"] >= 35
        assert comparison.path.loc[summary["liquid_assets_depleted_age"], "stressed_liquid_assets"] < 0
