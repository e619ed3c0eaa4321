from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .constants import LIA_BENCHMARKS
from .inputs import ClientProfile


@dataclass
class CoverageGap:
    key: str
    label: str
    recommended: float
    existing: float

    @property
    def shortfall(self) -> float:
        return max(0.0, self.recommended - self.existing)

    @property
    def adequate(self) -> bool:
        return self.shortfall == 0


def coverage_needs(profile: ClientProfile) -> Dict[str, float]:
    """Recommended sums assured following the LIA protection guidelines."""
    annual_income = profile.income.monthly_gross_income * 12 + profile.income.annual_bonus
    annual_expenses = profile.expenses.annual_total()

    needs = {}
    for key in ("DEATH", "TPD"):
        benchmark = LIA_BENCHMARKS[key]
        needs[key] = max(
            annual_income * benchmark["multiplier_of_income"],
            annual_expenses * benchmark["min_years_expenses"],
        )
    for key in ("CRITICAL_ILLNESS_EARLY", "CRITICAL_ILLNESS_LATE"):
        needs[key] = annual_income * LIA_BENCHMARKS[key]["multiplier_of_income"]
    needs["DISABILITY_INCOME"] = (
        profile.income.monthly_gross_income * LIA_BENCHMARKS["DISABILITY_INCOME"]["monthly_percent_of_income"]
    )
    return needs


def coverage_gaps(profile: ClientProfile) -> List[CoverageGap]:
    coverage = profile.coverage
    existing = {
        "DEATH": coverage.death,
        "TPD": coverage.tpd,
        "CRITICAL_ILLNESS_EARLY": coverage.early_ci,
        "CRITICAL_ILLNESS_LATE": coverage.late_ci,
        "DISABILITY_INCOME": coverage.disability_income_monthly,
    }
    return [
        CoverageGap(key=key, label=LIA_BENCHMARKS[key]["label"], recommended=amount, existing=existing[key])
        for key, amount in coverage_needs(profile).items()
    ]
