from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from .constants import (
    LATE_CI_EXPENSE_INCREASE_PERCENT,
    MARKET_CRASH_LOSS_PERCENT,
    RETRENCHMENT_DURATION_MONTHS,
)


@dataclass
class StressEffect:
    """One-off consequences of a stress test firing."""

    lump_sum: float = 0.0
    liquid_loss_fraction: float = 0.0


@dataclass
class YearStress:
    lump_sum: float = 0.0
    liquid_loss_fraction: float = 0.0
    income_zero: bool = False
    expense_multiplier: float = 1.0


@dataclass(frozen=True)
class StressTest:
    kind: ClassVar[str] = "none"
    extends_mortality: ClassVar[bool] = False

    start_age: Optional[int] = None

    def on_trigger(self, state: "StressState") -> StressEffect:
        return StressEffect()


@dataclass(frozen=True)
class NoStress(StressTest):
    kind: ClassVar[str] = "none"


@dataclass(frozen=True)
class Retrenchment(StressTest):
    kind: ClassVar[str] = "retrenchment"

    duration_months: int = RETRENCHMENT_DURATION_MONTHS

    def on_trigger(self, state: "StressState") -> StressEffect:
        state.months_remaining = self.duration_months or RETRENCHMENT_DURATION_MONTHS
        return StressEffect()


@dataclass(frozen=True)
class EarlyCriticalIllness(StressTest):
    kind: ClassVar[str] = "earlyCi"

    duration_months: int = RETRENCHMENT_DURATION_MONTHS
    payout: float = 0.0

    def on_trigger(self, state: "StressState") -> StressEffect:
        state.months_remaining = self.duration_months or RETRENCHMENT_DURATION_MONTHS
        return StressEffect(lump_sum=self.payout)


@dataclass(frozen=True)
class LateCriticalIllness(StressTest):
    """Income stops and expenses rise for the rest of the projection."""

    kind: ClassVar[str] = "lateCi"

    payout: float = 0.0

    def on_trigger(self, state: "StressState") -> StressEffect:
        state.late_ci_active = True
        return StressEffect(lump_sum=self.payout)


@dataclass(frozen=True)
class MarketCrash(StressTest):
    kind: ClassVar[str] = "marketCrash"

    loss_fraction: float = MARKET_CRASH_LOSS_PERCENT

    def on_trigger(self, state: "StressState") -> StressEffect:
        return StressEffect(liquid_loss_fraction=self.loss_fraction)


@dataclass(frozen=True)
class DeathDisability(StressTest):
    kind: ClassVar[str] = "deathDisability"

    payout: float = 0.0

    def on_trigger(self, state: "StressState") -> StressEffect:
        return StressEffect(lump_sum=self.payout)


@dataclass(frozen=True)
class LongevityRisk(StressTest):
    """Only lengthens the horizon to the conservative mortality age."""

    kind: ClassVar[str] = "longevityRisk"
    extends_mortality: ClassVar[bool] = True


STRESS_TEST_KINDS = {
    cls.kind: cls
    for cls in (
        NoStress,
        Retrenchment,
        MarketCrash,
        LongevityRisk,
        EarlyCriticalIllness,
        LateCriticalIllness,
        DeathDisability,
    )
}


@dataclass
class StressState:
    months_remaining: int = 0
    fired: bool = False
    late_ci_active: bool = False

    def advance(self, stress: StressTest, age: int) -> YearStress:
        """Fire the stress test if due, then roll ongoing effects forward one year."""
        year = YearStress()

        if not self.fired and stress.kind != "none" and stress.start_age == age:
            self.fired = True
            effect = stress.on_trigger(self)
            year.lump_sum = effect.lump_sum
            year.liquid_loss_fraction = effect.liquid_loss_fraction

        # Countdown is kept in months but consumed a year at a time
        if self.months_remaining > 0:
            year.income_zero = True
            self.months_remaining = max(0, self.months_remaining - 12)

        if self.late_ci_active:
            year.income_zero = True
            year.expense_multiplier = 1 + LATE_CI_EXPENSE_INCREASE_PERCENT

        return year


def stress_test_from_selection(
    kind: str,
    start_age: int,
    duration_months: int = RETRENCHMENT_DURATION_MONTHS,
    early_ci_payout: float = 0.0,
    late_ci_payout: float = 0.0,
    death_payout: float = 0.0,
) -> StressTest:
    """Build the variant for a flat (kind, parameters) selection such as a form dropdown."""
    if kind not in STRESS_TEST_KINDS:
        raise ValueError(f"Unknown stress test: {kind}")
    if kind == "none":
        return NoStress()
    if kind == "retrenchment":
        return Retrenchment(start_age=start_age, duration_months=duration_months)
    if kind == "earlyCi":
        return EarlyCriticalIllness(start_age=start_age, duration_months=duration_months, payout=early_ci_payout)
    if kind == "lateCi":
        return LateCriticalIllness(start_age=start_age, payout=late_ci_payout)
    if kind == "marketCrash":
        return MarketCrash(start_age=start_age)
    if kind == "deathDisability":
        return DeathDisability(start_age=start_age, payout=death_payout)
    return LongevityRisk(start_age=start_age)
