from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence

import pandas as pd

from .engine import SimulationResult, run_projection
from .inputs import Asset, ClientProfile, Liability, LifeEvent
from .stress_tests import NoStress, StressTest


@dataclass
class StressComparison:
    baseline: SimulationResult
    stressed: SimulationResult
    path: pd.DataFrame
    summary: Dict[str, Optional[float]]


def _path_columns(result: SimulationResult, prefix: str) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "age": [s.age for s in result.snapshots],
            f"{prefix}_net_worth": [s.net_worth for s in result.snapshots],
            f"{prefix}_liquid_assets": [s.liquid_assets for s in result.snapshots],
            f"{prefix}_monthly_surplus": [s.monthly_surplus_deficit for s in result.snapshots],
        }
    ).set_index("age")


def run_stress_comparison(
    profile: ClientProfile,
    assets: Sequence[Asset],
    liabilities: Sequence[Liability],
    life_events: Sequence[LifeEvent],
    stress_test: StressTest,
    start_year: Optional[int] = None,
) -> StressComparison:
    """Run the plan without any stress test and again with ``stress_test``, aligned by age."""
    baseline = run_projection(replace(profile, stress_test=NoStress()), assets, liabilities, life_events, start_year)
    stressed = run_projection(replace(profile, stress_test=stress_test), assets, liabilities, life_events, start_year)

    # Longevity risk lengthens the stressed horizon; ages past the baseline stay NaN
    path = _path_columns(stressed, "stressed").join(_path_columns(baseline, "baseline"), how="left")
    path["net_worth_difference"] = path["stressed_net_worth"] - path["baseline_net_worth"]

    min_liquid = float(path["stressed_liquid_assets"].min())
    depleted = path.index[path["stressed_liquid_assets"] < 0]

    summary = {
        "baseline_terminal_net_worth": baseline.projected_shortfall_surplus,
        "stressed_terminal_net_worth": stressed.projected_shortfall_surplus,
        "terminal_difference": stressed.projected_shortfall_surplus - baseline.projected_shortfall_surplus,
        "baseline_financial_freedom_age": baseline.financial_freedom_age,
        "stressed_financial_freedom_age": stressed.financial_freedom_age,
        "min_liquid_assets": min_liquid,
        "liquid_assets_depleted_age": int(depleted[0]) if len(depleted) else None,
    }

    return StressComparison(baseline=baseline, stressed=stressed, path=path, summary=summary)
