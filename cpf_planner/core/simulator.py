from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence

import pandas as pd

from cpf_planner.validation.checks import validate_inputs

from .engine import SimulationResult, run_projection
from .inputs import Asset, ClientProfile, Liability, LifeEvent

logger = logging.getLogger(__name__)

# Snapshot fields exported as plain numbers rather than currency
_NON_CURRENCY_COLUMNS = {"year", "age", "is_retired", "income_suspended"}


@dataclass
class ProjectionReport:
    result: SimulationResult
    yearly: pd.DataFrame
    gaps: pd.DataFrame
    summary: Dict[str, Optional[float]]


def snapshot_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per simulated age."""
    return pd.DataFrame.from_records([asdict(s) for s in result.snapshots]).set_index("age")


def gap_frame(result: SimulationResult) -> pd.DataFrame:
    columns = ["age", "year", "projected_monthly_passive_income", "desired_monthly_spend", "gap"]
    if not result.gap_analysis:
        return pd.DataFrame(columns=columns).set_index("age")
    return pd.DataFrame.from_records([asdict(g) for g in result.gap_analysis], columns=columns).set_index("age")


def summarize(result: SimulationResult) -> Dict[str, Optional[float]]:
    first = result.snapshots[0]
    proceeds = result.property_sale_proceeds
    return {
        "financial_freedom_age": result.financial_freedom_age,
        "projected_shortfall_surplus": result.projected_shortfall_surplus,
        "mortality_age": result.mortality_age,
        "retirement_age": result.retirement_age,
        "net_worth_today": first.net_worth,
        "liquid_net_worth_today": first.liquid_net_worth,
        "cpf_total_today": first.cpf_total,
        "monthly_surplus_today": first.monthly_surplus_deficit,
        "property_net_cash_proceeds": proceeds.net_cash_proceeds if proceeds else None,
    }


def simulate(
    profile: ClientProfile,
    assets: Sequence[Asset] = (),
    liabilities: Sequence[Liability] = (),
    life_events: Sequence[LifeEvent] = (),
    start_year: Optional[int] = None,
) -> ProjectionReport:
    validate_inputs(profile, assets, liabilities, life_events)

    result = run_projection(profile, assets, liabilities, life_events, start_year=start_year)
    logger.debug(
        "Projected %d years to age %d (stress test: %s)",
        len(result.snapshots),
        result.mortality_age,
        profile.stress_test.kind,
    )

    return ProjectionReport(
        result=result,
        yearly=snapshot_frame(result),
        gaps=gap_frame(result),
        summary=summarize(result),
    )


def _currency(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def export_csv(result: SimulationResult) -> str:
    """Every snapshot field, one row per year, with money columns formatted as currency."""
    frame = snapshot_frame(result).reset_index()
    for column in frame.columns:
        if column not in _NON_CURRENCY_COLUMNS:
            frame[column] = frame[column].map(_currency)
    frame["is_retired"] = frame["is_retired"].map(lambda x: "Yes" if x else "No")
    frame["income_suspended"] = frame["income_suspended"].map(lambda x: "Yes" if x else "No")
    return frame.to_csv(index=False)
