"""Caller-owned planner state.

Every edit returns a new ``PlannerState`` with the previous projection
cleared; re-running the projection is always an explicit ``run()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .inputs import Asset, ClientProfile, Liability, LifeEvent
from .scenarios import default_assets, default_liabilities, default_life_events, default_profile
from .simulator import ProjectionReport, simulate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannerState:
    profile: ClientProfile
    assets: Tuple[Asset, ...] = ()
    liabilities: Tuple[Liability, ...] = ()
    life_events: Tuple[LifeEvent, ...] = ()
    report: Optional[ProjectionReport] = field(default=None, compare=False)

    @classmethod
    def default(cls) -> "PlannerState":
        return cls(
            profile=default_profile(),
            assets=tuple(default_assets()),
            liabilities=tuple(default_liabilities()),
            life_events=tuple(default_life_events()),
        )

    @property
    def is_stale(self) -> bool:
        return self.report is None

    def _edit(self, **changes) -> "PlannerState":
        return replace(self, report=None, **changes)

    def with_profile(self, profile: ClientProfile) -> "PlannerState":
        return self._edit(profile=profile)

    def with_assets(self, assets) -> "PlannerState":
        return self._edit(assets=tuple(assets))

    def add_asset(self, asset: Asset) -> "PlannerState":
        return self._edit(assets=self.assets + (asset,))

    def remove_asset(self, asset_id: str) -> "PlannerState":
        return self._edit(assets=tuple(a for a in self.assets if a.id != asset_id))

    def with_liabilities(self, liabilities) -> "PlannerState":
        return self._edit(liabilities=tuple(liabilities))

    def add_liability(self, liability: Liability) -> "PlannerState":
        return self._edit(liabilities=self.liabilities + (liability,))

    def remove_liability(self, liability_id: str) -> "PlannerState":
        return self._edit(liabilities=tuple(l for l in self.liabilities if l.id != liability_id))

    def with_life_events(self, events) -> "PlannerState":
        return self._edit(life_events=tuple(events))

    def add_life_event(self, event: LifeEvent) -> "PlannerState":
        return self._edit(life_events=self.life_events + (event,))

    def remove_life_event(self, event_id: str) -> "PlannerState":
        return self._edit(life_events=tuple(e for e in self.life_events if e.id != event_id))

    def run(self, start_year: Optional[int] = None) -> "PlannerState":
        logger.debug(
            "Running projection with %d assets, %d liabilities, %d life events",
            len(self.assets),
            len(self.liabilities),
            len(self.life_events),
        )
        report = simulate(self.profile, self.assets, self.liabilities, self.life_events, start_year=start_year)
        return replace(self, report=report)
