from dataclasses import replace

from cpf_planner.core.constants import AssetCategory
from cpf_planner.core.inputs import Asset, LifeEvent
from cpf_planner.core.state import PlannerState

from conftest import START_YEAR


class TestPlannerState:
    def test_default_state_is_stale(self):
        state = PlannerState.default()

        assert state.is_stale
        assert len(state.assets) == 2

    def test_run_attaches_report(self):
        state = PlannerState.default().run(start_year=START_YEAR)

        assert not state.is_stale
        assert state.report.yearly["year"].iloc[0] == START_YEAR

    def test_edits_return_new_state_and_clear_report(self):
        ran = PlannerState.default().run(start_year=START_YEAR)
        bond = Asset(id="3", name="Bonds", category=AssetCategory.BONDS, current_value=10_000)

        edited = ran.add_asset(bond)

        assert edited.is_stale
        assert not ran.is_stale
        assert len(edited.assets) == 3
        assert len(ran.assets) == 2

    def test_remove_by_id(self):
        state = PlannerState.default().remove_asset("1")
        assert [a.id for a in state.assets] == ["2"]

    def test_life_events_round_trip(self):
        event = LifeEvent(id="e1", year=2030, description="Wedding", cost=30_000)
        state = PlannerState.default().add_life_event(event)

        assert state.life_events == (event,)
        assert state.remove_life_event("e1").life_events == ()

    def test_profile_edit_changes_projection(self):
        state = PlannerState.default()
        older = state.with_profile(replace(state.profile, current_age=50)).run(start_year=START_YEAR)

        assert older.report.yearly.index[0] == 50
