from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))


import pandas as pd
import streamlit as st

from cpf_planner.core.constants import (
    CPF_ALLOCATION_RATES,
    CPF_LIFE_PLANS,
    CPF_RETIREMENT_SUMS,
    IRAS_TAX_BRACKETS,
    LIA_BENCHMARKS,
    AssetCategory,
    LiabilityCategory,
    project_retirement_sum,
)
from cpf_planner.core.inputs import (
    Asset,
    ClientProfile,
    CpfInputs,
    ExpenseInputs,
    IncomeInputs,
    InsuranceCoverage,
    Liability,
    LifeEvent,
    MacroAssumptions,
    PropertyInputs,
    RetirementGoals,
    TaxReliefInputs,
)
from cpf_planner.core.insurance import coverage_gaps
from cpf_planner.core.simulator import export_csv
from cpf_planner.core.state import PlannerState
from cpf_planner.core.stress_tests import STRESS_TEST_KINDS, stress_test_from_selection
from cpf_planner.core.what_if import run_stress_comparison



st.set_page_config(page_title="Singapore Wealth Planner", layout="wide")

STRESS_LABELS = {
    "none": "None",
    "retrenchment": "Retrenchment",
    "marketCrash": "Market crash",
    "longevityRisk": "Longevity risk",
    "earlyCi": "Early critical illness",
    "lateCi": "Late critical illness",
    "deathDisability": "Death / disability",
}


def _money(x: float) -> str:
    return f"-${abs(x):,.0f}" if x < 0 else f"${x:,.0f}"


def planner_state() -> PlannerState:
    if "planner" not in st.session_state:
        st.session_state["planner"] = PlannerState.default()
    return st.session_state["planner"]


def sidebar_inputs(defaults: ClientProfile) -> ClientProfile:
    with st.sidebar.expander("About you", expanded=True):
        current_age = st.number_input("Current age", min_value=18, max_value=100, value=defaults.current_age)
        gender = st.selectbox("Gender", options=["Male", "Female"], index=0 if defaults.gender == "Male" else 1)

    with st.sidebar.expander("Income", expanded=False):
        monthly_gross = st.number_input(
            "Monthly gross salary", min_value=0, max_value=500_000, value=int(defaults.income.monthly_gross_income), step=500
        )
        bonus = st.number_input("Annual bonus", min_value=0, max_value=2_000_000, value=int(defaults.income.annual_bonus), step=1_000)
        rental = st.number_input(
            "Rental income (monthly)", min_value=0, max_value=100_000, value=int(defaults.income.rental_income_monthly), step=100
        )
        side = st.number_input(
            "Side income (monthly)", min_value=0, max_value=100_000, value=int(defaults.income.side_income_monthly), step=100
        )

    with st.sidebar.expander("Retirement goals", expanded=False):
        retirement_age = st.slider("Desired retirement age", min_value=40, max_value=100, value=defaults.goals.desired_retirement_age)
        desired_spend = st.number_input(
            "Desired monthly spend (today's $)", min_value=0, max_value=100_000, value=int(defaults.goals.desired_monthly_spending), step=100
        )
        growth = st.slider(
            "Portfolio growth (annual %)", min_value=0.0, max_value=20.0, value=defaults.goals.risk_appetite_growth_rate * 100, step=0.5
        )
        tiers = list(CPF_RETIREMENT_SUMS)
        tier = st.selectbox("Retirement sum target", options=tiers, index=tiers.index(defaults.goals.retirement_sum_tier))
        plans = list(CPF_LIFE_PLANS)
        plan = st.selectbox(
            "CPF LIFE plan",
            options=plans,
            index=plans.index(defaults.goals.cpf_life_plan),
            format_func=lambda k: CPF_LIFE_PLANS[k].label,
        )

    with st.sidebar.expander("CPF", expanded=False):
        oa = st.number_input("OA balance", min_value=0, max_value=5_000_000, value=int(defaults.cpf.oa_balance), step=1_000)
        sa = st.number_input("SA balance", min_value=0, max_value=5_000_000, value=int(defaults.cpf.sa_balance), step=1_000)
        ma = st.number_input("MA balance", min_value=0, max_value=5_000_000, value=int(defaults.cpf.ma_balance), step=1_000)
        housing = st.number_input(
            "OA used for housing (monthly)", min_value=0, max_value=20_000, value=int(defaults.cpf.housing_usage_oa_monthly), step=50
        )
        shield = st.number_input(
            "Shield plan premium from MA (annual)", min_value=0, max_value=20_000, value=int(defaults.cpf.shield_plan_premium_ma), step=50
        )

    with st.sidebar.expander("Tax reliefs", expanded=False):
        srs = st.number_input("SRS contribution (annual)", min_value=0, max_value=100_000, value=int(defaults.reliefs.annual_srs_contribution), step=500)
        life_premium = st.number_input(
            "Life insurance premium (annual)", min_value=0, max_value=100_000, value=int(defaults.reliefs.life_insurance_premium), step=100
        )
        children = st.number_input("Qualifying children", min_value=0, max_value=20, value=defaults.reliefs.number_of_children)
        disabled_children = st.number_input("Disabled children", min_value=0, max_value=20, value=defaults.reliefs.number_of_disabled_children)
        parents_same = st.number_input("Parents living with you", min_value=0, max_value=10, value=defaults.reliefs.number_of_parents_same_household)
        parents_apart = st.number_input(
            "Parents not living with you", min_value=0, max_value=10, value=defaults.reliefs.number_of_parents_not_same_household
        )
        hc_same = st.number_input(
            "Handicapped parents living with you", min_value=0, max_value=10, value=defaults.reliefs.number_of_handicapped_parents_same_household
        )
        hc_apart = st.number_input(
            "Handicapped parents not living with you",
            min_value=0,
            max_value=10,
            value=defaults.reliefs.number_of_handicapped_parents_not_same_household,
        )
        working_mother = st.checkbox("Working mother", value=defaults.reliefs.is_working_mother)
        nsman = st.checkbox("Active NSman", value=defaults.reliefs.is_active_nsman)
        top_up = st.number_input("CPF cash top-up (annual)", min_value=0, max_value=100_000, value=int(defaults.reliefs.annual_cpf_top_up), step=500)

    with st.sidebar.expander("Expenses", expanded=False):
        fixed = st.number_input(
            "Fixed expenses (monthly)", min_value=0, max_value=100_000, value=int(defaults.expenses.monthly_fixed_expenses), step=100
        )
        variable = st.number_input(
            "Variable expenses (monthly)", min_value=0, max_value=100_000, value=int(defaults.expenses.monthly_variable_expenses), step=100
        )

    with st.sidebar.expander("Property", expanded=False):
        market_value = st.number_input(
            "Market value", min_value=0, max_value=20_000_000, value=int(defaults.property.market_value), step=10_000
        )
        mortgage = st.number_input(
            "Outstanding mortgage", min_value=0, max_value=20_000_000, value=int(defaults.property.outstanding_mortgage), step=10_000
        )
        cpf_used = st.number_input(
            "CPF principal used", min_value=0, max_value=5_000_000, value=int(defaults.property.cpf_principal_used), step=5_000
        )
        appreciation = st.slider(
            "Appreciation (annual %)", min_value=0.0, max_value=20.0, value=defaults.property.appreciation_rate * 100, step=0.5
        )
        mortgage_rate = st.slider(
            "Mortgage rate (annual %)", min_value=0.0, max_value=15.0, value=defaults.property.mortgage_interest_rate * 100, step=0.1
        )
        mortgage_years = st.slider("Mortgage years remaining", min_value=0, max_value=50, value=defaults.property.mortgage_years_remaining)

    with st.sidebar.expander("Insurance in force", expanded=False):
        death_cover = st.number_input("Death cover", min_value=0, max_value=20_000_000, value=int(defaults.coverage.death), step=10_000)
        tpd_cover = st.number_input("TPD cover", min_value=0, max_value=20_000_000, value=int(defaults.coverage.tpd), step=10_000)
        early_ci = st.number_input("Early CI cover", min_value=0, max_value=20_000_000, value=int(defaults.coverage.early_ci), step=10_000)
        late_ci = st.number_input("Late CI cover", min_value=0, max_value=20_000_000, value=int(defaults.coverage.late_ci), step=10_000)
        disability = st.number_input(
            "Disability income (monthly)", min_value=0, max_value=100_000, value=int(defaults.coverage.disability_income_monthly), step=100
        )

    with st.sidebar.expander("Assumptions & stress test", expanded=False):
        use_inflation = st.checkbox("Inflation-adjust expenses", value=defaults.macro.use_inflation_adjusted)
        inflation = st.slider("Inflation (annual %)", min_value=0.0, max_value=15.0, value=defaults.macro.inflation_rate * 100, step=0.1)
        conservative = st.checkbox("Conservative mortality (age 100)", value=defaults.macro.conservative_mode)
        stress_kind = st.selectbox("Stress test", options=list(STRESS_TEST_KINDS), format_func=lambda k: STRESS_LABELS[k])
        stress_start = st.slider("Stress test start age", min_value=18, max_value=100, value=40)
        stress_duration = st.slider("Income loss duration (months)", min_value=1, max_value=120, value=12)

    coverage = InsuranceCoverage(
        death=float(death_cover),
        tpd=float(tpd_cover),
        early_ci=float(early_ci),
        late_ci=float(late_ci),
        disability_income_monthly=float(disability),
    )

    return replace(
        defaults,
        current_age=int(current_age),
        gender=gender,
        income=IncomeInputs(
            monthly_gross_income=float(monthly_gross),
            annual_bonus=float(bonus),
            rental_income_monthly=float(rental),
            side_income_monthly=float(side),
        ),
        goals=RetirementGoals(
            desired_retirement_age=int(retirement_age),
            desired_monthly_spending=float(desired_spend),
            risk_appetite_growth_rate=growth / 100.0,
            retirement_sum_tier=tier,
            cpf_life_plan=plan,
        ),
        cpf=CpfInputs(
            oa_balance=float(oa),
            sa_balance=float(sa),
            ma_balance=float(ma),
            housing_usage_oa_monthly=float(housing),
            shield_plan_premium_ma=float(shield),
        ),
        reliefs=TaxReliefInputs(
            annual_srs_contribution=float(srs),
            life_insurance_premium=float(life_premium),
            number_of_children=int(children),
            number_of_disabled_children=int(disabled_children),
            number_of_parents_same_household=int(parents_same),
            number_of_parents_not_same_household=int(parents_apart),
            number_of_handicapped_parents_same_household=int(hc_same),
            number_of_handicapped_parents_not_same_household=int(hc_apart),
            is_working_mother=working_mother,
            is_active_nsman=nsman,
            annual_cpf_top_up=float(top_up),
        ),
        expenses=ExpenseInputs(monthly_fixed_expenses=float(fixed), monthly_variable_expenses=float(variable)),
        macro=MacroAssumptions(use_inflation_adjusted=use_inflation, inflation_rate=inflation / 100.0, conservative_mode=conservative),
        property=PropertyInputs(
            market_value=float(market_value),
            outstanding_mortgage=float(mortgage),
            cpf_principal_used=float(cpf_used),
            appreciation_rate=appreciation / 100.0,
            mortgage_interest_rate=mortgage_rate / 100.0,
            mortgage_years_remaining=int(mortgage_years),
        ),
        coverage=coverage,
        stress_test=stress_test_from_selection(
            stress_kind,
            int(stress_start),
            int(stress_duration),
            early_ci_payout=coverage.early_ci,
            late_ci_payout=coverage.late_ci,
            death_payout=coverage.death,
        ),
    )


def _cell(row: pd.Series, key: str, default):
    """Edited table cell, or ``default`` when left blank."""
    value = row[key]
    if value is None or (not isinstance(value, str) and pd.isna(value)) or value == "":
        return default
    return value


def edit_holdings(state: PlannerState) -> PlannerState:
    st.markdown("#### Assets")
    assets_df = pd.DataFrame(
        [
            {"id": a.id, "name": a.name, "category": a.category.value, "value": a.current_value, "growth": a.projected_appreciation_rate}
            for a in state.assets
        ],
        columns=["id", "name", "category", "value", "growth"],
    )
    assets_df = st.data_editor(
        assets_df,
        num_rows="dynamic",
        use_container_width=True,
        column_config={"category": st.column_config.SelectboxColumn(options=[c.value for c in AssetCategory])},
        key="assets_editor",
    )

    st.markdown("#### Liabilities (excluding the property mortgage)")
    liabilities_df = pd.DataFrame(
        [
            {
                "id": liab.id,
                "name": liab.name,
                "category": liab.category.value,
                "balance": liab.current_balance,
                "rate": liab.interest_rate,
                "monthly_payment": liab.monthly_payment,
                "years_remaining": liab.years_remaining,
            }
            for liab in state.liabilities
        ],
        columns=["id", "name", "category", "balance", "rate", "monthly_payment", "years_remaining"],
    )
    liabilities_df = st.data_editor(
        liabilities_df,
        num_rows="dynamic",
        use_container_width=True,
        column_config={"category": st.column_config.SelectboxColumn(options=[c.value for c in LiabilityCategory])},
        key="liabilities_editor",
    )

    st.markdown("#### Life events")
    events_df = pd.DataFrame(
        [
            {"id": e.id, "year": e.year, "description": e.description, "cost": e.cost, "recurring": e.is_recurring, "end_year": e.end_year}
            for e in state.life_events
        ],
        columns=["id", "year", "description", "cost", "recurring", "end_year"],
    )
    events_df = st.data_editor(events_df, num_rows="dynamic", use_container_width=True, key="events_editor")

    assets = [
        Asset(
            id=str(_cell(row, "id", idx)),
            name=str(row["name"]),
            category=_cell(row, "category", AssetCategory.OTHER),
            current_value=float(_cell(row, "value", 0.0)),
            projected_appreciation_rate=_cell(row, "growth", None),
        )
        for idx, row in assets_df.iterrows()
        if _cell(row, "name", "")
    ]
    liabilities = [
        Liability(
            id=str(_cell(row, "id", idx)),
            name=str(row["name"]),
            category=_cell(row, "category", LiabilityCategory.OTHER),
            current_balance=float(_cell(row, "balance", 0.0)),
            monthly_payment=float(_cell(row, "monthly_payment", 0.0)),
            years_remaining=int(_cell(row, "years_remaining", 0)),
            interest_rate=_cell(row, "rate", None),
        )
        for idx, row in liabilities_df.iterrows()
        if _cell(row, "name", "")
    ]
    events = [
        LifeEvent(
            id=str(_cell(row, "id", idx)),
            year=int(row["year"]),
            description=str(row["description"]),
            cost=float(_cell(row, "cost", 0.0)),
            is_recurring=bool(_cell(row, "recurring", False)),
            end_year=None if _cell(row, "end_year", None) is None else int(row["end_year"]),
        )
        for idx, row in events_df.iterrows()
        if _cell(row, "description", "") and _cell(row, "year", None) is not None
    ]
    return state.with_assets(assets).with_liabilities(liabilities).with_life_events(events)


def render_kpis(state: PlannerState) -> None:
    summary = state.report.summary
    freedom_age = summary["financial_freedom_age"]
    surplus = summary["projected_shortfall_surplus"]
    cols = st.columns(4)
    cols[0].metric(
        "Financial freedom age",
        f"Age {freedom_age}" if freedom_age is not None else "Not reached",
    )
    cols[1].metric(f"Net worth at {summary['mortality_age']}", _money(surplus))
    cols[2].metric("Net worth today", _money(summary["net_worth_today"]))
    cols[3].metric("Monthly surplus today", _money(summary["monthly_surplus_today"]))
    if surplus < 0:
        st.warning(f"Money runs out before age {summary['mortality_age']}.")


def render_projection(state: PlannerState) -> None:
    yearly = state.report.yearly
    st.subheader("Net worth")
    st.line_chart(yearly[["net_worth", "net_worth_pv", "liquid_assets", "fixed_assets", "total_liabilities"]], height=320)
    st.subheader("Cash flow")
    st.bar_chart(yearly[["monthly_surplus_deficit"]], height=240)

    proceeds = state.report.result.property_sale_proceeds
    if proceeds is not None:
        st.markdown(f"**Property sale at age {state.report.result.mortality_age}**")
        st.table(
            pd.DataFrame(
                [
                    ("Market value", proceeds.market_value),
                    ("Outstanding loan", -proceeds.outstanding_loan),
                    ("CPF principal refunded", -proceeds.cpf_principal_used),
                    ("CPF accrued interest", -proceeds.cpf_accrued_interest),
                    ("Net cash proceeds", proceeds.net_cash_proceeds),
                ],
                columns=["Line item", "Amount"],
            ).assign(Amount=lambda df: df["Amount"].map(_money))
        )

    st.markdown("### Year-by-year table")
    st.dataframe(yearly.reset_index(), use_container_width=True)
    st.download_button(
        "Download CSV",
        data=export_csv(state.report.result),
        file_name="projection.csv",
        mime="text/csv",
    )


def render_cpf(state: PlannerState) -> None:
    yearly = state.report.yearly
    st.subheader("CPF balances")
    st.area_chart(yearly[["cpf_oa", "cpf_sa", "cpf_ma"]], height=320)
    st.subheader("CPF LIFE monthly payout")
    st.line_chart(yearly[["cpf_life_monthly_payout"]], height=200)


def render_gaps(state: PlannerState) -> None:
    gaps = state.report.gaps
    if gaps.empty:
        st.info("No retirement years fall inside the projection.")
        return
    st.line_chart(gaps[["projected_monthly_passive_income", "desired_monthly_spend"]], height=300)
    st.dataframe(gaps.reset_index(), use_container_width=True)


def render_insurance(profile: ClientProfile) -> None:
    rows = [(g.label, _money(g.recommended), _money(g.existing), _money(g.shortfall)) for g in coverage_gaps(profile)]
    st.table(pd.DataFrame(rows, columns=["Coverage", "Recommended", "In force", "Shortfall"]))
    st.caption("Benchmarks follow the Life Insurance Association of Singapore guidelines.")


def render_stress(state: PlannerState) -> None:
    profile = state.profile
    if profile.stress_test.kind == "none":
        st.info("Pick a stress test in the sidebar to compare it against the baseline plan.")
        return
    comparison = run_stress_comparison(profile, state.assets, state.liabilities, state.life_events, profile.stress_test)
    cols = st.columns(3)
    cols[0].metric("Baseline at mortality", _money(comparison.summary["baseline_terminal_net_worth"]))
    cols[1].metric(
        "Stressed at mortality",
        _money(comparison.summary["stressed_terminal_net_worth"]),
        delta=_money(comparison.summary["terminal_difference"]),
    )
    depleted = comparison.summary["liquid_assets_depleted_age"]
    cols[2].metric("Liquid assets run out", f"Age {depleted}" if depleted is not None else "Never")
    st.line_chart(comparison.path[["baseline_net_worth", "stressed_net_worth"]], height=300)


def render_assumptions() -> None:
    st.markdown("#### CPF allocation by age")
    st.table(
        pd.DataFrame(
            [
                (b.max_age, b.employee_rate, b.employer_rate, b.oa_allocation, b.sa_allocation, b.ma_allocation)
                for b in CPF_ALLOCATION_RATES
            ],
            columns=["Up to age", "Employee", "Employer", "OA", "SA", "MA"],
        )
    )
    st.markdown("#### Retirement sums (straight-line projection)")
    st.table(
        pd.DataFrame(
            {tier: [_money(project_retirement_sum(tier, year)) for year in (2026, 2036, 2051)] for tier in CPF_RETIREMENT_SUMS},
            index=[2026, 2036, 2051],
        )
    )
    st.markdown("#### IRAS resident tax brackets")
    st.table(
        pd.DataFrame(
            [("Above" if b.upper_bound == float("inf") else _money(b.upper_bound), f"{b.rate*100:.1f}%") for b in IRAS_TAX_BRACKETS],
            columns=["Up to", "Marginal rate"],
        )
    )
    st.markdown("#### Protection benchmarks")
    st.table(
        pd.DataFrame(
            [
                (
                    v["label"],
                    v.get("multiplier_of_income", "-"),
                    v.get("min_years_expenses", "-"),
                    f"{v['monthly_percent_of_income']*100:.0f}%" if "monthly_percent_of_income" in v else "-",
                )
                for v in LIA_BENCHMARKS.values()
            ],
            columns=["Coverage", "x annual income", "Min years of expenses", "Share of monthly income"],
        )
    )


def main():
    st.title("Singapore Wealth Planner")
    st.write(
        "Project CPF, tax, assets and liabilities year by year until your assumed mortality age, and stress-test the plan."
    )

    state = planner_state()
    state = state.with_profile(sidebar_inputs(state.profile))

    tab_plan, tab_holdings, tab_cpf, tab_gaps, tab_insurance, tab_stress, tab_assumptions = st.tabs(
        ["Projection", "Assets & events", "CPF", "Gap analysis", "Insurance", "Stress test", "Assumptions"]
    )

    with tab_holdings:
        state = edit_holdings(state)

    try:
        state = state.run()
    except Exception as exc:  # Streamlit friendly error surface
        st.error(f"Unable to run projection: {exc}")
        st.session_state["planner"] = state
        return
    st.session_state["planner"] = state

    with tab_plan:
        render_kpis(state)
        render_projection(state)

    with tab_cpf:
        render_cpf(state)

    with tab_gaps:
        render_gaps(state)

    with tab_insurance:
        render_insurance(state.profile)

    with tab_stress:
        render_stress(state)

    with tab_assumptions:
        render_assumptions()


if __name__ == "__main__":
    main()
