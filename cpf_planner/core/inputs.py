from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .constants import (
    ASSET_CATEGORY_DEFAULT_GROWTH,
    DEFAULT_INFLATION_RATE,
    DEFAULT_PROPERTY_APPRECIATION,
    FIXED_ASSET_CATEGORIES,
    LIABILITY_CATEGORY_DEFAULT_RATE,
    AssetCategory,
    LiabilityCategory,
)
from .stress_tests import NoStress, StressTest


@dataclass
class IncomeInputs:
    monthly_gross_income: float = 0.0
    annual_bonus: float = 0.0
    rental_income_monthly: float = 0.0
    side_income_monthly: float = 0.0

    def rental_income_annual(self) -> float:
        return self.rental_income_monthly * 12

    def side_income_annual(self) -> float:
        return self.side_income_monthly * 12


@dataclass
class RetirementGoals:
    desired_retirement_age: int = 65
    desired_monthly_spending: float = 4_000.0  # today's dollars
    risk_appetite_growth_rate: float = 0.06
    retirement_sum_tier: str = "FRS"  # "BRS", "FRS" or "ERS"
    cpf_life_plan: str = "standard"  # "standard", "basic" or "escalating"


@dataclass
class CpfInputs:
    oa_balance: float = 0.0
    sa_balance: float = 0.0
    ma_balance: float = 0.0
    housing_usage_oa_monthly: float = 0.0
    shield_plan_premium_ma: float = 0.0  # annual


@dataclass
class TaxReliefInputs:
    annual_srs_contribution: float = 0.0
    life_insurance_premium: float = 0.0
    number_of_children: int = 0
    number_of_disabled_children: int = 0
    number_of_parents_same_household: int = 0
    number_of_parents_not_same_household: int = 0
    number_of_handicapped_parents_same_household: int = 0
    number_of_handicapped_parents_not_same_household: int = 0
    is_working_mother: bool = False
    is_active_nsman: bool = False
    annual_cpf_top_up: float = 0.0


@dataclass
class ExpenseInputs:
    monthly_fixed_expenses: float = 0.0
    monthly_variable_expenses: float = 0.0

    def annual_total(self) -> float:
        return (self.monthly_fixed_expenses + self.monthly_variable_expenses) * 12


@dataclass
class MacroAssumptions:
    use_inflation_adjusted: bool = True
    inflation_rate: float = DEFAULT_INFLATION_RATE
    conservative_mode: bool = False  # extend mortality to the conservative age


@dataclass
class PropertyInputs:
    market_value: float = 0.0
    outstanding_mortgage: float = 0.0
    cpf_principal_used: float = 0.0
    appreciation_rate: float = DEFAULT_PROPERTY_APPRECIATION
    mortgage_interest_rate: float = 0.035
    mortgage_years_remaining: int = 0


@dataclass
class InsuranceCoverage:
    """Existing sums assured across the client's policies."""

    death: float = 0.0
    tpd: float = 0.0
    early_ci: float = 0.0
    late_ci: float = 0.0
    disability_income_monthly: float = 0.0


@dataclass
class ClientProfile:
    current_age: int
    gender: str  # "Male" or "Female"
    income: IncomeInputs = field(default_factory=IncomeInputs)
    goals: RetirementGoals = field(default_factory=RetirementGoals)
    cpf: CpfInputs = field(default_factory=CpfInputs)
    reliefs: TaxReliefInputs = field(default_factory=TaxReliefInputs)
    expenses: ExpenseInputs = field(default_factory=ExpenseInputs)
    macro: MacroAssumptions = field(default_factory=MacroAssumptions)
    property: PropertyInputs = field(default_factory=PropertyInputs)
    coverage: InsuranceCoverage = field(default_factory=InsuranceCoverage)
    stress_test: StressTest = field(default_factory=NoStress)
    name: str = ""
    date_of_birth: Optional[date] = None
    occupation: str = ""


def is_liquid(category: AssetCategory) -> bool:
    """Liquidity partition used by the engine; independent of how categories are labelled."""
    return AssetCategory(category) not in FIXED_ASSET_CATEGORIES


@dataclass
class Asset:
    id: str
    name: str
    category: AssetCategory
    current_value: float
    projected_appreciation_rate: Optional[float] = None

    def __post_init__(self):
        self.category = AssetCategory(self.category)
        if self.projected_appreciation_rate is None:
            self.projected_appreciation_rate = ASSET_CATEGORY_DEFAULT_GROWTH[self.category]

    @property
    def liquid(self) -> bool:
        return is_liquid(self.category)


@dataclass
class Liability:
    id: str
    name: str
    category: LiabilityCategory
    current_balance: float
    monthly_payment: float = 0.0
    years_remaining: int = 0
    interest_rate: Optional[float] = None

    def __post_init__(self):
        self.category = LiabilityCategory(self.category)
        if self.interest_rate is None:
            self.interest_rate = LIABILITY_CATEGORY_DEFAULT_RATE[self.category]


@dataclass
class LifeEvent:
    id: str
    year: int
    description: str
    cost: float  # positive = outflow, negative = inflow
    trigger_age: Optional[int] = None
    is_recurring: bool = False
    end_year: Optional[int] = None

    def start_year(self, current_age: int, start_year: int) -> int:
        if self.trigger_age is not None:
            return start_year + (self.trigger_age - current_age)
        return self.year

    def occurs_in(self, year: int, current_age: int, start_year: int) -> bool:
        first = self.start_year(current_age, start_year)
        if not self.is_recurring:
            return year == first
        last = self.end_year if self.end_year is not None else year
        return first <= year <= last
