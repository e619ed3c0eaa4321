"""Singapore regulatory tables and default economic assumptions (2026)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

# Mortality
MORTALITY_AGE = {"Male": 84, "Female": 88}
CONSERVATIVE_MORTALITY_AGE = 100

# Inflation
DEFAULT_INFLATION_RATE = 0.03

# CPF wage ceiling
CPF_MONTHLY_SALARY_CEILING = 8_000.0


@dataclass(frozen=True)
class CpfRateBracket:
    max_age: int  # up to and including this age
    employee_rate: float
    employer_rate: float
    total_rate: float
    oa_allocation: float  # fraction of ordinary wage
    sa_allocation: float
    ma_allocation: float


CPF_ALLOCATION_RATES: List[CpfRateBracket] = [
    CpfRateBracket(35, 0.20, 0.17, 0.37, 0.2308, 0.0616, 0.0776),
    CpfRateBracket(45, 0.20, 0.17, 0.37, 0.2116, 0.0816, 0.0768),
    CpfRateBracket(50, 0.20, 0.17, 0.37, 0.1916, 0.0816, 0.0968),
    CpfRateBracket(55, 0.175, 0.155, 0.33, 0.1500, 0.0550, 0.1250),
    CpfRateBracket(60, 0.125, 0.115, 0.24, 0.1025, 0.0225, 0.1150),
    CpfRateBracket(65, 0.075, 0.085, 0.16, 0.0350, 0.0350, 0.0900),
    CpfRateBracket(70, 0.05, 0.075, 0.125, 0.0100, 0.0300, 0.0850),
    CpfRateBracket(200, 0.05, 0.075, 0.125, 0.0100, 0.0300, 0.0850),
]

# CPF interest
CPF_OA_INTEREST_RATE = 0.025
CPF_SA_INTEREST_RATE = 0.04
CPF_MA_INTEREST_RATE = 0.04
CPF_RA_INTEREST_RATE = 0.04
CPF_EXTRA_INTEREST_FIRST_60K = 0.01
CPF_EXTRA_INTEREST_NEXT_30K = 0.01
CPF_EXTRA_INTEREST_FIRST_TIER = 60_000.0
CPF_EXTRA_INTEREST_SECOND_TIER = 30_000.0

# Retirement Account and CPF LIFE
CPF_RA_CREATION_AGE = 55
CPF_LIFE_PAYOUT_START_AGE = 65

CPF_RETIREMENT_SUMS: Dict[str, float] = {
    "BRS": 110_200.0,
    "FRS": 220_400.0,
    "ERS": 440_800.0,
}

# Sums for members turning 55 in each year
CPF_RETIREMENT_SUM_HISTORY: Dict[str, Dict[int, float]] = {
    "BRS": {
        2016: 80_500.0, 2017: 83_000.0, 2018: 85_500.0, 2019: 88_000.0,
        2020: 90_500.0, 2021: 93_000.0, 2022: 96_000.0, 2023: 99_400.0,
        2024: 102_900.0, 2025: 106_500.0, 2026: 110_200.0,
    },
    "FRS": {
        2016: 161_000.0, 2017: 166_000.0, 2018: 171_000.0, 2019: 176_000.0,
        2020: 181_000.0, 2021: 186_000.0, 2022: 192_000.0, 2023: 198_800.0,
        2024: 205_800.0, 2025: 213_000.0, 2026: 220_400.0,
    },
    "ERS": {
        2016: 241_500.0, 2017: 249_000.0, 2018: 256_500.0, 2019: 264_000.0,
        2020: 271_500.0, 2021: 279_000.0, 2022: 288_000.0, 2023: 298_200.0,
        2024: 308_700.0, 2025: 426_000.0, 2026: 440_800.0,
    },
}


@dataclass(frozen=True)
class CpfLifePlan:
    label: str
    description: str
    payout_per_dollar_ra: float  # monthly payout per $1 of RA at payout start
    annual_escalation: float = 0.0


CPF_LIFE_PLANS: Dict[str, CpfLifePlan] = {
    "standard": CpfLifePlan(
        "Standard Plan", "Level monthly payouts for life.", 0.0054
    ),
    "basic": CpfLifePlan(
        "Basic Plan", "Lower payouts, more of the RA left as bequest.", 0.0050
    ),
    "escalating": CpfLifePlan(
        "Escalating Plan", "Starts lower and rises every year.", 0.0043, annual_escalation=0.02
    ),
}


# IRAS resident tax brackets (YA2026)
@dataclass(frozen=True)
class TaxBracket:
    upper_bound: float
    rate: float


IRAS_TAX_BRACKETS: List[TaxBracket] = [
    TaxBracket(20_000, 0.00),
    TaxBracket(30_000, 0.02),
    TaxBracket(40_000, 0.035),
    TaxBracket(80_000, 0.07),
    TaxBracket(120_000, 0.115),
    TaxBracket(160_000, 0.15),
    TaxBracket(200_000, 0.18),
    TaxBracket(240_000, 0.19),
    TaxBracket(280_000, 0.195),
    TaxBracket(320_000, 0.20),
    TaxBracket(500_000, 0.22),
    TaxBracket(1_000_000, 0.23),
    TaxBracket(float("inf"), 0.24),
]

# Tax reliefs
TOTAL_PERSONAL_RELIEFS_CAP = 80_000.0
SRS_RELIEF_CAP = 15_300.0
LIFE_INSURANCE_RELIEF_CAP = 5_000.0
EARNED_INCOME_RELIEF_BELOW_55 = 1_000.0
EARNED_INCOME_RELIEF_55_TO_59 = 6_000.0
EARNED_INCOME_RELIEF_60_AND_ABOVE = 8_000.0
QUALIFYING_CHILD_RELIEF = 4_000.0
QUALIFYING_CHILD_RELIEF_DISABLED = 7_500.0
PARENT_RELIEF_SAME_HOUSEHOLD = 9_000.0
PARENT_RELIEF_NOT_SAME_HOUSEHOLD = 5_500.0
PARENT_RELIEF_SAME_HOUSEHOLD_HANDICAPPED = 14_000.0
PARENT_RELIEF_NOT_SAME_HOUSEHOLD_HANDICAPPED = 10_000.0
WORKING_MOTHER_CHILD_RELIEF_1_CHILD = 0.15
WORKING_MOTHER_CHILD_RELIEF_2_CHILDREN = 0.20
WORKING_MOTHER_CHILD_RELIEF_3_PLUS_CHILDREN = 0.25
WORKING_MOTHER_CHILD_RELIEF_CAP = 22_500.0
NSMAN_RELIEF = 3_000.0
CPF_TOPUP_RELIEF_CAP = 8_000.0

# Default growth rates
DEFAULT_PROPERTY_APPRECIATION = 0.03
DEFAULT_EQUITY_RETURN = 0.07
DEFAULT_CONSERVATIVE_RETURN = 0.04
DEFAULT_AGGRESSIVE_RETURN = 0.08
DEFAULT_PASSIVE_INCOME_YIELD = 0.04
DEFAULT_CASH_YIELD = 0.005
DEFAULT_FD_TBILL_YIELD = 0.03


class AssetCategory(str, Enum):
    CASH = "cash"
    STOCKS = "stocks"
    BONDS = "bonds"
    REAL_ESTATE = "real_estate"
    CRYPTO = "crypto"
    COMMODITIES = "commodities"
    OTHER = "other"


ASSET_CATEGORY_DEFAULT_GROWTH: Dict[AssetCategory, float] = {
    AssetCategory.CASH: DEFAULT_CASH_YIELD,
    AssetCategory.STOCKS: DEFAULT_EQUITY_RETURN,
    AssetCategory.BONDS: DEFAULT_CONSERVATIVE_RETURN,
    AssetCategory.REAL_ESTATE: DEFAULT_PROPERTY_APPRECIATION,
    AssetCategory.CRYPTO: DEFAULT_AGGRESSIVE_RETURN,
    AssetCategory.COMMODITIES: DEFAULT_FD_TBILL_YIELD,
    AssetCategory.OTHER: DEFAULT_INFLATION_RATE,
}

# Categories that are illiquid for projection purposes
FIXED_ASSET_CATEGORIES = frozenset({AssetCategory.REAL_ESTATE, AssetCategory.OTHER})


class LiabilityCategory(str, Enum):
    MORTGAGE = "mortgage"
    CREDIT_CARD = "credit_card"
    PERSONAL_LOAN = "personal_loan"
    STUDENT_LOAN = "student_loan"
    CAR_LOAN = "car_loan"
    OTHER = "other"


LIABILITY_CATEGORY_DEFAULT_RATE: Dict[LiabilityCategory, float] = {
    LiabilityCategory.MORTGAGE: 0.035,
    LiabilityCategory.CREDIT_CARD: 0.26,
    LiabilityCategory.PERSONAL_LOAN: 0.07,
    LiabilityCategory.STUDENT_LOAN: 0.045,
    LiabilityCategory.CAR_LOAN: 0.028,
    LiabilityCategory.OTHER: 0.05,
}

# Share of annual non-mortgage repayments treated as principal
LIABILITY_PRINCIPAL_SHARE = 0.30

# LIA protection guidelines
LIA_BENCHMARKS = {
    "DEATH": {"label": "Death", "multiplier_of_income": 9, "min_years_expenses": 10},
    "TPD": {"label": "Total & Permanent Disability", "multiplier_of_income": 9, "min_years_expenses": 10},
    "CRITICAL_ILLNESS_EARLY": {"label": "Early Critical Illness", "multiplier_of_income": 1},
    "CRITICAL_ILLNESS_LATE": {"label": "Late Critical Illness", "multiplier_of_income": 4},
    "DISABILITY_INCOME": {"label": "Disability Income", "monthly_percent_of_income": 0.75},
}

# Stress tests
RETRENCHMENT_DURATION_MONTHS = 12
MARKET_CRASH_LOSS_PERCENT = 0.30
LATE_CI_EXPENSE_INCREASE_PERCENT = 0.30


def project_retirement_sum(tier: str, year: int) -> float:
    """Straight-line projection of a retirement sum for the cohort turning 55 in ``year``."""
    history = CPF_RETIREMENT_SUM_HISTORY[tier]
    years = sorted(history)
    if year in history:
        return history[year]
    if year < years[0]:
        return history[years[0]]
    last, prev = years[-1], years[-2]
    slope = (history[last] - history[prev]) / (last - prev)
    return history[last] + slope * (year - last)
