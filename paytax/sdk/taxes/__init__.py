"""taxes - Per-period withholding calculations.

Scope:
- Pay frequency normalization (annualize / de-annualize)
- Progressive bracket tax and cent rounding
- Federal income tax, FICA (SS, Medicare, Additional Medicare)
- State income tax and state disability insurance
- Rule and input/output schemas

Constraints:
- Pure calculation - every function takes its RuleSet as a parameter
- No rule fetching, caching or I/O (that's in rules/ and engine)
- Only final per-component amounts are rounded

Modules:
- schemas: TaxInput, RuleSet, TaxOutput and enums
- frequency: periods_per_year, annualize, deannualize
- brackets: bracket_tax, bracket_slices, round_cents
- federal / fica / state: component calculators
- withholding: calculate_withholding, the one composition of all of them

Usage:
    from paytax.sdk.taxes import TaxInput, calculate_withholding

    output = calculate_withholding(TaxInput.parse({...}), rules)
"""

from .schemas import (
    PayFrequency,
    FilingStatus,
    TaxBracket,
    FederalRules,
    FicaRules,
    StateRules,
    RuleSet,
    FederalElection,
    StateElection,
    TaxInput,
    TaxBreakdown,
    TaxOutput,
)

from .frequency import PAY_PERIODS, periods_per_year, annualize, deannualize
from .brackets import BracketSlice, bracket_slices, bracket_tax, round_cents
from .federal import calc_federal_income_tax, calc_federal_taxable_income
from .fica import (
    FicaResult,
    calc_fica,
    calc_social_security,
    calc_medicare,
    calc_additional_medicare,
)
from .state import (
    StateResult,
    calc_state_taxes,
    calc_state_income_tax,
    calc_state_disability_insurance,
)
from .withholding import calculate_withholding, explain_withholding

__all__ = [
    # Schemas
    "PayFrequency",
    "FilingStatus",
    "TaxBracket",
    "FederalRules",
    "FicaRules",
    "StateRules",
    "RuleSet",
    "FederalElection",
    "StateElection",
    "TaxInput",
    "TaxBreakdown",
    "TaxOutput",
    # Primitives
    "PAY_PERIODS",
    "periods_per_year",
    "annualize",
    "deannualize",
    "BracketSlice",
    "bracket_slices",
    "bracket_tax",
    "round_cents",
    # Calculators
    "calc_federal_income_tax",
    "calc_federal_taxable_income",
    "FicaResult",
    "calc_fica",
    "calc_social_security",
    "calc_medicare",
    "calc_additional_medicare",
    "StateResult",
    "calc_state_taxes",
    "calc_state_income_tax",
    "calc_state_disability_insurance",
    # Composition
    "calculate_withholding",
    "explain_withholding",
]
