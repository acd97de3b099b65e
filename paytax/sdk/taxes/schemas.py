"""Pydantic schemas for withholding input, rule sets, and results.

Input and output models speak the camelCase wire contract (grossPay,
payFrequency, netPay, ...) and expose snake_case attributes in Python.
Rule models use the snake_case keys of the YAML/JSON rule files.

Bracket tables are stored as upper bounds only. The lower bound of every
bracket is the previous bracket's upper bound (0 for the first), so a table
that passes validation is contiguous and covers [0, inf).
"""

import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as SchemaError
from pydantic.alias_generators import to_camel

from ..errors import ValidationError
from .brackets import round_cents


class PayFrequency(str, Enum):
    """Supported pay schedules."""
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"


class FilingStatus(str, Enum):
    """Federal filing statuses with their own deduction and bracket tables."""
    SINGLE = "single"
    MARRIED = "married"
    HEAD = "head"


def normalize_frequency(value: Any) -> Any:
    """Normalize spelling variants ('Semi-Monthly', 'bi_weekly') to enum values."""
    if isinstance(value, str):
        return value.strip().lower().replace("-", "").replace("_", "")
    return value


# =============================================================================
# Rule Schemas - one RuleSet per tax year
# =============================================================================


class TaxBracket(BaseModel):
    """Single bracket entry. up_to=None marks the unbounded top bracket."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    up_to: Optional[float] = Field(default=None, gt=0, description="Annual upper bound (None if top bracket)")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate as decimal")

    @property
    def upper_bound(self) -> float:
        return math.inf if self.up_to is None else self.up_to


def check_bracket_table(brackets: list[TaxBracket], label: str) -> None:
    """Raise ValueError unless brackets are ascending and end unbounded."""
    if not brackets:
        raise ValueError(f"{label}: bracket table is empty")

    previous = 0.0
    for index, bracket in enumerate(brackets):
        upper = bracket.upper_bound
        is_last = index == len(brackets) - 1
        if upper <= previous:
            raise ValueError(
                f"{label}: bracket {index + 1} upper bound {upper} does not exceed previous bound {previous}"
            )
        if math.isinf(upper) and not is_last:
            raise ValueError(f"{label}: only the last bracket may be unbounded (bracket {index + 1})")
        if is_last and not math.isinf(upper):
            raise ValueError(f"{label}: last bracket must be unbounded (up_to: null), found {upper}")
        previous = upper


class FederalRules(BaseModel):
    """Federal income tax parameters."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    standard_deduction: dict[FilingStatus, float]
    dependent_credit: float = Field(..., ge=0, description="Annual reduction per dependent")
    brackets: dict[FilingStatus, list[TaxBracket]]

    @model_validator(mode="after")
    def check_filing_statuses(self) -> "FederalRules":
        for status in FilingStatus:
            if status not in self.standard_deduction:
                raise ValueError(f"standard_deduction missing filing status '{status.value}'")
            if self.standard_deduction[status] < 0:
                raise ValueError(f"standard_deduction for '{status.value}' cannot be negative")
            if status not in self.brackets:
                raise ValueError(f"brackets missing filing status '{status.value}'")
            check_bracket_table(self.brackets[status], f"federal.brackets.{status.value}")
        return self


class FicaRules(BaseModel):
    """Social Security and Medicare parameters."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    social_security_rate: float = Field(..., ge=0, le=1)
    social_security_wage_base: float = Field(..., gt=0, description="Annual SS wage cap")
    medicare_rate: float = Field(..., ge=0, le=1)
    additional_medicare_rate: float = Field(..., ge=0, le=1)
    additional_medicare_threshold: float = Field(..., ge=0, description="Annual wages before surtax applies")


class StateRules(BaseModel):
    """Income tax and disability insurance for one state jurisdiction."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    jurisdiction: str = Field(..., pattern=r"^[A-Z]{2}$", description="Two-letter state code")
    brackets: list[TaxBracket]
    allowance_amount: float = Field(..., ge=0, description="Annual reduction per withholding allowance")
    sdi_rate: float = Field(..., ge=0, le=1)
    sdi_wage_base: float = Field(..., gt=0, description="Annual SDI wage cap")

    @field_validator("jurisdiction", mode="before")
    @classmethod
    def upper_jurisdiction(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def check_brackets(self) -> "StateRules":
        check_bracket_table(self.brackets, "state.brackets")
        return self


class RuleSet(BaseModel):
    """Complete withholding rules for one tax year and one state."""
    model_config = ConfigDict(extra="ignore", frozen=True)  # Allow unknown fields for forward compat

    tax_year: int = Field(..., ge=1900, le=2999)
    source: Optional[str] = None
    version: Optional[str] = None
    federal: FederalRules
    fica: FicaRules
    state: StateRules


# =============================================================================
# Input Schemas
# =============================================================================


class _WireModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# Per-period and annual currency inputs above this are rejected as implausible
MAX_AMOUNT = 1_000_000_000


class FederalElection(_WireModel):
    """Employee's federal W-4 elections.

    filing_status stays a plain string here; the federal calculator rejects
    unknown values with ConfigurationError rather than defaulting them.
    other_income and deductions are the annual W-4 Step 4(a)/4(b) amounts.
    """

    filing_status: str
    step2_checkbox: bool = False
    dependents: int = Field(default=0, ge=0)
    other_income: float = Field(default=0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Annual amount")
    deductions: float = Field(default=0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Annual amount")
    extra_withholding: float = Field(
        default=0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Per-period amount"
    )
    exempt: bool = False


class StateElection(_WireModel):
    """Employee's state withholding elections."""

    allowances: int = Field(default=0, ge=0)
    extra_withholding: float = Field(
        default=0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False, description="Per-period amount"
    )
    exempt: bool = False


class TaxInput(_WireModel):
    """One employee, one pay period. Built fresh for every calculation."""

    gross_pay: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    pay_frequency: PayFrequency
    tax_year: int = Field(..., ge=1900, le=2999)
    federal: FederalElection
    state: StateElection = Field(default_factory=StateElection)

    @field_validator("pay_frequency", mode="before")
    @classmethod
    def normalize_pay_frequency(cls, value: Any) -> Any:
        return normalize_frequency(value)

    @classmethod
    def parse(cls, data: dict) -> "TaxInput":
        """Validate a wire-format dict, raising paytax ValidationError on failure."""
        try:
            return cls.model_validate(data)
        except SchemaError as e:
            errors = [
                f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
                for err in e.errors()
            ]
            raise ValidationError(f"Invalid tax input: {'; '.join(errors)}", errors) from e


# =============================================================================
# Output Schemas
# =============================================================================


class TaxBreakdown(_WireModel):
    """Per-component withholding, each already rounded to cents."""

    federal_income_tax: float
    social_security: float
    medicare: float
    additional_medicare: float
    state_income_tax: float
    state_disability_insurance: float

    @property
    def total(self) -> float:
        return (
            self.federal_income_tax
            + self.social_security
            + self.medicare
            + self.additional_medicare
            + self.state_income_tax
            + self.state_disability_insurance
        )


class TaxOutput(_WireModel):
    """Net pay and its withholding breakdown."""

    net_pay: float
    taxes: TaxBreakdown

    @property
    def total_withholding(self) -> float:
        return round_cents(self.taxes.total)

    def to_dict(self) -> dict:
        """Serialize to the camelCase output contract."""
        return self.model_dump(by_alias=True)
