"""Tests for input and rule schemas.

Covers input validation (ValidationError before any math), wire aliases,
immutability, and rule table validation (contiguous, ascending, unbounded top).
"""

import pydantic
import pytest

from paytax.sdk.errors import ValidationError
from paytax.sdk.taxes.schemas import (
    MAX_AMOUNT,
    FilingStatus,
    PayFrequency,
    RuleSet,
    StateElection,
    TaxInput,
)
from tests.conftest import make_input, rules_data


class TestTaxInput:
    """Wire-format parsing and validation."""

    def test_parses_camel_case_contract(self):
        tax_input = make_input(gross=2500, frequency="biweekly", filing_status="married",
                               step2=True, dependents=2, extra_federal=25, allowances=1, extra_state=10)
        assert tax_input.gross_pay == 2500
        assert tax_input.pay_frequency is PayFrequency.BIWEEKLY
        assert tax_input.federal.filing_status == "married"
        assert tax_input.federal.step2_checkbox is True
        assert tax_input.federal.dependents == 2
        assert tax_input.federal.extra_withholding == 25
        assert tax_input.state.allowances == 1
        assert tax_input.state.extra_withholding == 10

    def test_snake_case_construction(self):
        tax_input = TaxInput(
            gross_pay=1000,
            pay_frequency="weekly",
            tax_year=2025,
            federal={"filing_status": "single"},
        )
        assert tax_input.state == StateElection()

    def test_semi_monthly_alias(self):
        assert make_input(frequency="semi-monthly").pay_frequency is PayFrequency.SEMIMONTHLY

    def test_negative_gross_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            make_input(gross=-0.01)
        assert any("grossPay" in e for e in exc_info.value.errors)

    @pytest.mark.parametrize("kwargs", [
        {"dependents": -1},
        {"allowances": -2},
        {"extra_federal": -5},
        {"extra_state": -5},
        {"frequency": "daily"},
        {"gross": float("nan")},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            make_input(**kwargs)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            make_input(gross=-1)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            TaxInput.parse({
                "grossPay": 1000,
                "payFrequency": "monthly",
                "taxYear": 2025,
                "federal": {"filingStatus": "single"},
                "ytdGross": 5000,
            })

    def test_unknown_filing_status_is_not_a_validation_error(self):
        """Filing status is checked against rules by the federal calculator."""
        assert make_input(filing_status="widowed").federal.filing_status == "widowed"

    @pytest.mark.parametrize("kwargs", [
        {"gross": 1e28},
        {"gross": MAX_AMOUNT + 0.01},
        {"extra_federal": 1e12},
        {"extra_state": 1e12},
        {"other_income": 1e12},
        {"deductions": 1e12},
    ])
    def test_oversized_amounts_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            make_input(**kwargs)

    def test_max_amount_accepted(self):
        assert make_input(gross=MAX_AMOUNT).gross_pay == MAX_AMOUNT

    @pytest.mark.parametrize("kwargs", [{"other_income": -1}, {"deductions": -1}])
    def test_negative_step4_amounts_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            make_input(**kwargs)

    def test_exemption_and_step4_default_off(self):
        tax_input = TaxInput.parse({
            "grossPay": 1000,
            "payFrequency": "monthly",
            "taxYear": 2025,
            "federal": {"filingStatus": "single"},
        })
        assert tax_input.federal.exempt is False
        assert tax_input.federal.other_income == 0
        assert tax_input.federal.deductions == 0
        assert tax_input.state.exempt is False

    def test_step4_and_exemption_wire_names(self):
        tax_input = make_input(other_income=1200, deductions=300, exempt_federal=True, exempt_state=True)
        federal = tax_input.federal.model_dump(by_alias=True)
        assert federal["otherIncome"] == 1200
        assert federal["deductions"] == 300
        assert federal["exempt"] is True
        assert tax_input.state.exempt is True

    def test_input_is_immutable(self):
        tax_input = make_input()
        with pytest.raises(pydantic.ValidationError):
            tax_input.gross_pay = 1


class TestRuleSet:
    """Rule table validation."""

    def test_embedded_rules_validate(self, static_rules):
        assert static_rules.tax_year == 2025
        assert static_rules.state.jurisdiction == "CA"
        for status in FilingStatus:
            assert static_rules.federal.brackets[status][-1].up_to is None

    def test_unknown_top_level_keys_ignored(self):
        rule_set = RuleSet.model_validate(rules_data(futa={"rate": 0.006}))
        assert not hasattr(rule_set, "futa")

    def test_missing_filing_status_rejected(self):
        data = rules_data()
        del data["federal"]["brackets"]["head"]
        with pytest.raises(pydantic.ValidationError, match="head"):
            RuleSet.model_validate(data)

    def test_descending_brackets_rejected(self):
        data = rules_data(state={"brackets": [
            {"up_to": 20000, "rate": 0.01},
            {"up_to": 10000, "rate": 0.02},
            {"up_to": None, "rate": 0.03},
        ]})
        with pytest.raises(pydantic.ValidationError, match="does not exceed"):
            RuleSet.model_validate(data)

    def test_unbounded_bracket_must_be_last(self):
        data = rules_data(state={"brackets": [
            {"up_to": None, "rate": 0.01},
            {"up_to": 10000, "rate": 0.02},
        ]})
        with pytest.raises(pydantic.ValidationError):
            RuleSet.model_validate(data)

    def test_table_must_cover_infinity(self):
        data = rules_data(state={"brackets": [
            {"up_to": 10000, "rate": 0.01},
            {"up_to": 50000, "rate": 0.02},
        ]})
        with pytest.raises(pydantic.ValidationError, match="unbounded"):
            RuleSet.model_validate(data)

    def test_rate_out_of_range_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            RuleSet.model_validate(rules_data(fica={"medicare_rate": 1.45}))

    def test_jurisdiction_normalized(self):
        rule_set = RuleSet.model_validate(rules_data(state={"jurisdiction": "ca"}))
        assert rule_set.state.jurisdiction == "CA"
