"""Shared fixtures for paytax tests."""

import copy

import pytest

from paytax.sdk.rules.static import STATIC_RULES_2025, static_rule_set
from paytax.sdk.taxes.schemas import RuleSet, TaxInput


def make_input(gross=5000.0, frequency="monthly", year=2025, filing_status="single",
               step2=False, dependents=0, extra_federal=0.0, allowances=0, extra_state=0.0,
               other_income=0.0, deductions=0.0, exempt_federal=False, exempt_state=False) -> TaxInput:
    """Build a TaxInput from the wire format with sensible defaults."""
    return TaxInput.parse({
        "grossPay": gross,
        "payFrequency": frequency,
        "taxYear": year,
        "federal": {
            "filingStatus": filing_status,
            "step2Checkbox": step2,
            "dependents": dependents,
            "otherIncome": other_income,
            "deductions": deductions,
            "extraWithholding": extra_federal,
            "exempt": exempt_federal,
        },
        "state": {
            "allowances": allowances,
            "extraWithholding": extra_state,
            "exempt": exempt_state,
        },
    })


def rules_data(**overrides) -> dict:
    """Deep copy of the embedded 2025 rule data with top-level/section overrides.

    Section overrides are merged, e.g. rules_data(tax_year=2026,
    fica={"social_security_wage_base": 180000}).
    """
    data = copy.deepcopy(STATIC_RULES_2025)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(data.get(key), dict):
            data[key].update(value)
        else:
            data[key] = value
    return data


@pytest.fixture
def static_rules() -> RuleSet:
    return static_rule_set()


@pytest.fixture
def rules_2026() -> RuleSet:
    """A distinct 'dynamic' rule set: 2026 with a higher SS wage base and SDI rate."""
    return RuleSet.model_validate(rules_data(
        tax_year=2026,
        source="rule-service",
        version="2026.1",
        fica={"social_security_wage_base": 184500},
        state={"sdi_rate": 0.013},
    ))


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point settings at an empty temp config dir and clear PAYTAX_* overrides."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PAYTAX_CONFIG_PATH", str(config_dir))
    for var in ("PAYTAX_RULES_URL", "PAYTAX_RULES_API_KEY", "PAYTAX_RULES_DIR",
                "PAYTAX_FETCH_TIMEOUT", "PAYTAX_JURISDICTION"):
        monkeypatch.delenv(var, raising=False)
    return config_dir
