"""paytax SDK - Payroll tax withholding engine."""

from .errors import (
    PayTaxError,
    ConfigurationError,
    ValidationError,
    RuleFetchError,
)

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    get_fetch_timeout,
    get_jurisdiction,
    build_provider,
    SETTING_KEYS,
    DEFAULT_FETCH_TIMEOUT,
)

from .taxes import (
    PayFrequency,
    FilingStatus,
    TaxBracket,
    RuleSet,
    FederalElection,
    StateElection,
    TaxInput,
    TaxBreakdown,
    TaxOutput,
    periods_per_year,
    annualize,
    deannualize,
    bracket_tax,
    round_cents,
    calculate_withholding,
    explain_withholding,
)

from .rules import (
    RuleProvider,
    HttpRuleProvider,
    FileRuleProvider,
    StaticRuleProvider,
    ResolvedRules,
    static_rule_set,
    load_rule_file,
    REFERENCE_YEAR,
)

from .engine import TaxEngine

__all__ = [
    # Errors
    "PayTaxError",
    "ConfigurationError",
    "ValidationError",
    "RuleFetchError",
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "get_fetch_timeout",
    "get_jurisdiction",
    "build_provider",
    "SETTING_KEYS",
    "DEFAULT_FETCH_TIMEOUT",
    # Taxes
    "PayFrequency",
    "FilingStatus",
    "TaxBracket",
    "RuleSet",
    "FederalElection",
    "StateElection",
    "TaxInput",
    "TaxBreakdown",
    "TaxOutput",
    "periods_per_year",
    "annualize",
    "deannualize",
    "bracket_tax",
    "round_cents",
    "calculate_withholding",
    "explain_withholding",
    # Rules
    "RuleProvider",
    "HttpRuleProvider",
    "FileRuleProvider",
    "StaticRuleProvider",
    "ResolvedRules",
    "static_rule_set",
    "load_rule_file",
    "REFERENCE_YEAR",
    # Engine
    "TaxEngine",
]
