"""rules - Where RuleSets come from.

- provider: RuleProvider protocol (async get_rule_set(tax_year))
- remote: HttpRuleProvider, the dynamic rule service client
- files: FileRuleProvider for {year}.yaml rule directories
- static: embedded reference-year rules (the fallback)
- cache: per-year populate-once cache used by the engine
"""

from .provider import RuleProvider
from .static import REFERENCE_YEAR, STATIC_RULES_2025, StaticRuleProvider, static_rule_set
from .files import FileRuleProvider, load_rule_file, parse_rule_data
from .remote import HttpRuleProvider
from .cache import DYNAMIC, STATIC, ResolvedRules, RuleSetCache

__all__ = [
    "RuleProvider",
    "REFERENCE_YEAR",
    "STATIC_RULES_2025",
    "StaticRuleProvider",
    "static_rule_set",
    "FileRuleProvider",
    "load_rule_file",
    "parse_rule_data",
    "HttpRuleProvider",
    "DYNAMIC",
    "STATIC",
    "ResolvedRules",
    "RuleSetCache",
]
