"""Error types raised by the withholding engine.

- ConfigurationError: rule data or engine parameters cannot support the request
  (unknown filing status, wrong jurisdiction, unreadable rule file).
- ValidationError: the TaxInput itself is invalid. Raised before any math runs.
- RuleFetchError: a rule provider could not produce a RuleSet. The engine
  recovers from this with the embedded static rules; callers of
  TaxEngine.calculate never see it.
"""

from typing import Optional


class PayTaxError(Exception):
    """Base class for all paytax errors."""
    pass


class ConfigurationError(PayTaxError):
    """Raised when rules or engine parameters are missing or inconsistent."""
    pass


class ValidationError(PayTaxError, ValueError):
    """Raised when calculation input is rejected.

    Attributes:
        errors: List of human-readable field errors (may be empty)
    """

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class RuleFetchError(PayTaxError):
    """Raised by rule providers when a RuleSet cannot be fetched or parsed."""

    def __init__(self, message: str, tax_year: Optional[int] = None):
        super().__init__(message)
        self.tax_year = tax_year
