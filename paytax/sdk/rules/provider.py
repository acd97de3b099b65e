"""Rule provider interface."""

from typing import Protocol, runtime_checkable

from ..taxes.schemas import RuleSet


@runtime_checkable
class RuleProvider(Protocol):
    """Source of year-scoped RuleSets.

    Implementations raise RuleFetchError when the rules for a year cannot be
    produced. They are called once per tax year per engine; caching belongs
    to the caller.
    """

    async def get_rule_set(self, tax_year: int) -> RuleSet:
        ...
