"""Withholding engine: rule resolution with static fallback, then calculation.

Create one TaxEngine per payroll run. The first calculation for a tax year
asks the dynamic provider for that year's RuleSet (bounded by fetch_timeout);
every later calculation for the same year reuses the cached result. If the
fetch fails for any reason the engine logs it and uses the embedded static
RuleSet instead, and that choice is cached too so one run never mixes sources.

Both paths feed the same calculate_withholding(), so remote and embedded rules
can only differ in data, never in formulas.

Usage:
    engine = TaxEngine(HttpRuleProvider("https://rules.example.com/v1"))
    output = await engine.calculate({"grossPay": 5000, "payFrequency": "monthly", ...})
"""

import asyncio
import logging
from typing import Iterable, Optional, Union

from . import config
from .errors import ConfigurationError, RuleFetchError
from .rules.cache import DYNAMIC, STATIC, ResolvedRules, RuleSetCache
from .rules.provider import RuleProvider
from .rules.static import static_rule_set
from .taxes.schemas import RuleSet, TaxInput, TaxOutput
from .taxes.withholding import calculate_withholding

logger = logging.getLogger(__name__)


class TaxEngine:
    """Aggregates rule resolution and the withholding calculators.

    Args:
        provider: Dynamic RuleProvider; None means embedded rules only
        fallback: RuleSet used when the provider fails (default: embedded)
        jurisdiction: State code the engine is configured for; rule sets for
            any other state are rejected. Defaults to the fallback's state.
        fetch_timeout: Seconds to wait for the provider before falling back

    Raises:
        ConfigurationError: If the fallback rules are for another jurisdiction
    """

    def __init__(
        self,
        provider: Optional[RuleProvider] = None,
        *,
        fallback: Optional[RuleSet] = None,
        jurisdiction: Optional[str] = None,
        fetch_timeout: float = config.DEFAULT_FETCH_TIMEOUT,
    ):
        if fetch_timeout <= 0:
            raise ConfigurationError(f"fetch_timeout must be positive, got {fetch_timeout}")

        self.provider = provider
        self.fallback = fallback or static_rule_set()
        self.jurisdiction = (jurisdiction or self.fallback.state.jurisdiction).strip().upper()
        self.fetch_timeout = fetch_timeout
        self._cache = RuleSetCache()

        if self.fallback.state.jurisdiction != self.jurisdiction:
            raise ConfigurationError(
                f"Fallback rules are for {self.fallback.state.jurisdiction}, "
                f"engine is configured for {self.jurisdiction}"
            )

    @classmethod
    def from_settings(cls) -> "TaxEngine":
        """Build an engine from settings.json and PAYTAX_* environment variables."""
        return cls(
            config.build_provider(),
            jurisdiction=config.get_jurisdiction(),
            fetch_timeout=config.get_fetch_timeout(),
        )

    async def _fetch_dynamic(self, tax_year: int) -> RuleSet:
        rule_set = await asyncio.wait_for(
            self.provider.get_rule_set(tax_year),
            timeout=self.fetch_timeout,
        )
        if rule_set.tax_year != tax_year:
            raise RuleFetchError(
                f"Provider returned {rule_set.tax_year} rules for {tax_year}",
                tax_year=tax_year,
            )
        if rule_set.state.jurisdiction != self.jurisdiction:
            raise RuleFetchError(
                f"Provider returned {rule_set.state.jurisdiction} rules, expected {self.jurisdiction}",
                tax_year=tax_year,
            )
        return rule_set

    async def _load(self, tax_year: int) -> ResolvedRules:
        if self.provider is None:
            logger.debug(f"No rule provider configured; using static rules for {tax_year}")
            return ResolvedRules(self.fallback, STATIC)

        try:
            rule_set = await self._fetch_dynamic(tax_year)
        except asyncio.TimeoutError:
            reason = f"timed out after {self.fetch_timeout}s"
        except asyncio.CancelledError:
            # Our own cancellation propagates; a cancelled fetch falls back
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            reason = "fetch was cancelled"
        except RuleFetchError as e:
            reason = str(e)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
        else:
            logger.info(f"Using dynamic rules for {tax_year} (version {rule_set.version or 'unversioned'})")
            return ResolvedRules(rule_set, DYNAMIC)

        logger.warning(
            f"Rule fetch for {tax_year} failed ({reason}); "
            f"using static {self.fallback.tax_year} rules"
        )
        return ResolvedRules(self.fallback, STATIC)

    async def resolve_rules(self, tax_year: int) -> ResolvedRules:
        """Get the RuleSet for a year, fetching it at most once per engine.

        Never raises for fetch problems; those resolve to the static rules.
        """
        return await self._cache.get_or_load(tax_year, self._load)

    async def calculate(self, tax_input: Union[TaxInput, dict]) -> TaxOutput:
        """Calculate withholding and net pay for one employee and period.

        Args:
            tax_input: TaxInput or a wire-format dict (camelCase keys)

        Raises:
            ValidationError: If the input is invalid
            ConfigurationError: If the filing status is unknown
        """
        if not isinstance(tax_input, TaxInput):
            tax_input = TaxInput.parse(tax_input)

        resolved = await self.resolve_rules(tax_input.tax_year)
        return calculate_withholding(tax_input, resolved.rule_set)

    async def calculate_many(self, tax_inputs: Iterable[Union[TaxInput, dict]]) -> list[TaxOutput]:
        """Calculate a batch against shared, once-resolved rules.

        All inputs are validated before any rules are fetched, so a bad record
        rejects the batch without partial results.
        """
        parsed = [
            item if isinstance(item, TaxInput) else TaxInput.parse(item)
            for item in tax_inputs
        ]
        years = sorted({item.tax_year for item in parsed})
        resolved = dict(zip(years, await asyncio.gather(*(self.resolve_rules(y) for y in years))))
        return [calculate_withholding(item, resolved[item.tax_year].rule_set) for item in parsed]

    def calculate_sync(self, tax_input: Union[TaxInput, dict]) -> TaxOutput:
        """Blocking wrapper around calculate() for callers without an event loop."""
        return asyncio.run(self.calculate(tax_input))

    def resolve_rules_sync(self, tax_year: int) -> ResolvedRules:
        return asyncio.run(self.resolve_rules(tax_year))
