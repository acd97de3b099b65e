"""Tests for TaxEngine rule resolution, fallback and the per-year cache.

Fake providers stand in for the rule service:
- FixedProvider answers with a given RuleSet and counts calls
- FailingProvider raises whatever it is given
- SlowProvider never answers within the engine's timeout
- BlockingOpener hangs an HttpRuleProvider request in its worker thread
"""

import asyncio
import threading
import time
import urllib.error

import pytest

from paytax.sdk.engine import TaxEngine
from paytax.sdk.errors import ConfigurationError, RuleFetchError, ValidationError
from paytax.sdk.rules.cache import DYNAMIC, STATIC, ResolvedRules, RuleSetCache
from paytax.sdk.rules.remote import HttpRuleProvider
from paytax.sdk.rules.static import static_rule_set
from paytax.sdk.taxes.schemas import RuleSet
from paytax.sdk.taxes.withholding import calculate_withholding
from tests.conftest import make_input, rules_data


class FixedProvider:
    def __init__(self, rule_set: RuleSet, delay: float = 0.0):
        self.rule_set = rule_set
        self.delay = delay
        self.calls = []

    async def get_rule_set(self, tax_year: int) -> RuleSet:
        self.calls.append(tax_year)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.rule_set


class FailingProvider:
    def __init__(self, error: BaseException):
        self.error = error
        self.calls = 0

    async def get_rule_set(self, tax_year: int) -> RuleSet:
        self.calls += 1
        raise self.error


class SlowProvider:
    async def get_rule_set(self, tax_year: int) -> RuleSet:
        await asyncio.sleep(10)
        raise AssertionError("should have timed out")


class BlockingOpener:
    """HTTP opener that hangs until released, like an unresponsive rule service."""

    def __init__(self):
        self.release = threading.Event()

    def __call__(self, request, timeout=None):
        self.release.wait(5)
        raise urllib.error.URLError("released")


class TestRuleSetCache:

    def test_loader_runs_once_per_year(self):
        cache = RuleSetCache()
        calls = []

        async def loader(year):
            calls.append(year)
            await asyncio.sleep(0.01)
            return ResolvedRules(static_rule_set(), STATIC)

        async def run():
            return await asyncio.gather(*(cache.get_or_load(2025, loader) for _ in range(10)))

        results = asyncio.run(run())
        assert calls == [2025]
        assert all(r is results[0] for r in results)
        assert 2025 in cache and len(cache) == 1

    def test_clear(self):
        cache = RuleSetCache()

        async def loader(year):
            return ResolvedRules(static_rule_set(), STATIC)

        asyncio.run(cache.get_or_load(2025, loader))
        cache.clear()
        assert cache.get(2025) is None

    def test_resolved_rules_fallback_flag(self):
        assert ResolvedRules(static_rule_set(), STATIC).is_fallback
        assert not ResolvedRules(static_rule_set(), DYNAMIC).is_fallback


class TestDynamicRules:

    def test_uses_provider_rules(self, rules_2026):
        engine = TaxEngine(FixedProvider(rules_2026))
        resolved = asyncio.run(engine.resolve_rules(2026))
        assert resolved.source == DYNAMIC
        assert resolved.rule_set is rules_2026

    def test_calculation_uses_dynamic_data(self, rules_2026):
        engine = TaxEngine(FixedProvider(rules_2026))
        output = asyncio.run(engine.calculate(make_input(gross=5000, year=2026)))
        assert output.taxes.state_disability_insurance == 65.0
        assert output.net_pay == 3934.02

    def test_fetched_once_for_concurrent_batch(self, rules_2026):
        provider = FixedProvider(rules_2026, delay=0.01)
        engine = TaxEngine(provider)

        async def run():
            return await asyncio.gather(*(
                engine.calculate(make_input(gross=1000 + i, year=2026)) for i in range(20)
            ))

        outputs = asyncio.run(run())
        assert provider.calls == [2026]
        assert len(outputs) == 20

    def test_each_year_fetched_separately(self, rules_2026):
        provider = FixedProvider(rules_2026)
        engine = TaxEngine(provider)

        async def run():
            await engine.resolve_rules(2026)
            await engine.resolve_rules(2026)
            await engine.resolve_rules(2027)

        asyncio.run(run())
        assert provider.calls == [2026, 2027]

    def test_calculate_accepts_wire_dict(self, static_rules):
        engine = TaxEngine()
        output = asyncio.run(engine.calculate({
            "grossPay": 5000,
            "payFrequency": "monthly",
            "taxYear": 2025,
            "federal": {"filingStatus": "single"},
        }))
        assert output.net_pay == 3939.02


class TestFallback:

    @pytest.mark.parametrize("error", [
        RuleFetchError("service down", tax_year=2026),
        ConnectionError("reset by peer"),
        RuntimeError("unexpected"),
        asyncio.CancelledError(),
    ])
    def test_provider_failure_falls_back_to_static(self, error):
        provider = FailingProvider(error)
        engine = TaxEngine(provider)
        tax_input = make_input(gross=5000, year=2026)

        output = asyncio.run(engine.calculate(tax_input))

        assert output == calculate_withholding(tax_input, static_rule_set())
        assert asyncio.run(engine.resolve_rules(2026)).is_fallback

    def test_timeout_falls_back_to_static(self):
        engine = TaxEngine(SlowProvider(), fetch_timeout=0.05)
        resolved = asyncio.run(engine.resolve_rules(2026))
        assert resolved.source == STATIC
        assert resolved.rule_set is static_rule_set()

    def test_fallback_is_cached_for_the_run(self):
        provider = FailingProvider(RuleFetchError("down"))
        engine = TaxEngine(provider)

        async def run():
            for _ in range(5):
                await engine.calculate(make_input(year=2026))

        asyncio.run(run())
        assert provider.calls == 1

    def test_fallback_logged(self, caplog):
        engine = TaxEngine(FailingProvider(RuleFetchError("service down")))
        with caplog.at_level("WARNING", logger="paytax.sdk.engine"):
            asyncio.run(engine.resolve_rules(2026))
        assert "service down" in caplog.text
        assert "using static 2025 rules" in caplog.text

    def test_no_provider_uses_static(self):
        resolved = asyncio.run(TaxEngine().resolve_rules(2025))
        assert resolved.source == STATIC

    def test_other_jurisdiction_from_provider_falls_back(self):
        ny_rules = RuleSet.model_validate(rules_data(tax_year=2026, state={"jurisdiction": "NY"}))
        engine = TaxEngine(FixedProvider(ny_rules))
        resolved = asyncio.run(engine.resolve_rules(2026))
        assert resolved.is_fallback

    def test_caller_cancellation_propagates(self):
        engine = TaxEngine(SlowProvider(), fetch_timeout=5)

        async def run():
            task = asyncio.create_task(engine.resolve_rules(2026))
            await asyncio.sleep(0.01)
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(run())


class TestEngineConfiguration:

    def test_jurisdiction_must_match_fallback(self):
        with pytest.raises(ConfigurationError, match="engine is configured for NY"):
            TaxEngine(jurisdiction="NY")

    def test_jurisdiction_normalized(self):
        assert TaxEngine(jurisdiction=" ca ").jurisdiction == "CA"

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_timeout_must_be_positive(self, timeout):
        with pytest.raises(ConfigurationError):
            TaxEngine(fetch_timeout=timeout)

    def test_from_settings_without_config(self, isolated_config):
        engine = TaxEngine.from_settings()
        assert engine.provider is None
        assert engine.jurisdiction == "CA"
        assert engine.fetch_timeout == 5.0


class TestBatchAndSync:

    def test_calculate_many(self, rules_2026):
        provider = FixedProvider(rules_2026)
        engine = TaxEngine(provider)
        outputs = asyncio.run(engine.calculate_many([
            make_input(gross=5000, year=2026),
            make_input(gross=5000, year=2025),
        ]))
        assert outputs[0].taxes.state_disability_insurance == 65.0
        assert outputs[1].taxes.state_disability_insurance == 60.0
        assert sorted(provider.calls) == [2025, 2026]

    def test_calculate_many_rejects_bad_item_before_fetch(self, rules_2026):
        provider = FixedProvider(rules_2026)
        engine = TaxEngine(provider)
        bad = {"grossPay": -1, "payFrequency": "monthly", "taxYear": 2026, "federal": {"filingStatus": "single"}}

        with pytest.raises(ValidationError):
            asyncio.run(engine.calculate_many([make_input(year=2026), bad]))
        assert provider.calls == []

    def test_calculate_sync(self):
        output = TaxEngine().calculate_sync(make_input(gross=5000))
        assert output.net_pay == 3939.02

    def test_invalid_input_raises_validation_error(self):
        with pytest.raises(ValidationError):
            TaxEngine().calculate_sync({"grossPay": 5000})

    def test_calculate_sync_does_not_wait_for_hung_fetch(self):
        opener = BlockingOpener()
        engine = TaxEngine(HttpRuleProvider("https://rules.test", opener=opener), fetch_timeout=0.05)
        started = time.monotonic()
        try:
            output = engine.calculate_sync(make_input(gross=5000, year=2026))
            elapsed = time.monotonic() - started
        finally:
            opener.release.set()
        assert output.net_pay == 3939.02
        assert elapsed < 2

    def test_resolve_rules_sync_falls_back_on_hung_fetch(self):
        opener = BlockingOpener()
        engine = TaxEngine(HttpRuleProvider("https://rules.test", opener=opener), fetch_timeout=0.05)
        started = time.monotonic()
        try:
            resolved = engine.resolve_rules_sync(2026)
            elapsed = time.monotonic() - started
        finally:
            opener.release.set()
        assert resolved.source == STATIC
        assert elapsed < 2
