"""Dynamic rules from a remote rule-distribution service.

GET {base_url}/rulesets/{year} returns a JSON RuleSet in the same format as
the YAML rule files. Any failure (transport, HTTP status, bad JSON, schema,
wrong year) becomes RuleFetchError so the engine can fall back.
"""

import asyncio
import json
import logging
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from ..errors import ConfigurationError, RuleFetchError
from ..taxes.schemas import RuleSet
from .files import parse_rule_data

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 5.0
USER_AGENT = "paytax/rules-client"

# Kept apart from the loop's default executor, which asyncio.run() joins before returning
_FETCH_EXECUTOR = ThreadPoolExecutor(max_workers=4, thread_name_prefix="paytax-rules")


class HttpRuleProvider:
    """RuleProvider for a remote, year-versioned rule service.

    Args:
        base_url: Service root, e.g. "https://rules.example.com/api/v1"
        api_key: Optional bearer token
        timeout: Socket timeout in seconds for the HTTP request itself
        opener: Callable(request, timeout=...) returning a response context
            manager; defaults to urllib.request.urlopen
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        opener: Optional[Callable] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._opener = opener or urllib.request.urlopen

    def url_for(self, tax_year: int) -> str:
        return f"{self.base_url}/rulesets/{tax_year}"

    def _headers(self) -> dict:
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _fetch(self, tax_year: int) -> RuleSet:
        url = self.url_for(tax_year)
        request = urllib.request.Request(url, headers=self._headers(), method="GET")

        try:
            with self._opener(request, timeout=self.timeout) as response:
                body = response.read()
        except OSError as e:
            # URLError, HTTPError and socket timeouts are all OSError
            raise RuleFetchError(f"Rule service request failed for {tax_year}: {e}", tax_year=tax_year) from e

        try:
            data = json.loads(body)
        except ValueError as e:
            raise RuleFetchError(f"Rule service returned invalid JSON for {tax_year}: {e}", tax_year=tax_year) from e

        try:
            rule_set = parse_rule_data(data, f"ruleset {tax_year}")
        except ConfigurationError as e:
            raise RuleFetchError(str(e), tax_year=tax_year) from e

        if rule_set.tax_year != tax_year:
            raise RuleFetchError(
                f"Rule service returned tax_year {rule_set.tax_year} for request {tax_year}",
                tax_year=tax_year,
            )
        return rule_set

    async def get_rule_set(self, tax_year: int) -> RuleSet:
        """Fetch the RuleSet for a year without blocking the event loop."""
        logger.debug(f"Fetching {tax_year} rules from {self.url_for(tax_year)}")
        loop = asyncio.get_running_loop()
        rule_set = await loop.run_in_executor(_FETCH_EXECUTOR, self._fetch, tax_year)
        logger.info(f"Fetched {tax_year} rules (version {rule_set.version or 'unversioned'})")
        return rule_set
