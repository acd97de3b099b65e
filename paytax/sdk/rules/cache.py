"""Populate-once, many-reader cache of resolved RuleSets keyed by tax year."""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ..taxes.schemas import RuleSet


DYNAMIC = "dynamic"
STATIC = "static"


@dataclass(frozen=True)
class ResolvedRules:
    """A RuleSet plus where it came from ('dynamic' or 'static')."""
    rule_set: RuleSet
    source: str

    @property
    def is_fallback(self) -> bool:
        return self.source == STATIC


class RuleSetCache:
    """Per-year cache; only the first write for a year takes a lock.

    Concurrent callers asking for an uncached year wait on the same lock, so
    the loader runs once per year no matter how many employees are in flight.
    """

    def __init__(self):
        self._entries: dict[int, ResolvedRules] = {}
        self._locks: dict[int, asyncio.Lock] = {}

    def get(self, tax_year: int) -> Optional[ResolvedRules]:
        return self._entries.get(tax_year)

    def __contains__(self, tax_year: int) -> bool:
        return tax_year in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._locks.clear()

    async def get_or_load(
        self,
        tax_year: int,
        loader: Callable[[int], Awaitable[ResolvedRules]],
    ) -> ResolvedRules:
        entry = self._entries.get(tax_year)
        if entry is not None:
            return entry

        lock = self._locks.setdefault(tax_year, asyncio.Lock())
        async with lock:
            entry = self._entries.get(tax_year)
            if entry is None:
                entry = await loader(tax_year)
                self._entries[tax_year] = entry
        return entry
