"""YAML rule files: rules_dir/{year}.yaml.

Lets a deployment ship updated tax tables as data files without touching the
calculation code. JSON files are accepted too since YAML is a superset.
"""

import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError as SchemaError

from ..errors import ConfigurationError, RuleFetchError
from ..taxes.schemas import RuleSet

logger = logging.getLogger(__name__)


def parse_rule_data(data: object, label: str) -> RuleSet:
    """Validate raw rule data into a RuleSet.

    Raises:
        ConfigurationError: If the data does not match the RuleSet schema
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"{label}: expected a mapping at top level, found {type(data).__name__}")
    try:
        return RuleSet.model_validate(data)
    except SchemaError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"{label}: invalid rule set: {problems}") from e


def load_rule_file(path: Union[str, Path]) -> RuleSet:
    """Load and validate a single YAML/JSON rule file.

    Raises:
        ConfigurationError: If the file is missing, unparseable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Rule file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path.name}: not valid YAML: {e}") from e

    return parse_rule_data(data, path.name)


class FileRuleProvider:
    """RuleProvider backed by a directory of {year}.yaml files."""

    def __init__(self, rules_dir: Union[str, Path]):
        self.rules_dir = Path(rules_dir).expanduser()

    def path_for(self, tax_year: int) -> Path:
        return self.rules_dir / f"{tax_year}.yaml"

    def available_years(self) -> list[int]:
        """Get sorted list of available rule years (descending)."""
        years = [int(p.stem) for p in self.rules_dir.glob("*.yaml") if p.stem.isdigit()]
        return sorted(years, reverse=True)

    async def get_rule_set(self, tax_year: int) -> RuleSet:
        path = self.path_for(tax_year)
        try:
            rule_set = load_rule_file(path)
        except ConfigurationError as e:
            raise RuleFetchError(str(e), tax_year=tax_year) from e

        if rule_set.tax_year != tax_year:
            raise RuleFetchError(
                f"{path.name} declares tax_year {rule_set.tax_year}, expected {tax_year}",
                tax_year=tax_year,
            )

        logger.debug(f"Loaded {tax_year} rules from {path}")
        return rule_set
