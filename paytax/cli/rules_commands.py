"""Rule set inspection commands."""

import json
from datetime import date

import click
import yaml

from paytax.sdk import ConfigurationError, TaxEngine, load_rule_file


@click.group()
def rules():
    """Inspect and validate tax rule sets."""
    pass


@rules.command("show")
@click.option("--year", "-y", type=int, default=None, help="Tax year (default: current year).")
@click.option("--static", "static_only", is_flag=True, help="Show the embedded rules.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON instead of YAML.")
def rules_show(year, static_only, as_json):
    """Show the rule set the engine resolves for a tax year."""
    tax_year = year or date.today().year
    try:
        engine = TaxEngine() if static_only else TaxEngine.from_settings()
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    resolved = engine.resolve_rules_sync(tax_year)
    data = resolved.rule_set.model_dump(mode="json")

    if as_json:
        click.echo(json.dumps({"resolved_from": resolved.source, "rule_set": data}, indent=2))
        return

    click.echo(f"# Requested {tax_year}, resolved from {resolved.source} rules ({resolved.rule_set.tax_year})")
    click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip())


@rules.command("validate")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def rules_validate(path):
    """Validate a YAML or JSON rule file.

    Checks every required section, filing status coverage, and that each
    bracket table is ascending and ends with an unbounded bracket.
    """
    try:
        rule_set = load_rule_file(path)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    click.echo(
        f"OK: {path} - tax year {rule_set.tax_year}, "
        f"jurisdiction {rule_set.state.jurisdiction}, version {rule_set.version or 'n/a'}"
    )
