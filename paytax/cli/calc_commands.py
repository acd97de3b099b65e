"""Paycheck calculation command."""

import json
from datetime import date

import click

from paytax.sdk import (
    ConfigurationError,
    PayFrequency,
    TaxEngine,
    TaxInput,
    ValidationError,
    explain_withholding,
)


LINE_ITEMS = [
    ("federal_income_tax", "Federal income tax"),
    ("social_security", "Social Security"),
    ("medicare", "Medicare"),
    ("additional_medicare", "Additional Medicare"),
    ("state_income_tax", "State income tax"),
    ("state_disability_insurance", "State disability insurance"),
]


def _money(amount: float) -> str:
    return f"{amount:>12,.2f}"


@click.command("calc")
@click.argument("gross", type=float)
@click.option("--frequency", "-f", type=click.Choice([f.value for f in PayFrequency]),
              default=PayFrequency.BIWEEKLY.value, show_default=True, help="Pay frequency.")
@click.option("--year", "-y", type=int, default=None, help="Tax year (default: current year).")
@click.option("--filing-status", "-s", default="single", show_default=True,
              help="Federal filing status: single, married or head.")
@click.option("--step2", is_flag=True, help="W-4 Step 2 multiple jobs checkbox.")
@click.option("--dependents", type=int, default=0, show_default=True, help="Number of dependents.")
@click.option("--other-income", type=float, default=0.0, show_default=True,
              help="W-4 Step 4(a) other income (annual).")
@click.option("--deductions", type=float, default=0.0, show_default=True,
              help="W-4 Step 4(b) deductions (annual).")
@click.option("--extra-federal", type=float, default=0.0, show_default=True,
              help="Extra federal withholding per period.")
@click.option("--allowances", type=int, default=0, show_default=True, help="State withholding allowances.")
@click.option("--extra-state", type=float, default=0.0, show_default=True,
              help="Extra state withholding per period.")
@click.option("--exempt-federal", is_flag=True, help="Employee claims exemption from federal withholding.")
@click.option("--exempt-state", is_flag=True, help="Employee claims exemption from state withholding.")
@click.option("--static", "static_only", is_flag=True, help="Use embedded rules, skip dynamic providers.")
@click.option("--json", "as_json", is_flag=True, help="Print the JSON output contract.")
@click.option("--trace", is_flag=True, help="Print the full calculation trace as JSON.")
def calc(gross, frequency, year, filing_status, step2, dependents, other_income, deductions,
         extra_federal, allowances, extra_state, exempt_federal, exempt_state, static_only, as_json, trace):
    """Calculate withholding and net pay for one paycheck.

    GROSS is the gross pay for a single pay period.

    Examples:
        paytax calc 5000 -f monthly -y 2025
        paytax calc 2400 -s married --dependents 2 --allowances 2 --json
    """
    data = {
        "grossPay": gross,
        "payFrequency": frequency,
        "taxYear": year or date.today().year,
        "federal": {
            "filingStatus": filing_status,
            "step2Checkbox": step2,
            "dependents": dependents,
            "otherIncome": other_income,
            "deductions": deductions,
            "extraWithholding": extra_federal,
            "exempt": exempt_federal,
        },
        "state": {
            "allowances": allowances,
            "extraWithholding": extra_state,
            "exempt": exempt_state,
        },
    }

    try:
        tax_input = TaxInput.parse(data)
        engine = TaxEngine() if static_only else TaxEngine.from_settings()
        resolved = engine.resolve_rules_sync(tax_input.tax_year)
        output = engine.calculate_sync(tax_input)
        trace_data = explain_withholding(tax_input, resolved.rule_set) if trace else None
    except (ValidationError, ConfigurationError) as e:
        raise click.ClickException(str(e))

    if trace_data is not None:
        trace_data["rules"]["resolved_from"] = resolved.source
        click.echo(json.dumps(trace_data, indent=2))
        return

    if as_json:
        click.echo(json.dumps(output.to_dict(), indent=2))
        return

    rule_set = resolved.rule_set
    click.echo(
        f"Rules: {rule_set.tax_year} {rule_set.state.jurisdiction} "
        f"({resolved.source}{', version ' + rule_set.version if rule_set.version else ''})"
    )
    if resolved.is_fallback and rule_set.tax_year != tax_input.tax_year:
        click.echo(f"Warning: no {tax_input.tax_year} rules available, computed with {rule_set.tax_year} rules.")
    click.echo()
    click.echo(f"  {'Gross pay':<28}{_money(tax_input.gross_pay)}")
    for field, label in LINE_ITEMS:
        click.echo(f"  {label:<28}{_money(getattr(output.taxes, field))}")
    click.echo(f"  {'-' * 40}")
    click.echo(f"  {'Total withholding':<28}{_money(output.total_withholding)}")
    click.echo(f"  {'Net pay':<28}{_money(output.net_pay)}")
