"""Federal income tax withholding.

Annualizes the period's wages, adds W-4 other income, subtracts the standard
deduction, W-4 deductions and the per-dependent amount, and runs the filing
status's bracket table. The result is doubled when the W-4 Step 2 checkbox is
set, then per-period extra withholding is added and the year is spread back
over the pay periods. Exempt employees get zero.
"""

import logging

from ..errors import ConfigurationError
from .brackets import bracket_tax, round_cents
from .frequency import periods_per_year
from .schemas import FederalElection, FederalRules, FilingStatus, PayFrequency

logger = logging.getLogger(__name__)


def resolve_filing_status(filing_status: str, rules: FederalRules) -> FilingStatus:
    """Map an election's filing status onto the rule tables.

    Raises:
        ConfigurationError: If the status is unknown or has no tables
    """
    try:
        status = FilingStatus(filing_status)
    except ValueError:
        supported = ", ".join(s.value for s in FilingStatus)
        raise ConfigurationError(
            f"Unknown filing status '{filing_status}'. Supported: {supported}"
        ) from None

    if status not in rules.standard_deduction or status not in rules.brackets:
        raise ConfigurationError(f"Rule set has no federal tables for filing status '{status.value}'")
    return status


def calc_federal_taxable_income(
    gross_pay: float,
    frequency: PayFrequency,
    election: FederalElection,
    rules: FederalRules,
) -> float:
    """Annual taxable income, floored at 0.

    Annual wages plus W-4 Step 4(a) other income, less the standard deduction,
    Step 4(b) deductions and the per-dependent amount.
    """
    status = resolve_filing_status(election.filing_status, rules)
    annual_income = gross_pay * periods_per_year(frequency) + election.other_income
    reductions = rules.standard_deduction[status] + election.deductions + election.dependents * rules.dependent_credit
    return max(0.0, annual_income - reductions)


def calc_federal_income_tax(
    gross_pay: float,
    frequency: PayFrequency,
    election: FederalElection,
    rules: FederalRules,
) -> float:
    """Calculate federal income tax withholding for one pay period.

    Args:
        gross_pay: Gross wages for the period
        frequency: Pay frequency
        election: W-4 elections (extra_withholding is per period)
        rules: Federal section of the active RuleSet

    Returns:
        Withholding for the period, rounded to cents
    """
    periods = periods_per_year(frequency)
    status = resolve_filing_status(election.filing_status, rules)

    # Exempt employees have no federal income tax withheld, extra included
    if election.exempt:
        logger.debug(f"FIT: exempt, status={status.value}")
        return 0.0

    taxable_income = calc_federal_taxable_income(gross_pay, frequency, election, rules)
    annual_tax = bracket_tax(taxable_income, rules.brackets[status])

    # Multiple jobs / spouse works
    if election.step2_checkbox:
        annual_tax *= 2

    total_annual = annual_tax + election.extra_withholding * periods
    withholding = round_cents(total_annual / periods)

    logger.debug(
        f"FIT: status={status.value} taxable={taxable_income:.2f} "
        f"annual_tax={annual_tax:.2f} per_period={withholding:.2f}"
    )
    return withholding
