"""Per-period withholding for one employee against one RuleSet.

This is the single calculation core. The engine calls it with whichever
RuleSet it resolved (remote or embedded); nothing else computes taxes.
"""

import logging
import math
from typing import Any

from .brackets import bracket_slices, round_cents
from .federal import calc_federal_income_tax, calc_federal_taxable_income, resolve_filing_status
from .fica import calc_fica
from .frequency import periods_per_year
from .schemas import RuleSet, TaxBreakdown, TaxInput, TaxOutput
from .state import calc_state_taxable_income, calc_state_taxes

logger = logging.getLogger(__name__)


def calculate_withholding(tax_input: TaxInput, rules: RuleSet) -> TaxOutput:
    """Calculate all withholding and net pay for a single pay period.

    Each component is rounded to cents on its own; net pay is gross minus the
    sum of the rounded components.

    Args:
        tax_input: Validated employee input for the period
        rules: RuleSet for the period's tax year

    Returns:
        TaxOutput with net pay and per-component withholding

    Raises:
        ConfigurationError: If the filing status has no federal tables
    """
    gross = tax_input.gross_pay
    frequency = tax_input.pay_frequency

    federal_income_tax = calc_federal_income_tax(gross, frequency, tax_input.federal, rules.federal)
    fica = calc_fica(gross, frequency, rules.fica)
    state = calc_state_taxes(gross, frequency, tax_input.state, rules.state)

    taxes = TaxBreakdown(
        federal_income_tax=federal_income_tax,
        social_security=fica.social_security,
        medicare=fica.medicare,
        additional_medicare=fica.additional_medicare,
        state_income_tax=state.state_income_tax,
        state_disability_insurance=state.state_disability_insurance,
    )
    net_pay = round_cents(gross - taxes.total)

    logger.debug(f"Withholding {tax_input.tax_year}: gross={gross:.2f} withheld={taxes.total:.2f} net={net_pay:.2f}")
    return TaxOutput(net_pay=net_pay, taxes=taxes)


def explain_withholding(tax_input: TaxInput, rules: RuleSet) -> dict[str, Any]:
    """Build a calculation trace: intermediate amounts and bracket slices.

    Returns:
        Dict with rule metadata, annualized amounts, bracket breakdowns and
        the final output contract.
    """
    frequency = tax_input.pay_frequency
    periods = periods_per_year(frequency)
    status = resolve_filing_status(tax_input.federal.filing_status, rules.federal)

    fit_taxable = calc_federal_taxable_income(tax_input.gross_pay, frequency, tax_input.federal, rules.federal)
    state_taxable = calc_state_taxable_income(tax_input.gross_pay, frequency, tax_input.state, rules.state)
    output = calculate_withholding(tax_input, rules)

    def _slices(income, brackets):
        return [
            {
                "lower": s.lower,
                "upper": None if math.isinf(s.upper) else s.upper,
                "rate": s.rate,
                "amount": s.amount,
                "tax": s.tax,
            }
            for s in bracket_slices(income, brackets)
        ]

    return {
        "rules": {
            "tax_year": rules.tax_year,
            "source": rules.source,
            "version": rules.version,
            "jurisdiction": rules.state.jurisdiction,
        },
        "inputs": tax_input.model_dump(by_alias=True, mode="json"),
        "steps": {
            "periods_per_year": periods,
            "annual_wages": tax_input.gross_pay * periods,
            "filing_status": status.value,
            "fit_exempt": tax_input.federal.exempt,
            "state_exempt": tax_input.state.exempt,
            "fit_taxable_annual": fit_taxable,
            "fit_brackets": _slices(fit_taxable, rules.federal.brackets[status]),
            "state_taxable_annual": state_taxable,
            "state_brackets": _slices(state_taxable, rules.state.brackets),
        },
        "output": output.to_dict(),
        "rounding": "Each component rounded half-up to cents; net pay from rounded components",
    }
