"""State income tax and state disability insurance (SDI).

Parameterized entirely by the RuleSet's state section, so the same code serves
any single jurisdiction whose withholding is allowance-based bracket tax plus
a flat, capped SDI rate.
"""

from dataclasses import dataclass

from .brackets import bracket_tax, round_cents
from .frequency import periods_per_year
from .schemas import PayFrequency, StateElection, StateRules


@dataclass(frozen=True)
class StateResult:
    """State withholding for one period, each rounded to cents."""
    state_income_tax: float
    state_disability_insurance: float


def calc_state_taxable_income(
    gross_pay: float,
    frequency: PayFrequency,
    election: StateElection,
    rules: StateRules,
) -> float:
    """Annual wages less allowance reductions, floored at 0."""
    annual_wages = gross_pay * periods_per_year(frequency)
    return max(0.0, annual_wages - election.allowances * rules.allowance_amount)


def calc_state_income_tax(
    gross_pay: float,
    frequency: PayFrequency,
    election: StateElection,
    rules: StateRules,
) -> float:
    """State income tax withholding for one period.

    extra_withholding on the election is a per-period amount, annualized
    alongside the bracket tax and divided back out with it. An exempt election
    withholds nothing; SDI is not affected by exemption.
    """
    if election.exempt:
        return 0.0

    periods = periods_per_year(frequency)
    adjusted_annual = calc_state_taxable_income(gross_pay, frequency, election, rules)
    annual_tax = bracket_tax(adjusted_annual, rules.brackets)
    total_annual = annual_tax + election.extra_withholding * periods
    return round_cents(total_annual / periods)


def calc_state_disability_insurance(gross_pay: float, frequency: PayFrequency, rules: StateRules) -> float:
    """SDI on gross pay, capped at the per-period share of the SDI wage base."""
    period_cap = rules.sdi_wage_base / periods_per_year(frequency)
    return round_cents(min(gross_pay, period_cap) * rules.sdi_rate)


def calc_state_taxes(
    gross_pay: float,
    frequency: PayFrequency,
    election: StateElection,
    rules: StateRules,
) -> StateResult:
    return StateResult(
        state_income_tax=calc_state_income_tax(gross_pay, frequency, election, rules),
        state_disability_insurance=calc_state_disability_insurance(gross_pay, frequency, rules),
    )
