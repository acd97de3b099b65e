"""Social Security, Medicare and Additional Medicare withholding.

Wage caps are pro-rated per period (annual base / periods) rather than tracked
against year-to-date wages. Near the cap this under- or over-withholds compared
to cumulative tracking; callers that need exact YTD capping must reconcile
outside this engine.
"""

from dataclasses import dataclass

from .brackets import round_cents
from .frequency import periods_per_year
from .schemas import FicaRules, PayFrequency


@dataclass(frozen=True)
class FicaResult:
    """FICA withholding for one period, each rounded to cents."""
    social_security: float
    medicare: float
    additional_medicare: float

    @property
    def total(self) -> float:
        return self.social_security + self.medicare + self.additional_medicare


def calc_social_security(gross_pay: float, frequency: PayFrequency, rules: FicaRules) -> float:
    """SS tax on gross pay, capped at the per-period share of the wage base."""
    period_cap = rules.social_security_wage_base / periods_per_year(frequency)
    taxable = min(gross_pay, period_cap)
    return round_cents(taxable * rules.social_security_rate)


def calc_medicare(gross_pay: float, rules: FicaRules) -> float:
    """Base Medicare tax. No wage cap."""
    return round_cents(gross_pay * rules.medicare_rate)


def calc_additional_medicare(gross_pay: float, frequency: PayFrequency, rules: FicaRules) -> float:
    """Additional Medicare surtax on annualized wages above the threshold.

    The annual excess is surtaxed and spread evenly over every period of the
    year, not applied only in the period where the threshold is crossed.
    """
    periods = periods_per_year(frequency)
    annual_gross = gross_pay * periods
    if annual_gross <= rules.additional_medicare_threshold:
        return 0.0

    excess_per_period = (annual_gross - rules.additional_medicare_threshold) / periods
    return round_cents(excess_per_period * rules.additional_medicare_rate)


def calc_fica(gross_pay: float, frequency: PayFrequency, rules: FicaRules) -> FicaResult:
    return FicaResult(
        social_security=calc_social_security(gross_pay, frequency, rules),
        medicare=calc_medicare(gross_pay, rules),
        additional_medicare=calc_additional_medicare(gross_pay, frequency, rules),
    )
