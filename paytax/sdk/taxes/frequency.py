"""Pay frequency normalization (per-period <-> annual). No rounding here."""

from typing import Union

from ..errors import ValidationError
from .schemas import PayFrequency, normalize_frequency


# Pay periods by frequency
PAY_PERIODS = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.BIWEEKLY: 26,
    PayFrequency.SEMIMONTHLY: 24,
    PayFrequency.MONTHLY: 12,
}


def periods_per_year(frequency: Union[PayFrequency, str]) -> int:
    """Get number of pay periods for a frequency.

    Raises:
        ValidationError: If the frequency is not supported
    """
    try:
        return PAY_PERIODS[PayFrequency(normalize_frequency(frequency))]
    except ValueError:
        supported = ", ".join(f.value for f in PayFrequency)
        raise ValidationError(
            f"Unsupported pay frequency '{frequency}'. Supported: {supported}"
        ) from None


def annualize(amount: float, frequency: Union[PayFrequency, str]) -> float:
    return amount * periods_per_year(frequency)


def deannualize(annual_amount: float, frequency: Union[PayFrequency, str]) -> float:
    return annual_amount / periods_per_year(frequency)
