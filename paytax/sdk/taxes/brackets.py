"""Progressive bracket tax and cent rounding.

Bracket math stays unrounded; only final per-component withholding is
rounded, with round_cents().
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .schemas import TaxBracket


CENT = Decimal("0.01")

# Enough digits to quantize any finite float (max ~1.8e308) to cents
CENT_CONTEXT = Context(prec=320)


def round_cents(amount: float) -> float:
    """Round to the nearest cent, halves away from zero.

    Goes through the shortest decimal repr of the float so that values like
    72.505 (stored as 72.50499999...) round the way a person reading them
    expects.

    Example: 394.665 -> 394.67, 0.004999 -> 0.0
    """
    return float(Decimal(repr(amount)).quantize(CENT, rounding=ROUND_HALF_UP, context=CENT_CONTEXT))


@dataclass(frozen=True)
class BracketSlice:
    """Portion of income that fell into one bracket."""
    lower: float
    upper: float
    rate: float
    amount: float
    tax: float


def bracket_slices(income: float, brackets: Sequence["TaxBracket"]) -> list[BracketSlice]:
    """Split annual taxable income across an ascending, contiguous bracket table.

    A value exactly equal to a bracket's upper bound is taxed entirely in that
    bracket; only income strictly above the bound enters the next one.

    Args:
        income: Annual taxable income (must be >= 0)
        brackets: Ordered brackets; lower bound of each is the previous up_to

    Returns:
        One BracketSlice per bracket touched, in ascending order. Empty for
        zero income.

    Raises:
        ValueError: If income is negative
    """
    if income < 0:
        raise ValueError(f"Taxable income cannot be negative: {income}")

    slices = []
    previous_threshold = 0.0
    for bracket in brackets:
        if income <= previous_threshold:
            break
        upper = bracket.upper_bound
        amount = min(income, upper) - previous_threshold
        slices.append(BracketSlice(
            lower=previous_threshold,
            upper=upper,
            rate=bracket.rate,
            amount=amount,
            tax=amount * bracket.rate,
        ))
        if income <= upper:
            break
        previous_threshold = upper

    return slices


def bracket_tax(income: float, brackets: Sequence["TaxBracket"]) -> float:
    """Calculate marginal-rate tax on annual taxable income. Not rounded."""
    return sum((s.tax for s in bracket_slices(income, brackets)), 0.0)
