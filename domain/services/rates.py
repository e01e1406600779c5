import math
from datetime import datetime

from domain.models.currency import Currency, Rate

CROSS_RATE_DIGITS = 6


def get_inverse_rate(rate: Rate) -> Rate:
    return Rate(
        base=rate.quote,
        quote=rate.base,
        value=1 / rate.value,
        provider=rate.provider,
        at=rate.at,
    )


def has_finite_inverse(rate: Rate) -> bool:
    # Subnormal values have no representable reciprocal
    return math.isfinite(1 / rate.value)


def round_to_significant_digits(value: float, digits: int = CROSS_RATE_DIGITS) -> float:
    """Round ``value`` to ``digits`` significant decimal digits.

    Halves round away from zero on the scaled value. ``0`` and non-finite
    values are returned as is, since they have no magnitude.
    """
    if value == 0 or not math.isfinite(value):
        return float(value)
    magnitude = math.floor(math.log10(abs(value)))
    try:
        factor = math.pow(10, digits - 1 - magnitude)
    except OverflowError:
        # Subnormal range: the scale factor is not representable
        return float(f"{value:.{digits - 1}e}")
    scaled = abs(value) * factor
    rounded = math.floor(scaled + 0.5) / factor
    return math.copysign(rounded, value)


def compute_cross_rate(
    first: Rate,
    second: Rate,
    base: Currency,
    quote: Currency,
    at: datetime,
    digits: int = CROSS_RATE_DIGITS,
) -> Rate | None:
    """Chain ``first`` (A->P) and ``second`` (P->B) into A->B.

    Returns None when the two edges do not share the pivot, or when their
    product leaves the positive finite range.
    """
    if first.quote != second.base:
        return None

    value = round_to_significant_digits(first.value * second.value, digits)
    if value <= 0 or not math.isfinite(value):
        return None

    return Rate(
        base=base,
        quote=quote,
        value=value,
        provider=f"{first.provider}+{second.provider}",
        at=at,
    )
