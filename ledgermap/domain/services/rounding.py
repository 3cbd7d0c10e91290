"""
Cent rounding and remainder tie-break helpers shared by the allocators.
"""

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Sequence, Union

Number = Union[int, float, Decimal]

CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Convert a plain number to Decimal without binary float artefacts"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_numeric(value: object) -> bool:
    """True for finite int / float / Decimal values (bool excluded)"""
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    return False


def to_finite_decimal(value: Number) -> Decimal:
    """Like to_decimal, but NaN and infinities raise ValueError"""
    converted = to_decimal(value)
    if not converted.is_finite():
        raise ValueError(f"Expected a finite number, got {value!r}")
    return converted


def round_to_cents(value: Number) -> Decimal:
    """
    Round half-up to two decimal places.

    Zero results carry no sign. Values too large to hold at cent precision
    raise ValueError.
    """
    try:
        rounded = to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount {value} is too large to round to cents") from None
    return rounded.copy_abs() if rounded.is_zero() else rounded


def largest_magnitude_index(values: Sequence[Decimal]) -> Optional[int]:
    """
    Index of the value with the largest absolute magnitude.

    Ties go to the first occurrence. Returns None for an empty sequence.
    """
    if not values:
        return None
    index = 0
    largest = abs(values[0])
    for i in range(1, len(values)):
        candidate = abs(values[i])
        if candidate > largest:
            index = i
            largest = candidate
    return index
