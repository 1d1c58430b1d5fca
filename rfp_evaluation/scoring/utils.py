"""
Decimal Utilities
rfp_evaluation/scoring/utils.py

Precision-safe decimal math for consensus scoring. Intermediate values keep
full Decimal precision; only reported values are quantized.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence


def to_decimal(value: float) -> Decimal:
    """Convert a float (or int) to Decimal through its shortest repr."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value: Decimal, places: int) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    return value.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("1"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def mean(values: Sequence[Decimal]) -> Decimal:
    """
    Arithmetic mean.

    Returns Decimal("0") for an empty sequence.
    """
    if not values:
        return Decimal("0")
    return sum(values, Decimal("0")) / Decimal(len(values))


def population_std_dev(values: Sequence[Decimal], mu: Decimal) -> Decimal:
    """
    Population standard deviation around a precomputed mean.

    Formula: sqrt(Σ(value_i - mean)² / n)
    """
    if not values:
        return Decimal("0")
    variance = sum(((v - mu) ** 2 for v in values), Decimal("0")) / Decimal(len(values))
    return variance.sqrt()


def weighted_sum(values: Iterable[Decimal], weights: Iterable[Decimal]) -> Decimal:
    """
    Σ(value_i × weight_i).

    Weights of a validated rubric already sum to 1.0, so no normalization.
    """
    values_l: List[Decimal] = list(values)
    weights_l: List[Decimal] = list(weights)
    if len(values_l) != len(weights_l):
        raise ValueError("values and weights must have same length")
    return sum((v * w for v, w in zip(values_l, weights_l)), Decimal("0"))
