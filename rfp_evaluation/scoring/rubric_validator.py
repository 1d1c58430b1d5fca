"""
Rubric Validator
rfp_evaluation/scoring/rubric_validator.py

Checks a criteria list before an evaluation may accept scores:
  1. at least one criterion
  2. unique criterion ids
  3. scale_min < scale_max for every criterion
  4. Σ weight == 1.0 within tolerance
"""
import structlog
from collections import Counter
from decimal import Decimal
from typing import Optional, Sequence

from rfp_evaluation.config import get_settings
from rfp_evaluation.core.exceptions import (
    DuplicateCriterionError,
    EmptyRubricError,
    InvalidScaleError,
    WeightsNotNormalizedError,
)
from rfp_evaluation.models.rubric import RubricCriterion
from rfp_evaluation.scoring.utils import to_decimal

logger = structlog.get_logger(__name__)


def validate_rubric(
    criteria: Sequence[RubricCriterion],
    tolerance: Optional[float] = None,
) -> None:
    """
    Validate a rubric's criteria. Pure; raises a RubricError subclass on the
    first failing rule.

    Args:
        criteria: Criteria of one rubric.
        tolerance: Allowed |Σ weight − 1|. Defaults to settings.WEIGHT_TOLERANCE.
    """
    if tolerance is None:
        tolerance = get_settings().WEIGHT_TOLERANCE

    if not criteria:
        raise EmptyRubricError()

    duplicates = [cid for cid, n in Counter(c.id for c in criteria).items() if n > 1]
    if duplicates:
        raise DuplicateCriterionError(duplicates)

    for c in criteria:
        if c.scale_min >= c.scale_max:
            raise InvalidScaleError(c.id, c.scale_min, c.scale_max)

    total = sum((to_decimal(c.weight) for c in criteria), Decimal("0"))
    if abs(total - Decimal("1")) > to_decimal(tolerance):
        raise WeightsNotNormalizedError(float(total), tolerance)

    logger.debug(
        "rubric_validated",
        criteria_count=len(criteria),
        total_weight=float(total),
    )
