from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Tuple


class RubricCriterion(BaseModel):
    """
    A single weighted scoring criterion.

    Scale ordering and weight normalization are checked across the whole
    rubric by scoring.rubric_validator.validate_rubric, not here.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Criterion identifier, unique within a rubric"
    )

    label: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display label (e.g. 'Technical Capability')"
    )

    weight: float = Field(
        ...,
        ge=0,
        le=1,
        description="Share of the overall score; weights of a rubric sum to 1.0"
    )

    scale_min: float = Field(
        default=1,
        description="Lowest allowed raw score (inclusive)"
    )

    scale_max: float = Field(
        default=5,
        description="Highest allowed raw score (inclusive)"
    )

    guidance: Optional[str] = Field(
        default=None,
        description="Instructions shown to evaluators"
    )

    def in_range(self, value: float) -> bool:
        return self.scale_min <= value <= self.scale_max


class Rubric(BaseModel):
    """
    Fixed, shared set of criteria. Evaluations hold it by reference and
    never modify it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Rubric identifier")
    name: str = Field(default="", max_length=255, description="Rubric name")
    criteria: Tuple[RubricCriterion, ...] = Field(
        default=(),
        description="Criteria in display order"
    )

    @property
    def criterion_ids(self) -> Tuple[str, ...]:
        return tuple(c.id for c in self.criteria)

    @property
    def max_possible(self) -> float:
        """Largest scale_max across criteria (0 for an empty rubric)."""
        return max((c.scale_max for c in self.criteria), default=0)

    def criterion(self, criterion_id: str) -> Optional[RubricCriterion]:
        for c in self.criteria:
            if c.id == criterion_id:
                return c
        return None
