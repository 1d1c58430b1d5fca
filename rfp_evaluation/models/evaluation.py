from pydantic import BaseModel, ConfigDict, Field
from uuid import uuid4
from datetime import datetime, timezone
from typing import List, Optional

from rfp_evaluation.models.enumerations import EvaluationStatus
from rfp_evaluation.models.rubric import Rubric


class EvaluatorScore(BaseModel):
    """
    One evaluator's raw score for one criterion.

    At most one record exists per (evaluator_id, criterion_id) within an
    evaluation; a resubmission replaces it.
    """

    model_config = ConfigDict(frozen=True)

    evaluator_id: str = Field(..., min_length=1, description="Evaluator user ID")
    evaluator_name: str = Field(..., description="Evaluator display name")
    evaluator_role: str = Field(..., description="Evaluator role on the evaluation team")
    criterion_id: str = Field(..., min_length=1, description="Rubric criterion scored")
    raw_score: float = Field(..., description="Score on the criterion's scale")
    notes: Optional[str] = Field(default=None, description="Evaluator comments")
    submitted_at: datetime = Field(..., description="Submission timestamp (UTC)")


class EvaluationCreate(BaseModel):
    """
    Model for creating a new evaluation instance.
    """

    rubric: Rubric = Field(..., description="Rubric the vendor submission is scored against")
    vendor_id: str = Field(..., min_length=1, description="Vendor whose submission is evaluated")
    vendor_name: Optional[str] = Field(default=None, max_length=255, description="Vendor display name")
    rfp_id: Optional[str] = Field(default=None, description="RFP the evaluation belongs to")
    is_blind: bool = Field(default=False, description="Hide vendor identity from evaluators")
    required_evaluators: Optional[int] = Field(
        default=None,
        description="Quorum of complete submissions; defaults to DEFAULT_REQUIRED_EVALUATORS"
    )
    deadline: Optional[datetime] = Field(default=None, description="Deadline, enforced by the caller")


class EvaluationInstance(BaseModel):
    """
    Evaluation of one vendor submission. Owns its score records.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique evaluation identifier"
    )

    rfp_id: Optional[str] = Field(default=None, description="RFP the evaluation belongs to")

    rubric: Rubric = Field(..., description="Shared, read-only rubric")

    vendor_id: str = Field(..., min_length=1, description="Vendor whose submission is evaluated")

    vendor_name: Optional[str] = Field(default=None, description="Vendor display name")

    is_blind: bool = Field(default=False, description="Blind evaluation flag")

    required_evaluators: int = Field(
        ...,
        ge=1,
        description="Distinct complete submissions needed for completion and finalization"
    )

    status: EvaluationStatus = Field(
        default=EvaluationStatus.PENDING,
        description="Cached lifecycle status"
    )

    scores: List[EvaluatorScore] = Field(
        default_factory=list,
        description="Recorded scores; replaced as a whole on every write"
    )

    deadline: Optional[datetime] = Field(default=None, description="Evaluation deadline")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Record creation timestamp (UTC)"
    )

    finalized_at: Optional[datetime] = Field(default=None, description="Finalization timestamp (UTC)")

    @property
    def rubric_id(self) -> str:
        return self.rubric.id

    @property
    def is_finalized(self) -> bool:
        return self.status == EvaluationStatus.FINALIZED

    def scores_for_evaluator(self, evaluator_id: str) -> List[EvaluatorScore]:
        return [s for s in self.scores if s.evaluator_id == evaluator_id]

    def scores_for_criterion(self, criterion_id: str) -> List[EvaluatorScore]:
        return [s for s in self.scores if s.criterion_id == criterion_id]

    def evaluator_ids(self) -> List[str]:
        """Distinct evaluator ids in first-submission order."""
        seen: List[str] = []
        for s in self.scores:
            if s.evaluator_id not in seen:
                seen.append(s.evaluator_id)
        return seen
