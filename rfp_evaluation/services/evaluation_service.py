"""
Evaluation Service - External Interface
rfp_evaluation/services/evaluation_service.py

Id-based entry point used by the surrounding application (transport and
storage layers live outside this package):

  validate_rubric      → RubricValidator
  create_evaluation    → RubricValidator + EvaluationRepository
  submit_score         → ScoreRecorder  → EvaluationLifecycle.refresh_status
  withdraw_submission  → EvaluationLifecycle.withdraw
  finalize             → EvaluationLifecycle.finalize
  get_consensus        → ConsensusCalculator (lazy, lock-free)
  get_overall_score    → ConsensusCalculator
  get_status           → cached EvaluationInstance.status
  is_identity_visible  → VisibilityGate

Writes hold the repository's evaluator lock, then its evaluation lock.
Reads take no lock and reflect whatever writes have committed.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from rfp_evaluation.config import Settings, get_settings
from rfp_evaluation.core.exceptions import EvaluationClosedError, InvalidQuorumError
from rfp_evaluation.models.enumerations import EvaluationStatus
from rfp_evaluation.models.evaluation import (
    EvaluationCreate,
    EvaluationInstance,
    EvaluatorScore,
)
from rfp_evaluation.models.rubric import RubricCriterion
from rfp_evaluation.repositories.evaluation_repository import EvaluationRepository
from rfp_evaluation.scoring.consensus_calculator import (
    ConsensusCalculator,
    ConsensusResult,
    EvaluatorTotal,
    OverallScore,
    has_disagreements,
)
from rfp_evaluation.scoring.lifecycle import EvaluationLifecycle, count_complete_evaluators
from rfp_evaluation.scoring.rubric_validator import validate_rubric
from rfp_evaluation.scoring.score_recorder import Notes, ScoreRecorder
from rfp_evaluation.scoring import visibility


class EvaluationService:
    """
    Orchestrates scoring, lifecycle and visibility for stored evaluations.

    Unknown evaluation ids raise EntityNotFoundException from the repository.
    """

    def __init__(
        self,
        repository: Optional[EvaluationRepository] = None,
        clock: Optional[Callable[[], datetime]] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.repository = repository or EvaluationRepository()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.lifecycle = EvaluationLifecycle(clock=self.clock)
        self.recorder = ScoreRecorder(lifecycle=self.lifecycle, clock=self.clock)
        self.calculator = ConsensusCalculator(
            spread_threshold=self.settings.CONSENSUS_SPREAD_THRESHOLD,
            high_confidence=self.settings.HIGH_CONFIDENCE_THRESHOLD,
            moderate_confidence=self.settings.MODERATE_CONFIDENCE_THRESHOLD,
        )

    # ------------------------------------------------------------------
    # Rubric & creation
    # ------------------------------------------------------------------

    def validate_rubric(self, criteria: Sequence[RubricCriterion]) -> None:
        validate_rubric(criteria, tolerance=self.settings.WEIGHT_TOLERANCE)

    def create_evaluation(self, data: EvaluationCreate) -> EvaluationInstance:
        """
        Create an evaluation over a valid rubric.

        Raises:
            RubricError: the rubric fails validation.
            InvalidQuorumError: required_evaluators < 1.
        """
        self.validate_rubric(data.rubric.criteria)

        required = data.required_evaluators
        if required is None:
            required = self.settings.DEFAULT_REQUIRED_EVALUATORS
        if required < 1:
            raise InvalidQuorumError(required)

        evaluation = EvaluationInstance(
            rfp_id=data.rfp_id,
            rubric=data.rubric,
            vendor_id=data.vendor_id,
            vendor_name=data.vendor_name,
            is_blind=data.is_blind,
            required_evaluators=required,
            deadline=data.deadline,
            created_at=self.clock(),
        )
        return self.repository.create(evaluation)

    def get_evaluation(self, evaluation_id: str) -> EvaluationInstance:
        return self.repository.get_or_raise(evaluation_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def submit_score(
        self,
        evaluation_id: str,
        evaluator_id: str,
        evaluator_name: str,
        evaluator_role: str,
        scores: Mapping[str, float],
        notes: Notes = None,
    ) -> List[EvaluatorScore]:
        """
        Record one evaluator's complete score set.

        Raises:
            EntityNotFoundException, EvaluationClosedError,
            IncompleteSubmissionError, UnknownCriterionError, InvalidScoreError,
            OutOfRangeError
        """
        evaluation = self.repository.get_or_raise(evaluation_id)
        if evaluation.is_finalized:
            raise EvaluationClosedError(evaluation_id)
        with self.repository.lock_evaluator(evaluation_id, evaluator_id):
            with self.repository.lock_evaluation(evaluation_id):
                records = self.recorder.submit(
                    evaluation,
                    evaluator_id,
                    evaluator_name,
                    evaluator_role,
                    scores,
                    notes=notes,
                )
                self.repository.update(evaluation)
        return records

    def withdraw_submission(self, evaluation_id: str, evaluator_id: str) -> int:
        """
        Remove an evaluator's scores before finalization.

        Returns:
            Number of score records removed.
        """
        evaluation = self.repository.get_or_raise(evaluation_id)
        if evaluation.is_finalized:
            raise EvaluationClosedError(evaluation_id)
        with self.repository.lock_evaluator(evaluation_id, evaluator_id):
            with self.repository.lock_evaluation(evaluation_id):
                removed = self.lifecycle.withdraw(evaluation, evaluator_id)
                self.repository.update(evaluation)
        return removed

    def finalize(self, evaluation_id: str) -> EvaluationInstance:
        """
        Raises:
            EntityNotFoundException, AlreadyFinalizedError, QuorumNotMetError
        """
        evaluation = self.repository.get_or_raise(evaluation_id)
        with self.repository.lock_evaluation(evaluation_id):
            self.lifecycle.finalize(evaluation, now=self.clock())
            self.repository.update(evaluation)
        self.repository.release_evaluator_locks(evaluation_id)
        return evaluation

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_consensus(self, evaluation_id: str) -> List[ConsensusResult]:
        return self.calculator.compute_consensus(self.repository.get_or_raise(evaluation_id))

    def get_overall_score(self, evaluation_id: str) -> OverallScore:
        return self.calculator.compute_overall_score(self.repository.get_or_raise(evaluation_id))

    def get_evaluator_totals(self, evaluation_id: str) -> List[EvaluatorTotal]:
        return self.calculator.compute_evaluator_totals(self.repository.get_or_raise(evaluation_id))

    def get_status(self, evaluation_id: str) -> EvaluationStatus:
        return self.repository.get_or_raise(evaluation_id).status

    def is_identity_visible(self, evaluation_id: str, revealed: bool) -> bool:
        return visibility.is_identity_visible(self.repository.get_or_raise(evaluation_id), revealed)

    def get_vendor_display_name(self, evaluation_id: str, revealed: bool) -> str:
        return visibility.vendor_display_name(
            self.repository.get_or_raise(evaluation_id),
            revealed,
            masked_label=self.settings.MASKED_VENDOR_LABEL,
        )

    def get_summary(self, evaluation_id: str, revealed: bool = False) -> Dict[str, Any]:
        """Evaluation overview: status, quorum progress, consensus and overall score."""
        evaluation = self.repository.get_or_raise(evaluation_id)
        consensus = self.calculator.compute_consensus(evaluation)
        overall = self.calculator.compute_overall_score(evaluation)

        return {
            "evaluation_id": evaluation.id,
            "rfp_id": evaluation.rfp_id,
            "vendor": visibility.vendor_display_name(
                evaluation, revealed, masked_label=self.settings.MASKED_VENDOR_LABEL
            ),
            "is_blind": evaluation.is_blind,
            "status": evaluation.status,
            "complete_evaluators": count_complete_evaluators(evaluation),
            "required_evaluators": evaluation.required_evaluators,
            "completion_progress": self.lifecycle.completion_progress(evaluation),
            "overall_score": overall,
            "consensus": consensus,
            "has_disagreements": has_disagreements(consensus),
            "deadline": evaluation.deadline,
            "finalized_at": evaluation.finalized_at,
        }
