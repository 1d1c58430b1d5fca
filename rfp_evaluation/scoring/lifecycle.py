"""
Evaluation Lifecycle
rfp_evaluation/scoring/lifecycle.py

Status machine for one evaluation instance:

    pending ──► in_progress ──► completed ──► finalized
      (0)      (1..quorum-1)    (>= quorum)   (explicit, terminal)

The count that drives it is the number of distinct evaluators holding one
score record for every rubric criterion. Submissions only move the status
forward. withdraw() is the single operation that may move it back, and
finalized is never left.
"""
import structlog
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from rfp_evaluation.core.exceptions import (
    AlreadyFinalizedError,
    EvaluationClosedError,
    QuorumNotMetError,
)
from rfp_evaluation.models.enumerations import EvaluationStatus
from rfp_evaluation.models.evaluation import EvaluationInstance
from rfp_evaluation.scoring.utils import quantize

logger = structlog.get_logger(__name__)

_ORDER = {
    EvaluationStatus.PENDING: 0,
    EvaluationStatus.IN_PROGRESS: 1,
    EvaluationStatus.COMPLETED: 2,
    EvaluationStatus.FINALIZED: 3,
}


def count_complete_evaluators(evaluation: EvaluationInstance) -> int:
    """Distinct evaluators with a score for every rubric criterion."""
    required = set(evaluation.rubric.criterion_ids)
    covered: dict[str, set] = {}
    for s in evaluation.scores:
        covered.setdefault(s.evaluator_id, set()).add(s.criterion_id)
    return sum(1 for criteria in covered.values() if required <= criteria)


def _status_for_count(complete: int, required_evaluators: int) -> EvaluationStatus:
    if complete == 0:
        return EvaluationStatus.PENDING
    if complete < required_evaluators:
        return EvaluationStatus.IN_PROGRESS
    return EvaluationStatus.COMPLETED


class EvaluationLifecycle:
    """Derive, advance and finalize evaluation status."""

    def __init__(self, clock=None):
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def derive_status(
        self,
        evaluation: EvaluationInstance,
        allow_regression: bool = False,
    ) -> EvaluationStatus:
        """
        Status implied by the current score set.

        Without allow_regression the result never ranks below the cached
        status. A finalized evaluation always stays finalized.
        """
        if evaluation.is_finalized:
            return EvaluationStatus.FINALIZED

        derived = _status_for_count(
            count_complete_evaluators(evaluation), evaluation.required_evaluators
        )
        if not allow_regression and _ORDER[derived] < _ORDER[evaluation.status]:
            return evaluation.status
        return derived

    def refresh_status(
        self,
        evaluation: EvaluationInstance,
        allow_regression: bool = False,
    ) -> EvaluationStatus:
        """Recompute and cache the status; called after every successful write."""
        previous = evaluation.status
        current = self.derive_status(evaluation, allow_regression=allow_regression)
        if current != previous:
            evaluation.status = current
            logger.info(
                "evaluation_status_changed",
                evaluation_id=evaluation.id,
                from_status=previous.value,
                to_status=current.value,
                complete_evaluators=count_complete_evaluators(evaluation),
                required_evaluators=evaluation.required_evaluators,
            )
        return current

    def finalize(
        self,
        evaluation: EvaluationInstance,
        now: Optional[datetime] = None,
    ) -> EvaluationInstance:
        """
        Move the evaluation to its terminal state.

        Raises:
            AlreadyFinalizedError: evaluation is already finalized.
            QuorumNotMetError: fewer than required_evaluators complete submissions.
        """
        if evaluation.is_finalized:
            raise AlreadyFinalizedError(evaluation.id)

        complete = count_complete_evaluators(evaluation)
        if complete < evaluation.required_evaluators:
            raise QuorumNotMetError(evaluation.id, evaluation.required_evaluators, complete)

        evaluation.status = EvaluationStatus.FINALIZED
        evaluation.finalized_at = now or self._clock()

        logger.info(
            "evaluation_finalized",
            evaluation_id=evaluation.id,
            complete_evaluators=complete,
            required_evaluators=evaluation.required_evaluators,
        )
        return evaluation

    def withdraw(self, evaluation: EvaluationInstance, evaluator_id: str) -> int:
        """
        Remove every score record of one evaluator and re-derive the status,
        regression included (completed → in_progress → pending).

        Returns:
            Number of records removed (0 if the evaluator had none).

        Raises:
            EvaluationClosedError: evaluation is finalized.
        """
        if evaluation.is_finalized:
            raise EvaluationClosedError(evaluation.id)

        kept = [s for s in evaluation.scores if s.evaluator_id != evaluator_id]
        removed = len(evaluation.scores) - len(kept)
        if removed:
            evaluation.scores = kept
            logger.info(
                "evaluator_submission_withdrawn",
                evaluation_id=evaluation.id,
                evaluator_id=evaluator_id,
                records_removed=removed,
            )
            self.refresh_status(evaluation, allow_regression=True)
        return removed

    @staticmethod
    def completion_progress(evaluation: EvaluationInstance) -> Decimal:
        """Percentage of the quorum reached, capped at 100, one decimal place."""
        complete = Decimal(count_complete_evaluators(evaluation))
        pct = complete / Decimal(evaluation.required_evaluators) * Decimal("100")
        return quantize(min(pct, Decimal("100")), 1)
