"""
Score Recorder
rfp_evaluation/scoring/score_recorder.py

Accepts one evaluator's full score set for an evaluation. A submission is
all-or-nothing: every check runs before the score list is touched, and the
list is swapped in one assignment so concurrent readers see either the old
or the new set.
"""

import logging
import numbers
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Mapping, Optional, Union

from rfp_evaluation.core.exceptions import (
    EvaluationClosedError,
    IncompleteSubmissionError,
    InvalidScoreError,
    OutOfRangeError,
    UnknownCriterionError,
)
from rfp_evaluation.models.evaluation import EvaluationInstance, EvaluatorScore
from rfp_evaluation.scoring.lifecycle import EvaluationLifecycle

logger = logging.getLogger(__name__)

Notes = Union[str, Mapping[str, str], None]


class ScoreRecorder:
    """Validate and store evaluator submissions."""

    def __init__(
        self,
        lifecycle: Optional[EvaluationLifecycle] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lifecycle = lifecycle or EvaluationLifecycle(clock=self._clock)

    def submit(
        self,
        evaluation: EvaluationInstance,
        evaluator_id: str,
        evaluator_name: str,
        evaluator_role: str,
        criterion_scores: Mapping[str, float],
        notes: Notes = None,
        now: Optional[datetime] = None,
    ) -> List[EvaluatorScore]:
        """
        Record a complete score set for one evaluator.

        Args:
            evaluation: Target evaluation (mutated on success only).
            evaluator_id: Submitting evaluator.
            evaluator_name: Display name stored on each record.
            evaluator_role: Role stored on each record.
            criterion_scores: criterion_id → raw score, one entry per rubric criterion.
            notes: One note for every criterion, or criterion_id → note.
            now: Submission time; defaults to the recorder's clock.

        Returns:
            The evaluator's new score records, in rubric order.

        Raises:
            EvaluationClosedError: evaluation is finalized.
            IncompleteSubmissionError: a rubric criterion has no score.
            UnknownCriterionError: a score names a criterion outside the rubric.
            InvalidScoreError: a score is not a real number (bools included).
            OutOfRangeError: a score lies outside its criterion's scale.
        """
        if evaluation.is_finalized:
            raise EvaluationClosedError(evaluation.id)

        rubric = evaluation.rubric

        missing = [cid for cid in rubric.criterion_ids if cid not in criterion_scores]
        if missing:
            raise IncompleteSubmissionError(missing)

        unknown = [cid for cid in criterion_scores if rubric.criterion(cid) is None]
        if unknown:
            raise UnknownCriterionError(unknown)

        for criterion in rubric.criteria:
            value = criterion_scores[criterion.id]
            if not _is_number(value):
                raise InvalidScoreError(criterion.id, value)
            if not criterion.in_range(value):
                raise OutOfRangeError(criterion.id, value, criterion.scale_min, criterion.scale_max)

        submitted_at = now or self._clock()
        records = [
            EvaluatorScore(
                evaluator_id=evaluator_id,
                evaluator_name=evaluator_name,
                evaluator_role=evaluator_role,
                criterion_id=criterion.id,
                raw_score=float(criterion_scores[criterion.id]),
                notes=_note_for(notes, criterion.id),
                submitted_at=submitted_at,
            )
            for criterion in rubric.criteria
        ]

        replaced = len(evaluation.scores_for_evaluator(evaluator_id))
        evaluation.scores = [
            s for s in evaluation.scores if s.evaluator_id != evaluator_id
        ] + records

        logger.info(
            "scores_submitted",
            extra={
                "evaluation_id": evaluation.id,
                "evaluator_id": evaluator_id,
                "criteria_count": len(records),
                "replaced_records": replaced,
            },
        )

        self._lifecycle.refresh_status(evaluation)
        return records


def _note_for(notes: Notes, criterion_id: str) -> Optional[str]:
    if notes is None or isinstance(notes, str):
        return notes
    return notes.get(criterion_id)


def _is_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Real, Decimal))
