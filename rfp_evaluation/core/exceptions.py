"""
Custom Exceptions - RFP Evaluation Engine
rfp_evaluation/core/exceptions.py

Two families:
  - Repository exceptions raised by the evaluation store.
  - Evaluation exceptions raised by the scoring core. Validation errors mean
    "fix your input and resubmit"; state errors mean "this action is not
    permitted right now". Neither is ever retried automatically.
"""

from typing import Iterable, List


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in the store."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class DuplicateEntityException(RepositoryException):
    """Duplicate entity violation."""

    def __init__(self, message: str = "Entity already exists"):
        self.message = message
        super().__init__(message)


# =============================================================================
# EVALUATION ERRORS
# =============================================================================


class EvaluationError(Exception):
    """Base exception for the evaluation core."""

    code = "evaluation_error"


class EvaluationValidationError(EvaluationError):
    """Malformed or out-of-range input."""

    code = "validation_error"


class EvaluationStateError(EvaluationError):
    """Action is not permitted in the evaluation's current state."""

    code = "state_error"


# --- Rubric ------------------------------------------------------------------


class RubricError(EvaluationValidationError):
    """Base exception for rubric validation."""

    code = "rubric_error"


class EmptyRubricError(RubricError):
    """Rubric has no criteria."""

    code = "empty_rubric"

    def __init__(self):
        super().__init__("Rubric must contain at least one criterion")


class InvalidScaleError(RubricError):
    """Criterion scale_min is not below scale_max."""

    code = "invalid_scale"

    def __init__(self, criterion_id: str, scale_min: float, scale_max: float):
        self.criterion_id = criterion_id
        self.scale_min = scale_min
        self.scale_max = scale_max
        super().__init__(
            f"Criterion {criterion_id} has invalid scale: "
            f"scale_min ({scale_min}) must be lower than scale_max ({scale_max})"
        )


class WeightsNotNormalizedError(RubricError):
    """Criterion weights do not sum to 1.0."""

    code = "weights_not_normalized"

    def __init__(self, total: float, tolerance: float):
        self.total = total
        self.tolerance = tolerance
        super().__init__(f"Criterion weights must sum to 1.0 (±{tolerance}), got {total}")


class DuplicateCriterionError(RubricError):
    """Two criteria share the same id."""

    code = "duplicate_criterion"

    def __init__(self, criterion_ids: Iterable[str]):
        self.criterion_ids: List[str] = sorted(criterion_ids)
        super().__init__(f"Duplicate criterion ids: {', '.join(self.criterion_ids)}")


# --- Scores ------------------------------------------------------------------


class ScoreError(EvaluationError):
    """Base exception for score submission."""

    code = "score_error"


class IncompleteSubmissionError(ScoreError, EvaluationValidationError):
    """Submission is missing one or more rubric criteria."""

    code = "incomplete_submission"

    def __init__(self, missing_criterion_ids: Iterable[str]):
        self.missing_criterion_ids: List[str] = list(missing_criterion_ids)
        super().__init__(
            f"Submission is missing scores for criteria: {', '.join(self.missing_criterion_ids)}"
        )


class UnknownCriterionError(ScoreError, EvaluationValidationError):
    """Submission names criteria that are not in the rubric."""

    code = "unknown_criterion"

    def __init__(self, criterion_ids: Iterable[str]):
        self.criterion_ids: List[str] = list(criterion_ids)
        super().__init__(f"Criteria not in rubric: {', '.join(self.criterion_ids)}")


class OutOfRangeError(ScoreError, EvaluationValidationError):
    """Raw score falls outside the criterion's scale."""

    code = "out_of_range"

    def __init__(self, criterion_id: str, value: float, scale_min: float, scale_max: float):
        self.criterion_id = criterion_id
        self.value = value
        self.scale_min = scale_min
        self.scale_max = scale_max
        super().__init__(
            f"Score {value} for criterion {criterion_id} is outside [{scale_min}, {scale_max}]"
        )


class InvalidScoreError(ScoreError, EvaluationValidationError):
    """Raw score is not a real number."""

    code = "invalid_score"

    def __init__(self, criterion_id: str, value: object):
        self.criterion_id = criterion_id
        self.value = value
        super().__init__(
            f"Score for criterion {criterion_id} must be a number, got {type(value).__name__}"
        )


class EvaluationClosedError(ScoreError, EvaluationStateError):
    """Evaluation is finalized and no longer accepts scores."""

    code = "evaluation_closed"

    def __init__(self, evaluation_id: str):
        self.evaluation_id = evaluation_id
        super().__init__(f"Evaluation {evaluation_id} is finalized and accepts no further scores")


# --- Lifecycle ---------------------------------------------------------------


class LifecycleError(EvaluationStateError):
    """Base exception for lifecycle transitions."""

    code = "lifecycle_error"


class QuorumNotMetError(LifecycleError):
    """Fewer than required_evaluators have submitted complete scores."""

    code = "quorum_not_met"

    def __init__(self, evaluation_id: str, required: int, submitted: int):
        self.evaluation_id = evaluation_id
        self.required = required
        self.submitted = submitted
        super().__init__(
            f"Evaluation {evaluation_id} needs {required} complete submissions, has {submitted}"
        )


class AlreadyFinalizedError(LifecycleError):
    """Evaluation is already in its terminal state."""

    code = "already_finalized"

    def __init__(self, evaluation_id: str):
        self.evaluation_id = evaluation_id
        super().__init__(f"Evaluation {evaluation_id} is already finalized")


class InvalidQuorumError(LifecycleError, EvaluationValidationError):
    """required_evaluators is not a positive integer."""

    code = "invalid_quorum"

    def __init__(self, required: int):
        self.required = required
        super().__init__(f"required_evaluators must be >= 1, got {required}")
