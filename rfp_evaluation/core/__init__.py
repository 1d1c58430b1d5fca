"""
Core Package - RFP Evaluation Engine
rfp_evaluation/core/__init__.py

Core infrastructure: exceptions, dependencies.
"""

from rfp_evaluation.core.exceptions import (
    AlreadyFinalizedError,
    DuplicateCriterionError,
    DuplicateEntityException,
    EmptyRubricError,
    EntityNotFoundException,
    EvaluationClosedError,
    EvaluationError,
    EvaluationStateError,
    EvaluationValidationError,
    IncompleteSubmissionError,
    InvalidQuorumError,
    InvalidScaleError,
    InvalidScoreError,
    LifecycleError,
    OutOfRangeError,
    QuorumNotMetError,
    RepositoryException,
    RubricError,
    ScoreError,
    UnknownCriterionError,
    WeightsNotNormalizedError,
)

__all__ = [
    # Repository exceptions
    "DuplicateEntityException",
    "EntityNotFoundException",
    "RepositoryException",
    # Evaluation exceptions
    "EvaluationError",
    "EvaluationStateError",
    "EvaluationValidationError",
    "RubricError",
    "EmptyRubricError",
    "InvalidScaleError",
    "WeightsNotNormalizedError",
    "DuplicateCriterionError",
    "ScoreError",
    "IncompleteSubmissionError",
    "UnknownCriterionError",
    "OutOfRangeError",
    "InvalidScoreError",
    "EvaluationClosedError",
    "LifecycleError",
    "QuorumNotMetError",
    "AlreadyFinalizedError",
    "InvalidQuorumError",
]
