"""
Models Package - RFP Evaluation Engine
rfp_evaluation/models/__init__.py

Pydantic input records for rubrics, scores and evaluation instances.
"""

from rfp_evaluation.models.enumerations import ConfidenceLevel, EvaluationStatus
from rfp_evaluation.models.evaluation import (
    EvaluationCreate,
    EvaluationInstance,
    EvaluatorScore,
)
from rfp_evaluation.models.rubric import Rubric, RubricCriterion

__all__ = [
    # Enumerations
    "ConfidenceLevel",
    "EvaluationStatus",
    # Rubric
    "Rubric",
    "RubricCriterion",
    # Evaluation
    "EvaluationCreate",
    "EvaluationInstance",
    "EvaluatorScore",
]
