"""
Dependencies - RFP Evaluation Engine
rfp_evaluation/core/dependencies.py

Process-wide singletons for callers that do not wire their own instances.
"""

from functools import lru_cache

from rfp_evaluation.repositories.evaluation_repository import EvaluationRepository
from rfp_evaluation.services.evaluation_service import EvaluationService


@lru_cache()
def get_evaluation_repository() -> EvaluationRepository:
    """Get cached EvaluationRepository instance."""
    return EvaluationRepository()


@lru_cache()
def get_evaluation_service() -> EvaluationService:
    """Get cached EvaluationService bound to the shared repository."""
    return EvaluationService(repository=get_evaluation_repository())
