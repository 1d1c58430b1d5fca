"""
Repositories Package - RFP Evaluation Engine
rfp_evaluation/repositories/__init__.py
"""

from rfp_evaluation.repositories.evaluation_repository import EvaluationRepository

__all__ = [
    "EvaluationRepository",
]
