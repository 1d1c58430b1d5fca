"""
Services Package - RFP Evaluation Engine
rfp_evaluation/services/__init__.py
"""

from rfp_evaluation.services.evaluation_service import EvaluationService

__all__ = [
    "EvaluationService",
]
