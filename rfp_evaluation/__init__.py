"""
RFP Evaluation Engine

Multi-rater consensus scoring and evaluation lifecycle for RFP procurement.
"""

from rfp_evaluation.services.evaluation_service import EvaluationService

__version__ = "1.0.0"

__all__ = ["EvaluationService", "__version__"]
