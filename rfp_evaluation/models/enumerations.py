from enum import Enum

class EvaluationStatus(str, Enum):
    PENDING = "pending"          # No evaluator has submitted
    IN_PROGRESS = "in_progress"  # Below quorum
    COMPLETED = "completed"      # Quorum reached
    FINALIZED = "finalized"      # Terminal, set by an administrator

class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
