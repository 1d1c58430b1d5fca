# tests/test_models.py
"""
Model Tests - enumerations, rubric and evaluation records
"""

import pytest
from pydantic import ValidationError

from rfp_evaluation.models.enumerations import ConfidenceLevel, EvaluationStatus
from rfp_evaluation.models.evaluation import (
    EvaluationCreate,
    EvaluationInstance,
    EvaluatorScore,
)
from rfp_evaluation.models.rubric import Rubric, RubricCriterion

from tests.conftest import FIXED_NOW


# =============================================================================
# ENUMERATION TESTS
# =============================================================================

class TestEnumerations:
    """Tests for enumeration types."""

    def test_evaluation_status_values(self):
        """Test all lifecycle statuses exist."""
        assert [s.value for s in EvaluationStatus] == [
            "pending", "in_progress", "completed", "finalized"
        ]

    def test_status_is_string_enum(self):
        """Statuses compare equal to their string value."""
        assert EvaluationStatus.IN_PROGRESS == "in_progress"
        assert EvaluationStatus("finalized") is EvaluationStatus.FINALIZED

    def test_confidence_level_values(self):
        assert {c.value for c in ConfidenceLevel} == {"high", "moderate", "low"}


# =============================================================================
# RUBRIC MODEL TESTS
# =============================================================================

class TestRubricModels:
    """Tests for RubricCriterion and Rubric."""

    def test_criterion_defaults(self):
        """Default scale is 1-5."""
        c = RubricCriterion(id="tech", label="Technical", weight=0.5)
        assert (c.scale_min, c.scale_max) == (1, 5)
        assert c.guidance is None

    def test_weight_above_one_rejected(self):
        with pytest.raises(ValidationError):
            RubricCriterion(id="tech", label="Technical", weight=1.5)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            RubricCriterion(id="tech", label="Technical", weight=-0.1)

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            RubricCriterion(id="", label="Technical", weight=0.5)

    def test_in_range_inclusive(self, tech_criterion):
        assert tech_criterion.in_range(1)
        assert tech_criterion.in_range(5)
        assert tech_criterion.in_range(3.5)
        assert not tech_criterion.in_range(5.01)
        assert not tech_criterion.in_range(float("nan"))

    def test_criterion_is_frozen(self, tech_criterion):
        """Rubric criteria are shared read-only."""
        with pytest.raises(ValidationError):
            tech_criterion.weight = 0.9

    def test_rubric_helpers(self, two_criteria_rubric, three_criteria_rubric):
        assert two_criteria_rubric.criterion_ids == ("tech", "price")
        assert two_criteria_rubric.criterion("price").weight == 0.4
        assert two_criteria_rubric.criterion("missing") is None
        assert three_criteria_rubric.max_possible == 10

    def test_empty_rubric_max_possible(self):
        assert Rubric(id="empty").max_possible == 0


# =============================================================================
# EVALUATION MODEL TESTS
# =============================================================================

class TestEvaluationModels:
    """Tests for EvaluatorScore, EvaluationCreate and EvaluationInstance."""

    def test_instance_defaults(self, two_criteria_rubric):
        evaluation = EvaluationInstance(
            rubric=two_criteria_rubric, vendor_id="vendor-1", required_evaluators=3
        )
        assert evaluation.status == EvaluationStatus.PENDING
        assert evaluation.scores == []
        assert evaluation.finalized_at is None
        assert evaluation.rubric_id == "rubric-1"
        assert len(evaluation.id) == 36

    def test_ids_are_unique(self, make_evaluation):
        assert make_evaluation().id != make_evaluation().id

    def test_quorum_must_be_positive(self, two_criteria_rubric):
        with pytest.raises(ValidationError):
            EvaluationInstance(rubric=two_criteria_rubric, vendor_id="v", required_evaluators=0)

    def test_create_quorum_optional(self, two_criteria_rubric):
        """Quorum checks happen at creation time, not on the request model."""
        data = EvaluationCreate(rubric=two_criteria_rubric, vendor_id="v")
        assert data.required_evaluators is None
        assert data.is_blind is False

    def test_score_is_frozen(self):
        score = EvaluatorScore(
            evaluator_id="A",
            evaluator_name="Alice",
            evaluator_role="procurement_lead",
            criterion_id="tech",
            raw_score=4,
            submitted_at=FIXED_NOW,
        )
        assert score.raw_score == 4.0
        with pytest.raises(ValidationError):
            score.raw_score = 5

    def test_evaluator_helpers(self, evaluation):
        evaluation.scores = [
            EvaluatorScore(
                evaluator_id=e, evaluator_name=e, evaluator_role="evaluator",
                criterion_id=c, raw_score=3, submitted_at=FIXED_NOW,
            )
            for e, c in [("B", "tech"), ("A", "tech"), ("B", "price")]
        ]
        assert evaluation.evaluator_ids() == ["B", "A"]
        assert len(evaluation.scores_for_evaluator("B")) == 2
        assert len(evaluation.scores_for_criterion("tech")) == 2
