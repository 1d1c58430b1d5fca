# tests/conftest.py

"""
Pytest Fixtures - Shared rubrics, evaluations and services for all tests

RUBRIC REFERENCE:
- two_criteria_rubric:   tech (0.6) / price (0.4), both scale 1-5
- three_criteria_rubric: tech (0.5) / price (0.3) / support (0.2), scales 1-5, 1-5, 0-10
"""

import pytest
from datetime import datetime, timedelta, timezone

from rfp_evaluation.config import Settings
from rfp_evaluation.models.evaluation import EvaluationCreate, EvaluationInstance
from rfp_evaluation.models.rubric import Rubric, RubricCriterion
from rfp_evaluation.repositories.evaluation_repository import EvaluationRepository
from rfp_evaluation.services.evaluation_service import EvaluationService


FIXED_NOW = datetime(2024, 12, 1, 9, 30, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


# =============================================================================
# RUBRIC FIXTURES
# =============================================================================

@pytest.fixture
def tech_criterion():
    return RubricCriterion(
        id="tech",
        label="Technical Capability",
        weight=0.6,
        scale_min=1,
        scale_max=5,
        guidance="Evaluate the vendor's technical capabilities and expertise.",
    )


@pytest.fixture
def price_criterion():
    return RubricCriterion(id="price", label="Pricing", weight=0.4, scale_min=1, scale_max=5)


@pytest.fixture
def two_criteria_rubric(tech_criterion, price_criterion):
    return Rubric(id="rubric-1", name="IT Managed Services", criteria=(tech_criterion, price_criterion))


@pytest.fixture
def three_criteria_rubric():
    return Rubric(
        id="rubric-2",
        name="Office Equipment",
        criteria=(
            RubricCriterion(id="tech", label="Technical", weight=0.5, scale_min=1, scale_max=5),
            RubricCriterion(id="price", label="Pricing", weight=0.3, scale_min=1, scale_max=5),
            RubricCriterion(id="support", label="Support", weight=0.2, scale_min=0, scale_max=10),
        ),
    )


# =============================================================================
# EVALUATION FIXTURES
# =============================================================================

@pytest.fixture
def make_evaluation(two_criteria_rubric):
    """Factory for standalone EvaluationInstance objects."""
    def _make(rubric=None, required_evaluators=2, is_blind=False, **kwargs):
        return EvaluationInstance(
            rubric=rubric or two_criteria_rubric,
            vendor_id=kwargs.pop("vendor_id", "vendor-1"),
            vendor_name=kwargs.pop("vendor_name", "Tech Solutions Inc"),
            is_blind=is_blind,
            required_evaluators=required_evaluators,
            **kwargs,
        )
    return _make


@pytest.fixture
def evaluation(make_evaluation):
    return make_evaluation()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def test_settings():
    return Settings(_env_file=None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repository():
    return EvaluationRepository()


@pytest.fixture
def service(repository, clock, test_settings):
    return EvaluationService(repository=repository, clock=clock, settings=test_settings)


@pytest.fixture
def created_evaluation(service, two_criteria_rubric):
    """Stored, non-blind evaluation with a quorum of 2."""
    return service.create_evaluation(
        EvaluationCreate(
            rubric=two_criteria_rubric,
            vendor_id="vendor-1",
            vendor_name="Tech Solutions Inc",
            rfp_id="rfp-2024-001",
            required_evaluators=2,
        )
    )


@pytest.fixture
def blind_evaluation(service, two_criteria_rubric):
    """Stored blind evaluation with a quorum of 2."""
    return service.create_evaluation(
        EvaluationCreate(
            rubric=two_criteria_rubric,
            vendor_id="vendor-2",
            vendor_name="Global IT Services",
            is_blind=True,
            required_evaluators=2,
        )
    )
