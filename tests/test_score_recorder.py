# tests/test_score_recorder.py
"""
Score Recorder Tests - validation, atomicity and last-write-wins replacement
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from rfp_evaluation.core.exceptions import (
    EvaluationClosedError,
    EvaluationStateError,
    EvaluationValidationError,
    IncompleteSubmissionError,
    InvalidScoreError,
    OutOfRangeError,
    UnknownCriterionError,
)
from rfp_evaluation.models.enumerations import EvaluationStatus
from rfp_evaluation.scoring.score_recorder import ScoreRecorder

from tests.conftest import FakeClock, FIXED_NOW


@pytest.fixture
def recorder():
    return ScoreRecorder(clock=FakeClock())


def _submit(recorder, evaluation, evaluator_id, tech, price, **kwargs):
    return recorder.submit(
        evaluation,
        evaluator_id,
        f"Evaluator {evaluator_id}",
        "technical_evaluator",
        {"tech": tech, "price": price},
        **kwargs,
    )


class TestSubmitValidation:
    """Rejected submissions never touch the stored scores."""

    def test_incomplete_submission(self, recorder, evaluation):
        with pytest.raises(IncompleteSubmissionError) as exc_info:
            recorder.submit(evaluation, "A", "Alice", "lead", {"tech": 4})
        assert exc_info.value.missing_criterion_ids == ["price"]
        assert evaluation.scores == []
        assert evaluation.status == EvaluationStatus.PENDING

    def test_incomplete_resubmission_keeps_previous_scores(self, recorder, evaluation):
        _submit(recorder, evaluation, "A", 4, 3)
        before = list(evaluation.scores)

        with pytest.raises(IncompleteSubmissionError):
            recorder.submit(evaluation, "A", "Alice", "lead", {"price": 5})

        assert evaluation.scores == before

    def test_out_of_range_high(self, recorder, evaluation):
        with pytest.raises(OutOfRangeError) as exc_info:
            _submit(recorder, evaluation, "A", 6, 3)
        err = exc_info.value
        assert (err.criterion_id, err.value, err.scale_min, err.scale_max) == ("tech", 6, 1, 5)
        assert evaluation.scores == []

    def test_out_of_range_low(self, recorder, evaluation):
        with pytest.raises(OutOfRangeError):
            _submit(recorder, evaluation, "A", 4, 0)
        assert evaluation.scores == []

    def test_nan_is_out_of_range(self, recorder, evaluation):
        with pytest.raises(OutOfRangeError):
            _submit(recorder, evaluation, "A", float("nan"), 3)

    @pytest.mark.parametrize("value", [None, "4", True, False, [4]])
    def test_non_numeric_score(self, recorder, evaluation, value):
        """Non-numbers, bools included, are typed validation errors."""
        with pytest.raises(InvalidScoreError) as exc_info:
            _submit(recorder, evaluation, "A", value, 3)
        assert exc_info.value.criterion_id == "tech"
        assert isinstance(exc_info.value, EvaluationValidationError)
        assert evaluation.scores == []

    def test_decimal_and_int_scores_accepted(self, recorder, evaluation):
        records = _submit(recorder, evaluation, "A", Decimal("4.5"), 3)
        assert [r.raw_score for r in records] == [4.5, 3.0]

    def test_scale_bounds_are_inclusive(self, recorder, evaluation):
        _submit(recorder, evaluation, "A", 1, 5)
        assert len(evaluation.scores) == 2

    def test_unknown_criterion(self, recorder, evaluation):
        with pytest.raises(UnknownCriterionError) as exc_info:
            recorder.submit(evaluation, "A", "Alice", "lead", {"tech": 4, "price": 3, "bonus": 2})
        assert exc_info.value.criterion_ids == ["bonus"]
        assert evaluation.scores == []

    def test_finalized_evaluation_is_closed(self, recorder, evaluation):
        evaluation.status = EvaluationStatus.FINALIZED
        with pytest.raises(EvaluationClosedError) as exc_info:
            _submit(recorder, evaluation, "A", 4, 3)
        assert isinstance(exc_info.value, EvaluationStateError)
        assert evaluation.scores == []


class TestSubmitRecording:
    """Successful submissions."""

    def test_records_one_score_per_criterion(self, recorder, evaluation):
        records = _submit(recorder, evaluation, "A", 4, 3)
        assert [r.criterion_id for r in records] == ["tech", "price"]
        assert [r.raw_score for r in records] == [4.0, 3.0]
        assert all(r.submitted_at == FIXED_NOW for r in records)
        assert evaluation.scores == records

    def test_explicit_timestamp(self, recorder, evaluation):
        ts = datetime(2024, 12, 5, tzinfo=timezone.utc)
        records = _submit(recorder, evaluation, "A", 4, 3, now=ts)
        assert {r.submitted_at for r in records} == {ts}

    def test_single_note_applies_to_all_criteria(self, recorder, evaluation):
        records = _submit(recorder, evaluation, "A", 4, 3, notes="Strong proposal")
        assert {r.notes for r in records} == {"Strong proposal"}

    def test_per_criterion_notes(self, recorder, evaluation):
        records = _submit(recorder, evaluation, "A", 4, 3, notes={"tech": "Solid team"})
        notes = {r.criterion_id: r.notes for r in records}
        assert notes == {"tech": "Solid team", "price": None}

    def test_resubmission_replaces(self, recorder, evaluation):
        _submit(recorder, evaluation, "A", 4, 3)
        _submit(recorder, evaluation, "A", 2, 5)

        assert len(evaluation.scores) == 2
        assert {s.criterion_id: s.raw_score for s in evaluation.scores} == {"tech": 2.0, "price": 5.0}

    def test_resubmission_leaves_other_evaluators(self, recorder, evaluation):
        _submit(recorder, evaluation, "A", 4, 3)
        _submit(recorder, evaluation, "B", 5, 3)
        _submit(recorder, evaluation, "A", 1, 1)

        assert len(evaluation.scores) == 4
        assert [s.raw_score for s in evaluation.scores_for_evaluator("B")] == [5.0, 3.0]

    def test_submission_advances_status(self, recorder, evaluation):
        _submit(recorder, evaluation, "A", 4, 3)
        assert evaluation.status == EvaluationStatus.IN_PROGRESS
        _submit(recorder, evaluation, "B", 5, 3)
        assert evaluation.status == EvaluationStatus.COMPLETED

    def test_resubmission_does_not_double_count(self, recorder, evaluation):
        _submit(recorder, evaluation, "A", 4, 3)
        _submit(recorder, evaluation, "A", 5, 5)
        assert evaluation.status == EvaluationStatus.IN_PROGRESS
