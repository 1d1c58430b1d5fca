"""
Consensus Calculator
rfp_evaluation/scoring/consensus_calculator.py

Aggregates all evaluators' raw scores of one evaluation into a per-criterion
consensus and an overall weighted score.

Per criterion, with scores s_1..s_n from distinct evaluators:
    mean         = Σ s_i / n
    σ            = sqrt(Σ (s_i − mean)² / n)   (population std dev)
    confidence   = clamp(1 − σ / scale_max, 0, 1)   (0.01 precision)
    disagreement = #{ i : |s_i − mean| > σ }   (0 when σ = 0)
    final_score  = round(mean, 1)
A criterion without scores reports final_score = confidence = 0 and
evaluator_count = 0.

Overall:
    score        = Σ final_score_c × weight_c   over criteria with n > 0
    max_possible = max(scale_max)

Pure functions of the score list. Each call works on a snapshot of
evaluation.scores, so it needs no lock and may run alongside submissions.
"""
import structlog
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from rfp_evaluation.config import get_settings
from rfp_evaluation.models.enumerations import ConfidenceLevel
from rfp_evaluation.models.evaluation import EvaluationInstance, EvaluatorScore
from rfp_evaluation.models.rubric import RubricCriterion
from rfp_evaluation.scoring.utils import (
    clamp,
    mean,
    population_std_dev,
    quantize,
    to_decimal,
    weighted_sum,
)

logger = structlog.get_logger(__name__)

# Decimal places at which deviations are compared against σ
DEVIATION_PLACES = 10


@dataclass(frozen=True)
class ConsensusResult:
    """Consensus for one criterion."""
    criterion_id: str
    final_score: Decimal        # mean, quantized to 0.1
    confidence: Decimal         # [0, 1], quantized to 0.01
    disagreement_count: int
    evaluator_count: int        # 0 → not yet scored
    mean: Decimal               # quantized to 0.0001
    std_dev: Decimal            # quantized to 0.0001
    confidence_level: ConfidenceLevel
    min_score: Optional[Decimal] = None
    max_score: Optional[Decimal] = None
    notes: Optional[str] = None

    @property
    def is_scored(self) -> bool:
        return self.evaluator_count > 0


@dataclass(frozen=True)
class OverallScore:
    """Weighted overall score of an evaluation."""
    score: Decimal                   # quantized to 0.01
    max_possible: Decimal
    percentage: Decimal              # score / max_possible × 100, quantized to 0.1
    scored_criteria: List[str] = field(default_factory=list)
    pending_criteria: List[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        """True while any criterion has no scores yet."""
        return bool(self.pending_criteria)


@dataclass(frozen=True)
class EvaluatorTotal:
    """One evaluator's own weighted total across the criteria they scored."""
    evaluator_id: str
    evaluator_name: str
    evaluator_role: str
    weighted_score: Decimal          # quantized to 0.01
    criteria_scored: int
    is_complete: bool


class ConsensusCalculator:
    """Compute per-criterion consensus and overall score for an evaluation."""

    def __init__(
        self,
        spread_threshold: Optional[float] = None,
        high_confidence: Optional[float] = None,
        moderate_confidence: Optional[float] = None,
    ):
        s = get_settings()
        self.spread_threshold = to_decimal(
            s.CONSENSUS_SPREAD_THRESHOLD if spread_threshold is None else spread_threshold
        )
        self.high_confidence = to_decimal(
            s.HIGH_CONFIDENCE_THRESHOLD if high_confidence is None else high_confidence
        )
        self.moderate_confidence = to_decimal(
            s.MODERATE_CONFIDENCE_THRESHOLD if moderate_confidence is None else moderate_confidence
        )

    # ------------------------------------------------------------------
    # Per criterion
    # ------------------------------------------------------------------

    def criterion_consensus(
        self,
        criterion: RubricCriterion,
        raw_scores: Sequence[float],
    ) -> ConsensusResult:
        """
        Consensus for one criterion from its raw scores.

        Examples:
            >>> c = RubricCriterion(id="tech", label="Tech", weight=1.0, scale_min=1, scale_max=5)
            >>> ConsensusCalculator().criterion_consensus(c, [4, 5]).confidence
            Decimal('0.90')
        """
        n = len(raw_scores)
        if n == 0:
            return ConsensusResult(
                criterion_id=criterion.id,
                final_score=Decimal("0.0"),
                confidence=Decimal("0.00"),
                disagreement_count=0,
                evaluator_count=0,
                mean=Decimal("0.0000"),
                std_dev=Decimal("0.0000"),
                confidence_level=ConfidenceLevel.LOW,
            )

        values = [to_decimal(v) for v in raw_scores]
        mu = mean(values)
        sigma = population_std_dev(values, mu)

        reference = to_decimal(criterion.scale_max)
        if reference <= 0:
            reference = to_decimal(criterion.scale_max) - to_decimal(criterion.scale_min)
        confidence = quantize(clamp(Decimal("1") - sigma / reference), 2)

        # sqrt is rounded at context precision; compare at a fixed scale so
        # a score lying exactly one σ out is not counted
        if sigma == 0:
            disagreements = 0
        else:
            bound = quantize(sigma, DEVIATION_PLACES)
            disagreements = sum(
                1 for v in values if quantize(abs(v - mu), DEVIATION_PLACES) > bound
            )

        low, high = min(values), max(values)

        return ConsensusResult(
            criterion_id=criterion.id,
            final_score=quantize(mu, 1),
            confidence=confidence,
            disagreement_count=disagreements,
            evaluator_count=n,
            mean=quantize(mu, 4),
            std_dev=quantize(sigma, 4),
            confidence_level=self.confidence_level(confidence),
            min_score=low,
            max_score=high,
            notes=self._consensus_note(n, mu, low, high),
        )

    def confidence_level(self, confidence: Decimal) -> ConfidenceLevel:
        if confidence >= self.high_confidence:
            return ConfidenceLevel.HIGH
        if confidence >= self.moderate_confidence:
            return ConfidenceLevel.MODERATE
        return ConfidenceLevel.LOW

    def _consensus_note(self, n: int, mu: Decimal, low: Decimal, high: Decimal) -> str:
        note = f"Consensus score based on {n} evaluators. Average: {quantize(mu, 2)}"
        if high - low > self.spread_threshold:
            note += (
                f". Note: Scores vary from {_fmt(low)} to {_fmt(high)}. "
                "Further review recommended."
            )
        return note

    # ------------------------------------------------------------------
    # Per evaluation
    # ------------------------------------------------------------------

    def compute_consensus(self, evaluation: EvaluationInstance) -> List[ConsensusResult]:
        """Consensus for every rubric criterion, in rubric order."""
        by_criterion = _group_by_criterion(list(evaluation.scores))
        results = [
            self.criterion_consensus(c, [s.raw_score for s in by_criterion.get(c.id, [])])
            for c in evaluation.rubric.criteria
        ]

        logger.debug(
            "consensus_computed",
            evaluation_id=evaluation.id,
            criteria=len(results),
            scored=sum(1 for r in results if r.is_scored),
            disagreements=sum(r.disagreement_count for r in results),
        )
        return results

    def compute_overall_score(self, evaluation: EvaluationInstance) -> OverallScore:
        """
        Weighted sum of consensus final scores.

        Criteria nobody has scored contribute zero and are listed in
        pending_criteria rather than dropped.
        """
        consensus = self.compute_consensus(evaluation)
        weights = {c.id: to_decimal(c.weight) for c in evaluation.rubric.criteria}

        scored = [r for r in consensus if r.is_scored]
        total = weighted_sum(
            (r.final_score for r in scored),
            (weights[r.criterion_id] for r in scored),
        )
        score = quantize(total, 2)
        max_possible = to_decimal(evaluation.rubric.max_possible)
        percentage = (
            quantize(score / max_possible * Decimal("100"), 1)
            if max_possible > 0
            else Decimal("0.0")
        )

        result = OverallScore(
            score=score,
            max_possible=max_possible,
            percentage=percentage,
            scored_criteria=[r.criterion_id for r in scored],
            pending_criteria=[r.criterion_id for r in consensus if not r.is_scored],
        )

        logger.info(
            "overall_score_computed",
            evaluation_id=evaluation.id,
            score=float(result.score),
            max_possible=float(result.max_possible),
            pending_criteria=len(result.pending_criteria),
        )
        return result

    def compute_evaluator_totals(self, evaluation: EvaluationInstance) -> List[EvaluatorTotal]:
        """Each evaluator's Σ raw_score × weight, in first-submission order."""
        snapshot = list(evaluation.scores)
        criteria = {c.id: c for c in evaluation.rubric.criteria}
        by_evaluator: Dict[str, List[EvaluatorScore]] = {}
        for s in snapshot:
            by_evaluator.setdefault(s.evaluator_id, []).append(s)

        totals: List[EvaluatorTotal] = []
        for evaluator_id, records in by_evaluator.items():
            known = [r for r in records if r.criterion_id in criteria]
            weighted = weighted_sum(
                (to_decimal(r.raw_score) for r in known),
                (to_decimal(criteria[r.criterion_id].weight) for r in known),
            )
            totals.append(
                EvaluatorTotal(
                    evaluator_id=evaluator_id,
                    evaluator_name=records[0].evaluator_name,
                    evaluator_role=records[0].evaluator_role,
                    weighted_score=quantize(weighted, 2),
                    criteria_scored=len({r.criterion_id for r in known}),
                    is_complete=set(criteria) <= {r.criterion_id for r in known},
                )
            )
        return totals


def has_disagreements(results: Sequence[ConsensusResult]) -> bool:
    """True when any criterion has at least one outlying evaluator."""
    return any(r.disagreement_count > 0 for r in results)


def _group_by_criterion(scores: Sequence[EvaluatorScore]) -> Dict[str, List[EvaluatorScore]]:
    grouped: Dict[str, List[EvaluatorScore]] = {}
    for s in scores:
        grouped.setdefault(s.criterion_id, []).append(s)
    return grouped


def _fmt(value: Decimal) -> str:
    return f"{float(value):g}"
