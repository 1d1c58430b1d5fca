"""
Evaluation Repository - RFP Evaluation Engine
rfp_evaluation/repositories/evaluation_repository.py

In-memory store for EvaluationInstance records, standing in for the external
evaluation store. Also hands out the locks that serialize writes:

  - lock_evaluator(evaluation_id, evaluator_id): one submission at a time
    per evaluator key, so read-then-replace of that evaluator's scores
    cannot lose an update.
  - lock_evaluation(evaluation_id): guards status checks and transitions,
    making finalize mutually exclusive with in-flight submissions.

Evaluator locks of an evaluation are dropped once it is finalized; one
evaluation lock per stored evaluation lives as long as the store.

Reads take no lock.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Generator, Hashable, List, Optional, Tuple

from rfp_evaluation.core.exceptions import DuplicateEntityException, EntityNotFoundException
from rfp_evaluation.models.enumerations import EvaluationStatus
from rfp_evaluation.models.evaluation import EvaluationInstance

logger = logging.getLogger(__name__)


class EvaluationRepository:
    """Repository for EvaluationInstance create/read/update."""

    ENTITY_NAME = "Evaluation"

    def __init__(self):
        self._items: Dict[str, EvaluationInstance] = {}
        self._items_lock = threading.Lock()
        self._locks: Dict[Hashable, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Locks
    # ------------------------------------------------------------------

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def lock_evaluator(self, evaluation_id: str, evaluator_id: str) -> Generator[None, None, None]:
        """Serialize submissions for one (evaluation, evaluator) pair."""
        with self._lock_for(("evaluator", evaluation_id, evaluator_id)):
            yield

    @contextmanager
    def lock_evaluation(self, evaluation_id: str) -> Generator[None, None, None]:
        """Serialize status-changing operations on one evaluation."""
        with self._lock_for(("evaluation", evaluation_id)):
            yield

    def release_evaluator_locks(self, evaluation_id: str) -> int:
        """
        Drop the evaluator locks of a finalized evaluation.

        A finalized evaluation rejects every write under its evaluation lock,
        so evaluator locks are no longer needed. The evaluation lock itself is
        kept for the lifetime of the store.

        Returns:
            Number of locks dropped.
        """
        with self._locks_guard:
            keys = [
                k for k in self._locks
                if k[0] == "evaluator" and k[1] == evaluation_id
            ]
            for k in keys:
                del self._locks[k]

        logger.debug(
            "evaluator_locks_released",
            extra={"evaluation_id": evaluation_id, "locks_released": len(keys)},
        )
        return len(keys)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, evaluation: EvaluationInstance) -> EvaluationInstance:
        """
        Store a new evaluation.

        Raises:
            DuplicateEntityException: an evaluation with the same id exists.
        """
        with self._items_lock:
            if evaluation.id in self._items:
                raise DuplicateEntityException(
                    f"{self.ENTITY_NAME} with ID {evaluation.id} already exists"
                )
            self._items[evaluation.id] = evaluation

        logger.info(
            "evaluation_created",
            extra={
                "evaluation_id": evaluation.id,
                "rubric_id": evaluation.rubric_id,
                "vendor_id": evaluation.vendor_id,
                "required_evaluators": evaluation.required_evaluators,
                "is_blind": evaluation.is_blind,
            },
        )
        return evaluation

    def get_by_id(self, evaluation_id: str) -> Optional[EvaluationInstance]:
        """Evaluation or None if not found."""
        return self._items.get(evaluation_id)

    def get_or_raise(self, evaluation_id: str) -> EvaluationInstance:
        """
        Evaluation by id.

        Raises:
            EntityNotFoundException: no evaluation with that id.
        """
        evaluation = self.get_by_id(evaluation_id)
        if evaluation is None:
            raise EntityNotFoundException(self.ENTITY_NAME, evaluation_id)
        return evaluation

    def update(self, evaluation: EvaluationInstance) -> EvaluationInstance:
        """
        Replace a stored evaluation.

        Raises:
            EntityNotFoundException: the evaluation was never created.
        """
        with self._items_lock:
            if evaluation.id not in self._items:
                raise EntityNotFoundException(self.ENTITY_NAME, evaluation.id)
            self._items[evaluation.id] = evaluation
        return evaluation

    def get_all(
        self,
        page: int = 1,
        page_size: int = 20,
        rfp_id: Optional[str] = None,
        status: Optional[EvaluationStatus] = None,
    ) -> Tuple[List[EvaluationInstance], int]:
        """
        Paginated list of evaluations with optional filters, oldest first.

        Returns:
            Tuple of (page of evaluations, total matching count)
        """
        items = sorted(self._items.values(), key=lambda e: e.created_at)
        if rfp_id is not None:
            items = [e for e in items if e.rfp_id == rfp_id]
        if status is not None:
            items = [e for e in items if e.status == status]

        offset = (page - 1) * page_size
        return items[offset:offset + page_size], len(items)
