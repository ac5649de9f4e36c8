"""Assessment completion gate: lifecycle and credit checks before analysis."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog

from compliance_core.enums import AssessmentStatus
from compliance_core.errors import (
    AccessDenied,
    AssessmentAlreadyCompleted,
    AssessmentNotFound,
)
from compliance_core.interfaces import CompletionStore
from compliance_core.models.base import utcnow
from compliance_core.schemas.assessment import Assessment
from compliance_core.schemas.vendor import Requester

logger = structlog.get_logger()


class AssessmentCompletionGate:
    """Completes an assessment once the organization can pay for it."""

    def __init__(
        self,
        store: CompletionStore,
        credits_per_assessment: int = 50,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._credits_per_assessment = credits_per_assessment
        self._clock = clock

    def complete_assessment(self, assessment_id: str, requester: Requester) -> Assessment:
        """Debit credits and mark the assessment COMPLETED.

        The status and balance checks are repeated inside the store's atomic
        `complete_with_debit`, so concurrent calls debit at most once.

        Raises:
            AssessmentNotFound: Unknown assessment.
            AccessDenied: Assessment belongs to another organization.
            AssessmentAlreadyCompleted: Status is already COMPLETED.
            InsufficientCredits: Balance below the per-assessment cost.
        """
        assessment = self._store.get_assessment_with_gaps_and_risks(assessment_id)
        if assessment is None:
            raise AssessmentNotFound(f"Assessment {assessment_id} not found")
        if assessment.organization_id != requester.organization_id:
            raise AccessDenied("Assessment belongs to another organization")
        if assessment.status == AssessmentStatus.COMPLETED:
            raise AssessmentAlreadyCompleted("Assessment is already completed")

        cost = self._credits_per_assessment
        completed, remaining = self._store.complete_with_debit(
            assessment_id,
            requester.organization_id,
            cost,
            self._clock(),
            reason=f"Assessment completion: {assessment_id}",
        )

        logger.info(
            "assessment_completed",
            assessment_id=assessment_id,
            organization_id=requester.organization_id,
            credits_debited=cost,
            credits_remaining=remaining,
        )
        return completed
