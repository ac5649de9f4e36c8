"""Idempotency wrapper over the stored analysis fields of an assessment."""

from __future__ import annotations

from datetime import datetime

import structlog

from compliance_core.errors import StorageError
from compliance_core.interfaces import AssessmentRepository
from compliance_core.schemas.assessment import AnalysisData, Assessment, CategoryAnalysis, StrategyMatrixRow
from compliance_core.services.strategy_matrix import compute_matrix_metrics

logger = structlog.get_logger()


def stored_analysis(assessment: Assessment) -> AnalysisData | None:
    """Return the stored analysis, or None if it has not been generated.

    Analysis and matrix are written together; a record holding only one of
    them counts as not generated.
    """
    if (
        assessment.ai_generated_at is None
        or assessment.ai_risk_analysis is None
        or assessment.ai_strategy_matrix is None
    ):
        return None

    return AnalysisData(
        risk_analysis=assessment.ai_risk_analysis,
        strategy_matrix=assessment.ai_strategy_matrix,
        generated_at=assessment.ai_generated_at,
        metrics=compute_matrix_metrics(assessment.ai_strategy_matrix),
    )


class AnalysisCache:
    """Reads and conditionally writes the analysis held on an assessment."""

    def __init__(self, repository: AssessmentRepository) -> None:
        self._repository = repository

    def get_cached(self, assessment: Assessment) -> AnalysisData | None:
        return stored_analysis(assessment)

    def store(
        self,
        assessment_id: str,
        risk_analysis: dict[str, CategoryAnalysis],
        strategy_matrix: list[StrategyMatrixRow],
        generated_at: datetime,
        expected_generated_at: datetime | None,
    ) -> AnalysisData:
        """Write the analysis unless another writer got there first.

        On a lost conditional write the now-current stored analysis is
        returned instead of the freshly computed one.
        """
        written = self._repository.save_analysis(
            assessment_id,
            risk_analysis,
            strategy_matrix,
            generated_at,
            expected_generated_at,
        )
        if written:
            return AnalysisData(
                risk_analysis=risk_analysis,
                strategy_matrix=strategy_matrix,
                generated_at=generated_at,
                metrics=compute_matrix_metrics(strategy_matrix),
            )

        logger.info("ai_analysis_write_conflict", assessment_id=assessment_id)
        current = self._repository.get_assessment_with_gaps_and_risks(assessment_id)
        existing = stored_analysis(current) if current is not None else None
        if existing is None:
            raise StorageError(f"Analysis for assessment {assessment_id} could not be stored")
        return existing
