"""Assessment analysis engine: orchestrates scoring, matrix building and caching."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

import structlog

from compliance_core.errors import AccessDenied, AssessmentNotFound, ComplianceError, NoGapsFound
from compliance_core.interfaces import AssessmentRepository
from compliance_core.models.base import utcnow
from compliance_core.schemas.assessment import (
    AnalysisData,
    AnalysisOptions,
    AnalysisResult,
    Assessment,
    ErrorDetail,
)
from compliance_core.services.analysis_cache import AnalysisCache
from compliance_core.services.risk_scoring import analyse_gaps
from compliance_core.services.strategy_matrix import build_strategy_matrix

logger = structlog.get_logger()


class AssessmentAnalysisEngine:
    """Generates and stores the risk analysis and strategy matrix for an assessment.

    Generation is idempotent: once an analysis is stored it is returned as-is
    until a caller asks for ``force_regenerate``.
    """

    def __init__(
        self,
        repository: AssessmentRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repository = repository
        self._cache = AnalysisCache(repository)
        self._clock = clock

    def generate_and_store_ai_analysis(
        self,
        assessment_id: str,
        template_context: dict[str, Any] | None = None,
        options: AnalysisOptions | None = None,
        organization_id: str | None = None,
    ) -> AnalysisResult:
        """Generate (or return the cached) analysis for an assessment.

        Args:
            assessment_id: The assessment to analyse.
            template_context: Optional questionnaire template metadata, logged only.
            options: ``force_regenerate`` recomputes and overwrites a stored analysis.
            organization_id: When given, the assessment must belong to this organization.

        Returns:
            AnalysisResult with ``data`` on success or a typed ``error``.
        """
        options = options or AnalysisOptions()
        try:
            assessment = self._load(assessment_id, organization_id)

            cached = self._cache.get_cached(assessment)
            if cached is not None and not options.force_regenerate:
                logger.info("ai_analysis_cached", assessment_id=assessment_id)
                return AnalysisResult(success=True, data=cached)

            if cached is not None:
                logger.info("ai_analysis_force_regenerate", assessment_id=assessment_id)

            if not assessment.gaps:
                logger.warning("ai_analysis_no_gaps", assessment_id=assessment_id)
                raise NoGapsFound("No gaps to analyze")

            risk_analysis = analyse_gaps(assessment.gaps)
            strategy_matrix = build_strategy_matrix(risk_analysis)
            generated_at = self._next_generated_at(assessment.ai_generated_at)

            data = self._cache.store(
                assessment_id,
                risk_analysis,
                strategy_matrix,
                generated_at,
                expected_generated_at=assessment.ai_generated_at,
            )
        except ComplianceError as exc:
            logger.warning(
                "ai_analysis_failed",
                assessment_id=assessment_id,
                kind=exc.kind.value,
                code=exc.code,
                error=exc.message,
            )
            return AnalysisResult(success=False, error=ErrorDetail(**exc.to_detail()))

        logger.info(
            "ai_analysis_generated",
            assessment_id=assessment_id,
            categories=list(risk_analysis),
            total_gaps=len(assessment.gaps),
            template_id=(template_context or {}).get("templateId", assessment.template_id),
        )
        return AnalysisResult(success=True, data=data)

    def get_stored_analysis(self, assessment_id: str, organization_id: str | None = None) -> AnalysisData:
        """Return the stored analysis without generating one.

        Raises:
            AssessmentNotFound: If the assessment or its analysis does not exist.
            AccessDenied: If the assessment belongs to another organization.
        """
        assessment = self._load(assessment_id, organization_id)
        cached = self._cache.get_cached(assessment)
        if cached is None:
            raise AssessmentNotFound(
                f"AI analysis has not been generated for assessment {assessment_id}",
                code="AI_ANALYSIS_NOT_FOUND",
            )
        return cached

    def _load(self, assessment_id: str, organization_id: str | None) -> Assessment:
        assessment = self._repository.get_assessment_with_gaps_and_risks(assessment_id)
        if assessment is None:
            raise AssessmentNotFound(f"Assessment {assessment_id} not found")
        if organization_id is not None and assessment.organization_id != organization_id:
            raise AccessDenied("Assessment belongs to another organization")
        return assessment

    def _next_generated_at(self, previous: datetime | None) -> datetime:
        """Current clock time, nudged forward if it has not passed ``previous``."""
        now = self._clock()
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now
