"""Assessment completion and AI analysis endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from compliance_core.config import Settings
from compliance_core.errors import HTTP_STATUS_BY_KIND
from compliance_core.routers.dependencies import (
    get_app_settings,
    get_organization_scope,
    get_repository,
    get_requester,
)
from compliance_core.schemas.assessment import (
    AnalysisData,
    AnalysisOptions,
    AnalysisResult,
    AssessmentSummary,
    GenerateAnalysisRequest,
)
from compliance_core.schemas.vendor import Requester
from compliance_core.services.analysis_engine import AssessmentAnalysisEngine
from compliance_core.services.assessment_completion import AssessmentCompletionGate

# Handlers are plain functions so blocking repository calls run in the threadpool.
router = APIRouter(prefix="/assessments", tags=["assessments"])


@router.post("/{assessment_id}/complete", response_model=AssessmentSummary)
def complete_assessment(
    assessment_id: str,
    requester: Requester = Depends(get_requester),
    repository: Any = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> AssessmentSummary:
    """Complete an assessment, debiting the organization's credits."""
    gate = AssessmentCompletionGate(
        repository,
        credits_per_assessment=settings.credits_per_assessment,
    )
    assessment = gate.complete_assessment(assessment_id, requester)
    return AssessmentSummary(
        id=assessment.id,
        status=assessment.status,
        credits_used=assessment.credits_used,
        completed_at=assessment.completed_at,
    )


@router.post("/{assessment_id}/ai-analysis", response_model=AnalysisResult)
def generate_ai_analysis(
    assessment_id: str,
    body: GenerateAnalysisRequest | None = Body(default=None),
    organization_id: str | None = Depends(get_organization_scope),
    repository: Any = Depends(get_repository),
):
    """Generate the risk analysis and strategy matrix, or return the stored one."""
    body = body or GenerateAnalysisRequest()
    engine = AssessmentAnalysisEngine(repository)
    result = engine.generate_and_store_ai_analysis(
        assessment_id,
        template_context=body.template_context,
        options=AnalysisOptions(force_regenerate=body.force_regenerate),
        organization_id=organization_id,
    )
    if not result.success:
        return JSONResponse(
            status_code=HTTP_STATUS_BY_KIND[result.error.kind],
            content=result.model_dump(mode="json", by_alias=True),
        )
    return result


@router.get("/{assessment_id}/ai-analysis", response_model=AnalysisData)
def get_ai_analysis(
    assessment_id: str,
    organization_id: str | None = Depends(get_organization_scope),
    repository: Any = Depends(get_repository),
) -> AnalysisData:
    """Return the stored analysis; 404 if it has not been generated yet."""
    engine = AssessmentAnalysisEngine(repository)
    return engine.get_stored_analysis(assessment_id, organization_id=organization_id)
