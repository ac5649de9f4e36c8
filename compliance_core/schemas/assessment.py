"""Schemas for assessments, their findings and the generated risk analysis."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from compliance_core.enums import (
    AssessmentStatus,
    CostRange,
    EffortRange,
    GapCategory,
    Impact,
    Likelihood,
    Priority,
    RiskCategory,
    RiskLevel,
    Severity,
)
from compliance_core.errors import ErrorKind
from compliance_core.schemas.base import CamelModel


class ResponseEntry(CamelModel):
    """A single questionnaire answer."""

    value: Any = None
    metadata: dict[str, Any] | None = None
    timestamp: datetime | None = None


class Gap(CamelModel):
    id: str
    assessment_id: str
    category: GapCategory
    title: str
    description: str = ""
    severity: Severity
    priority: Priority = Priority.MEDIUM_TERM
    estimated_cost: CostRange | None = None
    estimated_effort: EffortRange | None = None


class Risk(CamelModel):
    id: str
    assessment_id: str
    category: RiskCategory
    title: str
    description: str = ""
    likelihood: Likelihood
    impact: Impact
    risk_level: RiskLevel
    mitigation_strategy: str | None = None


class CategoryAnalysis(CamelModel):
    """Risk analysis for one gap category."""

    score: float = Field(..., ge=0.0, le=10.0)
    total_gaps: int = Field(..., ge=1)
    critical_gaps: int = Field(..., ge=0)
    key_findings: list[str]
    mitigation_strategies: list[str] = Field(..., min_length=4, max_length=4)


class StrategyMatrixRow(CamelModel):
    """One remediation plan row; one row per analysed category."""

    priority: int = Field(..., ge=1)
    risk_area: GapCategory
    adjusted_risk: float = Field(..., ge=0.0, le=10.0)
    risk_level: RiskLevel
    primary_mitigation: str
    timeline: str
    budget: str
    business_owner: str
    gap_count: int
    critical_gaps: int
    risk_reduction_percent: int
    remediation_days: int


class AnalysisMetrics(CamelModel):
    total_risk_reduction: int = 0
    avg_remediation_days: int = 0
    total_remediation_days: int = 0


class AnalysisData(CamelModel):
    risk_analysis: dict[str, CategoryAnalysis]
    strategy_matrix: list[StrategyMatrixRow]
    generated_at: datetime
    metrics: AnalysisMetrics = Field(default_factory=AnalysisMetrics)


class ErrorDetail(CamelModel):
    kind: ErrorKind
    code: str
    message: str


class AnalysisResult(CamelModel):
    """Typed outcome of an analysis generation call."""

    success: bool
    data: AnalysisData | None = None
    error: ErrorDetail | None = None


class AnalysisOptions(CamelModel):
    force_regenerate: bool = False


class GenerateAnalysisRequest(AnalysisOptions):
    """Body for POST /api/assessments/{id}/ai-analysis."""

    template_context: dict[str, Any] | None = None


class Assessment(CamelModel):
    """An assessment as handed to the core, optionally with its gaps and risks."""

    id: str
    organization_id: str
    user_id: str
    template_id: str
    status: AssessmentStatus = AssessmentStatus.DRAFT
    responses: dict[str, ResponseEntry] = Field(default_factory=dict)
    risk_score: float | None = None
    credits_used: int = 0
    ai_risk_analysis: dict[str, CategoryAnalysis] | None = None
    ai_strategy_matrix: list[StrategyMatrixRow] | None = None
    ai_generated_at: datetime | None = None
    completed_at: datetime | None = None
    gaps: list[Gap] = Field(default_factory=list)
    risks: list[Risk] = Field(default_factory=list)


class AssessmentSummary(CamelModel):
    """Response for the completion endpoint."""

    id: str
    status: AssessmentStatus
    credits_used: int
    completed_at: datetime | None = None
