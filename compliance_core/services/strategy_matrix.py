"""Strategy matrix builder: turns category analyses into ranked remediation rows."""

from __future__ import annotations

from typing import Any

from compliance_core.enums import GapCategory, RiskLevel
from compliance_core.schemas.assessment import AnalysisMetrics, CategoryAnalysis, StrategyMatrixRow
from compliance_core.services.risk_scoring import risk_level_for_score


# Category to accountable role
BUSINESS_OWNERS = {
    GapCategory.KYC_AML: "Chief Compliance Officer",
    GapCategory.TRANSACTION_MONITORING: "Chief Compliance Officer",
    GapCategory.SANCTIONS_SCREENING: "Chief Compliance Officer",
    GapCategory.DATA_PROTECTION: "Chief Information Security Officer",
    GapCategory.DATA_GOVERNANCE: "Chief Information Security Officer",
}
DEFAULT_BUSINESS_OWNER = "Head of Risk Management"

# Remediation plan per risk level
REMEDIATION_PLANS: dict[RiskLevel, dict[str, Any]] = {
    RiskLevel.HIGH: {
        "timeline": "1-2 weeks",
        "budget": "$25k-$50k",
        "escalated_budget": "$50k-$100k",
        "risk_reduction_percent": 25,
        "remediation_days": 14,
    },
    RiskLevel.MEDIUM: {
        "timeline": "1-3 months",
        "budget": "$40k-$75k",
        "escalated_budget": "$75k-$125k",
        "risk_reduction_percent": 20,
        "remediation_days": 60,
    },
    RiskLevel.LOW: {
        "timeline": "3-6 months",
        "budget": "$10k-$25k",
        "escalated_budget": "$25k-$40k",
        "risk_reduction_percent": 15,
        "remediation_days": 120,
    },
}

# Gap counts above which the escalated budget applies
ESCALATION_CRITICAL_GAPS = 3
ESCALATION_TOTAL_GAPS = 5


def business_owner_for(category: GapCategory) -> str:
    return BUSINESS_OWNERS.get(category, DEFAULT_BUSINESS_OWNER)


def _estimate_budget(plan: dict[str, Any], analysis: CategoryAnalysis) -> str:
    if analysis.critical_gaps > ESCALATION_CRITICAL_GAPS or analysis.total_gaps > ESCALATION_TOTAL_GAPS:
        return plan["escalated_budget"]
    return plan["budget"]


def build_strategy_matrix(risk_analysis: dict[str, CategoryAnalysis]) -> list[StrategyMatrixRow]:
    """Build one remediation row per analysed category.

    Rows are ranked by descending score, ties broken by category name so the
    output is deterministic. ``priority`` is the 1-based rank.

    Args:
        risk_analysis: Category name to CategoryAnalysis.

    Returns:
        Ordered list of StrategyMatrixRow.
    """
    ranked = sorted(risk_analysis.items(), key=lambda item: (-item[1].score, item[0]))

    rows = []
    for rank, (category_name, analysis) in enumerate(ranked, start=1):
        category = GapCategory(category_name)
        level = risk_level_for_score(analysis.score)
        plan = REMEDIATION_PLANS[level]
        rows.append(
            StrategyMatrixRow(
                priority=rank,
                risk_area=category,
                adjusted_risk=analysis.score,
                risk_level=level,
                primary_mitigation=analysis.mitigation_strategies[0],
                timeline=plan["timeline"],
                budget=_estimate_budget(plan, analysis),
                business_owner=business_owner_for(category),
                gap_count=analysis.total_gaps,
                critical_gaps=analysis.critical_gaps,
                risk_reduction_percent=plan["risk_reduction_percent"],
                remediation_days=plan["remediation_days"],
            )
        )
    return rows


def compute_matrix_metrics(rows: list[StrategyMatrixRow]) -> AnalysisMetrics:
    """Aggregate risk reduction and remediation time across matrix rows."""
    if not rows:
        return AnalysisMetrics()

    total_days = sum(row.remediation_days for row in rows)
    return AnalysisMetrics(
        total_risk_reduction=sum(row.risk_reduction_percent for row in rows),
        avg_remediation_days=round(total_days / len(rows)),
        total_remediation_days=total_days,
    )
