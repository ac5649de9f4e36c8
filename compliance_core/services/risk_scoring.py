"""Category risk scorer: weighted severity scoring, key findings and mitigations."""

from __future__ import annotations

from collections.abc import Iterable

from compliance_core.enums import GapCategory, RiskLevel, Severity
from compliance_core.schemas.assessment import CategoryAnalysis, Gap


# Severity to weight mapping
SEVERITY_WEIGHTS = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}

# Ordering used for key findings (most severe first)
SEVERITY_ORDER = [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW]

# score = min(MAX_SCORE, BASELINE + SCALE * sum(weights))
BASELINE = 0.0
SCALE = 1.25
MAX_SCORE = 10.0

# Score thresholds for the category risk level
HIGH_RISK_THRESHOLD = 7.5
MEDIUM_RISK_THRESHOLD = 5.0

# Human-readable labels for compliance domains
CATEGORY_LABELS = {
    GapCategory.KYC_AML: "KYC/AML",
    GapCategory.TRANSACTION_MONITORING: "transaction monitoring",
    GapCategory.SANCTIONS_SCREENING: "sanctions screening",
    GapCategory.TRADE_SURVEILLANCE: "trade surveillance",
    GapCategory.RISK_ASSESSMENT: "risk assessment",
    GapCategory.COMPLIANCE_TRAINING: "compliance training",
    GapCategory.REGULATORY_REPORTING: "regulatory reporting",
    GapCategory.DATA_GOVERNANCE: "data governance",
    GapCategory.DATA_PROTECTION: "data protection",
}


def calculate_category_score(gaps: Iterable[Gap]) -> float:
    """Calculate the 0-10 risk score for one category's gaps.

    Each gap contributes its severity weight; the weighted sum is scaled and
    capped so that one CRITICAL plus one HIGH gap already scores 8.75.

    Args:
        gaps: Gaps belonging to a single category.

    Returns:
        Score rounded to two decimals, between 0.0 and 10.0.
    """
    total_weight = sum(SEVERITY_WEIGHTS[gap.severity] for gap in gaps)
    return round(min(MAX_SCORE, BASELINE + SCALE * total_weight), 2)


def risk_level_for_score(score: float) -> RiskLevel:
    if score >= HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def category_label(category: GapCategory) -> str:
    return CATEGORY_LABELS.get(category, category.value.replace("_", " ").lower())


def generate_key_findings(gaps: list[Gap]) -> list[str]:
    """One finding per gap, most severe first, input order within a severity."""
    ordered = sorted(gaps, key=lambda g: SEVERITY_ORDER.index(g.severity))
    findings = []
    for gap in ordered:
        finding = f"{gap.severity.value.capitalize()} gap: {gap.title}"
        if gap.description:
            finding += f". {gap.description.strip()}"
        findings.append(finding)
    return findings


def generate_mitigation_strategies(category: GapCategory, gaps: list[Gap]) -> list[str]:
    """Generate the four mitigation strategies for a category.

    Always returns exactly four entries, in this order: immediate
    remediation, process/control change, monitoring, governance/training.
    """
    label = category_label(category)
    critical = sum(1 for g in gaps if g.severity == Severity.CRITICAL)
    high = sum(1 for g in gaps if g.severity == Severity.HIGH)

    if critical:
        immediate = f"Address {critical} critical {label} gap(s) immediately to prevent regulatory violations"
    elif high:
        immediate = f"Remediate {high} high-priority {label} gap(s) to reduce compliance risk"
    else:
        immediate = f"Resolve the {len(gaps)} open {label} gap(s) within the current review cycle"

    return [
        immediate,
        f"Redesign {label} processes and controls, assigning responsible parties and clear deadlines",
        f"Establish continuous {label} monitoring with dashboards and regular audits",
        f"Strengthen {label} governance through documented policies and targeted staff training",
    ]


def analyse_category(category: GapCategory, gaps: list[Gap]) -> CategoryAnalysis:
    """Build the full analysis block for one category.

    Args:
        category: The compliance domain being analysed.
        gaps: All gaps in that domain (at least one).

    Returns:
        CategoryAnalysis with score, counts, findings and four mitigations.
    """
    return CategoryAnalysis(
        score=calculate_category_score(gaps),
        total_gaps=len(gaps),
        critical_gaps=sum(1 for g in gaps if g.severity == Severity.CRITICAL),
        key_findings=generate_key_findings(gaps),
        mitigation_strategies=generate_mitigation_strategies(category, gaps),
    )


def group_gaps_by_category(gaps: Iterable[Gap]) -> dict[GapCategory, list[Gap]]:
    """Group gaps by category, preserving first-seen category order."""
    grouped: dict[GapCategory, list[Gap]] = {}
    for gap in gaps:
        grouped.setdefault(gap.category, []).append(gap)
    return grouped


def analyse_gaps(gaps: Iterable[Gap]) -> dict[str, CategoryAnalysis]:
    """Analyse every category present in the gap list, keyed by category name."""
    return {
        category.value: analyse_category(category, category_gaps)
        for category, category_gaps in group_gaps_by_category(gaps).items()
    }
