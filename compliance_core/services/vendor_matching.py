"""Gap-to-vendor matching: candidate selection, deterministic scoring and ranking."""

from __future__ import annotations

import structlog

from compliance_core.enums import Severity, VendorStatus
from compliance_core.errors import AccessDenied, GapNotFound, ValidationError
from compliance_core.interfaces import AssessmentRepository, VendorRepository
from compliance_core.schemas.assessment import Gap
from compliance_core.schemas.vendor import Solution, Vendor, VendorMatch

logger = structlog.get_logger()


# Base alignment components
BASE_ALIGNMENT = 70.0
MAX_SPECIALISATION = 10.0
MAX_REVIEW_DEPTH = 5.0
REVIEWS_PER_POINT = 10

# Gap severity urgency bonus
SEVERITY_URGENCY = {
    Severity.CRITICAL: 4.0,
    Severity.HIGH: 3.0,
    Severity.MEDIUM: 2.0,
    Severity.LOW: 1.0,
}

# Fixed boosts
VERIFIED_BOOST = 5.0
FEATURED_BOOST = 3.0
RATING_BOOST = 5.0
RATING_BOOST_THRESHOLD = 4.0

MIN_MATCH_SCORE = 0.0
MAX_MATCH_SCORE = 100.0

# Match reasons
REASON_CATEGORY = "Category alignment with compliance requirements"
REASON_VERIFIED = "Verified vendor status"
REASON_EXPERIENCE = "Industry experience"
REASON_RATING = "High customer satisfaction rating"
REASON_PRICING = "Competitive pricing"
REASON_FEATURED = "Featured marketplace partner"


def _base_alignment(gap: Gap, vendor: Vendor) -> float:
    """Base score before boosts.

    Specialist vendors (fewer declared categories) and vendors with more
    reviews score slightly higher; more severe gaps raise every candidate.
    """
    specialisation = MAX_SPECIALISATION / len(vendor.categories) if vendor.categories else 0.0
    review_depth = min(MAX_REVIEW_DEPTH, float(vendor.review_count // REVIEWS_PER_POINT))
    return BASE_ALIGNMENT + specialisation + review_depth + SEVERITY_URGENCY[gap.severity]


def score_vendor_match(gap: Gap, vendor: Vendor) -> tuple[float, list[str]]:
    """Score how well a vendor fits a gap.

    Args:
        gap: The compliance gap to close.
        vendor: A candidate vendor serving the gap's category.

    Returns:
        Tuple of (score clamped to 0-100 and rounded to 2 decimals, match reasons).
        Reasons always start with category alignment and have at least three entries.
    """
    score = _base_alignment(gap, vendor)
    reasons = [REASON_CATEGORY]

    if vendor.verified:
        score += VERIFIED_BOOST
        reasons.append(REASON_VERIFIED)
    else:
        reasons.append(REASON_EXPERIENCE)

    if vendor.featured:
        score += FEATURED_BOOST

    if vendor.rating is not None and vendor.rating > RATING_BOOST_THRESHOLD:
        score += RATING_BOOST
        reasons.append(REASON_RATING)
    else:
        reasons.append(REASON_PRICING)

    if vendor.featured:
        reasons.append(REASON_FEATURED)

    score = max(MIN_MATCH_SCORE, min(MAX_MATCH_SCORE, score))
    return round(score, 2), reasons


def select_best_solution(gap: Gap, solutions: list[Solution]) -> Solution | None:
    """Cheapest active solution in the gap's category; unpriced solutions sort last."""
    candidates = [s for s in solutions if s.is_active and s.category == gap.category]
    if not candidates:
        return None
    candidates.sort(key=lambda s: (s.starting_price is None, s.starting_price or 0.0, s.id))
    return candidates[0]


class VendorMatchRanker:
    """Ranks approved marketplace vendors against a single gap."""

    def __init__(
        self,
        assessments: AssessmentRepository,
        vendors: VendorRepository,
        default_limit: int = 10,
        max_limit: int = 100,
    ) -> None:
        self._assessments = assessments
        self._vendors = vendors
        self._default_limit = default_limit
        self._max_limit = max_limit

    def match_vendors_for_gap(
        self,
        gap_id: str,
        min_score: float | None = None,
        limit: int | None = None,
        organization_id: str | None = None,
    ) -> list[VendorMatch]:
        """Return ranked vendor matches for a gap.

        Args:
            gap_id: The gap to match.
            min_score: Drop matches scoring below this value.
            limit: Maximum number of matches (defaults to the configured limit).
            organization_id: When given, the gap's assessment must belong to it.

        Returns:
            Matches sorted by score descending, then vendor id ascending.
            Empty when no approved vendor serves the gap's category.
        """
        if limit is not None and limit < 1:
            raise ValidationError("limit must be at least 1", code="INVALID_LIMIT")
        limit = min(limit or self._default_limit, self._max_limit)

        gap = self._assessments.get_gap(gap_id)
        if gap is None:
            raise GapNotFound(f"Gap {gap_id} not found")

        if organization_id is not None:
            owner = self._assessments.get_assessment_organization(gap.assessment_id)
            if owner != organization_id:
                raise AccessDenied("Gap belongs to another organization")

        candidates = [
            v
            for v in self._vendors.list_approved_vendors_by_category(gap.category)
            if v.status == VendorStatus.APPROVED and gap.category in v.categories
        ]

        matches = []
        for vendor in candidates:
            score, reasons = score_vendor_match(gap, vendor)
            if min_score is not None and score < min_score:
                continue
            solution = select_best_solution(gap, self._vendors.list_solutions(vendor.id))
            matches.append(
                VendorMatch(
                    gap_id=gap.id,
                    vendor_id=vendor.id,
                    solution_id=solution.id if solution else None,
                    match_score=score,
                    match_reasons=reasons,
                )
            )

        matches.sort(key=lambda m: (-m.match_score, m.vendor_id))
        matches = matches[:limit]

        logger.info(
            "vendor_matches_ranked",
            gap_id=gap_id,
            category=gap.category.value,
            candidates=len(candidates),
            returned=len(matches),
        )
        return matches
