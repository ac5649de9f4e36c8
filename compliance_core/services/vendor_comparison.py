"""Side-by-side comparison of two to four approved vendors."""

from __future__ import annotations

import statistics

from compliance_core.enums import GapCategory, VendorStatus
from compliance_core.errors import InvalidVendorCount, ValidationError, VendorNotFound
from compliance_core.interfaces import VendorRepository
from compliance_core.schemas.vendor import (
    ComparisonDetail,
    ComparisonEntry,
    ComparisonSummary,
    Vendor,
    VendorComparison,
)

MIN_COMPARE_VENDORS = 2
MAX_COMPARE_VENDORS = 4


def _resolve_vendors(vendor_ids: list[str], repository: VendorRepository) -> list[Vendor]:
    vendors = []
    for vendor_id in vendor_ids:
        vendor = repository.get_vendor(vendor_id)
        if vendor is None or vendor.status != VendorStatus.APPROVED:
            raise VendorNotFound(f"Vendor {vendor_id} not found")
        vendors.append(vendor)
    return vendors


def compare_vendors(vendor_ids: list[str], repository: VendorRepository) -> VendorComparison:
    """Compare 2-4 approved vendors.

    Args:
        vendor_ids: Vendor ids in the order they should appear in the matrix.
        repository: Vendor lookup.

    Returns:
        VendorComparison with an aggregated summary and a per-vendor matrix.

    Raises:
        InvalidVendorCount: Fewer than 2 or more than 4 ids.
        ValidationError: The same id was given twice.
        VendorNotFound: An id is unknown or the vendor is not approved.
    """
    if not MIN_COMPARE_VENDORS <= len(vendor_ids) <= MAX_COMPARE_VENDORS:
        raise InvalidVendorCount(
            f"Please select between {MIN_COMPARE_VENDORS} and {MAX_COMPARE_VENDORS} vendors to compare"
        )
    if len(set(vendor_ids)) != len(vendor_ids):
        raise ValidationError("Each vendor can only be compared once", code="DUPLICATE_VENDOR_IDS")

    vendors = _resolve_vendors(vendor_ids, repository)

    categories: list[GapCategory] = []
    for vendor in vendors:
        for category in vendor.categories:
            if category not in categories:
                categories.append(category)

    summary = ComparisonSummary(
        total_vendors=len(vendors),
        categories=categories,
        avg_rating=statistics.fmean(v.rating or 0.0 for v in vendors),
        total_reviews=sum(v.review_count for v in vendors),
    )
    matrix = [
        ComparisonEntry(
            id=v.id,
            name=v.company_name,
            categories=v.categories,
            rating=v.rating,
            review_count=v.review_count,
            verified=v.verified,
            featured=v.featured,
        )
        for v in vendors
    ]
    return VendorComparison(vendors=vendors, comparison=ComparisonDetail(summary=summary, matrix=matrix))
