"""Marketplace listings of approved vendors and their active solutions."""

from __future__ import annotations

from compliance_core.enums import GapCategory, PricingModel
from compliance_core.interfaces import VendorRepository
from compliance_core.schemas.vendor import Solution, Vendor


def list_marketplace_vendors(
    repository: VendorRepository,
    category: GapCategory | None = None,
) -> list[Vendor]:
    """Approved vendors, featured and verified first, then best rated, then by name."""
    if category is not None:
        vendors = repository.list_approved_vendors_by_category(category)
    else:
        vendors = repository.list_approved_vendors()

    return sorted(
        vendors,
        key=lambda v: (
            not v.featured,
            not v.verified,
            v.rating is None,
            -(v.rating or 0.0),
            v.company_name.lower(),
        ),
    )


def list_marketplace_solutions(
    repository: VendorRepository,
    category: GapCategory | None = None,
    pricing_model: PricingModel | None = None,
) -> list[Solution]:
    """Active solutions from approved vendors, cheapest first; unpriced solutions last."""
    approved_ids = {v.id for v in repository.list_approved_vendors()}

    solutions = [
        s
        for s in repository.list_solutions()
        if s.is_active
        and s.vendor_id in approved_ids
        and (category is None or s.category == category)
        and (pricing_model is None or s.pricing_model == pricing_model)
    ]
    solutions.sort(key=lambda s: (s.starting_price is None, s.starting_price or 0.0, s.id))
    return solutions
