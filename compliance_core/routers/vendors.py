"""Vendor matching, comparison, contact and marketplace listing endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from compliance_core.config import Settings
from compliance_core.enums import GapCategory, PricingModel
from compliance_core.routers.dependencies import (
    get_app_settings,
    get_organization_scope,
    get_repository,
    get_requester,
)
from compliance_core.schemas.vendor import (
    CompareRequest,
    ContactRequest,
    Requester,
    Solution,
    Vendor,
    VendorComparison,
    VendorContact,
    VendorMatch,
)
from compliance_core.services.marketplace import list_marketplace_solutions, list_marketplace_vendors
from compliance_core.services.vendor_comparison import compare_vendors
from compliance_core.services.vendor_contact import ContactGate
from compliance_core.services.vendor_matching import VendorMatchRanker

# Handlers are plain functions so blocking repository calls run in the threadpool.
router = APIRouter(tags=["vendors"])


@router.get("/gaps/{gap_id}/vendor-matches", response_model=list[VendorMatch])
def get_vendor_matches(
    gap_id: str,
    min_score: float | None = Query(default=None, alias="minScore", ge=0, le=100),
    limit: int | None = Query(default=None, ge=1),
    organization_id: str | None = Depends(get_organization_scope),
    repository: Any = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> list[VendorMatch]:
    """Rank approved vendors against a gap."""
    ranker = VendorMatchRanker(
        repository,
        repository,
        default_limit=settings.default_match_limit,
        max_limit=settings.max_match_limit,
    )
    return ranker.match_vendors_for_gap(
        gap_id,
        min_score=min_score,
        limit=limit,
        organization_id=organization_id,
    )


@router.get("/vendors", response_model=list[Vendor])
def list_vendors(
    category: GapCategory | None = Query(default=None),
    repository: Any = Depends(get_repository),
) -> list[Vendor]:
    """List approved marketplace vendors."""
    return list_marketplace_vendors(repository, category=category)


@router.post("/vendors/compare", response_model=VendorComparison)
def compare(
    request: CompareRequest,
    repository: Any = Depends(get_repository),
) -> VendorComparison:
    """Compare two to four approved vendors side by side."""
    return compare_vendors(request.vendor_ids, repository)


@router.post("/vendors/{vendor_id}/contact", response_model=VendorContact, status_code=201)
def contact(
    vendor_id: str,
    payload: ContactRequest,
    requester: Requester = Depends(get_requester),
    repository: Any = Depends(get_repository),
) -> VendorContact:
    """Send a demo, info, pricing, general or RFP request to a vendor."""
    return ContactGate(repository, repository).contact_vendor(vendor_id, payload, requester)


@router.get("/solutions", response_model=list[Solution])
def list_solutions(
    category: GapCategory | None = Query(default=None),
    pricing_model: PricingModel | None = Query(default=None, alias="pricingModel"),
    repository: Any = Depends(get_repository),
) -> list[Solution]:
    """List active solutions from approved vendors."""
    return list_marketplace_solutions(repository, category=category, pricing_model=pricing_model)
