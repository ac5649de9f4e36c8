"""Schemas for the vendor marketplace, matching, comparison and contact."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from compliance_core.enums import (
    ContactStatus,
    ContactType,
    GapCategory,
    PricingModel,
    SubscriptionPlan,
    VendorStatus,
)
from compliance_core.schemas.base import CamelModel


class Vendor(CamelModel):
    id: str
    company_name: str
    categories: list[GapCategory] = Field(default_factory=list)
    status: VendorStatus = VendorStatus.PENDING
    featured: bool = False
    verified: bool = False
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)


class Solution(CamelModel):
    id: str
    vendor_id: str
    name: str
    category: GapCategory
    pricing_model: PricingModel
    starting_price: float | None = Field(default=None, ge=0.0)
    is_active: bool = True


class VendorMatch(CamelModel):
    """A computed (gap, vendor) pairing. Recomputed per request, never stored."""

    gap_id: str
    vendor_id: str
    solution_id: str | None = None
    match_score: float = Field(..., ge=0.0, le=100.0)
    match_reasons: list[str]


class CompareRequest(CamelModel):
    vendor_ids: list[str]


class ComparisonSummary(CamelModel):
    total_vendors: int
    categories: list[GapCategory]
    avg_rating: float
    total_reviews: int


class ComparisonEntry(CamelModel):
    id: str
    name: str
    categories: list[GapCategory]
    rating: float | None = None
    review_count: int
    verified: bool
    featured: bool


class ComparisonDetail(CamelModel):
    summary: ComparisonSummary
    matrix: list[ComparisonEntry]


class VendorComparison(CamelModel):
    vendors: list[Vendor]
    comparison: ComparisonDetail


class ContactRequest(CamelModel):
    """Contact payload. `type` stays a plain string so the contact gate owns validation."""

    type: str
    message: str = ""


class Requester(CamelModel):
    user_id: str
    organization_id: str
    subscription_plan: SubscriptionPlan | None = None


class VendorContact(CamelModel):
    id: str
    vendor_id: str
    user_id: str
    organization_id: str
    type: ContactType
    message: str
    status: ContactStatus = ContactStatus.PENDING
    created_at: datetime
