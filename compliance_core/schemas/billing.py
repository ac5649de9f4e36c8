"""Schemas for the subscription state read by the gating rules."""

from __future__ import annotations

from pydantic import Field

from compliance_core.enums import SubscriptionPlan
from compliance_core.schemas.base import CamelModel


class SubscriptionRecord(CamelModel):
    organization_id: str
    plan: SubscriptionPlan = SubscriptionPlan.FREE
    credits_balance: int = Field(default=0, ge=0)
    credits_used: int = Field(default=0, ge=0)
