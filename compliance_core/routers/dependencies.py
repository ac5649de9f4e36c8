"""Request-scoped dependencies shared by the API routers."""

from __future__ import annotations

from typing import Any

from fastapi import Header, Request

from compliance_core.config import Settings
from compliance_core.enums import SubscriptionPlan
from compliance_core.schemas.vendor import Requester


def get_repository(request: Request) -> Any:
    return request.app.state.repository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_requester(
    x_user_id: str = Header(...),
    x_organization_id: str = Header(...),
    x_subscription_plan: SubscriptionPlan | None = Header(default=None),
) -> Requester:
    """Identity of the caller, forwarded by the authenticating gateway."""
    return Requester(
        user_id=x_user_id,
        organization_id=x_organization_id,
        subscription_plan=x_subscription_plan,
    )


async def get_organization_scope(x_organization_id: str | None = Header(default=None)) -> str | None:
    """Optional organization scope for read and generate endpoints."""
    return x_organization_id
