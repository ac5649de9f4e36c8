"""Subscription model: plan and credit balance per organization."""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from compliance_core.models.base import Base


class Subscription(Base):
    """Billing state the core reads for its gating rules."""

    __tablename__ = "subscriptions"

    organization_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True, index=True)
    plan: Mapped[str] = mapped_column(String(20), nullable=False, default="FREE")
    credits_balance: Mapped[int] = mapped_column(Integer, default=0)
    credits_used: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<Subscription org={self.organization_id[:8]} plan={self.plan}>"
