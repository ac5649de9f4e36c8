"""Vendor marketplace models."""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from compliance_core.models.base import Base


class Vendor(Base):
    """A solution provider listed in the marketplace."""

    __tablename__ = "vendors"

    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    categories: Mapped[list[str]] = mapped_column(JSON, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING", index=True)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    verified: Mapped[bool] = mapped_column(Boolean, default=False)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    review_count: Mapped[int] = mapped_column(Integer, default=0)

    solutions: Mapped[list[Solution]] = relationship(back_populates="vendor", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Vendor {self.company_name}>"


class Solution(Base):
    """A product a vendor offers for one category."""

    __tablename__ = "solutions"

    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    pricing_model: Mapped[str] = mapped_column(String(20), nullable=False)
    starting_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    vendor: Mapped[Vendor] = relationship(back_populates="solutions")

    def __repr__(self) -> str:
        return f"<Solution {self.name}>"


class VendorContact(Base):
    """A contact request sent from an organization to a vendor."""

    __tablename__ = "vendor_contacts"

    vendor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    organization_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")

    def __repr__(self) -> str:
        return f"<VendorContact {self.type} vendor={self.vendor_id[:8]}>"
