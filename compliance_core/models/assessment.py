"""Assessment models: questionnaires and the gaps and risks derived from them."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from compliance_core.models.base import Base


class Assessment(Base):
    """A compliance questionnaire run for an organization."""

    __tablename__ = "assessments"

    organization_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    template_id: Mapped[str] = mapped_column(String(36), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="DRAFT")
    responses: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    risk_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    credits_used: Mapped[int] = mapped_column(Integer, default=0)

    # Generated analysis, written only by the analysis engine
    ai_risk_analysis: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    ai_strategy_matrix: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    ai_generated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    gaps: Mapped[list[Gap]] = relationship(back_populates="assessment", cascade="all, delete-orphan")
    risks: Mapped[list[Risk]] = relationship(back_populates="assessment", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Assessment {self.id[:8]} org={self.organization_id[:8]} status={self.status}>"


class Gap(Base):
    """A compliance deficiency found in one category of an assessment."""

    __tablename__ = "gaps"

    assessment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    estimated_cost: Mapped[str | None] = mapped_column(String(20), nullable=True)
    estimated_effort: Mapped[str | None] = mapped_column(String(20), nullable=True)

    assessment: Mapped[Assessment] = relationship(back_populates="gaps")

    def __repr__(self) -> str:
        return f"<Gap {self.category} {self.severity}>"


class Risk(Base):
    """A forward-looking consequence identified for an assessment."""

    __tablename__ = "risks"

    assessment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    likelihood: Mapped[str] = mapped_column(String(20), nullable=False)
    impact: Mapped[str] = mapped_column(String(20), nullable=False)
    risk_level: Mapped[str] = mapped_column(String(20), nullable=False)
    mitigation_strategy: Mapped[str | None] = mapped_column(Text, nullable=True)

    assessment: Mapped[Assessment] = relationship(back_populates="risks")

    def __repr__(self) -> str:
        return f"<Risk {self.category} {self.risk_level}>"
