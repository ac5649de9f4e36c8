"""Initial schema: assessments, findings, vendor marketplace and subscriptions.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Assessments
    op.create_table(
        "assessments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("organization_id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("template_id", sa.String(36), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("responses", sa.JSON, nullable=True),
        sa.Column("risk_score", sa.Float, nullable=True),
        sa.Column("credits_used", sa.Integer, server_default="0"),
        sa.Column("ai_risk_analysis", sa.JSON, nullable=True),
        sa.Column("ai_strategy_matrix", sa.JSON, nullable=True),
        sa.Column("ai_generated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_assessments_organization_id", "assessments", ["organization_id"])

    # Gaps
    op.create_table(
        "gaps",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "assessment_id",
            sa.String(36),
            sa.ForeignKey("assessments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False),
        sa.Column("estimated_cost", sa.String(20), nullable=True),
        sa.Column("estimated_effort", sa.String(20), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_gaps_assessment_id", "gaps", ["assessment_id"])
    op.create_index("ix_gaps_category", "gaps", ["category"])

    # Risks
    op.create_table(
        "risks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "assessment_id",
            sa.String(36),
            sa.ForeignKey("assessments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("likelihood", sa.String(20), nullable=False),
        sa.Column("impact", sa.String(20), nullable=False),
        sa.Column("risk_level", sa.String(20), nullable=False),
        sa.Column("mitigation_strategy", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_risks_assessment_id", "risks", ["assessment_id"])

    # Vendors
    op.create_table(
        "vendors",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("company_name", sa.String(200), nullable=False),
        sa.Column("categories", sa.JSON, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("featured", sa.Boolean, server_default=sa.false()),
        sa.Column("verified", sa.Boolean, server_default=sa.false()),
        sa.Column("rating", sa.Float, nullable=True),
        sa.Column("review_count", sa.Integer, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_vendors_status", "vendors", ["status"])

    # Solutions
    op.create_table(
        "solutions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "vendor_id",
            sa.String(36),
            sa.ForeignKey("vendors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("pricing_model", sa.String(20), nullable=False),
        sa.Column("starting_price", sa.Float, nullable=True),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_solutions_vendor_id", "solutions", ["vendor_id"])

    # Vendor contacts
    op.create_table(
        "vendor_contacts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "vendor_id",
            sa.String(36),
            sa.ForeignKey("vendors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("organization_id", sa.String(36), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        *_timestamps(),
    )
    op.create_index("ix_vendor_contacts_vendor_id", "vendor_contacts", ["vendor_id"])
    op.create_index("ix_vendor_contacts_organization_id", "vendor_contacts", ["organization_id"])

    # Subscriptions
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("organization_id", sa.String(36), nullable=False, unique=True),
        sa.Column("plan", sa.String(20), nullable=False, server_default="FREE"),
        sa.Column("credits_balance", sa.Integer, server_default="0"),
        sa.Column("credits_used", sa.Integer, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_subscriptions_organization_id", "subscriptions", ["organization_id"])


def downgrade() -> None:
    op.drop_table("subscriptions")
    op.drop_table("vendor_contacts")
    op.drop_table("solutions")
    op.drop_table("vendors")
    op.drop_table("risks")
    op.drop_table("gaps")
    op.drop_table("assessments")
