"""SQLAlchemy-backed repository for the compliance analysis core.

Implements the same collaborator interfaces as the in-memory `DataStore`,
reading ORM rows and handing pydantic schemas to the services.
"""

from __future__ import annotations

from collections.abc import Generator, Iterable
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine, func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from compliance_core import models
from compliance_core.enums import (
    AssessmentStatus,
    ContactStatus,
    ContactType,
    GapCategory,
    SubscriptionPlan,
    VendorStatus,
)
from compliance_core.errors import (
    AssessmentAlreadyCompleted,
    AssessmentNotFound,
    InsufficientCredits,
    StorageError,
)
from compliance_core.models.base import Base, utcnow
from compliance_core.schemas.assessment import (
    Assessment,
    CategoryAnalysis,
    Gap,
    Risk,
    StrategyMatrixRow,
)
from compliance_core.schemas.vendor import Solution, Vendor, VendorContact


def _aware(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo on the way back; all stored times are UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _gap_from_row(row: models.Gap) -> Gap:
    return Gap(
        id=row.id,
        assessment_id=row.assessment_id,
        category=row.category,
        title=row.title,
        description=row.description or "",
        severity=row.severity,
        priority=row.priority,
        estimated_cost=row.estimated_cost,
        estimated_effort=row.estimated_effort,
    )


def _risk_from_row(row: models.Risk) -> Risk:
    return Risk(
        id=row.id,
        assessment_id=row.assessment_id,
        category=row.category,
        title=row.title,
        description=row.description or "",
        likelihood=row.likelihood,
        impact=row.impact,
        risk_level=row.risk_level,
        mitigation_strategy=row.mitigation_strategy,
    )


def _assessment_from_row(row: models.Assessment, include_children: bool = True) -> Assessment:
    risk_analysis = None
    if row.ai_risk_analysis is not None:
        risk_analysis = {k: CategoryAnalysis.model_validate(v) for k, v in row.ai_risk_analysis.items()}
    strategy_matrix = None
    if row.ai_strategy_matrix is not None:
        strategy_matrix = [StrategyMatrixRow.model_validate(r) for r in row.ai_strategy_matrix]

    return Assessment(
        id=row.id,
        organization_id=row.organization_id,
        user_id=row.user_id,
        template_id=row.template_id,
        status=row.status,
        responses=row.responses or {},
        risk_score=row.risk_score,
        credits_used=row.credits_used or 0,
        ai_risk_analysis=risk_analysis,
        ai_strategy_matrix=strategy_matrix,
        ai_generated_at=_aware(row.ai_generated_at),
        completed_at=_aware(row.completed_at),
        gaps=[_gap_from_row(g) for g in row.gaps] if include_children else [],
        risks=[_risk_from_row(r) for r in row.risks] if include_children else [],
    )


def _vendor_from_row(row: models.Vendor) -> Vendor:
    return Vendor(
        id=row.id,
        company_name=row.company_name,
        categories=row.categories or [],
        status=row.status,
        featured=bool(row.featured),
        verified=bool(row.verified),
        rating=row.rating,
        review_count=row.review_count or 0,
    )


def _solution_from_row(row: models.Solution) -> Solution:
    return Solution(
        id=row.id,
        vendor_id=row.vendor_id,
        name=row.name,
        category=row.category,
        pricing_model=row.pricing_model,
        starting_price=row.starting_price,
        is_active=bool(row.is_active),
    )


def _contact_from_row(row: models.VendorContact) -> VendorContact:
    return VendorContact(
        id=row.id,
        vendor_id=row.vendor_id,
        user_id=row.user_id,
        organization_id=row.organization_id,
        type=row.type,
        message=row.message,
        status=row.status,
        created_at=_aware(row.created_at),
    )


class SqlStore:
    """Repository over a SQLAlchemy engine. Every call runs in its own session."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    @classmethod
    def from_url(cls, database_url: str, **engine_kwargs) -> SqlStore:
        if database_url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        return cls(create_engine(database_url, pool_pre_ping=True, **engine_kwargs))

    def create_all(self) -> None:
        """Create tables directly. Deployed databases are migrated with Alembic instead."""
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not create schema: {exc}") from exc

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Session scope that commits on success and maps driver errors to StorageError."""
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError(f"Database operation failed: {exc}") from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def ping(self) -> None:
        with self.session() as db:
            db.execute(select(1))

    def add_all(self, rows: Iterable[Base]) -> None:
        """Insert ORM rows; used for seeding."""
        with self.session() as db:
            db.add_all(list(rows))

    # AssessmentRepository

    def get_assessment_with_gaps_and_risks(self, assessment_id: str) -> Assessment | None:
        with self.session() as db:
            row = db.scalars(
                select(models.Assessment)
                .where(models.Assessment.id == assessment_id)
                .options(selectinload(models.Assessment.gaps), selectinload(models.Assessment.risks))
            ).first()
            return _assessment_from_row(row) if row is not None else None

    def get_gap(self, gap_id: str) -> Gap | None:
        with self.session() as db:
            row = db.get(models.Gap, gap_id)
            return _gap_from_row(row) if row is not None else None

    def get_assessment_organization(self, assessment_id: str) -> str | None:
        with self.session() as db:
            return db.scalar(
                select(models.Assessment.organization_id).where(models.Assessment.id == assessment_id)
            )

    def save_analysis(
        self,
        assessment_id: str,
        risk_analysis: dict[str, CategoryAnalysis],
        strategy_matrix: list[StrategyMatrixRow],
        generated_at: datetime,
        expected_generated_at: datetime | None,
    ) -> bool:
        stmt = update(models.Assessment).where(models.Assessment.id == assessment_id)
        if expected_generated_at is None:
            stmt = stmt.where(models.Assessment.ai_generated_at.is_(None))
        else:
            stmt = stmt.where(models.Assessment.ai_generated_at == expected_generated_at)
        stmt = stmt.values(
            ai_risk_analysis={k: v.model_dump(mode="json") for k, v in risk_analysis.items()},
            ai_strategy_matrix=[row.model_dump(mode="json") for row in strategy_matrix],
            ai_generated_at=generated_at,
            updated_at=utcnow(),
        ).execution_options(synchronize_session=False)

        with self.session() as db:
            result = db.execute(stmt)
            return result.rowcount == 1

    def complete_with_debit(
        self,
        assessment_id: str,
        organization_id: str,
        amount: int,
        completed_at: datetime,
        reason: str,
    ) -> tuple[Assessment, int]:
        completed = (
            update(models.Assessment)
            .where(
                models.Assessment.id == assessment_id,
                models.Assessment.status != AssessmentStatus.COMPLETED.value,
            )
            .values(
                status=AssessmentStatus.COMPLETED.value,
                completed_at=completed_at,
                credits_used=func.coalesce(models.Assessment.credits_used, 0) + amount,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        # Raising inside the session scope rolls back the status change.
        with self.session() as db:
            if db.execute(completed).rowcount != 1:
                if db.get(models.Assessment, assessment_id) is None:
                    raise AssessmentNotFound(f"Assessment {assessment_id} not found")
                raise AssessmentAlreadyCompleted("Assessment is already completed")

            remaining = self._debit_if_sufficient(db, organization_id, amount)
            if remaining is None:
                raise InsufficientCredits(
                    f"Insufficient credits: {amount} required, {self._balance(db, organization_id)} available"
                )

            row = db.scalars(
                select(models.Assessment)
                .where(models.Assessment.id == assessment_id)
                .options(selectinload(models.Assessment.gaps), selectinload(models.Assessment.risks))
            ).one()
            return _assessment_from_row(row), remaining

    # VendorRepository

    def list_approved_vendors(self) -> list[Vendor]:
        with self.session() as db:
            rows = db.scalars(
                select(models.Vendor)
                .where(models.Vendor.status == VendorStatus.APPROVED.value)
                .order_by(models.Vendor.id)
            ).all()
            return [_vendor_from_row(r) for r in rows]

    def list_approved_vendors_by_category(self, category: GapCategory) -> list[Vendor]:
        # JSON containment differs per dialect; filter categories in Python.
        return [v for v in self.list_approved_vendors() if category in v.categories]

    def get_vendor(self, vendor_id: str) -> Vendor | None:
        with self.session() as db:
            row = db.get(models.Vendor, vendor_id)
            return _vendor_from_row(row) if row is not None else None

    def list_solutions(self, vendor_id: str | None = None) -> list[Solution]:
        stmt = select(models.Solution).order_by(models.Solution.id)
        if vendor_id is not None:
            stmt = stmt.where(models.Solution.vendor_id == vendor_id)
        with self.session() as db:
            return [_solution_from_row(r) for r in db.scalars(stmt).all()]

    def create_vendor_contact(
        self,
        vendor_id: str,
        user_id: str,
        organization_id: str,
        contact_type: ContactType,
        message: str,
    ) -> VendorContact:
        with self.session() as db:
            row = models.VendorContact(
                vendor_id=vendor_id,
                user_id=user_id,
                organization_id=organization_id,
                type=contact_type.value,
                message=message,
                status=ContactStatus.PENDING.value,
            )
            db.add(row)
            db.flush()
            return _contact_from_row(row)

    # SubscriptionLookup / CreditsService

    def _get_subscription(self, db: Session, organization_id: str) -> models.Subscription | None:
        return db.scalars(
            select(models.Subscription).where(models.Subscription.organization_id == organization_id)
        ).first()

    def _balance(self, db: Session, organization_id: str) -> int:
        balance = db.scalar(
            select(models.Subscription.credits_balance).where(models.Subscription.organization_id == organization_id)
        )
        return balance or 0

    def _debit_if_sufficient(self, db: Session, organization_id: str, amount: int) -> int | None:
        result = db.execute(
            update(models.Subscription)
            .where(
                models.Subscription.organization_id == organization_id,
                models.Subscription.credits_balance >= amount,
            )
            .values(
                credits_balance=models.Subscription.credits_balance - amount,
                credits_used=func.coalesce(models.Subscription.credits_used, 0) + amount,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        balance = self._balance(db, organization_id)
        if result.rowcount != 1 and balance < amount:
            return None
        return balance

    def get_plan(self, organization_id: str) -> SubscriptionPlan:
        with self.session() as db:
            row = self._get_subscription(db, organization_id)
            return SubscriptionPlan(row.plan) if row is not None else SubscriptionPlan.FREE

    def get_balance(self, organization_id: str) -> int:
        with self.session() as db:
            return self._balance(db, organization_id)

    def debit_if_sufficient(self, organization_id: str, amount: int, reason: str) -> int | None:
        with self.session() as db:
            return self._debit_if_sufficient(db, organization_id, amount)
