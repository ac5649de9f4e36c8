"""In-memory data store for the compliance analysis core.

Provides a simple data store used during development and testing.
In production, this would be backed by PostgreSQL through `SqlStore`.
"""

from __future__ import annotations

import threading
import uuid
from datetime import datetime

from compliance_core.enums import (
    AssessmentStatus,
    ContactStatus,
    ContactType,
    GapCategory,
    SubscriptionPlan,
    VendorStatus,
)
from compliance_core.errors import AssessmentAlreadyCompleted, AssessmentNotFound, InsufficientCredits
from compliance_core.models.base import utcnow
from compliance_core.schemas.assessment import Assessment, CategoryAnalysis, Gap, Risk, StrategyMatrixRow
from compliance_core.schemas.billing import SubscriptionRecord
from compliance_core.schemas.vendor import Solution, Vendor, VendorContact


class DataStore:
    """Thread-safe in-memory data store for development and testing."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.assessments: dict[str, Assessment] = {}
        self.gaps: dict[str, list[Gap]] = {}  # assessment_id -> list
        self.risks: dict[str, list[Risk]] = {}  # assessment_id -> list
        self.vendors: dict[str, Vendor] = {}
        self.solutions: dict[str, list[Solution]] = {}  # vendor_id -> list
        self.vendor_contacts: list[VendorContact] = []
        self.subscriptions: dict[str, SubscriptionRecord] = {}  # organization_id -> record

    def reset(self) -> None:
        """Clear all data: used in tests."""
        self.__init__()

    def ping(self) -> None:
        """Readiness probe; the in-memory store is always reachable."""

    # Seeding helpers

    def add_assessment(self, assessment: Assessment) -> None:
        """Add or replace an assessment. Embedded gaps and risks are stored separately."""
        for gap in assessment.gaps:
            self.add_gap(gap)
        for risk in assessment.risks:
            self.add_risk(risk)
        self.assessments[assessment.id] = assessment.model_copy(update={"gaps": [], "risks": []})

    def add_gap(self, gap: Gap) -> None:
        self.gaps.setdefault(gap.assessment_id, []).append(gap)

    def add_risk(self, risk: Risk) -> None:
        self.risks.setdefault(risk.assessment_id, []).append(risk)

    def add_vendor(self, vendor: Vendor) -> None:
        self.vendors[vendor.id] = vendor

    def add_solution(self, solution: Solution) -> None:
        self.solutions.setdefault(solution.vendor_id, []).append(solution)

    def add_subscription(self, subscription: SubscriptionRecord) -> None:
        self.subscriptions[subscription.organization_id] = subscription

    # AssessmentRepository

    def get_assessment_with_gaps_and_risks(self, assessment_id: str) -> Assessment | None:
        assessment = self.assessments.get(assessment_id)
        if assessment is None:
            return None
        return assessment.model_copy(
            update={
                "gaps": list(self.gaps.get(assessment_id, [])),
                "risks": list(self.risks.get(assessment_id, [])),
            }
        )

    def get_assessment_organization(self, assessment_id: str) -> str | None:
        assessment = self.assessments.get(assessment_id)
        return assessment.organization_id if assessment else None

    def get_gap(self, gap_id: str) -> Gap | None:
        for assessment_gaps in self.gaps.values():
            for gap in assessment_gaps:
                if gap.id == gap_id:
                    return gap
        return None

    def save_analysis(
        self,
        assessment_id: str,
        risk_analysis: dict[str, CategoryAnalysis],
        strategy_matrix: list[StrategyMatrixRow],
        generated_at: datetime,
        expected_generated_at: datetime | None,
    ) -> bool:
        with self._lock:
            current = self.assessments.get(assessment_id)
            if current is None or current.ai_generated_at != expected_generated_at:
                return False
            self.assessments[assessment_id] = current.model_copy(
                update={
                    "ai_risk_analysis": dict(risk_analysis),
                    "ai_strategy_matrix": list(strategy_matrix),
                    "ai_generated_at": generated_at,
                }
            )
            return True

    def complete_with_debit(
        self,
        assessment_id: str,
        organization_id: str,
        amount: int,
        completed_at: datetime,
        reason: str,
    ) -> tuple[Assessment, int]:
        with self._lock:
            current = self.assessments.get(assessment_id)
            if current is None:
                raise AssessmentNotFound(f"Assessment {assessment_id} not found")
            if current.status == AssessmentStatus.COMPLETED:
                raise AssessmentAlreadyCompleted("Assessment is already completed")
            remaining = self._debit_locked(organization_id, amount)
            if remaining is None:
                raise InsufficientCredits(
                    f"Insufficient credits: {amount} required, {self.get_balance(organization_id)} available"
                )
            updated = current.model_copy(
                update={
                    "status": AssessmentStatus.COMPLETED,
                    "completed_at": completed_at,
                    "credits_used": current.credits_used + amount,
                }
            )
            self.assessments[assessment_id] = updated
            return updated, remaining

    # VendorRepository

    def list_approved_vendors(self) -> list[Vendor]:
        return [v for v in self.vendors.values() if v.status == VendorStatus.APPROVED]

    def list_approved_vendors_by_category(self, category: GapCategory) -> list[Vendor]:
        return [v for v in self.list_approved_vendors() if category in v.categories]

    def get_vendor(self, vendor_id: str) -> Vendor | None:
        return self.vendors.get(vendor_id)

    def list_solutions(self, vendor_id: str | None = None) -> list[Solution]:
        if vendor_id is not None:
            return list(self.solutions.get(vendor_id, []))
        return [s for vendor_solutions in self.solutions.values() for s in vendor_solutions]

    def create_vendor_contact(
        self,
        vendor_id: str,
        user_id: str,
        organization_id: str,
        contact_type: ContactType,
        message: str,
    ) -> VendorContact:
        contact = VendorContact(
            id=str(uuid.uuid4()),
            vendor_id=vendor_id,
            user_id=user_id,
            organization_id=organization_id,
            type=contact_type,
            message=message,
            status=ContactStatus.PENDING,
            created_at=utcnow(),
        )
        self.vendor_contacts.append(contact)
        return contact

    # SubscriptionLookup / CreditsService

    def get_plan(self, organization_id: str) -> SubscriptionPlan:
        record = self.subscriptions.get(organization_id)
        return record.plan if record else SubscriptionPlan.FREE

    def get_balance(self, organization_id: str) -> int:
        record = self.subscriptions.get(organization_id)
        return record.credits_balance if record else 0

    def debit_if_sufficient(self, organization_id: str, amount: int, reason: str) -> int | None:
        with self._lock:
            return self._debit_locked(organization_id, amount)

    def _debit_locked(self, organization_id: str, amount: int) -> int | None:
        # Caller holds self._lock.
        balance = self.get_balance(organization_id)
        if balance < amount:
            return None
        record = self.subscriptions.get(organization_id)
        if record is None:
            return balance
        updated = record.model_copy(
            update={
                "credits_balance": record.credits_balance - amount,
                "credits_used": record.credits_used + amount,
            }
        )
        self.subscriptions[organization_id] = updated
        return updated.credits_balance


# Global singleton: replaced in tests
data_store = DataStore()
