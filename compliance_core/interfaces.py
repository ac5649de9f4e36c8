"""Collaborator interfaces the core depends on.

Services receive these through their constructors; the in-memory
`DataStore` and the SQLAlchemy `SqlStore` both satisfy all of them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from compliance_core.enums import ContactType, GapCategory, SubscriptionPlan
from compliance_core.schemas.assessment import Assessment, CategoryAnalysis, Gap, StrategyMatrixRow
from compliance_core.schemas.vendor import Solution, Vendor, VendorContact


class AssessmentRepository(Protocol):
    def get_assessment_with_gaps_and_risks(self, assessment_id: str) -> Assessment | None:
        """Return the assessment with `gaps` and `risks` populated, or None."""
        ...

    def get_gap(self, gap_id: str) -> Gap | None:
        ...

    def get_assessment_organization(self, assessment_id: str) -> str | None:
        ...

    def save_analysis(
        self,
        assessment_id: str,
        risk_analysis: dict[str, CategoryAnalysis],
        strategy_matrix: list[StrategyMatrixRow],
        generated_at: datetime,
        expected_generated_at: datetime | None,
    ) -> bool:
        """Conditionally write the analysis fields.

        The write only happens if the stored `ai_generated_at` still equals
        `expected_generated_at`. Returns False when another writer got there first.
        """
        ...



class VendorRepository(Protocol):
    def list_approved_vendors_by_category(self, category: GapCategory) -> list[Vendor]:
        ...

    def list_approved_vendors(self) -> list[Vendor]:
        ...

    def get_vendor(self, vendor_id: str) -> Vendor | None:
        ...

    def list_solutions(self, vendor_id: str | None = None) -> list[Solution]:
        ...

    def create_vendor_contact(
        self,
        vendor_id: str,
        user_id: str,
        organization_id: str,
        contact_type: ContactType,
        message: str,
    ) -> VendorContact:
        ...


class SubscriptionLookup(Protocol):
    def get_plan(self, organization_id: str) -> SubscriptionPlan:
        ...


class CreditsService(Protocol):
    def get_balance(self, organization_id: str) -> int:
        ...

    def debit_if_sufficient(self, organization_id: str, amount: int, reason: str) -> int | None:
        """Remove credits only if the balance covers `amount`.

        Returns the new balance, or None when the balance is too low.
        """
        ...


class CompletionStore(AssessmentRepository, CreditsService, Protocol):
    def complete_with_debit(
        self,
        assessment_id: str,
        organization_id: str,
        amount: int,
        completed_at: datetime,
        reason: str,
    ) -> tuple[Assessment, int]:
        """Debit `amount` and mark the assessment COMPLETED as one atomic step.

        Returns the completed assessment and the remaining balance. Nothing is
        written when it raises.

        Raises:
            AssessmentNotFound: Unknown assessment.
            AssessmentAlreadyCompleted: Status is already COMPLETED.
            InsufficientCredits: Balance below `amount`.
        """
        ...
