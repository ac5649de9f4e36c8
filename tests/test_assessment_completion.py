"""Tests for the assessment completion gate."""

from __future__ import annotations

import threading
import time

import pytest

from compliance_core.enums import AssessmentStatus
from compliance_core.errors import (
    AccessDenied,
    AssessmentAlreadyCompleted,
    AssessmentNotFound,
    InsufficientCredits,
)
from compliance_core.schemas.assessment import Assessment
from compliance_core.schemas.billing import SubscriptionRecord
from compliance_core.schemas.vendor import Requester
from compliance_core.services.assessment_completion import AssessmentCompletionGate
from compliance_core.store import DataStore, data_store
from factories import OTHER_ORG_ID, ORG_ID, USER_ID


def _gate(cost: int = 50) -> AssessmentCompletionGate:
    return AssessmentCompletionGate(data_store, credits_per_assessment=cost)


def _requester(org: str = ORG_ID) -> Requester:
    return Requester(user_id=USER_ID, organization_id=org)


class TestCompleteAssessment:
    """Lifecycle and credit checks."""

    def test_completes_and_debits(self, draft_assessment, subscriptions):
        completed = _gate().complete_assessment("assess-draft", _requester())
        assert completed.status == AssessmentStatus.COMPLETED
        assert completed.completed_at is not None
        assert completed.credits_used == 50
        assert data_store.get_balance(ORG_ID) == 70
        assert data_store.subscriptions[ORG_ID].credits_used == 50

    def test_exact_balance_is_enough(self, draft_assessment):
        data_store.add_subscription(SubscriptionRecord(organization_id=ORG_ID, credits_balance=50))
        _gate().complete_assessment("assess-draft", _requester())
        assert data_store.get_balance(ORG_ID) == 0

    def test_insufficient_credits(self, draft_assessment):
        data_store.add_subscription(SubscriptionRecord(organization_id=ORG_ID, credits_balance=49))
        with pytest.raises(InsufficientCredits) as exc_info:
            _gate().complete_assessment("assess-draft", _requester())
        assert exc_info.value.status_code == 402
        assert data_store.assessments["assess-draft"].status == AssessmentStatus.IN_PROGRESS
        assert data_store.get_balance(ORG_ID) == 49

    def test_no_subscription_means_no_credits(self, draft_assessment):
        with pytest.raises(InsufficientCredits):
            _gate().complete_assessment("assess-draft", _requester())

    def test_already_completed(self, sample_assessment, subscriptions):
        with pytest.raises(AssessmentAlreadyCompleted) as exc_info:
            _gate().complete_assessment("assess-1", _requester())
        assert exc_info.value.status_code == 409
        assert data_store.get_balance(ORG_ID) == 120

    def test_completing_twice(self, draft_assessment, subscriptions):
        _gate().complete_assessment("assess-draft", _requester())
        with pytest.raises(AssessmentAlreadyCompleted):
            _gate().complete_assessment("assess-draft", _requester())
        assert data_store.get_balance(ORG_ID) == 70

    def test_unknown_assessment(self, subscriptions):
        with pytest.raises(AssessmentNotFound):
            _gate().complete_assessment("missing", _requester())

    def test_other_organization(self, draft_assessment, subscriptions):
        with pytest.raises(AccessDenied):
            _gate().complete_assessment("assess-draft", _requester(OTHER_ORG_ID))

    def test_configurable_cost(self, draft_assessment, subscriptions):
        _gate(cost=100).complete_assessment("assess-draft", _requester())
        assert data_store.get_balance(ORG_ID) == 20


class TestDebitIfSufficient:
    """The conditional debit never takes the balance below zero."""

    def test_debits_when_covered(self, subscriptions):
        assert data_store.debit_if_sufficient(ORG_ID, 50, reason="test") == 70
        assert data_store.subscriptions[ORG_ID].credits_used == 50

    def test_refuses_when_short(self, subscriptions):
        assert data_store.debit_if_sufficient(ORG_ID, 121, reason="test") is None
        assert data_store.get_balance(ORG_ID) == 120
        assert data_store.subscriptions[ORG_ID].credits_used == 0

    def test_unknown_organization(self):
        assert data_store.debit_if_sufficient("org-unknown", 1, reason="test") is None
        assert data_store.debit_if_sufficient("org-unknown", 0, reason="test") == 0


class _SlowLookupStore(DataStore):
    """Holds every caller between the lookup and the write."""

    def get_assessment_with_gaps_and_risks(self, assessment_id: str) -> Assessment | None:
        assessment = super().get_assessment_with_gaps_and_risks(assessment_id)
        time.sleep(0.05)
        return assessment


class TestConcurrentCompletion:
    """Racing completions debit at most once and never overdraw."""

    def _store(self, *assessment_ids: str) -> _SlowLookupStore:
        store = _SlowLookupStore()
        for assessment_id in assessment_ids:
            store.add_assessment(
                Assessment(
                    id=assessment_id,
                    organization_id=ORG_ID,
                    user_id=USER_ID,
                    template_id="template-aml",
                    status=AssessmentStatus.IN_PROGRESS,
                )
            )
        store.add_subscription(SubscriptionRecord(organization_id=ORG_ID, credits_balance=60))
        return store

    def _race(self, store: DataStore, assessment_ids: list[str]):
        gate = AssessmentCompletionGate(store, credits_per_assessment=50)
        completed, errors = [], []
        barrier = threading.Barrier(len(assessment_ids))

        def _run(assessment_id: str):
            barrier.wait()
            try:
                completed.append(gate.complete_assessment(assessment_id, _requester()))
            except (AssessmentAlreadyCompleted, InsufficientCredits) as exc:
                errors.append(exc)

        threads = [threading.Thread(target=_run, args=(a,)) for a in assessment_ids]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return completed, errors

    def test_same_assessment_is_charged_once(self):
        store = self._store("a1")
        completed, errors = self._race(store, ["a1", "a1"])

        assert len(completed) == 1
        assert [type(e) for e in errors] == [AssessmentAlreadyCompleted]
        assert store.get_balance(ORG_ID) == 10
        assert store.subscriptions[ORG_ID].credits_used == 50
        assert store.assessments["a1"].credits_used == 50

    def test_balance_covers_only_one_assessment(self):
        store = self._store("a1", "a2")
        completed, errors = self._race(store, ["a1", "a2"])

        assert len(completed) == 1
        assert [type(e) for e in errors] == [InsufficientCredits]
        assert store.get_balance(ORG_ID) == 10
        statuses = sorted(store.assessments[a].status.value for a in ("a1", "a2"))
        assert statuses == ["COMPLETED", "IN_PROGRESS"]
