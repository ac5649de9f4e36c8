"""Shared test fixtures for the compliance analysis core test suite."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from compliance_core.app import create_app
from compliance_core.config import Settings
from compliance_core.enums import (
    AssessmentStatus,
    GapCategory,
    PricingModel,
    Severity,
    SubscriptionPlan,
    VendorStatus,
)
from compliance_core.schemas.assessment import Assessment
from compliance_core.schemas.billing import SubscriptionRecord
from compliance_core.schemas.vendor import Solution
from compliance_core.store import data_store
from factories import FREE_ORG_ID, ORG_ID, USER_ID, make_gap, make_vendor


def _test_settings() -> Settings:
    """Return settings suitable for testing."""
    return Settings(
        environment="development",
        debug=True,
        log_format="console",
        rate_limit_default="1000/minute",
        allowed_origins="http://localhost:3000,http://localhost:5173",
        storage_backend="memory",
    )


@pytest.fixture
def settings():
    """Test settings."""
    return _test_settings()


@pytest.fixture
def app(settings):
    """Create a fresh FastAPI app backed by the global in-memory store."""
    return create_app(settings, repository=data_store)


@pytest.fixture
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_store():
    """Reset the global data store before each test."""
    data_store.reset()
    yield
    data_store.reset()


@pytest.fixture
def sample_assessment():
    """A completed assessment with gaps in KYC/AML and data protection."""
    assessment = Assessment(
        id="assess-1",
        organization_id=ORG_ID,
        user_id=USER_ID,
        template_id="template-aml",
        status=AssessmentStatus.COMPLETED,
        gaps=[
            make_gap("gap-kyc-1", GapCategory.KYC_AML, Severity.CRITICAL, title="No customer due diligence"),
            make_gap("gap-kyc-2", GapCategory.KYC_AML, Severity.HIGH, title="PEP screening incomplete"),
            make_gap("gap-dp-1", GapCategory.DATA_PROTECTION, Severity.HIGH, title="No data retention policy"),
        ],
    )
    data_store.add_assessment(assessment)
    return assessment


@pytest.fixture
def empty_assessment():
    """A completed assessment that produced no gaps."""
    assessment = Assessment(
        id="assess-empty",
        organization_id=ORG_ID,
        user_id=USER_ID,
        template_id="template-aml",
        status=AssessmentStatus.COMPLETED,
    )
    data_store.add_assessment(assessment)
    return assessment


@pytest.fixture
def draft_assessment():
    """An in-progress assessment waiting to be completed."""
    assessment = Assessment(
        id="assess-draft",
        organization_id=ORG_ID,
        user_id=USER_ID,
        template_id="template-aml",
        status=AssessmentStatus.IN_PROGRESS,
    )
    data_store.add_assessment(assessment)
    return assessment


@pytest.fixture
def sample_vendors():
    """Approved and unapproved vendors with their solutions."""
    vendors = [
        make_vendor(
            "vendor-a",
            [GapCategory.KYC_AML, GapCategory.SANCTIONS_SCREENING],
            company_name="Alpha KYC",
            verified=True,
            featured=True,
            rating=4.8,
            review_count=120,
        ),
        make_vendor(
            "vendor-b",
            [GapCategory.KYC_AML],
            company_name="Beta Compliance",
            verified=True,
            rating=4.2,
            review_count=35,
        ),
        make_vendor(
            "vendor-c",
            [GapCategory.KYC_AML, GapCategory.DATA_PROTECTION, GapCategory.DATA_GOVERNANCE],
            company_name="Cobalt Data",
            rating=None,
            review_count=4,
        ),
        make_vendor(
            "vendor-d",
            [GapCategory.DATA_PROTECTION],
            company_name="Delta Privacy",
            featured=True,
            rating=0.0,
            review_count=12,
        ),
        make_vendor(
            "vendor-pending",
            [GapCategory.KYC_AML],
            company_name="Pending Vendor",
            status=VendorStatus.PENDING,
            verified=True,
            rating=5.0,
        ),
    ]
    for vendor in vendors:
        data_store.add_vendor(vendor)

    solutions = [
        Solution(id="sol-a-kyc", vendor_id="vendor-a", name="Alpha Onboard", category=GapCategory.KYC_AML,
                 pricing_model=PricingModel.SUBSCRIPTION, starting_price=1200.0),
        Solution(id="sol-a-kyc-lite", vendor_id="vendor-a", name="Alpha Lite", category=GapCategory.KYC_AML,
                 pricing_model=PricingModel.SUBSCRIPTION, starting_price=400.0),
        Solution(id="sol-a-old", vendor_id="vendor-a", name="Alpha Legacy", category=GapCategory.KYC_AML,
                 pricing_model=PricingModel.LICENSE, starting_price=50.0, is_active=False),
        Solution(id="sol-a-sanctions", vendor_id="vendor-a", name="Alpha Screen",
                 category=GapCategory.SANCTIONS_SCREENING, pricing_model=PricingModel.USAGE, starting_price=300.0),
        Solution(id="sol-c-dp", vendor_id="vendor-c", name="Cobalt Vault", category=GapCategory.DATA_PROTECTION,
                 pricing_model=PricingModel.CUSTOM, starting_price=None),
        Solution(id="sol-pending", vendor_id="vendor-pending", name="Pending Suite", category=GapCategory.KYC_AML,
                 pricing_model=PricingModel.SUBSCRIPTION, starting_price=10.0),
    ]
    for solution in solutions:
        data_store.add_solution(solution)
    return vendors


@pytest.fixture
def subscriptions():
    """A premium organization with credits and a free organization without."""
    records = [
        SubscriptionRecord(organization_id=ORG_ID, plan=SubscriptionPlan.PREMIUM, credits_balance=120),
        SubscriptionRecord(organization_id=FREE_ORG_ID, plan=SubscriptionPlan.FREE, credits_balance=10),
    ]
    for record in records:
        data_store.add_subscription(record)
    return records


@pytest.fixture
def requester_headers():
    """Identity headers for a user of the premium organization."""
    return {"X-User-Id": USER_ID, "X-Organization-Id": ORG_ID}
