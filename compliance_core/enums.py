"""Closed vocabularies shared by the analysis engine, the matcher and the contact gate."""

from __future__ import annotations

from enum import Enum


class AssessmentStatus(str, Enum):
    DRAFT = "DRAFT"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class GapCategory(str, Enum):
    """Compliance domains. Vendors declare the same values as their categories."""

    KYC_AML = "KYC_AML"
    TRANSACTION_MONITORING = "TRANSACTION_MONITORING"
    SANCTIONS_SCREENING = "SANCTIONS_SCREENING"
    TRADE_SURVEILLANCE = "TRADE_SURVEILLANCE"
    RISK_ASSESSMENT = "RISK_ASSESSMENT"
    COMPLIANCE_TRAINING = "COMPLIANCE_TRAINING"
    REGULATORY_REPORTING = "REGULATORY_REPORTING"
    DATA_GOVERNANCE = "DATA_GOVERNANCE"
    DATA_PROTECTION = "DATA_PROTECTION"


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Priority(str, Enum):
    IMMEDIATE = "IMMEDIATE"
    SHORT_TERM = "SHORT_TERM"
    MEDIUM_TERM = "MEDIUM_TERM"
    LONG_TERM = "LONG_TERM"


class CostRange(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class EffortRange(str, Enum):
    DAYS = "DAYS"
    WEEKS = "WEEKS"
    MONTHS = "MONTHS"
    QUARTERS = "QUARTERS"


class RiskCategory(str, Enum):
    REGULATORY = "REGULATORY"
    OPERATIONAL = "OPERATIONAL"
    GEOGRAPHIC = "GEOGRAPHIC"
    TRANSACTION = "TRANSACTION"
    GOVERNANCE = "GOVERNANCE"
    REPUTATIONAL = "REPUTATIONAL"


class Likelihood(str, Enum):
    RARE = "RARE"
    UNLIKELY = "UNLIKELY"
    POSSIBLE = "POSSIBLE"
    LIKELY = "LIKELY"
    CERTAIN = "CERTAIN"


class Impact(str, Enum):
    NEGLIGIBLE = "NEGLIGIBLE"
    MINOR = "MINOR"
    MODERATE = "MODERATE"
    MAJOR = "MAJOR"
    CATASTROPHIC = "CATASTROPHIC"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class VendorStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PricingModel(str, Enum):
    SUBSCRIPTION = "SUBSCRIPTION"
    LICENSE = "LICENSE"
    USAGE = "USAGE"
    CUSTOM = "CUSTOM"


class ContactType(str, Enum):
    DEMO_REQUEST = "DEMO_REQUEST"
    INFO_REQUEST = "INFO_REQUEST"
    RFP = "RFP"
    PRICING = "PRICING"
    GENERAL = "GENERAL"


class ContactStatus(str, Enum):
    PENDING = "PENDING"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class SubscriptionPlan(str, Enum):
    FREE = "FREE"
    PREMIUM = "PREMIUM"
    ENTERPRISE = "ENTERPRISE"
