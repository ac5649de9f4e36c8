"""Database models for the compliance analysis core."""

from compliance_core.models.base import Base
from compliance_core.models.assessment import Assessment, Gap, Risk
from compliance_core.models.subscription import Subscription
from compliance_core.models.vendor import Solution, Vendor, VendorContact

__all__ = [
    "Base",
    "Assessment",
    "Gap",
    "Risk",
    "Subscription",
    "Solution",
    "Vendor",
    "VendorContact",
]
