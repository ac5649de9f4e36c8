"""Contact gate: validates vendor contact requests and enforces the RFP plan gate."""

from __future__ import annotations

import structlog

from compliance_core.enums import ContactType, SubscriptionPlan, VendorStatus
from compliance_core.errors import SubscriptionRequired, ValidationError, VendorNotFound
from compliance_core.interfaces import SubscriptionLookup, VendorRepository
from compliance_core.schemas.vendor import ContactRequest, Requester, VendorContact

logger = structlog.get_logger()

# Contact types that require a paid plan
PAID_CONTACT_TYPES = {ContactType.RFP}


def parse_contact_type(value: str) -> ContactType:
    try:
        return ContactType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in ContactType)
        raise ValidationError(
            f"Invalid contact type '{value}'. Must be one of: {allowed}",
            code="INVALID_CONTACT_TYPE",
        ) from None


class ContactGate:
    """Creates vendor contacts after validation and subscription checks."""

    def __init__(self, vendors: VendorRepository, subscriptions: SubscriptionLookup) -> None:
        self._vendors = vendors
        self._subscriptions = subscriptions

    def contact_vendor(self, vendor_id: str, payload: ContactRequest, requester: Requester) -> VendorContact:
        """Validate and record a contact request.

        Raises:
            ValidationError: Unknown contact type or blank message.
            VendorNotFound: Vendor missing or not approved.
            SubscriptionRequired: RFP requested on the free plan.
        """
        contact_type = parse_contact_type(payload.type)
        message = payload.message.strip()
        if not message:
            raise ValidationError("Message is required", code="EMPTY_MESSAGE")

        vendor = self._vendors.get_vendor(vendor_id)
        if vendor is None or vendor.status != VendorStatus.APPROVED:
            raise VendorNotFound(f"Vendor {vendor_id} not found")

        if contact_type in PAID_CONTACT_TYPES:
            plan = requester.subscription_plan or self._subscriptions.get_plan(requester.organization_id)
            if plan == SubscriptionPlan.FREE:
                logger.info(
                    "vendor_contact_blocked",
                    vendor_id=vendor_id,
                    organization_id=requester.organization_id,
                    contact_type=contact_type.value,
                )
                raise SubscriptionRequired("RFP requests require a Premium or Enterprise subscription")

        contact = self._vendors.create_vendor_contact(
            vendor_id=vendor_id,
            user_id=requester.user_id,
            organization_id=requester.organization_id,
            contact_type=contact_type,
            message=message,
        )
        logger.info(
            "vendor_contact_created",
            contact_id=contact.id,
            vendor_id=vendor_id,
            contact_type=contact_type.value,
        )
        return contact


def contact_vendor(
    vendor_id: str,
    payload: ContactRequest,
    requester: Requester,
    vendors: VendorRepository,
    subscriptions: SubscriptionLookup,
) -> VendorContact:
    """Functional entry point over ContactGate."""
    return ContactGate(vendors, subscriptions).contact_vendor(vendor_id, payload, requester)
