"""Customer resolver - phone number to customer identity."""

import logging

from visitman.exceptions import ResolutionConflict, UniqueConstraintViolation
from visitman.models import Customer
from visitman.signals import customer_created
from visitman.utils import normalize_phone

logger = logging.getLogger(__name__)


def resolve_customer(business_id, raw_phone: str, store=None) -> tuple[Customer, bool]:
    """
    Find or create the customer for a phone within a business.

    Lookups never mutate. When a concurrent caller inserts the same phone
    first, the unique violation is treated as "already exists" and the
    lookup is retried exactly once.

    The business must exist: inserting for an unknown business fails with
    BUSINESS_NOT_FOUND rather than being mistaken for a concurrent insert.

    Returns:
        (customer, created)

    Raises:
        InvalidPhoneFormat: Phone does not normalize to 10 digits
        VisitmanError: BUSINESS_NOT_FOUND
        ResolutionConflict: Insert collided and the retry found nothing
        StoreUnavailable: Store failure
    """
    if store is None:
        from visitman.store import get_store

        store = get_store()

    phone = normalize_phone(raw_phone)

    customer = store.find_customer_by_phone(business_id, phone)
    if customer is not None:
        return customer, False

    try:
        customer = store.insert_customer(business_id, phone)
    except UniqueConstraintViolation:
        logger.warning(
            "Concurrent insert for business=%s phone=%s, retrying lookup",
            business_id,
            phone,
        )
        customer = store.find_customer_by_phone(business_id, phone)
        if customer is None:
            logger.error("Could not resolve business=%s phone=%s", business_id, phone)
            raise ResolutionConflict(business_id=str(business_id), phone=phone)
        return customer, False

    logger.info("Customer %s created for business=%s", customer.pk, business_id)
    customer_created.send(sender=Customer, customer=customer)
    return customer, True


def resolve(business_id, raw_phone: str, store=None):
    """Return the customer id for a phone, creating the customer if absent."""
    customer, _ = resolve_customer(business_id, raw_phone, store=store)
    return customer.pk
