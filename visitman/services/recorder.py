"""Visit recorder - append check-in events."""

import logging

from visitman.exceptions import ForeignKeyViolation, UnknownCustomer
from visitman.models import CheckIn
from visitman.signals import checkin_recorded

logger = logging.getLogger(__name__)


def record_visit(customer_id, staff_user_id: str = "", store=None) -> CheckIn:
    """
    Append one check-in for a customer at the current time.

    No deduplication: every call appends a distinct event. Callers that
    time out should re-resolve the customer before retrying.

    Raises:
        UnknownCustomer: customer_id does not exist
        StoreUnavailable: Store failure
    """
    if store is None:
        from visitman.store import get_store

        store = get_store()

    try:
        checkin = store.insert_checkin(customer_id, staff_user_id)
    except ForeignKeyViolation as exc:
        logger.error("Check-in rejected: unknown customer %s", customer_id)
        raise UnknownCustomer(customer_id=str(customer_id)) from exc

    logger.info(
        "Check-in %s recorded for customer %s (staff=%s)",
        checkin.pk,
        customer_id,
        staff_user_id or "-",
    )
    checkin_recorded.send(sender=CheckIn, checkin=checkin)
    return checkin
