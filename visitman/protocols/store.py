"""Event store protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from visitman.models import CheckIn, Customer


@runtime_checkable
class EventStore(Protocol):
    """
    Durable storage for customers and their check-in events.

    Implementations raise:
    - VisitmanError BUSINESS_NOT_FOUND from insert_customer on an unknown business
    - UniqueConstraintViolation from insert_customer on a duplicate phone
    - ForeignKeyViolation from insert_checkin on an unknown customer
    - StoreUnavailable on transport/infrastructure failures
    """

    def find_customer_by_phone(self, business_id: UUID | str, phone: str) -> Customer | None:
        """Return the customer with this canonical phone, or None."""
        ...

    def insert_customer(self, business_id: UUID | str, phone: str) -> Customer:
        """Create a customer. Phone is already canonical."""
        ...

    def insert_checkin(self, customer_id: UUID | str, staff_user_id: str = "") -> CheckIn:
        """Append one check-in event."""
        ...

    def list_checkins_by_customer(self, customer_id: UUID | str) -> list[CheckIn]:
        """Check-ins for one customer, oldest first."""
        ...

    def list_customers(self, business_id: UUID | str) -> list[Customer]:
        """All customers of a business."""
        ...

    def list_checkins_by_business(self, business_id: UUID | str) -> list[CheckIn]:
        """All check-ins of a business in one read, oldest first."""
        ...
