"""Django ORM event store.

Translates database errors into ledger errors:
    Unknown business on customer insert -> VisitmanError BUSINESS_NOT_FOUND
    IntegrityError on customer insert   -> UniqueConstraintViolation
    Missing customer on check-in insert -> ForeignKeyViolation
    OperationalError / InterfaceError   -> StoreUnavailable
"""

import logging
from contextlib import contextmanager

from django.core.exceptions import ValidationError
from django.db import IntegrityError, InterfaceError, OperationalError, transaction
from django.utils.module_loading import import_string

from visitman.exceptions import (
    ForeignKeyViolation,
    StoreUnavailable,
    UniqueConstraintViolation,
    VisitmanError,
)
from visitman.models import Business, CheckIn, Customer

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str, **context):
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.error("Event store unavailable during %s: %s", operation, exc)
        raise StoreUnavailable(
            operation=operation,
            **{key: str(value) for key, value in context.items()},
        ) from exc


class DjangoEventStore:
    """EventStore backed by the default Django database."""

    def find_customer_by_phone(self, business_id, phone: str) -> Customer | None:
        with store_errors("find_customer_by_phone", business_id=business_id, phone=phone):
            try:
                return Customer.objects.filter(business_id=business_id, phone=phone).first()
            except ValidationError:
                return None

    def insert_customer(self, business_id, phone: str) -> Customer:
        with store_errors("insert_customer", business_id=business_id, phone=phone):
            try:
                business_exists = Business.objects.filter(pk=business_id).exists()
            except ValidationError:
                business_exists = False
            if not business_exists:
                raise VisitmanError("BUSINESS_NOT_FOUND", business_id=str(business_id))

            try:
                # Savepoint: a unique violation must not poison an outer transaction
                with transaction.atomic():
                    return Customer.objects.create(business_id=business_id, phone=phone)
            except IntegrityError as exc:
                raise UniqueConstraintViolation(
                    business_id=str(business_id),
                    phone=phone,
                ) from exc

    def insert_checkin(self, customer_id, staff_user_id: str = "") -> CheckIn:
        with store_errors("insert_checkin", customer_id=customer_id):
            try:
                with transaction.atomic():
                    customer = Customer.objects.get(pk=customer_id)
                    return CheckIn.objects.create(
                        customer=customer,
                        staff_user_id=staff_user_id or "",
                    )
            except (Customer.DoesNotExist, ValidationError, IntegrityError) as exc:
                raise ForeignKeyViolation(customer_id=str(customer_id)) from exc

    def list_checkins_by_customer(self, customer_id) -> list[CheckIn]:
        with store_errors("list_checkins_by_customer", customer_id=customer_id):
            return list(
                CheckIn.objects.filter(customer_id=customer_id).order_by("checkin_time", "id")
            )

    def list_customers(self, business_id) -> list[Customer]:
        with store_errors("list_customers", business_id=business_id):
            return list(Customer.objects.filter(business_id=business_id))

    def list_checkins_by_business(self, business_id) -> list[CheckIn]:
        with store_errors("list_checkins_by_business", business_id=business_id):
            return list(
                CheckIn.objects.filter(customer__business_id=business_id).order_by(
                    "checkin_time", "id"
                )
            )


def get_store():
    """Instantiate the configured STORE_BACKEND."""
    from visitman.conf import visitman_settings

    backend_class = import_string(visitman_settings.STORE_BACKEND)
    return backend_class()
