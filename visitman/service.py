"""
Visitman public API.

CORE (presentation contract):
    LedgerService.check_in(business_id, phone, staff_user_id)  - Log a visit
    LedgerService.list_customer_aggregates(business_id)        - Customers + derived state

CONVENIENCE (dashboard helpers):
    LedgerService.customer_aggregate(customer_id)
    LedgerService.summary(business_id)
    LedgerService.most_loyal(business_id)
    LedgerService.recent(business_id)
    LedgerService.search(business_id, query)
"""

import logging
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError
from django.db import transaction

from visitman.conf import visitman_settings
from visitman.exceptions import UnknownCustomer, VisitmanError
from visitman.models import Business, Customer
from visitman.services import analytics
from visitman.services.aggregation import (
    CustomerAggregate,
    aggregate,
    aggregate_all,
    group_by_customer,
)
from visitman.services.recorder import record_visit
from visitman.services.resolver import resolve_customer
from visitman.services.rewards import RewardTier, policy_for
from visitman.signals import reward_unlocked
from visitman.store import get_store, store_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInResult:
    """Outcome of a check-in. Unpacks as (customer, aggregate)."""

    customer: Customer
    aggregate: CustomerAggregate
    created: bool = False
    rewards_earned: tuple[RewardTier, ...] = field(default_factory=tuple)

    def __iter__(self):
        yield self.customer
        yield self.aggregate


class LedgerService:
    """
    Visitman public API.

    Uses @classmethod for extensibility. Stateless between calls: every
    read recomputes aggregates from the event store.
    """

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def check_in(cls, business_id, phone: str, staff_user_id: str = "") -> CheckInResult:
        """
        Record a visit for the customer with this phone, creating the
        customer on first visit.

        Args:
            business_id: Owning business
            phone: Raw phone input (any punctuation)
            staff_user_id: Acting staff identity (optional)

        Returns:
            CheckInResult with the customer, fresh aggregate, whether the
            customer was created, and tiers unlocked by this visit

        Raises:
            VisitmanError: BUSINESS_NOT_FOUND
            InvalidPhoneFormat: Phone is not 10 digits
            ResolutionConflict: Concurrent insert could not be resolved
            UnknownCustomer: Customer vanished between resolve and record
            StoreUnavailable: Store failure
        """
        business = cls._get_business(business_id)
        policy = policy_for(business)
        store = get_store()

        with transaction.atomic():
            customer, created = resolve_customer(business.pk, phone, store=store)
            record_visit(customer.pk, staff_user_id, store=store)

        agg = aggregate(customer, store.list_checkins_by_customer(customer.pk), policy)
        earned = tuple(policy.tiers_reached(agg.visits))

        for tier in earned:
            logger.info(
                "Customer %s unlocked '%s' at %d visits",
                customer.pk,
                tier.description,
                agg.visits,
            )
            reward_unlocked.send(sender=Customer, customer=customer, tier=tier, visits=agg.visits)

        return CheckInResult(customer=customer, aggregate=agg, created=created, rewards_earned=earned)

    @classmethod
    def list_customer_aggregates(cls, business_id) -> list[tuple[Customer, CustomerAggregate]]:
        """
        All customers of a business with their derived state.

        Two store reads (customers, check-ins) regardless of customer count.
        """
        business = cls._get_business(business_id)
        policy = policy_for(business)
        store = get_store()

        customers = store.list_customers(business.pk)
        events_by_customer = group_by_customer(store.list_checkins_by_business(business.pk))
        aggregates = aggregate_all(customers, events_by_customer, policy)
        return list(zip(customers, aggregates))

    # ======================================================================
    # CONVENIENCE API
    # ======================================================================

    @classmethod
    def customer_aggregate(cls, customer_id) -> CustomerAggregate:
        """Derived state for a single customer."""
        with store_errors("get_customer", customer_id=customer_id):
            try:
                customer = Customer.objects.select_related("business").get(pk=customer_id)
            except (Customer.DoesNotExist, ValidationError):
                raise UnknownCustomer(customer_id=str(customer_id))

        store = get_store()
        return aggregate(
            customer,
            store.list_checkins_by_customer(customer.pk),
            policy_for(customer.business),
        )

    @classmethod
    def summary(cls, business_id) -> analytics.LedgerSummary:
        """Total visits, unique customers, customers with a reward."""
        return analytics.summarize(cls.list_customer_aggregates(business_id))

    @classmethod
    def most_loyal(cls, business_id, limit: int | None = None):
        """Customers with the highest visit counts."""
        if limit is None:
            limit = visitman_settings.LEADERBOARD_SIZE
        return analytics.most_loyal(cls.list_customer_aggregates(business_id), limit)

    @classmethod
    def recent(cls, business_id, limit: int | None = None):
        """Customers ordered by most recent visit."""
        if limit is None:
            limit = visitman_settings.RECENT_CHECKINS_SIZE
        return analytics.recent(cls.list_customer_aggregates(business_id), limit)

    @classmethod
    def search(cls, business_id, query: str):
        """Customers whose phone contains the query digits."""
        return analytics.search(cls.list_customer_aggregates(business_id), query)

    # ======================================================================
    # Internal
    # ======================================================================

    @classmethod
    def _get_business(cls, business_id) -> Business:
        """Internal: fetch business or raise. Override for caching, etc."""
        with store_errors("get_business", business_id=business_id):
            try:
                return Business.objects.get(pk=business_id)
            except (Business.DoesNotExist, ValidationError):
                raise VisitmanError("BUSINESS_NOT_FOUND", business_id=str(business_id))
