"""Aggregation engine - derive customer state from check-in history.

Nothing here touches the database. Callers fetch customers and events
(ideally in two batched reads) and pass them in.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

from visitman.services.rewards import RewardPolicy, RewardTier, default_policy

if TYPE_CHECKING:
    from visitman.models import CheckIn, Customer


@dataclass(frozen=True)
class CustomerAggregate:
    """Derived, non-persisted summary of a customer's visits."""

    customer_id: object
    visits: int
    last_visit: datetime
    reward_tiers_unlocked: tuple[RewardTier, ...] = field(default_factory=tuple)
    next_tier: RewardTier | None = None
    progress: float = 0.0

    @property
    def reward_earned(self) -> bool:
        return bool(self.reward_tiers_unlocked)


def aggregate(
    customer: Customer,
    events: Iterable[CheckIn],
    policy: RewardPolicy | None = None,
) -> CustomerAggregate:
    """
    Summarize one customer's check-ins.

    last_visit is the latest checkin_time, or customer.created_at when
    there are no events. Equal timestamps need no tie-break since only
    the time is exposed.
    """
    policy = policy or default_policy()

    visits = 0
    last_visit = None
    for event in events:
        visits += 1
        if last_visit is None or event.checkin_time > last_visit:
            last_visit = event.checkin_time

    return CustomerAggregate(
        customer_id=customer.pk,
        visits=visits,
        last_visit=last_visit if last_visit is not None else customer.created_at,
        reward_tiers_unlocked=tuple(policy.unlocked_tiers(visits)),
        next_tier=policy.next_tier(visits),
        progress=policy.progress_fraction(visits),
    )


def group_by_customer(events: Iterable[CheckIn]) -> dict[object, list[CheckIn]]:
    """Bucket a flat event list by customer_id, keeping event order."""
    grouped: dict[object, list[CheckIn]] = defaultdict(list)
    for event in events:
        grouped[event.customer_id].append(event)
    return dict(grouped)


def aggregate_all(
    customers: Sequence[Customer],
    events_by_customer: Mapping[object, Iterable[CheckIn]],
    policy: RewardPolicy | None = None,
) -> list[CustomerAggregate]:
    """One aggregate per customer, in input order."""
    policy = policy or default_policy()
    return [
        aggregate(customer, events_by_customer.get(customer.pk, ()), policy)
        for customer in customers
    ]
