"""Dashboard helpers over (Customer, CustomerAggregate) pairs.

Pure functions. Feed them the output of
LedgerService.list_customer_aggregates().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Sequence

from visitman.utils import phone_digits

if TYPE_CHECKING:
    from visitman.models import Customer
    from visitman.services.aggregation import CustomerAggregate

    Pair = tuple[Customer, CustomerAggregate]


@dataclass(frozen=True)
class LedgerSummary:
    """Business-wide totals."""

    total_visits: int
    unique_customers: int
    customers_with_rewards: int


def summarize(pairs: Iterable[Pair]) -> LedgerSummary:
    total_visits = 0
    unique_customers = 0
    with_rewards = 0
    for _, agg in pairs:
        unique_customers += 1
        total_visits += agg.visits
        if agg.reward_earned:
            with_rewards += 1
    return LedgerSummary(
        total_visits=total_visits,
        unique_customers=unique_customers,
        customers_with_rewards=with_rewards,
    )


def most_loyal(pairs: Sequence[Pair], limit: int = 5) -> list[Pair]:
    """Highest visit counts first. Ties keep input order."""
    return sorted(pairs, key=lambda pair: pair[1].visits, reverse=True)[:limit]


def recent(pairs: Sequence[Pair], limit: int = 5) -> list[Pair]:
    """Most recent last_visit first."""
    return sorted(pairs, key=lambda pair: pair[1].last_visit, reverse=True)[:limit]


def search(pairs: Iterable[Pair], query: str) -> list[Pair]:
    """Match customers whose phone digits contain the query digits."""
    digits = phone_digits(query)
    if not digits:
        return list(pairs)
    return [pair for pair in pairs if digits in phone_digits(pair[0].phone)]
