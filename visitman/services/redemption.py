"""Reward redemption - hand out unlocked tiers, once each."""

import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from visitman.exceptions import UnknownCustomer, VisitmanError
from visitman.models import Customer, RewardClaim
from visitman.services.rewards import RewardPolicy, RewardTier, policy_for
from visitman.signals import reward_claimed
from visitman.store import store_errors

logger = logging.getLogger(__name__)


def _get_customer(customer_id) -> Customer:
    with store_errors("get_customer", customer_id=customer_id):
        try:
            return Customer.objects.select_related("business").get(pk=customer_id)
        except (Customer.DoesNotExist, ValidationError):
            raise UnknownCustomer(customer_id=str(customer_id))


def claims(customer_id) -> list[RewardClaim]:
    """Claims for a customer, most recent first."""
    with store_errors("list_claims", customer_id=customer_id):
        return list(RewardClaim.objects.filter(customer_id=customer_id))


def pending_rewards(customer_id, policy: RewardPolicy | None = None) -> list[RewardTier]:
    """Unlocked tiers that have not been claimed yet, ascending."""
    customer = _get_customer(customer_id)
    policy = policy or policy_for(customer.business)

    with store_errors("pending_rewards", customer_id=customer.pk):
        visits = customer.checkins.count()
        claimed = set(
            RewardClaim.objects.filter(customer=customer).values_list("visits_required", flat=True)
        )
    return [tier for tier in policy.unlocked_tiers(visits) if tier.threshold_visits not in claimed]


def claim_reward(
    customer_id,
    threshold_visits: int,
    staff_user_id: str = "",
    policy: RewardPolicy | None = None,
) -> RewardClaim:
    """
    Mark an unlocked tier as given to the customer.

    Raises:
        UnknownCustomer: Customer does not exist
        VisitmanError: REWARD_NOT_UNLOCKED if the tier is unknown or still locked
        VisitmanError: REWARD_ALREADY_CLAIMED if already given
        StoreUnavailable: Store failure
    """
    customer = _get_customer(customer_id)
    policy = policy or policy_for(customer.business)

    with store_errors("claim_reward", customer_id=customer.pk, threshold_visits=threshold_visits):
        visits = customer.checkins.count()
        tier = next(
            (t for t in policy.unlocked_tiers(visits) if t.threshold_visits == threshold_visits),
            None,
        )
        if tier is None:
            raise VisitmanError(
                "REWARD_NOT_UNLOCKED",
                customer_id=str(customer.pk),
                threshold_visits=threshold_visits,
                visits=visits,
            )

        try:
            with transaction.atomic():
                claim = RewardClaim.objects.create(
                    customer=customer,
                    visits_required=tier.threshold_visits,
                    reward_description=tier.description,
                    staff_user_id=staff_user_id or "",
                )
        except IntegrityError as exc:
            raise VisitmanError(
                "REWARD_ALREADY_CLAIMED",
                customer_id=str(customer.pk),
                threshold_visits=threshold_visits,
            ) from exc

    logger.info(
        "Reward '%s' claimed by customer %s (staff=%s)",
        tier.description,
        customer.pk,
        staff_user_id or "-",
    )
    reward_claimed.send(sender=RewardClaim, claim=claim)
    return claim
