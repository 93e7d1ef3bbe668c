"""Visitman models."""

from visitman.models.business import Business
from visitman.models.customer import Customer
from visitman.models.checkin import CheckIn
from visitman.models.reward_claim import RewardClaim

__all__ = [
    "Business",
    "Customer",
    # Append-only visit events
    "CheckIn",
    "RewardClaim",
]
