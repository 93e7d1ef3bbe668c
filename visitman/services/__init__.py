"""Visitman services.

- resolver: phone -> customer identity
- recorder: append check-ins
- aggregation: derive visits / last visit / unlocked tiers
- rewards: reward tier policy
- redemption: claim unlocked rewards
- analytics: dashboard totals and rankings
"""

from visitman.services import aggregation
from visitman.services import analytics
from visitman.services import recorder
from visitman.services import redemption
from visitman.services import resolver
from visitman.services import rewards

__all__ = ["aggregation", "analytics", "recorder", "redemption", "resolver", "rewards"]
