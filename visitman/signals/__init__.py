"""
Visitman signals - public event API.

Emitted signals:
- customer_created: Emitted by services.resolver when a new phone is seen
- checkin_recorded: Emitted by services.recorder after each visit
- reward_unlocked: Emitted by LedgerService.check_in when a tier threshold is reached
- reward_claimed: Emitted by services.redemption.claim_reward()
"""

from django.dispatch import Signal

customer_created = Signal()  # sender=Customer, customer=Customer
checkin_recorded = Signal()  # sender=CheckIn, checkin=CheckIn
reward_unlocked = Signal()  # sender=Customer, customer=Customer, tier=RewardTier, visits=int
reward_claimed = Signal()  # sender=RewardClaim, claim=RewardClaim
