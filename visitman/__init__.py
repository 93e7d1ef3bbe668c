"""
Django Visitman - Salon loyalty visit ledger.

Usage:
    from visitman import LedgerService, VisitmanError

    result = LedgerService.check_in(business.id, "555-123-4567", staff_user_id="u-1")
    result.aggregate.visits
    result.rewards_earned

    for customer, aggregate in LedgerService.list_customer_aggregates(business.id):
        ...
"""


def __getattr__(name):
    if name == "LedgerService":
        from visitman.service import LedgerService

        return LedgerService
    if name == "VisitmanError":
        from visitman.exceptions import VisitmanError

        return VisitmanError
    if name == "RewardPolicy":
        from visitman.services.rewards import RewardPolicy

        return RewardPolicy
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["LedgerService", "VisitmanError", "RewardPolicy"]
__version__ = "0.1.0"
