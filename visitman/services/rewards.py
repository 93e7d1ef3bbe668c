"""Reward policy - visit count to reward tiers.

Pure functions over an externally configured, ascending list of tiers.
Tiers unlock in order and are never revoked, since visit counts only grow.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Iterable

from django.db import models
from django.utils.translation import gettext_lazy as _

from visitman.exceptions import VisitmanError

if TYPE_CHECKING:
    from visitman.models import Business


class RewardKind(models.TextChoices):
    DISCOUNT = "discount", _("Discount")
    FREE_ITEM = "free_item", _("Free item")


@dataclass(frozen=True)
class RewardTier:
    """A visit threshold granting a benefit."""

    threshold_visits: int
    description: str
    kind: str = RewardKind.DISCOUNT
    value: str = ""

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _check_visits(visits: int) -> None:
    if visits < 0:
        raise ValueError(f"visits must be >= 0, got {visits}")


def parse_tiers(config: Iterable[dict[str, Any]]) -> list[RewardTier]:
    """
    Build RewardTier objects from plain dicts (settings or Business.reward_rule).

    Raises:
        VisitmanError: INVALID_REWARD_TIERS on any malformed entry
    """
    tiers = []
    for index, entry in enumerate(config):
        if not isinstance(entry, dict):
            raise VisitmanError("INVALID_REWARD_TIERS", index=index, reason="not a mapping")

        threshold = entry.get("threshold_visits")
        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise VisitmanError(
                "INVALID_REWARD_TIERS", index=index, reason="threshold_visits must be an integer"
            )

        description = entry.get("description") or ""
        if not description:
            raise VisitmanError("INVALID_REWARD_TIERS", index=index, reason="missing description")

        kind = str(entry.get("kind", RewardKind.DISCOUNT)).replace("-", "_")
        if kind not in RewardKind.values:
            raise VisitmanError("INVALID_REWARD_TIERS", index=index, reason=f"unknown kind {kind!r}")

        tiers.append(
            RewardTier(
                threshold_visits=threshold,
                description=description,
                kind=kind,
                value=str(entry.get("value", "")),
            )
        )
    return tiers


class RewardPolicy:
    """
    Ordered reward tiers and the derived queries over a visit count.

    Thresholds must be positive and distinct. Tiers are kept ascending
    by threshold regardless of input order.
    """

    def __init__(self, tiers: Iterable[RewardTier]):
        ordered = sorted(tiers, key=lambda tier: tier.threshold_visits)
        thresholds = [tier.threshold_visits for tier in ordered]
        if any(threshold <= 0 for threshold in thresholds):
            raise VisitmanError("INVALID_REWARD_TIERS", reason="thresholds must be positive")
        if len(set(thresholds)) != len(thresholds):
            raise VisitmanError("INVALID_REWARD_TIERS", reason="thresholds must be distinct")
        self.tiers: tuple[RewardTier, ...] = tuple(ordered)

    def __repr__(self):
        return f"RewardPolicy({[tier.threshold_visits for tier in self.tiers]})"

    @classmethod
    def from_config(cls, config: Iterable[dict[str, Any]]) -> RewardPolicy:
        return cls(parse_tiers(config))

    def unlocked_tiers(self, visits: int) -> list[RewardTier]:
        """Every tier with threshold <= visits, ascending."""
        _check_visits(visits)
        return [tier for tier in self.tiers if tier.threshold_visits <= visits]

    def next_tier(self, visits: int) -> RewardTier | None:
        """Lowest tier still locked, or None once all are unlocked."""
        _check_visits(visits)
        for tier in self.tiers:
            if tier.threshold_visits > visits:
                return tier
        return None

    def progress_fraction(self, visits: int) -> float:
        """
        Linear progress from the previous threshold to the next one.

        With tiers at 5 and 10: 0 -> 0.0, 3 -> 0.6, 5 -> 0.0 (reset into
        the second tier), 10 and beyond -> 1.0.
        """
        upcoming = self.next_tier(visits)
        if upcoming is None:
            return 1.0

        previous = 0
        for tier in self.tiers:
            if tier.threshold_visits <= visits:
                previous = tier.threshold_visits

        return (visits - previous) / (upcoming.threshold_visits - previous)

    def tiers_reached(self, visits: int) -> list[RewardTier]:
        """Tiers whose threshold is exactly this visit count (just unlocked)."""
        _check_visits(visits)
        return [tier for tier in self.tiers if tier.threshold_visits == visits]


def default_policy() -> RewardPolicy:
    """Policy from the REWARD_TIERS setting."""
    from visitman.conf import visitman_settings

    return RewardPolicy.from_config(visitman_settings.REWARD_TIERS)


def policy_for(business: Business | None) -> RewardPolicy:
    """Business-specific policy when reward_rule is set, else the default."""
    if business is not None and business.reward_rule:
        return RewardPolicy.from_config(business.reward_rule)
    return default_policy()
