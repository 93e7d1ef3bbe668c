"""
Visitman configuration.

Usage in settings.py:
    VISITMAN = {
        "REWARD_TIERS": [
            {"threshold_visits": 5, "description": "10% Off Next Service",
             "kind": "discount", "value": "10%"},
            {"threshold_visits": 10, "description": "Free Basic Service",
             "kind": "free_item", "value": "Basic Cut"},
        ],
        "LEADERBOARD_SIZE": 5,
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


def _default_reward_tiers() -> list[dict[str, Any]]:
    return [
        {
            "threshold_visits": 5,
            "description": "10% Off Next Service",
            "kind": "discount",
            "value": "10%",
        },
        {
            "threshold_visits": 10,
            "description": "Free Basic Service",
            "kind": "free_item",
            "value": "Basic Cut",
        },
    ]


@dataclass
class VisitmanSettings:
    """Visitman configuration settings."""

    # Process-wide reward tiers (a Business.reward_rule overrides these)
    REWARD_TIERS: list[dict[str, Any]] = field(default_factory=_default_reward_tiers)

    # Event store implementation (dotted path)
    STORE_BACKEND: str = "visitman.store.DjangoEventStore"

    # Dashboard sizes
    LEADERBOARD_SIZE: int = 5
    RECENT_CHECKINS_SIZE: int = 5


def get_visitman_settings() -> VisitmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "VISITMAN", {})
    return VisitmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_visitman_settings(), name)


visitman_settings = _LazySettings()
