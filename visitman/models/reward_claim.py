"""RewardClaim model - unlocked rewards handed to the customer."""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class RewardClaim(models.Model):
    """
    A reward tier given to a customer.

    Each tier (identified by its visit threshold) can be claimed once per
    customer. The description is copied at claim time so later changes to
    the tier configuration do not rewrite history.
    """

    customer = models.ForeignKey(
        "visitman.Customer",
        on_delete=models.PROTECT,
        related_name="reward_claims",
        verbose_name=_("customer"),
    )
    visits_required = models.PositiveIntegerField(_("visits required"))
    reward_description = models.CharField(_("reward"), max_length=200)
    claimed_at = models.DateTimeField(_("claimed at"), default=timezone.now)
    staff_user_id = models.CharField(_("staff user"), max_length=255, blank=True)

    class Meta:
        db_table = "visitman_reward"
        verbose_name = _("reward claim")
        verbose_name_plural = _("reward claims")
        ordering = ["-claimed_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["customer", "visits_required"],
                name="visitman_unique_claim_per_tier",
            ),
        ]

    def __str__(self):
        return f"{self.customer_id}: {self.reward_description}"
