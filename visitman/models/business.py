"""Business model (tenant)."""

import uuid

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Business(models.Model):
    """
    Owning organization (salon) for customers and staff.

    reward_rule optionally overrides the process-wide REWARD_TIERS setting
    for this business. Same shape: a list of
    {"threshold_visits", "description", "kind", "value"} dicts.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("name"), max_length=200)
    email = models.EmailField(_("email"))
    phone = models.CharField(_("phone"), max_length=20, blank=True)
    reward_rule = models.JSONField(
        _("reward rule"),
        null=True,
        blank=True,
        help_text=_("Reward tiers for this business. Empty uses the global default."),
    )
    created_at = models.DateTimeField(_("created at"), default=timezone.now)

    class Meta:
        verbose_name = _("business")
        verbose_name_plural = _("businesses")
        ordering = ["name"]

    def __str__(self):
        return self.name
